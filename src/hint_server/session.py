"""
Hint Server - Session Context

Mutable state shared by the command handlers. One SessionContext is created
at startup and passed explicitly to the interpreter and to every handler,
so handlers can be exercised in tests with a fabricated context.
"""

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from hint_server import constants
from hint_server.status import StatusCode


@dataclass
class SessionContext:
    media_dir: Path
    player: Any
    captioner: Any
    background: str = constants.DEFAULT_BACKGROUND
    hint_background: str = constants.DEFAULT_HINT_BACKGROUND
    hint_index: int = 0
    hint_slots: int = constants.HINT_OUTPUT_SLOTS
    last_status: int = StatusCode.NONE
    exit_code: Optional[int] = None
    shutdown: threading.Event = field(default_factory=threading.Event)

    def media_path(self, relative: str) -> Path:
        """Resolve a path relative to the media directory."""
        return Path(self.media_dir) / relative

    def background_path(self) -> Path:
        return self.media_path(self.background)

    def hint_background_path(self) -> Path:
        return self.media_path(self.hint_background)

    def next_hint_output_path(self) -> Path:
        """
        Return the file the next hint should be rendered to, and advance.

        Successive renders cycle through hint_slots files so the image
        currently on screen is not overwritten by the next render.
        """
        path = self.media_path(
            f"{constants.HINT_OUTPUT_PREFIX}{self.hint_index}{constants.HINT_OUTPUT_SUFFIX}"
        )
        self.hint_index = (self.hint_index + 1) % self.hint_slots
        return path

    def request_shutdown(self, exit_code: int = 0) -> None:
        """Ask the server to stop. The first exit code requested wins."""
        if self.exit_code is None:
            self.exit_code = exit_code
        self.shutdown.set()

    @property
    def shutting_down(self) -> bool:
        return self.shutdown.is_set()
