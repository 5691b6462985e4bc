"""
pytest configuration and fixtures.
"""

import socket
from pathlib import Path
from typing import List

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hint_server.exceptions.engine_exception import PlaybackException
from hint_server.session import SessionContext


class FakePlayer:
    """Playback engine double that records what it was asked to show."""

    def __init__(self):
        self.shown: List[str] = []
        self.fail_with = None

    def show(self, filepath: str):
        if self.fail_with is not None:
            raise self.fail_with
        self.shown.append(filepath)

    def is_alive(self) -> bool:
        return True


class FakeCaptioner:
    """Caption engine double that writes the caption text instead of an image."""

    def __init__(self):
        self.calls = []
        self.fail_with = None

    def add_caption(self, source, destination, text):
        if self.fail_with is not None:
            raise self.fail_with
        self.calls.append((Path(source), Path(destination), text))
        Path(destination).write_text(text)
        return str(destination)


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer()


@pytest.fixture
def captioner() -> FakeCaptioner:
    return FakeCaptioner()


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    """Media directory holding the default backgrounds."""
    media = tmp_path / "Media"
    media.mkdir()
    (media / "bg.jpg").write_bytes(b"bg")
    (media / "hbg.jpg").write_bytes(b"hbg")
    return media


@pytest.fixture
def context(media_dir: Path, player: FakePlayer, captioner: FakeCaptioner) -> SessionContext:
    """Session context wired to the fake engines."""
    return SessionContext(media_dir=media_dir, player=player, captioner=captioner)


@pytest.fixture
def playback_error() -> PlaybackException:
    return PlaybackException("MPV command loadfile error: loading failed")


@pytest.fixture
def udp_client():
    """UDP socket for sending commands to a server under test."""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        yield s
