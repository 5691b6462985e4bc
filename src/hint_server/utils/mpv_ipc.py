"""
MPV IPC Client for showing images and playing media on the display.

This module runs MPV as an idle, fullscreen subprocess and drives it through
its JSON IPC Unix socket. Every file the hint server displays (background,
rendered hints and media) is handed to the same MPV instance.
"""

import json
import logging
import os
import socket
import subprocess
import time
from typing import Any, List, Optional

from hint_server.constants import MPV_SOCKET_PATH
from hint_server.exceptions.engine_exception import PlaybackException

logger = logging.getLogger(__name__)


class MpvIpcClient:
    """
    Client for controlling MPV via JSON IPC protocol.

    Manages an MPV process with IPC enabled. Commands that MPV rejects or
    that cannot be delivered raise PlaybackException.
    """

    def __init__(self, socket_path: str = MPV_SOCKET_PATH, executable: str = 'mpv'):
        self.socket_path = socket_path
        self.executable = executable
        self.process: Optional[subprocess.Popen] = None
        self.socket: Optional[socket.socket] = None
        self._request_id = 0

    def start_mpv(self) -> bool:
        """
        Start MPV process with IPC socket enabled.

        Returns:
            True if MPV started successfully, False otherwise
        """
        self.stop_mpv()

        args = [
            self.executable,
            '--idle=yes',  # Start in idle mode, waiting for commands
            '--fullscreen',
            '--no-osc',
            '--no-osd-bar',
            '--no-input-default-bindings',
            '--input-conf=/dev/null',
            '--force-window=yes',
            '--no-terminal',
            '--keep-open=yes',  # Keep the last frame on screen
            '--image-display-duration=inf',  # Hints stay until replaced
            f'--input-ipc-server={self.socket_path}',
        ]

        try:
            logger.info(f"Starting MPV with IPC socket at {self.socket_path}")
            self.process = subprocess.Popen(
                args,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL
            )
        except OSError as e:
            logger.error(f"Failed to start MPV: {e}")
            return False

        # Wait up to 5 seconds for the socket to appear
        for _ in range(50):
            if os.path.exists(self.socket_path):
                time.sleep(0.1)  # Give MPV a moment to start listening
                return True
            if self.process.poll() is not None:
                logger.error(f"MPV exited during startup with code {self.process.returncode}")
                return False
            time.sleep(0.1)

        logger.error("MPV socket not created within timeout")
        return False

    def stop_mpv(self):
        """Stop the MPV process and clean up."""
        self._disconnect()

        if self.process:
            try:
                self.process.terminate()
                self.process.wait(timeout=3)
            except subprocess.TimeoutExpired:
                self.process.kill()
                self.process.wait()
            self.process = None

        if os.path.exists(self.socket_path):
            try:
                os.unlink(self.socket_path)
            except OSError:
                pass

    def is_alive(self) -> bool:
        """True while the MPV process we started is still running."""
        return self.process is not None and self.process.poll() is None

    def _connect(self):
        """Establish connection to MPV socket."""
        if self.socket:
            return

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(5.0)
            sock.connect(self.socket_path)
        except OSError as e:
            sock.close()
            raise PlaybackException(f"Failed to connect to MPV socket: {e}", self.socket_path)
        self.socket = sock

    def _disconnect(self):
        if self.socket:
            try:
                self.socket.close()
            except OSError:
                pass
            self.socket = None

    def _send_command(self, command: List[Any]) -> Optional[Any]:
        """
        Send a command to MPV via IPC and wait for its reply.

        Args:
            command: List of command arguments (e.g., ['loadfile', '/path/to/file'])

        Returns:
            The 'data' field of MPV's reply, if any
        """
        self._connect()

        self._request_id += 1
        request = {
            'command': command,
            'request_id': self._request_id
        }

        try:
            msg = json.dumps(request) + '\n'
            self.socket.sendall(msg.encode('utf-8'))

            buffered = b''
            while True:
                chunk = self.socket.recv(4096)
                if not chunk:
                    self._disconnect()
                    raise PlaybackException("MPV closed the IPC connection")
                buffered += chunk

                # Replies are interleaved with event messages, one JSON object per line
                *lines, buffered = buffered.split(b'\n')
                for line in lines:
                    if not line.strip():
                        continue
                    try:
                        resp = json.loads(line)
                    except json.JSONDecodeError:
                        continue
                    if resp.get('request_id') != self._request_id:
                        continue
                    if resp.get('error') != 'success':
                        raise PlaybackException(f"MPV command {command[0]} error: {resp.get('error')}")
                    return resp.get('data')

        except OSError as e:
            # Reset connection so the next command reconnects
            self._disconnect()
            raise PlaybackException(f"Failed to send command to MPV: {e}")

    def load_file(self, filepath: str, mode: str = "replace"):
        """
        Load a media file into MPV.

        Args:
            filepath: Path to the media file
            mode: 'replace' to replace current, 'append' to add to playlist
        """
        self._send_command(['loadfile', filepath, mode])

    def pause(self):
        """Pause playback."""
        self._send_command(['set_property', 'pause', True])

    def play(self):
        """Resume playback."""
        self._send_command(['set_property', 'pause', False])

    def show(self, filepath: str):
        """Replace whatever is on screen with filepath and start playing it."""
        if not os.path.exists(filepath):
            raise PlaybackException("Media file not found", filepath)
        logger.info(f"Showing {filepath}")
        self.pause()
        self.load_file(filepath)
        self.play()

    def quit(self):
        """Ask MPV to quit, then make sure the process is gone."""
        try:
            self._send_command(['quit'])
        except PlaybackException:
            pass
        self.stop_mpv()
