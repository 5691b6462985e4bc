"""
Tests for the MPV IPC client against a fake MPV IPC socket.
"""

import json
import os
import shutil
import socketserver
import tempfile
import threading

import pytest

from hint_server.exceptions.engine_exception import PlaybackException
from hint_server.utils.mpv_ipc import MpvIpcClient


class FakeMpv(socketserver.ThreadingMixIn, socketserver.UnixStreamServer):
    """Speaks just enough of MPV's JSON IPC protocol for the client."""

    daemon_threads = True

    def __init__(self, path: str):
        self.commands = []
        self.failing = set()
        self.hang_up = set()
        super().__init__(path, FakeMpvHandler)


class FakeMpvHandler(socketserver.StreamRequestHandler):

    def handle(self):
        for raw in self.rfile:
            request = json.loads(raw)
            command = request['command']
            self.server.commands.append(command)
            if command[0] in self.server.hang_up:
                # Close the connection without replying
                return
            # MPV interleaves events with replies
            self.wfile.write(b'{"event": "playback-restart"}\n')
            error = 'loading failed' if command[0] in self.server.failing else 'success'
            reply = {'request_id': request['request_id'], 'error': error, 'data': None}
            self.wfile.write(json.dumps(reply).encode() + b'\n')


@pytest.fixture
def socket_dir():
    # Unix socket paths are length limited, keep this short
    path = tempfile.mkdtemp(prefix='mpv')
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def fake_mpv(socket_dir):
    server = FakeMpv(os.path.join(socket_dir, 'sock'))
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture
def client(fake_mpv):
    c = MpvIpcClient(socket_path=fake_mpv.server_address)
    yield c
    c._disconnect()


class TestMpvIpcClient:

    def test_show_pauses_loads_and_plays(self, client, fake_mpv, media_dir):
        path = str(media_dir / 'bg.jpg')
        client.show(path)
        assert fake_mpv.commands == [
            ['set_property', 'pause', True],
            ['loadfile', path, 'replace'],
            ['set_property', 'pause', False],
        ]

    def test_reuses_connection(self, client, fake_mpv):
        client.pause()
        first = client.socket
        client.play()
        assert client.socket is first
        assert len(fake_mpv.commands) == 2

    def test_show_missing_file(self, client, fake_mpv, tmp_path):
        with pytest.raises(PlaybackException) as exc_info:
            client.show(str(tmp_path / 'missing.mp4'))
        assert 'missing.mp4' in exc_info.value.message
        assert fake_mpv.commands == []

    def test_command_error(self, client, fake_mpv, media_dir):
        fake_mpv.failing.add('loadfile')
        with pytest.raises(PlaybackException, match='loading failed'):
            client.show(str(media_dir / 'bg.jpg'))

    def test_closed_connection_is_dropped(self, client, fake_mpv):
        fake_mpv.hang_up.add('set_property')
        with pytest.raises(PlaybackException, match='closed the IPC connection'):
            client.pause()
        assert client.socket is None

        # The next command opens a fresh connection
        fake_mpv.hang_up.clear()
        client.play()
        assert client.socket is not None
        assert fake_mpv.commands[-1] == ['set_property', 'pause', False]

    def test_no_mpv_socket(self, socket_dir):
        c = MpvIpcClient(socket_path=os.path.join(socket_dir, 'nothing-here'))
        with pytest.raises(PlaybackException):
            c.pause()


class TestMpvProcess:

    def test_not_alive_before_start(self, socket_dir):
        assert not MpvIpcClient(socket_path=os.path.join(socket_dir, 'sock')).is_alive()

    def test_start_with_missing_executable(self, socket_dir):
        c = MpvIpcClient(
            socket_path=os.path.join(socket_dir, 'sock'),
            executable=os.path.join(socket_dir, 'no-such-mpv'),
        )
        assert c.start_mpv() is False
        assert not c.is_alive()
