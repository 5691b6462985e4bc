"""
Unit tests for startup configuration.
"""

from pathlib import Path

import pytest

from hint_server import constants
from hint_server.config import load_config
from hint_server.exceptions.startup_exception import StartupException

ENV = {'HOME': '/home/station'}


class TestLoadConfig:

    def test_defaults(self):
        config = load_config([], ENV)
        assert config.port == constants.DEFAULT_PORT
        assert config.media_dir == Path('/home/station/Media')
        assert config.background == 'bg.jpg'
        assert config.hint_background == 'hbg.jpg'
        assert config.encoding
        assert not config.show_help

    def test_long_flags(self):
        config = load_config([
            '--port', '5005',
            '--mediadir', '/srv/media/',
            '--background', 'title.png',
            '--hint-background', 'blank.png',
            '--encoding', 'latin-1',
        ], ENV)
        assert config.port == 5005
        assert config.media_dir == Path('/srv/media')
        assert config.background == 'title.png'
        assert config.hint_background == 'blank.png'
        assert config.encoding == 'iso8859-1'

    def test_short_flags(self):
        config = load_config(['-p', '6000', '-m', 'media', '-b', 'a.jpg', '-h', 'b.jpg'], ENV)
        assert config.port == 6000
        assert config.media_dir == Path('media')
        assert config.background == 'a.jpg'
        assert config.hint_background == 'b.jpg'

    def test_hex_port(self):
        assert load_config(['-p', '0x1f90'], ENV).port == 8080

    @pytest.mark.parametrize("flag", ['--help', '-?'])
    def test_help(self, flag):
        assert load_config([flag], ENV).show_help


class TestLoadConfigErrors:

    def test_missing_home(self):
        with pytest.raises(StartupException, match="home directory"):
            load_config([], {})

    def test_missing_home_with_mediadir(self):
        with pytest.raises(StartupException):
            load_config(['--mediadir', '/srv/media'], {})

    @pytest.mark.parametrize("argv", [
        ['--bogus'],
        ['--port'],
        ['--port', 'eighty'],
        ['--port', '-1'],
        ['--port', '70000'],
        ['--mediadir'],
        ['--encoding', 'no-such-codec'],
        ['--med', '/srv/media'],
    ])
    def test_invalid_flags(self, argv):
        with pytest.raises(StartupException):
            load_config(argv, ENV)
