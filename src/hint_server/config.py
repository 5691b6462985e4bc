"""
Hint Server - Startup Configuration

Command line flags:

  -p, --port PORT               UDP port to listen on (default 40000)
  -m, --mediadir DIR            Media directory (default ~/Media/)
  -b, --background FILE         Background image, relative to the media directory
  -h, --hint-background FILE    Hint background image, relative to the media directory
  -e, --encoding NAME           Text encoding of received commands (default: locale)
      --host ADDRESS            Address to bind (default 0.0.0.0)
      --mpv-socket PATH         MPV IPC socket path
  -?, --help                    Show help and exit

-h is taken by --hint-background, so help is only available as -? / --help.
Any problem with the flags, or a missing HOME, raises StartupException.
"""

import argparse
import codecs
import locale
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from hint_server import constants
from hint_server.exceptions.startup_exception import StartupException


@dataclass(frozen=True)
class ServerConfig:
    media_dir: Path
    port: int = constants.DEFAULT_PORT
    host: str = constants.DEFAULT_HOST
    background: str = constants.DEFAULT_BACKGROUND
    hint_background: str = constants.DEFAULT_HINT_BACKGROUND
    encoding: str = 'utf-8'
    mpv_socket: str = constants.MPV_SOCKET_PATH
    show_help: bool = False


class _ArgumentParser(argparse.ArgumentParser):

    def error(self, message):
        raise StartupException(message)


def port_number(value: str) -> int:
    """Parse a port the way %i does: decimal, 0x hex or 0o octal."""
    try:
        port = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Specified port {value!r} is not a valid unsigned integer!")
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"Specified port {port} is out of range!")
    return port


def encoding_name(value: str) -> str:
    try:
        return codecs.lookup(value).name
    except LookupError:
        raise argparse.ArgumentTypeError(f"Unknown encoding {value!r}!")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog='hint-server',
        description='Listen for display commands on a UDP port.',
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument('-?', '--help', dest='show_help', action='store_true', help='Show this help and exit')
    parser.add_argument('-p', '--port', type=port_number, default=constants.DEFAULT_PORT, help='UDP port to listen on')
    parser.add_argument('-m', '--mediadir', help='Media directory (default ~/Media/)')
    parser.add_argument('-b', '--background', default=constants.DEFAULT_BACKGROUND, help='Background image file name')
    parser.add_argument('-h', '--hint-background', default=constants.DEFAULT_HINT_BACKGROUND, help='Hint background image file name')
    parser.add_argument('-e', '--encoding', type=encoding_name, help='Encoding of received commands (default: locale)')
    parser.add_argument('--host', default=constants.DEFAULT_HOST, help='Address to bind')
    parser.add_argument('--mpv-socket', default=constants.MPV_SOCKET_PATH, help='MPV IPC socket path')
    return parser


def default_media_dir(environ: Mapping[str, str]) -> Path:
    """Return ~/Media/, computed from HOME."""
    home = environ.get('HOME')
    if not home:
        raise StartupException("Could not determine home directory!")
    return Path(home) / constants.DEFAULT_MEDIA_SUBDIR


def load_config(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """
    Build the server configuration from command line flags and environment.

    Args:
        argv: Flags, without the program name (default sys.argv[1:])
        environ: Environment mapping (default os.environ)

    Raises:
        StartupException: On an unrecognized flag, a missing or invalid flag
            value, or when HOME is unset
    """
    if environ is None:
        environ = os.environ

    args = build_parser().parse_args(argv)

    # HOME is required even when --mediadir overrides the default
    media_dir = default_media_dir(environ)
    if args.mediadir:
        media_dir = Path(args.mediadir)

    return ServerConfig(
        media_dir=media_dir,
        port=args.port,
        host=args.host,
        background=args.background,
        hint_background=args.hint_background,
        encoding=args.encoding or codecs.lookup(locale.getpreferredencoding(False)).name,
        mpv_socket=args.mpv_socket,
        show_help=args.show_help,
    )


def format_help() -> str:
    return build_parser().format_help()
