#!/usr/bin/env python3
"""
Hint Server - Service Entry Point

Startup sequence:
1. Parse flags and environment (fatal on any problem)
2. Start MPV and show the background image
3. Listen for commands until 'exit', SIGTERM or SIGINT
4. Stop MPV and exit with the requested code

A dead MPV process is a fatal playback error and stops the server with
exit code 1.
"""

import platform
import sys
from typing import List, Optional

from hint_server import __version__
from hint_server.commands import Interpreter
from hint_server.config import ServerConfig, format_help, load_config
from hint_server.exceptions.startup_exception import StartupException
from hint_server.handlers import build_command_table, cmd_showbg
from hint_server.server import UdpCommandServer
from hint_server.session import SessionContext
from hint_server.utils.captions import Captioner
from hint_server.utils.logging_config import log_banner, setup_service_logging
from hint_server.utils.mpv_ipc import MpvIpcClient
from hint_server.utils.system_utils import ServiceNotifier, install_shutdown_handlers

logger = setup_service_logging('hint-server')


def build_context(config: ServerConfig, player, captioner) -> SessionContext:
    return SessionContext(
        media_dir=config.media_dir,
        player=player,
        captioner=captioner,
        background=config.background,
        hint_background=config.hint_background,
    )


def run(config: ServerConfig) -> int:
    notifier = ServiceNotifier()

    logger.info(f"Media directory: {config.media_dir}")
    logger.info(f"Background: {config.background}, hint background: {config.hint_background}")
    logger.info(f"Command encoding: {config.encoding}")

    player = MpvIpcClient(socket_path=config.mpv_socket)
    if not player.start_mpv():
        logger.error("Could not start the playback engine, terminating!")
        return 1

    ctx = build_context(config, player, Captioner())
    interpreter = Interpreter(build_command_table(), ctx)

    def on_idle():
        notifier.watchdog()
        if not player.is_alive():
            logger.error("Playback engine encountered an error, terminating!")
            ctx.request_shutdown(1)

    try:
        cmd_showbg(ctx, ['showbg'])

        server = UdpCommandServer(
            interpreter,
            host=config.host,
            port=config.port,
            encoding=config.encoding,
            on_idle=on_idle,
        )
        install_shutdown_handlers(server.shutdown, logger)

        port = server.address[1]
        notifier.ready(f"Listening on UDP port {port}")
        logger.info(f"Hint Server ready, listening on UDP port {port}")

        exit_code = server.serve_forever()
    finally:
        notifier.stopping()
        player.quit()

    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    log_banner(logger, f"Hint Server {__version__} starting", f"Python {platform.python_version()}")

    try:
        config = load_config(argv)
    except StartupException as e:
        logger.error(f"Startup failed: {e.message}")
        return 1

    if config.show_help:
        print(format_help())
        return 0

    try:
        return run(config)
    except Exception:
        logger.exception("Terminating due to unexpected exception")
        return 1


if __name__ == '__main__':
    sys.exit(main())
