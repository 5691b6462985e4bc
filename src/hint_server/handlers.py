"""
Hint Server - Command Handlers

One handler per command name. Each handler receives the session context and
the full token list (token 0 is the command name) and returns a StatusCode.
Handlers compose media-directory paths and forward to the playback and
caption engines; engine errors are logged and reported as FAILURE.
"""

import logging
from typing import List

from hint_server.commands import CommandTable
from hint_server.exceptions.engine_exception import CaptionException, PlaybackException
from hint_server.session import SessionContext
from hint_server.status import StatusCode

logger = logging.getLogger(__name__)


def cmd_showhint(ctx: SessionContext, argv: List[str]) -> int:
    """Render argv[1] over the hint background and put it on screen."""
    if len(argv) < 2:
        logger.warning("Usage: showhint HINT!")
        return StatusCode.FAILURE

    hint = argv[1]
    output_path = ctx.next_hint_output_path()

    try:
        ctx.captioner.add_caption(ctx.hint_background_path(), output_path, hint)
        ctx.player.show(str(output_path))
    except CaptionException as e:
        logger.error(f"Could not render hint: {e.message}")
        return StatusCode.FAILURE
    except PlaybackException as e:
        logger.error(f"Could not show hint: {e.message}")
        return StatusCode.FAILURE

    logger.info(f"Showing hint {hint!r}")
    return StatusCode.SUCCESS


def cmd_showbg(ctx: SessionContext, argv: List[str]) -> int:
    """Put the configured background image on screen."""
    try:
        ctx.player.show(str(ctx.background_path()))
    except PlaybackException as e:
        logger.error(f"Could not show background: {e.message}")
        return StatusCode.FAILURE
    return StatusCode.SUCCESS


def cmd_playmedia(ctx: SessionContext, argv: List[str]) -> int:
    """Play argv[1], relative to the media directory."""
    if len(argv) < 2:
        logger.warning("Usage: playmedia MEDIA!")
        return StatusCode.FAILURE

    try:
        ctx.player.show(str(ctx.media_path(argv[1])))
    except PlaybackException as e:
        logger.error(f"Could not play media: {e.message}")
        return StatusCode.FAILURE
    return StatusCode.SUCCESS


def cmd_exit(ctx: SessionContext, argv: List[str]) -> int:
    logger.info("Bye!")
    ctx.request_shutdown(0)
    return StatusCode.SUCCESS


def build_command_table() -> CommandTable:
    """Build the table of commands understood by the server."""
    return CommandTable({
        'showhint': cmd_showhint,
        'showbg': cmd_showbg,
        'playmedia': cmd_playmedia,
        'exit': cmd_exit,
    })
