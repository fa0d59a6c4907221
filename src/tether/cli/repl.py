"""Interactive read-eval-print loop around a conversation driver."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from tether.cli.formatting import (
    FAREWELL,
    GREETING,
    format_answer,
    format_error,
    format_separator,
)
from tether.exceptions import TetherError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from rich.console import Console

    from tether.conversation.driver import ConversationDriver

logger = logging.getLogger(__name__)

QUIT_COMMAND = "quit"


def stdin_reader(stream) -> Callable[[], Awaitable[str | None]]:
    """Return an async line reader over ``stream``; None signals EOF.

    Reads happen in a worker thread so the event loop stays free.
    """

    async def read_line() -> str | None:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            return None
        return line.rstrip("\r\n")

    return read_line


async def repl(
    driver: ConversationDriver,
    console: Console,
    read_line: Callable[[], Awaitable[str | None]],
) -> None:
    """Run the interactive loop until ``quit`` or end of input.

    Every other line is passed verbatim to the driver. Turn-level errors are
    reported and the session carries on with the next line.
    """
    console.print(GREETING, highlight=False)
    format_separator(console)

    while True:
        line = await read_line()
        format_separator(console)
        if line is None or line == QUIT_COMMAND:
            console.print(FAREWELL, highlight=False)
            return

        try:
            answer = await driver.run(line)
        except TetherError as exc:
            logger.debug("Turn failed", exc_info=True)
            format_error(str(exc), console)
            format_separator(console)
            continue
        format_answer(answer, console)
