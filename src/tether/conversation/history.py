"""History policies: which part of the transcript is sent with a request.

A policy never mutates the transcript. It selects a contiguous suffix of the
snapshot so the completion request stays bounded over long sessions.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from tether.models.messages import Message, Role, ToolResult

logger = logging.getLogger(__name__)


@runtime_checkable
class HistoryPolicy(Protocol):
    """Protocol for history selection strategies."""

    def select(self, history: tuple[Message, ...]) -> tuple[Message, ...]:
        """Return the messages to send, in their original order."""
        ...


class KeepAll:
    """Send the full transcript with every request."""

    def select(self, history: tuple[Message, ...]) -> tuple[Message, ...]:
        return history


def _is_exchange_start(message: Message) -> bool:
    return message.role is Role.USER and not any(
        isinstance(c, ToolResult) for c in message.content
    )


class SlidingWindow:
    """Send the ``max_messages`` most recent messages, aligned to exchanges.

    The window always starts on a plain user message, never on a tool
    result and never on an assistant message, so every tool result that is
    sent is preceded by the tool call it answers. If no such start exists
    inside the window, the window grows back to the start of the last
    exchange; a turn's tool chain is never cut.
    """

    def __init__(self, max_messages: int) -> None:
        if max_messages < 2:
            raise ValueError("max_messages must be at least 2")
        self.max_messages = max_messages

    def select(self, history: tuple[Message, ...]) -> tuple[Message, ...]:
        if len(history) <= self.max_messages:
            return history
        start = len(history) - self.max_messages
        while start < len(history) and not _is_exchange_start(history[start]):
            start += 1
        if start == len(history):
            start = len(history) - self.max_messages
            while start > 0 and not _is_exchange_start(history[start]):
                start -= 1
        logger.debug(
            "History window kept %d of %d messages", len(history) - start, len(history)
        )
        return history[start:]


def policy_for_window(window: int | None) -> HistoryPolicy:
    """Return SlidingWindow(window), or KeepAll when window is None."""
    if window is None:
        return KeepAll()
    return SlidingWindow(window)
