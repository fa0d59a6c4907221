"""Conversation data model: content items, messages and the transcript.

Content is a closed union of three frozen dataclasses (Text, ToolCall,
ToolResult). Messages carry a non-empty tuple of content items tagged with
a Role. The Transcript is the append-only history owned by one conversation.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Union, overload

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Text:
    """Plain natural-language content."""

    text: str


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the completion backend.

    ``arguments`` is the raw JSON string exactly as the backend produced it.
    It is forwarded to the tool invoker untouched.
    """

    id: str
    name: str
    arguments: str

    def to_openai(self) -> dict[str, Any]:
        """Serialize to OpenAI wire format."""
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass(frozen=True)
class ToolResult:
    """Output (or error text) of a tool call, keyed by the call's id."""

    id: str
    text: str


Content = Union[Text, ToolCall, ToolResult]

_ALLOWED: dict[Role, tuple[type, ...]] = {
    Role.USER: (Text, ToolResult),
    Role.ASSISTANT: (Text, ToolCall),
}


@dataclass(frozen=True)
class Message:
    """A single message with one or more content items.

    Frozen. Construction rejects empty content and content variants that
    do not belong to the role (tool calls come from the assistant, tool
    results from the user side).
    """

    role: Role
    content: tuple[Content, ...]

    def __post_init__(self) -> None:
        if not self.content:
            raise ValueError("Message content must not be empty")
        allowed = _ALLOWED[self.role]
        for item in self.content:
            if not isinstance(item, allowed):
                raise ValueError(
                    f"{type(item).__name__} content is not allowed in a "
                    f"{self.role.value} message"
                )

    @classmethod
    def user(cls, text: str) -> Message:
        return cls(Role.USER, (Text(text),))

    @classmethod
    def assistant(cls, text: str) -> Message:
        return cls(Role.ASSISTANT, (Text(text),))

    @classmethod
    def tool_call(cls, call: ToolCall) -> Message:
        return cls(Role.ASSISTANT, (call,))

    @classmethod
    def tool_result(cls, call_id: str, text: str) -> Message:
        return cls(Role.USER, (ToolResult(id=call_id, text=text),))

    def to_openai(self) -> list[dict[str, Any]]:
        """Render as one or more OpenAI chat messages.

        Tool results become ``role="tool"`` messages; text and tool calls
        of an assistant message are merged into one assistant message.
        """
        if self.role is Role.ASSISTANT:
            texts = [c.text for c in self.content if isinstance(c, Text)]
            calls = [c.to_openai() for c in self.content if isinstance(c, ToolCall)]
            out: dict[str, Any] = {
                "role": "assistant",
                "content": "\n".join(texts) if texts else None,
            }
            if calls:
                out["tool_calls"] = calls
            return [out]

        rendered: list[dict[str, Any]] = []
        for item in self.content:
            if isinstance(item, ToolResult):
                rendered.append(
                    {"role": "tool", "tool_call_id": item.id, "content": item.text}
                )
            elif isinstance(item, Text):
                rendered.append({"role": "user", "content": item.text})
            else:
                raise TypeError(f"Unsupported content variant: {type(item).__name__}")
        return rendered


class Transcript:
    """Append-only, ordered history of one conversation.

    The only growing operation is ``append_exchange``, which always adds a
    user-side message followed by the assistant reply. ``truncate`` exists
    solely so the driver can undo the steps of an aborted turn.

    Usage::

        transcript = Transcript()
        transcript.append_exchange(Message.user("Hi"), Message.assistant("Hello!"))
        assert len(transcript) == 2
    """

    def __init__(self, messages: list[Message] | None = None) -> None:
        self._messages: list[Message] = list(messages or [])

    def append_exchange(self, pending: Message, reply: Message) -> None:
        """Append one user-side message and the assistant reply to it."""
        if pending.role is not Role.USER:
            raise ValueError("Exchange must start with a user message")
        if reply.role is not Role.ASSISTANT:
            raise ValueError("Exchange must end with an assistant message")
        self._messages.append(pending)
        self._messages.append(reply)

    def truncate(self, length: int) -> None:
        """Drop every message after the first ``length`` messages."""
        if length < 0 or length > len(self._messages):
            raise ValueError(f"Cannot truncate transcript of {len(self)} to {length}")
        if length < len(self._messages):
            logger.debug("Rolling transcript back from %d to %d", len(self), length)
            del self._messages[length:]

    def snapshot(self) -> tuple[Message, ...]:
        """Return an immutable copy of the current history."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    @overload
    def __getitem__(self, index: int) -> Message: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Message, ...]: ...

    def __getitem__(self, index: int | slice) -> Message | tuple[Message, ...]:
        if isinstance(index, slice):
            return tuple(self._messages[index])
        return self._messages[index]

    def __repr__(self) -> str:
        return f"Transcript(messages={len(self._messages)})"
