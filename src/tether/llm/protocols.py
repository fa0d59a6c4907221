"""Completion client protocol and response type.

Defines the pluggable interface the conversation driver talks to. The
built-in OpenAIClient implements it; tests use hand-written stubs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from tether.exceptions import ProtocolError

if TYPE_CHECKING:
    from tether.models.messages import Content
    from tether.request import CompletionRequest


@dataclass(frozen=True)
class CompletionResponse:
    """Ordered content items returned by a completion backend.

    Attributes:
        content: One or more Text / ToolCall items, in backend order.
        model: Model that produced the response, when reported.
        usage: Token usage dict, when reported.
    """

    content: tuple[Content, ...]
    model: str | None = None
    usage: dict | None = None

    def __post_init__(self) -> None:
        if not self.content:
            raise ProtocolError("Completion response carries no content")

    @property
    def first(self) -> Content:
        return self.content[0]


@runtime_checkable
class CompletionClient(Protocol):
    """Protocol for pluggable completion backends.

    Any object with an async complete() and aclose() matching this
    signature works.
    """

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Send the request, return the parsed response.

        Raises:
            CompletionError: If the backend call fails.
        """
        ...

    async def aclose(self) -> None:
        """Release underlying resources."""
        ...
