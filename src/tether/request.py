"""Completion request snapshot and its builder.

A CompletionRequest is built fresh on every driver iteration from the static
AgentConfig, the (policy-selected) transcript, the pending message and the
tool catalog. It holds only immutable values, so a client can never change
the conversation by mutating a request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tether.models.config import AgentConfig
    from tether.models.messages import Message
    from tether.models.tools import ToolCatalog, ToolDefinition


@dataclass(frozen=True)
class CompletionRequest:
    """Immutable input to a single completion call."""

    model: str
    preamble: str
    history: tuple[Message, ...]
    pending: Message
    temperature: float
    max_tokens: int
    tools: tuple[ToolDefinition, ...] = ()

    def messages(self) -> tuple[Message, ...]:
        """History followed by the pending message."""
        return (*self.history, self.pending)

    def to_openai(self) -> dict[str, Any]:
        """Render as an OpenAI chat-completions payload."""
        wire: list[dict[str, Any]] = []
        if self.preamble:
            wire.append({"role": "system", "content": self.preamble})
        for message in self.messages():
            wire.extend(message.to_openai())
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": wire,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if self.tools:
            payload["tools"] = [t.to_openai() for t in self.tools]
        return payload


def build_request(
    config: AgentConfig,
    history: tuple[Message, ...],
    pending: Message,
    catalog: ToolCatalog,
) -> CompletionRequest:
    """Assemble a CompletionRequest. Pure: no I/O, no mutation of inputs."""
    return CompletionRequest(
        model=config.model,
        preamble=config.preamble,
        history=tuple(history),
        pending=pending,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        tools=tuple(catalog),
    )
