"""Tool definition and catalog models.

Frozen dataclasses describing the tools the completion backend may call.
Both are built once at startup and never mutated.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ToolDefinition:
    """A single tool definition for LLM consumption.

    Attributes:
        name: Tool name as exposed by the tool server.
        description: Human-readable description ("" when the server has none).
        parameters: JSON Schema dict describing the tool arguments.
    """

    name: str
    description: str
    parameters: dict[str, Any] = field(default_factory=dict)

    def to_openai(self) -> dict[str, Any]:
        """Convert to OpenAI function-calling format.

        Returns:
            Dict with "type": "function" and nested "function" object.
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


@dataclass(frozen=True)
class ToolCatalog:
    """Ordered, read-only collection of tool definitions with name lookup.

    Duplicate names are rejected at construction.
    """

    tools: tuple[ToolDefinition, ...] = ()
    _by_name: dict[str, ToolDefinition] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        by_name: dict[str, ToolDefinition] = {}
        for tool in self.tools:
            if tool.name in by_name:
                raise ValueError(f"Duplicate tool name in catalog: {tool.name}")
            by_name[tool.name] = tool
        object.__setattr__(self, "_by_name", by_name)

    @classmethod
    def from_definitions(cls, tools: Iterable[ToolDefinition]) -> ToolCatalog:
        return cls(tuple(tools))

    def get(self, name: str) -> ToolDefinition | None:
        """Return the definition for ``name``, or None if unknown."""
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return [t.name for t in self.tools]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self.tools)

    def __len__(self) -> int:
        return len(self.tools)
