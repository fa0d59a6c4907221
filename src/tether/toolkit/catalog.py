"""Build the tool catalog from an MCP ``tools/list`` response."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from tether.exceptions import ProtocolError
from tether.models.tools import ToolCatalog, ToolDefinition

logger = logging.getLogger(__name__)


def tool_definition_from_mcp(tool: Any) -> ToolDefinition:
    """Convert an MCP Tool (``name``, ``description?``, ``inputSchema``)."""
    name = getattr(tool, "name", None)
    if not isinstance(name, str) or not name:
        raise ProtocolError(f"MCP tool without a name: {tool!r}")
    schema = getattr(tool, "inputSchema", None)
    if schema is None:
        schema = {"type": "object", "properties": {}}
    if not isinstance(schema, dict):
        raise ProtocolError(f"MCP tool {name} has a non-object inputSchema")
    return ToolDefinition(
        name=name,
        description=getattr(tool, "description", None) or "",
        parameters=dict(schema),
    )


def build_catalog(tools: Iterable[Any]) -> ToolCatalog:
    """Build a ToolCatalog, keeping the server's order.

    Later duplicates of a tool name are skipped with a warning.
    """
    definitions: list[ToolDefinition] = []
    seen: set[str] = set()
    for tool in tools:
        definition = tool_definition_from_mcp(tool)
        if definition.name in seen:
            logger.warning("Duplicate MCP tool %r ignored", definition.name)
            continue
        seen.add(definition.name)
        definitions.append(definition)
    logger.info("Tool catalog built with %d tool(s)", len(definitions))
    return ToolCatalog.from_definitions(definitions)
