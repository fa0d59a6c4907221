"""Toolkit: tool catalog construction and tool invocation.

Turns an MCP tool listing into LLM-consumable definitions and dispatches
tool calls back to the MCP session.
"""

from tether.toolkit.catalog import build_catalog, tool_definition_from_mcp
from tether.toolkit.invoker import McpToolInvoker, ToolInvoker, ToolSession
from tether.toolkit.models import ToolOutcome

__all__ = [
    "ToolOutcome",
    "ToolInvoker",
    "ToolSession",
    "McpToolInvoker",
    "build_catalog",
    "tool_definition_from_mcp",
]
