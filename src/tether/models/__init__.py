"""Data models for Tether: messages, transcript, tools and configuration."""

from tether.models.config import AgentConfig
from tether.models.messages import (
    Content,
    Message,
    Role,
    Text,
    ToolCall,
    ToolResult,
    Transcript,
)
from tether.models.tools import ToolCatalog, ToolDefinition

__all__ = [
    "AgentConfig",
    "Content",
    "Message",
    "Role",
    "Text",
    "ToolCall",
    "ToolResult",
    "Transcript",
    "ToolCatalog",
    "ToolDefinition",
]
