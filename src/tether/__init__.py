"""Tether: a terminal agent that answers by calling tools on an MCP server.

The conversation driver alternates between a completion backend and remote
tools until the model produces a plain-text answer.
"""

from tether._version import __version__

# Conversation core
from tether.conversation import (
    ConversationDriver,
    DriverState,
    HistoryPolicy,
    KeepAll,
    SlidingWindow,
    ToolStep,
)

# Errors
from tether.exceptions import (
    CompletionError,
    ConfigError,
    ProtocolError,
    TetherError,
    ToolExecutionError,
    ToolLoopExceededError,
    TransportError,
)

# Completion backend
from tether.llm import CompletionClient, CompletionResponse, OpenAIClient

# Data model and configuration
from tether.models import (
    AgentConfig,
    Content,
    Message,
    Role,
    Text,
    ToolCall,
    ToolCatalog,
    ToolDefinition,
    ToolResult,
    Transcript,
)
from tether.request import CompletionRequest, build_request

# Tools
from tether.toolkit import McpToolInvoker, ToolInvoker, ToolOutcome, build_catalog

__all__ = [
    "__version__",
    "ConversationDriver",
    "DriverState",
    "ToolStep",
    "HistoryPolicy",
    "KeepAll",
    "SlidingWindow",
    "TetherError",
    "ConfigError",
    "TransportError",
    "ProtocolError",
    "CompletionError",
    "ToolExecutionError",
    "ToolLoopExceededError",
    "CompletionClient",
    "CompletionResponse",
    "OpenAIClient",
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
    "CompletionRequest",
    "build_request",
    "ToolInvoker",
    "McpToolInvoker",
    "ToolOutcome",
    "build_catalog",
]
