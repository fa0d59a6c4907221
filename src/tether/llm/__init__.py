"""Completion backend infrastructure for Tether.

Provides the CompletionClient protocol, the response type, and an
OpenAI-compatible async HTTP client.
"""

from tether.llm.client import OpenAIClient, parse_chat_response
from tether.llm.errors import (
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
)
from tether.llm.protocols import CompletionClient, CompletionResponse

__all__ = [
    "OpenAIClient",
    "parse_chat_response",
    "CompletionClient",
    "CompletionResponse",
    "LLMClientError",
    "LLMConfigError",
    "LLMRateLimitError",
    "LLMAuthError",
    "LLMResponseError",
]
