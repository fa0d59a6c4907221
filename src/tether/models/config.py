"""Configuration model for Tether.

AgentConfig holds every static setting the conversation needs: the model
handle, preamble, sampling parameters, tool-loop bound, history window and
the MCP server location. Numeric settings are validated once, here, so the
request builder never has to.
"""

from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from tether._version import __version__
from tether.exceptions import ConfigError
from tether.prompts import LEAD_QUALIFIER_PREAMBLE

DEFAULT_MCP_URL = "http://127.0.0.1:3000/sse"

# env var -> AgentConfig field
_ENV_FIELDS: dict[str, str] = {
    "TETHER_MODEL": "model",
    "TETHER_MCP_URL": "mcp_url",
    "TETHER_TEMPERATURE": "temperature",
    "TETHER_MAX_TOKENS": "max_tokens",
    "TETHER_MAX_TOOL_ROUNDS": "max_tool_rounds",
}


class AgentConfig(BaseModel):
    """Static agent configuration, validated at construction."""

    model_config = {"frozen": True}

    model: str = "gpt-4o"
    preamble: str = LEAD_QUALIFIER_PREAMBLE
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1024, gt=0)
    max_tool_rounds: int = Field(default=16, gt=0)
    history_window: Optional[int] = None  # None = send the full transcript
    mcp_url: str = DEFAULT_MCP_URL
    client_name: str = "tether"
    client_version: str = __version__
    tool_timeout: float = Field(default=60.0, gt=0.0)

    @field_validator("history_window")
    @classmethod
    def _check_history_window(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 2:
            raise ValueError("history_window must be at least 2 messages")
        return v

    @field_validator("model", "mcp_url")
    @classmethod
    def _check_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @classmethod
    def create(cls, **values: Any) -> AgentConfig:
        """Build a config, converting pydantic validation errors to ConfigError."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid agent configuration: {exc}") from exc

    @classmethod
    def from_env(cls, **overrides: Any) -> AgentConfig:
        """Build a config from TETHER_* environment variables.

        Explicit keyword overrides win over the environment; overrides whose
        value is None are ignored so CLI options can be passed straight through.
        """
        values: dict[str, Any] = {}
        for env_var, field_name in _ENV_FIELDS.items():
            raw = os.environ.get(env_var)
            if raw:
                values[field_name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.create(**values)
