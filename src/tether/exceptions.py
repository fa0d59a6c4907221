"""Tether exception hierarchy.

All Tether-specific exceptions inherit from TetherError.

Fatal kinds (TransportError, ProtocolError, CompletionError and its
subclasses) end the operation or turn in progress. ToolExecutionError is
recoverable: the conversation driver turns it into a tool result for the
model instead of letting it escape.
"""


class TetherError(Exception):
    """Base exception for all Tether errors."""


class ConfigError(TetherError):
    """Raised when agent configuration is missing or invalid."""


class TransportError(TetherError):
    """Raised when the tool server or completion endpoint cannot be reached."""


class ProtocolError(TetherError):
    """Raised when an external service replies with an unexpected shape."""


class CompletionError(TetherError):
    """Raised when a completion call fails. Fatal to the current turn."""


class ToolLoopExceededError(CompletionError):
    """Raised when a single turn exceeds its tool round-trip budget."""

    def __init__(self, max_rounds: int) -> None:
        self.max_rounds = max_rounds
        super().__init__(
            f"Tool loop exceeded: model requested more than {max_rounds} "
            f"tool call(s) without producing an answer"
        )


class ToolExecutionError(TetherError):
    """Raised when a named tool cannot be executed or reports a failure.

    Never fatal to a turn.
    """

    def __init__(self, tool_name: str, message: str) -> None:
        self.tool_name = tool_name
        self.message = message
        super().__init__(f"Tool {tool_name} failed: {message}")
