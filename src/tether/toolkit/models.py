"""Toolkit data models.

ToolOutcome is the Result value of a tool invocation: either output text or
error text, never an exception.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ToolOutcome:
    """Structured result from invoking a tool.

    Attributes:
        tool_name: Name of the tool that was invoked.
        success: Whether execution succeeded.
        output: String output on success.
        error: Error message on failure.
    """

    tool_name: str
    success: bool
    output: str = ""
    error: str = ""

    @property
    def text(self) -> str:
        """The text to hand back to the model: output on success, else error."""
        return self.output if self.success else self.error
