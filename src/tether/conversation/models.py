"""Driver state and step record types."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tether.models.messages import ToolCall
    from tether.toolkit.models import ToolOutcome


class DriverState(str, enum.Enum):
    """States the conversation driver moves through during a turn."""

    IDLE = "idle"
    AWAITING_COMPLETION = "awaiting_completion"
    AWAITING_TOOL = "awaiting_tool"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class ToolStep:
    """Record of one tool round-trip within a turn.

    Frozen: step records are immutable records of what happened.
    """

    round: int
    tool_call: ToolCall
    outcome: ToolOutcome
