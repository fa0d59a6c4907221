"""Conversation package: the driver, its state types and history policies."""

from tether.conversation.driver import ConversationDriver
from tether.conversation.history import (
    HistoryPolicy,
    KeepAll,
    SlidingWindow,
    policy_for_window,
)
from tether.conversation.models import DriverState, ToolStep

__all__ = [
    "ConversationDriver",
    "DriverState",
    "ToolStep",
    "HistoryPolicy",
    "KeepAll",
    "SlidingWindow",
    "policy_for_window",
]
