"""
tmux-slots - numbered tmux terminals with stored commands

Each slot (1, 2, 3, ...) is backed by a tmux window created the first time
the slot is used. Slots can be bound to shell commands stored per project.

Architecture:
- Command table: slot -> command, persisted per project directory
- Window registry: slot -> tmux pane, rebuilt on demand
- Session: goto / send / clear on top of both
"""

__version__ = "0.1.0"

from .errors import (
    TmuxSlotsError,
    CreationError,
    ParseError,
    ActivationError,
    UnresolvedTargetError,
    TransmissionError,
    TeardownError,
    CommandTimeoutError,
)
from .models import TermConfig, TmuxOptions
from .commands import CommandSlots
from .window import WindowHandle
from .registry import WindowRegistry
from .session import TerminalSession, setup, get_session, teardown

__all__ = [
    # errors
    "TmuxSlotsError",
    "CreationError",
    "ParseError",
    "ActivationError",
    "UnresolvedTargetError",
    "TransmissionError",
    "TeardownError",
    "CommandTimeoutError",
    # models
    "TermConfig",
    "TmuxOptions",
    # core
    "CommandSlots",
    "WindowHandle",
    "WindowRegistry",
    "TerminalSession",
    "setup",
    "get_session",
    "teardown",
]
