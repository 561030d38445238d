"""Exceptions for tmux slot operations

All exceptions raised by window, registry and session operations derive
from TmuxSlotsError and carry the stderr lines tmux reported.
"""

from typing import List, Optional


class TmuxSlotsError(Exception):
    """Base exception for all tmux slot operations."""

    def __init__(self, message: str, stderr: Optional[List[str]] = None):
        super().__init__(message)
        self.stderr = list(stderr or [])

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr:
            return f"{message}: {self.stderr[0]}"
        return message


class CreationError(TmuxSlotsError):
    """Raised when tmux fails to create a new window."""

    pass


class ParseError(TmuxSlotsError):
    """Raised when the output of new-window is not `%<pane>:@<window>`."""

    pass


class ActivationError(TmuxSlotsError):
    """Raised when switch-client fails to focus a window."""

    pass


class UnresolvedTargetError(ActivationError):
    """Raised when a pane id no longer resolves to a session:window.pane target."""

    pass


class TransmissionError(TmuxSlotsError):
    """Raised when send-keys fails."""

    pass


class TeardownError(TmuxSlotsError):
    """Raised when a window could not be killed and still exists.

    When raised by clear_all(), `errors` holds every per-window failure
    (TeardownError or CommandTimeoutError).
    """

    def __init__(
        self,
        message: str,
        stderr: Optional[List[str]] = None,
        errors: Optional[List[TmuxSlotsError]] = None,
    ):
        super().__init__(message, stderr)
        self.errors = list(errors or [])


class CommandTimeoutError(TmuxSlotsError, TimeoutError):
    """Raised when a tmux command does not finish within the configured timeout."""

    pass
