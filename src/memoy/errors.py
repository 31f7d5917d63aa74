from __future__ import annotations

from typing import Optional


class MemoyError(Exception):
    """Base error for MEMOY engine exceptions."""


class ConfigError(MemoyError):
    """Raised when settings are invalid or the settings file cannot be read."""


class InsufficientSymbols(MemoyError):
    """Raised when the symbol alphabet is too small for the requested board."""

    def __init__(self, needed: int, available: int) -> None:
        super().__init__(f"Board needs {needed} symbols but only {available} are available")
        self.needed = needed
        self.available = available


class InvalidSelection(MemoyError):
    """Raised when a picked cell cannot be revealed.

    ``abandoned`` is True when the failure discarded a pending first pick
    (second-pick failures restart the turn instead of re-prompting).
    """

    def __init__(self, row: int, col: int, reason: str, abandoned: bool = False) -> None:
        super().__init__(f"Invalid pick ({row}, {col}): {reason}")
        self.row = row
        self.col = col
        self.reason = reason
        self.abandoned = abandoned


class IllegalTransition(MemoyError):
    """Raised when an operation is not allowed in the current turn state."""


class SessionFinished(IllegalTransition):
    """Raised when a selection is attempted after the session has completed."""


class InputError(MemoyError):
    """Raised when external input is malformed (non-numeric, wrong arity)."""

    def __init__(self, message: str, raw: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw = raw


class PersistenceError(MemoyError):
    """Base error for ledger storage problems."""


class PersistenceReadFailure(PersistenceError):
    """Raised when stored high scores cannot be read."""


class PersistenceWriteFailure(PersistenceError):
    """Raised when the ledger could not be durably saved."""
