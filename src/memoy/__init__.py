"""
MEMOY: a terminal memory-matching game.

The engine is headless and UI-agnostic:
- Board generation with an injectable random source
- A turn resolver state machine for picking and resolving pairs
- Scoring and a persistent, ranked high-score ledger
- A session controller that publishes renderable snapshots

``memoy.console`` is a thin line-based front end composed from these pieces.
"""
from .board import Board, Card, generate_board
from .errors import (
    ConfigError,
    IllegalTransition,
    InputError,
    InsufficientSymbols,
    InvalidSelection,
    MemoyError,
    PersistenceError,
    PersistenceReadFailure,
    PersistenceWriteFailure,
    SessionFinished,
)
from .ledger import HighScoreEntry, HighScoreLedger
from .scoring import score
from .session import Message, SessionController, SessionView
from .settings import Settings
from .turns import SessionState, TurnResolver, TurnState

__version__ = "1.0.0"

__all__ = [
    "Board",
    "Card",
    "generate_board",
    "TurnResolver",
    "TurnState",
    "SessionState",
    "score",
    "HighScoreEntry",
    "HighScoreLedger",
    "SessionController",
    "SessionView",
    "Message",
    "Settings",
    "MemoyError",
    "ConfigError",
    "InsufficientSymbols",
    "InvalidSelection",
    "IllegalTransition",
    "SessionFinished",
    "InputError",
    "PersistenceError",
    "PersistenceReadFailure",
    "PersistenceWriteFailure",
]
