from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from .board import Board, Card, generate_board
from .core.events import EventBus
from .core.rng import RNG
from .errors import IllegalTransition, InputError, InvalidSelection, MemoyError, SessionFinished
from .ledger import HighScoreEntry, HighScoreLedger
from .settings import Settings
from .turns import SessionState, TurnResolver, TurnState

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

EVENT_VIEW = "session.view"
EVENT_FINISHED = "session.finished"


class Message(Enum):
    MATCH = "match"
    NO_MATCH = "no match"
    TIMES_UP = "time's up"
    FINISHED = "finished"


@dataclass(frozen=True)
class CellView:
    state: str  # "hidden" | "revealed" | "matched"
    symbol: Optional[str]
    color: int

    @staticmethod
    def of(card: Card) -> "CellView":
        if card.is_matched:
            return CellView("matched", card.symbol, card.color)
        if card.is_face_up:
            return CellView("revealed", card.symbol, card.color)
        return CellView("hidden", None, card.color)

    def label(self) -> str:
        if self.state == "hidden":
            return "hidden"
        return f"{self.state}:{self.symbol}"


@dataclass(frozen=True)
class SessionView:
    """Everything the presentation layer needs to draw one frame."""

    grid_size: int
    cells: Tuple[Tuple[CellView, ...], ...]
    player_name: str
    moves: int
    matched_pairs: int
    total_pairs: int
    score: int
    state: TurnState
    timed_out: bool = False
    remaining_seconds: Optional[int] = None
    message: Optional[Message] = None
    error: Optional[MemoyError] = None
    warning: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.state is TurnState.SESSION_COMPLETE

    def labels(self) -> list[list[str]]:
        return [[cell.label() for cell in row] for row in self.cells]


_PICK_SPLIT = re.compile(r"[\s,]+")


def parse_pick(text: str) -> Tuple[int, int]:
    """Parse ``"row col"`` (space or comma separated) into two integers."""
    parts = [p for p in _PICK_SPLIT.split(text.strip()) if p]
    if len(parts) != 2:
        raise InputError(f"Expected a row and a column, got {len(parts)} value(s)", raw=text)
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        raise InputError("Row and column must be whole numbers", raw=text) from None


def normalize_player_name(name: Optional[str], default: str = "Player") -> str:
    """Strip the name and join inner whitespace so it fits one ledger field.

    An empty name falls back to ``default``, which gets the same treatment.
    """
    cleaned = "_".join((name or "").split())
    return cleaned or "_".join((default or "").split()) or "Player"


class SessionController:
    """Owns one playthrough from board generation to the ledger entry.

    The ledger is loaded by the caller and passed in; the controller only
    mutates it through ``record`` when the session ends. Every transition
    publishes the new view on ``events`` under ``"session.view"``.
    """

    def __init__(
        self,
        settings: Settings,
        ledger: HighScoreLedger,
        rng: Optional[RNG] = None,
        clock: Clock = time.monotonic,
        events: Optional[EventBus] = None,
    ) -> None:
        self.settings = settings
        self.ledger = ledger
        self.rng = rng or RNG()
        self.clock = clock
        self.events = events or EventBus()
        self.board: Optional[Board] = None
        self.state: Optional[SessionState] = None
        self.resolver: Optional[TurnResolver] = None
        self.entry: Optional[HighScoreEntry] = None
        self._message: Optional[Message] = None
        self._warning: Optional[str] = None

    # Lifecycle

    def start(self, player_name: str = "", grid_size: Optional[int] = None, timed: Optional[bool] = None) -> SessionView:
        game = self.settings.game
        grid_size = game.grid_size if grid_size is None else grid_size
        timed = game.timed if timed is None else timed
        name = normalize_player_name(player_name, game.default_player_name)

        self.board = generate_board(grid_size, game.symbols, game.colors, self.rng)
        self.state = SessionState(
            player_name=name,
            start_time=self.clock(),
            is_timed=timed,
            time_limit_seconds=game.time_limit_seconds if timed else None,
        )
        self.resolver = TurnResolver(self.board, self.state)
        self.entry = None
        self._message = None
        self._warning = None
        logger.info(
            "Session started: player=%s grid=%dx%d timed=%s",
            name, grid_size, grid_size, timed,
        )
        return self._publish()

    def _require_started(self) -> TurnResolver:
        if self.resolver is None:
            raise IllegalTransition("No session has been started")
        return self.resolver

    @property
    def is_complete(self) -> bool:
        return self.resolver is not None and self.resolver.is_complete

    # Timing

    def elapsed_seconds(self) -> int:
        if self.state is None:
            return 0
        return max(0, int(self.clock() - self.state.start_time))

    def remaining_seconds(self) -> Optional[int]:
        if self.state is None or not self.state.is_timed or self.state.time_limit_seconds is None:
            return None
        return max(0, self.state.time_limit_seconds - self.elapsed_seconds())

    def check_timeout(self) -> bool:
        """Force completion when a timed session has run out of time.

        Only takes effect between turns; returns True when the session is
        (now) over because of the time limit.
        """
        resolver = self._require_started()
        assert self.state is not None
        if resolver.is_complete:
            return self.state.timed_out
        if not self.state.is_timed or resolver.state is not TurnState.AWAITING_FIRST_PICK:
            return False
        if self.remaining_seconds() == 0:
            resolver.force_timeout()
            self._message = Message.TIMES_UP
            self._finalize()
            self._publish()
            return True
        return False

    # Input boundary

    def pick(self, row: int, col: int) -> SessionView:
        """Apply a first or second pick depending on the turn state."""
        resolver = self._require_started()
        if resolver.is_complete:
            raise SessionFinished("Cannot pick: the session is complete")
        self._message = None
        if resolver.state is TurnState.AWAITING_FIRST_PICK:
            if self.check_timeout():
                return self.view()
            resolver.select_first(row, col)
        elif resolver.state is TurnState.AWAITING_SECOND_PICK:
            resolver.select_second(row, col)
        else:
            raise IllegalTransition("Resolve the revealed pair before picking again")
        return self._publish()

    def submit(self, text: str) -> SessionView:
        """Handle one line of raw player input, reporting recoverable errors on the view."""
        try:
            row, col = parse_pick(text)
            return self.pick(row, col)
        except (InputError, InvalidSelection) as e:
            logger.debug("Rejected input %r: %s", text, e)
            self._message = None
            return self._publish(error=e)

    def cancel(self) -> SessionView:
        """Abort a pending second pick; the first card is turned back down."""
        resolver = self._require_started()
        resolver.cancel_pick()
        self._message = None
        return self._publish()

    def resolve(self) -> SessionView:
        resolver = self._require_started()
        result = resolver.resolve()
        self._message = Message.MATCH if result.matched else Message.NO_MATCH
        if result.session_complete:
            self._finalize()
        return self._publish()

    # Completion

    def _finalize(self) -> None:
        assert self.state is not None
        if self.entry is not None:
            return
        final_score = self.state.recompute_score()
        elapsed = self.elapsed_seconds()
        self.entry = HighScoreEntry(
            player_name=self.state.player_name,
            moves=self.state.moves,
            elapsed_seconds=elapsed,
            score=final_score,
        )
        if not self.state.timed_out:
            self._message = Message.FINISHED
        self.ledger.record(self.entry)
        if self.ledger.last_error is not None:
            self._warning = f"High score not saved: {self.ledger.last_error}"
        logger.info(
            "Session finished: player=%s moves=%d pairs=%d time=%ds score=%d timed_out=%s",
            self.state.player_name, self.state.moves, self.state.matched_pairs,
            elapsed, final_score, self.state.timed_out,
        )
        self.events.emit(EVENT_FINISHED, {"entry": self.entry, "timed_out": self.state.timed_out})

    # Presentation boundary

    def view(self, error: Optional[MemoyError] = None) -> SessionView:
        resolver = self._require_started()
        board, state = resolver.board, resolver.session
        n = board.grid_size
        cells = tuple(
            tuple(CellView.of(board.cards[r * n + c]) for c in range(n))
            for r in range(n)
        )
        return SessionView(
            grid_size=n,
            cells=cells,
            player_name=state.player_name,
            moves=state.moves,
            matched_pairs=state.matched_pairs,
            total_pairs=board.total_pairs,
            score=state.score,
            state=resolver.state,
            timed_out=state.timed_out,
            remaining_seconds=self.remaining_seconds(),
            message=self._message,
            error=error,
            warning=self._warning,
        )

    def _publish(self, error: Optional[MemoyError] = None) -> SessionView:
        view = self.view(error=error)
        self.events.emit(EVENT_VIEW, {"view": view})
        return view
