from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .board import Board
from .errors import IllegalTransition, InvalidSelection, SessionFinished
from .scoring import score

logger = logging.getLogger(__name__)


class TurnState(Enum):
    AWAITING_FIRST_PICK = "awaiting_first_pick"
    AWAITING_SECOND_PICK = "awaiting_second_pick"
    RESOLVING = "resolving"
    SESSION_COMPLETE = "session_complete"


@dataclass
class SessionState:
    """Counters for one playthrough. ``score`` is derived and only cached here."""

    player_name: str
    start_time: float
    is_timed: bool = False
    time_limit_seconds: Optional[int] = None
    moves: int = 0
    matched_pairs: int = 0
    score: int = 0
    timed_out: bool = False

    def recompute_score(self) -> int:
        self.score = score(self.moves, self.matched_pairs)
        return self.score


@dataclass(frozen=True)
class Reveal:
    index: int
    row: int
    col: int
    symbol: str


@dataclass(frozen=True)
class TurnResult:
    first: int
    second: int
    matched: bool
    session_complete: bool


class TurnResolver:
    """Finite state machine for picking and resolving pairs on one board.

    Usage:
        resolver = TurnResolver(board, state)
        resolver.select_first(0, 0)
        resolver.select_second(0, 1)
        result = resolver.resolve()

    Every operation checks the current state first and raises
    IllegalTransition when called out of turn, so a resolve without two
    revealed cards cannot happen.
    """

    def __init__(self, board: Board, state: SessionState) -> None:
        self.board = board
        self.session = state
        self._state = TurnState.AWAITING_FIRST_PICK
        self._first: Optional[int] = None
        self._pair: Optional[Tuple[int, int]] = None

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def is_complete(self) -> bool:
        return self._state is TurnState.SESSION_COMPLETE

    @property
    def pending(self) -> Tuple[int, ...]:
        """Indices of cards revealed in the current, unresolved turn."""
        if self._pair is not None:
            return self._pair
        if self._first is not None:
            return (self._first,)
        return ()

    def _require(self, expected: TurnState, action: str) -> None:
        if self._state is TurnState.SESSION_COMPLETE:
            raise SessionFinished(f"Cannot {action}: the session is complete")
        if self._state is not expected:
            raise IllegalTransition(f"Cannot {action} while {self._state.value}")

    def _reveal(self, index: int) -> Reveal:
        card = self.board.cards[index]
        card.flip_up()
        row, col = self.board.position_of(index)
        return Reveal(index=index, row=row, col=col, symbol=card.symbol)

    def select_first(self, row: int, col: int) -> Reveal:
        self._require(TurnState.AWAITING_FIRST_PICK, "select a first card")
        if not self.board.in_bounds(row, col):
            raise InvalidSelection(row, col, "out of range")
        index = self.board.index_of(row, col)
        card = self.board.cards[index]
        if card.is_matched:
            raise InvalidSelection(row, col, "already matched")
        if card.is_face_up:
            raise InvalidSelection(row, col, "already revealed")

        reveal = self._reveal(index)
        self._first = index
        self._state = TurnState.AWAITING_SECOND_PICK
        logger.debug("First pick (%d, %d) -> %s", row, col, reveal.symbol)
        return reveal

    def select_second(self, row: int, col: int) -> Reveal:
        self._require(TurnState.AWAITING_SECOND_PICK, "select a second card")
        reason: Optional[str] = None
        if not self.board.in_bounds(row, col):
            reason = "out of range"
        else:
            index = self.board.index_of(row, col)
            if self.board.cards[index].is_matched:
                reason = "already matched"
            elif index == self._first:
                reason = "same card as the first pick"
        if reason is not None:
            self._abandon()
            raise InvalidSelection(row, col, reason, abandoned=True)

        assert self._first is not None
        reveal = self._reveal(index)
        self._pair = (self._first, index)
        self._first = None
        self.session.moves += 1
        self._state = TurnState.RESOLVING
        logger.debug("Second pick (%d, %d) -> %s, moves=%d", row, col, reveal.symbol, self.session.moves)
        return reveal

    def cancel_pick(self) -> None:
        """Abandon a pending first pick without counting a move."""
        self._require(TurnState.AWAITING_SECOND_PICK, "cancel a pick")
        self._abandon()

    def _abandon(self) -> None:
        if self._first is not None:
            self.board.cards[self._first].flip_down()
        self._first = None
        self._state = TurnState.AWAITING_FIRST_PICK
        logger.debug("Turn abandoned")

    def resolve(self) -> TurnResult:
        self._require(TurnState.RESOLVING, "resolve a turn")
        assert self._pair is not None
        first, second = self._pair
        a, b = self.board.cards[first], self.board.cards[second]
        matched = a.symbol == b.symbol
        if matched:
            a.mark_matched()
            b.mark_matched()
            self.session.matched_pairs += 1
            self.session.recompute_score()
        else:
            a.flip_down()
            b.flip_down()
        self._pair = None

        complete = self.session.matched_pairs >= self.board.total_pairs
        self._state = TurnState.SESSION_COMPLETE if complete else TurnState.AWAITING_FIRST_PICK
        logger.debug(
            "Resolved %s vs %s: matched=%s pairs=%d/%d",
            a.symbol, b.symbol, matched, self.session.matched_pairs, self.board.total_pairs,
        )
        return TurnResult(first=first, second=second, matched=matched, session_complete=complete)

    def force_timeout(self) -> None:
        """End the session immediately, hiding any unresolved cards."""
        if self.is_complete:
            return
        for index in self.pending:
            card = self.board.cards[index]
            if not card.is_matched:
                card.flip_down()
        self._first = None
        self._pair = None
        self.session.timed_out = True
        self._state = TurnState.SESSION_COMPLETE
        logger.info("Session timed out after %d moves", self.session.moves)
