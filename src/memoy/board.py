from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Sequence

from .core.rng import RNG
from .errors import InsufficientSymbols

logger = logging.getLogger(__name__)


@dataclass
class Card:
    """A single tile. ``color`` is a cosmetic tag the engine never inspects."""

    symbol: str
    color: int = 37
    is_face_up: bool = False
    is_matched: bool = False

    def flip_up(self) -> None:
        self.is_face_up = True

    def flip_down(self) -> None:
        self.is_face_up = False

    def mark_matched(self) -> None:
        self.is_face_up = True
        self.is_matched = True


class Board:
    """Square grid of cards stored row-major."""

    def __init__(self, grid_size: int, cards: Sequence[Card]) -> None:
        if len(cards) != grid_size * grid_size:
            raise ValueError(f"A {grid_size}x{grid_size} board needs {grid_size * grid_size} cards, got {len(cards)}")
        self.grid_size = grid_size
        self.cards: List[Card] = list(cards)

    @classmethod
    def from_symbols(cls, symbols: Sequence[str], colors: Sequence[int], grid_size: int | None = None) -> "Board":
        """Lay out ``symbols`` in the given order, cycling colours in board order."""
        if grid_size is None:
            grid_size = int(round(len(symbols) ** 0.5))
        if not colors:
            raise ValueError("colors must not be empty")
        cards = [Card(symbol=s, color=colors[i % len(colors)]) for i, s in enumerate(symbols)]
        return cls(grid_size, cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    @property
    def total_pairs(self) -> int:
        return len(self.cards) // 2

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.grid_size and 0 <= col < self.grid_size

    def index_of(self, row: int, col: int) -> int:
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) is outside a {self.grid_size}x{self.grid_size} board")
        return row * self.grid_size + col

    def position_of(self, index: int) -> tuple[int, int]:
        return divmod(index, self.grid_size)

    def card_at(self, row: int, col: int) -> Card:
        return self.cards[self.index_of(row, col)]

    def all_matched(self) -> bool:
        return all(c.is_matched for c in self.cards)

    def symbols(self) -> List[str]:
        return [c.symbol for c in self.cards]


def generate_board(grid_size: int, symbols: Sequence[str], colors: Sequence[int], rng: RNG) -> Board:
    """Build a shuffled board of ``grid_size**2`` cards, two per symbol.

    The first ``grid_size**2 / 2`` symbols of the alphabet are used, in order,
    so the symbol set depends only on the alphabet; only the arrangement is
    random.
    """
    cell_count = grid_size * grid_size
    if grid_size < 1 or cell_count % 2:
        raise ValueError(f"grid_size must be positive with an even cell count, got {grid_size}")
    pairs = cell_count // 2
    if pairs > len(symbols):
        raise InsufficientSymbols(needed=pairs, available=len(symbols))

    picked = list(symbols[:pairs])
    deck = picked + picked
    rng.shuffle(deck)
    logger.debug("Generated %dx%d board with seed %s", grid_size, grid_size, rng.seed)
    return Board.from_symbols(deck, colors, grid_size=grid_size)
