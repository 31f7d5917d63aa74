from collections import Counter

import pytest

from memoy.board import Board, Card, generate_board
from memoy.core.rng import RNG
from memoy.errors import InsufficientSymbols
from memoy.settings import DEFAULT_COLORS, DEFAULT_SYMBOLS


@pytest.mark.parametrize("grid_size", [2, 4])
def test_each_symbol_appears_exactly_twice(grid_size):
    board = generate_board(grid_size, DEFAULT_SYMBOLS, DEFAULT_COLORS, RNG(7))

    counts = Counter(board.symbols())
    assert len(board) == grid_size * grid_size
    assert len(counts) == grid_size * grid_size // 2
    assert set(counts.values()) == {2}
    # The first N symbols of the alphabet are used, in alphabet order
    assert set(counts) == set(DEFAULT_SYMBOLS[: grid_size * grid_size // 2])
    assert board.total_pairs == grid_size * grid_size // 2


def test_cards_start_face_down_and_unmatched():
    board = generate_board(4, DEFAULT_SYMBOLS, DEFAULT_COLORS, RNG(1))
    assert all(not c.is_face_up and not c.is_matched for c in board)


def test_colors_cycle_in_board_order():
    board = generate_board(4, DEFAULT_SYMBOLS, [1, 2, 3], RNG(3))
    assert [c.color for c in board] == [(1, 2, 3)[i % 3] for i in range(16)]


def test_same_seed_same_arrangement():
    a = generate_board(4, DEFAULT_SYMBOLS, DEFAULT_COLORS, RNG(42))
    b = generate_board(4, DEFAULT_SYMBOLS, DEFAULT_COLORS, RNG(42))
    assert a.symbols() == b.symbols()


def test_insufficient_symbols():
    with pytest.raises(InsufficientSymbols) as exc:
        generate_board(4, ["A", "B", "C"], DEFAULT_COLORS, RNG(0))
    assert exc.value.needed == 8
    assert exc.value.available == 3


def test_odd_cell_count_rejected():
    with pytest.raises(ValueError):
        generate_board(3, DEFAULT_SYMBOLS, DEFAULT_COLORS, RNG(0))


def test_position_distribution_is_not_biased():
    # Across many seeds every symbol should land in the top-left cell about
    # equally often (8 symbols on a 4x4 board -> 1/8 each).
    trials = 4000
    first_cell = Counter(
        generate_board(4, DEFAULT_SYMBOLS, DEFAULT_COLORS, RNG(seed)).cards[0].symbol
        for seed in range(trials)
    )
    assert len(first_cell) == 8
    for symbol, hits in first_cell.items():
        assert 0.09 < hits / trials < 0.16, symbol


def test_board_geometry_helpers():
    board = Board.from_symbols(["B", "A", "A", "B"], [31])
    assert board.grid_size == 2
    assert board.index_of(1, 0) == 2
    assert board.position_of(3) == (1, 1)
    assert board.card_at(0, 1).symbol == "A"
    assert not board.in_bounds(2, 0)
    with pytest.raises(IndexError):
        board.index_of(-1, 0)


def test_matched_card_is_face_up():
    card = Card("A")
    card.mark_matched()
    assert card.is_face_up and card.is_matched
