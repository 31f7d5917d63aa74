import pytest

from memoy.board import Board
from memoy.errors import IllegalTransition, InvalidSelection, SessionFinished
from memoy.turns import SessionState, TurnResolver, TurnState


def make_resolver(symbols=("B", "A", "A", "B")):
    board = Board.from_symbols(list(symbols), [31, 32])
    state = SessionState(player_name="Tester", start_time=0.0)
    return TurnResolver(board, state)


def test_first_pick_reveals_card_and_waits_for_second():
    r = make_resolver()
    reveal = r.select_first(0, 0)
    assert reveal.symbol == "B"
    assert reveal.index == 0
    assert r.board.cards[0].is_face_up
    assert r.state is TurnState.AWAITING_SECOND_PICK
    assert r.pending == (0,)


@pytest.mark.parametrize("row,col", [(-1, 0), (0, 2), (5, 5)])
def test_invalid_first_pick_leaves_state_unchanged(row, col):
    r = make_resolver()
    with pytest.raises(InvalidSelection) as exc:
        r.select_first(row, col)
    assert exc.value.abandoned is False
    assert r.state is TurnState.AWAITING_FIRST_PICK
    assert not any(c.is_face_up for c in r.board)


def test_first_pick_on_matched_card_is_rejected():
    r = make_resolver()
    r.select_first(0, 1)
    r.select_second(1, 0)
    r.resolve()
    with pytest.raises(InvalidSelection, match="already matched"):
        r.select_first(0, 1)
    assert r.state is TurnState.AWAITING_FIRST_PICK


def test_same_cell_second_pick_abandons_turn():
    r = make_resolver()
    r.select_first(0, 0)
    with pytest.raises(InvalidSelection) as exc:
        r.select_second(0, 0)
    assert exc.value.abandoned is True
    assert r.state is TurnState.AWAITING_FIRST_PICK
    assert not r.board.cards[0].is_face_up
    assert r.session.moves == 0


def test_out_of_range_second_pick_abandons_turn():
    r = make_resolver()
    r.select_first(1, 1)
    with pytest.raises(InvalidSelection):
        r.select_second(2, 0)
    assert r.state is TurnState.AWAITING_FIRST_PICK
    assert not r.board.cards[3].is_face_up


def test_cancel_pick_turns_first_card_back():
    r = make_resolver()
    r.select_first(0, 0)
    r.cancel_pick()
    assert r.state is TurnState.AWAITING_FIRST_PICK
    assert not r.board.cards[0].is_face_up
    assert r.session.moves == 0


def test_no_match_flips_back_and_counts_move():
    r = make_resolver()
    r.select_first(0, 0)
    r.select_second(0, 1)
    assert r.state is TurnState.RESOLVING
    assert r.session.moves == 1

    result = r.resolve()
    assert result.matched is False
    assert result.session_complete is False
    assert (result.first, result.second) == (0, 1)
    assert not r.board.cards[0].is_face_up
    assert not r.board.cards[1].is_face_up
    assert r.session.matched_pairs == 0
    assert r.state is TurnState.AWAITING_FIRST_PICK


def test_match_marks_cards_and_recomputes_score():
    r = make_resolver()
    r.select_first(0, 1)
    r.select_second(1, 0)
    result = r.resolve()
    assert result.matched is True
    assert r.board.cards[1].is_matched and r.board.cards[1].is_face_up
    assert r.board.cards[2].is_matched and r.board.cards[2].is_face_up
    assert r.session.matched_pairs == 1
    assert r.session.score == 1000 - 10 + 150


def test_last_match_completes_session_and_rejects_picks():
    r = make_resolver()
    for (a, b) in [((0, 1), (1, 0)), ((1, 1), (0, 0))]:
        r.select_first(*a)
        r.select_second(*b)
        r.resolve()
    assert r.is_complete
    assert r.session.matched_pairs == 2
    assert r.board.all_matched()
    with pytest.raises(SessionFinished):
        r.select_first(0, 0)


def test_moves_increase_once_per_pair_regardless_of_outcome():
    r = make_resolver()
    outcomes = []
    for (a, b) in [((0, 0), (0, 1)), ((0, 0), (1, 1)), ((0, 1), (1, 0))]:
        before = r.session.moves
        pairs_before = r.session.matched_pairs
        r.select_first(*a)
        r.select_second(*b)
        outcomes.append(r.resolve().matched)
        assert r.session.moves == before + 1
        assert r.session.matched_pairs >= pairs_before
    assert outcomes == [False, True, True]


def test_operations_out_of_turn_raise():
    r = make_resolver()
    with pytest.raises(IllegalTransition):
        r.resolve()
    with pytest.raises(IllegalTransition):
        r.select_second(0, 0)
    with pytest.raises(IllegalTransition):
        r.cancel_pick()
    r.select_first(0, 0)
    with pytest.raises(IllegalTransition):
        r.select_first(0, 1)
    r.select_second(0, 1)
    with pytest.raises(IllegalTransition):
        r.select_first(1, 1)


def test_force_timeout_hides_pending_card_and_completes():
    r = make_resolver()
    r.select_first(0, 0)
    r.force_timeout()
    assert r.is_complete
    assert r.session.timed_out is True
    assert not r.board.cards[0].is_face_up
    with pytest.raises(SessionFinished):
        r.select_first(1, 1)
    # Idempotent
    r.force_timeout()
    assert r.state is TurnState.SESSION_COMPLETE
