"""Session scoring."""

BASE_SCORE = 1000
MOVE_PENALTY = 10
PAIR_BONUS = 150


def score(moves: int, matched_pairs: int) -> int:
    """Return the session score, floored at zero.

    >>> score(5, 2)
    1250
    """
    return max(0, BASE_SCORE - moves * MOVE_PENALTY + matched_pairs * PAIR_BONUS)
