import sys
from pathlib import Path
from typing import List, Sequence

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from memoy.core.rng import RNG  # noqa: E402
from memoy.ledger import HighScoreLedger  # noqa: E402
from memoy.settings import Settings  # noqa: E402


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ArrangedRNG(RNG):
    """RNG whose shuffle lays the deck out in a fixed order."""

    def __init__(self, arrangement: Sequence[str]) -> None:
        super().__init__(seed=0)
        self.arrangement: List[str] = list(arrangement)

    def shuffle(self, items):
        assert sorted(items) == sorted(self.arrangement), "arrangement must use the same cards"
        items[:] = list(self.arrangement)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ledger_path(tmp_path: Path) -> Path:
    return tmp_path / "scores" / "memoy_highscores.txt"


@pytest.fixture()
def settings(ledger_path: Path) -> Settings:
    return Settings.from_dict(
        {
            "game": {
                "grid_size": 2,
                "symbols": ["A", "B", "C", "D", "E", "F", "G", "H"],
                "colors": [36, 35, 33],
                "time_limit_seconds": 120,
            },
            "ledger": {"capacity": 10, "path": str(ledger_path)},
            "display": {"color": False, "reveal_delay": 0, "message_delay": 0},
        }
    )


@pytest.fixture()
def ledger(ledger_path: Path) -> HighScoreLedger:
    return HighScoreLedger.load(ledger_path)


@pytest.fixture()
def arranged():
    """Factory for RNGs that produce a known board layout."""
    return ArrangedRNG
