from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RNG:
    """
    Deterministic-friendly RNG wrapper around random.Random.

    Pass a fixed seed for reproducible boards in tests and replays. Without a
    seed the wall clock is used, so every game gets a fresh arrangement, and
    the chosen seed is kept on the instance for logging.
    """

    seed: Optional[int] = None
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.seed is None:
            self.seed = time.time_ns() & 0xFFFFFFFF
            logger.debug("RNG seeded from clock: %d", self.seed)
        self._rng = random.Random(self.seed)

    def shuffle(self, items: List[T]) -> None:
        """Shuffle ``items`` in place (Fisher-Yates, uniform over permutations)."""
        self._rng.shuffle(items)
