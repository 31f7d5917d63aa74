from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import PersistenceReadFailure, PersistenceWriteFailure
from .paths import ensure_dir

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10

DisplayRow = Tuple[int, str, int, int, int]


@dataclass(frozen=True)
class HighScoreEntry:
    player_name: str
    moves: int
    elapsed_seconds: int
    score: int

    def to_line(self) -> str:
        return f"{self.player_name} {self.moves} {self.elapsed_seconds} {self.score}"

    @staticmethod
    def from_line(line: str) -> Optional["HighScoreEntry"]:
        """Parse one stored record; return None when the line is malformed."""
        parts = line.split()
        if len(parts) != 4:
            return None
        name, moves, elapsed, score = parts
        try:
            return HighScoreEntry(name, int(moves), int(elapsed), int(score))
        except ValueError:
            return None


def encode_entries(entries: Iterable[HighScoreEntry]) -> str:
    return "".join(entry.to_line() + "\n" for entry in entries)


def decode_entries(text: str) -> List[HighScoreEntry]:
    """Decode stored records, stopping quietly at the first malformed line."""
    entries: List[HighScoreEntry] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        entry = HighScoreEntry.from_line(line)
        if entry is None:
            logger.debug("Stopping high-score read at malformed line %d: %r", lineno, line)
            break
        entries.append(entry)
    return entries


def rank(entries: Iterable[HighScoreEntry], capacity: int) -> List[HighScoreEntry]:
    """Sort by score descending, ties in their original order, capped at capacity."""
    return sorted(entries, key=lambda e: e.score, reverse=True)[:capacity]


class HighScoreLedger:
    """Ranked, capacity-bounded list of past results backed by a text file.

    The in-memory entries are authoritative for the process lifetime; a
    failed write is logged and kept in ``last_error`` instead of raising.
    """

    def __init__(
        self,
        path: Path,
        capacity: int = DEFAULT_CAPACITY,
        entries: Optional[Iterable[HighScoreEntry]] = None,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.path = Path(path)
        self.capacity = capacity
        self._entries: List[HighScoreEntry] = rank(entries or [], capacity)
        self.last_error: Optional[PersistenceWriteFailure] = None

    @classmethod
    def load(cls, path: Path, capacity: int = DEFAULT_CAPACITY) -> "HighScoreLedger":
        """Read stored entries. Missing or unreadable storage gives an empty ledger."""
        path = Path(path)
        try:
            entries = decode_entries(cls._read_text(path))
        except FileNotFoundError:
            logger.info("No high-score file at %s; starting fresh", path)
            entries = []
        except PersistenceReadFailure as e:
            logger.warning("%s; starting with empty high scores", e)
            entries = []
        ledger = cls(path, capacity=capacity, entries=entries)
        logger.debug("Loaded %d high-score entries from %s", len(ledger), path)
        return ledger

    @staticmethod
    def _read_text(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceReadFailure(f"Unable to read high scores from {path}: {e}") from e

    @property
    def entries(self) -> List[HighScoreEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HighScoreEntry]:
        return iter(list(self._entries))

    def record(self, entry: HighScoreEntry) -> "HighScoreLedger":
        """Insert ``entry``, re-rank, truncate and persist the whole ledger."""
        self._entries = rank([*self._entries, entry], self.capacity)
        if any(e is entry for e in self._entries):
            logger.info("Recorded high score %d for %s", entry.score, entry.player_name)
        else:
            logger.info("Score %d for %s did not make the top %d", entry.score, entry.player_name, self.capacity)
        try:
            self.save()
            self.last_error = None
        except PersistenceWriteFailure as e:
            logger.warning("%s; keeping high scores in memory only", e)
            self.last_error = e
        return self

    def save(self) -> None:
        """Write all entries atomically, raising PersistenceWriteFailure on error."""
        try:
            self._atomic_write(encode_entries(self._entries))
        except OSError as e:
            raise PersistenceWriteFailure(f"Unable to save high scores to {self.path}: {e}") from e

    def _atomic_write(self, text: str) -> None:
        """Write to a temp file beside the target, fsync, then replace the target."""
        ensure_dir(self.path.parent)
        fd, tmp_name = tempfile.mkstemp(prefix=self.path.name + ".", suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def to_display_rows(self) -> List[DisplayRow]:
        """Ranked rows ``(rank, player_name, moves, elapsed_seconds, score)``."""
        return [
            (i, e.player_name, e.moves, e.elapsed_seconds, e.score)
            for i, e in enumerate(self._entries, start=1)
        ]
