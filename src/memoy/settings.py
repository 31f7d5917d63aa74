from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .paths import default_ledger_path

logger = logging.getLogger(__name__)

# Named difficulties offered by the menu and the CLI.
DIFFICULTIES: Dict[str, int] = {"easy": 2, "hard": 4}

DEFAULT_SYMBOLS: List[str] = [
    "S", "C", "H", "D", "P", "T", "R", "Q",
    "*", "&", "@", "#", "$", "%", "!", "?", "1", "2", "3", "4",
    "A", "B", "E", "F", "G", "J", "K", "L",
]
DEFAULT_COLORS: List[int] = [36, 35, 33, 32, 34, 31]

_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


def _as_bool(value: Any, key: str) -> bool:
    """Accept YAML booleans, 0/1 and the usual on/off words; reject anything else."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ConfigError(f"{key} must be true or false, got {value!r}")


@dataclass
class GameSettings:
    grid_size: int = 4
    timed: bool = False
    time_limit_seconds: int = 120
    default_player_name: str = "Player"
    symbols: List[str] = field(default_factory=lambda: list(DEFAULT_SYMBOLS))
    colors: List[int] = field(default_factory=lambda: list(DEFAULT_COLORS))


@dataclass
class LedgerSettings:
    capacity: int = 10
    path: Optional[Path] = None

    def resolved_path(self) -> Path:
        return self.path if self.path is not None else default_ledger_path()


@dataclass
class DisplaySettings:
    color: bool = True
    reveal_delay: float = 1.0
    message_delay: float = 0.7


@dataclass
class Settings:
    game: GameSettings = field(default_factory=GameSettings)
    ledger: LedgerSettings = field(default_factory=LedgerSettings)
    display: DisplaySettings = field(default_factory=DisplaySettings)

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")
        return data

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Build validated settings from a nested dict; missing keys keep defaults."""
        try:
            game = GameSettings(**data.get("game", {}))
            ledger = LedgerSettings(**data.get("ledger", {}))
            display = DisplaySettings(**data.get("display", {}))
        except TypeError as e:
            raise ConfigError(f"Unknown settings key: {e}") from e
        settings = Settings(game=game, ledger=ledger, display=display)
        settings._coerce()
        settings.validate()
        return settings

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "Settings":
        """Load settings from built-in defaults and optional user override file.

        If user_path is provided and exists, overlay values onto defaults.
        """
        try:
            with resources.files("memoy.config").joinpath("default_settings.yaml").open("r", encoding="utf-8") as f:
                default_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            default_data = Settings().to_dict()

        user_data = {}
        if user_path is not None:
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)

        merged = cls._deep_merge(default_data, user_data)
        settings = cls.from_dict(merged)
        logger.debug("Settings merged: %s", settings)
        return settings

    def _coerce(self) -> None:
        try:
            self.game.grid_size = int(self.game.grid_size)
            self.game.time_limit_seconds = int(self.game.time_limit_seconds)
            self.game.timed = _as_bool(self.game.timed, "game.timed")
            self.game.default_player_name = str(self.game.default_player_name or "Player")
            self.game.symbols = [str(s) for s in self.game.symbols]
            self.game.colors = [int(c) for c in self.game.colors]
            self.ledger.capacity = int(self.ledger.capacity)
            if self.ledger.path is not None:
                self.ledger.path = Path(self.ledger.path).expanduser()
            self.display.color = _as_bool(self.display.color, "display.color")
            self.display.reveal_delay = float(self.display.reveal_delay)
            self.display.message_delay = float(self.display.message_delay)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid settings value: {e}") from e

    def validate(self) -> None:
        g = self.game
        if g.grid_size < 1 or (g.grid_size * g.grid_size) % 2:
            raise ConfigError(f"grid_size must be positive with an even cell count, got {g.grid_size}")
        if g.time_limit_seconds < 1:
            raise ConfigError("time_limit_seconds must be at least 1")
        if len(set(g.symbols)) != len(g.symbols):
            raise ConfigError("symbols must be unique")
        if any(not s or any(ch.isspace() for ch in s) for s in g.symbols):
            raise ConfigError("symbols must be non-empty and contain no whitespace")
        if not g.colors:
            raise ConfigError("colors must not be empty")
        if self.ledger.capacity < 1:
            raise ConfigError("ledger capacity must be at least 1")
        if self.display.reveal_delay < 0 or self.display.message_delay < 0:
            raise ConfigError("display delays must not be negative")

    def to_dict(self) -> Dict[str, Any]:
        ledger = dataclasses.asdict(self.ledger)
        ledger["path"] = str(self.ledger.path) if self.ledger.path is not None else None
        return {
            "game": dataclasses.asdict(self.game),
            "ledger": ledger,
            "display": dataclasses.asdict(self.display),
        }

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        logger.info("Saved settings to %s", path)
