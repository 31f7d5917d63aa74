from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from .core.events import EventBus
from .core.rng import RNG
from .errors import InputError, InvalidSelection
from .ledger import DisplayRow, HighScoreLedger
from .session import EVENT_VIEW, CellView, Message, SessionController, SessionView
from .settings import DIFFICULTIES, Settings
from .turns import TurnState

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]
SleepFn = Callable[[float], None]

CELL_WIDTH = 5
RESET = "\033[0m"
CLEAR = "\033[2J\033[H"

MESSAGE_TEXT: Dict[Message, str] = {
    Message.MATCH: "MATCH FOUND!",
    Message.NO_MATCH: "Not a match.",
    Message.TIMES_UP: "Time's up! Game over.",
    Message.FINISHED: "Finished!",
}

CANCEL_INPUTS = {"", "c", "cancel"}


def _paint(text: str, color: Optional[int]) -> str:
    if color is None:
        return text
    return f"\033[1;{color}m{text}{RESET}"


def format_cell(cell: CellView, color: bool = False) -> str:
    if cell.state == "hidden":
        return "###".center(CELL_WIDTH)
    face = f"[{cell.symbol}]" if cell.state == "matched" else f" {cell.symbol} "
    padded = face.center(CELL_WIDTH)
    if not color:
        return padded
    left = padded.index(face)
    return padded[:left] + _paint(face, cell.color) + padded[left + len(face):]


def format_board(view: SessionView, color: bool = False) -> List[str]:
    """Render a session snapshot as plain text lines."""
    lines: List[str] = []
    status = (
        f"Player: {view.player_name}  Moves: {view.moves}  "
        f"Matches: {view.matched_pairs}/{view.total_pairs}  Score: {view.score}"
    )
    if view.remaining_seconds is not None:
        status += f"  Time left: {view.remaining_seconds}s"
    lines.append(status)
    lines.append("")
    lines.append("    " + "".join(str(c).center(CELL_WIDTH) for c in range(view.grid_size)))
    lines.append("    " + "-" * (view.grid_size * CELL_WIDTH))
    for r, row in enumerate(view.cells):
        lines.append(f"{r:>2} |" + "".join(format_cell(cell, color) for cell in row))

    if view.message is not None:
        lines.append("")
        lines.append(MESSAGE_TEXT[view.message])
    if view.error is not None:
        lines.append("")
        lines.append(describe_error(view.error))
    if view.warning:
        lines.append("")
        lines.append(f"Warning: {view.warning}")
    return lines


def describe_error(error: Exception) -> str:
    if isinstance(error, InvalidSelection):
        if error.abandoned:
            return f"Invalid second pick ({error.reason}). Start the turn again."
        return f"Invalid pick ({error.reason}). Try again."
    if isinstance(error, InputError):
        return f"{error} Enter the row and column, e.g. '0 1'."
    return str(error)


def format_high_scores(rows: Sequence[DisplayRow]) -> List[str]:
    lines = ["High Scores", ""]
    if not rows:
        lines.append("No high scores yet. Play to add your name!")
        return lines
    lines.append(f"{'#':>3}{'Player':>14}{'Moves':>8}{'Time':>8}{'Score':>10}")
    lines.append("-" * 43)
    for rank, name, moves, elapsed, score in rows:
        lines.append(f"{rank:>3}{name:>14}{moves:>8}{elapsed:>8}{score:>10}")
    return lines


class Console:
    """Line-based terminal front end driving SessionController.

    All I/O is injected so tests can script a whole game: ``input_fn`` reads a
    line for a prompt, ``output_fn`` writes one line, ``sleep_fn`` pauses.
    """

    def __init__(
        self,
        settings: Settings,
        ledger: HighScoreLedger,
        input_fn: Optional[InputFn] = None,
        output_fn: Optional[OutputFn] = None,
        sleep_fn: Optional[SleepFn] = None,
        rng_factory: Callable[[], RNG] = RNG,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings
        self.ledger = ledger
        self.input_fn = input_fn or input
        self.output_fn = output_fn or print
        self.sleep_fn = sleep_fn or time.sleep
        self.rng_factory = rng_factory
        self.clock = clock

    @property
    def color(self) -> bool:
        return self.settings.display.color

    def _write(self, lines: Sequence[str]) -> None:
        if self.color:
            self.output_fn(CLEAR)
        for line in lines:
            self.output_fn(line)

    def _ask(self, prompt: str) -> str:
        return self.input_fn(prompt)

    def _pause(self, seconds: float) -> None:
        if seconds > 0:
            self.sleep_fn(seconds)

    def _on_view(self, _event: str, payload: Dict[str, Any]) -> None:
        self._write(format_board(payload["view"], color=self.color))

    # Screens

    def play(self, grid_size: Optional[int] = None, timed: Optional[bool] = None) -> SessionView:
        """Play one full session and return its final view."""
        name = self._ask("Enter your name: ")
        events = EventBus()
        events.on(EVENT_VIEW, self._on_view)
        controller = SessionController(
            self.settings, self.ledger, rng=self.rng_factory(), clock=self.clock, events=events,
        )
        controller.start(name, grid_size=grid_size, timed=timed)

        display = self.settings.display
        while not controller.is_complete:
            if controller.check_timeout():
                break
            first = controller.resolver.state is TurnState.AWAITING_FIRST_PICK
            if first:
                text = self._ask("Enter first card (row col): ")
            else:
                text = self._ask("Enter second card (row col, blank to cancel): ")
                if text.strip().lower() in CANCEL_INPUTS:
                    controller.cancel()
                    continue
            view = controller.submit(text)
            if view.state is TurnState.RESOLVING:
                self._pause(display.reveal_delay)
                controller.resolve()
                self._pause(display.message_delay)

        final = controller.view()
        self._ask("Press Enter to continue...")
        return final

    def show_high_scores(self) -> None:
        self._write(format_high_scores(self.ledger.to_display_rows()))
        self._ask("Press Enter to return...")

    def run_menu(self) -> None:
        limit = self.settings.game.time_limit_seconds
        menu = [
            "MEMOY!! - A Memory Match Game",
            "",
            "1) New Game (choose difficulty)",
            f"2) Timed Game ({DIFFICULTIES['hard']}x{DIFFICULTIES['hard']}, {limit} seconds)",
            "3) High Scores",
            "4) Exit",
            "",
        ]
        while True:
            self._write(menu)
            choice = self._ask("Enter choice: ").strip()
            if choice == "1":
                self.output_fn("Choose Difficulty:")
                self.output_fn(f"  1) Easy ({DIFFICULTIES['easy']} x {DIFFICULTIES['easy']})")
                self.output_fn(f"  2) Hard ({DIFFICULTIES['hard']} x {DIFFICULTIES['hard']})")
                level = self._ask("Enter choice: ").strip()
                if level == "1":
                    self.play(DIFFICULTIES["easy"], timed=False)
                elif level == "2":
                    self.play(DIFFICULTIES["hard"], timed=False)
            elif choice == "2":
                self.play(DIFFICULTIES["hard"], timed=True)
            elif choice == "3":
                self.show_high_scores()
            elif choice == "4":
                break
            else:
                logger.debug("Ignoring menu choice %r", choice)
        self.output_fn("Thanks for playing MEMOY!! See you next time!")
