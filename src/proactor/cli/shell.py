"""
Interactive shell over a running dispatcher.

Each command line maps to one or more submissions; results and completion
messages are printed from callbacks, i.e. from the dispatcher thread, while
the prompt stays responsive.

Commands::

    help      Display this help text
    short     Runs a 5-second process
    shortres  Runs a 5-second process that returns a result
    long      Runs a 10-second process
    longres   Runs a 10-second process that returns a result
    random    Queues 20 processes of varying durations
    status    Shows slot occupancy and pending work
    quit      Stops the dispatcher (drains queued work) and exits
"""

from __future__ import annotations

import random
from collections.abc import Callable

from rich.console import Console

from proactor.cli.utils import console, print_slots
from proactor.cli.workload import timed_operation
from proactor.core.result import Err, Ok, Result
from proactor.dispatch import Dispatcher

SHORT_MS = 5_000
LONG_MS = 10_000
RANDOM_COUNT = 20
RANDOM_MIN_MS = 1_000
RANDOM_MAX_MS = 10_000

HELP_ROWS = [
    ("help", "Display this help text"),
    ("short", "Runs a 5-second process"),
    ("shortres", "Runs a 5-second process that returns a result"),
    ("long", "Runs a 10-second process"),
    ("longres", "Runs a 10-second process that returns a result"),
    ("random", f"Queues {RANDOM_COUNT} processes of varying durations"),
    ("status", "Shows slot occupancy and pending work"),
    ("quit", "Ends the program"),
]


class ShellSession:
    """Maps shell input lines to dispatcher submissions.

    Args:
        dispatcher: A started dispatcher. ``quit`` stops it.
        scale: Multiplier applied to every duration (``0.001`` turns
            seconds into milliseconds).
        out: Console to print to.
        rng: Random source for the ``random`` command.
    """

    prompt = ">> "

    def __init__(
        self,
        dispatcher: Dispatcher,
        *,
        scale: float = 1.0,
        out: Console | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.scale = scale
        self.out = out or console
        self.rng = rng or random.Random()
        self._commands: dict[str, Callable[[], bool]] = {
            "help": self._help,
            "short": lambda: self._queue_action(SHORT_MS),
            "shortres": lambda: self._queue_result(SHORT_MS, 5),
            "long": lambda: self._queue_action(LONG_MS),
            "longres": lambda: self._queue_result(LONG_MS, 10),
            "random": self._queue_random,
            "status": self._status,
            "quit": self._quit,
        }

    def handle(self, line: str) -> bool:
        """Execute one input line. Returns False once the session is over."""
        command = self._commands.get(line.strip().lower(), self._help)
        return command()

    def run(self, read_line: Callable[[str], str] = input) -> None:
        """Prompt/dispatch loop; EOF and Ctrl-C behave like ``quit``."""
        self._help()
        while True:
            try:
                line = read_line(self.prompt)
            except (EOFError, KeyboardInterrupt):
                self.out.print()
                self._quit()
                return
            if not self.handle(line):
                return

    # ── Commands ─────────────────────────────────────────────────────────

    def _help(self) -> bool:
        self.out.print("[bold]Proactor Pattern Example[/bold]")
        self.out.print()
        self.out.print("Use the following commands:")
        for name, text in HELP_ROWS:
            self.out.print(f"  [cyan]{name:<9}[/cyan] : {text}")
        self.out.print()
        return True

    def _scaled(self, duration_ms: int) -> int:
        return max(0, round(duration_ms * self.scale))

    def _queue_action(self, duration_ms: int) -> bool:
        self.dispatcher.submit_action(timed_operation(self._scaled(duration_ms)))
        self.out.print(f"{duration_ms // 1000} seconds process queued")
        return True

    def _queue_result(self, duration_ms: int, value: int) -> bool:
        self.dispatcher.submit(
            timed_operation(self._scaled(duration_ms), result=value),
            self._print_result,
        )
        self.out.print(f"{duration_ms // 1000} seconds process with result queued")
        return True

    def _queue_random(self) -> bool:
        for _ in range(RANDOM_COUNT):
            duration_ms = self.rng.randint(RANDOM_MIN_MS, RANDOM_MAX_MS)
            self.dispatcher.submit_action(
                timed_operation(self._scaled(duration_ms)),
                self._finished_message(duration_ms),
            )
        self.out.print(f"Queued {RANDOM_COUNT} tasks")
        return True

    def _status(self) -> bool:
        print_slots(self.dispatcher, out=self.out)
        return True

    def _quit(self) -> bool:
        self.out.print("Stopping dispatcher. Hang on...")
        self.dispatcher.stop()
        stats = self.dispatcher.stats()
        self.out.print(f"Done: {stats.completed} completed, {stats.failed} failed")
        return False

    # ── Callbacks (dispatcher thread) ────────────────────────────────────

    def _print_result(self, outcome: Result[int]) -> None:
        match outcome:
            case Ok(value):
                self.out.print(f"RESULT: {value}")
            case Err(error):
                self.out.print(f"[red]FAILED: {type(error).__name__}: {error}[/red]")

    def _finished_message(self, duration_ms: int) -> Callable[[], None]:
        def callback() -> None:
            self.out.print(f"Task with duration {duration_ms} ms finished")

        return callback
