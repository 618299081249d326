"""
Root Typer application for the proactor CLI.

Commands::

    proactor shell   — interactive prompt over a running dispatcher
    proactor run     — submit a batch of random-duration tasks and report
"""

from __future__ import annotations

import random
from enum import Enum

import typer
from typer import Typer

from proactor.cli.shell import ShellSession
from proactor.cli.utils import console, err_console, output_data
from proactor.cli.workload import ConcurrencyTracker, timed_operation
from proactor.core.errors import ProactorError
from proactor.core.result import Result
from proactor.dispatch import Dispatcher
from proactor.logging import configure_logging


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


app = Typer(
    name="proactor",
    help="proactor: bounded-concurrency task dispatcher.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("proactor")
        except Exception:
            from proactor import __version__ as v
        typer.echo(f"proactor {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """proactor CLI: run work through a bounded-concurrency dispatcher."""


@app.command("shell")
def shell(
    workers: int | None = typer.Option(None, "--workers", "-w", help="Worker slots (default: settings)"),  # noqa: UP007
    scale: float = typer.Option(1.0, "--scale", help="Multiplier applied to every task duration"),
    log_level: LogLevel | None = typer.Option(None, "--log-level", case_sensitive=False, help="Log level (default: settings)"),  # noqa: UP007
) -> None:
    """Start an interactive shell.

    Example::

        proactor shell --workers 3
        proactor shell --scale 0.1 --log-level DEBUG
    """
    configure_logging(level=log_level.value if log_level else None, force=True)

    try:
        dispatcher = Dispatcher(worker_count=workers, name="shell")
    except ProactorError as exc:
        err_console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)

    dispatcher.start()
    ShellSession(dispatcher, scale=scale).run(console.input)


@app.command("run")
def run(
    tasks: int = typer.Option(20, "--tasks", "-n", min=1, help="Number of tasks to submit"),
    workers: int | None = typer.Option(None, "--workers", "-w", help="Worker slots (default: settings)"),  # noqa: UP007
    min_ms: int = typer.Option(1000, "--min-ms", min=0, help="Shortest task duration"),
    max_ms: int = typer.Option(10000, "--max-ms", min=0, help="Longest task duration"),
    fail_every: int = typer.Option(0, "--fail-every", min=0, help="Make every Nth task fail (0 = never)"),
    seed: int | None = typer.Option(None, "--seed", help="Random seed for durations"),  # noqa: UP007
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON"),
    log_level: LogLevel | None = typer.Option(None, "--log-level", case_sensitive=False, help="Log level (default: settings)"),  # noqa: UP007
) -> None:
    """Submit a batch of random-duration tasks, wait for all, print a summary.

    Example::

        proactor run --tasks 10 --workers 3 --min-ms 100 --max-ms 500
        proactor run --fail-every 4 --json
    """
    if min_ms > max_ms:
        raise typer.BadParameter("--min-ms must not exceed --max-ms")

    configure_logging(level=log_level.value if log_level else None, force=True)

    rng = random.Random(seed)
    tracker = ConcurrencyTracker()
    failures: list[str] = []

    def on_done(outcome: Result) -> None:
        if outcome.is_err():
            failures.append(str(outcome.error))

    try:
        dispatcher = Dispatcher(worker_count=workers, name="run")
    except ProactorError as exc:
        err_console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)

    with dispatcher:
        for i in range(tasks):
            fail = fail_every > 0 and (i + 1) % fail_every == 0
            operation = timed_operation(rng.randint(min_ms, max_ms), result=i, fail=fail, tracker=tracker)
            dispatcher.submit(operation, on_done)

    stats = dispatcher.stats()
    summary = {
        "workers": dispatcher.worker_count,
        "submitted": stats.submitted,
        "completed": stats.completed,
        "failed": stats.failed,
        "peak_concurrency": tracker.peak,
        "elapsed_seconds": round(stats.uptime_seconds, 3),
    }
    output_data(summary, as_json=as_json, title="Run summary")
    if failures and not as_json:
        for message in failures:
            err_console.print(f"[yellow]failed:[/yellow] {message}")
