"""
CLI output helpers.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

from rich.console import Console
from rich.table import Table

from proactor.dispatch import Dispatcher

console = Console()
err_console = Console(stderr=True)


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert stats/info objects, dataclasses or dicts to a plain dict."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def output_data(data: Any, *, as_json: bool = False, title: str = "", out: Console | None = None) -> None:
    """Render a dict-like object as JSON or key-value pairs."""
    out = out or console
    payload = _to_dict(data)
    if as_json:
        out.print_json(json.dumps(payload, default=str))
        return
    if title:
        out.print(f"[bold]{title}[/bold]")
    for k, v in payload.items():
        out.print(f"  [cyan]{k}[/cyan]: {v}")


def print_slots(dispatcher: Dispatcher, *, out: Console | None = None) -> None:
    """Render slot occupancy and queue depth as a Rich table."""
    out = out or console
    table = Table(title=f"{dispatcher.name} ({dispatcher.state.value})", pad_edge=False)
    table.add_column("slot", justify="right")
    table.add_column("task")
    for index, sequence_id in enumerate(dispatcher.slot_snapshot()):
        table.add_row(str(index), "[dim]free[/dim]" if sequence_id is None else str(sequence_id))
    out.print(table)

    pending = dispatcher.pending_ids()
    out.print(f"[dim]pending:[/dim] {len(pending)}" + (f"  (next: {pending[0]})" if pending else ""))
