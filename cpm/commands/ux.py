"""Terminal rendering helpers (rich) shared by the command handlers."""
from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table


def render_hint_panel(console: Console, title: str, hints: Sequence[str]) -> None:
    """Render a short next-steps panel."""
    body = "\n".join(f"- {h}" for h in hints)
    console.print(Panel(body, title=title, style="green", padding=(0, 1)))


def render_warning_panel(console: Console, message: str, items: Iterable[str] = ()) -> None:
    text = message
    lines = list(items)
    if lines:
        text += "\n" + "\n".join(f"   - {line}" for line in lines)
    console.print(Panel(text, style="yellow", padding=(0, 1)))


def render_checklist(console: Console, title: str, rows: Mapping[str, bool]) -> None:
    """Two-column present/missing table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("path")
    table.add_column("present", justify="center")
    for label, ok in rows.items():
        table.add_row(label, "✅" if ok else "❌")
    console.print(table)


def render_list(console: Console, title: str, items: Sequence[str], empty: str) -> None:
    if not items:
        console.print(f"[dim]{empty}[/]")
        return
    table = Table(title=title, show_header=False)
    table.add_column("item")
    for item in items:
        table.add_row(item)
    console.print(table)
