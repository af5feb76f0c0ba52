"""Rich console output: table of generated route helpers."""

from __future__ import annotations

from collections import Counter
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .models import Route


def print_report(routes: List[Route], console: Optional[Console] = None) -> None:
    """Print every generated helper and summary counts."""
    console = console or Console()

    if not routes:
        console.print("[yellow]No routes generated.[/yellow]")
        return

    table = Table(title="Generated Route Helpers")
    table.add_column("Helper", style="bold", max_width=40)
    table.add_column("Method", style="bold cyan", width=8)
    table.add_column("Path", style="white", max_width=48)
    table.add_column("Params", max_width=30)

    for route in routes:
        style = _method_style(route.verb)
        table.add_row(
            route.name,
            f"[{style}]{route.verb}[/{style}]",
            route.path,
            _format_params(route),
        )

    console.print(table)
    console.print()
    _print_summary(console, routes)


def _print_summary(console: Console, routes: List[Route]) -> None:
    total = len(routes)
    verbs = Counter(route.verb for route in routes)
    with_params = sum(1 for route in routes if route.required_params)
    renamed = sum(1 for route in routes if route.action and route.helper.endswith(f"_{route.action}"))

    console.print("[bold]Summary:[/bold]")
    console.print(f"  Total helpers:     {total}")
    for verb, count in sorted(verbs.items()):
        console.print(f"  {verb + ':':<18} {count:>4}  ({count * 100 // total}%)")
    console.print(f"  With path params:  {with_params:>4}")
    if renamed:
        console.print(f"  [yellow]Disambiguated:     {renamed:>4}[/yellow]")
    console.print()


def _method_style(method: str) -> str:
    styles = {
        "GET": "green",
        "POST": "yellow",
        "PUT": "blue",
        "PATCH": "blue",
        "DELETE": "red",
    }
    return styles.get(method, "white")


def _format_params(route: Route) -> str:
    parts = list(route.required_params)
    parts.extend(f"[dim]{name}?[/dim]" for name in route.optional_params
                 if name not in route.required_params)
    return ", ".join(parts) or "-"
