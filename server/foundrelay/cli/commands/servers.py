"""Servers command - list active found servers."""

import cyclopts

from foundrelay.cli.client import get_json
from foundrelay.cli.console import get_console

app = cyclopts.App(name="servers", help="List active found servers")

COLUMNS = [
    ("displayName", "Name"),
    ("valueFormatted", "Value"),
    ("mutation", "Mutation"),
    ("rarity", "Rarity"),
    ("players", "Players"),
    ("jobId", "Job ID"),
]


@app.default
def servers(min_value: str | None = None) -> None:
    """List active servers, optionally only those worth at least MIN_VALUE.

    Args:
        min_value: Minimum value such as 1500000 or 1.5M.
    """
    console = get_console()
    if min_value is None:
        rows = get_json("/api/servers")
    else:
        rows = get_json("/api/servers/filter", params={"minValue": min_value})

    if not rows:
        console.print("[dim]No active servers[/dim]")
        return
    console.table(rows, COLUMNS, title=f"{len(rows)} active server(s)")
