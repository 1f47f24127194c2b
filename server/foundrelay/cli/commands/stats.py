"""Stats command - show store statistics of a running server."""

import cyclopts

from foundrelay.cli.client import get_json
from foundrelay.cli.console import get_console

app = cyclopts.App(name="stats", help="Show store statistics")


@app.default
def stats() -> None:
    """Show inserted, expired and active counts plus uptime."""
    console = get_console()
    data = get_json("/api/stats")

    console.print(f"[bold]Active:[/bold] {data.get('active', 0):,}")
    console.print(f"[bold]Inserted:[/bold] {data.get('totalInserted', 0):,}")
    console.print(f"[bold]Expired:[/bold] {data.get('totalExpired', 0):,}")
    console.print(f"[bold]Uptime:[/bold] {data.get('uptimeFormatted', '?')}")
