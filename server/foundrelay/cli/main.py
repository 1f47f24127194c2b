"""Main CLI application using Cyclopts.

``serve`` runs the API in-process; the other commands are thin HTTP
clients against a running server.
"""

import cyclopts

from foundrelay.cli.commands import remove, serve, servers, stats

app = cyclopts.App(
    name="foundrelay",
    help="foundrelay - found-server relay",
)

app.command(serve.app, name="serve")
app.command(stats.app, name="stats")
app.command(servers.app, name="servers")
app.command(remove.app, name="remove")
