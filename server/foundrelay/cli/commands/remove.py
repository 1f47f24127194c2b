"""Remove command - drop every entry reported for a job id."""

from urllib.parse import quote

import cyclopts

from foundrelay.cli.client import request_json
from foundrelay.cli.console import get_console

app = cyclopts.App(name="remove", help="Remove the entries for a job id")


@app.default
def remove(job_id: str) -> None:
    """Remove all active or expired entries for JOB_ID.

    Args:
        job_id: Job id the entries were reported under.
    """
    console = get_console()
    data = request_json("DELETE", f"/api/servers/{quote(job_id, safe='')}")
    removed = data.get("removed", [])
    noun = "entry" if len(removed) == 1 else "entries"
    console.success(f"Removed {len(removed)} {noun} for {job_id}")
