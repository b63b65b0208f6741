"""Status commands for pkupdates CLI.

Commands:
- last-check: Show when the software list was last refreshed
"""

from __future__ import annotations

from datetime import UTC, datetime

import click

from pkupdates.updates.snapshot import timestamp_text
from pkupdates.updates.state import StateStore, now_ms


@click.command("last-check")
@click.option("--raw", is_flag=True, help="Print epoch milliseconds (-1 if never).")
def last_check(raw: bool) -> None:
    """Show when the software list was last refreshed."""
    timestamp = StateStore().load_refresh_timestamp()
    if raw:
        click.echo(str(timestamp))
        return

    click.echo(timestamp_text(timestamp, now_ms()))
    if timestamp >= 0:
        when = datetime.fromtimestamp(timestamp / 1000, tz=UTC)
        click.echo(f"  ({when.isoformat(timespec='seconds')})")
