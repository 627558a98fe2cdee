"""servers command group — manage the Review Board server list."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from rbstatus_core.registry import ServerConfiguration
from rbstatus_core.urls import is_valid_url, urls_equivalent

console = Console()


@click.group("servers")
def servers_cmd():
    """List, add and remove Review Board server configurations."""


@servers_cmd.command("list")
@click.pass_context
def list_cmd(ctx):
    """Show the configured Review Board servers."""
    configurations = ctx.obj["registry"].get_all()
    if not configurations:
        console.print("[yellow]No Review Board servers configured. Add one with `rbstatus servers add`.[/yellow]")
        return

    table = Table(title="Review Board Servers", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", width=4)
    table.add_column("Server URL")
    table.add_column("Credential ID")

    for i, c in enumerate(configurations, start=1):
        table.add_row(str(i), c.server_url, c.credential_id)

    console.print(table)


@servers_cmd.command("add")
@click.argument("server_url")
@click.argument("credential_id")
@click.pass_context
def add_cmd(ctx, server_url: str, credential_id: str):
    """Add SERVER_URL, using the token stored under CREDENTIAL_ID.

    An existing entry for an equivalent URL is replaced.
    """
    if not is_valid_url(server_url):
        raise click.UsageError(f"Invalid URL: {server_url}")
    if not credential_id.strip():
        raise click.UsageError("CREDENTIAL_ID must not be empty.")

    registry = ctx.obj["registry"]
    kept = [c for c in registry.get_all() if not _same_server(c.server_url, server_url)]
    kept.append(ServerConfiguration(server_url=server_url.strip(), credential_id=credential_id.strip()))
    registry.replace_all(kept)
    console.print(f"[green]Added Review Board server {server_url}[/green]")


@servers_cmd.command("remove")
@click.argument("server_url")
@click.pass_context
def remove_cmd(ctx, server_url: str):
    """Remove every entry equivalent to SERVER_URL."""
    registry = ctx.obj["registry"]
    current = registry.get_all()
    kept = [c for c in current if not _same_server(c.server_url, server_url)]
    if len(kept) == len(current):
        raise click.UsageError(f"No Review Board server configured for {server_url}")
    registry.replace_all(kept)
    console.print(f"[green]Removed Review Board server {server_url}[/green]")


def _same_server(stored: str, candidate: str) -> bool:
    # Malformed stored entries never match, so they are only removed by
    # passing the exact same string.
    if not is_valid_url(stored) or not is_valid_url(candidate):
        return stored == candidate
    return urls_equivalent(stored, candidate)
