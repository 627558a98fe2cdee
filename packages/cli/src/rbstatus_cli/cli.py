"""CLI entry point for rbstatus.

Commands:
  notify   — post-build: report the build result to Review Board
  setup    — pre-build: apply the review request's diff and mark it pending
  servers  — list, add and remove Review Board server configurations
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler

from rbstatus_cli.commands.notify import notify_cmd
from rbstatus_cli.commands.servers import servers_cmd
from rbstatus_cli.commands.setup import setup_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the configured store from .rbstatus.yml settings.

    Store selection:
      store: file   → FileStore   (JSON file at store_path)
      store: sqlite → SQLiteStore (database at store_path)
      store: noop   → NoOpStore   (in-memory only)

    This factory lives in cli.py so neither rbstatus_core nor rbstatus_store
    know about the CLI config format.
    """
    store_type = config.get("store", "file")

    if store_type == "noop":
        from rbstatus_store.noop import NoOpStore

        return NoOpStore()

    if store_type == "sqlite":
        from rbstatus_store.sqlite import SQLiteStore

        return SQLiteStore(db_path=config.get("store_path") or ".rbstatus.db")

    if store_type != "file":
        console.print(f"[yellow]Unknown store {store_type!r}. Falling back to the JSON file store.[/yellow]")

    from rbstatus_store.file import FileStore

    return FileStore(path=config.get("store_path") or ".rbstatus-servers.json")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("rbstatus"),
    prog_name="rbstatus",
)
@click.option(
    "--config",
    "config_path",
    default=".rbstatus.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="RBSTATUS_CONFIG",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
    envvar="RBSTATUS_LOG_LEVEL",
)
@click.pass_context
def main(ctx: click.Context, config_path: str, log_level: str):
    """Report CI build status to Review Board."""
    from rbstatus_cli.auth import build_credential_store
    from rbstatus_core.config import load_config
    from rbstatus_core.registry import ServerRegistry

    _configure_logging(log_level)
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except (ValueError, OSError, yaml.YAMLError) as e:
        raise click.UsageError(f"Could not load {config_path}: {e}")

    store = _build_store(config)
    registry = ServerRegistry(store=store)
    registry.load()

    ctx.obj["config"] = config
    ctx.obj["store"] = store
    ctx.obj["registry"] = registry
    ctx.obj["credentials"] = build_credential_store(config)
    ctx.call_on_close(store.close)


main.add_command(notify_cmd)
main.add_command(setup_cmd)
main.add_command(servers_cmd)
