"""CLI entry point for gitstamp."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from gitstamp.cache import FileStorageCache, SnapshotInfo
from gitstamp.config import GitstampConfig, load_config
from gitstamp.config.loader import DEFAULT_CONFIG_TEMPLATE

app = typer.Typer(
    name="gitstamp",
    help="Inspect and manage the git creation/modification-time cache.",
)

cache_app = typer.Typer(help="Manage the snapshot cache.")
app.add_typer(cache_app, name="cache")

config_app = typer.Typer(help="Manage gitstamp configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: GitstampConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def _get_config() -> GitstampConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to gitstamp.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    logging.basicConfig(
        level=_LOG_LEVELS[_config.log_level],
        format="%(levelname)s %(name)s: %(message)s",
    )


def _cache_for(repo: str) -> FileStorageCache:
    return FileStorageCache.from_config(_get_config(), Path(repo).resolve())


def _status_style(info: SnapshotInfo) -> str:
    return {"valid": "green", "absent": "dim", "corrupt": "red"}[info.status]


@cache_app.command("info")
def cache_info(
    repo: str = typer.Argument(".", help="Repository the cache belongs to"),
) -> None:
    """Show what is stored in the snapshot cache."""
    cache = _cache_for(repo)
    info = asyncio.run(cache.describe())

    table = Table(title=f"Cache: {info.cache_folder}")
    table.add_column("Snapshot", style="cyan")
    table.add_column("Status")
    table.add_column("Size", justify="right")
    table.add_column("Head")
    table.add_column("Commits", justify="right")
    table.add_column("Trees", justify="right")
    table.add_column("Entries", justify="right")

    for snap in (info.ctime, info.mtime):
        style = _status_style(snap)
        table.add_row(
            snap.name,
            f"[{style}]{snap.status}[/{style}]",
            f"{snap.size_bytes / 1024:.2f} KB" if snap.status != "absent" else "-",
            snap.head[:12] if snap.head else "-",
            str(snap.processed_commits),
            str(snap.processed_trees),
            str(snap.entries),
        )
    rprint(table)

    for snap in (info.ctime, info.mtime):
        if snap.error:
            rprint(f"[red]{snap.name}:[/red] {escape(snap.error)}")

    if info.heads_agree:
        rprint(f"[green]Caught up to[/green] {info.ctime.head}")
    elif "corrupt" in (info.ctime.status, info.mtime.status):
        rprint("[red]Cache is corrupt.[/red] Run 'gitstamp cache clear' to rebuild from scratch.")
    elif info.ctime.status == "absent" and info.mtime.status == "absent":
        rprint("[yellow]No cache yet.[/yellow] The next run will walk the full history.")
    else:
        rprint("[yellow]Snapshots disagree on head.[/yellow] The next run resumes without a known head.")


@cache_app.command("clear")
def cache_clear(
    repo: str = typer.Argument(".", help="Repository the cache belongs to"),
) -> None:
    """Delete both cache snapshots, forcing a full rebuild."""
    cache = _cache_for(repo)
    asyncio.run(cache.clear())
    rprint(f"[green]Cleared[/green] {cache.cache_folder_path}")


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default gitstamp.yaml in current directory."""
    target = Path("gitstamp.yaml")
    if target.exists() and not force:
        rprint("[yellow]gitstamp.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
