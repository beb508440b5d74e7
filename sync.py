#!/usr/bin/env python3
"""
Postman → Readme Sync CLI

Usage:
    python sync.py                  # Generate Markdown and publish to Readme
    python sync.py --no-publish     # Generate Markdown only
    python sync.py --dry-run        # Preview Readme changes without sending them
    python sync.py status           # Show sync status
    python sync.py clean            # Remove generated Markdown files
"""

import sys
import traceback

import click
from dotenv import load_dotenv
from rich.console import Console

from postman_sync import __version__
from postman_sync.config import Config
from postman_sync.errors import CollectionParseError
from postman_sync.sync_engine import SyncEngine

console = Console()


def _load_config() -> Config:
    load_dotenv()
    return Config.from_env()


@click.group(invoke_without_command=True)
@click.option("--no-publish", is_flag=True, help="Generate Markdown without publishing to Readme")
@click.option("--dry-run", is_flag=True, help="Preview Readme changes without sending them")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.pass_context
def cli(ctx, no_publish: bool, dry_run: bool, debug: bool):
    """
    Postman → Readme Sync

    Generates Markdown pages from a Postman collection and synchronizes
    them with Readme.
    """
    ctx.ensure_object(dict)
    ctx.obj["no_publish"] = no_publish
    ctx.obj["dry_run"] = dry_run
    ctx.obj["debug"] = debug

    # If no subcommand, run sync
    if ctx.invoked_subcommand is None:
        ctx.invoke(sync)


@cli.command()
@click.pass_context
def sync(ctx):
    """Generate Markdown pages and synchronize them with Readme."""
    debug = ctx.obj.get("debug", False)

    try:
        config = _load_config()

        # Apply CLI overrides
        if ctx.obj.get("dry_run"):
            config.dry_run = True
        if debug:
            config.debug = True

        engine = SyncEngine(config)
        result = engine.sync(publish=not ctx.obj.get("no_publish", False))

        # Exit with error code if sync failed
        if not result.success:
            sys.exit(1)

    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        console.print("\n[dim]Make sure you have created a .env file or exported the variables.[/dim]")
        sys.exit(1)
    except CollectionParseError as e:
        console.print(f"[red]Collection error:[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Sync cancelled.[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if debug:
            traceback.print_exc()
        sys.exit(1)


@cli.command()
def status():
    """Show current sync status."""
    try:
        config = _load_config()
        SyncEngine(config).status()
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)


@cli.command()
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
def clean(yes: bool):
    """Remove generated Markdown files."""
    try:
        config = _load_config()
        SyncEngine(config).clean(confirm=yes)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)


@cli.command()
def version():
    """Show version information."""
    console.print(f"Postman → Readme Sync v{__version__}")


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
