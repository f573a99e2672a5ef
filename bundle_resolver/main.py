"""bundle-resolver command line interface."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click
from rich.table import Table

from .config import Configuration
from .config import load_configuration
from .console import console
from .driver import Bundler
from .driver import ResolutionResult
from .errors import ConfigurationError
from .logging_setup import init_json_logging
from .utils.error_format import escape_markup
from .utils.error_format import format_error_message


def _result_to_dict(result: ResolutionResult) -> dict:
    return {
        "ok": result.ok,
        "entries": [entry.filename for entry in result.entries],
        "items": [
            {
                "module": item.module_name,
                "filename": item.filename,
                "dependencies": [dependency.filename for dependency in item.dependencies],
            }
            for item in result.items
        ],
        "error": str(result.error) if result.error else None,
    }


def _print_table(result: ResolutionResult, base_path: Path) -> None:
    table = Table(title="Resolved modules", show_lines=False)
    table.add_column("Module", style="cyan")
    table.add_column("File")
    table.add_column("Deps", justify="right")

    for item in sorted(result.items, key=lambda i: i.filename or ""):
        filename = Path(item.filename or "")
        try:
            display = str(filename.relative_to(base_path))
        except ValueError:
            display = str(filename)
        table.add_row(escape_markup(item.module_name), escape_markup(display), str(len(item.dependencies)))

    console.print(table)
    console.print(f"[green]✓ {len(result.items)} files from {len(result.entries)} entries[/green]")


@click.group(invoke_without_command=True)
@click.version_option(package_name="bundle-resolver")
@click.pass_context
def cli(ctx):
    """bundle-resolver - resolve module dependency graphs for bundling."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("entries", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file (default: bundle-resolver.yaml if present)",
)
@click.option("--log-path", default=None, help="JSONL log file")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, ...)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def resolve(entries, config_path, log_path, log_level, as_json):
    """Resolve ENTRIES and every module they require."""
    init_json_logging(log_path, log_level)

    try:
        if config_path is None and Path("bundle-resolver.yaml").exists():
            config_path = Path("bundle-resolver.yaml")
        config = load_configuration(config_path) if config_path else Configuration()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e, include_type=False))}")
        sys.exit(1)

    result = asyncio.run(Bundler(config).resolve_entries(list(entries)))

    if as_json:
        click.echo(json.dumps(_result_to_dict(result), indent=2))
    elif result.ok:
        _print_table(result, config.base_path.resolve())

    if not result.ok:
        if not as_json:
            console.print(f"[red]Error:[/red] {escape_markup(format_error_message(result.error))}")
        sys.exit(1)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
