"""Root CLI group for marketctl with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from marketctl import __version__
from marketctl.commands import register_commands
from marketctl.commands._context import AppContext
from marketctl.config.settings import MarketSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="marketctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the marketplace data (default: config dir or cwd).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    root: Path | None,
) -> None:
    """marketctl — marketplace order and escrow CLI."""
    ctx.ensure_object(dict)
    settings = MarketSettings.from_cli(
        config_path=config_path,
        root=root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
