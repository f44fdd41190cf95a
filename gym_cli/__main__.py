"""Entry point for gym-cli."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from gym_cli import __version__
from gym_cli.commands import config as config_commands
from gym_cli.commands import exercises as exercise_commands
from gym_cli.commands import plans as plan_commands
from gym_cli.commands.export import export_command
from gym_cli.commands.workout import finish_command, history_command, timer_command
from gym_cli.core.config import (
    ConfigError,
    config_number,
    default_config_path,
    load_config,
    resolve_data_dir,
)
from gym_cli.core.constants import HISTORY_LIMIT, MAX_WEIGHT
from gym_cli.core.log import configure_logging
from gym_cli.core.state import CLIState
from gym_cli.core.storage import FileStorage
from gym_cli.core.store import PlanStore

app = typer.Typer(
    add_completion=False,
    help="Workout tracker: training plans, weights, sets and history",
    invoke_without_command=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output JSON where available"),
    plain_output: bool = typer.Option(
        False,
        "--plain",
        help="Output plain text (no rich formatting/tables)",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet output"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Initialize global CLI state."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if json_output and plain_output:
        typer.echo("Options --json and --plain are mutually exclusive.")
        raise typer.Exit(code=2)

    cfg_path = (config or default_config_path()).expanduser().resolve()
    try:
        cfg = load_config(cfg_path)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}")
        raise typer.Exit(code=2)

    configure_logging(verbose=verbose, quiet=quiet)

    console = Console(
        quiet=quiet,
        no_color=plain_output,
        log_time=False,
        log_path=False,
    )
    store = PlanStore(
        FileStorage(resolve_data_dir(cfg)),
        max_weight=config_number(cfg, "limits", "max_weight", MAX_WEIGHT),
        history_limit=int(config_number(cfg, "limits", "history_limit", HISTORY_LIMIT)),
    )
    ctx.obj = CLIState(
        json_output=(json_output and not plain_output),
        plain_output=plain_output,
        verbose=verbose,
        quiet=quiet,
        config_path=cfg_path,
        config=cfg,
        console=console,
        store=store,
    )

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


# Top-level commands
app.command("finish")(finish_command)
app.command("history")(history_command)
app.command("timer")(timer_command)
app.command("export")(export_command)
app.add_typer(plan_commands.app, name="plan")
app.add_typer(exercise_commands.app, name="exercise")
app.add_typer(config_commands.app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
