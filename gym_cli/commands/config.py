"""Configuration commands."""

from __future__ import annotations

import typer

from gym_cli.commands.common import emit, get_state, print_json_payload
from gym_cli.core.config import resolve_data_dir, save_config

app = typer.Typer(help="Inspect and initialize configuration")


@app.command("show")
def show_command(ctx: typer.Context) -> None:
    """Print the effective configuration."""
    state = get_state(ctx)
    payload = {
        "config_path": str(state.config_path),
        "data_dir": str(resolve_data_dir(state.config)),
        "config": state.config,
    }
    if state.json_output or not state.plain_output:
        print_json_payload(state, payload)
        return
    typer.echo(f"config_path\t{payload['config_path']}")
    typer.echo(f"data_dir\t{payload['data_dir']}")
    for section, values in state.config.items():
        if isinstance(values, dict):
            for key, value in values.items():
                typer.echo(f"{section}.{key}\t{value}")


@app.command("init")
def init_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Write the effective configuration to the config file."""
    state = get_state(ctx)
    path = state.config_path
    if path.exists() and not force:
        emit(
            state,
            {"status": "exists", "path": str(path)},
            f"Config already exists at {path} (use --force to overwrite)",
            [("status", "exists"), ("path", path)],
        )
        return

    written = save_config(state.config, path)
    emit(
        state,
        {"status": "written", "path": str(written)},
        f"Wrote config to {written}",
        [("status", "written"), ("path", written)],
    )
