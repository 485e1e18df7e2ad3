"""Configuration commands."""

from __future__ import annotations

import typer

from lift_cli.commands.common import get_state, print_json_payload
from lift_cli.core.config import default_config, save_config

app = typer.Typer(help="Inspect or create the config file")


@app.command("show")
def show_command(ctx: typer.Context) -> None:
    """Print the effective configuration."""
    state = get_state(ctx)
    payload = {"path": str(state.config_path), "config": state.config}

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"path\t{state.config_path}")
        for section, values in state.config.items():
            if not isinstance(values, dict):
                typer.echo(f"{section}\t{values}")
                continue
            for key, value in values.items():
                typer.echo(f"{section}.{key}\t{value}")
        return

    state.console.print(f"Config file: {state.config_path}")
    state.console.print_json(data=state.config)


@app.command("init")
def init_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Write a config file populated with the defaults."""
    state = get_state(ctx)
    path = state.config_path

    if path.exists() and not force:
        if state.json_output:
            print_json_payload(state, {"status": "exists", "path": str(path)})
        else:
            typer.echo(f"Config file already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    written = save_config(default_config(), path)

    if state.json_output:
        print_json_payload(state, {"status": "created", "path": str(written)})
        return
    if state.plain_output:
        typer.echo("status\tcreated")
        typer.echo(f"path\t{written}")
        return
    state.console.print(f"Wrote {written}")
