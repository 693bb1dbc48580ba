"""Limiter commands: validate, simulate."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from keylimiter.cli._helpers import console


def validate(
    config_file: Annotated[Path, typer.Argument(help="Path to limiter.yaml")],
) -> None:
    """Validate a limiter configuration file."""
    from keylimiter._yaml import load_config
    from keylimiter.errors import ConfigLoadError

    try:
        config = load_config(config_file)
    except ConfigLoadError as e:
        console.print(f"[red]Invalid:[/red] {e}")
        raise typer.Exit(1) from None

    table = Table(title=f"Limiter: {config_file.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Capacity", str(config.capacity))
    table.add_row("Refill Interval", f"{config.refill_interval}s")
    console.print(table)
    console.print("[green]Valid[/green]")


def simulate(
    config_file: Annotated[
        Path | None, typer.Option("--config", "-c", help="Load settings from limiter.yaml")
    ] = None,
    capacity: Annotated[int | None, typer.Option(help="Requests admitted per key")] = None,
    refill_interval: Annotated[
        float | None, typer.Option("--interval", help="Decay cadence in seconds")
    ] = None,
    key: Annotated[str, typer.Option(help="Key to request tokens for")] = "id",
    requests: Annotated[int, typer.Option(help="Number of token requests")] = 5,
    pause: Annotated[float, typer.Option(help="Seconds to wait between requests")] = 0.0,
) -> None:
    """Request tokens for one key and report which were admitted."""
    from keylimiter._yaml import load_config
    from keylimiter.config import get_config_path
    from keylimiter.errors import ConfigLoadError, InvalidConfigurationError, LimiterError
    from keylimiter.limiter import Limiter
    from keylimiter.options import with_capacity, with_refill_interval

    options = []
    config_file = config_file or get_config_path()
    if config_file is not None:
        try:
            config = load_config(config_file)
        except ConfigLoadError as e:
            console.print(f"[red]Invalid:[/red] {e}")
            raise typer.Exit(1) from None
        options += [with_capacity(config.capacity), with_refill_interval(config.refill_interval)]
    if capacity is not None:
        options.append(with_capacity(capacity))
    if refill_interval is not None:
        options.append(with_refill_interval(refill_interval))

    try:
        limiter = Limiter.new(*options)
    except InvalidConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    title = f"Key: {key} (capacity {limiter.capacity}, every {limiter.refill_interval}s)"
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Result")
    table.add_column("Used", justify="right")
    table.add_column("Token", style="dim")

    admitted = 0
    with limiter:
        for i in range(1, requests + 1):
            try:
                token = limiter.request_token(key)
            except LimiterError as e:
                table.add_row(str(i), f"[red]denied[/red] ({e})", str(limiter.count(key)), "")
            else:
                admitted += 1
                table.add_row(
                    str(i), "[green]admitted[/green]", str(limiter.count(key)), token[:12]
                )
            if pause > 0 and i < requests:
                time.sleep(pause)

    console.print(table)
    console.print(f"Admitted {admitted}/{requests}")
