"""Typer CLI for keylimiter."""

from __future__ import annotations

from typing import Annotated

import typer

from keylimiter.cli._helpers import console

app = typer.Typer(
    name="keylimiter",
    help="In-process per-key rate limiter.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        from keylimiter import __version__

        console.print(f"keylimiter {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging"),
    ] = False,
) -> None:
    """keylimiter: per-key admission control with background decay."""
    from keylimiter._log import setup_logging

    setup_logging(verbose=verbose)


from keylimiter.cli.limiter_cmd import simulate, validate  # noqa: E402

app.command()(validate)
app.command()(simulate)
