# Copyright (c) Syntropy Systems
"""Main CLI entry point for simscope."""

import logging

import typer

from simscope.cli.analyze import analyze, diff
from simscope.cli.init_cmd import init
from simscope.cli.profileset import profileset_app

app = typer.Typer(
    name="simscope",
    help=(
        "Rotation analysis for combat simulator output. Surface rotation "
        "signals, catch DPS regressions."
    ),
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register commands
_ = app.command()(init)
_ = app.command()(analyze)
_ = app.command()(diff)

# Register profileset sub-app
app.add_typer(profileset_app, name="profileset")


if __name__ == "__main__":
    app()
