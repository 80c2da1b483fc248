"""simscope profileset subcommand group."""

import typer

from simscope.cli.profileset.check import check
from simscope.cli.profileset.save_golden import save_golden
from simscope.cli.profileset.show import show

profileset_app = typer.Typer(
    name="profileset",
    help="Profileset comparison and golden regression checks.",
    no_args_is_help=True,
)

# Register subcommands
profileset_app.command()(show)
profileset_app.command(name="save-golden")(save_golden)
profileset_app.command()(check)
