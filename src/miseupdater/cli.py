import logging

from rich import print
from typer import Context, Exit, Option, Typer
from typing_extensions import Annotated

from miseupdater import __version__
from miseupdater.commands import ui, updates

app = Typer(
    no_args_is_help=False,
)

# Setup commands from modules
app.add_typer(updates.app, name="updates")
app.add_typer(ui.app, name="ui")


def version_callback(value: bool) -> None:
    if value:
        print(f"Mise Updater version [green]{__version__}[/green]")
        raise Exit()


@app.command()
def version() -> None:
    """Show the version and exit."""
    version_callback(True)


# The default command fall through call back
# We use this to start the UI if no command is given.
@app.callback(invoke_without_command=True)
def cli(
    ctx: Context,
    show_version: Annotated[
        bool,
        Option(
            "--version",
            help="Show the version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """
    Mise Updater CLI

    Check for and install mise and Homebrew updates.
    """
    if ctx.invoked_subcommand is None:
        logger = logging.getLogger(__name__)
        logger.info("No command given, starting UI")

        ui.start_ui()
