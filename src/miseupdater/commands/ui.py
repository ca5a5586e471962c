import logging

import typer

from miseupdater import app_config
from miseupdater.ui.app import MiseUpdaterUi
from miseupdater.updater import UpdaterModel

app = typer.Typer(
    help="Mise Updater UI",
    no_args_is_help=True,
)


@app.callback()
def ui_callback() -> None:
    """Keep the ui sub-app a command group even with a single command."""


def start_ui() -> None:
    """Run the full screen UI until the user leaves it."""
    logger = logging.getLogger(__name__)
    logger.info("Starting Mise Updater UI")

    model = UpdaterModel.from_config(app_config["options"])
    ui_app = MiseUpdaterUi(model)
    ui_app.run()


@app.command()
def start() -> None:
    """Start the Mise Updater UI."""
    start_ui()
