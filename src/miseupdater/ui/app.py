import logging

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header

from miseupdater.data import Installing
from miseupdater.ui.logs import LogsScreen, UILogHandler
from miseupdater.ui.updater import UpdaterScreen
from miseupdater.updater import UpdaterModel


class MiseUpdaterUi(App):
    """The main application class for the Mise Updater UI."""

    ui_log_handler: UILogHandler | None = None

    # Global Bindings - These are available in all modes,
    # unless overriden by a mode-specific binding.
    BINDINGS = [
        ("u", "switch_mode('updater')", "Updates"),
        ("l", "switch_mode('logs')", "Logs"),
        ("q", "request_quit", "Quit"),
    ]

    MODES = {
        "updater": UpdaterScreen,
        "logs": LogsScreen,
    }

    def __init__(self, model: UpdaterModel) -> None:
        super().__init__()
        self.model = model

    def compose(self) -> ComposeResult:
        """Compose the common application layout."""
        yield Header()
        yield Footer()

    def on_mount(self) -> None:
        # Initialize logging handler for logs panel
        self.ui_log_handler = UILogHandler()
        self.ui_log_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        logging.getLogger("miseupdater").addHandler(self.ui_log_handler)

        # Set the default mode to the updater
        self.switch_mode("updater")

    def on_unmount(self) -> None:
        if self.ui_log_handler is None:
            return

        logging.getLogger("miseupdater").removeHandler(self.ui_log_handler)
        self.ui_log_handler.close()
        self.ui_log_handler = None

    def action_request_quit(self) -> None:
        """Quit, unless an installation is running."""
        if isinstance(self.model.state, Installing):
            self.notify(
                "Installation in progress, please wait.", severity="warning"
            )
            return

        self.exit()
