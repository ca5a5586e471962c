"""
Log viewer

Application log records get their own mode in the UI so they never
draw over the updater screen.
"""

import logging
from collections import deque
from typing import cast

from rich.text import Text
from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Footer, Header, RichLog

# Records kept while no log view is attached
BACKLOG_SIZE = 500

LEVEL_STYLES = {
    logging.DEBUG: "dim",
    logging.WARNING: "yellow",
    logging.ERROR: "bold red",
    logging.CRITICAL: "bold red reverse",
}


class UILogHandler(logging.Handler):
    """
    Logging handler feeding the logs screen

    Records emitted before the screen exists are held in a bounded
    backlog and replayed when a widget is attached.
    """

    def __init__(self, backlog: int = BACKLOG_SIZE) -> None:
        super().__init__()
        self.backlog: deque[Text] = deque(maxlen=backlog)
        self.log_widget: RichLog | None = None

    def emit(self, record: logging.LogRecord) -> None:
        line = Text(self.format(record), style=LEVEL_STYLES.get(record.levelno, ""))

        if self.log_widget is None:
            self.backlog.append(line)
            return

        self.log_widget.write(line)

    def attach(self, log_widget: RichLog) -> None:
        """Send records to a widget, starting with the backlog."""
        self.log_widget = log_widget

        while self.backlog:
            log_widget.write(self.backlog.popleft())

    def detach(self) -> None:
        self.log_widget = None


class LogsScreen(Screen):
    """Screen showing the application log."""

    CSS_PATH = "style.tcss"

    def compose(self) -> ComposeResult:
        yield Header()
        yield RichLog(id="app-log", auto_scroll=True, wrap=True, markup=False)
        yield Footer()

    def on_mount(self) -> None:
        self.title = "Mise Updater"
        self.sub_title = "Logs"

        from miseupdater.ui.app import MiseUpdaterUi

        handler = cast(MiseUpdaterUi, self.app).ui_log_handler
        if handler is not None:
            handler.attach(self.query_one("#app-log", RichLog))

        logging.getLogger(__name__).debug("Log view attached")

    def on_unmount(self) -> None:
        from miseupdater.ui.app import MiseUpdaterUi

        handler = cast(MiseUpdaterUi, self.app).ui_log_handler
        if handler is not None:
            handler.detach()
