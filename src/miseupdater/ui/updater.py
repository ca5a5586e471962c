import logging
from typing import cast

from rich.text import Text
from textual import work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Label,
    ProgressBar,
    RichLog,
)

from miseupdater.data import AppState, Loading
from miseupdater.render import View, render
from miseupdater.updater import Intent, UpdaterModel

logger = logging.getLogger(__name__)


class UpdaterScreen(Screen):
    """
    Screen showing the current application state

    Runs the update check as soon as it is mounted, then follows the
    model through the installation. Model work happens in thread
    workers, state changes are applied back on the UI thread.
    """

    CSS_PATH = "style.tcss"

    @property
    def model(self) -> UpdaterModel:
        from miseupdater.ui.app import MiseUpdaterUi

        return cast(MiseUpdaterUi, self.app).model

    def compose(self) -> ComposeResult:
        """Compose the updater layout."""
        yield Header()
        yield Vertical(
            Label(id="state-title"),
            DataTable(id="packages", cursor_type="none", zebra_stripes=True),
            RichLog(id="install-log", wrap=True),
            ProgressBar(
                total=None,
                show_eta=False,
                show_percentage=True,
                show_bar=True,
                id="install-progress",
            ),
            Horizontal(id="actions"),
            classes="updater",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.title = "Mise Updater"
        self.sub_title = "Updates"

        table = self.query_one("#packages", DataTable)
        table.add_columns("", "Package", "Current", "", "New")

        self.model.subscribe(self.on_state_change)
        self.show_state(self.model.state)

        if isinstance(self.model.state, Loading):
            self.run_check()

    def on_state_change(self, state: AppState) -> None:
        """Model listener, called from the worker thread."""
        self.app.call_from_thread(self.show_state, state)

    def show_state(self, state: AppState) -> None:
        """Update every widget to match a state."""
        view = render(state)

        self.query_one("#state-title", Label).update(f"{view.icon}  {view.title}")
        self._show_packages(view)
        self._show_log(view)
        self._show_progress(view)
        self._show_actions(view)

    def _show_packages(self, view: View) -> None:
        table = self.query_one("#packages", DataTable)
        table.display = bool(view.packages)
        table.clear()

        for update in view.packages:
            table.add_row(
                update.source.icon,
                Text(update.name, style="bold"),
                Text(update.current_version, style="dim"),
                "→",
                Text(update.new_version, style="green"),
            )

    def _show_log(self, view: View) -> None:
        log = self.query_one("#install-log", RichLog)
        log.display = bool(view.log)
        log.clear()

        for line in view.log:
            log.write(line)

    def _show_progress(self, view: View) -> None:
        bar = self.query_one("#install-progress", ProgressBar)
        bar.display = view.busy or view.progress is not None

        if view.progress is None:
            bar.update(total=None)
        else:
            bar.update(total=100, progress=view.progress * 100)

    def _show_actions(self, view: View) -> None:
        actions = self.query_one("#actions", Horizontal)
        actions.remove_children()
        actions.mount_all(
            Button(
                action.label,
                name=action.intent.value,
                variant="primary" if action.primary else "default",
                disabled=not action.enabled,
            )
            for action in view.actions
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Turn button presses into model intents."""
        intent = Intent(event.button.name)

        if intent is Intent.INSTALL:
            self.run_install()
            return

        if self.model.dispatch(intent):
            self.app.exit()

    @work(exclusive=True, thread=True)
    def run_check(self) -> None:
        """Check for updates in the background."""
        logger.info("Checking for updates")
        self.model.check_for_updates()

    @work(exclusive=True, thread=True)
    def run_install(self) -> None:
        """Install updates in the background."""
        logger.info("Installing updates")
        self.model.dispatch(Intent.INSTALL)
