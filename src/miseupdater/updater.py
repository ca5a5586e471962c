"""
Updater model

Drives the check → install flow and holds the single live
application state. Presentation layers subscribe to state changes
and send user intents back through dispatch().
"""

import logging
import time
from collections.abc import Callable, Iterable
from enum import Enum

from miseupdater.data import (
    AppState,
    Done,
    Installing,
    Loading,
    PackageUpdate,
    Updates,
    UpToDate,
)
from miseupdater.errors import CommandLaunchError, StateTransitionError
from miseupdater.progress import ProgressTracker, make_estimator
from miseupdater.providers import PkgManager, PkgManagerFactory
from miseupdater.runner import CommandRunner, ProcessHandle

logger = logging.getLogger(__name__)

# Allowed successors for each state
TRANSITIONS: dict[type, tuple[type, ...]] = {
    Loading: (UpToDate, Updates),
    Updates: (Installing,),
    Installing: (Installing, Done),
    UpToDate: (),
    Done: (),
}


class Intent(Enum):
    """User intents the presentation layer can send."""

    INSTALL = "install"
    DISMISS = "dismiss"


StateListener = Callable[[AppState], None]


class UpdaterModel:
    """
    Check for and install package updates.

    Every state change is pushed to subscribed listeners, in order,
    from the thread doing the work.
    """

    def __init__(
        self,
        managers: list[PkgManager],
        progress_mode: str = "steps",
        poll_interval: float = 0.1,
    ) -> None:
        """
        :param managers: Package managers to check and upgrade, in order.
        :param progress_mode: "steps" or "markers", see miseupdater.progress
        :param poll_interval: Seconds to sleep between output polls
        """
        self.managers = managers
        self.progress_mode = progress_mode
        self.poll_interval = poll_interval

        self._state: AppState = Loading()
        self._listeners: list[StateListener] = []

    @classmethod
    def from_config(
        cls, options: dict, runner: CommandRunner | None = None
    ) -> "UpdaterModel":
        """
        Build a model from the "options" configuration section.
        """
        return cls(
            PkgManagerFactory.from_config(options, runner),
            progress_mode=options["progress_mode"],
            poll_interval=options["poll_interval"],
        )

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: StateListener) -> None:
        """Register a callable to receive every new state."""
        self._listeners.append(listener)

    def _set_state(self, new: AppState) -> None:
        allowed = TRANSITIONS[type(self._state)]
        if type(new) not in allowed:
            raise StateTransitionError(
                f"Cannot go from {type(self._state).__name__} "
                f"to {type(new).__name__}"
            )

        self._state = new
        for listener in self._listeners:
            listener(new)

    def check_for_updates(self) -> AppState:
        """
        Query every package manager for outdated packages.

        :return: UpToDate if nothing was reported, Updates otherwise.
        """
        updates: list[PackageUpdate] = []

        for manager in self.managers:
            logger.info("Checking for %s updates", manager.name)
            updates.extend(manager.get_updates())

        if not updates:
            logger.info("Everything is up to date")
            self._set_state(UpToDate())
        else:
            logger.info("%d updates available", len(updates))
            self._set_state(Updates(tuple(updates)))

        return self._state

    def _emit_progress(self, tracker: ProgressTracker) -> None:
        self._set_state(Installing(progress=tracker.progress, log=tracker.log))

    def _pump(self, handle: ProcessHandle, tracker: ProgressTracker) -> None:
        chunk = handle.read_available()
        if chunk:
            tracker.feed(chunk)
            self._emit_progress(tracker)

    def _run_upgrade(self, manager: PkgManager, tracker: ProgressTracker) -> bool:
        """
        Run one package manager upgrade to completion.

        :return: False if the upgrade could not be started.
        """
        tracker.note(f"{manager.source.icon} Upgrading {manager.name} packages...")
        self._emit_progress(tracker)

        try:
            handle = manager.upgrade()
        except CommandLaunchError as e:
            logger.error("Unable to upgrade %s packages: %s", manager.name, e)
            tracker.note(f"❌ {e}")
            return False

        try:
            while handle.is_running:
                self._pump(handle, tracker)
                time.sleep(self.poll_interval)
        finally:
            # Always reap the process, even if polling failed
            exit_code = handle.wait()

        self._pump(handle, tracker)

        if exit_code != 0:
            logger.warning(
                "%s upgrade exited with status %d", manager.name, exit_code
            )
            tracker.note(f"⚠ {manager.name} upgrade exited with status {exit_code}")

        tracker.complete_step()
        self._emit_progress(tracker)
        return True

    def install_updates(
        self, updates: Iterable[PackageUpdate] | None = None
    ) -> AppState:
        """
        Upgrade every package manager that has pending updates.

        Package managers run one at a time, in configuration order.
        A launch failure or an unexpected error ends the installation
        immediately, the running process is still waited on.

        :param updates: Updates to install, the ones currently offered
                        if omitted.
        :return: The final Done state.
        """
        if updates is None:
            if not isinstance(self._state, Updates):
                raise StateTransitionError("No updates to install")
            updates = self._state.updates

        pending = {update.source for update in updates}
        managers = [m for m in self.managers if m.source in pending]

        tracker = ProgressTracker(make_estimator(self.progress_mode, len(managers)))
        tracker.note("Starting upgrade...")
        self._emit_progress(tracker)

        for manager in managers:
            try:
                ok = self._run_upgrade(manager, tracker)
            except Exception as e:
                logger.exception("Upgrade of %s packages failed", manager.name)
                tracker.note(f"❌ {manager.name} upgrade failed: {e}")
                ok = False

            if not ok:
                self._set_state(Done(log=tracker.log, failed=True))
                return self._state

        tracker.note("✅ Done!")
        logger.info("Upgrade finished")
        self._set_state(Done(log=tracker.log))
        return self._state

    def dispatch(self, intent: Intent) -> bool:
        """
        Handle a user intent.

        INSTALL only does something while updates are offered, and
        blocks until the installation is done. DISMISS is ignored
        while installing, there is no way to cancel an upgrade.

        :return: True if the user asked to leave the application.
        """
        if intent is Intent.INSTALL:
            if isinstance(self._state, Updates):
                self.install_updates()
            else:
                logger.debug("Ignoring install request in %s", self._state)
            return False

        if isinstance(self._state, Installing):
            logger.debug("Ignoring dismiss request during installation")
            return False

        return True
