"""
State rendering

Turns an application state into a description of what to show,
independent of any toolkit. The Textual UI and the command line
both draw from these.
"""

from dataclasses import dataclass

from miseupdater.data import (
    AppState,
    Done,
    Installing,
    Loading,
    PackageUpdate,
    Updates,
    UpToDate,
)
from miseupdater.updater import Intent


@dataclass(frozen=True)
class Action:
    """A button or key offered to the user."""

    label: str
    intent: Intent
    enabled: bool = True
    primary: bool = False


@dataclass(frozen=True)
class View:
    """Everything a presentation layer needs to display one state."""

    icon: str
    title: str
    packages: tuple[PackageUpdate, ...] = ()
    log: tuple[str, ...] = ()
    progress: float | None = None
    busy: bool = False
    actions: tuple[Action, ...] = ()


def render(state: AppState) -> View:
    """
    Describe how a state should be displayed.

    :param state: The current application state
    :return: View description for the state
    """
    if isinstance(state, Loading):
        return View(icon="⏳", title="Checking for updates...", busy=True)

    if isinstance(state, UpToDate):
        return View(
            icon="✅",
            title="Everything is up to date",
            actions=(Action("OK", Intent.DISMISS, primary=True),),
        )

    if isinstance(state, Updates):
        return View(
            icon="🚀",
            title="Updates available",
            packages=state.updates,
            actions=(
                Action("Later", Intent.DISMISS),
                Action("Install", Intent.INSTALL, primary=True),
            ),
        )

    if isinstance(state, Installing):
        return View(
            icon="⏳",
            title="Installing...",
            log=state.log,
            progress=state.progress,
            busy=True,
            actions=(Action("Close", Intent.DISMISS, enabled=False),),
        )

    if isinstance(state, Done):
        return View(
            icon="✅",
            title="Done!",
            log=state.log,
            progress=1.0,
            actions=(Action("OK", Intent.DISMISS, primary=True),),
        )

    raise TypeError(f"Unknown application state: {state!r}")
