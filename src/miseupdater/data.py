# Data Types and Classes

from dataclasses import dataclass
from enum import Enum
from typing import Union


class PackageSource(Enum):
    """
    Package managers that can report updates.
    The value is the name used in configuration and the registry.
    """

    MISE = "mise"
    BREW = "brew"

    @property
    def icon(self) -> str:
        """Short glyph used when displaying packages from this source."""
        return _ICONS[self]


_ICONS = {
    PackageSource.MISE: "🔧",
    PackageSource.BREW: "🍺",
}


@dataclass(frozen=True)
class PackageUpdate:
    """
    Data class to hold information about a package update.
    Includes the name of the package, the current version,
    the new version, and the package manager that reported it.
    """

    name: str
    current_version: str
    new_version: str
    source: PackageSource


# Application states
#
# Exactly one of these is live at a time. See UpdaterModel for
# the allowed transitions between them.


@dataclass(frozen=True)
class Loading:
    """Outdated checks are running."""


@dataclass(frozen=True)
class UpToDate:
    """No source reported any update."""


@dataclass(frozen=True)
class Updates:
    """Updates are available and waiting for the user."""

    updates: tuple[PackageUpdate, ...]


@dataclass(frozen=True)
class Installing:
    """Upgrades are running."""

    progress: float
    log: tuple[str, ...]


@dataclass(frozen=True)
class Done:
    """Upgrades finished, successfully or not."""

    log: tuple[str, ...]
    failed: bool = False


AppState = Union[Loading, UpToDate, Updates, Installing, Done]
