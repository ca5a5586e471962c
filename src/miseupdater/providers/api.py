import logging
import shutil
from abc import ABC, abstractmethod

from miseupdater.data import PackageSource, PackageUpdate
from miseupdater.runner import CommandRunner, ProcessHandle


class PkgManager(ABC):
    """
    Abstract Base Class for Package Manager

    Defines the interface for Package Manager implementations.
    """

    #: Which package manager this implementation speaks to
    source: PackageSource

    def __init__(self, binary: str, runner: CommandRunner | None = None) -> None:
        """
        Initialize the Package Manager.

        :param binary: Path to the package manager executable.
        :param runner: Command runner used to invoke it.
        """
        self.binary = binary
        self.runner = runner or CommandRunner()

        # Setup logging
        self.logger = logging.getLogger(__name__)

    @property
    def name(self) -> str:
        return self.source.value

    @property
    def is_available(self) -> bool:
        """Whether the configured executable can be found."""
        return shutil.which(self.binary) is not None

    @abstractmethod
    def outdated_command(self) -> str:
        """
        Shell command line listing outdated packages.

        :return: Command line, executable included.
        """
        raise NotImplementedError("outdated_command method is not implemented.")

    @abstractmethod
    def upgrade_args(self) -> list[str]:
        """
        Arguments for the executable to upgrade all outdated packages.
        """
        raise NotImplementedError("upgrade_args method is not implemented.")

    @abstractmethod
    def _parse_line(self, line: str) -> PackageUpdate | None:
        """
        Parse a single line of the outdated command output.

        :param line: Line from the output.
        :return: PackageUpdate instance or None if the line is not an update.
        """
        raise NotImplementedError("_parse_line method is not implemented.")

    def parse(self, raw_output: str) -> list[PackageUpdate]:
        """
        Parse the full output of the outdated command.

        Never fails, lines that do not describe an update are skipped.

        :param raw_output: Captured output of the outdated command.
        :return: List of available updates, possibly empty.
        """
        updates: list[PackageUpdate] = []

        for line in raw_output.splitlines():
            # Skip blank lines
            if not line.strip():
                continue

            update = self._parse_line(line)
            if update is None:
                self.logger.debug("Failed to parse line: %s. Skipping.", line)
                continue

            updates.append(update)

        return updates

    def get_updates(self) -> list[PackageUpdate]:
        """
        Get a list of available updates.

        A missing executable is not an error, the source simply
        reports nothing.

        :return: List of available updates.
        """
        if not self.is_available:
            self.logger.warning(
                "%s not found at %s, skipping", self.name, self.binary
            )
            return []

        raw_output = self.runner.run(self.outdated_command())
        updates = self.parse(raw_output)

        self.logger.debug(
            "Found %d %s updates available: %s",
            len(updates),
            self.name,
            ", ".join(u.name for u in updates),
        )

        return updates

    def upgrade(self) -> ProcessHandle:
        """
        Start upgrading all outdated packages in the background.

        :raises CommandLaunchError: If the upgrade cannot be started.
        :return: Handle on the running upgrade.
        """
        self.logger.info("Upgrading %s packages", self.name)
        return self.runner.spawn(self.binary, self.upgrade_args())
