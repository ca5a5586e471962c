import shlex

from miseupdater.data import PackageSource, PackageUpdate
from miseupdater.providers.api import PkgManager

# Placeholder mise prints for tools that are requested but not installed
MISSING_MARKER = "[MISSING]"


def _has_digit(token: str) -> bool:
    return any(c.isdigit() for c in token)


class Mise(PkgManager):
    """
    Mise Package Manager

    Implements the interface for the mise tool version manager.
    The outdated listing is a whitespace separated table:

        name  requested  current  latest

    Header and status lines are filtered out by requiring that the
    versions look like versions.
    """

    source = PackageSource.MISE

    def outdated_command(self) -> str:
        return f"{shlex.quote(self.binary)} outdated"

    def upgrade_args(self) -> list[str]:
        return ["upgrade"]

    def _parse_line(self, line: str) -> PackageUpdate | None:
        """
        Parse a line from the mise outdated output.

        :param line: Line from the mise outdated output.
        :return: PackageUpdate instance or None if parsing fails.
        """
        # mise's own messages, e.g. "mise All tools are up to date"
        if line.startswith(f"{self.name} ") or "up to date" in line:
            return None

        parts = line.split()
        if len(parts) < 4:
            return None

        name, current, new = parts[0], parts[2], parts[3]

        if not (_has_digit(current) or current == MISSING_MARKER):
            return None

        if not _has_digit(new):
            return None

        return PackageUpdate(
            name=name,
            current_version=current,
            new_version=new,
            source=self.source,
        )
