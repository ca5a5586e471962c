import shlex

from miseupdater.data import PackageSource, PackageUpdate
from miseupdater.providers.api import PkgManager

# Comparison operators brew prints between installed and new versions.
# "!=" shows up for casks and pinned formulae, "<" for regular bumps.
OPERATORS = ("<=", "!=", "<", "!")


class Brew(PkgManager):
    """
    Homebrew Package Manager

    Implements the interface for Homebrew formulae and casks.
    The verbose outdated listing looks like:

        git (2.40.0) < 2.41.0
        firefox (115.0, 115.0.1) != 116.0
    """

    source = PackageSource.BREW

    def outdated_command(self) -> str:
        return f"{shlex.quote(self.binary)} outdated --verbose"

    def upgrade_args(self) -> list[str]:
        return ["upgrade"]

    def _parse_line(self, line: str) -> PackageUpdate | None:
        """
        Parse a line from the brew outdated output.

        Expects NAME (CURRENT) OP NEW, where NAME starts the line,
        CURRENT is anything but a closing paren, and NEW is the rest
        of the line taken as-is.

        :param line: Line from the brew outdated output.
        :return: PackageUpdate instance or None if parsing fails.
        """
        if not line or line[0].isspace():
            return None

        parts = line.split(None, 1)
        if len(parts) != 2:
            return None

        name, rest = parts

        # Current version, "(...)" with at least one character inside
        if not rest.startswith("("):
            return None

        close = rest.find(")")
        if close < 2:
            return None

        current = rest[1:close]
        rest = rest[close + 1 :]

        if not rest[:1].isspace():
            return None

        rest = rest.lstrip()
        op = next((op for op in OPERATORS if rest.startswith(op)), None)
        if op is None:
            return None

        # At least one whitespace after the operator, then the new version
        rest = rest[len(op) :]
        if len(rest) < 2 or not rest[0].isspace():
            return None

        new = rest.lstrip() or rest[-1]

        return PackageUpdate(
            name=name,
            current_version=current,
            new_version=new,
            source=self.source,
        )
