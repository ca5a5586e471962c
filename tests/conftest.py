import pytest

from miseupdater.errors import CommandLaunchError


class FakeHandle:
    """
    Stand-in for a running upgrade process.

    Hands out one chunk per poll while "running", exits once all
    chunks have been read.
    """

    def __init__(self, chunks: list[str], exit_code: int = 0) -> None:
        self.chunks = list(chunks)
        self.exit_code = exit_code
        self.waited = False

    @property
    def is_running(self) -> bool:
        return not self.waited and bool(self.chunks)

    def read_available(self) -> str:
        if self.waited:
            chunk = "".join(self.chunks)
            self.chunks.clear()
            return chunk

        return self.chunks.pop(0) if self.chunks else ""

    def wait(self) -> int:
        self.waited = True
        return self.exit_code


class FakeRunner:
    """
    Command runner returning canned output.

    :param outputs: Maps an executable to the output of its outdated command
    :param upgrades: Maps an executable to the FakeHandle its upgrade returns,
                     or to an exception to raise on spawn.
    """

    def __init__(
        self,
        outputs: dict[str, str] | None = None,
        upgrades: dict[str, FakeHandle | Exception] | None = None,
    ) -> None:
        self.outputs = outputs or {}
        self.upgrades = upgrades or {}
        self.commands: list[str] = []
        self.spawned: list[tuple[str, list[str]]] = []

    def run(self, command: str) -> str:
        self.commands.append(command)
        for binary, output in self.outputs.items():
            if command.startswith(binary):
                return output
        return ""

    def spawn(self, executable: str, args: list[str]):
        self.spawned.append((executable, args))
        upgrade = self.upgrades.get(executable)

        if upgrade is None:
            raise CommandLaunchError(f"Executable not found: {executable}")
        if isinstance(upgrade, Exception):
            raise upgrade

        return upgrade


@pytest.fixture
def binaries_present(mocker):
    """
    Pretend every package manager executable is installed.
    """
    return mocker.patch(
        "miseupdater.providers.api.shutil.which",
        side_effect=lambda binary: binary,
    )


@pytest.fixture
def mise_output():
    """
    Output of `mise outdated`, with a header line.
    """
    return (
        "name    requested  current  latest\n"
        "node    20         20.1.0   20.2.0\n"
        "python  3.12       3.12.1   3.12.4\n"
        "usage   latest     [MISSING] 0.3.0\n"
    )


@pytest.fixture
def brew_output():
    """
    Output of `brew outdated --verbose`.
    """
    return (
        "git (2.40.0) < 2.41.0\n"
        "firefox (115.0, 115.0.1) != 116.0\n"
        "libpng (1.6.39) <= 1.6.40\n"
    )
