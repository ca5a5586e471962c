"""
Tests for the updates command module.
"""

import json

import pytest
from typer.testing import CliRunner

from conftest import FakeHandle, FakeRunner
from miseupdater.commands import updates
from miseupdater.providers import Brew, Mise
from miseupdater.updater import UpdaterModel

runner = CliRunner(env={"NO_COLOR": "1"})

MISE_BIN = "/home/user/.local/bin/mise"
BREW_BIN = "/opt/homebrew/bin/brew"


@pytest.fixture(autouse=True)
def wide_console(mocker):
    """
    Use consoles wide enough that tables are not truncated.
    """
    from rich.console import Console

    mocker.patch.object(updates, "console", Console(width=200))
    mocker.patch.object(updates, "err_console", Console(width=200, stderr=True))


@pytest.fixture
def use_runner(mocker, binaries_present):
    """
    Factory fixture making the commands use a given fake runner.
    """

    def _use(fake_runner: FakeRunner) -> FakeRunner:
        model = UpdaterModel(
            [Mise(MISE_BIN, fake_runner), Brew(BREW_BIN, fake_runner)],
            poll_interval=0,
        )
        mocker.patch.object(updates, "_get_model", return_value=model)
        return fake_runner

    return _use


class TestCheckCommand:
    def test_up_to_date(self, use_runner):
        use_runner(FakeRunner())

        result = runner.invoke(updates.app, ["check"])

        assert result.exit_code == 0
        assert "Everything is up to date" in result.output

    def test_lists_updates(self, use_runner, mise_output, brew_output):
        use_runner(FakeRunner(outputs={MISE_BIN: mise_output, BREW_BIN: brew_output}))

        result = runner.invoke(updates.app, ["check"])

        assert result.exit_code == 0
        assert "Updates available" in result.output
        assert "node" in result.output
        assert "20.2.0" in result.output
        # Markup-like values are shown as-is
        assert "[MISSING]" in result.output
        assert "firefox" in result.output

    def test_json(self, use_runner, mise_output):
        use_runner(FakeRunner(outputs={MISE_BIN: mise_output}))

        result = runner.invoke(updates.app, ["check", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload[0] == {
            "name": "node",
            "current_version": "20.1.0",
            "new_version": "20.2.0",
            "source": "mise",
        }
        assert len(payload) == 3

    def test_json_up_to_date(self, use_runner):
        use_runner(FakeRunner())

        result = runner.invoke(updates.app, ["check", "-j"])

        assert result.exit_code == 0
        assert json.loads(result.output) == []


class TestInstallCommand:
    @pytest.fixture
    def fake_runner(self, use_runner, brew_output):
        return use_runner(
            FakeRunner(
                outputs={BREW_BIN: brew_output},
                upgrades={BREW_BIN: FakeHandle(["==> Upgrading git\n"])},
            )
        )

    def test_install_confirmed(self, fake_runner):
        result = runner.invoke(updates.app, ["install"], input="y\n")

        assert result.exit_code == 0
        assert fake_runner.spawned == [(BREW_BIN, ["upgrade"])]
        assert "Upgrading git" in result.output
        assert "Done!" in result.output

    def test_install_declined(self, fake_runner):
        result = runner.invoke(updates.app, ["install"], input="n\n")

        assert result.exit_code == 0
        assert fake_runner.spawned == []

    def test_install_yes(self, fake_runner):
        result = runner.invoke(updates.app, ["install", "--yes"])

        assert result.exit_code == 0
        assert len(fake_runner.spawned) == 1

    def test_install_nothing_to_do(self, use_runner):
        fake_runner = use_runner(FakeRunner())

        result = runner.invoke(updates.app, ["install", "--yes"])

        assert result.exit_code == 0
        assert "Everything is up to date" in result.output
        assert fake_runner.spawned == []

    def test_install_failure(self, use_runner, brew_output):
        """
        A package manager that cannot be started fails the command.
        """
        use_runner(FakeRunner(outputs={BREW_BIN: brew_output}))

        result = runner.invoke(updates.app, ["install", "--yes"])

        assert result.exit_code == 1
        assert "Executable not found" in result.output
