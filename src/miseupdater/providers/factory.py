from miseupdater.data import PackageSource, PackageUpdate
from miseupdater.providers.api import PkgManager
from miseupdater.providers.homebrew import Brew
from miseupdater.providers.mise import Mise
from miseupdater.runner import CommandRunner


class PkgManagerFactory:
    """
    Factory class for creating package manager instances.
    """

    _REGISTRY: dict[str, type[PkgManager]] = {
        "mise": Mise,
        "brew": Brew,
    }

    @staticmethod
    def get_registry() -> dict[str, type[PkgManager]]:
        """
        Get a copy of the registry of available package managers.

        :return: Mapping of package manager names to classes.
        """
        return PkgManagerFactory._REGISTRY.copy()

    @staticmethod
    def create(
        name: str, binary: str, runner: CommandRunner | None = None
    ) -> PkgManager:
        """
        Create a package manager instance based on the provided name.

        :param name: Name of the package manager (e.g., 'mise').
        :param binary: Path to the package manager executable.
        :param runner: Command runner to use, a default one if omitted.
        :return: An instance of the specified package manager.
        """
        if name not in PkgManagerFactory._REGISTRY:
            raise ValueError(f"Unsupported package manager: {name}")

        pkg_impl = PkgManagerFactory._REGISTRY[name]
        return pkg_impl(binary=binary, runner=runner)

    @staticmethod
    def from_config(
        options: dict, runner: CommandRunner | None = None
    ) -> list[PkgManager]:
        """
        Create the package managers enabled in the configuration,
        in the order they are listed.

        :param options: The "options" section of the configuration.
        :param runner: Command runner shared by all package managers.
        :return: List of package manager instances.
        """
        return [
            PkgManagerFactory.create(name, options[f"{name}_bin"], runner)
            for name in options["sources"]
        ]


def parse(raw_output: str, source: PackageSource) -> list[PackageUpdate]:
    """
    Parse the outdated listing of a package manager into updates.

    :param raw_output: Captured output of the outdated command.
    :param source: Package manager that produced the output.
    :return: List of PackageUpdate, empty if nothing is outdated.
    """
    pkg_impl = PkgManagerFactory._REGISTRY[source.value]
    return pkg_impl(binary=source.value).parse(raw_output)
