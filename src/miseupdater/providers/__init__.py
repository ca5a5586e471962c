from .api import PkgManager
from .factory import PkgManagerFactory, parse
from .homebrew import Brew
from .mise import Mise

__all__ = [
    "Brew",
    "Mise",
    "PkgManager",
    "PkgManagerFactory",
    "parse",
]
