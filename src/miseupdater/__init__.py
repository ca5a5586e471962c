import importlib.metadata

from miseupdater.config import Configuration

# Global configuration instance, populated from the environment
# at startup by the main entry point.
app_config = Configuration()  # Has default values out of the box

# Current software version, imported from pyproject metadata
__version__ = importlib.metadata.version("miseupdater")

__all__ = ["__version__", "app_config"]
