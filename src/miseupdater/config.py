import copy
import json
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from miseupdater.data import PackageSource

# Environment variables selecting the package manager executables.
# These predate the generic MISEUPDATER_OPTIONS_* scheme and are
# kept as their own, shorter names.
BIN_ENV_VARS: dict[str, str] = {
    "MISE_BIN": "mise_bin",
    "BREW_BIN": "brew_bin",
}

ENV_PREFIX = "MISEUPDATER_OPTIONS_"

PROGRESS_MODES = ("steps", "markers")

LOG_DIR = Path.home() / ".cache" / "miseupdater"


def parse_env_value(value: str) -> Any:
    """
    Parse an environment variable value into a python scalar.

    JSON scalars (numbers, booleans, null) and lists are decoded,
    anything else is returned verbatim as a string.
    """
    try:
        return json.loads(value)
    except ValueError:
        return value


class Configuration(dict):
    """
    Hold configuration values for the application.
    Extends a native dict to store the global options section.
    """

    DEFAULTS: dict = {
        "options": {
            "debug": False,  # Debug mode, log to console regardless of log_file
            "log_level": "INFO",  # Default log level for the application
            "log_file": str(LOG_DIR / "miseupdater.log"),  # Console if unset
            "mise_bin": str(Path.home() / ".local" / "bin" / "mise"),
            "brew_bin": "/opt/homebrew/bin/brew",
            "sources": ["mise", "brew"],  # Package managers to check, in order
            "progress_mode": "steps",  # How installation progress is computed
            "poll_interval": 0.1,  # Seconds between upgrade output polls
        },
    }

    def __init__(self) -> None:
        """
        Initialize the Configuration object with default values.
        """
        dict.__init__(self, copy.deepcopy(self.DEFAULTS))
        self.logger = logging.getLogger(__name__)

    def from_env(self, parser: Callable[[str], Any] = parse_env_value) -> bool:
        """
        Populate the configuration structure from environment variables.

        MISE_BIN and BREW_BIN select the executables. Any other option
        can be set with MISEUPDATER_OPTIONS_<KEY>, eg.
        MISEUPDATER_OPTIONS_PROGRESS_MODE=markers

        :param parser: Callable used to convert raw string values
        :return: True once the environment has been processed
        """
        options: dict[str, Any] = {}

        for var, key in BIN_ENV_VARS.items():
            value = os.environ.get(var)
            if value:
                self.logger.debug("Using %s from environment: %s", key, value)
                options[key] = value

        for var, value in os.environ.items():
            if not var.startswith(ENV_PREFIX):
                continue

            key = var[len(ENV_PREFIX) :].lower()

            if key not in self.DEFAULTS["options"]:
                self.logger.warning(
                    "Environment variable %s: %s is not a valid options key, ignoring",
                    var,
                    key,
                )
                continue

            options[key] = parser(value)

        if not options:
            return True

        return self.update_from_mapping({"options": options})

    def update_from_mapping(self, mapping: dict) -> bool:
        """
        Merge a mapping into the configuration, but only for keys
        that are valid root configuration keys.

        Nested dicts are deep merged rather than replaced.
        """
        for k, v in mapping.items():
            if k not in self.DEFAULTS:
                self.logger.warning(
                    "Configuration key %s is not a valid root key, ignoring", k
                )
                continue

            if isinstance(self[k], dict) and isinstance(v, dict):
                self.deep_update(self[k], v)
            else:
                self[k] = v

        self.validate()
        return True

    def validate(self) -> None:
        """
        Check option values that the rest of the application relies on.

        :raises ValueError: If an option holds an unsupported value
        """
        options = self["options"]

        mode = options.get("progress_mode")
        if mode not in PROGRESS_MODES:
            raise ValueError(
                f"Invalid progress_mode '{mode}', "
                f"expected one of: {', '.join(PROGRESS_MODES)}"
            )

        sources = options.get("sources")
        if not isinstance(sources, list) or not all(
            isinstance(s, str) for s in sources
        ):
            raise ValueError(
                f"Invalid sources {sources!r}, expected a list of names, "
                'eg. ["mise", "brew"]'
            )

        known = {source.value for source in PackageSource}
        unknown = [s for s in sources if s not in known]
        if unknown:
            raise ValueError(f"Unknown package sources: {', '.join(unknown)}")

        # bool is a subclass of int
        interval = options.get("poll_interval")
        if (
            isinstance(interval, bool)
            or not isinstance(interval, (int, float))
            or interval < 0
        ):
            raise ValueError(
                f"Invalid poll_interval {interval!r}, "
                "expected a non-negative number of seconds"
            )

    def deep_update(self, d: dict, u: dict) -> dict:
        """
        Recursively update a dictionary with another dictionary.
        Ensures nested dicts are updated rather than replaced.
        """
        for k, v in u.items():
            if isinstance(v, dict) and k in d and isinstance(d[k], dict):
                self.deep_update(d[k], v)
            else:
                d[k] = v
        return d
