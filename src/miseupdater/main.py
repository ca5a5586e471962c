import logging
import sys
from pathlib import Path

from miseupdater import app_config, cli

logger = logging.getLogger(__name__)


def setup_logging(log_level: str, log_file: str | None = None) -> None:
    """
    Set up logging configuration.
    This function initializes the logging system with a specified log level
    and optional log file. If no log file is specified, logs will be printed
    to the console. The full screen UI draws over the console, so a log
    file is the default.

    :param log_file: Optional log file path to write logs to.
    :param log_level: The logging level to set.
    """
    handler: logging.Handler

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
        handler.setLevel(log_level)

    logging.basicConfig(
        level=logging.WARN,  # Default to WARN for root logger, avoid library noise
        handlers=[handler],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logging.getLogger("miseupdater").setLevel(log_level)
    logging.getLogger(__name__).info("Logging initialized with level: %s", log_level)


def main() -> None:
    """
    Program Entry Point
    """
    # Environment is the only configuration source
    try:
        app_config.from_env()
    except ValueError as e:
        print(f"Startup error: {e}", file=sys.stderr)
        sys.exit(1)

    # initialize logging and setup handlers depending on config
    log_file: str | None = app_config["options"].get("log_file")
    debug_mode: bool = app_config["options"].get("debug")

    try:
        if debug_mode:
            setup_logging(app_config["options"]["log_level"])
            logger.warning("Debug mode enabled! Logs may flood console!")
        else:
            setup_logging(app_config["options"]["log_level"], log_file)
    except (OSError, ValueError) as e:
        print(f"Unable to set up logging: {e}", file=sys.stderr)
        sys.exit(1)

    # Launch CLI application
    cli.app()


if __name__ == "__main__":
    main()
