# Exception Types


class MiseUpdaterError(Exception):
    """Base exception for all miseupdater errors."""


class CommandLaunchError(MiseUpdaterError):
    """Exception raised when an external command cannot be started."""

    def __init__(self, message: str, stdout: str = "", stderr: str = "") -> None:
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)


class StateTransitionError(MiseUpdaterError):
    """Exception raised for transitions the application state does not allow."""
