"""
Command runner module

Runs package manager commands on the local machine through invoke,
either to completion with captured output, or in the background
with output streamed into a buffer that can be polled.
"""

import logging
import shlex
import shutil
import threading

from invoke import Context
from invoke.exceptions import ThreadException
from invoke.runners import Promise

from miseupdater.errors import CommandLaunchError

logger = logging.getLogger(__name__)


class OutputBuffer:
    """
    Thread-safe sink for streamed command output.

    Acts as the out_stream/err_stream for invoke, whose IO threads
    write chunks to it while the process runs. Only complete lines
    are handed out by drain(), the trailing partial line is held back
    until its newline arrives or the buffer is flushed at exit.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending = ""

    def write(self, data: str) -> int:
        with self._lock:
            self._pending += data
        return len(data)

    def flush(self) -> None:
        pass

    def drain(self, final: bool = False) -> str:
        """
        Take buffered output.

        :param final: Also take the trailing partial line
        :return: Complete lines received since the last drain
        """
        with self._lock:
            if final:
                chunk, self._pending = self._pending, ""
                return chunk

            cut = self._pending.rfind("\n") + 1
            chunk, self._pending = self._pending[:cut], self._pending[cut:]
            return chunk


class ProcessHandle:
    """
    Handle on a command running in the background.

    Wraps the invoke Promise returned by an asynchronous run.
    """

    def __init__(self, command: str, promise: Promise, buffer: OutputBuffer) -> None:
        self.command = command
        self._promise = promise
        self._buffer = buffer
        self.exit_code: int | None = None

    @property
    def is_running(self) -> bool:
        """Whether the process has not exited yet."""
        if self.exit_code is not None:
            return False
        return not self._promise.runner.process_is_finished

    def read_available(self) -> str:
        """
        Return the complete lines of output received so far
        and not yet read. Returns everything left once waited on.
        """
        return self._buffer.drain(final=self.exit_code is not None)

    def wait(self) -> int:
        """
        Block until the process exits and its output threads are joined.

        :return: The process exit code
        """
        if self.exit_code is not None:
            return self.exit_code

        try:
            result = self._promise.join()
        except ThreadException as e:
            logger.error("Output handling failed for '%s': %s", self.command, e)
            self.exit_code = -1
            return self.exit_code

        self.exit_code = result.return_code
        logger.debug("'%s' exited with status %d", self.command, self.exit_code)
        return self.exit_code


class CommandRunner:
    """
    Run commands on the local machine.

    Output of stdout and stderr is merged, the way a terminal
    would show it.
    """

    def __init__(self, context: Context | None = None) -> None:
        self.context = context or Context()

    def run(self, command: str) -> str:
        """
        Run a shell command to completion.

        :param command: Shell command line to run
        :return: Merged stdout and stderr, or an empty string
                 if the command could not be started.
        """
        logger.debug("Running: %s", command)

        try:
            result = self.context.run(
                f"{command} 2>&1", hide=True, warn=True, in_stream=False
            )
        except OSError as e:
            logger.error("Unable to run '%s': %s", command, e)
            return ""

        if result.failed:
            logger.debug("'%s' exited with status %d", command, result.return_code)

        return result.stdout

    def spawn(self, executable: str, args: list[str]) -> ProcessHandle:
        """
        Start a command in the background, streaming its output.

        :param executable: Path or name of the program to run
        :param args: Arguments to pass to the program
        :raises CommandLaunchError: If the program is missing or
                                    cannot be started.
        :return: Handle to poll and wait on
        """
        if shutil.which(executable) is None:
            raise CommandLaunchError(f"Executable not found: {executable}")

        command = shlex.join([executable, *args])
        buffer = OutputBuffer()

        logger.debug("Spawning: %s", command)

        try:
            promise = self.context.run(
                f"{command} 2>&1",
                asynchronous=True,
                warn=True,
                hide=False,
                in_stream=False,
                out_stream=buffer,
                err_stream=buffer,
            )
        except OSError as e:
            raise CommandLaunchError(f"Unable to start {command}: {e}") from e

        return ProcessHandle(command, promise, buffer)
