"""
Progress tracking for upgrades

Package managers do not report how much work an upgrade involves,
so progress is either counted in whole upgrade steps (one per package
manager) or estimated from completion markers in their output.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque

logger = logging.getLogger(__name__)

# Number of log lines kept for display
LOG_SIZE = 10

# Prefix added to every line shown in the log
LINE_MARKER = "▸ "

# Characters mise and Homebrew print on a line when a package is done
COMPLETION_MARKERS = ("✓", "🍺")

# Rough guess at the number of completion lines an upgrade prints
ESTIMATED_TOTAL = 5


class ProgressEstimator(ABC):
    """Computes the fraction of an upgrade run that is complete."""

    @abstractmethod
    def feed(self, lines: list[str]) -> None:
        """Account for output lines from the running upgrade."""

    @abstractmethod
    def complete_step(self) -> None:
        """Account for one package manager having finished."""

    @property
    @abstractmethod
    def fraction(self) -> float:
        """Completed fraction, unclamped."""


class StepEstimator(ProgressEstimator):
    """
    Exact progress: one step per package manager being upgraded.
    Output lines are ignored.
    """

    def __init__(self, total_steps: int) -> None:
        self.total_steps = total_steps
        self.completed = 0

    def feed(self, lines: list[str]) -> None:
        pass

    def complete_step(self) -> None:
        self.completed += 1

    @property
    def fraction(self) -> float:
        if self.total_steps <= 0:
            return 1.0
        return self.completed / self.total_steps


class MarkerEstimator(ProgressEstimator):
    """
    Heuristic progress: count output lines carrying a completion
    marker against a fixed estimate of how many there will be.
    """

    def __init__(
        self,
        estimated_total: int = ESTIMATED_TOTAL,
        markers: tuple[str, ...] = COMPLETION_MARKERS,
    ) -> None:
        self.estimated_total = estimated_total
        self.markers = markers
        self.completed = 0

    def feed(self, lines: list[str]) -> None:
        self.completed += sum(
            1 for line in lines if any(m in line for m in self.markers)
        )

    def complete_step(self) -> None:
        pass

    @property
    def fraction(self) -> float:
        return self.completed / self.estimated_total


def make_estimator(mode: str, total_steps: int) -> ProgressEstimator:
    """
    Create the estimator for a progress mode.

    :param mode: "steps" or "markers"
    :param total_steps: Number of package managers to upgrade
    """
    if mode == "steps":
        return StepEstimator(total_steps)
    if mode == "markers":
        return MarkerEstimator()

    raise ValueError(f"Unknown progress mode: {mode}")


class ProgressTracker:
    """
    Tracks a single upgrade run.

    Keeps a rolling log of the last LOG_SIZE lines of output and a
    progress value in [0, 1] that never goes backwards.
    """

    def __init__(self, estimator: ProgressEstimator, size: int = LOG_SIZE) -> None:
        self.estimator = estimator
        self._log: deque[str] = deque(maxlen=size)
        self._progress = 0.0

    @property
    def log(self) -> tuple[str, ...]:
        return tuple(self._log)

    @property
    def progress(self) -> float:
        return self._progress

    def _refresh(self) -> None:
        fraction = min(max(self.estimator.fraction, 0.0), 1.0)
        self._progress = max(self._progress, fraction)

    def note(self, message: str) -> None:
        """Add a status line of our own to the log."""
        self._log.append(f"{LINE_MARKER}{message}")

    def feed(self, chunk: str) -> None:
        """
        Add a chunk of upgrade output.

        Every non-empty line is added to the log and handed
        to the estimator.
        """
        lines = [line for line in chunk.splitlines() if line.strip()]
        if not lines:
            return

        self._log.extend(f"{LINE_MARKER}{line}" for line in lines)
        self.estimator.feed(lines)
        self._refresh()

    def complete_step(self) -> None:
        """Mark one package manager upgrade as finished."""
        self.estimator.complete_step()
        self._refresh()
        logger.debug("Upgrade progress: %.0f%%", self._progress * 100)
