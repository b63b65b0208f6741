"""Progress and status text of the running transaction."""

from __future__ import annotations

from pkupdates.core.strings import status_text
from pkupdates.daemon.types import Status

# The daemon reports 101 when it cannot estimate progress.
DAEMON_UNKNOWN_PERCENTAGE = 101


def normalize_percentage(value: int | None) -> int | None:
    """Return the value if it is a real percentage, else None (indeterminate)."""
    if value is None or value < 0 or value > 100:
        return None
    return value


def remap(value: int | None, low: int, high: int) -> int | None:
    """Map a 0..100 stage percentage into the ``low..high`` sub-range."""
    value = normalize_percentage(value)
    if value is None:
        return None
    return low + (value * (high - low)) // 100


class ProgressTracker:
    """Stores the current percentage and derives the status text.

    Weighting of multi-stage sequences is done by the caller (see ``remap``);
    the tracker only stores values and passes "indeterminate" through.
    """

    def __init__(self, idle_text: str = "Idle") -> None:
        self._percentage: int | None = 0
        self._status_text = idle_text

    def on_stage_progress(self, percent: int | None) -> None:
        """Store a raw percentage; out-of-range values mean indeterminate."""
        self._percentage = normalize_percentage(percent)

    def effective_percentage(self) -> int | None:
        """Current percentage, None if indeterminate."""
        return self._percentage

    def on_status(
        self,
        status: Status,
        speed: int = 0,
        download_size_remaining: int = 0,
    ) -> str | None:
        """Derive the status text from a daemon status.

        ``FINISHED`` carries no useful text and is ignored.

        Returns:
            The new status text, or None if it did not change.
        """
        if status == Status.FINISHED:
            return None
        return self.set_text(status_text(status, speed, download_size_remaining))

    def set_text(self, text: str) -> str | None:
        """Set the status text directly.

        Returns:
            The new text, or None if it did not change.
        """
        if text == self._status_text:
            return None
        self._status_text = text
        return text

    @property
    def status_text(self) -> str:
        return self._status_text

    def reset(self, text: str) -> None:
        """Back to 0% with the given text."""
        self._percentage = 0
        self._status_text = text
