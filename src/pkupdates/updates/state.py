"""Persistent state of the update checker.

Only the time of the last successful cache refresh is stored, in epoch
milliseconds, in ``state.json`` inside the config directory.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path

from pkupdates.core.config import get_config_dir

logger = logging.getLogger(__name__)

NEVER = -1


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class StateStore:
    """JSON-file backed store for the last refresh timestamp."""

    def __init__(self, path: Path | None = None) -> None:
        """Initialize the store.

        Args:
            path: State file (default: <config dir>/state.json).
        """
        self._path = path or get_config_dir() / "state.json"

    @property
    def path(self) -> Path:
        return self._path

    def load_refresh_timestamp(self) -> int:
        """Last cache refresh in epoch milliseconds, -1 if never or unreadable."""
        if not self._path.exists():
            return NEVER
        try:
            data = json.loads(self._path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Cannot read state file %s: %s", self._path, e)
            return NEVER
        value = data.get("refresh_timestamp") if isinstance(data, dict) else None
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
        return NEVER

    def save_refresh_timestamp(self, timestamp_ms: int | None = None) -> int:
        """Persist the refresh time (now by default).

        Returns:
            The stored timestamp.
        """
        value = now_ms() if timestamp_ms is None else timestamp_ms
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps({"refresh_timestamp": value}, indent=2))
        except OSError as e:
            logger.warning("Cannot save refresh timestamp to %s: %s", self._path, e)
            return value
        logger.debug("Saved refresh timestamp %d to %s", value, self._path)
        return value
