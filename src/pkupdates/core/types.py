"""Shared types for pkupdates.

This module defines enums used across the coordinator, the snapshot and the
command line interface.
"""

from __future__ import annotations

from enum import Enum, IntEnum, auto


class Activity(IntEnum):
    """High-level phase of the transaction coordinator."""

    IDLE = auto()
    CHECKING_CACHE = auto()
    ENUMERATING_UPDATES = auto()
    INSTALLING_UPDATES = auto()


class CheckOutcome(IntEnum):
    """Result of the last update check."""

    NEVER_CHECKED = auto()
    FAILED = auto()
    SUCCEEDED = auto()


class UpdateCategory(str, Enum):
    """Category of an available update."""

    SECURITY = "security"
    IMPORTANT = "important"
    BUGFIX = "bugfix"
    OTHER = "other"


class StatusIcon(str, Enum):
    """Icon hint for the overall update status."""

    HIGH = "update-high"
    MEDIUM = "update-medium"
    LOW = "update-low"
    NONE = "update-none"
