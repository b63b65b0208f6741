"""Core module - Shared configuration, types and texts."""

from pkupdates.core.config import (
    ConfigError,
    UpdatesConfig,
    get_config_dir,
    get_config_file,
    load_config,
    save_config,
)
from pkupdates.core.types import Activity, CheckOutcome, StatusIcon, UpdateCategory

__all__ = [
    # Config
    "ConfigError",
    "UpdatesConfig",
    "get_config_dir",
    "get_config_file",
    "load_config",
    "save_config",
    # Types
    "Activity",
    "CheckOutcome",
    "StatusIcon",
    "UpdateCategory",
]
