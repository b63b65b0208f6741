"""Configuration for pkupdates.

This module provides:
- UpdatesConfig: Tunables of the coordinator and the check scheduler
- get_config_dir / get_config_file: Where configuration lives
- load_config / save_config: JSON persistence of UpdatesConfig
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "PKUPDATES_CONFIG_DIR"

DEFAULT_CACHE_MAX_AGE = 24 * 60 * 60  # seconds
DEFAULT_CHECK_INTERVAL = 24 * 60 * 60  # seconds


class ConfigError(Exception):
    """Invalid or unreadable configuration."""


@dataclass
class UpdatesConfig:
    """Configuration of the update coordinator.

    Attributes:
        cache_max_age: A non-forced check skips the cache refresh when the
            last refresh is younger than this many seconds.
        check_interval: Seconds between automatic checks.
        check_on_mobile: Run automatic checks on a mobile connection.
        check_on_battery: Run automatic checks while on battery.
        allow_untrusted_retry: Retry an install allowing untrusted packages
            when the daemon asks for it.
        notifications: Show desktop notifications.
    """

    cache_max_age: int = DEFAULT_CACHE_MAX_AGE
    check_interval: int = DEFAULT_CHECK_INTERVAL
    check_on_mobile: bool = False
    check_on_battery: bool = False
    allow_untrusted_retry: bool = True
    notifications: bool = True

    def __post_init__(self) -> None:
        """Validate values."""
        if self.cache_max_age < 0:
            raise ConfigError(f"cache_max_age must be >= 0, got {self.cache_max_age}")
        if self.check_interval <= 0:
            raise ConfigError(f"check_interval must be > 0, got {self.check_interval}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UpdatesConfig:
        """Build a config from a dict, rejecting unknown keys.

        Raises:
            ConfigError: If a key is unknown or a value has the wrong type.
        """
        known = {f.name: f for f in fields(cls)}
        unknown = set(data) - set(known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        values: dict[str, Any] = {}
        for key, value in data.items():
            expected = bool if known[key].type == "bool" else int
            # bool is an int subclass, reject it where an int is expected
            if expected is int and isinstance(value, bool):
                raise ConfigError(f"{key} must be an integer")
            if not isinstance(value, expected):
                raise ConfigError(f"{key} must be of type {expected.__name__}")
            values[key] = value
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return asdict(self)

    def with_value(self, key: str, raw: str) -> UpdatesConfig:
        """Return a copy with one key set from its string form.

        Raises:
            ConfigError: If the key is unknown or the value cannot be parsed.
        """
        known = {f.name: f for f in fields(self)}
        if key not in known:
            raise ConfigError(f"Unknown config key: {key}")

        value: Any
        if known[key].type == "bool":
            lowered = raw.strip().lower()
            if lowered in ("1", "true", "yes", "on"):
                value = True
            elif lowered in ("0", "false", "no", "off"):
                value = False
            else:
                raise ConfigError(f"{key} expects a boolean, got {raw!r}")
        else:
            try:
                value = int(raw)
            except ValueError as e:
                raise ConfigError(f"{key} expects an integer, got {raw!r}") from e

        data = self.to_dict()
        data[key] = value
        return UpdatesConfig.from_dict(data)


def get_config_dir() -> Path:
    """Get the configuration directory for pkupdates.

    Returns:
        $PKUPDATES_CONFIG_DIR if set, else ~/.config/pkupdates.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "pkupdates"


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def load_config(path: Path | None = None) -> UpdatesConfig:
    """Load configuration, falling back to defaults if the file is missing.

    Raises:
        ConfigError: If the file exists but is not a valid config.
    """
    config_file = path or get_config_file()
    if not config_file.exists():
        return UpdatesConfig()
    try:
        data = json.loads(config_file.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read {config_file}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file} must contain a JSON object")
    return UpdatesConfig.from_dict(data)


def save_config(config: UpdatesConfig, path: Path | None = None) -> None:
    """Save configuration to the config file."""
    config_file = path or get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(config.to_dict(), indent=2))
