"""Runtime settings for the registry."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dbregistry.core.utils.logger import log_warning
from dbregistry.core.utils.paths import DATA_DIR

ENV_PREFIX = "DBREGISTRY_"
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bool(name: str, raw: str, default: bool) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    log_warning("CONFIG", f"Invalid {name} '{raw}', using {default}")
    return default


@dataclass
class RegistrySettings:
    """Settings for the config store, tree creation and logging."""

    storage_dir: Path = field(default_factory=lambda: Path(DATA_DIR))
    watch_config: bool = True
    show_system_defined_lists: bool = True
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.storage_dir = Path(self.storage_dir)
        level = str(self.log_level).strip().upper()
        if level not in _LOG_LEVELS:
            log_warning("CONFIG", f"Invalid log_level '{self.log_level}', using 'INFO'")
            level = "INFO"
        self.log_level = level

    @classmethod
    def from_env(cls, **overrides) -> "RegistrySettings":
        """
        Build settings from DBREGISTRY_* environment variables.

        Supported variables:
        - DBREGISTRY_STORAGE_DIR: directory holding workspace-databases.json
        - DBREGISTRY_WATCH_CONFIG: watch the config file for external edits
        - DBREGISTRY_SHOW_SYSTEM_LISTS: include the built-in "Top N" lists
        - DBREGISTRY_LOG_LEVEL: logging level

        Explicit keyword overrides win over the environment; None values are
        ignored so CLI options can be passed straight through.
        """
        defaults = cls()
        values = {
            "storage_dir": defaults.storage_dir,
            "watch_config": defaults.watch_config,
            "show_system_defined_lists": defaults.show_system_defined_lists,
            "log_level": defaults.log_level,
        }

        storage_dir = os.getenv(f"{ENV_PREFIX}STORAGE_DIR")
        if storage_dir:
            values["storage_dir"] = Path(storage_dir).expanduser()

        watch = os.getenv(f"{ENV_PREFIX}WATCH_CONFIG")
        if watch is not None:
            values["watch_config"] = _parse_bool(
                f"{ENV_PREFIX}WATCH_CONFIG", watch, defaults.watch_config
            )

        show_lists = os.getenv(f"{ENV_PREFIX}SHOW_SYSTEM_LISTS")
        if show_lists is not None:
            values["show_system_defined_lists"] = _parse_bool(
                f"{ENV_PREFIX}SHOW_SYSTEM_LISTS",
                show_lists,
                defaults.show_system_defined_lists,
            )

        log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if log_level:
            values["log_level"] = log_level

        for key, value in overrides.items():
            if value is not None:
                values[key] = value

        return cls(**values)
