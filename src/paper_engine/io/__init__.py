"""File and configuration I/O."""

from .config import (
    CONFIG_ENV,
    ConfigWatcher,
    LogLevel,
    Setting,
    Settings,
    SettingsChannel,
    Wrap,
    default_config_path,
    diff_settings,
    read_settings,
)
from .explorer import Explorer, ExplorerError, LocalExplorer

__all__ = [
    "CONFIG_ENV",
    "ConfigWatcher",
    "Explorer",
    "ExplorerError",
    "LocalExplorer",
    "LogLevel",
    "Setting",
    "Settings",
    "SettingsChannel",
    "Wrap",
    "default_config_path",
    "diff_settings",
    "read_settings",
]
