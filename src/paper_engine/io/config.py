"""TOML settings file, change notifications and the settings channel.

The config file is read with ``toml``. A ``watchdog`` observer watches the
file's directory; each modification re-reads the file and only settings whose
values differ from the last read are pushed onto the :class:`SettingsChannel`,
so duplicate notifications collapse to nothing.
"""

from __future__ import annotations

import os
import queue
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, List, Optional, Union

import toml
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from paper_engine.runtime.telemetry import Telemetry, normalize_level

CONFIG_ENV = "PAPER_ENGINE_CONFIG"


def default_config_path() -> Path:
    override = os.getenv(CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "paper" / "config.toml"


@dataclass(frozen=True, slots=True)
class Settings:
    wrap: bool = False
    log_level: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Wrap:
    enabled: bool


@dataclass(frozen=True, slots=True)
class LogLevel:
    level: Optional[str]


Setting = Union[Wrap, LogLevel]


def read_settings(path: Path, telemetry: Telemetry) -> Settings:
    """Load settings from ``path``; problems are logged and yield defaults."""

    try:
        data = toml.load(path)
    except (OSError, toml.TomlDecodeError) as exc:
        telemetry.record_event(
            "config.unreadable",
            level="warning",
            data={"path": str(path), "error": str(exc)},
        )
        return Settings()
    return _settings_from_mapping(data, path, telemetry)


def _settings_from_mapping(data: Any, path: Path, telemetry: Telemetry) -> Settings:
    settings = Settings()
    wrap = data.get("wrap", settings.wrap)
    if isinstance(wrap, bool):
        settings = replace(settings, wrap=wrap)
    else:
        telemetry.record_event(
            "config.invalid",
            level="warning",
            data={"path": str(path), "key": "wrap", "value": wrap},
        )

    level = data.get("log_level")
    if level is not None:
        try:
            settings = replace(settings, log_level=normalize_level(str(level)))
        except ValueError:
            telemetry.record_event(
                "config.invalid",
                level="warning",
                data={"path": str(path), "key": "log_level", "value": level},
            )
    return settings


def diff_settings(old: Settings, new: Settings) -> List[Setting]:
    changes: List[Setting] = []
    if new.wrap != old.wrap:
        changes.append(Wrap(new.wrap))
    if new.log_level != old.log_level:
        changes.append(LogLevel(new.log_level))
    return changes


class SettingsChannel:
    """Single-producer, single-consumer queue of setting changes."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[Setting]" = queue.Queue()

    def push(self, setting: Setting) -> None:
        self._queue.put(setting)

    def poll(self) -> Optional[Setting]:
        """Return the next pending change without blocking."""

        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> List[Setting]:
        changes: List[Setting] = []
        while (setting := self.poll()) is not None:
            changes.append(setting)
        return changes


class ConfigWatcher:
    """Watches the config file and feeds setting changes into a channel."""

    def __init__(
        self,
        path: Path,
        channel: SettingsChannel,
        *,
        telemetry: Telemetry,
    ) -> None:
        self.path = Path(path)
        self.channel = channel
        self.telemetry = telemetry
        self.settings = (
            read_settings(self.path, telemetry) if self.path.is_file() else Settings()
        )
        self._lock = threading.Lock()
        self._observer: Any = None

    def start(self) -> None:
        directory = self.path.parent
        if not directory.is_dir():
            self.telemetry.record_event(
                "config.unwatched",
                level="warning",
                data={"path": str(self.path)},
            )
            return

        watcher = self

        class _Handler(FileSystemEventHandler):
            def on_any_event(self, event: FileSystemEvent) -> None:
                if event.is_directory:
                    return
                paths = {getattr(event, "src_path", ""), getattr(event, "dest_path", "")}
                if any(_same_file(candidate, watcher.path) for candidate in paths):
                    watcher.reload()

        self._observer = Observer()
        self._observer.schedule(_Handler(), str(directory), recursive=False)
        self._observer.start()

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    def reload(self) -> List[Setting]:
        """Re-read the file and publish the settings that changed."""

        with self._lock:
            updated = read_settings(self.path, self.telemetry)
            changes = diff_settings(self.settings, updated)
            self.settings = updated
        for change in changes:
            self.channel.push(change)
        return changes


def _same_file(candidate: Any, target: Path) -> bool:
    if not candidate:
        return False
    if isinstance(candidate, bytes):
        candidate = os.fsdecode(candidate)
    return Path(candidate).resolve() == target.resolve()


__all__ = [
    "CONFIG_ENV",
    "ConfigWatcher",
    "LogLevel",
    "Setting",
    "Settings",
    "SettingsChannel",
    "Wrap",
    "default_config_path",
    "diff_settings",
    "read_settings",
]
