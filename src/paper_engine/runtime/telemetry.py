"""Telemetry service built directly on telelog.

A single :class:`Telemetry` is constructed by the process entry point and
handed to every component that logs. It exposes a narrow surface:

``Telemetry.from_env()`` / ``Telemetry.from_preset(name)`` -- build the service
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit structured events at a chosen level
``span(name, ...)`` -- context manager marrying profiling + component tracking
``set_level(level)`` -- rebuild the configuration with a new minimum level
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "PAPER_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "paper_engine")
DEFAULT_LOG_FILE = os.getenv(f"{ENV_PREFIX}LOG_FILE", "")

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _format_pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def normalize_level(level: str) -> str:
    name = str(level).strip().upper()
    if name == "WARN":
        name = "WARNING"
    if name not in LEVELS:
        raise ValueError(f"Unknown log level '{level}'.")
    return name


def _apply_engine_overrides(config: Any) -> Any:
    config.with_profiling(True)
    return config


def _build_preset_config(preset: str) -> Any:
    config = tl.Config()
    key = preset.lower()

    if key == "development":
        config.with_min_level("DEBUG")
        config.with_console_output(True)
        config.with_colored_output(True)
        config.with_json_format(False)
    elif key == "production":
        config.with_min_level("INFO")
        config.with_console_output(False)
        log_path = _env("LOG_FILE", DEFAULT_LOG_FILE) or "paper.log"
        config.with_file_output(log_path)
        config.with_buffering(True)
    elif key in {"performance", "performance_analysis"}:
        config.with_min_level("DEBUG")
        config.with_console_output(False)
        config.with_buffering(True)
        config.with_json_format(True)
        log_path = _env("LOG_FILE", DEFAULT_LOG_FILE) or "paper-performance.log"
        config.with_file_output(log_path)
    else:
        raise ValueError(f"Unknown preset '{preset}'.")

    return _apply_engine_overrides(config)


def _build_env_config(level: Optional[str] = None) -> Any:
    config = tl.Config()
    config.with_min_level(normalize_level(level or _env("LOG_LEVEL") or "INFO"))

    if not _env_flag("DISABLE_CONSOLE", False):
        config.with_console_output(True)
        config.with_colored_output(not _env_flag("NO_COLOR", False))
    else:
        config.with_console_output(False)

    if _env_flag("LOG_JSON", False):
        config.with_json_format(True)

    log_file = _env("LOG_FILE") or DEFAULT_LOG_FILE
    if log_file:
        config.with_file_output(log_file)

    if _env_flag("LOG_BUFFERED", False):
        buffer_size = int(_env("LOG_BUFFER_SIZE") or "2048")
        config.with_buffering(True)
        config.with_buffer_size(buffer_size)

    return _apply_engine_overrides(config)


def _resolve_level_method(
    logger: Any, level: Any, *, expect_data: bool = False
) -> Tuple[Any, bool]:
    name = str(level).lower()
    if expect_data:
        with_attr = getattr(logger, f"{name}_with", None)
        if with_attr is not None:
            return with_attr, True

    attr = getattr(logger, name, None)
    if attr is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return attr, False


@dataclass
class SpanHandle:
    """Handle returned from ``span`` for optional metadata updates."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def _emit(
        self, level: str, message: str, extra: Optional[Dict[str, Any]] = None
    ) -> None:
        payload = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        if extra:
            payload.update({key: _stringify(val) for key, val in extra.items()})

        method, accepts = _resolve_level_method(self.logger, level, expect_data=True)
        if accepts:
            method(message, _format_pairs(payload))
        else:
            method(f"{message} {payload}")

    def fail(self, reason: str) -> None:
        self._emit("error", "span::fail", {"reason": reason})

    def cancel(self, reason: str | None = None) -> None:
        extra = {"reason": reason} if reason else None
        self._emit("warning", "span::cancel", extra)


class Telemetry:
    """Logging service owned by the process entry point."""

    def __init__(self, *, config: Optional[Any] = None) -> None:
        self._config = _apply_engine_overrides(
            config if config is not None else _build_env_config()
        )
        self._loggers: MutableMapping[str, Any] = {}
        self.level = normalize_level(_env("LOG_LEVEL") or "INFO")

    @classmethod
    def from_env(cls, *, level: Optional[str] = None) -> "Telemetry":
        telemetry = cls(config=_build_env_config(level))
        if level is not None:
            telemetry.level = normalize_level(level)
        return telemetry

    @classmethod
    def from_preset(cls, preset: str) -> "Telemetry":
        """Build from a named preset (``development``, ``production``, ``performance``)."""

        return cls(config=_build_preset_config(preset))

    def set_level(self, level: str) -> None:
        """Adopt ``level`` as the minimum level; cached loggers are rebuilt lazily."""

        self.level = normalize_level(level)
        self._config.with_min_level(self.level)
        self._loggers.clear()

    def get_logger(self, name: Optional[str] = None) -> Any:
        """Return a cached ``telelog.Logger`` configured for this service."""

        logger_name = name or DEFAULT_LOGGER_NAME
        if logger_name not in self._loggers:
            self._loggers[logger_name] = tl.Logger.with_config(
                logger_name, self._config
            )
        return self._loggers[logger_name]

    def record_event(
        self,
        name: str,
        *,
        level: str | Any = "info",
        data: Optional[Dict[str, Any]] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        """Emit a structured ``event::<name>`` record."""

        log = self.get_logger(logger_name)
        payload = {"event": name, **(data or {})}
        method, accepts_data = _resolve_level_method(log, level, expect_data=True)
        message = f"event::{name}"
        if accepts_data:
            method(message, _format_pairs(payload))
        else:
            method(f"{message} {payload}")

    @contextmanager
    def span(
        self,
        name: str,
        *,
        logger_name: Optional[str] = None,
        component: Optional[str | bool] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Iterator[SpanHandle]:
        """Profile a code block and (optionally) track it as a component.

        Parameters
        ----------
        name:
            Operation name passed to ``logger.profile``.
        logger_name:
            Target logger; defaults to the engine logger.
        component:
            If ``True`` use the same name as the profile; if a string, use it as
            the component identifier.
        metadata:
            Written both as transient logger context and as span metadata.
        """

        log = self.get_logger(logger_name)
        component_name = None
        if component is True:
            component_name = name
        elif isinstance(component, str):
            component_name = component

        context_keys = []
        metadata_payload: Dict[str, Any] = {}
        if metadata:
            for key, value in metadata.items():
                serialized = _stringify(value)
                metadata_payload[key] = serialized
                log.add_context(key, serialized)
                context_keys.append(key)

        with ExitStack() as stack:
            if component_name:
                stack.enter_context(log.track_component(component_name))

            stack.enter_context(log.profile(name))
            handle = SpanHandle(
                logger=log,
                span_name=name,
                component_name=component_name,
                metadata=dict(metadata_payload),
            )

            try:
                yield handle
            except Exception as exc:
                handle.fail(str(exc))
                raise
            finally:
                for key in context_keys:
                    log.remove_context(key)


__all__ = [
    "LEVELS",
    "SpanHandle",
    "Telemetry",
    "normalize_level",
]
