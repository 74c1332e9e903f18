"""The run loop that ties modes, the buffer, filters and the renderer together.

Each input is processed to completion before the next one is read: the active
mode turns a key into operations, the operations are applied in order, the
filter highlight is recomputed in filter mode, and the resulting edits are
handed to the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

from paper_engine.actions.command import execute_command
from paper_engine.buffer import Buffer, BufferValidationError, Document
from paper_engine.filters import FilterChain, noise
from paper_engine.io.config import LogLevel, Setting, Settings, SettingsChannel, Wrap
from paper_engine.io.explorer import Explorer
from paper_engine.keymaps import KeymapRegistry
from paper_engine.modes import (
    AddToSketch,
    ChangeMode,
    EditBuffer,
    ExecuteCommand,
    KeyInput,
    ModeBus,
    ModeContext,
    ModeName,
    ModeResult,
    Operation,
    ScrollDown,
    ScrollUp,
    SetMarks,
)
from paper_engine.modes.mode_manager import ModeManager, ModeTransitionError
from paper_engine.render import Edit, Renderer, full_redraw, highlights, incremental

from .telemetry import Telemetry

# Modes that leave highlights or marks on screen.
_DECORATED = frozenset({ModeName.FILTER, ModeName.ACTION, ModeName.EDIT})


@dataclass(frozen=True, slots=True)
class FileInput:
    """Synthetic input that opens ``path``; supplied from the command line."""

    path: str


@dataclass(frozen=True, slots=True)
class SettingInput:
    setting: Setting


Input = Union[KeyInput, FileInput, SettingInput]


@dataclass(slots=True)
class StepResult:
    edits: List[Edit] = field(default_factory=list)
    quit: bool = False
    alerts: List[str] = field(default_factory=list)
    mode_result: Optional[ModeResult] = None


class Paper:
    """Editor state plus the loop that feeds it inputs."""

    def __init__(
        self,
        renderer: Renderer,
        explorer: Optional[Explorer] = None,
        *,
        telemetry: Telemetry,
        settings: Optional[Settings] = None,
        channel: Optional[SettingsChannel] = None,
        keymap_registry: Optional[KeymapRegistry] = None,
        filters: Optional[FilterChain] = None,
    ) -> None:
        self.renderer = renderer
        self.telemetry = telemetry
        self.channel = channel or SettingsChannel()
        self.buffer = Buffer(telemetry=telemetry)
        self.context = ModeContext(
            buffer=self.buffer,
            filters=filters or FilterChain(telemetry),
            bus=ModeBus(),
            telemetry=telemetry,
            explorer=explorer,
            settings=settings or Settings(),
        )
        self.manager = ModeManager(self.context, keymap_registry=keymap_registry)

    @property
    def mode(self) -> ModeName:
        return self.manager.active_name

    @property
    def document(self) -> Document:
        return self.buffer.document

    @property
    def sketch(self) -> str:
        return self.manager.sketch

    def start(self, path: Optional[str] = None) -> StepResult:
        """Initialize the renderer and draw the first frame.

        ``RendererError`` from ``init`` propagates; nothing can be shown without
        a terminal.
        """

        self.renderer.init()
        level = self.context.settings.log_level
        if level:
            self.telemetry.set_level(level)
        if path:
            return self.step(FileInput(path))
        result = StepResult()
        self._redraw(result)
        return self._emit(result)

    def close(self) -> None:
        self.renderer.close()

    def run(self, path: Optional[str] = None) -> None:
        """Process inputs until a command asks to quit or input runs out."""

        self.start(path)
        try:
            while True:
                for setting in self.channel.drain():
                    self.step(SettingInput(setting))
                key = self.renderer.receive_input()
                if key is None:
                    break
                if self.step(key).quit:
                    break
        finally:
            self.close()

    def step(self, item: Input) -> StepResult:
        result = StepResult()
        if isinstance(item, FileInput):
            self._open(item.path, result)
        elif isinstance(item, SettingInput):
            self._apply_setting(item.setting)
        else:
            self._handle_key(item, result)
        return self._emit(result)

    def operate(self, operation: Operation, result: StepResult) -> None:
        if isinstance(operation, ChangeMode):
            self._change_mode(operation.mode, result)
        elif isinstance(operation, ExecuteCommand):
            self._execute(self.manager.sketch, result)
        elif isinstance(operation, ScrollDown):
            self._scroll(1, result)
        elif isinstance(operation, ScrollUp):
            self._scroll(-1, result)
        elif isinstance(operation, AddToSketch):
            self.manager.add_to_sketch(operation.text)
        elif isinstance(operation, EditBuffer):
            self._edit(operation.char, result)
        elif isinstance(operation, SetMarks):
            self.buffer.set_marks(operation.edge, self.context.working_set)
        else:
            raise TypeError(f"Unknown operation {operation!r}")

    def scroll_amount(self) -> int:
        return max(self.renderer.viewport_height() // 4, 1)

    def _handle_key(self, key: KeyInput, result: StepResult) -> None:
        mode_result = self.manager.handle_key(key)
        result.mode_result = mode_result
        for operation in mode_result.operations:
            self.operate(operation, result)

        if self.manager.active_name is ModeName.FILTER:
            enhancement = self.manager.enhance()
            if enhancement is not None:
                self.context.working_set = list(enhancement.sections)
                result.edits.extend(
                    highlights(
                        enhancement.sections,
                        self.document,
                        self.renderer.viewport_height(),
                    )
                )

    def _open(self, path: str, result: StepResult) -> None:
        self._execute(f"see {path}", result)

    def _execute(self, command: str, result: StepResult) -> None:
        outcome = execute_command(self.context, command)
        if outcome.quit:
            result.quit = True
        if outcome.failed:
            self._alert(outcome.message or f"{outcome.command} failed", result)
        if outcome.redraw:
            self._redraw(result)

    def _change_mode(self, target: ModeName, result: StepResult) -> None:
        previous = self.manager.active_name
        try:
            self.manager.switch_mode(target)
        except ModeTransitionError as exc:
            self.telemetry.record_event(
                "mode.rejected", level="warning", data={"reason": str(exc)}
            )
            self._alert(str(exc), result)
            return

        if target is ModeName.FILTER:
            self.context.working_set = noise(self.document)
        elif target is ModeName.DISPLAY:
            self.context.working_set = []
            self.buffer.clear_marks()
            if previous in _DECORATED:
                self._redraw(result)

    def _scroll(self, direction: int, result: StepResult) -> None:
        self.document.scroll(direction * self.scroll_amount())
        self._redraw(result)

    def _edit(self, char: str, result: StepResult) -> None:
        try:
            report = self.buffer.apply_char(char)
        except BufferValidationError as exc:
            self.telemetry.record_event(
                "edit.rejected", level="warning", data={"reason": str(exc)}
            )
            self._alert(str(exc), result)
            return
        if report.requires_full_redraw:
            self._redraw(result)
        else:
            result.edits.extend(
                incremental(report, self.document, self.renderer.viewport_height())
            )

    def _apply_setting(self, setting: Setting) -> None:
        settings = self.context.settings
        if isinstance(setting, Wrap):
            self.context.settings = replace(settings, wrap=setting.enabled)
        elif isinstance(setting, LogLevel):
            self.context.settings = replace(settings, log_level=setting.level)
            if setting.level:
                self.telemetry.set_level(setting.level)
        self.telemetry.record_event("settings.change", data={"setting": setting})

    def _redraw(self, result: StepResult) -> None:
        result.edits.extend(
            full_redraw(self.document, self.renderer.viewport_height())
        )

    def _alert(self, message: str, result: StepResult) -> None:
        result.alerts.append(message)
        result.edits.append(Edit.alert(message))

    def _emit(self, result: StepResult) -> StepResult:
        for edit in result.edits:
            self.renderer.apply(edit)
        return result


__all__ = ["FileInput", "Input", "Paper", "SettingInput", "StepResult"]
