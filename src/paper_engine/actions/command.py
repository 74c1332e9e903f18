"""Evaluate the command sketch: ``see <path>``, ``put`` and ``end``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from paper_engine.io.explorer import ExplorerError
from paper_engine.modes.base_mode import ModeContext


@dataclass(slots=True)
class CommandOutcome:
    """Result of one command.

    ``status`` is ``ok``, ``ignored`` (unknown or empty command) or ``error``
    (the command failed and left the document unchanged).
    """

    command: str
    status: str = "ok"
    message: Optional[str] = None
    quit: bool = False
    redraw: bool = False

    @property
    def failed(self) -> bool:
        return self.status == "error"


CommandHandler = Callable[[ModeContext, str], CommandOutcome]


def execute_command(context: ModeContext, text: str) -> CommandOutcome:
    """Run ``text`` against the buffer held by ``context``."""

    name, _, argument = text.strip().partition(" ")
    handler = _COMMAND_HANDLERS.get(name)
    if handler is None:
        context.bus.emit("command.ignored", text)
        return CommandOutcome(command=name, status="ignored")

    with context.telemetry.span(
        "command::execute",
        component="commands",
        metadata={"command": name},
    ) as span:
        outcome = handler(context, argument.strip())
        span.add_metadata("status", outcome.status)
    context.bus.emit(f"command.{name}", outcome)
    return outcome


def _handle_see(context: ModeContext, path: str) -> CommandOutcome:
    if not path:
        return CommandOutcome(command="see", status="error", message="see: no path")
    if context.explorer is None:
        return _failure(context, "see", path, "no explorer configured")
    try:
        text = context.explorer.read(path)
    except ExplorerError as exc:
        return _failure(context, "see", path, str(exc))
    context.buffer.view(path, text)
    context.working_set.clear()
    return CommandOutcome(command="see", message=path, redraw=True)


def _handle_put(context: ModeContext, argument: str) -> CommandOutcome:
    del argument
    document = context.buffer.document
    if context.explorer is None:
        return _failure(context, "put", document.path, "no explorer configured")
    try:
        document.persist(context.explorer)
    except ExplorerError as exc:
        return _failure(context, "put", document.path, str(exc))
    return CommandOutcome(command="put", message=document.path)


def _handle_end(context: ModeContext, argument: str) -> CommandOutcome:
    del context, argument
    return CommandOutcome(command="end", quit=True)


def _failure(
    context: ModeContext, command: str, path: str, reason: str
) -> CommandOutcome:
    context.telemetry.record_event(
        "io.failure",
        level="warning",
        data={"command": command, "path": path, "reason": reason},
    )
    return CommandOutcome(command=command, status="error", message=reason)


_COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "see": _handle_see,
    "put": _handle_put,
    "end": _handle_end,
}


__all__ = ["CommandHandler", "CommandOutcome", "execute_command"]
