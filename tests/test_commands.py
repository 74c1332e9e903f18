from __future__ import annotations

from typing import List

from paper_engine.actions import execute_command
from paper_engine.buffer import Buffer, Offset, Section
from paper_engine.filters import FilterChain
from paper_engine.modes import ModeBus, ModeContext

from mocks import MockExplorer, make_telemetry


def make_context(
    explorer: MockExplorer | None = None, text: str = "start", path: str = "a.txt"
) -> ModeContext:
    telemetry = make_telemetry()
    return ModeContext(
        buffer=Buffer.from_text(text, telemetry=telemetry, path=path),
        filters=FilterChain(telemetry),
        bus=ModeBus(),
        telemetry=telemetry,
        explorer=explorer,
    )


def test_see_loads_file_and_requests_redraw() -> None:
    explorer = MockExplorer({"notes.txt": "one\ntwo"})
    context = make_context(explorer)
    context.working_set = [Section.line(1)]

    outcome = execute_command(context, "see notes.txt")

    assert outcome.status == "ok"
    assert outcome.redraw is True
    assert context.buffer.document.text == "one\ntwo"
    assert context.buffer.document.path == "notes.txt"
    assert context.working_set == []


def test_see_failure_leaves_document_unchanged() -> None:
    context = make_context(MockExplorer())

    outcome = execute_command(context, "see missing.txt")

    assert outcome.failed is True
    assert outcome.redraw is False
    assert context.buffer.document.text == "start"
    assert context.buffer.document.path == "a.txt"


def test_see_without_path_is_an_error() -> None:
    context = make_context(MockExplorer())

    outcome = execute_command(context, "see")

    assert outcome.failed is True
    assert context.buffer.document.text == "start"


def test_put_writes_current_document() -> None:
    explorer = MockExplorer()
    context = make_context(explorer)
    context.buffer.document.insert(Offset(5), "!")

    outcome = execute_command(context, "put")

    assert outcome.status == "ok"
    assert explorer.writes == [("a.txt", "start!")]
    assert context.buffer.document.dirty is False


def test_put_failure_reports_error() -> None:
    context = make_context(MockExplorer(failing=["a.txt"]))

    outcome = execute_command(context, "put")

    assert outcome.failed is True
    assert context.buffer.document.text == "start"


def test_missing_explorer_is_an_error() -> None:
    context = make_context(None)

    assert execute_command(context, "put").failed is True
    assert execute_command(context, "see x").failed is True


def test_end_requests_quit() -> None:
    outcome = execute_command(make_context(), "end")

    assert outcome.quit is True
    assert outcome.failed is False


def test_unknown_command_is_ignored() -> None:
    context = make_context()
    seen: List[object] = []
    context.bus.subscribe("command.ignored", seen.append)

    outcome = execute_command(context, "fly away")
    empty = execute_command(context, "")

    assert outcome.status == "ignored"
    assert empty.status == "ignored"
    assert outcome.quit is False
    assert seen == ["fly away", ""]


def test_known_command_emits_on_bus() -> None:
    context = make_context()
    seen: List[object] = []
    context.bus.subscribe("command.end", seen.append)

    outcome = execute_command(context, "  end  ")

    assert seen == [outcome]
