from __future__ import annotations

from typing import Iterable, List

import pytest

from paper_engine.buffer import Address, Mark, MarkSet, Offset, Position, Region
from paper_engine.io.config import LogLevel, SettingsChannel, Wrap
from paper_engine.modes import ChangeMode, EditBuffer, KeyInput, ModeName
from paper_engine.render import (
    Alert,
    Clear,
    Color,
    Edit,
    InsertChar,
    RendererError,
    ReplaceRow,
    SetColor,
)
from paper_engine.runtime.paper import Paper, SettingInput, StepResult

from mocks import MockExplorer, MockRenderer, make_telemetry


def make_paper(
    files: dict | None = None,
    *,
    keys: Iterable[str] = (),
    height: int = 20,
    channel: SettingsChannel | None = None,
) -> Paper:
    return Paper(
        MockRenderer(keys, height=height),
        MockExplorer(files or {}),
        telemetry=make_telemetry(),
        channel=channel,
    )


def press(paper: Paper, keys: str) -> List[StepResult]:
    return [paper.step(KeyInput.from_char(char)) for char in keys]


def rows(edits: Iterable[Edit]) -> List[str]:
    return [edit.change.text for edit in edits if isinstance(edit.change, ReplaceRow)]


def test_start_with_path_opens_file_and_draws() -> None:
    paper = make_paper({"a.txt": "one\ntwo"})

    result = paper.start("a.txt")

    assert paper.renderer.initialized is True
    assert isinstance(result.edits[0].change, Clear)
    assert rows(result.edits) == ["1 one", "2 two"]
    assert paper.renderer.applied == result.edits


def test_start_without_path_draws_empty_document() -> None:
    paper = make_paper()

    result = paper.start()

    assert rows(result.edits) == ["1 "]


def test_start_with_unreadable_file_alerts() -> None:
    paper = make_paper()

    result = paper.start("missing.txt")

    assert len(result.alerts) == 1
    assert isinstance(result.edits[-1].change, Alert)
    assert paper.document.text == ""


def test_renderer_init_failure_propagates() -> None:
    paper = Paper(MockRenderer(fail_init=True), telemetry=make_telemetry())

    with pytest.raises(RendererError):
        paper.start()


def test_full_redraw_is_limited_to_viewport() -> None:
    text = "\n".join(f"line {n}" for n in range(1, 31))
    paper = make_paper({"long.txt": text}, height=5)

    result = paper.start("long.txt")

    assert rows(result.edits) == [f"{n:>2} line {n}" for n in range(1, 6)]


def test_scroll_moves_by_quarter_viewport() -> None:
    text = "\n".join(f"line {n}" for n in range(1, 11))
    paper = make_paper({"ten.txt": text}, height=8)
    paper.start("ten.txt")

    down = paper.step(KeyInput.from_char("j"))

    assert paper.scroll_amount() == 2
    assert paper.document.origin.line == 2
    assert rows(down.edits)[0] == " 3 line 3"
    press(paper, "kkk")
    assert paper.document.origin.line == 0


def test_filter_mode_highlights_matches() -> None:
    paper = make_paper({"a.txt": "abc\nxbx"})
    paper.start("a.txt")

    results = press(paper, "/b")

    assert paper.mode is ModeName.FILTER
    assert paper.sketch == "/b"
    highlighted = [
        edit.region
        for edit in results[-1].edits
        if edit.change == SetColor(Color.HIGHLIGHT)
    ]
    assert highlighted == [
        Region(Address(0, 3), 1),
        Region(Address(1, 3), 1),
    ]
    normal = [
        edit for edit in results[-1].edits if edit.change == SetColor(Color.NORMAL)
    ]
    assert len(normal) == 2


def test_empty_pattern_highlights_nothing() -> None:
    paper = make_paper({"a.txt": "abc"})
    paper.start("a.txt")

    result = paper.step(KeyInput.from_char("/"))

    assert all(edit.change != SetColor(Color.HIGHLIGHT) for edit in result.edits)
    assert paper.context.working_set == []


def test_line_filter_then_insert_at_every_start() -> None:
    paper = make_paper({"a.txt": "abc\nabd\nzzz"})
    paper.start("a.txt")

    press(paper, "#1.2\ni")
    result = paper.step(KeyInput.from_char("X"))

    assert paper.mode is ModeName.EDIT
    assert paper.document.text == "Xabc\nXabd\nzzz"
    assert [edit.change for edit in result.edits] == [InsertChar("X")] * 2
    assert [edit.region for edit in result.edits] == [
        Region(Address(0, 2), 1),
        Region(Address(1, 2), 1),
    ]


def test_insert_at_section_ends_with_pattern_filter() -> None:
    paper = make_paper({"a.txt": "foo bar\nbar"})
    paper.start("a.txt")

    press(paper, "/bar\nI!")

    assert paper.document.text == "foo bar!\nbar!"


def test_enter_in_edit_mode_redraws_everything() -> None:
    paper = make_paper({"a.txt": "ab\ncd"})
    paper.start("a.txt")
    press(paper, "#2\ni")

    result = paper.step(KeyInput.from_char("\n"))

    assert paper.document.text == "ab\n\ncd"
    assert isinstance(result.edits[0].change, Clear)
    assert rows(result.edits) == ["1 ab", "2 ", "3 cd"]


def test_backspace_replaces_affected_rows() -> None:
    paper = make_paper({"a.txt": "ab\nab"})
    paper.start("a.txt")
    press(paper, "/b\nI")

    result = paper.step(KeyInput.from_char("\x7f"))

    assert paper.document.text == "a\na"
    assert result.edits == [
        Edit(Region.row(0), ReplaceRow("1 a")),
        Edit(Region.row(1), ReplaceRow("2 a")),
    ]


def test_scrolled_filter_and_edit_touch_only_visible_rows() -> None:
    text = "\n".join(f"line {n}" for n in range(1, 13))
    paper = make_paper({"twelve.txt": text}, height=8)
    paper.start("twelve.txt")
    press(paper, "j")
    assert paper.document.origin.line == 2

    filtered = press(paper, "#2.11")[-1]

    highlighted = [
        edit.region
        for edit in filtered.edits
        if edit.change == SetColor(Color.HIGHLIGHT)
    ]
    # Line 2 sits above the viewport and line 11 below it.
    assert highlighted == [
        Region(Address(row, 3), len(f"line {row + 3}")) for row in range(8)
    ]
    normal = [edit for edit in filtered.edits if edit.change == SetColor(Color.NORMAL)]
    assert len(normal) == 8

    press(paper, "\ni")
    result = paper.step(KeyInput.from_char("Z"))

    assert paper.document.lines[1] == "Zline 2"
    assert paper.document.lines[10] == "Zline 11"
    assert [edit.change for edit in result.edits] == [InsertChar("Z")] * 8
    assert [edit.region for edit in result.edits] == [
        Region(Address(row, 3), 1) for row in range(8)
    ]


def test_rejected_keystroke_alerts_and_keeps_text() -> None:
    paper = make_paper({"a.txt": "ab"})
    paper.start("a.txt")
    paper.buffer.marks = MarkSet(
        [Mark(Position(1, 0), Offset(0)), Mark(Position(1, 5), Offset(5))]
    )
    result = StepResult()

    paper.operate(EditBuffer("z"), result)

    assert len(result.alerts) == 1
    assert isinstance(result.edits[-1].change, Alert)
    assert paper.document.text == "ab"


def test_escape_from_edit_clears_marks_and_redraws() -> None:
    paper = make_paper({"a.txt": "ab"})
    paper.start("a.txt")
    press(paper, "#1\ni")

    result = paper.step(KeyInput.from_char("\x1b"))

    assert paper.mode is ModeName.DISPLAY
    assert len(paper.buffer.marks) == 0
    assert paper.context.working_set == []
    assert isinstance(result.edits[0].change, Clear)


def test_command_see_switches_document() -> None:
    paper = make_paper({"a.txt": "first", "b.txt": "second"})
    paper.start("a.txt")

    results = press(paper, ".see b.txt\n")

    assert paper.mode is ModeName.DISPLAY
    assert paper.document.path == "b.txt"
    assert rows(results[-1].edits) == ["1 second"]


def test_command_put_writes_edits() -> None:
    paper = make_paper({"a.txt": "ab"})
    paper.start("a.txt")
    press(paper, "#1\niZ\x1b")

    press(paper, ".put\n")

    assert paper.context.explorer.writes == [("a.txt", "Zab")]


def test_failed_command_alerts_and_keeps_document() -> None:
    paper = make_paper({"a.txt": "ab"})
    paper.start("a.txt")

    results = press(paper, ".see nope.txt\n")

    assert results[-1].alerts
    assert paper.document.path == "a.txt"
    assert paper.mode is ModeName.DISPLAY


def test_illegal_mode_change_alerts() -> None:
    paper = make_paper()
    paper.start()
    result = StepResult()

    paper.operate(ChangeMode(ModeName.EDIT), result)

    assert paper.mode is ModeName.DISPLAY
    assert len(result.alerts) == 1


def test_unknown_operation_raises() -> None:
    paper = make_paper()

    with pytest.raises(TypeError):
        paper.operate(object(), StepResult())  # type: ignore[arg-type]


def test_run_until_end_command() -> None:
    paper = make_paper({"a.txt": "ab"}, keys=".end\nj")

    paper.run("a.txt")

    assert paper.renderer.closed is True
    # The trailing key is never read.
    assert paper.renderer.receive_input() == KeyInput.from_char("j")


def test_run_stops_when_input_is_exhausted() -> None:
    paper = make_paper(keys="j")

    paper.run()

    assert paper.renderer.closed is True


def test_run_applies_pending_settings() -> None:
    channel = SettingsChannel()
    channel.push(Wrap(True))
    paper = make_paper(keys="j", channel=channel)

    paper.run()

    assert paper.context.settings.wrap is True


def test_setting_inputs_update_settings() -> None:
    paper = make_paper()

    paper.step(SettingInput(LogLevel("DEBUG")))
    paper.step(SettingInput(Wrap(True)))

    assert paper.context.settings.log_level == "DEBUG"
    assert paper.context.settings.wrap is True
