from __future__ import annotations

from typing import List

import pytest
from rich.text import Text

from paper_engine.adapters.textual import TextualPaperAdapter, TextualUIHooks
from paper_engine.adapters.textual.app import _log_level, _parse_args
from paper_engine.buffer import Address, Region
from paper_engine.render import (
    Color,
    Edit,
    InsertChar,
    RendererError,
    ReplaceRow,
    SetColor,
)
from paper_engine.runtime.paper import Paper

from mocks import MockExplorer, make_telemetry


def make_adapter(views: List[Text] | None = None, **hooks) -> TextualPaperAdapter:
    sink = views if views is not None else []
    adapter = TextualPaperAdapter(TextualUIHooks(update_view=sink.append, **hooks))
    adapter.init()
    return adapter


def make_bound(files: dict, **hooks) -> tuple[TextualPaperAdapter, Paper]:
    adapter = make_adapter(**hooks)
    paper = Paper(adapter, MockExplorer(files), telemetry=make_telemetry())
    adapter.bind(paper)
    return adapter, paper


def test_apply_before_init_raises() -> None:
    adapter = TextualPaperAdapter(TextualUIHooks(update_view=lambda text: None))

    with pytest.raises(RendererError):
        adapter.apply(Edit.clear())


def test_rows_follow_replace_and_insert() -> None:
    adapter = make_adapter()

    adapter.apply(Edit(Region.row(1), ReplaceRow("2 bc")))
    adapter.apply(Edit(Region(Address(1, 2), 1), InsertChar("a")))

    assert adapter.rows == ["", "2 abc"]
    adapter.apply(Edit.clear())
    assert adapter.rows == []


def test_highlights_are_rendered_reversed() -> None:
    adapter = make_adapter()
    adapter.apply(Edit(Region.row(0), ReplaceRow("1 foo bar")))

    adapter.apply(Edit(Region(Address(0, 6), 3), SetColor(Color.HIGHLIGHT)))
    rendered = adapter.render()

    assert rendered.plain == "1 foo bar"
    assert [(span.start, span.end, span.style) for span in rendered.spans] == [
        (6, 9, "reverse")
    ]
    adapter.apply(Edit(Region.row(0), SetColor(Color.NORMAL)))
    assert adapter.highlights == {}


def test_alerts_reach_hook() -> None:
    seen: List[str] = []
    adapter = make_adapter(alert=seen.append)

    adapter.apply(Edit.alert("see: no path"))

    assert seen == ["see: no path"]
    assert adapter.alerts == ["see: no path"]


def test_unbound_adapter_rejects_keys() -> None:
    adapter = make_adapter()

    with pytest.raises(RendererError):
        adapter.handle_textual_key("j", text="j")


def test_handle_textual_key_steps_the_editor() -> None:
    statuses: List[str] = []
    sketches: List[str] = []
    adapter, paper = make_bound(
        {"a.txt": "foo\nbar"},
        update_status=statuses.append,
        show_sketch=sketches.append,
    )
    paper.start("a.txt")

    adapter.handle_textual_key("/", text="/")
    adapter.handle_textual_key("o", text="o")

    assert adapter.rows == ["1 foo", "2 bar"]
    assert adapter.highlights == {0: [(3, 4), (4, 5)]}
    assert statuses[-1] == "filter  a.txt"
    assert sketches[-1] == "/o"


def test_edit_through_adapter_updates_rows() -> None:
    adapter, paper = make_bound({"a.txt": "ab\ncd"})
    paper.start("a.txt")

    for key, text in [("#", "#"), ("2", "2"), ("ENTER", None), ("i", "i")]:
        adapter.handle_textual_key(key, text=text)
    adapter.handle_textual_key("z", text="z")

    assert paper.document.text == "ab\nzcd"
    assert adapter.rows == ["1 ab", "2 zcd"]


def test_log_level_defers_to_environment_without_verbose_flag() -> None:
    assert _parse_args([]).verbose == 0
    assert _log_level(_parse_args([]).verbose) is None
    assert _log_level(_parse_args(["-v"]).verbose) == "INFO"
    assert _log_level(_parse_args(["-vvv"]).verbose) == "DEBUG"
