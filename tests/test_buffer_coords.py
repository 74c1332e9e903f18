from __future__ import annotations

import pytest

from paper_engine.buffer import (
    INVALID,
    TO_LINE_END,
    Address,
    BufferValidationError,
    Document,
    Offset,
    Position,
    ScrollOrigin,
    Section,
)


def test_offset_arithmetic_propagates_invalid() -> None:
    assert not (INVALID + 3).is_valid
    assert not (INVALID - 1).is_valid
    assert (Offset(4) + 2) == Offset(6)
    assert (Offset(4) - 4) == Offset(0)


def test_offset_below_zero_becomes_invalid() -> None:
    assert not (Offset(0) - 1).is_valid
    assert not (Offset(2) + -5).is_valid


def test_invalid_offset_require_raises() -> None:
    with pytest.raises(BufferValidationError):
        INVALID.require()
    assert Offset(7).require() == 7


def test_positions_order_by_line_then_column() -> None:
    assert Position(1, 9) < Position(2, 0)
    assert Position(3, 1) < Position(3, 2)
    assert sorted([Position(2, 0), Position(1, 4)]) == [Position(1, 4), Position(2, 0)]


def test_section_resolves_to_line_end() -> None:
    document = Document.from_text("alpha\nbe")
    section = Section(Position(1, 2), TO_LINE_END)

    assert section.resolve_length(document) == 3
    assert section.end(document) == Position(1, 5)
    assert Section(Position(2, 0), 1).end(document) == Position(2, 1)


def test_scroll_origin_hides_lines_above_it() -> None:
    origin = ScrollOrigin(line=2, column=3)

    assert origin.address_of(Position(2, 0)) is None
    assert origin.address_of(Position(3, 4)) == Address(row=0, column=7)
    assert origin.region_of(Section.line(5)) is not None
