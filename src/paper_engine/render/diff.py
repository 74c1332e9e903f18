"""Build render-diff edits from document state and mark edit reports."""

from __future__ import annotations

from typing import List, Sequence

from paper_engine.buffer.coords import Address, Region, Section
from paper_engine.buffer.document import Document
from paper_engine.buffer.marks import EditClass, EditReport

from .edits import Color, Edit, InsertChar, ReplaceRow, SetColor


def full_redraw(document: Document, height: int) -> List[Edit]:
    """Clear the screen and replace every visible row."""

    edits = [Edit.clear()]
    for row, (_, text) in enumerate(document.render_lines()):
        if row >= height:
            break
        edits.append(Edit(Region.row(row), ReplaceRow(text)))
    return edits


def incremental(report: EditReport, document: Document, height: int) -> List[Edit]:
    """Per-mark edits for a pass that did not restructure lines."""

    edits: List[Edit] = []
    for record in report.applied:
        if record.kind is EditClass.INSERT:
            address = document.origin.address_of(record.point)
            if _visible(address, height):
                edits.append(Edit(Region(address, 1), InsertChar(record.char or "")))
        elif record.kind is EditClass.BACKSPACE:
            address = document.origin.address_of(record.mark)
            if _visible(address, height):
                text = document.display_line(record.mark.line)
                edits.append(Edit(Region.row(address.row), ReplaceRow(text)))
    return edits


def highlights(
    sections: Sequence[Section], document: Document, height: int
) -> List[Edit]:
    """Reset every visible row to normal, then highlight each visible section."""

    rows = min(height, max(document.line_count - document.origin.line, 0))
    edits = [Edit(Region.row(row), SetColor(Color.NORMAL)) for row in range(rows)]
    for section in sections:
        address = document.origin.address_of(section.start)
        if not _visible(address, height):
            continue
        length = section.resolve_length(document)
        edits.append(Edit(Region(address, length), SetColor(Color.HIGHLIGHT)))
    return edits


def _visible(address: Address | None, height: int) -> bool:
    return address is not None and address.row < height


__all__ = ["full_redraw", "highlights", "incremental"]
