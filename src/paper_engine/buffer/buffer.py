"""High-level buffer façade combining the document and its marks."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import ContextManager, Optional, Sequence

from paper_engine.runtime.telemetry import Telemetry

from .coords import Section
from .document import Document
from .marks import Edge, EditReport, Mark, MarkSet
from .sync import BufferMirror, BufferValidationError


class Buffer:
    def __init__(
        self,
        *,
        telemetry: Telemetry,
        name: str = "default",
        document: Optional[Document] = None,
        marks: Optional[MarkSet] = None,
    ) -> None:
        self.name = name
        self.telemetry = telemetry
        self.document = document or Document()
        self.marks = marks if marks is not None else MarkSet()

    @classmethod
    def from_text(
        cls, text: str, *, telemetry: Telemetry, path: str = "", name: str = "default"
    ) -> "Buffer":
        return cls(
            telemetry=telemetry, name=name, document=Document.from_text(text, path=path)
        )

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.document.text,
            path=self.document.path,
            marks=self.marks.positions(),
            scroll_line=self.document.origin.line,
            attributes=dict(attributes or {}),
        )

    def view(self, path: str, text: str) -> None:
        """Replace the document with ``text`` read from ``path``."""

        with Transaction(self, "view"):
            self.document.load(text, path)
            self.marks.clear()

    def set_marks(self, edge: Edge, sections: Sequence[Section]) -> None:
        with Transaction(self, "set_marks") as tx:
            self.marks.set_marks(edge, sections, self.document)
            tx.annotate("marks", len(self.marks))

    def clear_marks(self) -> None:
        self.marks.clear()

    def apply_char(self, char: str) -> EditReport:
        """Apply one keystroke at every mark.

        A ``BufferValidationError`` raised part way through restores the text
        and marks as they were before the keystroke, then propagates.
        """

        text = self.document.text
        saved = [Mark(mark.position, mark.offset) for mark in self.marks]
        with Transaction(self, "apply_char") as tx:
            try:
                report = self.marks.apply(char, self.document)
            except BufferValidationError:
                self.document.text = text
                self.document.relayout()
                self.marks = MarkSet(saved)
                raise
            tx.annotate("applied", len(report.applied))
            tx.annotate("full_redraw", report.requires_full_redraw)
        return report


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None
        self._handle: object | None = None

    def __enter__(self) -> "Transaction":
        self._span_cm = self.buffer.telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._handle = self._span_cm.__enter__()
        return self

    def annotate(self, key: str, value: object) -> None:
        add_metadata = getattr(self._handle, "add_metadata", None)
        if add_metadata is not None:
            add_metadata(key, value)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
