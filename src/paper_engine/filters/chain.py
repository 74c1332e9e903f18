"""Filter chain that narrows the working set of sections.

A sketch such as ``#3.9&&/foo`` is split on ``&&`` into tokens. The first
character of each token selects the filter; the rest is its argument. Tokens
are folded left to right, each narrowing the set produced by the previous one,
starting from the noise (one section per document line).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from paper_engine.buffer.coords import Position, Section
from paper_engine.buffer.document import Document
from paper_engine.runtime.telemetry import Telemetry

SEPARATOR = "&&"

_LINE_TOKEN = re.compile(r"^#(\d+)(?:([.+-])(\d+))?$")


def noise(document: Document) -> List[Section]:
    """Return one whole-line section per document line."""

    return [Section.line(number) for number in range(1, document.line_count + 1)]


class Filter(Protocol):
    trigger: str

    def narrow(
        self, token: str, sections: Sequence[Section], document: Document
    ) -> List[Section]:
        ...


@dataclass(frozen=True, slots=True)
class LineFilter:
    """Keep sections whose start line lies inside a line range.

    ``#n`` selects line ``n``; ``#a.b`` lines ``a`` through ``b``; ``#o+d`` and
    ``#o-d`` the lines within ``d`` of ``o``. Reversed ranges are normalized.
    """

    trigger: str = "#"

    def narrow(
        self, token: str, sections: Sequence[Section], document: Document
    ) -> List[Section]:
        bounds = parse_line_range(token)
        if bounds is None:
            return list(sections)
        low, high = bounds
        return [section for section in sections if low <= section.start.line <= high]


def parse_line_range(token: str) -> Optional[Tuple[int, int]]:
    match = _LINE_TOKEN.match(token)
    if match is None:
        return None
    first = int(match.group(1))
    operator, argument = match.group(2), match.group(3)
    if operator is None:
        return first, first
    second = int(argument)
    if operator == "+":
        second = first + second
    elif operator == "-":
        second = first - second
    return min(first, second), max(first, second)


@dataclass(frozen=True, slots=True)
class PatternFilter:
    """Replace each section with one section per pattern match inside it."""

    trigger: str = "/"

    def narrow(
        self, token: str, sections: Sequence[Section], document: Document
    ) -> List[Section]:
        source = token[len(self.trigger) :]
        if not source:
            return []
        try:
            pattern = re.compile(source)
        except re.error:
            return []

        narrowed: List[Section] = []
        for section in sections:
            text = document.line(section.start.line)
            if text is None:
                continue
            begin = section.start.column
            end = begin + section.resolve_length(document)
            for match in pattern.finditer(text, begin, end):
                if match.start() == match.end():
                    continue
                narrowed.append(
                    Section(
                        Position(section.start.line, match.start()),
                        match.end() - match.start(),
                    )
                )
        return narrowed


DEFAULT_FILTERS: Tuple[Filter, ...] = (LineFilter(), PatternFilter())


class FilterChain:
    """Dispatches sketch tokens to the filter registered for their trigger."""

    def __init__(
        self,
        telemetry: Telemetry,
        filters: Iterable[Filter] = DEFAULT_FILTERS,
    ) -> None:
        self.telemetry = telemetry
        self._filters: Dict[str, Filter] = {f.trigger: f for f in filters}

    @property
    def triggers(self) -> Tuple[str, ...]:
        return tuple(self._filters)

    def narrow(
        self, token: str, sections: Sequence[Section], document: Document
    ) -> List[Section]:
        """Apply a single token; unknown triggers leave ``sections`` unchanged."""

        if not token:
            return list(sections)
        selected = self._filters.get(token[0])
        if selected is None:
            return list(sections)
        with self.telemetry.span(
            "filters::narrow",
            metadata={"trigger": selected.trigger, "candidates": len(sections)},
        ) as span:
            narrowed = selected.narrow(token, sections, document)
            span.add_metadata("kept", len(narrowed))
        return narrowed

    def apply(
        self,
        sketch: str,
        document: Document,
        sections: Optional[Sequence[Section]] = None,
    ) -> List[Section]:
        working = list(sections) if sections is not None else noise(document)
        for token in split_sketch(sketch):
            working = self.narrow(token, working, document)
        return working


def split_sketch(sketch: str) -> List[str]:
    return sketch.split(SEPARATOR)


__all__ = [
    "DEFAULT_FILTERS",
    "Filter",
    "FilterChain",
    "LineFilter",
    "PatternFilter",
    "SEPARATOR",
    "noise",
    "parse_line_range",
    "split_sketch",
]
