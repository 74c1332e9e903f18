"""Working-set narrowing filters."""

from .chain import (
    DEFAULT_FILTERS,
    SEPARATOR,
    Filter,
    FilterChain,
    LineFilter,
    PatternFilter,
    noise,
    parse_line_range,
    split_sketch,
)

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
