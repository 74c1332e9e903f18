"""UI-agnostic multi-cursor editing engine driven by filters and marks."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "filters",
    "io",
    "keymaps",
    "modes",
    "render",
    "runtime",
]

__version__ = "0.1.0"
