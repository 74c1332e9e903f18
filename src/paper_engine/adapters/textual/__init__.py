"""Textual renderer adapter and application."""

from .controller import TextualPaperAdapter, TextualUIHooks

__all__ = ["TextualPaperAdapter", "TextualUIHooks"]
