"""Screen changes, renderer protocol and render-diff builders."""

from .diff import full_redraw, highlights, incremental
from .edits import (
    SCREEN,
    Alert,
    Change,
    Clear,
    Color,
    Edit,
    InsertChar,
    Renderer,
    RendererError,
    ReplaceRow,
    SetColor,
)

__all__ = [
    "Alert",
    "Change",
    "Clear",
    "Color",
    "Edit",
    "InsertChar",
    "Renderer",
    "RendererError",
    "ReplaceRow",
    "SCREEN",
    "SetColor",
    "full_redraw",
    "highlights",
    "incremental",
]
