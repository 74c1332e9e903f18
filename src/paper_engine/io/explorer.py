"""File access used by the ``see`` and ``put`` commands."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class ExplorerError(RuntimeError):
    """Raised when a file cannot be read or written."""

    def __init__(self, path: str, error: OSError) -> None:
        super().__init__(f"Unable to access '{path}': {error.strerror or error}")
        self.path = path
        self.error = error


class Explorer(Protocol):
    def read(self, path: str) -> str:
        ...

    def write(self, path: str, text: str) -> None:
        ...


class LocalExplorer:
    """Reads and writes files on the local filesystem."""

    def __init__(self, *, root: str | Path | None = None, encoding: str = "utf-8"):
        self.root = Path(root) if root is not None else None
        self.encoding = encoding

    def resolve(self, path: str) -> Path:
        target = Path(path).expanduser()
        if self.root is not None and not target.is_absolute():
            target = self.root / target
        return target

    def read(self, path: str) -> str:
        try:
            text = self.resolve(path).read_text(encoding=self.encoding)
        except OSError as exc:
            raise ExplorerError(path, exc) from exc
        return text.replace("\r", "")

    def write(self, path: str, text: str) -> None:
        try:
            self.resolve(path).write_text(text, encoding=self.encoding)
        except OSError as exc:
            raise ExplorerError(path, exc) from exc


__all__ = ["Explorer", "ExplorerError", "LocalExplorer"]
