"""File repositories that hand markdown and source files to the renderer.

The renderer never touches the filesystem directly: it asks a
:class:`FileRepository` for file contents and for the location of a page by
name. :class:`FilesystemRepository` serves files below a root directory.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path, PurePosixPath


class FileRepository(typ.Protocol):
    """Read-only access to documentation or source files."""

    def load_file(self, path: str) -> str | None:
        """Return the text of ``path`` or ``None`` when it cannot be read."""
        ...

    def find_file_with_name(self, name: str) -> str | None:
        """Return the repository path of the first file called ``name``."""
        ...


class FilesystemRepository:
    """Serve files below ``root``; paths are POSIX-style and root-relative."""

    def __init__(self, root: Path, *, encoding: str = "utf-8") -> None:
        self.root = root
        self.encoding = encoding

    def load_file(self, path: str) -> str | None:
        """Return the decoded file contents, or ``None`` on a miss."""
        candidate = self._resolve(path)
        if candidate is None or not candidate.is_file():
            return None
        try:
            return candidate.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError):
            return None

    def find_file_with_name(self, name: str) -> str | None:
        """Return the first match for ``name`` in sorted walk order."""
        if not self.root.is_dir():
            return None
        for candidate in sorted(self.root.rglob(name)):
            if candidate.is_file():
                return candidate.relative_to(self.root).as_posix()
        return None

    def _resolve(self, path: str) -> Path | None:
        """Return the on-disk path for ``path`` unless it escapes the root."""
        relative = PurePosixPath(path.lstrip("/"))
        if ".." in relative.parts:
            resolved = (self.root / relative).resolve()
            if not resolved.is_relative_to(self.root.resolve()):
                return None
            return resolved
        return self.root / relative


__all__ = ["FileRepository", "FilesystemRepository"]
