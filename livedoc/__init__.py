"""Render documentation pages with live code excerpts.

livedoc turns annotated markdown into HTML: it embeds labelled excerpts of
real source files, substitutes ``%name%`` variables and ``{name}`` link
parameters, resolves ``[[wiki]]`` links, and gives every heading a stable
anchor.

Exports
-------
- ``DocRenderer``: renders pages from markdown and source repositories.
- ``DocConfig``: shared render settings.
- ``RenderedPage``: page HTML, sidebar HTML and source path.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from livedoc import DocConfig, DocRenderer
>>> from livedoc.repository import FilesystemRepository
>>> from pathlib import Path
>>> repo = FilesystemRepository(Path("."))
>>> renderer = DocRenderer(repo, repo, config=DocConfig(variables={"version": "1.0"}))
>>> renderer.render("Version %version%")
'<p>Version 1.0</p>'
"""

from __future__ import annotations

from .cli import app, main
from .config import DocConfig
from .docs import DocRenderer, PageIndexRequiredError, RenderedPage

__all__ = [
    "DocConfig",
    "DocRenderer",
    "PageIndexRequiredError",
    "RenderedPage",
    "app",
    "main",
]
