"""Per-render settings handed to the recognizers, serializer, and plugins."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from livedoc.page_index import Toc


@dc.dataclass(frozen=True, slots=True)
class RenderContext:
    """Immutable facts about the page being rendered.

    Attributes
    ----------
    relative_path : str or None
        Directory of the current page; resolves relative code references and
        relative wiki images. ``None`` for pages at the repository root.
    toc : Toc or None
        TOC tree rendered in place of ``@toc@`` markers.
    header_ids : bool
        Emit ``id`` attributes on headings. Disabled for embedded content
        such as sidebars.
    single_page : bool
        All pages are concatenated into one document, so wiki links become
        intra-document anchors.
    """

    relative_path: str | None = None
    toc: Toc | None = None
    header_ids: bool = True
    single_page: bool = False

    @property
    def page_dir_prefix(self) -> str:
        """Return ``relative_path`` with a trailing slash, or ``""``."""
        return f"{self.relative_path}/" if self.relative_path else ""


__all__ = ["RenderContext"]
