"""Table-of-contents tree and the page index derived from it.

A documentation site is described by a tree of :class:`Toc` nodes whose
leaves are :class:`TocPage` entries. :class:`PageIndex` flattens that tree into
:class:`Page` records that know their directory, their enclosing TOC chain
(used to render the sidebar) and the page that follows them in reading order.

Example
-------
>>> from livedoc.page_index import PageIndex, Toc, TocPage
>>> guide = Toc("guide", "Guide", (("Setup", TocPage("Setup", "Setup")),), path="guide")
>>> root = Toc("index", "Docs", (("Home", TocPage("Home", "Home")), ("Guide", guide)))
>>> index = PageIndex.from_toc(root)
>>> index.get("Home").next.full_path
'guide/Setup'
"""

from __future__ import annotations

import dataclasses as dc
import posixpath
import typing as typ


@dc.dataclass(frozen=True, slots=True)
class TocPage:
    """Leaf of the TOC tree naming a single markdown page."""

    page: str
    title: str


@dc.dataclass(frozen=True, slots=True)
class Toc:
    """Internal TOC node holding an ordered sequence of labelled children.

    Attributes
    ----------
    name : str
        Identifier of this TOC node.
    title : str
        Human readable heading.
    nodes : tuple[tuple[str, TocTree], ...]
        Ordered ``(label, child)`` pairs.
    path : str
        Directory of this node's pages, relative to its parent TOC.
    """

    name: str
    title: str
    nodes: tuple[tuple[str, TocTree], ...] = ()
    path: str = ""


TocTree = TocPage | Toc


@dc.dataclass(slots=True)
class Page:
    """A page resolved from the index."""

    name: str
    title: str
    path: str
    nav: list[Toc]
    next: Page | None = None

    @property
    def full_path(self) -> str:
        """Return the page location without the markdown suffix."""
        return posixpath.join(self.path, self.name) if self.path else self.name


def collect_pages_in_order(node: TocTree) -> list[str]:
    """Return page names in depth-first reading order."""
    match node:
        case TocPage(page=page):
            return [page]
        case Toc(nodes=nodes):
            return [name for _label, child in nodes for name in collect_pages_in_order(child)]
    return []  # pragma: no cover - TocTree is closed


class PageIndex:
    """Lookup of pages by name plus the root TOC used for full-site ordering."""

    def __init__(self, toc: Toc, pages: typ.Mapping[str, Page]) -> None:
        self.toc = toc
        self._pages = dict(pages)

    @classmethod
    def from_toc(cls, toc: Toc) -> PageIndex:
        """Index every page of ``toc``, linking each page to its successor."""
        ordered: list[Page] = []

        def _walk(node: Toc, directory: str, nav: list[Toc]) -> None:
            chain = [node, *nav]
            for _label, child in node.nodes:
                match child:
                    case TocPage():
                        ordered.append(
                            Page(name=child.page, title=child.title, path=directory, nav=chain)
                        )
                    case Toc():
                        child_dir = (
                            posixpath.join(directory, child.path) if child.path else directory
                        )
                        _walk(child, child_dir, chain)

        _walk(toc, toc.path, [])
        for current, following in zip(ordered, ordered[1:], strict=False):
            current.next = following
        return cls(toc, {page.name: page for page in ordered})

    def get(self, page_name: str) -> Page | None:
        """Return the named page, or ``None`` when it is not indexed."""
        return self._pages.get(page_name)

    def __contains__(self, page_name: object) -> bool:
        return page_name in self._pages

    def __len__(self) -> int:
        return len(self._pages)


__all__ = ["Page", "PageIndex", "Toc", "TocPage", "TocTree", "collect_pages_in_order"]
