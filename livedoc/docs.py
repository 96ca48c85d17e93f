"""High-level orchestration for rendering documentation pages.

:class:`DocRenderer` ties the markdown pipeline to the file repositories, the
optional :class:`~livedoc.page_index.PageIndex` and the shared
:class:`~livedoc.config.DocConfig`. Pages are located either through the page
index (which also supplies the sidebar, the TOC and the next-page link) or,
without an index, by searching the markdown repository for ``<name>.md`` and
the nearest ``_Sidebar.md``.

Example
-------
>>> from pathlib import Path
>>> from livedoc.config import DocConfig
>>> from livedoc.docs import DocRenderer
>>> from livedoc.repository import FilesystemRepository
>>> repo = FilesystemRepository(Path("manual"))  # doctest: +SKIP
>>> renderer = DocRenderer(repo, repo, config=DocConfig(resources_path="/res"))  # doctest: +SKIP
>>> renderer.render_page("Home").path  # doctest: +SKIP
'Home.md'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path, PurePosixPath

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ._constants import (
    MARKDOWN_SUFFIX,
    NEXT_LINK_TEMPLATE,
    SIDEBAR_FILENAME,
    SIDEBAR_TEMPLATE,
    TOC_TEMPLATE,
)
from .config import DocConfig
from .page_index import PageIndex, Toc, collect_pages_in_order
from .render import CodeBlockRenderer, RenderContext, build_renderer
from .repository import FilesystemRepository

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import SiteConfig
    from .page_index import Page
    from .repository import FileRepository

logger = logging.getLogger(__name__)


class PageIndexRequiredError(RuntimeError):
    """Raised when an operation needs a page index but none was supplied."""


@dc.dataclass(frozen=True, slots=True)
class RenderedPage:
    """A rendered page.

    Attributes
    ----------
    html : str
        HTML for the page body.
    sidebar_html : str or None
        HTML for the sidebar, when one was found.
    path : str
        Repository path the page markdown was loaded from.
    """

    html: str
    sidebar_html: str | None
    path: str


class DocRenderer:
    """Render documentation pages from markdown and source repositories."""

    def __init__(
        self,
        markdown_repository: FileRepository,
        code_repository: FileRepository,
        page_index: PageIndex | None = None,
        config: DocConfig | None = None,
        *,
        pygments_style: str = "default",
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the renderer with repositories, index and configuration.

        Parameters
        ----------
        markdown_repository : FileRepository
            Repository holding the ``.md`` pages and ``_Sidebar.md`` files.
        code_repository : FileRepository
            Repository holding the source files referenced by code references.
        page_index : PageIndex, optional
            Index used to locate pages, render sidebars and next links. When
            ``None`` pages are found by name and sidebars by directory search.
        config : DocConfig, optional
            Shared render settings; defaults to an empty configuration.
        pygments_style : str, optional
            Pygments style for highlighted code.
        templates_dir : Path, optional
            Directory containing the Jinja templates; defaults to the package
            templates.
        """
        self.markdown_repository = markdown_repository
        self.code_repository = code_repository
        self.page_index = page_index
        self.config = config or DocConfig()
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.highlighter = CodeBlockRenderer(pygments_style)

    @classmethod
    def from_site_config(cls, site: SiteConfig) -> DocRenderer:
        """Build a renderer serving files below the roots named in ``site``."""
        markdown_repository = FilesystemRepository(site.markdown_root)
        code_repository = (
            markdown_repository
            if site.code_root == site.markdown_root
            else FilesystemRepository(site.code_root)
        )
        page_index = PageIndex.from_toc(site.toc) if site.toc else None
        return cls(
            markdown_repository,
            code_repository,
            page_index,
            site.doc,
            pygments_style=site.pygments_style,
        )

    @property
    def stylesheet(self) -> str:
        """Return the CSS for highlighted code blocks."""
        return self.highlighter.stylesheet

    def renderer(
        self,
        relative_path: str | None = None,
        toc: Toc | None = None,
        *,
        header_ids: bool = True,
        single_page: bool = False,
    ) -> cabc.Callable[[str], str]:
        """Return a ``markdown -> HTML`` function for pages in ``relative_path``."""
        context = RenderContext(
            relative_path=relative_path or None,
            toc=toc,
            header_ids=header_ids,
            single_page=single_page,
        )
        return build_renderer(
            self.config,
            self.code_repository,
            context,
            highlighter=self.highlighter,
            toc_template=self.env.get_template(TOC_TEMPLATE),
        )

    def render(
        self, markdown: str, relative_path: str | PurePosixPath | None = None
    ) -> str:
        """Render a markdown string.

        Parameters
        ----------
        markdown : str
            Markdown source.
        relative_path : str or PurePosixPath, optional
            Directory the markdown lives in; relative code references and
            images resolve against it.

        Returns
        -------
        str
            The rendered HTML fragment.
        """
        directory = str(relative_path) if relative_path is not None else None
        return self.renderer(directory)(markdown)

    def render_page(self, page_name: str) -> RenderedPage | None:
        """Render a documentation page by name.

        Parameters
        ----------
        page_name : str
            Page to render, without directory or ``.md`` suffix.

        Returns
        -------
        RenderedPage or None
            The rendered page with its sidebar, or ``None`` when the page
            cannot be found.
        """
        if self.page_index is None:
            return self._render_unindexed_page(page_name)
        page = self.page_index.get(page_name)
        if page is None:
            logger.debug("page %s is not in the page index", page_name)
            return None
        return self._render_indexed_page(page)

    def render_all_pages(self, single_page: bool = False) -> list[tuple[str, str]]:
        """Render every indexed page in table-of-contents order.

        Parameters
        ----------
        single_page : bool, optional
            Render for concatenation into one document, turning wiki links
            into intra-document anchors.

        Returns
        -------
        list[tuple[str, str]]
            ``(page_name, html)`` pairs; pages whose markdown is missing are
            left out.

        Raises
        ------
        PageIndexRequiredError
            If the renderer was built without a page index.
        """
        if self.page_index is None:
            msg = "Can only render all pages if there's a page index"
            raise PageIndexRequiredError(msg)
        rendered: list[tuple[str, str]] = []
        for page_name in collect_pages_in_order(self.page_index.toc):
            page = self.page_index.get(page_name)
            if page is None:  # pragma: no cover - index built from the same toc
                continue
            render = self.renderer(
                page.path, page.nav[0] if page.nav else None, single_page=single_page
            )
            markdown = self.markdown_repository.load_file(page.full_path + MARKDOWN_SUFFIX)
            if markdown is None:
                logger.debug("markdown for page %s not found", page_name)
                continue
            rendered.append((page_name, render(markdown)))
        return rendered

    def _render_indexed_page(self, page: Page) -> RenderedPage | None:
        """Render a page located through the page index."""
        page_path = page.full_path + MARKDOWN_SUFFIX
        markdown = self.markdown_repository.load_file(page_path)
        if markdown is None:
            logger.debug("markdown for page %s not found at %s", page.name, page_path)
            return None
        html = self.renderer(page.path, page.nav[0] if page.nav else None)(markdown)
        if page.next is not None and self.config.next_text:
            html += self.env.get_template(NEXT_LINK_TEMPLATE).render(
                page=page.next, next_text=self.config.next_text
            )
        return RenderedPage(html=html, sidebar_html=self._render_nav(page), path=page_path)

    def _render_nav(self, page: Page) -> str:
        """Render the sidebar from the page's enclosing TOC chain."""
        toc = page.nav[0] if page.nav else None
        breadcrumbs = [
            {"title": parent.title, "href": _first_page(parent)}
            for parent in reversed(page.nav[1:])
        ]
        first_pages = {}
        if toc is not None:
            first_pages = {
                node.name: _first_page(node)
                for _label, node in toc.nodes
                if isinstance(node, Toc)
            }
        return self.env.get_template(SIDEBAR_TEMPLATE).render(
            toc=toc, breadcrumbs=breadcrumbs, first_pages=first_pages, current=page.name
        )

    def _render_unindexed_page(self, page_name: str) -> RenderedPage | None:
        """Find a page by file name and render it with the nearest sidebar."""
        page_path = self.markdown_repository.find_file_with_name(page_name + MARKDOWN_SUFFIX)
        if page_path is None:
            logger.debug("no markdown file named %s%s", page_name, MARKDOWN_SUFFIX)
            return None
        markdown = self.markdown_repository.load_file(page_path)
        if markdown is None:
            return None
        directory = _parent_dir(page_path)
        html = self.renderer(directory)(markdown)
        return RenderedPage(
            html=html,
            sidebar_html=self._find_sidebar(directory),
            path=page_path,
        )

    def _find_sidebar(self, directory: str | None) -> str | None:
        """Render the closest ``_Sidebar.md`` at or above ``directory``."""
        render = self.renderer(directory, header_ids=False)
        for candidate in _ancestor_dirs(directory):
            sidebar_path = (
                f"{candidate}/{SIDEBAR_FILENAME}" if candidate else SIDEBAR_FILENAME
            )
            markdown = self.markdown_repository.load_file(sidebar_path)
            if markdown is not None:
                return render(markdown)
        logger.debug("no %s found for %s", SIDEBAR_FILENAME, directory or "<root>")
        return None


def _parent_dir(path: str) -> str | None:
    """Return the POSIX parent directory of ``path``, or ``None`` at the root."""
    parent = PurePosixPath(path).parent.as_posix()
    return None if parent in (".", "/") else parent


def _ancestor_dirs(directory: str | None) -> list[str]:
    """Return ``directory`` and its ancestors, ending with the root (``""``)."""
    if not directory:
        return [""]
    path = PurePosixPath(directory)
    return [path.as_posix(), *(p.as_posix() for p in path.parents if p.as_posix() != "."), ""]


def _first_page(toc: Toc) -> str | None:
    """Return the first page reachable from ``toc``."""
    pages = collect_pages_in_order(toc)
    return pages[0] if pages else None


__all__ = ["DocRenderer", "PageIndexRequiredError", "RenderedPage"]
