"""Plugins that turn livedoc nodes into HTML.

The serializer offers every custom node to its plugins in order; the first
plugin whose :meth:`~NodePlugin.visit` returns ``True`` owns the node and
whatever it wrote to the :class:`NodeOutput` replaces the node in the
document. A node no plugin claims is dropped without output, which is how a
``@toc@`` marker disappears from pages rendered without a TOC.
"""

from __future__ import annotations

import logging
import typing as typ
import xml.etree.ElementTree as etree  # noqa: N813

from .code_excerpt import CodeExcerpt, extract_excerpt
from .links import substitute_variables
from .nodes import CodeReference, TocMarker, Variable, WikiLink

if typ.TYPE_CHECKING:
    from jinja2 import Template
    from markdown import Markdown

    from livedoc.page_index import Toc

    from .code_excerpt import CodeFileCache
    from .context import RenderContext
    from .highlight import CodeBlockRenderer
    from .links import LinkResolver
    from .nodes import Node

logger = logging.getLogger(__name__)


class NodeOutput:
    """Collect the replacement content a plugin produces for one node."""

    def __init__(self, md: Markdown) -> None:
        self._md = md
        self.pieces: list[str | etree.Element] = []

    def text(self, value: str) -> None:
        """Append plain text; it is HTML-escaped on serialization."""
        self.pieces.append(value)

    def element(self, element: etree.Element) -> None:
        """Append an element subtree."""
        self.pieces.append(element)

    def raw_html(self, html: str) -> None:
        """Append pre-rendered HTML, bypassing escaping."""
        self.pieces.append(self._md.htmlStash.store(html))


class NodePlugin(typ.Protocol):
    """Render one kind of node; return ``True`` when ``node`` was handled."""

    def visit(self, node: Node, out: NodeOutput) -> bool: ...


class CodeReferencePlugin:
    """Embed highlighted source excerpts for ``@[label](path)`` references."""

    def __init__(
        self,
        cache: CodeFileCache,
        highlighter: CodeBlockRenderer,
        variables: typ.Mapping[str, str],
        context: RenderContext,
    ) -> None:
        self.cache = cache
        self.highlighter = highlighter
        self.variables = variables
        self.context = context

    def visit(self, node: Node, out: NodeOutput) -> bool:
        if not isinstance(node, CodeReference):
            return False
        excerpt = extract_excerpt(
            self.cache, node.source, node.label, self.context.page_dir_prefix
        )
        if isinstance(excerpt, CodeExcerpt):
            code = substitute_variables(excerpt.code, self.variables)
            out.raw_html(self.highlighter.code_block(code, excerpt.language))
        else:
            out.text(excerpt.message)
        return True


class VariablePlugin:
    """Replace ``%name%`` with its configured value."""

    def __init__(self, variables: typ.Mapping[str, str]) -> None:
        self.variables = variables

    def visit(self, node: Node, out: NodeOutput) -> bool:
        if not isinstance(node, Variable):
            return False
        value = self.variables.get(node.name)
        if value is None:
            logger.warning("Unknown variable: %s", node.name)
            value = f"Unknown variable: {node.name}"
        out.text(value)
        return True


class WikiLinkPlugin:
    """Render ``[[text]]`` as an anchor, wrapping an image for ``.png`` targets."""

    def __init__(self, resolver: LinkResolver) -> None:
        self.resolver = resolver

    def visit(self, node: Node, out: NodeOutput) -> bool:
        if not isinstance(node, WikiLink):
            return False
        target = self.resolver.wiki_link(node.text)
        anchor = etree.Element("a", {"href": target.href})
        if target.image:
            etree.SubElement(anchor, "img", {"src": target.href})
        else:
            anchor.text = target.text
        out.element(anchor)
        return True


class TocPlugin:
    """Render ``@toc@`` markers from the TOC supplied for this render."""

    def __init__(self, toc: Toc | None, template: Template) -> None:
        self.toc = toc
        self.template = template

    def visit(self, node: Node, out: NodeOutput) -> bool:
        if not isinstance(node, TocMarker) or self.toc is None:
            return False
        out.raw_html(self.template.render(toc=self.toc))
        return True


__all__ = [
    "CodeReferencePlugin",
    "NodeOutput",
    "NodePlugin",
    "TocPlugin",
    "VariablePlugin",
    "WikiLinkPlugin",
]
