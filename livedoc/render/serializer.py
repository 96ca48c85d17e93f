"""Walk the parsed document and render livedoc nodes in place.

:class:`HtmlSerializer` runs as a python-markdown treeprocessor once inline
parsing has finished. Base elements are left for python-markdown to
serialize, except that:

* headings receive ``id`` anchors from a :class:`HeadingAnchorTable`;
* explicit and auto links get their ``{name}`` link parameters substituted;
* inline code spans get their ``%name%`` variables substituted.

Every other livedoc node is offered to the plugins in order and the first
plugin that handles it supplies the replacement content. Unclaimed nodes are
removed. A serializer keeps per-document state and renders one document.
"""

from __future__ import annotations

import typing as typ
import xml.etree.ElementTree as etree  # noqa: N813

from markdown import util
from markdown.treeprocessors import Treeprocessor

from .anchors import HEADING_TAGS, HeadingAnchorTable, heading_title
from .links import substitute_link_parameters, substitute_variables
from .nodes import AutoLink, ExplicitLink, decode_escapes, from_element
from .plugins import NodeOutput

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown import Markdown

    from .context import RenderContext
    from .nodes import Node
    from .plugins import NodePlugin


class SerializerReusedError(RuntimeError):
    """Raised when a serializer is asked to render a second document."""


class HtmlSerializer(Treeprocessor):
    """Render livedoc nodes and assign heading anchors for one document."""

    def __init__(
        self,
        md: Markdown,
        plugins: cabc.Sequence[NodePlugin],
        context: RenderContext,
        *,
        variables: typ.Mapping[str, str] | None = None,
        link_parameters: typ.Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(md)
        self.plugins = list(plugins)
        self.context = context
        self.link_parameters = dict(link_parameters or {})
        self.code_variables = {
            name: util.code_escape(value) for name, value in (variables or {}).items()
        }
        self.anchors = HeadingAnchorTable()
        self._used = False

    def run(self, root: etree.Element) -> None:
        if self._used:
            msg = "HtmlSerializer renders a single document; build a new one per render."
            raise SerializerReusedError(msg)
        self._used = True
        self._visit_children(root)

    def _visit_children(self, parent: etree.Element) -> None:
        index = 0
        while index < len(parent):
            child = parent[index]
            node = from_element(child)
            if node is None:
                self._visit_element(parent, child)
                index += 1
            else:
                index = _splice(parent, index, self._render_node(node, child))

    def _visit_element(self, parent: etree.Element, element: etree.Element) -> None:
        if element.tag == "code" and parent.tag != "pre":
            if element.text and self.code_variables:
                element.text = util.AtomicString(
                    substitute_variables(element.text, self.code_variables)
                )
            return
        title = None
        if element.tag in HEADING_TAGS and self.context.header_ids:
            title = _plain_title(element)
        self._visit_children(element)
        if title is not None:
            element.set("id", self.anchors.anchor_for(title))

    def _render_node(
        self, node: Node, element: etree.Element
    ) -> list[str | etree.Element]:
        match node:
            case ExplicitLink():
                return [self._explicit_link(node, element)]
            case AutoLink():
                return [self._auto_link(node)]
        out = NodeOutput(self.md)
        for plugin in self.plugins:
            if plugin.visit(node, out):
                return out.pieces
        return []

    def _explicit_link(self, node: ExplicitLink, element: etree.Element) -> etree.Element:
        href = substitute_link_parameters(node.url, self.link_parameters)
        anchor = etree.Element("a", {"href": href})
        if node.title is not None:
            anchor.set("title", node.title)
        anchor.text = element.text
        anchor.extend(list(element))
        self._visit_children(anchor)
        return anchor

    def _auto_link(self, node: AutoLink) -> etree.Element:
        url = substitute_link_parameters(node.text, self.link_parameters)
        anchor = etree.Element("a", {"href": url})
        anchor.text = util.AtomicString(url)
        return anchor


def _plain_title(heading: etree.Element) -> str:
    """Return the heading text without stash placeholders or escape markers."""
    title = util.HTML_PLACEHOLDER_RE.sub("", heading_title(heading))
    return decode_escapes(title)


def _splice(
    parent: etree.Element, index: int, pieces: cabc.Sequence[str | etree.Element]
) -> int:
    """Replace ``parent[index]`` with ``pieces`` and return the index after them."""
    tail = parent[index].tail
    del parent[index]
    previous = parent[index - 1] if index > 0 else None
    for piece in pieces:
        if isinstance(piece, str):
            _append_text(parent, previous, piece)
            continue
        piece.tail = None
        parent.insert(index, piece)
        previous = piece
        index += 1
    _append_text(parent, previous, tail)
    return index


def _append_text(
    parent: etree.Element, previous: etree.Element | None, text: str | None
) -> None:
    if not text:
        return
    if previous is None:
        parent.text = (parent.text or "") + text
    else:
        previous.tail = (previous.tail or "") + text


__all__ = ["HtmlSerializer", "SerializerReusedError"]
