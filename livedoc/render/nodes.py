"""Typed nodes for the constructs livedoc adds to markdown.

python-markdown represents a parsed document as an ElementTree. The
recognizers record each custom construct as a placeholder element with a
reserved ``livedoc-*`` tag; this module converts between those placeholders
and the closed set of node dataclasses that plugins dispatch on.

Example
-------
>>> from livedoc.render.nodes import WikiLink, from_element, to_element
>>> from_element(to_element(WikiLink("Home|Start")))
WikiLink(text='Home|Start')
"""

from __future__ import annotations

import dataclasses as dc
import re
import xml.etree.ElementTree as etree  # noqa: N813

from markdown import util

from livedoc._constants import (
    AUTO_LINK_TAG,
    CODE_REFERENCE_TAG,
    EXPLICIT_LINK_TAG,
    NODE_TAG_PREFIX,
    TOC_MARKER_TAG,
    VARIABLE_TAG,
    WIKI_LINK_TAG,
)

ESCAPED_CHAR_RE = re.compile(f"{util.STX}([0-9]+){util.ETX}")


@dc.dataclass(frozen=True, slots=True)
class CodeReference:
    """``@[label](source)``: embed a labelled excerpt of a source file."""

    source: str
    label: str


@dc.dataclass(frozen=True, slots=True)
class Variable:
    """``%name%``: substitute a configured value."""

    name: str


@dc.dataclass(frozen=True, slots=True)
class TocMarker:
    """``@toc@``: render the page's table of contents."""


@dc.dataclass(frozen=True, slots=True)
class WikiLink:
    """``[[text]]``: link to another page, an anchor, or an image."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class ExplicitLink:
    """``[text](url "title")``; the link text stays as element children."""

    url: str
    title: str | None = None


@dc.dataclass(frozen=True, slots=True)
class AutoLink:
    """A bare or angle-bracketed URL used as both target and text."""

    text: str


Node = CodeReference | Variable | TocMarker | WikiLink | ExplicitLink | AutoLink


def is_node_element(element: etree.Element) -> bool:
    """Return ``True`` when ``element`` is a livedoc placeholder."""
    return isinstance(element.tag, str) and element.tag.startswith(NODE_TAG_PREFIX)


def to_element(node: Node, parent: etree.Element | None = None) -> etree.Element:
    """Return a placeholder element for ``node``, appended to ``parent`` if given."""
    match node:
        case CodeReference(source=source, label=label):
            tag, attrs = CODE_REFERENCE_TAG, {"source": source, "label": label}
        case Variable(name=name):
            tag, attrs = VARIABLE_TAG, {"name": name}
        case TocMarker():
            tag, attrs = TOC_MARKER_TAG, {}
        case WikiLink(text=text):
            tag, attrs = WIKI_LINK_TAG, {"text": text}
        case ExplicitLink(url=url, title=title):
            tag, attrs = EXPLICIT_LINK_TAG, {"href": url}
            if title is not None:
                attrs["title"] = title
        case AutoLink(text=text):
            tag, attrs = AUTO_LINK_TAG, {"href": text}
    if parent is None:
        return etree.Element(tag, attrs)
    return etree.SubElement(parent, tag, attrs)


def from_element(element: etree.Element) -> Node | None:
    """Return the node encoded by ``element``, or ``None`` for base elements."""
    match element.tag:
        case tag if tag == CODE_REFERENCE_TAG:
            return CodeReference(element.get("source", ""), element.get("label", ""))
        case tag if tag == VARIABLE_TAG:
            return Variable(element.get("name", ""))
        case tag if tag == TOC_MARKER_TAG:
            return TocMarker()
        case tag if tag == WIKI_LINK_TAG:
            return WikiLink(element.get("text", ""))
        case tag if tag == EXPLICIT_LINK_TAG:
            return ExplicitLink(element.get("href", ""), element.get("title"))
        case tag if tag == AUTO_LINK_TAG:
            return AutoLink(element.get("href", ""))
    return None


def decode_escapes(text: str) -> str:
    """Turn python-markdown backslash-escape markers back into their characters."""
    return ESCAPED_CHAR_RE.sub(lambda m: chr(int(m.group(1))), text)


__all__ = [
    "ESCAPED_CHAR_RE",
    "AutoLink",
    "CodeReference",
    "ExplicitLink",
    "Node",
    "TocMarker",
    "Variable",
    "WikiLink",
    "decode_escapes",
    "from_element",
    "is_node_element",
    "to_element",
]
