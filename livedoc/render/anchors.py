"""Heading anchor ids that stay unique within one render.

Example
-------
>>> from livedoc.render.anchors import HeadingAnchorTable
>>> table = HeadingAnchorTable()
>>> [table.anchor_for("Example") for _ in range(3)]
['Example', 'Example1', 'Example2']
"""

from __future__ import annotations

import typing as typ

from livedoc._constants import AUTO_LINK_TAG, VARIABLE_TAG, WIKI_LINK_TAG

if typ.TYPE_CHECKING:
    import xml.etree.ElementTree as etree  # noqa: N813

HEADING_TAGS = frozenset(f"h{level}" for level in range(1, 7))
CODE_ENTITIES = (("&lt;", "<"), ("&gt;", ">"), ("&amp;", "&"))


def heading_slug(title: str) -> str:
    """Return the anchor slug for a heading title.

    Spaces become hyphens; everything else is kept verbatim. HTML escaping of
    the slug happens when the ``id`` attribute is serialized.
    """
    return title.replace(" ", "-")


def heading_title(heading: etree.Element) -> str:
    """Concatenate the text leaves of a parsed ``heading``, ignoring markup.

    Call this before livedoc nodes in the heading are rendered. Variables
    contribute nothing, code spans contribute their unsubstituted source,
    wiki links their link text and auto links their URL, so the anchor does
    not depend on configured values.
    """
    parts: list[str] = []
    _collect_text(heading, parts)
    return "".join(parts)


def _collect_text(element: etree.Element, parts: list[str]) -> None:
    if element.text:
        parts.append(element.text)
    for child in element:
        if child.tag == VARIABLE_TAG:
            pass
        elif child.tag == WIKI_LINK_TAG:
            parts.append(child.get("text", ""))
        elif child.tag == AUTO_LINK_TAG:
            parts.append(child.get("href", ""))
        elif child.tag == "code":
            parts.append(_code_unescape(child.text or ""))
        else:
            _collect_text(child, parts)
        if child.tail:
            parts.append(child.tail)


def _code_unescape(text: str) -> str:
    for entity, char in CODE_ENTITIES:
        text = text.replace(entity, char)
    return text


class HeadingAnchorTable:
    """Track how often each slug was emitted during a single render.

    The first heading with a given slug receives the bare slug. Later
    headings receive the slug followed by the number of earlier occurrences,
    so the second ``Example`` becomes ``Example1`` and the third
    ``Example2``. Create a new table for every render.

    Suffixed anchors are not checked against bare slugs: ``A``, ``A`` and a
    heading titled ``A1`` all emit ``A1`` after the first. Downstream links
    rely on this exact numbering, so the collision is kept.
    """

    def __init__(self) -> None:
        self._seen: dict[str, int] = {}

    def anchor_for(self, title: str) -> str:
        """Return the next anchor for ``title`` and record it."""
        anchor = heading_slug(title)
        seen = self._seen.get(anchor)
        if seen is None:
            self._seen[anchor] = 1
            return anchor
        self._seen[anchor] = seen + 1
        return f"{anchor}{seen}"

    def __len__(self) -> int:
        return len(self._seen)


__all__ = ["HEADING_TAGS", "HeadingAnchorTable", "heading_slug", "heading_title"]
