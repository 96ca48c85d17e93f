"""Grammar additions that make python-markdown emit livedoc nodes.

Block syntax
------------
``@[label](path)`` on its own line
    Code reference; ``path`` may carry a ``#label`` suffix.
``@toc@`` on its own line
    Table-of-contents marker.

Inline syntax
-------------
``[[text]]``
    Wiki link.
``%name%``
    Variable reference.
``[text](url)``, ``<http://...>`` and bare ``http(s)://`` URLs
    Recorded as explicit and auto links so the serializer can substitute
    ``{name}`` link parameters.

Each recognizer only matches its own well-formed syntax; anything else is
left to the base grammar and ends up as literal text.
"""

from __future__ import annotations

import re
import typing as typ

from markdown import util
from markdown.blockprocessors import BlockProcessor
from markdown.inlinepatterns import (
    AutolinkInlineProcessor,
    InlineProcessor,
    LinkInlineProcessor,
)
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor

from livedoc._constants import AUTO_LINK_TAG, EXPLICIT_LINK_TAG

from .links import substitute_variables
from .nodes import (
    AutoLink,
    CodeReference,
    TocMarker,
    Variable,
    WikiLink,
    decode_escapes,
    to_element,
)

if typ.TYPE_CHECKING:
    import xml.etree.ElementTree as etree  # noqa: N813

    from markdown import Markdown

WIKI_LINK_RE = r"\[\[([^\[\]\n]+)\]\]"
VARIABLE_RE = r"%([A-Za-z][\w.-]*)%"
BARE_URL_RE = r"(?<![\w/&<\"'=\]])(https?://[^\s<>\"'`]*[^\s<>\"'`.,;:!?)\]])"
FENCED_BLOCK_PATTERN = re.compile(
    r"^(?P<fence>[ \t]*(?:`{3,}|~{3,}))[^\n]*\n(?P<body>.*?)^(?P=fence)[ \t]*$",
    re.MULTILINE | re.DOTALL,
)
WIKI_LINK_PATTERN = re.compile(WIKI_LINK_RE)
UNESCAPED_PIPE = re.compile(r"(?<!\\)\|")


class CodeReferenceBlockProcessor(BlockProcessor):
    """Turn an ``@[label](path)`` line into a code reference node."""

    RE = re.compile(
        r"(?:^|\n)@\[(?P<label>[^\]\n]*)\]\((?P<source>[^)\s]+)\)[ \t]*(?:\n|$)"
    )

    def test(self, parent: etree.Element, block: str) -> bool:
        return bool(self.RE.search(block))

    def run(self, parent: etree.Element, blocks: list[str]) -> None:
        block = blocks.pop(0)
        match = self.RE.search(block)
        if match is None:  # pragma: no cover - guarded by test()
            blocks.insert(0, block)
            return
        before, after = block[: match.start()], block[match.end() :]
        if before:
            self.parser.parseBlocks(parent, [before])
        to_element(CodeReference(match.group("source"), match.group("label")), parent)
        if after:
            blocks.insert(0, after)


class TocMarkerBlockProcessor(BlockProcessor):
    """Turn an ``@toc@`` line into a TOC marker node."""

    RE = re.compile(r"(?:^|\n)@toc@[ \t]*(?:\n|$)")

    def test(self, parent: etree.Element, block: str) -> bool:
        return bool(self.RE.search(block))

    def run(self, parent: etree.Element, blocks: list[str]) -> None:
        block = blocks.pop(0)
        match = self.RE.search(block)
        if match is None:  # pragma: no cover - guarded by test()
            blocks.insert(0, block)
            return
        before, after = block[: match.start()], block[match.end() :]
        if before:
            self.parser.parseBlocks(parent, [before])
        to_element(TocMarker(), parent)
        if after:
            blocks.insert(0, after)


class WikiLinkInlineProcessor(InlineProcessor):
    """``[[text]]``."""

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[etree.Element, int, int]:
        element = to_element(WikiLink(decode_escapes(self.unescape(m.group(1)))))
        element.text = util.AtomicString(m.group(0))
        return element, m.start(0), m.end(0)


class VariableInlineProcessor(InlineProcessor):
    """``%name%``."""

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[etree.Element, int, int]:
        element = to_element(Variable(m.group(1)))
        element.text = util.AtomicString(m.group(0))
        return element, m.start(0), m.end(0)


class ExplicitLinkInlineProcessor(LinkInlineProcessor):
    """Built-in ``[text](url "title")`` parsing, re-tagged as an explicit link."""

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[etree.Element | None, int | None, int | None]:
        element, start, end = super().handleMatch(m, data)
        if element is not None:
            element.tag = EXPLICIT_LINK_TAG
        return element, start, end


class AutoLinkInlineProcessor(AutolinkInlineProcessor):
    """``<http://...>``, re-tagged as an auto link."""

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[etree.Element, int, int]:
        return to_element(AutoLink(self.unescape(m.group(1)))), m.start(0), m.end(0)


class BareUrlInlineProcessor(InlineProcessor):
    """Bare ``http://`` and ``https://`` URLs in prose."""

    ANCESTOR_EXCLUDES = ("a", EXPLICIT_LINK_TAG, AUTO_LINK_TAG)

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[etree.Element, int, int]:
        return to_element(AutoLink(self.unescape(m.group(1)))), m.start(0), m.end(0)


class FencedVariablePreprocessor(Preprocessor):
    """Substitute ``%name%`` inside fenced code blocks before they are highlighted."""

    def __init__(self, md: Markdown, variables: typ.Mapping[str, str]) -> None:
        super().__init__(md)
        self.variables = variables

    def run(self, lines: list[str]) -> list[str]:
        if not self.variables:
            return lines
        text = "\n".join(lines)

        def _substitute(match: re.Match[str]) -> str:
            body = match.group("body")
            start, end = match.span("body")
            whole_start = match.start(0)
            block = match.group(0)
            return (
                block[: start - whole_start]
                + substitute_variables(body, self.variables)
                + block[end - whole_start :]
            )

        return FENCED_BLOCK_PATTERN.sub(_substitute, text).split("\n")


class WikiLinkTableRowPreprocessor(Preprocessor):
    """Escape the ``|`` of ``[[label|target]]`` on table rows.

    The tables extension splits rows on unescaped pipes, which would cut a
    wiki link in two. Escaped pipes stay in the cell and the wiki link
    recognizer decodes them again. Indented code lines are left alone.
    """

    def run(self, lines: list[str]) -> list[str]:
        return [self._protect(line) for line in lines]

    @staticmethod
    def _protect(line: str) -> str:
        if line.startswith(("    ", "\t")) or "[[" not in line:
            return line
        if "|" not in WIKI_LINK_PATTERN.sub("", line):
            return line
        return WIKI_LINK_PATTERN.sub(
            lambda m: UNESCAPED_PIPE.sub(r"\\|", m.group(0)), line
        )


class CodeVariableTreeprocessor(Treeprocessor):
    """Substitute ``%name%`` inside indented code blocks before highlighting."""

    def __init__(self, md: Markdown, variables: typ.Mapping[str, str]) -> None:
        super().__init__(md)
        self.variables = {name: util.code_escape(value) for name, value in variables.items()}

    def run(self, root: etree.Element) -> None:
        if not self.variables:
            return
        for pre in root.iter("pre"):
            for code in pre.iter("code"):
                if code.text:
                    code.text = util.AtomicString(
                        substitute_variables(code.text, self.variables)
                    )


__all__ = [
    "BARE_URL_RE",
    "VARIABLE_RE",
    "WIKI_LINK_RE",
    "AutoLinkInlineProcessor",
    "BareUrlInlineProcessor",
    "CodeReferenceBlockProcessor",
    "CodeVariableTreeprocessor",
    "ExplicitLinkInlineProcessor",
    "FencedVariablePreprocessor",
    "TocMarkerBlockProcessor",
    "VariableInlineProcessor",
    "WikiLinkInlineProcessor",
    "WikiLinkTableRowPreprocessor",
]
