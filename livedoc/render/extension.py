"""python-markdown extension wiring the livedoc recognizers and serializer."""

from __future__ import annotations

import typing as typ

from markdown.extensions import Extension
from markdown.inlinepatterns import AUTOLINK_RE, LINK_RE

from .recognizers import (
    BARE_URL_RE,
    VARIABLE_RE,
    WIKI_LINK_RE,
    AutoLinkInlineProcessor,
    BareUrlInlineProcessor,
    CodeReferenceBlockProcessor,
    CodeVariableTreeprocessor,
    ExplicitLinkInlineProcessor,
    FencedVariablePreprocessor,
    TocMarkerBlockProcessor,
    VariableInlineProcessor,
    WikiLinkInlineProcessor,
    WikiLinkTableRowPreprocessor,
)
from .serializer import HtmlSerializer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown import Markdown

    from .context import RenderContext
    from .plugins import NodePlugin


class LiveDocExtension(Extension):
    """Register livedoc syntax and rendering on a ``markdown.Markdown`` instance.

    Build one extension per render: the serializer it installs owns the
    heading anchor table of that render.
    """

    def __init__(
        self,
        plugins: cabc.Sequence[NodePlugin],
        context: RenderContext,
        *,
        variables: typ.Mapping[str, str] | None = None,
        link_parameters: typ.Mapping[str, str] | None = None,
    ) -> None:
        super().__init__()
        self.plugins = list(plugins)
        self.context = context
        self.variables = dict(variables or {})
        self.link_parameters = dict(link_parameters or {})
        self.serializer: HtmlSerializer | None = None

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register recognizers, code variable substitution and the serializer."""
        md.preprocessors.register(
            FencedVariablePreprocessor(md, self.variables), "livedoc_fenced_variables", 28
        )
        md.preprocessors.register(
            WikiLinkTableRowPreprocessor(md), "livedoc_wikilink_table_rows", 24
        )
        if "|" not in md.ESCAPED_CHARS:
            md.ESCAPED_CHARS.append("|")
        md.parser.blockprocessors.register(
            CodeReferenceBlockProcessor(md.parser), "livedoc_code_reference", 75
        )
        md.parser.blockprocessors.register(
            TocMarkerBlockProcessor(md.parser), "livedoc_toc", 74
        )
        md.inlinePatterns.register(
            WikiLinkInlineProcessor(WIKI_LINK_RE, md), "livedoc_wikilink", 175
        )
        md.inlinePatterns.register(
            VariableInlineProcessor(VARIABLE_RE, md), "livedoc_variable", 172
        )
        md.inlinePatterns.register(ExplicitLinkInlineProcessor(LINK_RE, md), "link", 160)
        md.inlinePatterns.register(AutoLinkInlineProcessor(AUTOLINK_RE, md), "autolink", 120)
        md.inlinePatterns.register(
            BareUrlInlineProcessor(BARE_URL_RE, md), "livedoc_bare_url", 115
        )
        md.treeprocessors.register(
            CodeVariableTreeprocessor(md, self.variables), "livedoc_code_variables", 31
        )
        self.serializer = HtmlSerializer(
            md,
            self.plugins,
            self.context,
            variables=self.variables,
            link_parameters=self.link_parameters,
        )
        md.treeprocessors.register(self.serializer, "livedoc_serializer", 15)


__all__ = ["LiveDocExtension"]
