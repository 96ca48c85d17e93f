"""Assemble a fresh markdown pipeline for every render."""

from __future__ import annotations

import typing as typ

from markdown import Markdown

from .code_excerpt import CodeFileCache
from .extension import LiveDocExtension
from .links import LinkResolver
from .plugins import CodeReferencePlugin, TocPlugin, VariablePlugin, WikiLinkPlugin

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from jinja2 import Template

    from livedoc.config import DocConfig
    from livedoc.repository import FileRepository

    from .context import RenderContext
    from .highlight import CodeBlockRenderer

BASE_EXTENSIONS = ("fenced_code", "codehilite", "tables", "sane_lists")


def build_renderer(
    config: DocConfig,
    code_repository: FileRepository,
    context: RenderContext,
    *,
    highlighter: CodeBlockRenderer,
    toc_template: Template,
) -> cabc.Callable[[str], str]:
    """Return a ``markdown -> HTML`` function bound to ``context``.

    Parameters
    ----------
    config : DocConfig
        Shared render settings (variables, link parameters, resources path).
    code_repository : FileRepository
        Source of the files referenced by ``@[label](path)``.
    context : RenderContext
        Facts about the page being rendered.
    highlighter : CodeBlockRenderer
        Pygments renderer used for code excerpts and fenced blocks.
    toc_template : Template
        Jinja template rendering the TOC tree for ``@toc@`` markers.

    Returns
    -------
    Callable[[str], str]
        Function rendering one markdown document. Each call builds its own
        parser, serializer, heading anchor table and code file cache, so
        calls never share mutable state.
    """

    def render(markdown_text: str) -> str:
        cache = CodeFileCache(code_repository)
        resolver = LinkResolver(config.resources_path, context)
        plugins = [
            CodeReferencePlugin(cache, highlighter, config.variables, context),
            VariablePlugin(config.variables),
            WikiLinkPlugin(resolver),
            TocPlugin(context.toc, toc_template),
        ]
        extension = LiveDocExtension(
            plugins,
            context,
            variables=config.variables,
            link_parameters=config.link_parameters,
        )
        md = Markdown(
            extensions=[*BASE_EXTENSIONS, extension],
            extension_configs={"codehilite": highlighter.codehilite_config},
        )
        return md.convert(markdown_text)

    return render


__all__ = ["BASE_EXTENSIONS", "build_renderer"]
