"""Markdown-to-HTML pipeline: recognizers, serializer, plugins and code excerpts."""

from .context import RenderContext
from .extension import LiveDocExtension
from .highlight import CodeBlockRenderer
from .pipeline import build_renderer
from .serializer import HtmlSerializer

__all__ = [
    "CodeBlockRenderer",
    "HtmlSerializer",
    "LiveDocExtension",
    "RenderContext",
    "build_renderer",
]
