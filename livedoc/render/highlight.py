"""Pygments rendering for code excerpts and fenced blocks."""

from __future__ import annotations

import typing as typ
from html import escape

from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

if typ.TYPE_CHECKING:
    import collections.abc as cabc

CODEHILITE_CLASS = "codehilite"


class LanguageHtmlFormatter(HtmlFormatter):
    """``HtmlFormatter`` whose wrapping ``div`` carries a ``data-language`` attribute.

    python-markdown's ``codehilite`` passes the block language as ``lang_str``
    when ``pygments_formatter`` is a class, so fenced and indented blocks get
    the same markup as embedded excerpts.
    """

    def __init__(self, lang_str: str = "", **options: typ.Any) -> None:  # noqa: ANN401
        super().__init__(**options)
        self.lang_str = lang_str or "text"

    def _wrap_div(
        self, inner: cabc.Iterable[tuple[int, str]]
    ) -> cabc.Iterator[tuple[int, str]]:
        safe_lang = escape(self.lang_str, quote=True)
        yield 0, f'<div class="{self.cssclass}" data-language="{safe_lang}">'
        yield from inner
        yield 0, "</div>\n"


class CodeBlockRenderer:
    """Render code snippets with consistent styling."""

    def __init__(self, pygments_style: str = "default") -> None:
        """Initialize a renderer with the Pygments style used for CSS and markup.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"default"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass=CODEHILITE_CLASS)

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(f".{CODEHILITE_CLASS}")

    @property
    def codehilite_config(self) -> dict[str, object]:
        """Return ``codehilite`` extension settings matching this renderer."""
        return {
            "linenums": False,
            "guess_lang": False,
            "css_class": CODEHILITE_CLASS,
            "pygments_style": self.pygments_style,
            "pygments_formatter": LanguageHtmlFormatter,
            "lang_prefix": "",
        }

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML with an optional language tag.

        Parameters
        ----------
        code : str
            Source snippet to highlight.
        language : str, optional
            Pygments lexer name or alias; the ``text`` lexer is used when it
            is absent or unknown to Pygments.

        Returns
        -------
        str
            HTML containing the highlighted block. The ``data-language``
            attribute carries ``language`` as given, or ``text``.
        """
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        formatter = LanguageHtmlFormatter(
            lang_str=lang, style=self.pygments_style, cssclass=CODEHILITE_CLASS
        )
        return highlight(code, lexer, formatter)


__all__ = ["CODEHILITE_CLASS", "CodeBlockRenderer", "LanguageHtmlFormatter"]
