"""Tests for Pygments highlighting of excerpts and fenced blocks."""

from __future__ import annotations

import typing as typ

from bs4 import BeautifulSoup

from livedoc.render.highlight import CodeBlockRenderer

if typ.TYPE_CHECKING:
    from livedoc.docs import DocRenderer


def _languages(html: str) -> list[str | None]:
    soup = BeautifulSoup(html, "html.parser")
    return [block.get("data-language") for block in soup.select("div.codehilite")]


def test_code_block_tags_language() -> None:
    html = CodeBlockRenderer().code_block("x = 1", "python")
    assert _languages(html) == ["python"]
    assert "x" in BeautifulSoup(html, "html.parser").get_text()


def test_unknown_language_falls_back_to_text_lexer() -> None:
    html = CodeBlockRenderer().code_block("plain words", "no-such-lexer")
    assert _languages(html) == ["no-such-lexer"]


def test_missing_language_is_text() -> None:
    assert _languages(CodeBlockRenderer().code_block("plain")) == ["text"]


def test_fenced_and_indented_blocks_carry_language(renderer: DocRenderer) -> None:
    markdown = (
        "```rust\nfn main() {}\n```\n\n"
        "Then:\n\n    plain indented\n\n"
        "```\nno language\n```\n"
    )
    assert _languages(renderer.render(markdown)) == ["rust", "text", "text"]


def test_stylesheet_uses_style() -> None:
    css = CodeBlockRenderer("monokai").stylesheet
    assert ".codehilite" in css
