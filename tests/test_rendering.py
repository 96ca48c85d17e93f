"""Tests for the markdown pipeline: recognizers, plugin dispatch and serializer.

Each test renders a small markdown document through ``DocRenderer`` (or a
bare ``markdown.Markdown`` carrying ``LiveDocExtension``) and inspects the
HTML with BeautifulSoup. Together they cover code references, heading
anchors, variables, link parameters, wiki links and TOC markers.

Usage
-----
Run ``pytest tests/test_rendering.py -v``. Fixtures come from
``tests/conftest.py``; nothing touches the filesystem.
"""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup
from markdown import Markdown

from livedoc.config import DocConfig
from livedoc.page_index import Toc, TocPage
from livedoc.render import LiveDocExtension, RenderContext
from livedoc.render.nodes import Variable
from livedoc.render.serializer import SerializerReusedError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from conftest import MemoryRepository

    from livedoc.docs import DocRenderer
    from livedoc.render.nodes import Node
    from livedoc.render.plugins import NodeOutput


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class _ClaimEverything:
    """Plugin stub that claims every node and records what it saw."""

    def __init__(self, label: str) -> None:
        self.label = label
        self.seen: list[Node] = []

    def visit(self, node: Node, out: NodeOutput) -> bool:
        self.seen.append(node)
        out.text(self.label)
        return True


# Code references


def test_code_reference_renders_highlighted_excerpt(renderer: DocRenderer) -> None:
    """A code reference becomes a highlighted block tagged with its language."""
    html = renderer.render("Intro\n\n@[main](code/Hello.java)\n\nOutro")
    block = _soup(html).select_one("div.codehilite")
    assert block is not None, "expected a highlighted code block"
    assert block.get("data-language") == "java"
    text = block.get_text()
    assert "public static void main(String[] args) {" in text
    assert "// #main" not in text
    assert "package hello;" not in text


def test_code_reference_substitutes_variables(renderer: DocRenderer) -> None:
    """Variables inside embedded code are replaced with configured values."""
    html = renderer.render("@[main](code/Hello.java)")
    assert 'System.out.println("Hello 2.9.1");' in _soup(html).get_text()


def test_code_reference_label_after_hash(renderer: DocRenderer) -> None:
    """A ``#label`` suffix on the path overrides the link label."""
    html = renderer.render("@[Sample](code/Hello.java#main)")
    assert "System.out.println" in _soup(html).get_text()


def test_code_reference_relative_to_page(
    make_renderer: cabc.Callable[..., DocRenderer],
    code_repository: MemoryRepository,
) -> None:
    """Relative paths resolve against the page directory, ``/`` against the root."""
    code_repository.files["guide/code/Local.py"] = "# #demo\nprint('local')\n# #demo\n"
    renderer = make_renderer()
    html = renderer.render(
        "@[demo](code/Local.py)\n\n@[main](/code/Hello.java)", relative_path="guide"
    )
    blocks = _soup(html).select("div.codehilite")
    assert [block.get("data-language") for block in blocks] == ["py", "java"]
    assert "print('local')" in blocks[0].get_text()


def test_missing_label_is_reported_inline(renderer: DocRenderer) -> None:
    """A missing label leaves a visible message and the page keeps rendering."""
    html = renderer.render("# Title\n\n@[nope](code/Hello.java)\n\nStill here")
    assert "Unable to find label nope in source file code/Hello.java" in html
    assert "<p>Still here</p>" in html
    assert _soup(html).select_one("h1") is not None


def test_missing_file_is_reported_inline(renderer: DocRenderer) -> None:
    """A missing source file produces the same inline message."""
    html = renderer.render("@[main](code/Absent.java)")
    assert "Unable to find label main in source file code/Absent.java" in html


def test_source_file_loaded_once_per_render(
    renderer: DocRenderer, code_repository: MemoryRepository
) -> None:
    """Several references to one file load it once per render, not once overall."""
    markdown = "@[main](code/Hello.java)\n\n@[main](code/Hello.java)"
    renderer.render(markdown)
    assert code_repository.loads.count("code/Hello.java") == 1
    renderer.render(markdown)
    assert code_repository.loads.count("code/Hello.java") == 2


def test_code_reference_inside_paragraph_block(renderer: DocRenderer) -> None:
    """A reference line directly under prose still becomes a code block."""
    html = renderer.render("Here is the entry point:\n@[main](code/Hello.java)")
    soup = _soup(html)
    assert soup.select_one("p").get_text() == "Here is the entry point:"
    assert soup.select_one("div.codehilite") is not None


# Heading anchors


def test_duplicate_headings_get_numbered_anchors(renderer: DocRenderer) -> None:
    """Repeated titles anchor as bare slug, then slug1, slug2, ..."""
    html = renderer.render("# Example\n\n## Example\n\n### Example\n\n## Other")
    ids = [h.get("id") for h in _soup(html).find_all(["h1", "h2", "h3"])]
    assert ids == ["Example", "Example1", "Example2", "Other"]


def test_anchor_ignores_markup_and_hyphenates(renderer: DocRenderer) -> None:
    """Only text content counts; spaces become hyphens."""
    html = renderer.render("## Hello *big* world")
    assert _soup(html).select_one("h2").get("id") == "Hello-big-world"


def test_anchor_is_html_encoded(renderer: DocRenderer) -> None:
    """Special characters survive in the id and are escaped in the markup."""
    html = renderer.render("# Q & A")
    assert 'id="Q-&amp;-A"' in html
    assert _soup(html).select_one("h1").get("id") == "Q-&-A"


def test_anchor_ignores_configured_values(renderer: DocRenderer) -> None:
    """Variables add nothing to the id and code spans add their source text."""
    html = renderer.render("# Play %version% notes\n\n## Use `%version%`")
    soup = _soup(html)
    assert soup.select_one("h1").get("id") == "Play--notes"
    assert soup.select_one("h1").get_text() == "Play 2.9.1 notes"
    assert soup.select_one("h2").get("id") == "Use-%version%"
    assert soup.select_one("h2 code").get_text() == "2.9.1"


def test_anchor_uses_link_text(renderer: DocRenderer) -> None:
    """Wiki and explicit links contribute their text, auto links their URL."""
    html = renderer.render(
        "# See [[Home]]\n\n## The [api]({api}) docs\n\n### Go <https://example.org/{api}>"
    )
    ids = [h.get("id") for h in _soup(html).find_all(["h1", "h2", "h3"])]
    assert ids == ["See-Home", "The-api-docs", "Go-https://example.org/{api}"]


def test_anchor_keeps_code_span_characters(renderer: DocRenderer) -> None:
    """Markup characters in code spans reach the id unescaped once."""
    html = renderer.render("## Use `a<b`")
    assert _soup(html).select_one("h2").get("id") == "Use-a<b"


def test_suffixed_anchor_can_repeat_a_literal_title(renderer: DocRenderer) -> None:
    """Numbering is not checked against literal titles ending in a digit."""
    html = renderer.render("# A\n\n# A\n\n# A1")
    assert [h.get("id") for h in _soup(html).find_all("h1")] == ["A", "A1", "A1"]


def test_anchors_reset_between_renders(renderer: DocRenderer) -> None:
    """Each render starts with an empty anchor table."""
    first = renderer.render("# Example\n\n# Example")
    second = renderer.render("# Example\n\n# Example")
    assert first == second
    assert [h.get("id") for h in _soup(second).find_all("h1")] == ["Example", "Example1"]


def test_header_ids_can_be_disabled(renderer: DocRenderer) -> None:
    """Embedded content renders headings without ids."""
    html = renderer.renderer(header_ids=False)("# Example")
    assert html == "<h1>Example</h1>"


def test_rendering_is_deterministic(renderer: DocRenderer) -> None:
    """The same input renders byte-identical HTML."""
    markdown = (
        "# Intro %version%\n\n@[main](code/Hello.java)\n\n"
        "[[Label|Target]] and [API]({api}/index.html)\n\n## Intro 2.9.1"
    )
    assert renderer.render(markdown) == renderer.render(markdown)


# Variables


def test_variables_substituted_and_escaped_once(renderer: DocRenderer) -> None:
    """Configured values are escaped exactly once in prose."""
    html = renderer.render("Version %version% by %org%.")
    assert html == "<p>Version 2.9.1 by R&amp;D &lt;team&gt;.</p>"


def test_unknown_variable_is_reported_inline(renderer: DocRenderer) -> None:
    """Unknown names render a visible placeholder instead of failing."""
    html = renderer.render("Value: %missing%")
    assert html == "<p>Value: Unknown variable: missing</p>"


def test_percent_signs_in_prose_stay_literal(renderer: DocRenderer) -> None:
    """Percentages are not mistaken for variable references."""
    html = renderer.render("Save 50% now and 20% later.")
    assert html == "<p>Save 50% now and 20% later.</p>"


def test_variables_in_code_span(renderer: DocRenderer) -> None:
    """Inline code spans get variable substitution."""
    html = renderer.render("Install `livedoc==%version%` today")
    assert _soup(html).select_one("code").get_text() == "livedoc==2.9.1"


def test_variables_in_fenced_block(renderer: DocRenderer) -> None:
    """Fenced code blocks substitute known variables and keep unknown ones."""
    html = renderer.render("```\necho %version% %unknown%\n```")
    assert "echo 2.9.1 %unknown%" in _soup(html).get_text()


def test_variables_in_indented_block(renderer: DocRenderer) -> None:
    """Indented code blocks substitute variables before highlighting."""
    html = renderer.render("Run:\n\n    echo %org%\n")
    assert "echo R&D <team>" in _soup(html).get_text()


def test_variable_inside_link_url_is_left_alone(renderer: DocRenderer) -> None:
    """``%name%`` in a URL is not a variable reference."""
    html = renderer.render("[notes](http://example.org/%version%/notes)")
    assert _soup(html).select_one("a").get("href") == "http://example.org/%version%/notes"


# Links


@pytest.fixture
def link_renderer(make_renderer: cabc.Callable[..., DocRenderer]) -> DocRenderer:
    """Return a renderer whose only link parameter is ``ver``."""
    return make_renderer(
        config=DocConfig(resources_path="/resources", link_parameters={"ver": "2.9"})
    )


def test_explicit_link_parameters(link_renderer: DocRenderer) -> None:
    """``{name}`` placeholders in link URLs are substituted."""
    html = link_renderer.render('[API](https://example.org/{ver}/api "API docs")')
    anchor = _soup(html).select_one("a")
    assert anchor.get("href") == "https://example.org/2.9/api"
    assert anchor.get("title") == "API docs"
    assert anchor.get_text() == "API"


def test_unknown_link_parameter_stays_literal(link_renderer: DocRenderer) -> None:
    """Unresolved parameters remain as ``{name}`` text."""
    html = link_renderer.render("[x](https://example.org/{nope}/)")
    assert _soup(html).select_one("a").get("href") == "https://example.org/{nope}/"


def test_explicit_link_text_keeps_markup(link_renderer: DocRenderer) -> None:
    """Link text keeps its inline markup."""
    html = link_renderer.render("[the *real* docs](https://example.org/{ver})")
    anchor = _soup(html).select_one("a")
    assert anchor.select_one("em").get_text() == "real"


def test_angle_autolink_parameters(link_renderer: DocRenderer) -> None:
    """Autolinks substitute parameters in both target and text."""
    html = link_renderer.render("<https://example.org/{ver}/>")
    anchor = _soup(html).select_one("a")
    assert anchor.get("href") == "https://example.org/2.9/"
    assert anchor.get_text() == "https://example.org/2.9/"


def test_bare_url_becomes_link(link_renderer: DocRenderer) -> None:
    """Bare URLs in prose are linked with parameters substituted."""
    html = link_renderer.render("See https://example.org/{ver}/guide for more.")
    anchor = _soup(html).select_one("a")
    assert anchor.get("href") == "https://example.org/2.9/guide"
    assert "for more." in _soup(html).get_text()


def test_bare_url_in_parentheses(link_renderer: DocRenderer) -> None:
    """A parenthesised URL is linked and the closing parenthesis stays outside."""
    html = link_renderer.render("see (https://example.org/{ver}/guide) here")
    anchor = _soup(html).select_one("a")
    assert anchor is not None, "expected the parenthesised URL to be linked"
    assert anchor.get("href") == "https://example.org/2.9/guide"
    assert _soup(html).get_text() == "see (https://example.org/2.9/guide) here"


def test_wiki_link_inside_table_cell(renderer: DocRenderer) -> None:
    """The pipe of ``[[label|target]]`` does not split a table cell."""
    html = renderer.render(
        "| Page | Note |\n| --- | --- |\n| [[Label|Target]] | first |\n| [[Home]] | second |"
    )
    rows = _soup(html).select("tbody tr")
    assert [len(row.find_all("td")) for row in rows] == [2, 2]
    anchor = rows[0].select_one("td a")
    assert (anchor.get("href"), anchor.get_text()) == ("Target", "Label")
    assert rows[1].select_one("td a").get("href") == "Home"


def test_wiki_link_pipe_outside_tables_is_unchanged(renderer: DocRenderer) -> None:
    """Prose containing a pipe and a wiki link renders the link normally."""
    html = renderer.render("a | b [[Label|Target]]")
    anchor = _soup(html).select_one("a")
    assert (anchor.get("href"), anchor.get_text()) == ("Target", "Label")
    assert _soup(html).get_text() == "a | b Label"


def test_wiki_link_modes(renderer: DocRenderer) -> None:
    """``[[A|B]]`` targets ``B`` across pages and ``#B`` on a single page."""
    multi = _soup(renderer.render("[[A|B]]")).select_one("a")
    single = _soup(renderer.renderer(single_page=True)("[[A|B]]")).select_one("a")
    assert (multi.get("href"), multi.get_text()) == ("B", "A")
    assert (single.get("href"), single.get_text()) == ("#B", "A")


def test_plain_wiki_link(renderer: DocRenderer) -> None:
    """A plain wiki link uses its text as target and label."""
    anchor = _soup(renderer.render("See [[Home]].")).select_one("a")
    assert (anchor.get("href"), anchor.get_text()) == ("Home", "Home")


@pytest.mark.parametrize(
    ("target", "relative_path", "expected"),
    [
        ("diagram.png", "guide", "/resources/guide/diagram.png"),
        ("diagram.png", None, "/resources/diagram.png"),
        ("/images/logo.png", "guide", "/resources/images/logo.png"),
        ("http://example.org/x.png", "guide", "http://example.org/x.png"),
    ],
)
def test_wiki_image_links(
    renderer: DocRenderer, target: str, relative_path: str | None, expected: str
) -> None:
    """``.png`` wiki links render images served from the resources path."""
    html = renderer.render(f"[[{target}]]", relative_path=relative_path)
    anchor = _soup(html).select_one("a")
    assert anchor.get("href") == expected
    assert anchor.select_one("img").get("src") == expected


def test_unterminated_wiki_link_is_literal(renderer: DocRenderer) -> None:
    """Malformed wiki syntax stays as text."""
    assert renderer.render("a [[b c") == "<p>a [[b c</p>"


# TOC markers


def test_toc_marker_renders_supplied_toc(renderer: DocRenderer) -> None:
    """``@toc@`` renders the TOC given for the render."""
    toc = Toc("guide", "Guide", (("Setup", TocPage("Setup", "Setup")),))
    html = renderer.renderer(toc=toc)("Intro\n\n@toc@\n\nOutro")
    soup = _soup(html)
    assert soup.select_one("div.toc-tree h2").get_text() == "Guide"
    assert [a.get("href") for a in soup.select("li.toc-page a")] == ["Setup"]


def test_toc_marker_without_toc_renders_nothing(renderer: DocRenderer) -> None:
    """Without a TOC the marker is dropped silently."""
    html = renderer.render("Intro\n\n@toc@\n\nOutro")
    assert "@toc@" not in html
    assert "toc-tree" not in html
    assert "<p>Outro</p>" in html


# Plugin dispatch


def test_first_claiming_plugin_wins() -> None:
    """Dispatch stops at the first plugin that handles a node."""
    first, second = _ClaimEverything("first"), _ClaimEverything("second")
    md = Markdown(extensions=[LiveDocExtension([first, second], RenderContext())])
    assert md.convert("%x%") == "<p>first</p>"
    assert first.seen == [Variable("x")]
    assert second.seen == []


def test_unclaimed_nodes_are_dropped() -> None:
    """Nodes no plugin handles produce no output."""
    md = Markdown(extensions=[LiveDocExtension([], RenderContext())])
    assert md.convert("a %x% b") == "<p>a  b</p>"


def test_serializer_is_single_use() -> None:
    """A serializer refuses to render a second document."""
    md = Markdown(extensions=[LiveDocExtension([], RenderContext())])
    md.convert("# One")
    with pytest.raises(SerializerReusedError):
        md.convert("# Two")
