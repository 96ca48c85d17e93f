"""Cyclopts CLI entrypoint for rendering livedoc documentation to HTML.

The ``livedoc`` console script defined here renders a single page, or every
page listed in the configured table of contents, from a ``livedoc.yaml`` site
configuration.

Examples
--------
Render every page into ``public/``:

>>> from livedoc.cli import app
>>> app(["build", "--output-dir", "public"])  # doctest: +SKIP

Print one page to stdout:

>>> app(["page", "Home"])  # doctest: +SKIP
"""

from __future__ import annotations

import html
import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_site_config
from .docs import DocRenderer

DEFAULT_CONFIG = Path("livedoc.yaml")

app = App(name="livedoc", config=cyclopts.config.Env("LIVEDOC_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    print(f"wrote {_format_path(path)}")


def _section(name: str, body: str) -> str:
    """Wrap one page of a single-page build in a section anchored by its name."""
    return f'<section id="{html.escape(name, quote=True)}">\n{body}\n</section>'


@app.command(help="Render one documentation page.")
def page(
    name: str,
    *,
    config: typ.Annotated[Path, Parameter(help="Path to site config")] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Write HTML here instead of printing it")
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Log debug output")] = False,
) -> None:
    """Render the page called ``name``.

    Parameters
    ----------
    name : str
        Page to render, without directory or ``.md`` suffix.
    config : Path, optional
        Path to the ``livedoc.yaml`` configuration file.
    output_dir : Path or None, optional
        Directory receiving ``<name>.html`` and, when a sidebar exists,
        ``<name>.sidebar.html``. When ``None`` the page HTML is printed.
    verbose : bool, optional
        Enable debug logging.

    Raises
    ------
    LookupError
        If the page cannot be found.
    """
    _configure_logging(verbose)
    renderer = DocRenderer.from_site_config(load_site_config(config))
    rendered = renderer.render_page(name)
    if rendered is None:
        msg = f"Page '{name}' not found."
        raise LookupError(msg)
    if output_dir is None:
        print(rendered.html)
        return
    _write(output_dir / f"{name}.html", rendered.html)
    if rendered.sidebar_html is not None:
        _write(output_dir / f"{name}.sidebar.html", rendered.sidebar_html)


@app.command(help="Render every page listed in the table of contents.")
def build(
    *,
    config: typ.Annotated[Path, Parameter(help="Path to site config")] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[Path, Parameter(help="Output folder")] = Path("public"),
    single_page: typ.Annotated[
        bool, Parameter(help="Concatenate all pages into index.html")
    ] = False,
    verbose: typ.Annotated[bool, Parameter(help="Log debug output")] = False,
) -> None:
    """Render all pages of the site.

    Parameters
    ----------
    config : Path, optional
        Path to the ``livedoc.yaml`` configuration file; it must define a
        ``toc``.
    output_dir : Path, optional
        Directory receiving the HTML files.
    single_page : bool, optional
        Write one ``index.html`` in which each page is a section anchored by
        its name, instead of one file per page.
    verbose : bool, optional
        Enable debug logging.
    """
    _configure_logging(verbose)
    renderer = DocRenderer.from_site_config(load_site_config(config))
    pages = renderer.render_all_pages(single_page=single_page)
    if single_page:
        sections = [_section(name, body) for name, body in pages]
        _write(output_dir / "index.html", "\n".join(sections))
        return
    for name, body in pages:
        _write(output_dir / f"{name}.html", body)


def main() -> None:
    """Invoke the Cyclopts application that powers the ``livedoc`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
