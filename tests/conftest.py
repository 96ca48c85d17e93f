"""Shared fixtures for livedoc tests.

The renderer reads markdown and source files through a repository; tests use
``MemoryRepository`` so every scenario declares its files inline and can
assert how often each file was loaded.
"""

from __future__ import annotations

import typing as typ
from pathlib import PurePosixPath

import pytest

from livedoc.config import DocConfig
from livedoc.docs import DocRenderer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from livedoc.page_index import PageIndex


class MemoryRepository:
    """Dict-backed file repository that records every load."""

    def __init__(self, files: cabc.Mapping[str, str] | None = None) -> None:
        self.files = dict(files or {})
        self.loads: list[str] = []

    def load_file(self, path: str) -> str | None:
        self.loads.append(path)
        return self.files.get(path)

    def find_file_with_name(self, name: str) -> str | None:
        for path in sorted(self.files):
            if PurePosixPath(path).name == name:
                return path
        return None


HELLO_JAVA = """\
package hello;

public class Hello {
    // #main
    public static void main(String[] args) {
        System.out.println("Hello %version%");
    }
    // #main
}
"""


@pytest.fixture
def doc_config() -> DocConfig:
    """Return a configuration with one variable and one link parameter."""
    return DocConfig(
        resources_path="/resources",
        variables={"version": "2.9.1", "org": "R&D <team>"},
        link_parameters={"api": "https://api.example.org/2.9"},
        next_text="Next",
    )


@pytest.fixture
def code_repository() -> MemoryRepository:
    """Return a code repository holding a labelled Java sample."""
    return MemoryRepository({"code/Hello.java": HELLO_JAVA})


@pytest.fixture
def make_renderer(
    doc_config: DocConfig, code_repository: MemoryRepository
) -> cabc.Callable[..., DocRenderer]:
    """Return a factory building renderers over in-memory repositories."""

    def _make(
        markdown_files: cabc.Mapping[str, str] | None = None,
        page_index: PageIndex | None = None,
        config: DocConfig | None = None,
    ) -> DocRenderer:
        return DocRenderer(
            MemoryRepository(markdown_files),
            code_repository,
            page_index,
            config or doc_config,
        )

    return _make


@pytest.fixture
def renderer(make_renderer: cabc.Callable[..., DocRenderer]) -> DocRenderer:
    """Return a renderer without markdown pages or page index."""
    return make_renderer()
