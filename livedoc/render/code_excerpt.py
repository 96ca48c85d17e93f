r"""Extract labelled excerpts from source files for embedding in pages.

Documentation pages reference real source code with ``@[label](path)``. The
referenced file is split into lines, the segment between two ``#label``
markers is located, and in-source directives shape what is shown:

``###insert: code###``
    Emit ``code`` verbatim.
``###skip: N``
    Drop this line and the ``N`` lines that follow.
``###skip``
    Drop this line only.
``###replace: code###``
    Emit ``code`` verbatim in place of the next line.

Example
-------
>>> from livedoc.render.code_excerpt import compile_segment
>>> compile_segment(["    A", "    ###skip: 1", "    B", "    C"])
'A\nC'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from livedoc.repository import FileRepository

logger = logging.getLogger(__name__)

INSERT_DIRECTIVE = re.compile(r".*###insert: (.*?)(?:###.*)?")
SKIP_N_DIRECTIVE = re.compile(r".*###skip:\s*(\d+).*")
SKIP_DIRECTIVE = re.compile(r".*###skip.*")
REPLACE_DIRECTIVE = re.compile(r".*###replace: (.*?)(?:###.*)?")


class CodeFileCache:
    """Memoize source files by path for the duration of one render.

    A path is loaded from the repository at most once, misses included. The
    cache holds render-scoped state and must not be shared between renders.
    """

    def __init__(self, repository: FileRepository) -> None:
        self._repository = repository
        self._lines: dict[str, list[str] | None] = {}

    def lines(self, path: str) -> list[str] | None:
        """Return the lines of ``path`` or ``None`` when it cannot be loaded."""
        if path not in self._lines:
            text = self._repository.load_file(path)
            self._lines[path] = None if text is None else text.splitlines()
        return self._lines[path]

    def __contains__(self, path: object) -> bool:
        return path in self._lines


@dc.dataclass(frozen=True, slots=True)
class CodeExcerpt:
    """Compiled excerpt ready to be highlighted."""

    code: str
    language: str | None


@dc.dataclass(frozen=True, slots=True)
class MissingExcerpt:
    """A reference whose label or file could not be found."""

    source: str
    label: str

    @property
    def message(self) -> str:
        """Return the inline placeholder text shown in the page."""
        return f"Unable to find label {self.label} in source file {self.source}"


def split_source(source: str, default_label: str) -> tuple[str, str]:
    """Split ``path#label``; without ``#`` the reference's own label is used."""
    path, sep, label = source.partition("#")
    if sep:
        return path, label
    return source, default_label


def resolve_path(path: str, page_dir_prefix: str) -> str:
    """Return the repository path for ``path`` as seen from the current page.

    Paths starting with ``/`` are root-relative; anything else is appended to
    the current page's directory without normalizing ``..`` segments.
    """
    if path.startswith("/"):
        return path[1:]
    return page_dir_prefix + path


def label_matcher(label: str) -> re.Pattern[str]:
    """Return a pattern matching lines that carry the ``#label`` marker."""
    return re.compile(r"\s*#" + re.escape(label) + r"(\s|\Z)")


def find_segment(lines: cabc.Sequence[str], label: str) -> list[str]:
    """Return the lines strictly between the first two ``#label`` markers.

    The segment is empty unless the label occurs at least twice.
    """
    pattern = label_matcher(label)
    segment: list[str] = []
    inside = False
    for line in lines:
        marker = pattern.search(line) is not None
        if not inside:
            inside = marker
            continue
        if marker:
            return segment
        segment.append(line)
    return []


def common_indent(lines: cabc.Iterable[str]) -> int:
    """Return the smallest leading-space count over lines with content."""
    indents = [
        len(line) - len(line.lstrip(" ")) for line in lines if line.strip(" ")
    ]
    return min(indents, default=0)


def compile_segment(segment: cabc.Sequence[str]) -> str:
    """Apply in-source directives and strip the common indent.

    Lines produced by ``insert`` and ``replace`` directives are emitted
    verbatim; every other kept line loses the common indent of the segment.
    """
    indent = common_indent(segment)
    output: list[str] = []
    skip: int | None = None
    for line in segment:
        if skip is not None:
            skip = skip - 1 if skip > 1 else None
            continue
        if match := INSERT_DIRECTIVE.fullmatch(line):
            output.append(match.group(1))
        elif match := SKIP_N_DIRECTIVE.fullmatch(line):
            skip = int(match.group(1))
        elif SKIP_DIRECTIVE.fullmatch(line):
            continue
        elif match := REPLACE_DIRECTIVE.fullmatch(line):
            output.append(match.group(1))
            skip = 1
        else:
            output.append(line[indent:])
    return "\n".join(output)


def guess_language(path: str) -> str | None:
    """Return the file extension of ``path`` as a highlighting hint."""
    parts = path.split(".")
    while parts and not parts[-1]:
        parts.pop()
    return parts[-1] if len(parts) > 1 else None


def extract_excerpt(
    cache: CodeFileCache,
    source: str,
    label: str,
    page_dir_prefix: str = "",
) -> CodeExcerpt | MissingExcerpt:
    """Resolve a code reference to a compiled excerpt.

    Parameters
    ----------
    cache : CodeFileCache
        Render-scoped file cache used to load the source file.
    source : str
        Reference target, optionally carrying a ``#label`` suffix.
    label : str
        Link text of the reference; used as the label when ``source`` has no
        ``#`` suffix.
    page_dir_prefix : str, optional
        Directory of the current page with a trailing slash.

    Returns
    -------
    CodeExcerpt | MissingExcerpt
        The compiled code and its language hint, or a description of what
        could not be found.
    """
    path, label = split_source(source, label)
    lines = cache.lines(resolve_path(path, page_dir_prefix))
    segment: list[str] | None = lines
    if lines is not None and label:
        segment = find_segment(lines, label) or None
    if segment is None:
        missing = MissingExcerpt(source=path, label=label)
        logger.warning(missing.message)
        return missing
    return CodeExcerpt(code=compile_segment(segment), language=guess_language(path))


__all__ = [
    "CodeExcerpt",
    "CodeFileCache",
    "MissingExcerpt",
    "common_indent",
    "compile_segment",
    "extract_excerpt",
    "find_segment",
    "guess_language",
    "label_matcher",
    "resolve_path",
    "split_source",
]
