"""Typed dataclasses describing livedoc rendering configuration."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    from livedoc.page_index import Toc


class DocConfigError(ValueError):
    """Raised when the documentation configuration is invalid or incomplete."""


@dc.dataclass(frozen=True, slots=True)
class DocConfig:
    """Render settings shared read-only by every page render.

    Attributes
    ----------
    resources_path : str
        Base URL under which wiki-linked images are served.
    variables : Mapping[str, str]
        Values substituted for ``%name%`` references. Stored unescaped; the
        HTML serializer escapes them exactly once.
    link_parameters : Mapping[str, str]
        Values substituted for ``{name}`` placeholders in link URLs.
    next_text : str or None
        Label of the "next page" link appended to indexed pages; ``None``
        disables the link.
    """

    resources_path: str = ""
    variables: typ.Mapping[str, str] = dc.field(default_factory=dict)
    link_parameters: typ.Mapping[str, str] = dc.field(default_factory=dict)
    next_text: str | None = None


@dc.dataclass(slots=True)
class SiteConfig:
    """A fully resolved site definition sourced from YAML config."""

    doc: DocConfig
    markdown_root: Path
    code_root: Path
    toc: Toc | None = None
    pygments_style: str = "default"


__all__ = ["DocConfig", "DocConfigError", "SiteConfig"]
