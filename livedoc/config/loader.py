"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from livedoc.page_index import Toc, TocPage

from .models import DocConfig, DocConfigError, SiteConfig


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing a documentation site.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``livedoc.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration with the render settings, repository roots
        (resolved against the directory holding ``path``) and the optional
        table of contents.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    DocConfigError
        If a field has the wrong shape, for example a non-mapping
        ``variables`` section or a TOC entry that names neither a page nor a
        nested TOC.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from livedoc.config import load_site_config
    >>> site = load_site_config(Path("livedoc.yaml"))  # doctest: +SKIP
    >>> site.doc.next_text  # doctest: +SKIP
    'Next'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):  # pragma: no cover - config error guard
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    base_dir = path.parent

    doc = DocConfig(
        resources_path=str(raw.get("resources_path", "") or ""),
        variables=_string_mapping(raw.get("variables"), "variables"),
        link_parameters=_string_mapping(raw.get("link_parameters"), "link_parameters"),
        next_text=_optional_str(raw.get("next_text")),
    )
    markdown_root = base_dir / str(raw.get("markdown_root", "."))
    code_root = base_dir / str(raw.get("code_root", raw.get("markdown_root", ".")))
    toc_raw = raw.get("toc")
    toc = _build_toc(toc_raw, "toc") if toc_raw else None

    return SiteConfig(
        doc=doc,
        markdown_root=markdown_root,
        code_root=code_root,
        toc=toc,
        pygments_style=str(raw.get("pygments_style", "default")),
    )


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _string_mapping(value: object | None, field: str) -> dict[str, str]:
    """Coerce a YAML mapping into ``dict[str, str]``."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"'{field}' must be a mapping of names to values."
        raise DocConfigError(msg)
    return {str(key): str(item) for key, item in value.items()}


def _build_toc(payload: object, where: str) -> Toc:
    """Build a Toc node (and its children) from a YAML mapping."""
    if not isinstance(payload, dict):
        msg = f"'{where}' must be a mapping."
        raise DocConfigError(msg)
    name = _optional_str(payload.get("name")) or "index"
    title = _optional_str(payload.get("title")) or name
    nodes: list[tuple[str, Toc | TocPage]] = []
    for idx, entry in enumerate(payload.get("pages") or []):
        entry_where = f"{where}.pages[{idx}]"
        match entry:
            case str():
                nodes.append((entry, TocPage(page=entry, title=entry)))
            case {"page": page_name, **rest}:
                page = str(page_name)
                page_title = _optional_str(rest.get("title")) or page
                nodes.append((page_title, TocPage(page=page, title=page_title)))
            case {"toc": child}:
                child_toc = _build_toc(child, f"{entry_where}.toc")
                nodes.append((child_toc.title, child_toc))
            case _:
                msg = f"'{entry_where}' must name a 'page' or a nested 'toc'."
                raise DocConfigError(msg)
    return Toc(
        name=name,
        title=title,
        nodes=tuple(nodes),
        path=str(payload.get("path", "") or "").strip("/"),
    )


__all__ = ["load_site_config"]
