"""Link targets and variable substitution for rendered pages.

Example
-------
>>> from livedoc.render.links import substitute_link_parameters
>>> substitute_link_parameters("{api}/index.html#{missing}", {"api": "/api/2.9"})
'/api/2.9/index.html#{missing}'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

if typ.TYPE_CHECKING:
    from livedoc.render.context import RenderContext

LINK_PARAMETER_PATTERN = re.compile(r"\{([^}]+)\}")
VARIABLE_PATTERN = re.compile(r"%([^%]+)%")
IMAGE_SUFFIX = ".png"


def substitute_link_parameters(url: str, parameters: typ.Mapping[str, str]) -> str:
    """Replace ``{name}`` placeholders; unknown names are left untouched."""

    def _replace(match: re.Match[str]) -> str:
        return parameters.get(match.group(1), match.group(0))

    return LINK_PARAMETER_PATTERN.sub(_replace, url)


def substitute_variables(text: str, variables: typ.Mapping[str, str]) -> str:
    """Replace ``%name%`` references; unknown names are left untouched."""

    def _replace(match: re.Match[str]) -> str:
        return variables.get(match.group(1), match.group(0))

    return VARIABLE_PATTERN.sub(_replace, text)


@dc.dataclass(frozen=True, slots=True)
class WikiLinkTarget:
    """Resolved wiki link: ``href`` plus either display text or an image source."""

    href: str
    text: str
    image: bool = False


class LinkResolver:
    """Resolve wiki links against the current render context."""

    def __init__(self, resources_path: str, context: RenderContext) -> None:
        self.resources_path = resources_path
        self.context = context

    def wiki_link(self, text: str) -> WikiLinkTarget:
        """Return the target of ``[[text]]``.

        ``label|target`` links show ``label``; ``*.png`` targets render as
        images served from the resources path; anything else links to a page
        of the same name. In single-page mode page targets become anchors.
        """
        if "|" in text:
            parts = text.split("|")
            return WikiLinkTarget(href=self._page_href(parts[1]), text=parts[0])
        if text.endswith(IMAGE_SUFFIX):
            return WikiLinkTarget(href=self.image_src(text), text=text, image=True)
        return WikiLinkTarget(href=self._page_href(text), text=text)

    def image_src(self, image: str) -> str:
        """Return the URL of a wiki-linked image."""
        if image.startswith("http://"):
            return image
        if image.startswith("/"):
            return self.resources_path + image
        return f"{self.resources_path}/{self.context.page_dir_prefix}{image}"

    def _page_href(self, target: str) -> str:
        return f"#{target}" if self.context.single_page else target


__all__ = [
    "LINK_PARAMETER_PATTERN",
    "VARIABLE_PATTERN",
    "LinkResolver",
    "WikiLinkTarget",
    "substitute_link_parameters",
    "substitute_variables",
]
