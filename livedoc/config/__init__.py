"""Load and validate livedoc site configuration YAML.

This subpackage parses the project's ``livedoc.yaml`` file into strongly typed
dataclasses. :class:`DocConfig` carries the immutable render settings shared
by every page render (resources path, variables, link parameters, next-link
label); :class:`SiteConfig` adds the repository roots and the optional table
of contents. The primary entry point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from livedoc.config import load_site_config
>>> site = load_site_config(Path("docs/livedoc.yaml"))  # doctest: +SKIP
>>> site.doc.variables["version"]  # doctest: +SKIP
'2.9.1'
"""

from .loader import load_site_config
from .models import DocConfig, DocConfigError, SiteConfig

__all__ = ["DocConfig", "DocConfigError", "SiteConfig", "load_site_config"]
