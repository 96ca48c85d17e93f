"""Common literal values used across livedoc.

These constants keep reserved element names, file names and template names
centralized so the recognizers, the serializer, and tests can import the same
values without drifting. Intended for internal use within the livedoc package.

Examples
--------
>>> from livedoc import _constants
>>> _constants.SIDEBAR_FILENAME
'_Sidebar.md'
>>> _constants.NODE_TAG_PREFIX + "wikilink"
'livedoc-wikilink'
"""

NODE_TAG_PREFIX = "livedoc-"

CODE_REFERENCE_TAG = f"{NODE_TAG_PREFIX}coderef"
VARIABLE_TAG = f"{NODE_TAG_PREFIX}variable"
TOC_MARKER_TAG = f"{NODE_TAG_PREFIX}toc"
WIKI_LINK_TAG = f"{NODE_TAG_PREFIX}wikilink"
EXPLICIT_LINK_TAG = f"{NODE_TAG_PREFIX}link"
AUTO_LINK_TAG = f"{NODE_TAG_PREFIX}autolink"

MARKDOWN_SUFFIX = ".md"
SIDEBAR_FILENAME = "_Sidebar.md"

TOC_TEMPLATE = "toc.jinja"
SIDEBAR_TEMPLATE = "sidebar.jinja"
NEXT_LINK_TEMPLATE = "next_link.jinja"
