"""Common literal values used across go101_pages.

These constants keep markup conventions and defaults centralized so the
parser, resolver, configuration loader, and tests import the same values
without drifting. Intended for internal use within the go101_pages package.

Examples
--------
>>> from go101_pages import _constants
>>> _constants.ANCHOR_CLASS
'anchor'
>>> "https" in _constants.EXTERNAL_SCHEMES
True
"""

ANCHOR_CLASS = "anchor"
INDEX_CLASS = "index"
SECTION_HEADINGS = ("h2", "h3", "h4")
STRUCTURAL_TAGS = frozenset(
    {
        "html",
        "head",
        "body",
        "div",
        "ul",
        "ol",
        "pre",
        "table",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "a",
    }
)
EXTERNAL_SCHEMES = (
    "http",
    "https",
    "ftp",
    "mailto",
    "tel",
    "data",
    "javascript",
)
DEFAULT_INCLUDE = ("**/*.html",)
DIRECTORY_INDEX = "index.html"
UNKNOWN_LOCATOR = "?"
