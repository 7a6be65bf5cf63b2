"""Typed dataclasses describing checker configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from go101_pages._constants import DEFAULT_INCLUDE, EXTERNAL_SCHEMES


@dc.dataclass(slots=True)
class CheckConfig:
    """A fully resolved corpus check configuration.

    Attributes
    ----------
    root : Path
        Directory holding the HTML corpus.
    include : tuple[str, ...]
        Glob patterns, relative to ``root``, selecting pages.
    exclude : tuple[str, ...]
        Glob patterns removing pages from the selection.
    ignore_links : tuple[str, ...]
        ``fnmatch`` patterns for hrefs that are never validated.
    external_schemes : tuple[str, ...]
        URL schemes treated as external links.
    check_index : bool
        Compare each page's declared index with its anchors.
    jobs : int
        Worker threads used to parse pages; ``1`` parses serially.
    """

    root: Path
    include: tuple[str, ...] = DEFAULT_INCLUDE
    exclude: tuple[str, ...] = ()
    ignore_links: tuple[str, ...] = ()
    external_schemes: tuple[str, ...] = EXTERNAL_SCHEMES
    check_index: bool = True
    jobs: int = 1

    @classmethod
    def default(cls, root: Path) -> CheckConfig:
        """Return the configuration used when no config file is given."""
        return cls(root=root)


__all__ = ["CheckConfig"]
