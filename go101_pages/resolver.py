"""Classify hrefs and validate cross-links against the anchor registry.

:func:`resolve_href` turns a raw ``href`` into a :class:`CrossLink` with a
corpus-relative target page and fragment. :func:`resolve` checks a batch of
links and aggregates every defect instead of stopping at the first one, so a
single run lists everything that is wrong. :class:`LinkResolver` wires the
registry, the resolver and the index check into one pass over a corpus.

Example
-------
>>> from go101_pages.resolver import resolve_href
>>> link = resolve_href("articles/tips.html", "../reflection.html#deep-equal")
>>> (link.target_page, link.target_anchor)
('reflection.html', 'deep-equal')
>>> resolve_href("tips.html", "https://golang.org/pkg/").external
True
"""

from __future__ import annotations

import fnmatch
import logging
import posixpath
import typing as typ
from urllib.parse import unquote, urlsplit

from ._constants import DIRECTORY_INDEX, EXTERNAL_SCHEMES
from .errors import BrokenAnchorLink, BrokenPageLink
from .index_builder import diff_index
from .models import CrossLink
from .registry import AnchorRegistry
from .report import ValidationReport

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import CheckConfig
    from .corpus import Corpus

logger = logging.getLogger(__name__)


def resolve_href(
    source_page: str,
    href: str,
    *,
    line: int | None = None,
    external_schemes: cabc.Sequence[str] = EXTERNAL_SCHEMES,
) -> CrossLink:
    """Classify ``href`` found on ``source_page`` and normalise its target.

    Parameters
    ----------
    source_page : str
        Corpus-relative POSIX path of the page holding the link.
    href : str
        Raw attribute value.
    line : int or None, optional
        Source line of the link element.
    external_schemes : Sequence[str], optional
        Schemes owned by other sites. Links using them, or naming a host, are
        external: recorded but never resolved.

    Returns
    -------
    CrossLink
        ``target_page`` is the normalised corpus path. Links with a scheme
        outside ``external_schemes`` keep the raw href as their target so
        they never match a page.

    Notes
    -----
    Relative paths are joined with the source page's directory and
    normalised; ``/x.html`` resolves from the corpus root; ``dir/`` targets
    ``dir/index.html``. Query strings are dropped and fragments are
    percent-decoded.
    """
    parsed = urlsplit(href)
    scheme = parsed.scheme.lower()
    schemes = {value.lower() for value in external_schemes}
    fragment = unquote(parsed.fragment) or None
    if scheme and scheme not in schemes:
        return CrossLink(source_page, href, href, fragment, line)
    if scheme or parsed.netloc or href.startswith("//"):
        return CrossLink(
            source_page=source_page,
            href=href,
            target_page=None,
            line=line,
            external=True,
        )

    path = unquote(parsed.path)
    if not path:
        target = source_page
    else:
        base = "" if path.startswith("/") else posixpath.dirname(source_page)
        target = posixpath.normpath(posixpath.join(base, path.lstrip("/")))
        if target == ".":
            target = DIRECTORY_INDEX
        elif path.endswith("/"):
            target = posixpath.join(target, DIRECTORY_INDEX)
    return CrossLink(source_page, href, target, fragment, line)


def _is_ignored(href: str, patterns: cabc.Sequence[str]) -> bool:
    return any(fnmatch.fnmatchcase(href, pattern) for pattern in patterns)


def resolve(
    links: cabc.Iterable[CrossLink],
    registry: AnchorRegistry,
    *,
    ignore: cabc.Sequence[str] = (),
) -> ValidationReport:
    """Validate ``links`` against ``registry``.

    Parameters
    ----------
    links : Iterable[CrossLink]
        Links extracted from page markup.
    registry : AnchorRegistry
        Frozen registry of the whole corpus.
    ignore : Sequence[str], optional
        ``fnmatch`` patterns matched against raw hrefs; matching links are
        counted but not validated.

    Returns
    -------
    ValidationReport
        One :class:`BrokenPageLink` per link to an unknown page (its fragment
        is not checked) and one :class:`BrokenAnchorLink` per link whose
        fragment is absent from a known page. External links are recorded in
        ``external_links``.
    """
    report = ValidationReport()
    for link in links:
        if link.external:
            report.external_links.append(link)
            continue
        if _is_ignored(link.href, ignore):
            logger.debug("ignoring %s on %s", link.href, link.source_page)
            report.ignored_links += 1
            continue
        report.checked_links += 1
        target = link.target_page
        if target is None or not registry.has_page(target):
            report.defects.append(BrokenPageLink(link))
            continue
        if link.target_anchor is None or registry.is_opaque(target):
            continue
        if not registry.has_target(target, link.target_anchor):
            report.defects.append(BrokenAnchorLink(link))
    return report


class LinkResolver:
    """Run every corpus check and merge the results into one report."""

    def __init__(self, config: CheckConfig) -> None:
        """Initialize the resolver.

        Parameters
        ----------
        config : CheckConfig
            Supplies ignore patterns and whether declared indexes are checked.
        """
        self.config = config

    def build_registry(self, corpus: Corpus) -> AnchorRegistry:
        """Build the registry once every page of ``corpus`` is parsed."""
        return AnchorRegistry.build(
            corpus.pages, opaque_pages=[failure.page for failure in corpus.failures]
        )

    def check(
        self, corpus: Corpus, registry: AnchorRegistry | None = None
    ) -> ValidationReport:
        """Return the full defect list for ``corpus``.

        Malformed pages and duplicate anchors come first, followed by broken
        links and, when ``config.check_index`` is set, index drift.
        """
        if registry is None:
            registry = self.build_registry(corpus)
        links = [link for page in corpus.pages for link in page.links]
        report = resolve(links, registry, ignore=self.config.ignore_links)
        report.defects[:0] = [*corpus.failures, *registry.duplicates]
        if self.config.check_index:
            for page in corpus.pages:
                report.defects.extend(diff_index(page))
        report.pages = len(corpus.pages) + len(corpus.failures)
        return report


__all__ = ["LinkResolver", "resolve", "resolve_href"]
