"""Unit tests for href classification and cross-link validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from go101_pages.config import CheckConfig
from go101_pages.corpus import Corpus
from go101_pages.errors import (
    BrokenAnchorLink,
    BrokenPageLink,
    DuplicateAnchorError,
    IndexDrift,
    MalformedMarkup,
)
from go101_pages.html_parser import parse_page
from go101_pages.models import CrossLink, IndexEntry, Page, Section
from go101_pages.registry import AnchorRegistry
from go101_pages.resolver import LinkResolver, resolve, resolve_href


@pytest.mark.parametrize(
    ("source", "href", "page", "anchor"),
    [
        ("tips.html", "reflection.html#deep-equal", "reflection.html", "deep-equal"),
        ("tips.html", "#nil", "tips.html", "nil"),
        ("article/tips.html", "../reflection.html", "reflection.html", None),
        ("article/tips.html", "panic.html#use", "article/panic.html", "use"),
        ("article/tips.html", "/101.html", "101.html", None),
        ("tips.html", "sdk/", "sdk/index.html", None),
        ("tips.html", "./", "index.html", None),
        ("tips.html", "reflection.html?x=1#a%20b", "reflection.html", "a b"),
        ("tips.html", "reflection.html#", "reflection.html", None),
        ("tips.html", "../outside.html", "../outside.html", None),
    ],
)
def test_resolve_href_normalises_internal_targets(
    source: str, href: str, page: str, anchor: str | None
) -> None:
    link = resolve_href(source, href, line=7)
    assert not link.external
    assert link.target_page == page
    assert link.target_anchor == anchor
    assert link.locator == "7"


@pytest.mark.parametrize(
    "href",
    [
        "https://golang.org/pkg/reflect/",
        "http://example.com",
        "//cdn.example.com/x.js",
        "mailto:someone@example.com",
        "javascript:void(0)",
    ],
)
def test_resolve_href_flags_external_links(href: str) -> None:
    link = resolve_href("tips.html", href)
    assert link.external
    assert link.target_page is None


def test_unknown_scheme_is_never_a_page() -> None:
    """A scheme outside the external list keeps the raw href as target."""
    link = resolve_href("tips.html", "htps://golang.org", external_schemes=["https"])
    assert not link.external
    assert link.target_page == "htps://golang.org"


def _registry(*pages: Page, opaque: tuple[str, ...] = ()) -> AnchorRegistry:
    return AnchorRegistry.build(pages, opaque_pages=opaque)


def _anchored(path: str, *anchor_ids: str) -> Page:
    return Page(path, path, sections=tuple(Section(a, a) for a in anchor_ids))


def test_link_to_known_page_without_fragment_is_clean() -> None:
    registry = _registry(_anchored("a.html"), _anchored("b.html"))
    report = resolve([resolve_href("b.html", "a.html")], registry)
    assert report.ok
    assert report.checked_links == 1


def test_missing_fragment_yields_one_broken_anchor() -> None:
    """Scenario: a.html declares foo; b.html links to #foo and #bar."""
    registry = _registry(_anchored("a.html", "foo"), _anchored("b.html"))
    links = [
        resolve_href("b.html", "a.html#foo", line=3),
        resolve_href("b.html", "a.html#bar", line=4),
    ]
    report = resolve(links, registry)
    assert len(report.defects) == 1
    defect = report.defects[0]
    assert isinstance(defect, BrokenAnchorLink)
    assert defect.link.target_anchor == "bar"
    assert report.lines() == ["b.html:4: broken link to a.html#bar"]


def test_missing_page_yields_one_broken_page_and_skips_anchor() -> None:
    """Scenario: a link to c.html#z where c.html is not in the corpus."""
    registry = _registry(_anchored("b.html"))
    report = resolve([resolve_href("b.html", "c.html#z", line=2)], registry)
    assert [type(d) for d in report.defects] == [BrokenPageLink]
    assert report.lines() == ["b.html:2: broken link to c.html#z"]


def test_external_links_are_recorded_not_resolved() -> None:
    registry = _registry(_anchored("a.html"))
    link = resolve_href("a.html", "https://go.dev/doc/#missing")
    report = resolve([link], registry)
    assert report.ok
    assert report.external_links == [link]
    assert report.checked_links == 0


def test_ignore_patterns_skip_validation() -> None:
    registry = _registry(_anchored("a.html"))
    links = [resolve_href("a.html", "src/main.go"), resolve_href("a.html", "c.html")]
    report = resolve(links, registry, ignore=["*.go"])
    assert report.ignored_links == 1
    assert [d.describe() for d in report.defects] == ["a.html:?: broken link to c.html"]


def test_links_into_opaque_pages_skip_anchor_check() -> None:
    registry = _registry(_anchored("a.html"), opaque=("broken.html",))
    report = resolve([resolve_href("a.html", "broken.html#anything")], registry)
    assert report.ok


def test_fragment_may_target_element_ids() -> None:
    page = Page("a.html", "A", element_ids=("index",))
    report = resolve([resolve_href("b.html", "a.html#index")], _registry(page))
    assert report.ok


def test_report_aggregates_every_defect() -> None:
    registry = _registry(_anchored("a.html", "x"))
    links = [CrossLink("a.html", f"a.html#m{n}", "a.html", f"m{n}", n) for n in range(5)]
    report = resolve(links, registry)
    assert len(report.defects) == 5
    assert report.exit_code == 1


def test_link_resolver_merges_all_checks() -> None:
    """Duplicates, malformed pages, broken links and index drift land together."""
    page = parse_page(
        "a.html",
        "<h1>A</h1>\n"
        '<ul class="index"><li><a href="#two">Two</a></li></ul>\n'
        '<a class="anchor" id="one"></a><h3>One</h3>\n'
        '<a class="anchor" id="two"></a><h3>Two</h3>\n'
        '<a class="anchor" id="two"></a><h3>Two again</h3>\n'
        '<a href="missing.html">x</a> <a href="broken.html#q">y</a>\n',
    )
    corpus = Corpus(
        root=Path("."),
        pages=[page],
        failures=[MalformedMarkup("broken.html", "unclosed <div>", 3)],
    )
    report = LinkResolver(CheckConfig.default(Path("."))).check(corpus)
    kinds = sorted(type(d).__name__ for d in report.defects)
    assert kinds == [
        "BrokenPageLink",
        "DuplicateAnchorError",
        "IndexDrift",
        "MalformedMarkup",
    ]
    drift = report.of_kind(IndexDrift)[0]
    assert drift.describe() == 'a.html: index entry "one" missing from index'
    assert report.of_kind(DuplicateAnchorError)[0].anchor_id == "two"
    assert report.pages == 2
    assert report.lines()[0] == 'a.html: index entry "one" missing from index'
    assert 'a.html: duplicate anchor "two"' in report.lines()


def test_link_resolver_can_skip_index_check() -> None:
    page = Page(
        "a.html",
        "A",
        sections=(Section("one", "One"),),
        declared_index=(IndexEntry("other", "Other"),),
    )
    config = CheckConfig(root=Path("."), check_index=False)
    report = LinkResolver(config).check(Corpus(root=Path("."), pages=[page]))
    assert report.ok


def test_body_div_linking_within_page_raises_no_index_drift() -> None:
    page = parse_page(
        "tips.html",
        "<h1>Go Tips</h1>\n"
        '<a class="anchor" id="nil"></a><h3>Nil</h3>\n'
        '<div id="example"><p>See <a href="#nil">nil</a>.</p></div>\n'
        '<a class="anchor" id="loops"></a><h3>Loops</h3>\n',
    )
    corpus = Corpus(root=Path("."), pages=[page])
    report = LinkResolver(CheckConfig.default(Path("."))).check(corpus)
    assert report.ok, report.lines()
