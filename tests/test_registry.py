"""Unit tests for the anchor registry.

These tests build registries from hand-made :class:`Page` records and cover
round-trip lookups, duplicate detection in both insertion orders, opaque
pages, and the read-only state after :meth:`AnchorRegistry.build`.
"""

from __future__ import annotations

import pytest

from go101_pages.errors import AnchorNotFoundError, DuplicateAnchorError
from go101_pages.models import Anchor, Page, Section
from go101_pages.registry import AnchorRegistry


def _page(path: str, *anchor_ids: str, element_ids: tuple[str, ...] = ()) -> Page:
    """Construct a page with one titled section per anchor id."""
    sections = [Section(None, path)]
    sections.extend(
        Section(anchor_id, anchor_id.title(), line=index + 1)
        for index, anchor_id in enumerate(anchor_ids)
    )
    return Page(path, path, sections=tuple(sections), element_ids=element_ids)


def test_lookup_round_trip() -> None:
    """Every declared anchor looks up to its originating section."""
    pages = [_page("tips.html", "nil", "loops"), _page("reflection.html", "deep-equal")]
    registry = AnchorRegistry.build(pages)
    for page in pages:
        for section in page.sections:
            if section.anchor_id:
                assert registry.lookup(page.path, section.anchor_id) is section
    assert len(registry) == 3
    assert not registry.duplicates


def test_lookup_is_exact() -> None:
    registry = AnchorRegistry.build([_page("tips.html", "nil")])
    with pytest.raises(AnchorNotFoundError):
        registry.lookup("tips.html", "Nil")
    with pytest.raises(AnchorNotFoundError):
        registry.lookup("tips", "nil")
    assert registry.get("tips.html", "nil ") is None


@pytest.mark.parametrize("titles", [("First", "Second"), ("Second", "First")])
def test_register_twice_raises_regardless_of_order(titles: tuple[str, str]) -> None:
    registry = AnchorRegistry()
    first, second = (Section("x", title) for title in titles)
    registry.register("a.html", first)
    with pytest.raises(DuplicateAnchorError) as excinfo:
        registry.register("a.html", second)
    assert excinfo.value.page == "a.html"
    assert excinfo.value.anchor_id == "x"
    assert registry.lookup("a.html", "x") is first


def test_same_id_on_different_pages_is_allowed() -> None:
    registry = AnchorRegistry.build([_page("a.html", "x"), _page("b.html", "x")])
    assert Anchor("a.html", "x") in registry
    assert Anchor("b.html", "x") in registry
    assert not registry.duplicates


def test_build_records_one_error_per_duplicated_id() -> None:
    """Building continues past duplicates and reports each id once."""
    pages = [_page("a.html", "x", "y", "x", "x"), _page("b.html", "z")]
    registry = AnchorRegistry.build(pages)
    assert [(e.page, e.anchor_id) for e in registry.duplicates] == [("a.html", "x")]
    assert registry.duplicates[0].describe() == 'a.html: duplicate anchor "x"'
    assert registry.lookup("a.html", "x").line == 1
    assert registry.has_target("b.html", "z")


def test_strict_build_raises_first_duplicate() -> None:
    with pytest.raises(DuplicateAnchorError):
        AnchorRegistry.build([_page("a.html", "x", "x")], strict=True)


def test_registry_is_read_only_after_build() -> None:
    registry = AnchorRegistry.build([_page("a.html", "x")])
    with pytest.raises(RuntimeError):
        registry.register("a.html", Section("y", "Y"))


def test_duplicate_page_paths_are_rejected() -> None:
    with pytest.raises(ValueError, match="appears twice"):
        AnchorRegistry.build([_page("a.html", "x"), _page("a.html", "y")])


def test_targets_include_element_ids_and_opaque_pages() -> None:
    registry = AnchorRegistry.build(
        [_page("a.html", "x", element_ids=("index",))], opaque_pages=["broken.html"]
    )
    assert registry.has_target("a.html", "index")
    assert registry.get("a.html", "index") is None
    assert registry.has_page("broken.html")
    assert registry.is_opaque("broken.html")
    assert not registry.is_opaque("a.html")
    assert registry.pages == ["a.html", "broken.html"]


def test_anchors_keep_declaration_order() -> None:
    registry = AnchorRegistry.build([_page("a.html", "zeta", "alpha", "mid")])
    assert [a.id for a in registry.anchors_for("a.html")] == ["zeta", "alpha", "mid"]
    assert [str(a) for a in registry] == ["a.html#zeta", "a.html#alpha", "a.html#mid"]
