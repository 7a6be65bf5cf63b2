"""Immutable records describing a parsed documentation corpus."""

from __future__ import annotations

import dataclasses as dc

from ._constants import UNKNOWN_LOCATOR


@dc.dataclass(frozen=True, slots=True)
class Section:
    """A titled block of page content.

    Attributes
    ----------
    anchor_id : str or None
        Identifier of the ``<a class="anchor">`` marking the section; ``None``
        for the lead block that precedes the first anchor.
    title : str
        HTML-stripped heading text.
    body_text : str
        Whitespace-normalised text of the section body. Opaque to the
        registry and resolver.
    line : int or None
        Source line of the anchor element when the parser reports one.
    """

    anchor_id: str | None
    title: str
    body_text: str = ""
    line: int | None = None


@dc.dataclass(frozen=True, slots=True)
class Anchor:
    """A cross-reference target identified by ``(page, id)``."""

    page: str
    id: str

    def __str__(self) -> str:
        return f"{self.page}#{self.id}"


@dc.dataclass(frozen=True, slots=True)
class CrossLink:
    """A hyperlink found in a page of the corpus.

    ``target_page`` is the corpus-relative path the link points at, or
    ``None`` for external links, which are recorded but never resolved.
    """

    source_page: str
    href: str
    target_page: str | None
    target_anchor: str | None = None
    line: int | None = None
    external: bool = False

    @property
    def locator(self) -> str:
        """Return the source location used in report lines."""
        return str(self.line) if self.line is not None else UNKNOWN_LOCATOR


@dc.dataclass(frozen=True, slots=True)
class IndexEntry:
    """One row of a page's summary list."""

    anchor_id: str
    display_text: str


@dc.dataclass(frozen=True, slots=True)
class Page:
    """One parsed HTML document.

    Attributes
    ----------
    path : str
        POSIX path relative to the corpus root; unique across the corpus.
    title : str
        Text of the page's ``<h1>`` (or ``<title>``) element.
    sections : tuple[Section, ...]
        Sections in declaration order. Repeated anchor ids are kept so the
        registry can report them.
    element_ids : tuple[str, ...]
        Ids declared on non-anchor elements; valid link targets that never
        appear in the index.
    links : tuple[CrossLink, ...]
        Outgoing links in document order.
    declared_index : tuple[IndexEntry, ...] or None
        Entries of the page's own index block, or ``None`` when the page has
        no index block.
    """

    path: str
    title: str
    sections: tuple[Section, ...] = ()
    element_ids: tuple[str, ...] = ()
    links: tuple[CrossLink, ...] = ()
    declared_index: tuple[IndexEntry, ...] | None = None

    @property
    def anchors(self) -> tuple[Anchor, ...]:
        """Return anchors in declaration order, repeats included."""
        return tuple(
            Anchor(self.path, section.anchor_id)
            for section in self.sections
            if section.anchor_id
        )


__all__ = ["Anchor", "CrossLink", "IndexEntry", "Page", "Section"]
