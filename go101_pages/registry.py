"""Process-wide registry of every anchor declared in the corpus.

The registry maps ``(page path, anchor id)`` to the :class:`Section` the
anchor opens. It is built in a single pass once every page has been parsed
and is frozen afterwards; later lookups never see a partially built map.

Example
-------
>>> from go101_pages.models import Page, Section
>>> from go101_pages.registry import AnchorRegistry
>>> page = Page("a.html", "A", sections=(Section("foo", "Foo"),))
>>> registry = AnchorRegistry.build([page])
>>> registry.lookup("a.html", "foo").title
'Foo'
>>> registry.get("a.html", "bar") is None
True
"""

from __future__ import annotations

import logging
import typing as typ

from .errors import AnchorNotFoundError, DuplicateAnchorError
from .models import Anchor

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import Page, Section

logger = logging.getLogger(__name__)


class AnchorRegistry:
    """Tagged map keyed by ``(page, anchor id)`` with duplicate detection."""

    def __init__(self) -> None:
        self._sections: dict[tuple[str, str], Section] = {}
        self._order: dict[str, list[str]] = {}
        self._element_ids: dict[str, frozenset[str]] = {}
        self._opaque: set[str] = set()
        self._frozen = False
        self.duplicates: list[DuplicateAnchorError] = []

    @classmethod
    def build(
        cls,
        pages: cabc.Iterable[Page],
        *,
        opaque_pages: cabc.Iterable[str] = (),
        strict: bool = False,
    ) -> AnchorRegistry:
        """Scan every page's sections and register their anchors.

        Parameters
        ----------
        pages : Iterable[Page]
            Parsed pages; each path must be unique.
        opaque_pages : Iterable[str], optional
            Paths of pages that exist but could not be parsed. Links to them
            resolve, but their anchors are unknown.
        strict : bool, optional
            Raise the first :class:`DuplicateAnchorError` instead of recording
            it in :attr:`duplicates`.

        Returns
        -------
        AnchorRegistry
            The frozen registry.

        Raises
        ------
        DuplicateAnchorError
            Only when ``strict`` is set and a page repeats an anchor id.
        ValueError
            When two pages share the same path.
        """
        registry = cls()
        for page in pages:
            registry._add_page(page, strict=strict)
        for path in opaque_pages:
            if path not in registry._order:
                registry._opaque.add(path)
        registry._frozen = True
        return registry

    def _add_page(self, page: Page, *, strict: bool) -> None:
        if page.path in self._order:
            msg = f"Page '{page.path}' appears twice in the corpus."
            raise ValueError(msg)
        self._order[page.path] = []
        self._element_ids[page.path] = frozenset(page.element_ids)
        reported: set[str] = set()
        for section in page.sections:
            if not section.anchor_id:
                continue
            try:
                self.register(page.path, section)
            except DuplicateAnchorError as exc:
                if strict:
                    raise
                if section.anchor_id in reported:
                    continue
                reported.add(section.anchor_id)
                logger.debug("duplicate anchor %s#%s", page.path, section.anchor_id)
                self.duplicates.append(exc)

    def register(self, page_path: str, section: Section) -> None:
        """Insert one anchored section.

        Raises
        ------
        DuplicateAnchorError
            When ``(page_path, section.anchor_id)`` is already registered.
        RuntimeError
            When the registry has been frozen by :meth:`build`.
        """
        if self._frozen:
            msg = "Anchor registry is read-only once built."
            raise RuntimeError(msg)
        if not section.anchor_id:
            msg = "Only sections with an anchor id can be registered."
            raise ValueError(msg)
        key = (page_path, section.anchor_id)
        if key in self._sections:
            raise DuplicateAnchorError(page_path, section.anchor_id, section.line)
        self._sections[key] = section
        self._order.setdefault(page_path, []).append(section.anchor_id)

    def lookup(self, page: str, anchor_id: str) -> Section:
        """Return the section declared by ``anchor_id`` on ``page``.

        Raises
        ------
        AnchorNotFoundError
            When the pair is unknown. Matching is exact.
        """
        try:
            return self._sections[(page, anchor_id)]
        except KeyError as exc:
            raise AnchorNotFoundError(page, anchor_id) from exc

    def get(self, page: str, anchor_id: str) -> Section | None:
        """Return the section for the pair, or ``None`` when unknown."""
        return self._sections.get((page, anchor_id))

    def has_page(self, page: str) -> bool:
        return page in self._order or page in self._opaque

    def is_opaque(self, page: str) -> bool:
        """Return whether ``page`` exists but its anchors are unknown."""
        return page in self._opaque

    def has_target(self, page: str, anchor_id: str) -> bool:
        """Return whether a fragment link to ``page#anchor_id`` would land."""
        if (page, anchor_id) in self._sections:
            return True
        return anchor_id in self._element_ids.get(page, frozenset())

    def anchors_for(self, page: str) -> list[Anchor]:
        """Return the anchors of ``page`` in declaration order."""
        return [Anchor(page, anchor_id) for anchor_id in self._order.get(page, [])]

    @property
    def pages(self) -> list[str]:
        """Return registered page paths, opaque ones included, sorted."""
        return sorted(set(self._order) | self._opaque)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, Anchor):
            return (key.page, key.id) in self._sections
        return key in self._sections

    def __iter__(self) -> cabc.Iterator[Anchor]:
        for page, anchor_ids in self._order.items():
            for anchor_id in anchor_ids:
                yield Anchor(page, anchor_id)

    def __len__(self) -> int:
        return len(self._sections)


__all__ = ["AnchorRegistry"]
