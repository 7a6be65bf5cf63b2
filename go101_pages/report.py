"""Aggregated outcome of a validation run."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .errors import defect_kind, defect_sort_key

if typ.TYPE_CHECKING:
    from .errors import Defect
    from .models import CrossLink


@dc.dataclass(slots=True)
class ValidationReport:
    """Every defect found in one pass, plus the links that were not checked.

    Attributes
    ----------
    defects : list[Defect]
        Broken links, duplicate anchors, malformed pages and index drift.
    external_links : list[CrossLink]
        Links outside the corpus; recorded, never resolved.
    checked_links : int
        Number of internal links validated against the registry.
    ignored_links : int
        Number of links skipped by configured ignore patterns.
    pages : int
        Number of pages the report covers.
    """

    defects: list[Defect] = dc.field(default_factory=list)
    external_links: list[CrossLink] = dc.field(default_factory=list)
    checked_links: int = 0
    ignored_links: int = 0
    pages: int = 0

    @property
    def ok(self) -> bool:
        return not self.defects

    @property
    def exit_code(self) -> int:
        """Return ``0`` when the corpus is clean and ``1`` otherwise."""
        return 0 if self.ok else 1

    def of_kind(self, kind: type) -> list[Defect]:
        """Return the defects that are instances of ``kind``."""
        return [defect for defect in self.defects if isinstance(defect, kind)]

    def sorted_defects(self) -> list[Defect]:
        return sorted(self.defects, key=defect_sort_key)

    def lines(self) -> list[str]:
        """Return one human-readable line per defect, ordered by page and line."""
        return [defect.describe() for defect in self.sorted_defects()]

    def summary(self) -> str:
        return (
            f"{self.pages} pages, {self.checked_links} links checked, "
            f"{len(self.external_links)} external, {self.ignored_links} ignored, "
            f"{len(self.defects)} problems"
        )

    def merge(self, other: ValidationReport) -> ValidationReport:
        """Return a new report combining ``self`` and ``other``."""
        return ValidationReport(
            defects=[*self.defects, *other.defects],
            external_links=[*self.external_links, *other.external_links],
            checked_links=self.checked_links + other.checked_links,
            ignored_links=self.ignored_links + other.ignored_links,
            pages=max(self.pages, other.pages),
        )

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-serialisable view of the report."""
        return {
            "ok": self.ok,
            "pages": self.pages,
            "checked_links": self.checked_links,
            "ignored_links": self.ignored_links,
            "external_links": [link.href for link in self.external_links],
            "defects": [
                {
                    "kind": defect_kind(defect),
                    "page": defect.page,
                    "line": defect.line,
                    "message": defect.describe(),
                }
                for defect in self.sorted_defects()
            ],
        }


__all__ = ["ValidationReport"]
