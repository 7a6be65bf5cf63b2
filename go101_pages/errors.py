"""Error taxonomy for corpus validation.

Two kinds of objects live here. Exceptions (:class:`DuplicateAnchorError`,
:class:`MalformedMarkup`, :class:`AnchorNotFoundError`, :class:`ConfigError`)
are raised where an operation cannot proceed. Defect records
(:class:`BrokenPageLink`, :class:`BrokenAnchorLink`, :class:`IndexDrift`)
are accumulated into a :class:`~go101_pages.report.ValidationReport`.
Duplicate anchors and malformed pages are both: they are raised by the
operation that detects them and then collected by the caller so one bad page
never stops the batch.

Every defect exposes ``page``, ``line`` and ``describe()``; the latter returns
the line printed by the ``check`` command.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from .models import CrossLink


class Go101PagesError(ValueError):
    """Base class for errors raised by go101_pages."""


class ConfigError(Go101PagesError):
    """Raised when the checker configuration is invalid or incomplete."""


class DuplicateAnchorError(Go101PagesError):
    """Raised when the same anchor id is declared twice on one page."""

    def __init__(self, page: str, anchor_id: str, line: int | None = None) -> None:
        self.page = page
        self.anchor_id = anchor_id
        self.line = line
        super().__init__(self.describe())

    def describe(self) -> str:
        """Return the report line for this defect."""
        return f'{self.page}: duplicate anchor "{self.anchor_id}"'


class MalformedMarkup(Go101PagesError):
    """Raised when a page cannot be parsed into sections at all."""

    def __init__(self, page: str, reason: str, line: int | None = None) -> None:
        self.page = page
        self.reason = reason
        self.line = line
        super().__init__(self.describe())

    def describe(self) -> str:
        """Return the report line for this defect."""
        where = f"{self.page}:{self.line}" if self.line is not None else self.page
        return f"{where}: malformed markup: {self.reason}"


class AnchorNotFoundError(KeyError):
    """Raised by registry lookups for an unknown ``(page, anchor id)`` pair."""

    def __init__(self, page: str, anchor_id: str) -> None:
        self.page = page
        self.anchor_id = anchor_id
        super().__init__(f"{page}#{anchor_id}")


@dc.dataclass(frozen=True, slots=True)
class BrokenPageLink:
    """A cross-link whose target page is not part of the corpus."""

    link: CrossLink

    @property
    def page(self) -> str:
        return self.link.source_page

    @property
    def line(self) -> int | None:
        return self.link.line

    def describe(self) -> str:
        """Return the report line for this defect."""
        return f"{self.page}:{self.link.locator}: broken link to {self.link.href}"


@dc.dataclass(frozen=True, slots=True)
class BrokenAnchorLink:
    """A cross-link to a known page whose fragment is not declared there."""

    link: CrossLink

    @property
    def page(self) -> str:
        return self.link.source_page

    @property
    def line(self) -> int | None:
        return self.link.line

    def describe(self) -> str:
        """Return the report line for this defect."""
        return f"{self.page}:{self.link.locator}: broken link to {self.link.href}"


@dc.dataclass(frozen=True, slots=True)
class IndexDrift:
    """A disagreement between a page's declared index and its anchors.

    ``problem`` is ``"missing from index"`` for an anchor the index omits or
    ``"out of order"`` for the first entry listed out of declaration order.
    """

    page: str
    anchor_id: str
    problem: str
    line: int | None = None

    def describe(self) -> str:
        """Return the report line for this defect."""
        return f'{self.page}: index entry "{self.anchor_id}" {self.problem}'


class Defect(typ.Protocol):
    """Structural type shared by every reportable defect."""

    @property
    def page(self) -> str: ...

    @property
    def line(self) -> int | None: ...

    def describe(self) -> str: ...


def defect_kind(defect: Defect) -> str:
    """Return the class name used to tag a defect in JSON output."""
    return type(defect).__name__


def defect_sort_key(defect: Defect) -> tuple[str, int, str]:
    """Order defects by page, then line, then message."""
    line = defect.line if defect.line is not None else 0
    return (defect.page, line, defect.describe())


__all__ = [
    "AnchorNotFoundError",
    "BrokenAnchorLink",
    "BrokenPageLink",
    "ConfigError",
    "Defect",
    "DuplicateAnchorError",
    "Go101PagesError",
    "IndexDrift",
    "MalformedMarkup",
    "defect_kind",
    "defect_sort_key",
]
