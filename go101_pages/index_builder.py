"""Build, render and audit the per-page summary index.

The summary list near the top of every page (``<ul class="index">``) mirrors
the page's anchors in declaration order. :func:`build_index` derives it from
parsed sections, :class:`IndexRenderer` renders it through the Jinja template
shipped in ``go101_pages/templates``, and :func:`diff_index` compares the
derived list with the one the page actually declares.

Example
-------
>>> from go101_pages.models import Page, Section
>>> from go101_pages.index_builder import build_index
>>> page = Page(
...     "panic.html",
...     "Panic and Recover",
...     sections=(Section(None, "Panic and Recover"), Section("use", "Use Cases")),
... )
>>> build_index(page)
(IndexEntry(anchor_id='use', display_text='Use Cases'),)
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .errors import IndexDrift
from .models import IndexEntry

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import Page

MISSING = "missing from index"
OUT_OF_ORDER = "out of order"


def build_index(page: Page) -> tuple[IndexEntry, ...]:
    """Return ``(anchor id, title)`` entries in declaration order.

    Repeated anchors are listed once, at their first declaration. The result
    depends only on ``page``, so repeated calls yield equal tuples.
    """
    seen: set[str] = set()
    entries: list[IndexEntry] = []
    for section in page.sections:
        anchor_id = section.anchor_id
        if not anchor_id or anchor_id in seen:
            continue
        seen.add(anchor_id)
        entries.append(IndexEntry(anchor_id=anchor_id, display_text=section.title))
    return tuple(entries)


def diff_index(page: Page) -> list[IndexDrift]:
    """Compare the page's declared index with the one built from its anchors.

    Entries that point at no anchor are not reported here: they are ordinary
    broken same-page links and surface as such.
    """
    if page.declared_index is None:
        return []
    built_ids = [entry.anchor_id for entry in build_index(page)]
    declared_ids = list(dict.fromkeys(e.anchor_id for e in page.declared_index))
    declared_set = set(declared_ids)
    built_set = set(built_ids)

    drifts = [
        IndexDrift(page.path, anchor_id, MISSING)
        for anchor_id in built_ids
        if anchor_id not in declared_set
    ]
    shared_declared = [a for a in declared_ids if a in built_set]
    shared_built = [a for a in built_ids if a in declared_set]
    for declared, built in zip(shared_declared, shared_built, strict=True):
        if declared != built:
            drifts.append(IndexDrift(page.path, declared, OUT_OF_ORDER))
            break
    return drifts


class IndexRenderer:
    """Render index entries as the ``<ul class="index">`` block."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the renderer.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing ``index.jinja``. Defaults to the package's
            ``templates`` directory when ``None``.
        """
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("index.jinja")

    def render(self, entries: cabc.Sequence[IndexEntry]) -> str:
        return self.template.render(entries=entries)


def render_index(entries: cabc.Sequence[IndexEntry]) -> str:
    """Render ``entries`` with the packaged template."""
    return IndexRenderer().render(entries)


__all__ = [
    "IndexRenderer",
    "build_index",
    "diff_index",
    "render_index",
]
