r"""Parse corpus HTML into immutable :class:`~go101_pages.models.Page` records.

Pages follow a simple convention: an ``<h1>`` title, an optional index block
(``<ul class="index">`` of ``<a href="#id">`` entries) and body sections
opened by ``<a class="anchor" id="...">`` followed by a heading. HTML comments
are non-content, so anchors and links inside commented-out drafts are
ignored.

Example
-------
>>> from go101_pages.html_parser import parse_page
>>> page = parse_page(
...     "tips.html",
...     '<h1>Go Tips</h1><a class="anchor" id="nil"></a><h3>Nil</h3><p>x</p>',
... )
>>> [section.anchor_id for section in page.sections]
[None, 'nil']
>>> page.sections[1].title
'Nil'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from html.parser import HTMLParser
from urllib.parse import unquote

from bs4 import BeautifulSoup, NavigableString, Tag

from ._constants import (
    ANCHOR_CLASS,
    EXTERNAL_SCHEMES,
    INDEX_CLASS,
    SECTION_HEADINGS,
    STRUCTURAL_TAGS,
)
from .errors import MalformedMarkup
from .models import CrossLink, IndexEntry, Page, Section
from .resolver import resolve_href

if typ.TYPE_CHECKING:
    import collections.abc as cabc

WHITESPACE_PATTERN = re.compile(r"\s+")


def parse_page(
    path: str,
    markup: str,
    *,
    external_schemes: cabc.Sequence[str] = EXTERNAL_SCHEMES,
) -> Page:
    """Parse one HTML document into a :class:`Page`.

    Parameters
    ----------
    path : str
        Corpus-relative POSIX path of the document; used as the page id and
        as the base for relative links.
    markup : str
        Decoded HTML text.
    external_schemes : Sequence[str], optional
        URL schemes treated as external links.

    Returns
    -------
    Page
        Sections in declaration order, non-anchor element ids, outgoing links
        and the declared index block (``None`` when absent).

    Raises
    ------
    MalformedMarkup
        When structural tags are unbalanced or the page has no title.
    """
    _check_balance(path, markup)
    soup = BeautifulSoup(markup, "html.parser")
    title_tag = soup.find("h1") or soup.find("title")
    if not isinstance(title_tag, Tag):
        msg = "no <h1> or <title> element"
        raise MalformedMarkup(path, msg)
    title = _text(title_tag)
    index_block = _find_index_block(soup)
    return Page(
        path=path,
        title=title,
        sections=_collect_sections(soup, title, title_tag, index_block),
        element_ids=_collect_element_ids(soup),
        links=_collect_links(path, soup, external_schemes),
        declared_index=(
            _read_index(index_block) if index_block is not None else None
        ),
    )


def _text(tag: Tag) -> str:
    """Return the HTML-stripped, whitespace-normalised text of ``tag``."""
    return WHITESPACE_PATTERN.sub(" ", tag.get_text()).strip()


def _is_anchor(tag: Tag) -> bool:
    return (
        tag.name == "a"
        and ANCHOR_CLASS in (tag.get("class") or [])
        and bool(tag.get("id"))
    )


def _find_index_block(soup: BeautifulSoup) -> Tag | None:
    """Locate the page's summary list.

    ``<ul class="index">`` wins; older pages wrap the list in a
    ``<div id="...">`` whose links are all same-page fragments. Such a div
    only counts when it precedes the first anchor, so body blocks that
    happen to link within the page are left alone.
    """
    block = soup.find("ul", class_=INDEX_CLASS)
    if isinstance(block, Tag):
        return block
    for node in soup.descendants:
        if not isinstance(node, Tag):
            continue
        if _is_anchor(node):
            break
        if node.name != "div" or not node.get("id"):
            continue
        links = node.find_all("a", href=True)
        if links and all(link["href"].startswith("#") for link in links):
            return node
    return None


def _read_index(block: Tag) -> tuple[IndexEntry, ...]:
    entries: list[IndexEntry] = []
    for link in block.find_all("a", href=True):
        href = link["href"]
        if not href.startswith("#") or len(href) == 1:
            continue
        entries.append(
            IndexEntry(anchor_id=unquote(href[1:]), display_text=_text(link))
        )
    return tuple(entries)


@dc.dataclass(slots=True)
class _SectionDraft:
    """Mutable accumulator for the section currently being read."""

    anchor_id: str | None
    title: str | None
    line: int | None
    heading: Tag | None = None
    chunks: list[str] = dc.field(default_factory=list)

    def finish(self) -> Section:
        body = WHITESPACE_PATTERN.sub(" ", "".join(self.chunks)).strip()
        return Section(
            anchor_id=self.anchor_id,
            title=self.title or self.anchor_id or "",
            body_text=body,
            line=self.line,
        )


def _within(node: NavigableString, container: Tag | None) -> bool:
    if container is None:
        return False
    return any(parent is container for parent in node.parents)


def _collect_sections(
    soup: BeautifulSoup,
    title: str,
    title_tag: Tag,
    index_block: Tag | None,
) -> tuple[Section, ...]:
    """Walk the document in order, splitting it at every anchor."""
    sections: list[Section] = []
    draft = _SectionDraft(anchor_id=None, title=title, line=None)
    for node in soup.descendants:
        if isinstance(node, Tag):
            if _is_anchor(node):
                sections.append(draft.finish())
                draft = _SectionDraft(
                    anchor_id=node["id"], title=None, line=node.sourceline
                )
            elif (
                draft.anchor_id is not None
                and draft.heading is None
                and node.name in SECTION_HEADINGS
            ):
                draft.heading = node
                draft.title = _text(node)
            continue
        # Comments, doctypes and script bodies are NavigableString subclasses.
        if type(node) is not NavigableString:
            continue
        if _within(node, draft.heading) or _within(node, title_tag):
            continue
        if _within(node, index_block):
            continue
        draft.chunks.append(str(node))
    sections.append(draft.finish())
    return tuple(sections)


def _collect_element_ids(soup: BeautifulSoup) -> tuple[str, ...]:
    ids: list[str] = []
    for tag in soup.find_all(id=True):
        if _is_anchor(tag):
            continue
        ids.append(tag["id"])
    return tuple(ids)


def _collect_links(
    path: str, soup: BeautifulSoup, external_schemes: cabc.Sequence[str]
) -> tuple[CrossLink, ...]:
    links: list[CrossLink] = []
    for tag in soup.find_all("a", href=True):
        href = tag["href"].strip()
        if not href:
            continue
        links.append(
            resolve_href(
                path, href, line=tag.sourceline, external_schemes=external_schemes
            )
        )
    return tuple(links)


class _BalanceChecker(HTMLParser):
    """Track structural tags and remember the first imbalance."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.stack: list[tuple[str, int]] = []
        self.problem: tuple[str, int] | None = None

    def handle_starttag(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> None:
        if tag in STRUCTURAL_TAGS:
            self.stack.append((tag, self.getpos()[0]))

    def handle_startendtag(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> None:
        """Self-closing tags never affect the balance."""

    def handle_endtag(self, tag: str) -> None:
        if tag not in STRUCTURAL_TAGS or self.problem is not None:
            return
        line = self.getpos()[0]
        if not self.stack:
            self.problem = (f"unexpected </{tag}>", line)
            return
        open_tag, open_line = self.stack[-1]
        if open_tag == tag:
            self.stack.pop()
        elif any(name == tag for name, _ in self.stack):
            self.problem = (f"unclosed <{open_tag}>", open_line)
        else:
            self.problem = (f"unexpected </{tag}>", line)


def _check_balance(path: str, markup: str) -> None:
    """Raise :class:`MalformedMarkup` when structural tags do not balance."""
    checker = _BalanceChecker()
    checker.feed(markup)
    checker.close()
    problem = checker.problem
    if problem is None and checker.stack:
        tag, line = checker.stack[-1]
        problem = (f"unclosed <{tag}>", line)
    if problem is not None:
        reason, line = problem
        raise MalformedMarkup(path, reason, line)


__all__ = ["parse_page"]
