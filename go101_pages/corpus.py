"""Discover and parse every page of an HTML corpus.

Pages parse independently, so :func:`load_corpus` can fan the work out over a
thread pool. Results are gathered in discovery order and handed back as a
:class:`Corpus`; the anchor registry is built from it afterwards in a single
pass. A page that cannot be parsed is recorded as a failure and the batch
continues, while I/O errors reading a source file propagate immediately.

Example
-------
>>> from pathlib import Path
>>> from go101_pages.corpus import load_corpus
>>> corpus = load_corpus(Path("pages"))  # doctest: +SKIP
>>> sorted(corpus.page_paths)[:2]  # doctest: +SKIP
['101.html', 'article-reflection.html']
"""

from __future__ import annotations

import concurrent.futures as cf
import dataclasses as dc
import fnmatch
import functools
import logging
import typing as typ

from ._constants import DEFAULT_INCLUDE, EXTERNAL_SCHEMES
from .errors import MalformedMarkup
from .html_parser import parse_page

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .config import CheckConfig
    from .models import Page

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class Corpus:
    """Parsed pages plus the pages that failed to parse.

    Attributes
    ----------
    root : Path
        Directory the corpus was loaded from.
    pages : list[Page]
        Successfully parsed pages in discovery order.
    failures : list[MalformedMarkup]
        One entry per page that could not be parsed into sections.
    """

    root: Path
    pages: list[Page] = dc.field(default_factory=list)
    failures: list[MalformedMarkup] = dc.field(default_factory=list)

    @property
    def page_paths(self) -> set[str]:
        """Return every known page path, unparseable pages included."""
        return {page.path for page in self.pages} | {f.page for f in self.failures}

    def get_page(self, path: str) -> Page:
        """Return the parsed page at ``path``."""
        for page in self.pages:
            if page.path == path:
                return page
        known = ", ".join(sorted(page.path for page in self.pages))
        msg = f"Unknown page '{path}'. Known pages: {known}"
        raise KeyError(msg)


def discover_pages(
    root: Path,
    include: cabc.Sequence[str] = DEFAULT_INCLUDE,
    exclude: cabc.Sequence[str] = (),
) -> list[Path]:
    """Return files under ``root`` matching ``include`` but not ``exclude``.

    Results are sorted by their POSIX path relative to ``root`` so every run
    sees pages in the same order.
    """
    if not root.is_dir():
        msg = f"Corpus root '{root}' is not a directory."
        raise FileNotFoundError(msg)
    found: dict[str, Path] = {}
    for pattern in include:
        for candidate in root.glob(pattern):
            if not candidate.is_file():
                continue
            relative = candidate.relative_to(root).as_posix()
            if any(fnmatch.fnmatchcase(relative, skip) for skip in exclude):
                continue
            found[relative] = candidate
    return [found[key] for key in sorted(found)]


def _parse_file(
    root: Path, file_path: Path, external_schemes: cabc.Sequence[str]
) -> Page:
    """Read and parse one file, mapping decode failures to MalformedMarkup."""
    relative = file_path.relative_to(root).as_posix()
    try:
        markup = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        msg = f"not valid UTF-8 ({exc.reason})"
        raise MalformedMarkup(relative, msg) from exc
    return parse_page(relative, markup, external_schemes=external_schemes)


def load_corpus(
    root: Path,
    *,
    include: cabc.Sequence[str] = DEFAULT_INCLUDE,
    exclude: cabc.Sequence[str] = (),
    external_schemes: cabc.Sequence[str] = EXTERNAL_SCHEMES,
    jobs: int = 1,
) -> Corpus:
    """Parse every page under ``root``.

    Parameters
    ----------
    root : Path
        Directory holding the corpus.
    include, exclude : Sequence[str], optional
        Glob patterns selecting pages relative to ``root``.
    external_schemes : Sequence[str], optional
        URL schemes treated as external links.
    jobs : int, optional
        Parse with this many worker threads; ``1`` parses serially.

    Returns
    -------
    Corpus
        Parsed pages and isolated parse failures, both in discovery order.

    Raises
    ------
    FileNotFoundError
        If ``root`` is not a directory.
    OSError
        If a source file cannot be read.
    """
    files = discover_pages(root, include, exclude)
    logger.info("discovered %d pages under %s", len(files), root)
    corpus = Corpus(root=root)

    if jobs > 1 and len(files) > 1:
        with cf.ThreadPoolExecutor(max_workers=jobs) as pool:
            futures = [
                pool.submit(_parse_file, root, path, external_schemes)
                for path in files
            ]
            outcomes = [_outcome(future.result) for future in futures]
    else:
        outcomes = [
            _outcome(functools.partial(_parse_file, root, path, external_schemes))
            for path in files
        ]

    for outcome in outcomes:
        if isinstance(outcome, MalformedMarkup):
            logger.warning("skipping %s", outcome)
            corpus.failures.append(outcome)
        else:
            corpus.pages.append(outcome)
    return corpus


def _outcome(produce: cabc.Callable[[], Page]) -> Page | MalformedMarkup:
    """Return the parsed page, or the markup error that isolated it."""
    try:
        return produce()
    except MalformedMarkup as exc:
        return exc


def load_configured_corpus(config: CheckConfig) -> Corpus:
    """Load the corpus described by ``config``."""
    return load_corpus(
        config.root,
        include=config.include,
        exclude=config.exclude,
        external_schemes=config.external_schemes,
        jobs=config.jobs,
    )


__all__ = ["Corpus", "discover_pages", "load_configured_corpus", "load_corpus"]
