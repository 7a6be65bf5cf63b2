"""Cyclopts CLI entrypoint for checking and indexing the Go 101 HTML pages.

The ``go101-pages`` console script defined here loads every page of the
corpus, builds the anchor registry, and reports broken cross-links, duplicate
anchors, malformed pages and stale page indexes. Typical usage is running
``go101-pages check`` locally or as a CI lint step; the exit status is ``0``
when the corpus is clean and ``1`` otherwise. ``go101-pages index`` prints the
summary list a page should carry, and ``go101-pages anchors`` lists the
registry.

Examples
--------
Check the corpus in ``pages/``:

>>> from go101_pages.cli import main
>>> main()  # doctest: +SKIP

Render the index for one page into a file:

>>> from go101_pages.cli import app
>>> app(
...     ["index", "article/panic-and-recover.html", "--output", "index.html"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import json
import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import (
    DEFAULT_CONFIG_NAME,
    CheckConfig,
    load_check_config,
    validate_jobs,
)
from .corpus import load_configured_corpus
from .index_builder import build_index, render_index
from .registry import AnchorRegistry
from .resolver import LinkResolver

app = App(name="go101-pages", config=cyclopts.config.Env("GO101_", command=False))  # type: ignore[unknown-argument]

logger = logging.getLogger(__name__)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _resolve_config(root: Path | None, config: Path | None) -> CheckConfig:
    """Combine an optional config file with an optional root override.

    An explicit ``config`` wins; otherwise ``go101-pages.yaml`` is picked up
    from the root (or the working directory) when present.
    """
    base_dir = root or Path.cwd()
    candidate = config or base_dir / DEFAULT_CONFIG_NAME
    if config is not None or candidate.exists():
        resolved = load_check_config(candidate)
        if root is not None:
            resolved = dc.replace(resolved, root=root)
        return resolved
    return CheckConfig.default(base_dir)


@app.command(help="Validate anchors, cross-links and page indexes.")
def check(
    *,
    root: typ.Annotated[
        Path | None, Parameter(help="Directory holding the HTML pages")
    ] = None,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to the checker config (YAML)")
    ] = None,
    jobs: typ.Annotated[
        int | None, Parameter(help="Worker threads used to parse pages")
    ] = None,
    check_index: typ.Annotated[
        bool | None, Parameter(help="Compare declared page indexes with anchors")
    ] = None,
    output_format: typ.Annotated[
        typ.Literal["text", "json"], Parameter(name="--format", help="Report format")
    ] = "text",
    verbose: bool = False,
) -> int:
    """Check the whole corpus and print one line per defect.

    Parameters
    ----------
    root : Path or None, optional
        Corpus directory; overrides the ``root`` configured in the file.
    config : Path or None, optional
        Path to a ``go101-pages.yaml`` file. When ``None``, the file is
        looked up in ``root`` (or the working directory).
    jobs : int or None, optional
        Override the configured parser thread count. Validated like the
        ``jobs`` key of the config file.
    check_index : bool or None, optional
        Override whether declared indexes are compared with anchors.
    output_format : {"text", "json"}, optional
        Print report lines and a summary, or a JSON document.
    verbose : bool, optional
        Enable debug logging on stderr.

    Returns
    -------
    int
        ``0`` when no defects were found, ``1`` otherwise.
    """
    _configure_logging(verbose=verbose)
    settings = _resolve_config(root, config)
    overrides: dict[str, typ.Any] = {}
    if jobs is not None:
        overrides["jobs"] = validate_jobs(jobs)
    if check_index is not None:
        overrides["check_index"] = check_index
    if overrides:
        settings = dc.replace(settings, **overrides)

    corpus = load_configured_corpus(settings)
    report = LinkResolver(settings).check(corpus)
    if output_format == "json":
        print(json.dumps(report.to_dict(), indent=2))
    else:
        for line in report.lines():
            print(line)
        print(report.summary())
    return report.exit_code


@app.command(help="Print the summary index a page should carry.")
def index(
    page: typ.Annotated[str, Parameter(help="Page path relative to the root")],
    *,
    root: typ.Annotated[
        Path | None, Parameter(help="Directory holding the HTML pages")
    ] = None,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to the checker config (YAML)")
    ] = None,
    output: typ.Annotated[
        Path | None, Parameter(help="Write the index HTML here instead of stdout")
    ] = None,
) -> int:
    """Render the ``<ul class="index">`` block for ``page``.

    Returns
    -------
    int
        ``0`` on success, ``2`` when the page is unknown or unparseable.
    """
    _configure_logging(verbose=False)
    settings = _resolve_config(root, config)
    corpus = load_configured_corpus(settings)
    for failure in corpus.failures:
        if failure.page == page:
            print(failure.describe(), file=sys.stderr)
            return 2
    try:
        parsed = corpus.get_page(page)
    except KeyError as exc:
        print(exc.args[0], file=sys.stderr)
        return 2

    html = render_index(build_index(parsed))
    if output is None:
        print(html)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(html + "\n", encoding="utf-8")
        print(f"wrote {_format_path(output)}")
    return 0


@app.command(help="List registered anchors with their section titles.")
def anchors(
    page: typ.Annotated[
        str | None, Parameter(help="Only list anchors of this page")
    ] = None,
    *,
    root: typ.Annotated[
        Path | None, Parameter(help="Directory holding the HTML pages")
    ] = None,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to the checker config (YAML)")
    ] = None,
) -> int:
    """Print ``page#id<TAB>title`` for every anchor in the registry."""
    _configure_logging(verbose=False)
    settings = _resolve_config(root, config)
    corpus = load_configured_corpus(settings)
    for failure in corpus.failures:
        if failure.page == page:
            print(failure.describe(), file=sys.stderr)
            return 2
    registry = AnchorRegistry.build(corpus.pages)
    if page is not None and not registry.has_page(page):
        print(f"Unknown page '{page}'.", file=sys.stderr)
        return 2
    selected = registry.anchors_for(page) if page is not None else list(registry)
    for anchor in selected:
        section = registry.lookup(anchor.page, anchor.id)
        print(f"{anchor}\t{section.title}")
    return 0


def main() -> None:
    """Invoke the Cyclopts application that powers the ``go101-pages`` command.

    The selected subcommand's return value becomes the process exit status.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    sys.exit(app())


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
