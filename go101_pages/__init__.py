"""Anchor registry, link checker and index builder for the Go 101 HTML pages.

This package exposes the CLI entry points used by ``go101-pages`` to validate
cross-links between documentation pages, detect duplicate anchors, and render
each page's summary index.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from go101_pages import main
>>> main()  # doctest: +SKIP
>>> from go101_pages import app
>>> app(["check", "--root", "pages"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
