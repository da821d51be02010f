"""Publish MyST Markdown projects with generated navigation.

The package turns a project's ``myst.yml`` table of contents into a page
hierarchy, resolves cross-references between pages, renders navigation and
page bodies, and hands the results to the ``doctor`` publishing command.

Exports
-------
- ``app``: Cyclopts application behind the ``myst-pages`` command.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from myst_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
