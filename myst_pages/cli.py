"""Cyclopts CLI entrypoint for inspecting and publishing MyST projects.

The ``myst-pages`` console script reads a project's ``myst.yml`` table of
contents, builds the page hierarchy, and publishes every page through the
``doctor`` command with breadcrumbs, previous/next links, and resolved
cross-references. ``structure`` and ``refs`` inspect a project and ``render`` writes the
rendered pages to a directory without publishing anything; ``config`` stores the publish target once so later runs
only need the project path.

Examples
--------
Print the page tree of the project in the current directory:

>>> from myst_pages.cli import app
>>> app.run(["structure"])  # doctest: +SKIP

Render everything without contacting the target:

>>> app.run(["publish", "--config", "docs/myst.yml", "--dry-run"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from ._constants import DEFAULT_PROJECT_CONFIG
from .config import (
    DEFAULT_SETTINGS_PATH,
    PublishSettings,
    SettingsError,
    TocConfigError,
    load_settings,
    resolve_settings,
    save_settings,
)
from .frontmatter import split_frontmatter
from .markdown_parser import parse_document
from .publisher import DoctorPublisher, PublishError
from .site import OutputFormat, PublishOptions, SitePublisher
from .structure import PageStructureManager

if typ.TYPE_CHECKING:
    from .structure import Page

DEFAULT_CONFIG = Path(DEFAULT_PROJECT_CONFIG)

app = App(
    name="myst-pages",
    help="Publish MyST Markdown projects with navigation and cross-references.",
)

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to the project myst.yml", env_var="MYST_PAGES_PROJECT")
]
BaseDirOption = typ.Annotated[
    Path | None,
    Parameter(help="Directory TOC paths are relative to (defaults to the config folder)"),
]
SettingsOption = typ.Annotated[
    Path, Parameter(help="Where publish settings are stored (TOML)")
]
VerboseOption = typ.Annotated[bool, Parameter(help="Log debug output")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build(manager: PageStructureManager, config: Path, base_dir: Path | None) -> Path:
    """Build the structure and return the base directory used."""
    base = base_dir or config.resolve().parent
    manager.build_structure(config, base)
    return base


def _tree_line(page: Page) -> str:
    marker = " [section]" if page.is_section else ""
    return f"{'  ' * page.level}- {page.title} ({page.slug}){marker}"


@app.command(help="Print the page hierarchy built from the table of contents.")
def structure(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    base_dir: BaseDirOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print every page indented by depth, in table-of-contents order.

    Parameters
    ----------
    config : Path, optional
        Project configuration file holding ``project.toc``.
    base_dir : Path or None, optional
        Directory that file and pattern entries are resolved against.
    verbose : bool, optional
        Enable debug logging.
    """
    _configure_logging(verbose)
    manager = PageStructureManager()
    _build(manager, config, base_dir)
    if manager.structure.title:
        print(manager.structure.title)
    for page in manager.pages_in_order():
        print(_tree_line(page))
    print(f"{len(manager.structure)} pages")


@app.command(help="Resolve cross-references in every page and report the results.")
def refs(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    base_dir: BaseDirOption = None,
    unresolved_only: typ.Annotated[
        bool, Parameter(help="Only list references that did not resolve")
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """Parse each page, resolve its references, and print them.

    Exits with status ``1`` when any reference is unresolved so the command
    can gate CI runs.
    """
    _configure_logging(verbose)
    manager = PageStructureManager()
    base = _build(manager, config, base_dir)
    unresolved = 0
    for page in manager.pages_in_order():
        if page.is_section:
            continue
        try:
            _front, body = split_frontmatter(
                Path(page.file_path).read_text(encoding="utf-8")
            )
            document = parse_document(body)
        except (OSError, ValueError) as exc:
            print(f"{page.slug}: skipped ({exc})")
            continue
        for reference in manager.process_cross_references(document, page.slug, base):
            if not reference.resolved:
                unresolved += 1
            elif unresolved_only:
                continue
            target = reference.url if reference.resolved else "unresolved"
            print(f"{page.slug}: {reference.token} -> {target} [{reference.kind}]")
    print(f"{unresolved} unresolved references")
    if unresolved:
        sys.exit(1)


@app.command(help="Render every page and publish it to the configured site.")
def publish(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    base_dir: BaseDirOption = None,
    site_url: typ.Annotated[
        str | None, Parameter(help="Target site URL", env_var="MYST_PAGES_SITE_URL")
    ] = None,
    list_id: typ.Annotated[str | None, Parameter(help="Target list id")] = None,
    folder_path: typ.Annotated[str | None, Parameter(help="Target folder")] = None,
    doctor_path: typ.Annotated[
        str | None, Parameter(help="Publisher executable to invoke")
    ] = None,
    output_format: typ.Annotated[
        OutputFormat, Parameter(name="--format", help="Body format to publish")
    ] = "html",
    navigation: typ.Annotated[
        bool, Parameter(help="Prepend breadcrumbs and prev/next links")
    ] = True,
    site_navigation: typ.Annotated[
        bool, Parameter(help="Prepend the site menu to root pages")
    ] = True,
    dry_run: typ.Annotated[
        bool, Parameter(help="Render pages without publishing them")
    ] = False,
    settings_path: SettingsOption = DEFAULT_SETTINGS_PATH,
    verbose: VerboseOption = False,
) -> None:
    """Publish the whole project in table-of-contents order.

    Parameters
    ----------
    config : Path, optional
        Project configuration file holding ``project.toc``.
    base_dir : Path or None, optional
        Directory that file and pattern entries are resolved against.
    site_url, list_id, folder_path, doctor_path : str or None, optional
        Override the stored publish settings for this run.
    output_format : {"html", "markdown"}, optional
        Format of the published page body.
    navigation : bool, optional
        Prepend per-page navigation.
    site_navigation : bool, optional
        Prepend the site menu to root pages.
    dry_run : bool, optional
        Render without contacting the target.
    settings_path : Path, optional
        Location of the stored settings file.
    verbose : bool, optional
        Enable debug logging.

    Raises
    ------
    SettingsError
        If no site URL is available outside a dry run.
    """
    _configure_logging(verbose)
    manager = PageStructureManager()
    base = _build(manager, config, base_dir)

    publisher = None
    if not dry_run:
        settings = resolve_settings(
            path=settings_path,
            site_url=site_url,
            list_id=list_id,
            folder_path=folder_path,
            doctor_path=doctor_path,
        )
        publisher = DoctorPublisher(
            settings, suffix=".md" if output_format == "markdown" else ".html"
        )
        print(f"using {publisher.check_available() or settings.doctor_path}")

    options = PublishOptions(
        output_format=output_format,
        add_navigation=navigation,
        add_site_navigation=site_navigation,
        dry_run=dry_run,
    )
    report = SitePublisher(manager, publisher, options).run(base)
    for slug, outcome in report.outcomes.items():
        status = "ok" if outcome.success else f"failed: {outcome.error}"
        print(f"{slug}: {status}")
    print(report.summary())
    if not report.ok:
        sys.exit(1)


@app.command(help="Render every page into a directory without publishing.")
def render(
    *,
    output: typ.Annotated[Path, Parameter(name=["--output", "-o"], help="Output directory")],
    config: ConfigOption = DEFAULT_CONFIG,
    base_dir: BaseDirOption = None,
    output_format: typ.Annotated[
        OutputFormat, Parameter(name="--format", help="Body format to write")
    ] = "html",
    navigation: typ.Annotated[
        bool, Parameter(help="Prepend breadcrumbs and prev/next links")
    ] = True,
    site_navigation: typ.Annotated[
        bool, Parameter(help="Prepend the site menu to root pages")
    ] = True,
    verbose: VerboseOption = False,
) -> None:
    """Write each page to ``<output>/<slug>.html`` or ``<output>/<slug>.md``.

    Exits with status ``1`` when any page fails to render.
    """
    _configure_logging(verbose)
    manager = PageStructureManager()
    base = _build(manager, config, base_dir)
    options = PublishOptions(
        output_format=output_format,
        add_navigation=navigation,
        add_site_navigation=site_navigation,
        dry_run=True,
    )
    report = SitePublisher(manager, None, options).export(output, base)
    for slug, outcome in report.outcomes.items():
        status = "ok" if outcome.success else f"failed: {outcome.error}"
        print(f"{slug}: {status}")
    print(report.summary())
    if not report.ok:
        sys.exit(1)


@app.command(help="Show or store the publish target settings.")
def config(
    *,
    site_url: str | None = None,
    list_id: str | None = None,
    folder_path: str | None = None,
    auth_type: str | None = None,
    doctor_path: str | None = None,
    settings_path: SettingsOption = DEFAULT_SETTINGS_PATH,
) -> None:
    """Merge the given values into the stored settings and print the result.

    Without any value the stored settings are printed unchanged.
    """
    stored = load_settings(settings_path)
    updates = {
        "site_url": site_url,
        "list_id": list_id,
        "folder_path": folder_path,
        "auth_type": auth_type,
        "doctor_path": doctor_path,
    }
    changes = {key: value for key, value in updates.items() if value is not None}
    if changes:
        merged = PublishSettings(**{**stored.to_mapping(), **changes})
        save_settings(merged, path=settings_path)
        print(f"saved {settings_path}")
        stored = merged
    for key, value in stored.to_mapping().items():
        print(f"{key} = {value}")


@app.command(name="list", help="List pages already present on the target site.")
def list_pages(
    *,
    site_url: typ.Annotated[
        str | None, Parameter(help="Target site URL", env_var="MYST_PAGES_SITE_URL")
    ] = None,
    settings_path: SettingsOption = DEFAULT_SETTINGS_PATH,
    verbose: VerboseOption = False,
) -> None:
    """Print the id, title, and URL of each remote page."""
    _configure_logging(verbose)
    settings = resolve_settings(path=settings_path, site_url=site_url)
    for page in DoctorPublisher(settings).list_pages():
        print("\t".join(part for part in (page.id, page.title, page.url) if part))


def main() -> None:
    """Invoke the Cyclopts application that powers the ``myst-pages`` command.

    Configuration and publishing errors are reported on stderr with exit
    status ``1`` instead of a traceback.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    try:
        app()
    except (FileNotFoundError, TocConfigError, SettingsError, PublishError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
