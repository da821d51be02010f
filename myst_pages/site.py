"""Publish every page of a built MyST structure in table-of-contents order.

:class:`SitePublisher` walks the file-backed pages of a
:class:`~myst_pages.structure.PageStructureManager`, renders each one with
navigation and resolved cross-references, and hands the result to a
:class:`~myst_pages.publisher.Publisher`. A failing page is recorded in the
report and never stops the remaining pages.

Example
-------
>>> from myst_pages.site import PublishOptions, SitePublisher
>>> report = SitePublisher(manager, publisher, PublishOptions(dry_run=True)).run()  # doctest: +SKIP
>>> print(report.summary())  # doctest: +SKIP
Published 3 of 3 pages (0 failed)
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

from .frontmatter import (
    map_to_metadata,
    metadata_summary,
    split_frontmatter,
    validate_frontmatter,
)
from .markdown_parser import parse_document
from .publisher import PublishError
from .rendering import CrossReferenceExtension, HtmlContentRenderer, MarkdownContentRenderer
from .structure import NavigationRenderer

if typ.TYPE_CHECKING:
    from .publisher import Publisher
    from .structure import CrossReference, Page, PageStructureManager

logger = logging.getLogger(__name__)

OutputFormat = typ.Literal["html", "markdown"]


@dc.dataclass(slots=True)
class PublishOptions:
    """Switches controlling how pages are rendered and published."""

    output_format: OutputFormat = "html"
    add_navigation: bool = True
    add_site_navigation: bool = True
    dry_run: bool = False
    pygments_style: str = "default"


@dc.dataclass(slots=True)
class PageOutcome:
    """Result of processing a single page."""

    slug: str
    title: str
    success: bool
    error: str | None = None
    content_length: int = 0
    references: tuple[CrossReference, ...] = ()

    @property
    def unresolved(self) -> list[CrossReference]:
        return [ref for ref in self.references if not ref.resolved]


@dc.dataclass(slots=True)
class PublishReport:
    """Per-page outcomes of one publish run, keyed by slug."""

    outcomes: dict[str, PageOutcome] = dc.field(default_factory=dict)
    dry_run: bool = False

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes.values() if outcome.success)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.succeeded

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def summary(self) -> str:
        verb = "Rendered" if self.dry_run else "Published"
        return (
            f"{verb} {self.succeeded} of {len(self.outcomes)} pages "
            f"({self.failed} failed)"
        )


class SitePublisher:
    """Render and publish the pages of a built structure."""

    def __init__(
        self,
        manager: PageStructureManager,
        publisher: Publisher | None,
        options: PublishOptions | None = None,
    ) -> None:
        """Initialize the site publisher.

        Parameters
        ----------
        manager : PageStructureManager
            Manager whose structure has already been built.
        publisher : Publisher or None
            Target receiving rendered pages; may be ``None`` for dry runs.
        options : PublishOptions, optional
            Rendering and publishing switches; defaults apply when omitted.

        Raises
        ------
        ValueError
            If no publisher is supplied outside a dry run.
        """
        self.manager = manager
        self.publisher = publisher
        self.options = options or PublishOptions()
        if publisher is None and not self.options.dry_run:
            msg = "A publisher is required unless dry_run is enabled."
            raise ValueError(msg)
        self.navigation = NavigationRenderer(manager.structure)

    def run(self, base_dir: Path | None = None) -> PublishReport:
        """Process every file-backed page in order and return the report."""
        base = base_dir or Path.cwd()
        return self._each_page(
            lambda page, position, total: self.publish_page(
                page, base, position=position, total=total
            ),
            dry_run=self.options.dry_run,
        )

    def export(self, output_dir: Path, base_dir: Path | None = None) -> PublishReport:
        """Write every rendered page to ``output_dir`` instead of publishing.

        Each page lands in ``<output_dir>/<slug>.html`` (or ``.md`` in Markdown
        mode); the directory is created when missing.
        """
        base = base_dir or Path.cwd()
        output_dir.mkdir(parents=True, exist_ok=True)
        return self._each_page(
            lambda page, _position, _total: self.export_page(page, base, output_dir),
            dry_run=True,
        )

    def _each_page(
        self,
        handler: typ.Callable[[Page, int, int], PageOutcome],
        *,
        dry_run: bool,
    ) -> PublishReport:
        pages = [page for page in self.manager.pages_in_order() if not page.is_section]
        report = PublishReport(dry_run=dry_run)
        for position, page in enumerate(pages, start=1):
            try:
                report.outcomes[page.slug] = handler(page, position, len(pages))
            except (OSError, ValueError, PublishError) as exc:
                logger.error("Failed to process '%s': %s", page.slug, exc)
                report.outcomes[page.slug] = PageOutcome(
                    slug=page.slug, title=page.title, success=False, error=str(exc)
                )
            except Exception as exc:  # noqa: BLE001
                logger.exception("Unexpected error processing '%s'", page.slug)
                report.outcomes[page.slug] = PageOutcome(
                    slug=page.slug, title=page.title, success=False, error=str(exc)
                )
        logger.info(report.summary())
        return report

    def export_page(self, page: Page, base_dir: Path, output_dir: Path) -> PageOutcome:
        """Render ``page`` and write it below ``output_dir``."""
        text = Path(page.file_path).read_text(encoding="utf-8")
        frontmatter, body = split_frontmatter(text)
        references = self.manager.process_cross_references(
            parse_document(body), page.slug, base_dir
        )
        content = self.render_body(page, body)
        suffix = ".md" if self.options.output_format == "markdown" else ".html"
        target = output_dir / f"{page.slug}{suffix}"
        target.write_text(content, encoding="utf-8")
        logger.info("Wrote %s", target)
        return PageOutcome(
            slug=page.slug,
            title=str(frontmatter.get("title") or page.title),
            success=True,
            content_length=len(content),
            references=tuple(references),
        )

    def publish_page(
        self, page: Page, base_dir: Path, *, position: int, total: int
    ) -> PageOutcome:
        """Render ``page`` and hand it to the publisher.

        ``position`` and ``total`` count file-backed pages only and label the
        page when its frontmatter carries no description.

        Raises
        ------
        OSError
            If the page file cannot be read.
        ValueError
            If the frontmatter or body cannot be parsed.
        PublishError
            If the publisher rejects the page.
        """
        text = Path(page.file_path).read_text(encoding="utf-8")
        frontmatter, body = split_frontmatter(text)
        for warning in validate_frontmatter(frontmatter):
            logger.debug("%s: %s", page.slug, warning)
        document = parse_document(body)
        references = self.manager.process_cross_references(document, page.slug, base_dir)

        content = self.render_body(page, body)
        metadata = map_to_metadata(frontmatter)
        title = str(frontmatter.get("title") or page.title)
        metadata["Title"] = title
        description = metadata.get("Description") or (
            f"Page {position} of {total}"
        )

        if self.options.dry_run or self.publisher is None:
            logger.info("Dry run: would publish '%s' (%d chars)", title, len(content))
            summary = metadata_summary(frontmatter)
            if summary:
                logger.info("%s", summary)
        else:
            self.publisher.create_page(
                title, content, description=description, metadata=metadata
            )
        return PageOutcome(
            slug=page.slug,
            title=title,
            success=True,
            content_length=len(content),
            references=tuple(references),
        )

    def render_body(self, page: Page, body: str) -> str:
        """Return the rendered body with navigation prepended."""
        if self.options.output_format == "markdown":
            return MarkdownContentRenderer(self.manager.structure, page.slug).markdown(body)

        renderer = HtmlContentRenderer(
            pygments_style=self.options.pygments_style,
            link_extension=CrossReferenceExtension(self.manager.structure, page.slug),
        )
        parts: list[str] = []
        if self.options.add_site_navigation and page.parent is None:
            parts.append(self.navigation.render_site_navigation())
        if self.options.add_navigation:
            parts.append(self.navigation.render_page_navigation(page.slug))
        parts.append(renderer.markdown(body))
        return "\n".join(part for part in parts if part)


__all__ = [
    "OutputFormat",
    "PageOutcome",
    "PublishOptions",
    "PublishReport",
    "SitePublisher",
]
