"""Publish rendered pages through the external ``doctor`` command.

The publisher materializes each page body into a private temporary file,
invokes ``doctor publish`` on it with the target settings and metadata
flags, and removes the file afterwards. Anything that prevents the command
from completing surfaces as :class:`PublishError`.

Example
-------
>>> from myst_pages.config import PublishSettings
>>> from myst_pages.publisher import DoctorPublisher
>>> publisher = DoctorPublisher(PublishSettings(site_url="https://example"))
>>> publisher.create_page("Intro", "<p>Hello</p>")  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import shlex
import subprocess
import tempfile
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    from myst_pages.config import PublishSettings

logger = logging.getLogger(__name__)

_TEMP_FILE_MODE = 0o600


class PublishError(RuntimeError):
    """Raised when a page cannot be handed to the publishing target."""


@dc.dataclass(slots=True, frozen=True)
class RemotePage:
    """A page already present on the publishing target."""

    id: str
    title: str = ""
    url: str = ""
    modified: str = ""


class Publisher(typ.Protocol):
    """Anything able to create pages on a publishing target."""

    def create_page(
        self,
        title: str,
        content: str,
        *,
        description: str | None = None,
        metadata: typ.Mapping[str, str] | None = None,
    ) -> None: ...


class DoctorPublisher:
    """Drive the ``doctor`` executable with stored publish settings."""

    def __init__(self, settings: PublishSettings, *, suffix: str = ".html") -> None:
        """Initialize the publisher.

        Parameters
        ----------
        settings : PublishSettings
            Target site, list, folder, and executable to use. ``site_url``
            must be set.
        suffix : str, optional
            File suffix given to the materialized page body; ``.md`` when
            publishing Markdown output.

        Raises
        ------
        SettingsError
            If ``settings`` has no site URL.
        """
        self.settings = settings
        self.site_url = settings.require_site_url()
        self.suffix = suffix

    @property
    def command(self) -> list[str]:
        """Return the executable split into argv form."""
        return shlex.split(self.settings.doctor_path)

    def check_available(self) -> str:
        """Return the ``doctor --version`` output or raise when missing."""
        completed = self._run(["--version"])
        return completed.stdout.strip()

    def create_page(
        self,
        title: str,
        content: str,
        *,
        description: str | None = None,
        metadata: typ.Mapping[str, str] | None = None,
    ) -> None:
        """Publish ``content`` as a page called ``title``.

        Parameters
        ----------
        title : str
            Page title passed via ``--title``.
        content : str
            Rendered page body.
        description : str, optional
            Short description passed via ``--description``.
        metadata : Mapping[str, str], optional
            Extra fields; each non-empty entry becomes ``--<key> <value>``
            with the key lower-cased.

        Raises
        ------
        PublishError
            If the executable is missing or exits with a non-zero status.
        """
        path = _materialize_content(content, suffix=self.suffix)
        try:
            args = ["publish", str(path), *self._target_args(), "--title", title]
            if description:
                args += ["--description", description]
            for key, value in (metadata or {}).items():
                if value in (None, "") or key == "Title":
                    continue
                args += [f"--{str(key).lower()}", str(value)]
            completed = self._run(args)
        finally:
            path.unlink(missing_ok=True)
        if completed.stdout.strip():
            logger.debug("doctor: %s", completed.stdout.strip())
        if completed.stderr.strip():
            logger.warning("doctor: %s", completed.stderr.strip())
        logger.info("Published '%s'", title)

    def list_pages(self) -> list[RemotePage]:
        """Return the pages reported by ``doctor list`` for the target site.

        Each non-blank output line carries tab-separated ``id``, ``title``,
        ``url``, and ``modified`` columns; missing trailing columns are left
        empty.
        """
        completed = self._run(["list", "--site-url", self.site_url])
        pages: list[RemotePage] = []
        for line in completed.stdout.splitlines():
            if not line.strip():
                continue
            columns = [part.strip() for part in line.split("\t")][:4]
            pages.append(RemotePage(*columns))
        return pages

    def _target_args(self) -> list[str]:
        args = ["--site-url", self.site_url]
        if self.settings.list_id:
            args += ["--list-id", self.settings.list_id]
        if self.settings.folder_path:
            args += ["--folder-path", self.settings.folder_path]
        if self.settings.auth_type:
            args += ["--auth-type", self.settings.auth_type]
        return args

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        cmd = self.command + args
        logger.debug("Running %s", shlex.join(cmd))
        try:
            return subprocess.run(  # noqa: S603
                cmd,
                check=True,
                text=True,
                capture_output=True,
            )
        except FileNotFoundError as exc:
            msg = (
                f"'{self.settings.doctor_path}' is not installed or not on PATH. "
                "Install it with: npm install -g @estruyf/doctor"
            )
            raise PublishError(msg) from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or exc.stdout or "").strip()
            msg = f"{shlex.join(cmd)} exited with status {exc.returncode}"
            if detail:
                msg = f"{msg}: {detail}"
            raise PublishError(msg) from exc


def _materialize_content(content: str, *, suffix: str) -> Path:
    """Write ``content`` to a private temporary file and return its path."""
    fd, tmp_path = tempfile.mkstemp(prefix="myst-pages-", suffix=suffix, text=True)
    tmp = Path(tmp_path)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(content)
    os.chmod(tmp, _TEMP_FILE_MODE)
    return tmp


__all__ = [
    "DoctorPublisher",
    "PublishError",
    "Publisher",
    "RemotePage",
]
