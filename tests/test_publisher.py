"""Tests for ``DoctorPublisher`` with ``subprocess.run`` patched out."""

from __future__ import annotations

import os
import subprocess
import typing as typ
from pathlib import Path
from types import SimpleNamespace

import pytest

from myst_pages import publisher as publisher_module
from myst_pages.config import PublishSettings, SettingsError
from myst_pages.publisher import DoctorPublisher, PublishError, RemotePage


def _settings(**overrides: str) -> PublishSettings:
    values = {
        "site_url": "https://contoso.example/sites/docs",
        "list_id": "list-1",
        "folder_path": "guides",
    }
    values.update(overrides)
    return PublishSettings(**values)


def test_publisher_requires_site_url() -> None:
    with pytest.raises(SettingsError):
        DoctorPublisher(PublishSettings())


def test_create_page_passes_target_and_metadata(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    calls: list[list[str]] = []
    seen: dict[str, typ.Any] = {}

    def fake_run(cmd: list[str], check: bool, text: bool, capture_output: bool):
        calls.append(cmd)
        path = Path(cmd[2])
        seen["content"] = path.read_text(encoding="utf-8")
        seen["mode"] = os.stat(path).st_mode & 0o777
        seen["path"] = path
        return SimpleNamespace(returncode=0, stdout="done", stderr="")

    monkeypatch.setattr(publisher_module.subprocess, "run", fake_run)
    DoctorPublisher(_settings()).create_page(
        "Intro",
        "<p>Hello</p>",
        description="Page 1 of 2",
        metadata={"Title": "Intro", "Author": "Ada", "Tags": ""},
    )

    (cmd,) = calls
    assert cmd[:2] == ["doctor", "publish"]
    assert cmd[cmd.index("--site-url") + 1] == "https://contoso.example/sites/docs"
    assert cmd[cmd.index("--list-id") + 1] == "list-1"
    assert cmd[cmd.index("--folder-path") + 1] == "guides"
    assert cmd[cmd.index("--title") + 1] == "Intro"
    assert cmd[cmd.index("--description") + 1] == "Page 1 of 2"
    assert cmd[cmd.index("--author") + 1] == "Ada"
    assert "--tags" not in cmd
    assert seen["content"] == "<p>Hello</p>"
    assert seen["mode"] == 0o600
    assert not seen["path"].exists()


def test_failed_command_raises_and_cleans_up(monkeypatch: pytest.MonkeyPatch) -> None:
    paths: list[Path] = []

    def fake_run(cmd: list[str], check: bool, text: bool, capture_output: bool):
        paths.append(Path(cmd[2]))
        raise subprocess.CalledProcessError(
            returncode=2, cmd=cmd, output="", stderr="auth failed"
        )

    monkeypatch.setattr(publisher_module.subprocess, "run", fake_run)
    with pytest.raises(PublishError, match="auth failed"):
        DoctorPublisher(_settings()).create_page("Intro", "body")
    assert paths and not paths[0].exists()


def test_missing_executable_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd: list[str], check: bool, text: bool, capture_output: bool):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(publisher_module.subprocess, "run", fake_run)
    with pytest.raises(PublishError, match="not installed"):
        DoctorPublisher(_settings(doctor_path="npx doctor")).check_available()


def test_doctor_path_may_carry_arguments(mocker) -> None:
    run = mocker.patch.object(
        publisher_module.subprocess,
        "run",
        return_value=SimpleNamespace(returncode=0, stdout="1.2.3\n", stderr=""),
    )
    version = DoctorPublisher(_settings(doctor_path="npx doctor")).check_available()

    assert version == "1.2.3"
    assert run.call_args.args[0] == ["npx", "doctor", "--version"]


def test_list_pages_parses_tab_separated_output(mocker) -> None:
    mocker.patch.object(
        publisher_module.subprocess,
        "run",
        return_value=SimpleNamespace(
            returncode=0,
            stdout="1\tIntro\thttps://x/intro\t2024-01-01\n\n2\tSetup\n",
            stderr="",
        ),
    )
    pages = DoctorPublisher(_settings()).list_pages()
    assert pages == [
        RemotePage(id="1", title="Intro", url="https://x/intro", modified="2024-01-01"),
        RemotePage(id="2", title="Setup"),
    ]
