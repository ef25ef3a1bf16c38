from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import pytest

from metadelta.common.errors import NotFound, SourceStreamFailure
from metadelta.git.domain.value_objects import DiffRange
from metadelta.git.repositories import implementations
from metadelta.git.repositories.implementations import (
    IGNORE_WHITESPACE_PARAMS,
    GitChangeReportRepository,
)


class RecordingRun:
    def __init__(self, stdout: str = "", error: BaseException | None = None) -> None:
        self.stdout = stdout
        self.error = error
        self.calls: list[tuple[list[str], dict[str, Any]]] = []

    def __call__(self, command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append((command, kwargs))
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(command, 0, stdout=self.stdout, stderr="")


def _install(monkeypatch: pytest.MonkeyPatch, run: RecordingRun) -> RecordingRun:
    monkeypatch.setattr(implementations.subprocess, "run", run)
    return run


def test_list_changes_runs_name_status_diff(monkeypatch: pytest.MonkeyPatch) -> None:
    run = _install(
        monkeypatch,
        RecordingRun(stdout="M\tforce-app/a.cls\nA\tforce-app/b.cls\n"),
    )
    diff_range = DiffRange(
        repo_path=Path("/repo"), from_revision="abc", to_revision="def", source="force-app"
    )

    lines = list(GitChangeReportRepository().list_changes(diff_range))

    assert lines == ["M\tforce-app/a.cls", "A\tforce-app/b.cls"]
    command, kwargs = run.calls[0]
    assert command[:2] == ["git", "-c"]
    assert "--name-status" in command
    assert "--no-renames" in command
    assert command[-4:] == ["abc", "def", "--", "force-app"]
    assert kwargs["cwd"] == Path("/repo")
    assert not set(IGNORE_WHITESPACE_PARAMS).intersection(command)


def test_list_changes_adds_whitespace_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    run = _install(monkeypatch, RecordingRun())
    diff_range = DiffRange(
        repo_path=Path("/repo"), from_revision="abc", to_revision="def", ignore_whitespace=True
    )

    assert list(GitChangeReportRepository().list_changes(diff_range)) == []
    command, _ = run.calls[0]
    assert set(IGNORE_WHITESPACE_PARAMS).issubset(command)
    assert command[-1] == "."


def test_list_changes_failure_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    error = subprocess.CalledProcessError(128, ["git"], stderr="fatal: bad revision 'abc'")
    _install(monkeypatch, RecordingRun(error=error))
    diff_range = DiffRange(repo_path=Path("/repo"), from_revision="abc", to_revision="def")

    with pytest.raises(SourceStreamFailure, match="bad revision"):
        list(GitChangeReportRepository().list_changes(diff_range))


def test_list_changes_missing_git_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, RecordingRun(error=FileNotFoundError("git")))
    diff_range = DiffRange(repo_path=Path("/repo"), from_revision="abc", to_revision="def")

    with pytest.raises(SourceStreamFailure):
        list(GitChangeReportRepository().list_changes(diff_range))


def test_read_file_at_revision(monkeypatch: pytest.MonkeyPatch) -> None:
    run = _install(monkeypatch, RecordingRun(stdout="<CustomField/>"))

    content = GitChangeReportRepository().read_file_at_revision(Path("/repo"), "a/b.xml", "def")

    assert content == "<CustomField/>"
    assert run.calls[0][0] == ["git", "--no-pager", "show", "def:a/b.xml"]


def test_read_file_at_revision_not_found(monkeypatch: pytest.MonkeyPatch) -> None:
    error = subprocess.CalledProcessError(
        128, ["git"], stderr="fatal: path 'a/b.xml' does not exist"
    )
    _install(monkeypatch, RecordingRun(error=error))

    with pytest.raises(NotFound) as excinfo:
        GitChangeReportRepository().read_file_at_revision(Path("/repo"), "a/b.xml", "def")

    assert excinfo.value.path == "a/b.xml"
    assert excinfo.value.revision == "def"


def test_list_tracked_files(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, RecordingRun(stdout="a.cls\n\nb.cls\n"))

    files = GitChangeReportRepository().list_tracked_files(Path("/repo"), "HEAD")

    assert files == ("a.cls", "b.cls")
