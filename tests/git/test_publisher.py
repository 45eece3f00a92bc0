"""Tests for the git publisher."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from dataroom.git import Publisher

REV_PARSE = ["git", "rev-parse", "--is-inside-work-tree"]


def _git_runner(calls, *, status: str = "", inside: bool = True):
    def runner(args, cwd, env=None, capture_output=False):  # type: ignore[no-untyped-def]
        args = list(args)
        calls.append((args, Path(cwd), capture_output, env))
        if args == REV_PARSE:
            if not inside:
                raise subprocess.CalledProcessError(128, args, "", "fatal: not a git repository")
            return "true\n"
        if capture_output and args == ["git", "status", "--porcelain"]:
            return status
        return ""

    return runner


def test_publisher_stages_everything_and_commits(tmp_path: Path) -> None:
    calls = []
    runner = _git_runner(calls, status=" M content/projects/acme/metadata.json\n")

    result = Publisher(runner=runner).commit_all(tmp_path, message="sync: update acme data room")

    assert result is True
    assert [call[0] for call in calls] == [
        REV_PARSE,
        ["git", "add", "-A"],
        ["git", "status", "--porcelain"],
        ["git", "commit", "-m", "sync: update acme data room"],
    ]
    assert all(call[1] == tmp_path for call in calls)
    assert calls[3][3]["GIT_AUTHOR_NAME"]


def test_publisher_commits_from_subdirectory_of_work_tree(tmp_path: Path) -> None:
    workspace = tmp_path / "repo" / "docs-site"
    workspace.mkdir(parents=True)
    calls = []

    result = Publisher(runner=_git_runner(calls, status="?? x\n")).commit_all(
        workspace, message="sync"
    )

    assert not (workspace / ".git").exists()
    assert result is True
    assert calls[-1][0][:2] == ["git", "commit"]


def test_publisher_skips_commit_when_clean(tmp_path: Path) -> None:
    calls = []

    assert Publisher(runner=_git_runner(calls)).commit_all(tmp_path, message="sync") is False
    assert ["git", "status", "--porcelain"] in [call[0] for call in calls]
    assert not [call for call in calls if call[0][:2] == ["git", "commit"]]


def test_publisher_noop_outside_work_tree(tmp_path: Path) -> None:
    calls = []

    result = Publisher(runner=_git_runner(calls, inside=False)).commit_all(tmp_path, message="sync")

    assert result is False
    assert [call[0] for call in calls] == [REV_PARSE]


def test_publisher_propagates_commit_failures(tmp_path: Path) -> None:
    def runner(args, cwd, env=None, capture_output=False):  # type: ignore[no-untyped-def]
        args = list(args)
        if args == REV_PARSE:
            return "true\n"
        if args[:2] == ["git", "status"]:
            return " M a\n"
        if args[:2] == ["git", "commit"]:
            raise subprocess.CalledProcessError(1, args)
        return ""

    with pytest.raises(subprocess.CalledProcessError):
        Publisher(runner=runner).commit_all(tmp_path, message="sync")
