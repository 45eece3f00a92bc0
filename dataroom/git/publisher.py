"""Git publishing utilities."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Callable, Iterable


class Publisher:
    """Stages and commits regenerated data room content."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner

    def commit_all(self, repo_path: Path | str, *, message: str) -> bool:
        """Stage every pending change and commit it.

        Returns ``False`` without staging anything when ``repo_path`` is not
        inside a git work tree (any sub-directory of one qualifies) or there is
        nothing to commit. Failures of the add or commit steps propagate as
        :class:`subprocess.CalledProcessError`.
        """
        repo = Path(repo_path)
        if not self.is_work_tree(repo):
            return False

        self._run(["git", "add", "-A"], cwd=repo)

        status = self._run(["git", "status", "--porcelain"], cwd=repo, capture_output=True)
        if not status.strip():
            return False

        env = os.environ.copy()
        env.setdefault("GIT_AUTHOR_NAME", "dataroom")
        env.setdefault("GIT_AUTHOR_EMAIL", "dataroom@example.com")
        env.setdefault("GIT_COMMITTER_NAME", env["GIT_AUTHOR_NAME"])
        env.setdefault("GIT_COMMITTER_EMAIL", env["GIT_AUTHOR_EMAIL"])

        self._run(["git", "commit", "-m", message], cwd=repo, env=env)
        return True

    def is_work_tree(self, path: Path) -> bool:
        try:
            output = self._run(
                ["git", "rev-parse", "--is-inside-work-tree"],
                cwd=path,
                capture_output=True,
            )
        except subprocess.CalledProcessError:
            return False
        return output.strip() == "true"

    # ------------------------------------------------------------------
    # Helpers

    def _run(
        self,
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        return self._runner(args, cwd=cwd, env=env, capture_output=capture_output)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            env=env,
            check=True,
            text=True,
            capture_output=capture_output,
        )
        if capture_output:
            return completed.stdout
        return ""
