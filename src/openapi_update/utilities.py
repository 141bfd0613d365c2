"""System utilities: every file-system and git effect of an update run.

The orchestrator only talks to a :class:`SystemUtilities` implementation, so
the live :class:`GitSystemUtilities` can be swapped for the recording double
in :mod:`openapi_update.testing`.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from openapi_update.errors import CommandFailedError

logger = logging.getLogger(__name__)

__all__ = [
    "SystemUtilities",
    "GitSystemUtilities",
    "run_command",
]


@runtime_checkable
class SystemUtilities(Protocol):
    """Individually swappable platform calls used by the orchestrator."""

    def exists(self, path: Path) -> bool: ...

    def is_clean(self, repo_root: Path) -> bool: ...

    def current_branch(self, repo_root: Path) -> str: ...

    def copy(self, source: Path, destination: Path) -> None: ...

    def read_text(self, path: Path) -> str: ...

    def write_text(self, path: Path, content: str) -> None: ...

    def glob(self, root: Path, pattern: str) -> list[Path]: ...

    def stage(self, repo_root: Path, paths: Sequence[Path]) -> None: ...

    def has_staged(self, repo_root: Path) -> bool: ...

    def commit(self, repo_root: Path, message: str) -> None: ...

    def pull(self, repo_root: Path, remote: str, branch: str) -> None: ...

    def push(self, repo_root: Path, remote: str, branch: str) -> None: ...


def run_command(
    args: Sequence[str],
    cwd: Path,
    *,
    allowed_returncodes: Sequence[int] = (0,),
    timeout: int | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command and raise :class:`CommandFailedError` on unexpected status."""
    command = list(args)
    logger.debug("Running %s in %s", " ".join(command), cwd)
    try:
        completed = subprocess.run(
            command,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise CommandFailedError(command, 127, f"{command[0]} executable not found on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise CommandFailedError(command, 124, f"command timed out after {timeout}s") from exc

    if completed.returncode not in allowed_returncodes:
        raise CommandFailedError(command, completed.returncode, completed.stderr or completed.stdout or "")
    return completed


def _relative_to(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


class GitSystemUtilities:
    """Live implementation backed by pathlib, shutil and the git CLI."""

    def __init__(self, git_executable: str = "git", timeout: int | None = None) -> None:
        self.git_executable = git_executable
        self.timeout = timeout

    def _git(
        self,
        repo_root: Path,
        *args: str,
        allowed_returncodes: Sequence[int] = (0,),
    ) -> subprocess.CompletedProcess[str]:
        return run_command(
            [self.git_executable, *args],
            repo_root,
            allowed_returncodes=allowed_returncodes,
            timeout=self.timeout,
        )

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_clean(self, repo_root: Path) -> bool:
        # Untracked files count as changes: a new .json file must be committed.
        result = self._git(repo_root, "status", "--porcelain")
        return not result.stdout.strip()

    def current_branch(self, repo_root: Path) -> str:
        result = self._git(repo_root, "rev-parse", "--abbrev-ref", "HEAD")
        return result.stdout.strip()

    def copy(self, source: Path, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def glob(self, root: Path, pattern: str) -> list[Path]:
        return sorted(root.glob(pattern))

    def stage(self, repo_root: Path, paths: Sequence[Path]) -> None:
        if not paths:
            logger.debug("Nothing to stage in %s", repo_root)
            return
        self._git(repo_root, "add", "--", *(_relative_to(path, repo_root) for path in paths))

    def has_staged(self, repo_root: Path) -> bool:
        # --quiet exits 1 when the index differs from HEAD.
        result = self._git(repo_root, "diff", "--cached", "--quiet", allowed_returncodes=(0, 1))
        return result.returncode == 1

    def commit(self, repo_root: Path, message: str) -> None:
        self._git(repo_root, "commit", "-m", message)

    def pull(self, repo_root: Path, remote: str, branch: str) -> None:
        self._git(repo_root, "pull", remote, branch)

    def push(self, repo_root: Path, remote: str, branch: str) -> None:
        self._git(repo_root, "push", remote, branch)
