"""Recording double for :class:`~openapi_update.utilities.SystemUtilities`.

``RecordingUtilities`` keeps files in memory and appends every call to
``calls`` as ``(name, args)`` so tests can assert on the exact sequence.
It also backs the CLI's test mode, where the run is rehearsed against the
real source documents without touching either git checkout.
"""

from __future__ import annotations

import fnmatch
from collections import deque
from pathlib import Path
from typing import Iterable, Sequence

from openapi_update.config import UpdateSettings
from openapi_update.constants import RESOURCE_NAMES
from openapi_update.resources import all_resource_paths
from openapi_update.utilities import SystemUtilities

__all__ = ["Call", "RecordingUtilities"]

Call = tuple[str, tuple[object, ...]]


class RecordingUtilities:
    """In-memory utilities with scripted answers.

    Args:
        files: Initial file contents keyed by path
        existing: Extra paths (typically directories) that ``exists`` reports
        branch: Value returned by ``current_branch``
        clean: Answers for successive ``is_clean`` calls; the last one repeats
        staged: Answers for successive ``has_staged`` calls; the last one repeats
    """

    def __init__(
        self,
        *,
        files: dict[Path, str] | None = None,
        existing: Iterable[Path] = (),
        branch: str = "master",
        clean: Sequence[bool] = (True, False),
        staged: Sequence[bool] = (True,),
    ) -> None:
        self.files: dict[Path, str] = dict(files or {})
        self.existing: set[Path] = set(existing)
        self.branch = branch
        self._clean = deque(clean)
        self._staged = deque(staged)
        self.calls: list[Call] = []

    @staticmethod
    def _next(answers: deque[bool]) -> bool:
        if len(answers) > 1:
            return answers.popleft()
        return answers[0]

    def _record(self, name: str, *args: object) -> None:
        self.calls.append((name, args))

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def calls_to(self, name: str) -> list[tuple[object, ...]]:
        return [args for call_name, args in self.calls if call_name == name]

    # -- SystemUtilities ----------------------------------------------------

    def exists(self, path: Path) -> bool:
        self._record("exists", path)
        return path in self.existing or path in self.files

    def is_clean(self, repo_root: Path) -> bool:
        self._record("is_clean", repo_root)
        return self._next(self._clean)

    def current_branch(self, repo_root: Path) -> str:
        self._record("current_branch", repo_root)
        return self.branch

    def copy(self, source: Path, destination: Path) -> None:
        self._record("copy", source, destination)
        try:
            self.files[destination] = self.files[source]
        except KeyError:
            raise FileNotFoundError(source) from None

    def read_text(self, path: Path) -> str:
        self._record("read_text", path)
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write_text(self, path: Path, content: str) -> None:
        self._record("write_text", path, content)
        self.files[path] = content

    def glob(self, root: Path, pattern: str) -> list[Path]:
        self._record("glob", root, pattern)
        return sorted(
            path
            for path in self.files
            if path.is_relative_to(root) and fnmatch.fnmatch(path.relative_to(root).as_posix(), pattern)
        )

    def stage(self, repo_root: Path, paths: Sequence[Path]) -> None:
        self._record("stage", repo_root, tuple(paths))

    def has_staged(self, repo_root: Path) -> bool:
        self._record("has_staged", repo_root)
        return self._next(self._staged)

    def commit(self, repo_root: Path, message: str) -> None:
        self._record("commit", repo_root, message)

    def pull(self, repo_root: Path, remote: str, branch: str) -> None:
        self._record("pull", repo_root, remote, branch)

    def push(self, repo_root: Path, remote: str, branch: str) -> None:
        self._record("push", repo_root, remote, branch)

    # -- Rehearsal ------------------------------------------------------------

    @classmethod
    def rehearsal(
        cls,
        settings: UpdateSettings,
        live: SystemUtilities,
        names: tuple[str, ...] = RESOURCE_NAMES,
    ) -> "RecordingUtilities":
        """Seed a double from the real source documents.

        Source files are read through ``live``; nothing is written and git is
        never invoked. The double reports the primary branch, a clean target
        before the run and a dirty one after it so every step is exercised.
        """
        files: dict[Path, str] = {}
        for paths in all_resource_paths(settings.source_root, settings.target_root, names):
            if live.exists(paths.source):
                files[paths.source] = live.read_text(paths.source)
        existing = [settings.source_root] if live.exists(settings.source_root) else []
        return cls(
            files=files,
            existing=existing,
            branch=settings.primary_branch,
            clean=(True, False),
            staged=(True,),
        )
