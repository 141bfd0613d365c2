from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from tests.utils import configure_identity, git, init_repo, write_source_documents


@pytest.fixture()
def temp_repo(tmp_path: Path) -> Iterator[Path]:
    repo_dir = init_repo(tmp_path / "repo")
    yield repo_dir


@pytest.fixture()
def remote_repo(tmp_path: Path) -> Path:
    return init_repo(tmp_path / "remote.git", bare=True)


@pytest.fixture()
def source_repo(tmp_path: Path) -> Path:
    """Source checkout on master with all five documents committed."""
    repo_dir = init_repo(tmp_path / "source")
    write_source_documents(repo_dir)
    git(repo_dir, "add", ".")
    git(repo_dir, "commit", "-m", "Add OpenAPI documents")
    return repo_dir


@pytest.fixture()
def target_repo(tmp_path: Path, remote_repo: Path) -> Path:
    """Target clone with an initial commit already pushed to the remote."""
    repo_dir = tmp_path / "target"
    git(tmp_path, "clone", str(remote_repo), str(repo_dir))
    configure_identity(repo_dir)
    git(repo_dir, "symbolic-ref", "HEAD", "refs/heads/master")
    (repo_dir / "README.md").write_text("target\n", encoding="utf-8")
    git(repo_dir, "add", "README.md")
    git(repo_dir, "commit", "-m", "Initial commit")
    git(repo_dir, "push", "origin", "master")
    return repo_dir
