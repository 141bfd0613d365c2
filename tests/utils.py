"""Shared helpers for git-backed tests."""

from __future__ import annotations

import subprocess
from pathlib import Path

from openapi_update.constants import RESOURCE_NAMES


def run(args: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    return subprocess.run(args, cwd=str(cwd), check=True, capture_output=True, text=True)


def git(cwd: Path, *args: str) -> str:
    return run(["git", *args], cwd).stdout.strip()


def init_repo(path: Path, *, bare: bool = False) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    if bare:
        git(path, "init", "--bare")
    else:
        git(path, "init")
        configure_identity(path)
    git(path, "symbolic-ref", "HEAD", "refs/heads/master")
    return path


def configure_identity(path: Path) -> None:
    git(path, "config", "user.name", "OpenAPI Update")
    git(path, "config", "user.email", "openapi@example.com")
    git(path, "config", "commit.gpgsign", "false")


def sample_yaml(name: str, version: str = "1") -> str:
    return (
        "openapi: 3.0.0\n"
        "info:\n"
        f"  title: {name}\n"
        f"  version: '{version}'\n"
        "paths:\n"
        "  /v1/charges:\n"
        "    get:\n"
        "      responses:\n"
        "        200:\n"
        "          description: OK\n"
    )


def write_source_documents(root: Path, version: str = "1") -> None:
    openapi_dir = root / "openapi"
    openapi_dir.mkdir(parents=True, exist_ok=True)
    for name in RESOURCE_NAMES:
        (openapi_dir / f"{name}.yaml").write_text(sample_yaml(name, version), encoding="utf-8")
