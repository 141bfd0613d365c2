"""Run configuration for OpenAPI updates, resolved once at startup."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from openapi_update.constants import (
    DEFAULT_PRIMARY_BRANCH,
    DEFAULT_REMOTE,
    DEFAULT_REMOTE_BRANCH,
)

DRY_RUN_ENV_VAR = "OPENAPI_UPDATE_DRY_RUN"
TEST_MODE_ENV_VAR = "OPENAPI_UPDATE_TEST_MODE"
SOURCE_ENV_VAR = "OPENAPI_UPDATE_SOURCE"
TARGET_ENV_VAR = "OPENAPI_UPDATE_TARGET"

DEFAULT_SOURCE_DIRNAME = "api-server"

_TRUTHY_VALUES = {"1", "true", "yes", "on"}


def _is_truthy(raw_value: str | None) -> bool:
    return (raw_value or "").strip().lower() in _TRUTHY_VALUES


def _path_from(raw_value: str | None, default: Path) -> Path:
    value = (raw_value or "").strip()
    if not value:
        return default
    return Path(value).expanduser()


@dataclass(frozen=True, slots=True)
class UpdateSettings:
    """Immutable settings for a single update run."""

    source_root: Path
    target_root: Path
    primary_branch: str = DEFAULT_PRIMARY_BRANCH
    remote: str = DEFAULT_REMOTE
    remote_branch: str = DEFAULT_REMOTE_BRANCH
    dry_run: bool = False
    test_mode: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "UpdateSettings":
        """Build settings from the process environment (or a given mapping)."""
        env = os.environ if environ is None else environ
        return cls(
            source_root=_path_from(env.get(SOURCE_ENV_VAR), Path.home() / DEFAULT_SOURCE_DIRNAME),
            target_root=_path_from(env.get(TARGET_ENV_VAR), Path.cwd()),
            dry_run=_is_truthy(env.get(DRY_RUN_ENV_VAR)),
            test_mode=_is_truthy(env.get(TEST_MODE_ENV_VAR)),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "source_root": str(self.source_root),
            "target_root": str(self.target_root),
            "primary_branch": self.primary_branch,
            "remote": self.remote,
            "remote_branch": self.remote_branch,
            "dry_run": self.dry_run,
            "test_mode": self.test_mode,
        }


__all__ = [
    "DRY_RUN_ENV_VAR",
    "TEST_MODE_ENV_VAR",
    "SOURCE_ENV_VAR",
    "TARGET_ENV_VAR",
    "UpdateSettings",
]
