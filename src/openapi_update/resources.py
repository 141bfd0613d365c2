"""Path derivation for the synchronized OpenAPI documents."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from openapi_update.constants import (
    CONVERTED_EXTENSION,
    OPENAPI_DIR,
    RESOURCE_NAMES,
    SOURCE_EXTENSION,
)


@dataclass(frozen=True)
class ResourcePaths:
    """Where one named document comes from and where it lands."""

    name: str
    source: Path
    target: Path
    converted: Path

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "source": str(self.source),
            "target": str(self.target),
            "converted": str(self.converted),
        }


def resource_paths(name: str, source_root: Path, target_root: Path) -> ResourcePaths:
    """Derive source, target and converted paths for ``name``.

    Plain string concatenation is used for the file name so dotted names such
    as ``spec3.sdk`` keep their full stem.
    """
    return ResourcePaths(
        name=name,
        source=source_root / OPENAPI_DIR / f"{name}{SOURCE_EXTENSION}",
        target=target_root / OPENAPI_DIR / f"{name}{SOURCE_EXTENSION}",
        converted=target_root / OPENAPI_DIR / f"{name}{CONVERTED_EXTENSION}",
    )


def all_resource_paths(
    source_root: Path,
    target_root: Path,
    names: Iterable[str] = RESOURCE_NAMES,
) -> list[ResourcePaths]:
    return [resource_paths(name, source_root, target_root) for name in names]


__all__ = ["ResourcePaths", "resource_paths", "all_resource_paths"]
