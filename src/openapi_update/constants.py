"""Fixed layout constants for OpenAPI document synchronization."""

from __future__ import annotations

OPENAPI_DIR = "openapi"
SOURCE_EXTENSION = ".yaml"
CONVERTED_EXTENSION = ".json"

# Order matters: documents are copied and converted in this order.
RESOURCE_NAMES: tuple[str, ...] = (
    "fixtures2",
    "fixtures3",
    "spec2",
    "spec3",
    "spec3.sdk",
)

FIXTURES_GLOB = f"{OPENAPI_DIR}/fixtures*"
SPEC_GLOB = f"{OPENAPI_DIR}/spec*"

FIXTURES_COMMIT_MESSAGE = "Update fixture data"
SPEC_COMMIT_MESSAGE = "Update OpenAPI specification"

DEFAULT_PRIMARY_BRANCH = "master"
DEFAULT_REMOTE = "origin"
DEFAULT_REMOTE_BRANCH = "master"

__all__ = [
    "OPENAPI_DIR",
    "SOURCE_EXTENSION",
    "CONVERTED_EXTENSION",
    "RESOURCE_NAMES",
    "FIXTURES_GLOB",
    "SPEC_GLOB",
    "FIXTURES_COMMIT_MESSAGE",
    "SPEC_COMMIT_MESSAGE",
    "DEFAULT_PRIMARY_BRANCH",
    "DEFAULT_REMOTE",
    "DEFAULT_REMOTE_BRANCH",
]
