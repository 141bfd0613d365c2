"""Update orchestrator: copy, convert, commit and push OpenAPI documents.

Runs a fixed sequence against a :class:`SystemUtilities` implementation:

1. Preconditions (source exists, source on primary branch, target clean)
2. Pull the target from its remote
3. Copy each resource and rewrite it as JSON
4. Stop early if the target is clean again
5. Commit fixtures, then specification, skipping empty groups
6. Push unless running dry

Precondition failures are returned as an aborted :class:`UpdateResult`;
only the CLI turns that into a process exit. Failing external commands
raise :class:`~openapi_update.errors.CommandFailedError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from openapi_update.config import UpdateSettings
from openapi_update.constants import (
    FIXTURES_COMMIT_MESSAGE,
    FIXTURES_GLOB,
    RESOURCE_NAMES,
    SPEC_COMMIT_MESSAGE,
    SPEC_GLOB,
)
from openapi_update.convert import yaml_to_json
from openapi_update.resources import ResourcePaths, all_resource_paths
from openapi_update.utilities import SystemUtilities

logger = logging.getLogger(__name__)

__all__ = [
    "UpdateOutcome",
    "PreconditionIssue",
    "UpdateResult",
    "CommitGroup",
    "COMMIT_GROUPS",
    "PRECONDITIONS",
    "check_preconditions",
    "run_update",
]

NO_CHANGES_MESSAGE = "No changes to commit"

Reporter = Callable[[str], None]


class UpdateOutcome(str, Enum):
    UPDATED = "updated"
    NO_CHANGES = "no_changes"
    ABORTED = "aborted"


@dataclass(frozen=True)
class PreconditionIssue:
    """The first violated precondition of a run."""

    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


@dataclass
class UpdateResult:
    """Outcome of one orchestrator run."""

    outcome: UpdateOutcome
    message: str
    issue: PreconditionIssue | None = None
    commits: list[str] = field(default_factory=list)
    pushed: bool = False
    notices: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.outcome is not UpdateOutcome.ABORTED

    def to_dict(self) -> dict[str, object]:
        return {
            "outcome": self.outcome.value,
            "succeeded": self.succeeded,
            "message": self.message,
            "issue": self.issue.to_dict() if self.issue else None,
            "commits": list(self.commits),
            "pushed": self.pushed,
            "notices": list(self.notices),
        }


@dataclass(frozen=True)
class CommitGroup:
    label: str
    pattern: str
    message: str


COMMIT_GROUPS: tuple[CommitGroup, ...] = (
    CommitGroup("fixtures", FIXTURES_GLOB, FIXTURES_COMMIT_MESSAGE),
    CommitGroup("specification", SPEC_GLOB, SPEC_COMMIT_MESSAGE),
)


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------


def _source_exists(settings: UpdateSettings, utils: SystemUtilities) -> PreconditionIssue | None:
    if utils.exists(settings.source_root):
        return None
    return PreconditionIssue(
        code="SOURCE_MISSING",
        message=f"Source directory does not exist: {settings.source_root}",
    )


def _source_on_primary_branch(settings: UpdateSettings, utils: SystemUtilities) -> PreconditionIssue | None:
    branch = utils.current_branch(settings.source_root)
    if branch == settings.primary_branch:
        return None
    return PreconditionIssue(
        code="SOURCE_NOT_ON_PRIMARY_BRANCH",
        message=(
            f"Source directory must be on the {settings.primary_branch} branch "
            f"(found '{branch}'): {settings.source_root}"
        ),
    )


def _target_clean(settings: UpdateSettings, utils: SystemUtilities) -> PreconditionIssue | None:
    if utils.is_clean(settings.target_root):
        return None
    return PreconditionIssue(
        code="TARGET_DIRTY",
        message=f"Target directory has uncommitted changes: {settings.target_root}",
    )


Precondition = Callable[[UpdateSettings, SystemUtilities], PreconditionIssue | None]

PRECONDITIONS: tuple[Precondition, ...] = (
    _source_exists,
    _source_on_primary_branch,
    _target_clean,
)


def check_preconditions(settings: UpdateSettings, utils: SystemUtilities) -> PreconditionIssue | None:
    """Evaluate preconditions in order and return the first violation."""
    for check in PRECONDITIONS:
        issue = check(settings, utils)
        if issue is not None:
            return issue
    return None


# ---------------------------------------------------------------------------
# Main sequence
# ---------------------------------------------------------------------------


def _sync_resource(paths: ResourcePaths, utils: SystemUtilities) -> None:
    utils.copy(paths.source, paths.target)
    content = utils.read_text(paths.target)
    utils.write_text(paths.converted, yaml_to_json(content, document=str(paths.target)))
    logger.debug("Synced %s -> %s", paths.source, paths.converted)


def _commit_group(
    group: CommitGroup,
    settings: UpdateSettings,
    utils: SystemUtilities,
    notify: Reporter,
) -> bool:
    matches = utils.glob(settings.target_root, group.pattern)
    utils.stage(settings.target_root, matches)
    if not utils.has_staged(settings.target_root):
        notify(f"No {group.label} changes staged; nothing to commit")
        return False
    utils.commit(settings.target_root, group.message)
    return True


def run_update(
    settings: UpdateSettings,
    utils: SystemUtilities,
    *,
    names: tuple[str, ...] = RESOURCE_NAMES,
    report: Reporter | None = None,
) -> UpdateResult:
    """Run the full update sequence.

    Args:
        settings: Immutable run configuration
        utils: System utilities implementation (live or recording)
        names: Resource names to synchronize, in order
        report: Optional callback receiving user-facing notices

    Returns:
        UpdateResult describing how the run ended
    """
    notices: list[str] = []

    def notify(message: str) -> None:
        logger.info(message)
        notices.append(message)
        if report is not None:
            report(message)

    issue = check_preconditions(settings, utils)
    if issue is not None:
        logger.error("Precondition failed [%s]: %s", issue.code, issue.message)
        return UpdateResult(
            outcome=UpdateOutcome.ABORTED,
            message=issue.message,
            issue=issue,
            notices=notices,
        )

    utils.pull(settings.target_root, settings.remote, settings.remote_branch)

    for paths in all_resource_paths(settings.source_root, settings.target_root, names):
        _sync_resource(paths, utils)

    if utils.is_clean(settings.target_root):
        notify(NO_CHANGES_MESSAGE)
        return UpdateResult(
            outcome=UpdateOutcome.NO_CHANGES,
            message=NO_CHANGES_MESSAGE,
            notices=notices,
        )

    commits: list[str] = []
    for group in COMMIT_GROUPS:
        if _commit_group(group, settings, utils, notify):
            commits.append(group.message)

    pushed = False
    if settings.dry_run:
        notify(f"Dry run: skipping push to {settings.remote}/{settings.remote_branch}")
    else:
        utils.push(settings.target_root, settings.remote, settings.remote_branch)
        pushed = True

    if commits:
        message = f"Committed {len(commits)} change set(s)"
    else:
        message = "Working tree changed but nothing was committed"
    if pushed:
        message = f"{message} and pushed to {settings.remote}/{settings.remote_branch}"
    logger.info(message)

    return UpdateResult(
        outcome=UpdateOutcome.UPDATED,
        message=message,
        commits=commits,
        pushed=pushed,
        notices=notices,
    )
