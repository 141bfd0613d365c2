"""Tests for the openapi-update command line."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from openapi_update.cli import app
from openapi_update.config import DRY_RUN_ENV_VAR, SOURCE_ENV_VAR, TARGET_ENV_VAR, TEST_MODE_ENV_VAR
from openapi_update.errors import CommandFailedError
from openapi_update.orchestrator import PreconditionIssue, UpdateOutcome, UpdateResult
from tests.utils import write_source_documents

runner = CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (DRY_RUN_ENV_VAR, TEST_MODE_ENV_VAR, SOURCE_ENV_VAR, TARGET_ENV_VAR):
        monkeypatch.delenv(name, raising=False)


def _updated() -> UpdateResult:
    return UpdateResult(
        outcome=UpdateOutcome.UPDATED,
        message="Committed 2 change set(s) and pushed to origin/master",
        commits=["Update fixture data", "Update OpenAPI specification"],
        pushed=True,
    )


def test_run_success_exits_zero(tmp_path: Path) -> None:
    with patch("openapi_update.cli.run_update", return_value=_updated()) as mock_run:
        result = runner.invoke(app, ["run", "--source", str(tmp_path / "src"), "--target", str(tmp_path / "dst")])

    assert result.exit_code == 0
    assert "Update fixture data" in result.output
    settings = mock_run.call_args.args[0]
    assert settings.source_root == tmp_path / "src"
    assert settings.target_root == tmp_path / "dst"
    assert settings.dry_run is False


def test_run_dry_run_flag_reaches_settings(tmp_path: Path) -> None:
    with patch("openapi_update.cli.run_update", return_value=_updated()) as mock_run:
        result = runner.invoke(app, ["run", "--source", str(tmp_path), "--dry-run"])

    assert result.exit_code == 0
    assert mock_run.call_args.args[0].dry_run is True


def test_run_dry_run_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(DRY_RUN_ENV_VAR, "1")
    monkeypatch.setenv(SOURCE_ENV_VAR, str(tmp_path))

    with patch("openapi_update.cli.run_update", return_value=_updated()) as mock_run:
        result = runner.invoke(app, ["run"])

    assert result.exit_code == 0
    settings = mock_run.call_args.args[0]
    assert settings.dry_run is True
    assert settings.source_root == tmp_path


def test_run_branch_and_remote_overrides(tmp_path: Path) -> None:
    with patch("openapi_update.cli.run_update", return_value=_updated()) as mock_run:
        result = runner.invoke(
            app,
            [
                "run",
                "--source",
                str(tmp_path),
                "--primary-branch",
                "main",
                "--remote",
                "upstream",
                "--remote-branch",
                "main",
            ],
        )

    assert result.exit_code == 0
    settings = mock_run.call_args.args[0]
    assert (settings.primary_branch, settings.remote, settings.remote_branch) == ("main", "upstream", "main")


def test_run_no_changes_exits_zero(tmp_path: Path) -> None:
    no_changes = UpdateResult(outcome=UpdateOutcome.NO_CHANGES, message="No changes to commit")
    with patch("openapi_update.cli.run_update", return_value=no_changes):
        result = runner.invoke(app, ["run", "--source", str(tmp_path)])

    assert result.exit_code == 0
    assert "No changes to commit" in result.output


def test_run_no_changes_message_is_printed_once(tmp_path: Path) -> None:
    def fake_run_update(settings, utils, *, report=None):
        report("No changes to commit")
        return UpdateResult(
            outcome=UpdateOutcome.NO_CHANGES,
            message="No changes to commit",
            notices=["No changes to commit"],
        )

    with patch("openapi_update.cli.run_update", side_effect=fake_run_update):
        result = runner.invoke(app, ["run", "--source", str(tmp_path)])

    assert result.exit_code == 0
    assert result.output.count("No changes to commit") == 1


def test_run_precondition_failure_exits_one(tmp_path: Path) -> None:
    issue = PreconditionIssue(code="SOURCE_MISSING", message=f"Source directory does not exist: {tmp_path}")
    aborted = UpdateResult(outcome=UpdateOutcome.ABORTED, message=issue.message, issue=issue)
    with patch("openapi_update.cli.run_update", return_value=aborted):
        result = runner.invoke(app, ["run", "--source", str(tmp_path)])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "Source directory does not exist" in result.output


def test_run_precondition_failure_json(tmp_path: Path) -> None:
    issue = PreconditionIssue(code="TARGET_DIRTY", message="Target directory has uncommitted changes: /x")
    aborted = UpdateResult(outcome=UpdateOutcome.ABORTED, message=issue.message, issue=issue)
    with patch("openapi_update.cli.run_update", return_value=aborted):
        result = runner.invoke(app, ["run", "--source", str(tmp_path), "--json"])

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["outcome"] == "aborted"
    assert payload["issue"]["code"] == "TARGET_DIRTY"


def test_run_command_failure_exits_one(tmp_path: Path) -> None:
    error = CommandFailedError(["git", "push", "origin", "master"], 128, "fatal: unable to access remote")
    with patch("openapi_update.cli.run_update", side_effect=error):
        result = runner.invoke(app, ["run", "--source", str(tmp_path)])

    assert result.exit_code == 1
    assert "exit 128" in result.output
    assert "git push origin master" in result.output


def test_test_mode_rehearses_without_touching_target(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    source = tmp_path / "source"
    target = tmp_path / "target"
    write_source_documents(source)
    monkeypatch.setenv(TEST_MODE_ENV_VAR, "1")

    result = runner.invoke(app, ["run", "--source", str(source), "--target", str(target), "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["outcome"] == "updated"
    call_names = [name for name, _ in payload["calls"]]
    assert call_names[:4] == ["exists", "current_branch", "is_clean", "pull"]
    assert call_names[-1] == "push"
    assert not target.exists()


def test_test_mode_renders_call_table(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    source = tmp_path / "source"
    write_source_documents(source)
    monkeypatch.setenv(TEST_MODE_ENV_VAR, "yes")

    result = runner.invoke(app, ["run", "--source", str(source), "--target", str(tmp_path / "target")])

    assert result.exit_code == 0, result.output
    assert "Test mode" in result.output
    assert "Recorded calls" in result.output


def test_resources_json_lists_derived_paths(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["resources", "--source", str(tmp_path / "src"), "--target", str(tmp_path / "dst"), "--json"]
    )

    assert result.exit_code == 0
    entries = json.loads(result.output)["resources"]
    assert [entry["name"] for entry in entries] == ["fixtures2", "fixtures3", "spec2", "spec3", "spec3.sdk"]
    assert entries[4]["converted"] == str(tmp_path / "dst" / "openapi" / "spec3.sdk.json")


def test_resources_table() -> None:
    result = runner.invoke(app, ["resources", "--source", "/s", "--target", "/t"])

    assert result.exit_code == 0
    assert "OpenAPI resources" in result.output


def test_unconvertible_source_reports_error_and_exits_one(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = tmp_path / "source"
    write_source_documents(source)
    (source / "openapi" / "fixtures2.yaml").write_text("2024-01-01: released\n", encoding="utf-8")
    monkeypatch.setenv(TEST_MODE_ENV_VAR, "1")

    result = runner.invoke(app, ["run", "--source", str(source), "--target", str(tmp_path / "target")])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Error:" in result.output
    assert "Failed to convert" in result.output
