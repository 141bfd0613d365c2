"""Command-line entry point for OpenAPI document updates."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from openapi_update.config import UpdateSettings
from openapi_update.errors import UpdateError
from openapi_update.orchestrator import UpdateOutcome, UpdateResult, run_update
from openapi_update.resources import all_resource_paths
from openapi_update.testing import RecordingUtilities
from openapi_update.utilities import GitSystemUtilities

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    help="Copy OpenAPI documents from the source checkout, convert them to JSON and commit them.",
    no_args_is_help=True,
)


def _print_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))


def _resolve_settings(
    source: Optional[Path],
    target: Optional[Path],
    dry_run: bool,
    primary_branch: Optional[str],
    remote: Optional[str],
    remote_branch: Optional[str],
) -> UpdateSettings:
    settings = UpdateSettings.from_env()
    overrides: dict[str, Any] = {}
    if source is not None:
        overrides["source_root"] = source.expanduser()
    if target is not None:
        overrides["target_root"] = target.expanduser()
    if dry_run:
        overrides["dry_run"] = True
    if primary_branch:
        overrides["primary_branch"] = primary_branch
    if remote:
        overrides["remote"] = remote
    if remote_branch:
        overrides["remote_branch"] = remote_branch
    return replace(settings, **overrides)


def _render_calls(utils: RecordingUtilities) -> None:
    table = Table(title="Recorded calls (test mode)", show_header=True, header_style="bold", expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Call", style="cyan")
    table.add_column("Arguments")
    for index, (name, args) in enumerate(utils.calls, start=1):
        rendered = []
        for arg in args:
            text = str(arg)
            if len(text) > 60:
                text = f"{text[:57]}..."
            rendered.append(text.replace("\n", " "))
        table.add_row(str(index), name, ", ".join(rendered))
    console.print(table)


def _report_result(result: UpdateResult) -> None:
    if result.outcome is UpdateOutcome.ABORTED:
        console.print(f"[red]Error:[/red] {result.message}")
    elif result.outcome is UpdateOutcome.NO_CHANGES:
        # Already shown as a notice while the run was in progress.
        if result.message not in result.notices:
            console.print(f"[green]✓[/green] {result.message}")
    else:
        for commit_message in result.commits:
            console.print(f"[green]✓[/green] Committed: {commit_message}")
        console.print(f"[green]✓[/green] {result.message}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Synchronize OpenAPI specification and fixture documents."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command("run")
def run_update_command(
    source: Optional[Path] = typer.Option(None, "--source", help="Source checkout holding openapi/*.yaml"),
    target: Optional[Path] = typer.Option(None, "--target", help="Target checkout to update"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Commit locally but skip the final push"),
    primary_branch: Optional[str] = typer.Option(None, "--primary-branch", help="Branch the source must be on"),
    remote: Optional[str] = typer.Option(None, "--remote", help="Remote to pull from and push to"),
    remote_branch: Optional[str] = typer.Option(None, "--remote-branch", help="Remote branch to pull and push"),
    as_json: bool = typer.Option(False, "--json", help="Render the result as JSON"),
) -> None:
    """Copy, convert, commit and push the OpenAPI documents."""
    settings = _resolve_settings(source, target, dry_run, primary_branch, remote, remote_branch)
    logger.debug("Resolved settings: %s", settings.to_dict())

    live = GitSystemUtilities()
    utils: GitSystemUtilities | RecordingUtilities = live
    if settings.test_mode:
        utils = RecordingUtilities.rehearsal(settings, live)
        if not as_json:
            console.print("[yellow]Test mode:[/yellow] rehearsing against recorded utilities, no changes are made")

    report = None if as_json else (lambda message: console.print(f"[dim]{message}[/dim]"))
    try:
        result = run_update(settings, utils, report=report)
    except (UpdateError, OSError) as exc:
        if as_json:
            _print_json({"outcome": UpdateOutcome.ABORTED.value, "succeeded": False, "error": str(exc)})
        else:
            console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc

    if as_json:
        payload = result.to_dict()
        if isinstance(utils, RecordingUtilities):
            payload["calls"] = [[name, [str(arg) for arg in args]] for name, args in utils.calls]
        _print_json(payload)
    else:
        if isinstance(utils, RecordingUtilities):
            _render_calls(utils)
        _report_result(result)

    if not result.succeeded:
        raise typer.Exit(1)


@app.command("resources")
def resources_command(
    source: Optional[Path] = typer.Option(None, "--source", help="Source checkout holding openapi/*.yaml"),
    target: Optional[Path] = typer.Option(None, "--target", help="Target checkout to update"),
    as_json: bool = typer.Option(False, "--json", help="Render the resource list as JSON"),
) -> None:
    """List the synchronized documents and their derived paths."""
    settings = _resolve_settings(source, target, False, None, None, None)
    entries = all_resource_paths(settings.source_root, settings.target_root)

    if as_json:
        _print_json({"resources": [entry.to_dict() for entry in entries]})
        return

    table = Table(title="OpenAPI resources", show_header=True, header_style="bold", expand=False)
    table.add_column("Name", style="cyan")
    table.add_column("Source")
    table.add_column("Target")
    table.add_column("Converted")
    for entry in entries:
        table.add_row(entry.name, str(entry.source), str(entry.target), str(entry.converted))
    console.print(table)


__all__ = ["app", "console", "main"]
