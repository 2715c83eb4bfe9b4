"""remedy fix command."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click
from rich.prompt import Confirm

from remedy.core.config import RemedyConfig, load_config
from remedy.core.models import SessionResult
from remedy.core.output import console, print_session_result, session_result_to_dict
from remedy.detector import PatternDetector
from remedy.fix.applier import FixApplier, read_source
from remedy.fix.engine import FixEngine
from remedy.fix.learning import LearningStore


def build_engine(config: RemedyConfig, project_path: Path) -> FixEngine:
    store = LearningStore.for_project(project_path) if config.learning.persist else LearningStore()
    return FixEngine(
        PatternDetector(config.detector),
        learning=store,
        config=config.planner,
        safety_mode=config.engine.safety_mode,
    )


async def _run_sessions(engine: FixEngine, files: tuple[Path, ...]) -> list[SessionResult]:
    results = []
    for file_path in files:
        text = read_source(file_path)
        results.append(await engine.run_session(str(file_path), text))
    return results


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--unsafe", is_flag=True, help="Disable safety mode and apply risky fixes too")
@click.option("--write", is_flag=True, help="Write fixed files (with backup)")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompts")
@click.option("--json", "as_json", is_flag=True, help="Print session results as JSON")
@click.option("--fail-on-regression", is_flag=True, help="Exit 1 if any session regressed")
def fix(
    files: tuple[Path, ...],
    unsafe: bool,
    write: bool,
    yes: bool,
    as_json: bool,
    fail_on_regression: bool,
):
    """Run a fix session for each FILE.

    Changes are previewed as a diff; pass --write to apply them.
    """
    project_path = Path.cwd()
    config = load_config(project_path)
    engine = build_engine(config, project_path)
    if unsafe:
        engine.set_safety_mode(False)

    results = asyncio.run(_run_sessions(engine, files))

    if as_json:
        click.echo(json.dumps([session_result_to_dict(r) for r in results], indent=2))
    else:
        for result in results:
            print_session_result(result)

    if write:
        _write_results(results, project_path, config.fix.backup_before_fix, yes, quiet=as_json)

    if fail_on_regression and any(r.verification.regression_detected for r in results):
        sys.exit(1)


def _write_results(
    results: list[SessionResult],
    project_path: Path,
    backup: bool,
    yes: bool,
    quiet: bool,
) -> None:
    applier = FixApplier(project_path, backup=backup)
    for result in results:
        if not result.changed:
            continue
        if not yes and not Confirm.ask(f"  Write fixes to {result.session.file_path}?", default=False):
            console.print("  [dim]Skipped.[/dim]")
            continue
        outcome = applier.write(result)
        if quiet:
            continue
        if outcome.success:
            console.print(f"  [green]✅ {outcome.message}[/green]")
            console.print(f"  [dim]Run `remedy undo {outcome.session_id}` to revert.[/dim]")
        else:
            console.print(f"  [red]❌ {outcome.message}[/red]")
