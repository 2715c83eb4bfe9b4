"""remedy scan command."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from remedy.core.config import load_config
from remedy.core.output import print_plan
from remedy.detector import PatternDetector
from remedy.fix.applier import read_source
from remedy.fix.learning import LearningStore
from remedy.fix.planner import FixPlanner
from remedy.fix.selector import StrategySelector
from remedy.fix.strategies import StrategyRegistry


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
def scan(files: tuple[Path, ...]):
    """Detect issues and show how each one would be handled.

    Issues are grouped into safe, risky and manual fixes using the
    current learned confidences.
    """
    project_path = Path.cwd()
    config = load_config(project_path)
    detector = PatternDetector(config.detector)
    store = LearningStore.for_project(project_path) if config.learning.persist else LearningStore()
    planner = FixPlanner(StrategySelector(StrategyRegistry(), store.snapshot()), config.planner)

    for file_path in files:
        text = read_source(file_path)
        detection = asyncio.run(detector.detect_issues(str(file_path), text))
        print_plan(str(file_path), detection, planner.plan(detection.issues))
