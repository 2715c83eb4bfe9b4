"""remedy strategies command."""

from __future__ import annotations

from pathlib import Path

import click

from remedy.core.config import load_config
from remedy.core.output import print_strategies
from remedy.fix.learning import LearningStore
from remedy.fix.strategies import StrategyRegistry


@click.command()
def strategies():
    """List fix strategies with their base and learned confidence."""
    project_path = Path.cwd()
    config = load_config(project_path)
    store = LearningStore.for_project(project_path) if config.learning.persist else LearningStore()
    learned = store.snapshot()

    rows = []
    for strategy in StrategyRegistry():
        for rule_id in strategy.rule_ids:
            rows.append((
                strategy.id,
                rule_id,
                strategy.confidence,
                learned.get((strategy.id, rule_id)),
                strategy.complexity.value,
            ))
    print_strategies(rows)
