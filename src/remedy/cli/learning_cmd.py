"""remedy learning command."""

from __future__ import annotations

import json
from pathlib import Path

import click

from remedy.core.output import console, learning_entry_to_dict, print_learning
from remedy.fix.learning import LearningStore


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Export as JSON")
@click.option("--reset", is_flag=True, help="Forget all learned outcomes")
def learning(as_json: bool, reset: bool):
    """Show or clear what remedy has learned about its fixes."""
    store = LearningStore.for_project(Path.cwd())

    if reset:
        removed = store.reset()
        console.print(f"\n  Cleared {removed} learning entries.\n")
        return

    entries = store.entries()
    if as_json:
        click.echo(json.dumps([learning_entry_to_dict(e) for e in entries], indent=2))
        return

    print_learning(entries)
