"""remedy undo command."""

from __future__ import annotations

from pathlib import Path

import click

from remedy.core.output import console
from remedy.fix.applier import WriteResult
from remedy.fix.undo import UndoManager


def _print_result(result: WriteResult) -> None:
    if result.success:
        console.print(f"  [green]✅ {result.session_id}[/green]  {result.message}")
    else:
        console.print(f"  [red]❌ {result.session_id}[/red]  {result.message}")


@click.command()
@click.argument("session_id", required=False)
@click.option("--last", is_flag=True, help="Undo all writes from the last fix run")
@click.option("--list", "list_all", is_flag=True, help="List all undoable sessions")
def undo(session_id: str | None, last: bool, list_all: bool):
    """Undo previously written fixes.

    Pass a SESSION_ID to restore one file, or use --last to undo
    the entire last batch of writes.
    """
    manager = UndoManager(Path.cwd())

    if list_all:
        entries = manager.list_undoable()
        if not entries:
            console.print("\n  No undoable sessions found.\n")
            return

        console.print("\n  [bold]Undoable Sessions[/bold]\n")
        for entry in entries:
            console.print(f"  {entry.session_id}  {entry.file}  \\[{entry.timestamp}]")
        console.print()
        return

    if last:
        results = manager.undo_last_session()
        if not results:
            console.print("\n  No recent fix session to undo.\n")
            return

        console.print("\n  [bold]Undoing last fix session:[/bold]\n")
        for result in results:
            _print_result(result)
        console.print()
        return

    if session_id:
        _print_result(manager.undo(session_id))
        return

    console.print("\n  Usage: remedy undo <SESSION_ID> or remedy undo --last")
    console.print("  Run `remedy undo --list` to see available undos.\n")
