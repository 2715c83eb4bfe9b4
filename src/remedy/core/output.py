"""Rich terminal formatting for remedy output."""

from __future__ import annotations

import difflib
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from remedy.core.models import (
    DetectionResult,
    FixPlan,
    Issue,
    LearningEntry,
    SessionResult,
    Severity,
)

console = Console()
error_console = Console(stderr=True)


SEVERITY_COLORS = {
    Severity.CRITICAL: "red",
    Severity.HIGH: "magenta",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
}


def score_color(score: float) -> str:
    """Return color name based on a 0-100 score."""
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    return "red"


def confidence_bar(confidence: float, width: int = 12) -> str:
    """Create a text-based confidence bar."""
    filled = round(confidence * width)
    color = score_color(confidence * 100)
    return f"[{color}]{'█' * filled}{'░' * (width - filled)}[/{color}]"


def format_issue(issue: Issue) -> str:
    """Format a single issue for terminal output."""
    color = SEVERITY_COLORS.get(issue.severity, "white")
    text = (
        f"    [{color}]●[/{color}] {issue.rule_id}  "
        f"[dim]{issue.location}[/dim]  {escape(issue.description)}"
    )
    if issue.suggestion:
        text += f"\n       [dim]-> {escape(issue.suggestion)}[/dim]"
    return text


def print_plan(file_path: str, detection: DetectionResult, plan: FixPlan) -> None:
    """Print detected issues grouped by plan bucket."""
    metrics = detection.metrics
    color = score_color(metrics.quality_score)

    lines = [""]
    lines.append(
        f"  Quality:  [{color}]{metrics.quality_score}/100[/{color}]   "
        f"Complexity: {metrics.complexity}   "
        f"Maintainability: {metrics.maintainability_index}"
    )
    lines.append("")

    if not plan.total:
        lines.append("  [green]No issues found.[/green]")
        lines.append("")

    buckets = [
        ("green", "Safe to fix automatically:", plan.safe),
        ("yellow", "Risky (applied only with --unsafe):", plan.risky),
        ("dim", "Manual review:", plan.manual),
    ]
    for style, label, issues in buckets:
        if not issues:
            continue
        lines.append(f"  [{style}]{label}[/{style}]")
        lines.extend(format_issue(issue) for issue in issues)
        lines.append("")

    lines.append(
        f"  {len(plan.safe)} safe | {len(plan.risky)} risky | {len(plan.manual)} manual"
        f"   {metrics.lines_of_code} lines of code"
    )
    lines.append("")

    console.print(Panel(
        "\n".join(lines),
        title=f"[bold]{escape(file_path)}[/bold]",
        border_style=color,
        padding=(0, 1),
    ))


def print_diff(result: SessionResult) -> None:
    """Print a unified diff of the session's text changes."""
    diff = difflib.unified_diff(
        result.original_text.splitlines(),
        result.fixed_text.splitlines(),
        fromfile=f"a/{result.session.file_path}",
        tofile=f"b/{result.session.file_path}",
        lineterm="",
    )
    for diff_line in diff:
        if diff_line.startswith("-"):
            console.print(f"  [red]{escape(diff_line)}[/red]")
        elif diff_line.startswith("+"):
            console.print(f"  [green]{escape(diff_line)}[/green]")
        else:
            console.print(f"  {escape(diff_line)}")


def print_session_result(result: SessionResult, show_diff: bool = True) -> None:
    """Print the outcome of one fix session."""
    session = result.session
    verification = result.verification

    if session.error:
        console.print(f"\n  [red]❌ {escape(session.summary)}[/red]")
    else:
        console.print(f"\n  [bold]{escape(session.file_path)}[/bold]  [dim]{session.id}[/dim]")
        console.print(f"  {escape(session.summary)}")

    for fix in result.applied_fixes:
        console.print(
            f"  [green]✅ {fix.strategy_id}[/green]  {escape(fix.explanation)}  "
            f"{confidence_bar(fix.confidence)}"
        )
        for warning in fix.warnings:
            console.print(f"     [yellow]! {escape(warning)}[/yellow]")

    if verification.regression_detected:
        console.print("  [red]Regression detected.[/red]")

    if show_diff and result.changed:
        console.print()
        print_diff(result)

    if result.recommendations:
        console.print()
        for recommendation in result.recommendations:
            console.print(f"  [cyan]-> {escape(recommendation)}[/cyan]")
    console.print()


def print_strategies(rows: list[tuple[str, str, float, float | None, str]]) -> None:
    """Print the strategy catalog.

    Each row is ``(strategy_id, rule_id, base, learned, complexity)``.
    """
    console.print("\n  [bold]Fix Strategies[/bold]\n")
    for strategy_id, rule_id, base, learned, complexity in rows:
        learned_str = f"{learned:.2f}" if learned is not None else "  - "
        console.print(
            f"  {strategy_id:<26} {rule_id:<30} "
            f"{confidence_bar(base)} {base:.2f}  learned {learned_str}  [dim]{complexity}[/dim]"
        )
    console.print()


def print_learning(entries: list[LearningEntry]) -> None:
    """Print learned outcome statistics."""
    if not entries:
        console.print("\n  No learning data yet. Run `remedy fix` to start learning.\n")
        return

    console.print("\n  [bold]Learned Strategy Confidence[/bold]\n")
    for entry in entries:
        console.print(
            f"  {entry.strategy_id:<26} {entry.rule_id:<30} "
            f"{entry.successes}/{entry.attempts}  "
            f"{confidence_bar(entry.confidence)} {entry.confidence:.3f}"
        )
    console.print()


def issue_to_dict(issue: Issue) -> dict[str, Any]:
    return {
        "rule_id": issue.rule_id,
        "severity": issue.severity.value,
        "category": issue.category.value,
        "description": issue.description,
        "line": issue.line,
        "evidence": issue.evidence,
        "suggestion": issue.suggestion,
    }


def learning_entry_to_dict(entry: LearningEntry) -> dict[str, Any]:
    return {
        "strategy_id": entry.strategy_id,
        "rule_id": entry.rule_id,
        "attempts": entry.attempts,
        "successes": entry.successes,
        "confidence": entry.confidence,
        "updated_at": entry.updated_at.isoformat(),
    }


def session_result_to_dict(result: SessionResult) -> dict[str, Any]:
    """JSON-serializable form of a session result."""
    session = result.session
    return {
        "session": {
            "id": session.id,
            "file_path": session.file_path,
            "start_time": session.start_time.isoformat(),
            "end_time": session.end_time.isoformat() if session.end_time else None,
            "total_fixes": session.total_fixes,
            "successful_fixes": session.successful_fixes,
            "failed_fixes": session.failed_fixes,
            "risky_fixes": session.risky_fixes,
            "safety_mode": session.safety_mode,
            "summary": session.summary,
            "error": session.error,
        },
        "applied_fixes": [
            {
                "strategy_id": fix.strategy_id,
                "rule_id": fix.rule_id,
                "confidence": fix.confidence,
                "explanation": fix.explanation,
                "warnings": list(fix.warnings),
                "changes": [
                    {
                        "kind": change.kind.value,
                        "line_number": change.line_number,
                        "description": change.description,
                        "before": change.before,
                        "after": change.after,
                    }
                    for change in fix.changes
                ],
            }
            for fix in result.applied_fixes
        ],
        "verification": {
            "new_issues_introduced": result.verification.new_issues_introduced,
            "issues_resolved": result.verification.issues_resolved,
            "regression_detected": result.verification.regression_detected,
            "overall_improvement": result.verification.overall_improvement,
        },
        "plan": {
            "safe": [issue_to_dict(i) for i in result.plan.safe],
            "risky": [issue_to_dict(i) for i in result.plan.risky],
            "manual": [issue_to_dict(i) for i in result.plan.manual],
        },
        "recommendations": list(result.recommendations),
        "changed": result.changed,
        "fixed_text": result.fixed_text,
    }
