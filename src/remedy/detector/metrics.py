"""Whole-file metrics computed alongside detection."""

from __future__ import annotations

import re

from remedy.core.models import Issue, IssueMetrics, Severity


# Deduction points per issue
ISSUE_DEDUCTION = 2
CRITICAL_DEDUCTION = 10

_BRANCH_KEYWORDS = re.compile(r"\b(?:if|else|for|while|switch|case|catch)\b")
_BRANCH_OPERATORS = re.compile(r"\?|&&|\|\|")
_QUANTUM_FEATURES = re.compile(r"quantum|entangle|superpos|qubit|measure", re.IGNORECASE)


def cyclomatic_complexity(content: str) -> int:
    """1 plus the number of branch keywords and short-circuit operators."""
    return 1 + len(_BRANCH_KEYWORDS.findall(content)) + len(_BRANCH_OPERATORS.findall(content))


def duplicated_lines(lines: list[str]) -> int:
    """Count repeated non-comment lines.

    The first repeat of a line counts both copies, later repeats count one.
    """
    seen: dict[str, int] = {}
    duplicated = 0
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("//"):
            continue
        count = seen.get(stripped, 0)
        seen[stripped] = count + 1
        if count == 1:
            duplicated += 2
        elif count > 1:
            duplicated += 1
    return duplicated


def quality_score(issues: list[Issue]) -> int:
    """100 minus deductions for every issue and extra for critical ones, floor 0."""
    critical = sum(1 for i in issues if i.severity == Severity.CRITICAL)
    return max(0, 100 - ISSUE_DEDUCTION * len(issues) - CRITICAL_DEDUCTION * critical)


def compute_metrics(content: str, issues: list[Issue]) -> IssueMetrics:
    lines = content.split("\n")
    code_lines = [
        line for line in lines
        if line.strip() and not line.strip().startswith(("//", "*"))
    ]
    complexity = cyclomatic_complexity(content)
    duplicated = duplicated_lines(lines)

    return IssueMetrics(
        lines_of_code=len(code_lines),
        complexity=complexity,
        maintainability_index=max(0, 100 - complexity - duplicated),
        duplicated_lines=duplicated,
        quality_score=quality_score(issues),
        quantum_features=len(_QUANTUM_FEATURES.findall(content)),
    )
