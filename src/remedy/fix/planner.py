"""Partition issues into safe / risky / manual buckets."""

from __future__ import annotations

from collections.abc import Iterable

from remedy.core.config import PlannerConfig
from remedy.core.models import Category, Complexity, FixPlan, Issue, Severity
from remedy.fix.selector import StrategySelector

SEVERITY_WEIGHTS = {
    Severity.CRITICAL: 10,
    Severity.HIGH: 8,
    Severity.MEDIUM: 5,
    Severity.LOW: 2,
}

CATEGORY_WEIGHTS = {
    Category.SECURITY: 3,
    Category.QUANTUM: 2,
    Category.ERROR: 2,
    Category.OPTIMIZATION: 1,
    Category.WARNING: 1,
}


def priority_score(issue: Issue) -> int:
    return SEVERITY_WEIGHTS[issue.severity] + CATEGORY_WEIGHTS[issue.category]


class FixPlanner:
    """Classifies issues by the risk of their best strategy."""

    def __init__(self, selector: StrategySelector, config: PlannerConfig | None = None):
        self.selector = selector
        self.config = config or PlannerConfig()

    def plan(self, issues: Iterable[Issue]) -> FixPlan:
        plan = FixPlan()

        for issue in issues:
            strategy = self.selector.select(issue)
            if strategy is None:
                plan.manual.append(issue)
            elif (
                strategy.confidence >= self.config.safe_confidence
                and strategy.complexity != Complexity.COMPLEX
            ):
                plan.safe.append(issue)
            elif strategy.confidence >= self.config.risky_confidence:
                plan.risky.append(issue)
            else:
                plan.manual.append(issue)

        # sorted() is stable: equal priorities keep detector order
        plan.safe = sorted(plan.safe, key=priority_score, reverse=True)
        plan.risky = sorted(plan.risky, key=priority_score, reverse=True)
        return plan
