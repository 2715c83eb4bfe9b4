"""Pick the best strategy for an issue."""

from __future__ import annotations

from collections.abc import Mapping

from remedy.core.models import Issue
from remedy.fix.strategies import FixStrategy, StrategyRegistry


class StrategySelector:
    """Chooses among applicable strategies by confidence x complexity weight.

    ``learned`` maps ``(strategy_id, rule_id)`` to a confidence taken from the
    learning store before the session started; when present it replaces the
    strategy's base confidence for that rule.  Ties keep the strategy that was
    registered first.
    """

    def __init__(
        self,
        registry: StrategyRegistry,
        learned: Mapping[tuple[str, str], float] | None = None,
    ):
        self.registry = registry
        self.learned = dict(learned or {})

    def confidence_for(self, strategy: FixStrategy, rule_id: str) -> float:
        return self.learned.get((strategy.id, rule_id), strategy.confidence)

    def select(self, issue: Issue) -> FixStrategy | None:
        best: FixStrategy | None = None
        best_score = -1.0

        for strategy in self.registry.for_rule(issue.rule_id):
            candidate = strategy
            confidence = self.confidence_for(strategy, issue.rule_id)
            if confidence != strategy.confidence:
                candidate = strategy.with_confidence(confidence)
            if candidate.score > best_score:
                best, best_score = candidate, candidate.score

        return best
