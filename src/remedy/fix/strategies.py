"""Fix strategy catalog.

Strategies are registered once, in a fixed order, and looked up by the rule id
of the issue being fixed.  Each strategy wraps one text transform from
:mod:`remedy.fix.transforms`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from typing import Callable

from remedy.core.models import Complexity, FixResult, Issue
from remedy.fix.transforms import TRANSFORMS, TransformKind

Transform = Callable[[str, Issue], FixResult]


class StrategyExecutionFailure(Exception):
    """A transform raised instead of returning a FixResult."""

    def __init__(self, strategy_id: str, rule_id: str, cause: BaseException):
        super().__init__(f"Strategy {strategy_id!r} failed on {rule_id!r}: {cause}")
        self.strategy_id = strategy_id
        self.rule_id = rule_id
        self.cause = cause


@dataclass(frozen=True)
class FixStrategy:
    """A named, confidence-scored text transform for one or more rules."""

    id: str
    name: str
    rule_ids: tuple[str, ...]
    confidence: float
    complexity: Complexity
    transform: Transform = field(compare=False, repr=False)
    description: str = ""

    def applies_to(self, rule_id: str) -> bool:
        return rule_id in self.rule_ids

    @property
    def score(self) -> float:
        return self.confidence * self.complexity.weight

    def with_confidence(self, confidence: float) -> FixStrategy:
        """Copy of this strategy carrying a learned confidence."""
        return replace(self, confidence=confidence)

    def apply(self, text: str, issue: Issue) -> FixResult:
        """Run the transform. Unexpected errors surface as StrategyExecutionFailure."""
        try:
            result = self.transform(text, issue)
        except Exception as exc:
            raise StrategyExecutionFailure(self.id, issue.rule_id, exc) from exc
        result.strategy_id = self.id
        result.rule_id = issue.rule_id
        return result


def _builtin(
    strategy_id: str,
    kind: TransformKind,
    name: str,
    rule_ids: tuple[str, ...],
    confidence: float,
    complexity: Complexity,
    description: str,
) -> FixStrategy:
    return FixStrategy(
        id=strategy_id,
        name=name,
        rule_ids=rule_ids,
        confidence=confidence,
        complexity=complexity,
        transform=TRANSFORMS[kind],
        description=description,
    )


DEFAULT_STRATEGIES: tuple[FixStrategy, ...] = (
    _builtin(
        "add_error_handling", TransformKind.ADD_ERROR_HANDLING,
        "Add error handling",
        ("missing_error_handling", "async_without_await"),
        0.9, Complexity.SIMPLE,
        "Wrap risky awaited code in try/catch",
    ),
    _builtin(
        "remove_redundant_async", TransformKind.REMOVE_REDUNDANT_ASYNC,
        "Remove redundant async",
        ("async_without_await",),
        0.85, Complexity.SIMPLE,
        "Make functions that never await synchronous",
    ),
    _builtin(
        "fix_quantum_decoherence", TransformKind.PROTECT_MEASUREMENT,
        "Fix quantum decoherence",
        ("quantum_decoherence_risk",),
        0.85, Complexity.MEDIUM,
        "Protect quantum measurements against decoherence",
    ),
    _builtin(
        "fix_entanglement_leak", TransformKind.BIND_ENTANGLEMENT,
        "Fix entanglement leak",
        ("quantum_entanglement_leak",),
        0.8, Complexity.MEDIUM,
        "Bind entanglements and add release reminders",
    ),
    _builtin(
        "replace_console_log", TransformKind.REPLACE_CONSOLE_LOG,
        "Replace console.log",
        ("console_log_in_production",),
        0.95, Complexity.SIMPLE,
        "Replace console.log with a configurable logger",
    ),
    _builtin(
        "secure_hardcoded_secrets", TransformKind.EXTERNALIZE_SECRETS,
        "Secure hardcoded secrets",
        ("hardcoded_private_keys",),
        0.7, Complexity.MEDIUM,
        "Move secrets to environment variables",
    ),
    _builtin(
        "fix_superposition_misuse", TransformKind.COLLAPSE_SUPERPOSITION,
        "Fix superposition misuse",
        ("quantum_superposition_misuse",),
        0.75, Complexity.COMPLEX,
        "Correct operations on collapsed superposition states",
    ),
    _builtin(
        "optimize_imports", TransformKind.PRUNE_IMPORTS,
        "Optimize imports",
        ("unused_imports",),
        0.9, Complexity.SIMPLE,
        "Remove unused named imports",
    ),
    _builtin(
        "reduce_complexity", TransformKind.ANNOTATE_COMPLEXITY,
        "Reduce complexity",
        ("high_complexity",),
        0.5, Complexity.COMPLEX,
        "Annotate complex functions for manual refactoring",
    ),
    _builtin(
        "fix_quantum_timing", TransformKind.DEFER_MEASUREMENT,
        "Fix quantum timing",
        ("quantum_measurement_timing",),
        0.8, Complexity.MEDIUM,
        "Measure only after all quantum operations",
    ),
)


class StrategyRegistry:
    """Rule id -> strategies, in registration order."""

    def __init__(self, strategies: Iterable[FixStrategy] | None = None):
        self._strategies: dict[str, FixStrategy] = {}
        self._by_rule: dict[str, list[FixStrategy]] = {}
        for strategy in DEFAULT_STRATEGIES if strategies is None else strategies:
            self.register(strategy)

    def register(self, strategy: FixStrategy) -> None:
        if strategy.id in self._strategies:
            raise ValueError(f"Strategy {strategy.id!r} is already registered")
        if not 0.0 <= strategy.confidence <= 1.0:
            raise ValueError(f"Strategy {strategy.id!r} confidence must be within [0, 1]")
        self._strategies[strategy.id] = strategy
        for rule_id in strategy.rule_ids:
            self._by_rule.setdefault(rule_id, []).append(strategy)

    def get(self, strategy_id: str) -> FixStrategy | None:
        return self._strategies.get(strategy_id)

    def for_rule(self, rule_id: str) -> list[FixStrategy]:
        return list(self._by_rule.get(rule_id, ()))

    @property
    def rule_ids(self) -> list[str]:
        return list(self._by_rule)

    def __iter__(self) -> Iterator[FixStrategy]:
        return iter(self._strategies.values())

    def __len__(self) -> int:
        return len(self._strategies)

    def __contains__(self, strategy_id: object) -> bool:
        return strategy_id in self._strategies
