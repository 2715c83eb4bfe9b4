"""Tests for fix planning."""

from __future__ import annotations

from remedy.core.config import PlannerConfig
from remedy.core.models import Category, Issue, Severity
from remedy.fix.planner import FixPlanner, priority_score
from remedy.fix.selector import StrategySelector
from remedy.fix.strategies import StrategyRegistry


def _make_issue(
    rule_id: str,
    severity: Severity = Severity.MEDIUM,
    category: Category = Category.ERROR,
    line: int = 1,
) -> Issue:
    return Issue(
        rule_id=rule_id,
        severity=severity,
        category=category,
        description=f"{rule_id} issue",
        line=line,
    )


def _planner(learned=None, config: PlannerConfig | None = None) -> FixPlanner:
    return FixPlanner(StrategySelector(StrategyRegistry(), learned), config)


class TestPriorityScore:
    def test_severity_plus_category(self):
        assert priority_score(_make_issue("x", Severity.CRITICAL, Category.SECURITY)) == 13
        assert priority_score(_make_issue("x", Severity.LOW, Category.WARNING)) == 3
        assert priority_score(_make_issue("x", Severity.HIGH, Category.QUANTUM)) == 10


class TestFixPlanner:
    def test_buckets(self):
        issues = [
            _make_issue("console_log_in_production", Severity.LOW, Category.OPTIMIZATION),
            _make_issue("hardcoded_private_keys", Severity.CRITICAL, Category.SECURITY),
            _make_issue("quantum_superposition_misuse", Severity.HIGH, Category.QUANTUM),
            _make_issue("high_complexity", Severity.MEDIUM, Category.OPTIMIZATION),
            _make_issue("ai_quantum_density", Severity.MEDIUM, Category.QUANTUM),
        ]
        plan = _planner().plan(issues)

        assert [i.rule_id for i in plan.safe] == ["console_log_in_production"]
        # Confident but complex strategies are never safe
        assert [i.rule_id for i in plan.risky] == ["hardcoded_private_keys", "quantum_superposition_misuse"]
        assert [i.rule_id for i in plan.manual] == ["high_complexity", "ai_quantum_density"]

    def test_every_issue_lands_in_exactly_one_bucket(self):
        rule_ids = [
            "quantum_decoherence_risk", "async_without_await", "quantum_entanglement_leak",
            "console_log_in_production", "hardcoded_private_keys", "quantum_superposition_misuse",
            "unused_imports", "high_complexity", "missing_error_handling",
            "quantum_measurement_timing", "ai_quantum_density", "not_a_rule",
        ]
        issues = [_make_issue(r, line=n) for n, r in enumerate(rule_ids, 1)]
        plan = _planner().plan(issues)

        assert plan.total == len(issues)
        bucketed = plan.safe + plan.risky + plan.manual
        assert sorted(i.line for i in bucketed) == list(range(1, len(issues) + 1))

    def test_safe_sorted_by_priority_stable(self):
        issues = [
            _make_issue("console_log_in_production", Severity.LOW, Category.OPTIMIZATION, line=1),
            _make_issue("missing_error_handling", Severity.MEDIUM, Category.ERROR, line=2),
            _make_issue("quantum_decoherence_risk", Severity.CRITICAL, Category.QUANTUM, line=3),
            _make_issue("missing_error_handling", Severity.MEDIUM, Category.ERROR, line=4),
        ]
        plan = _planner().plan(issues)

        assert [i.line for i in plan.safe] == [3, 2, 4, 1]

    def test_risky_sorted_by_priority_stable(self):
        issues = [
            _make_issue("quantum_superposition_misuse", Severity.LOW, Category.WARNING, line=1),
            _make_issue("hardcoded_private_keys", Severity.CRITICAL, Category.SECURITY, line=2),
            _make_issue("quantum_superposition_misuse", Severity.HIGH, Category.QUANTUM, line=3),
            _make_issue("hardcoded_private_keys", Severity.LOW, Category.WARNING, line=4),
        ]
        plan = _planner().plan(issues)

        assert plan.safe == []
        assert [i.line for i in plan.risky] == [2, 3, 1, 4]

    def test_manual_keeps_detector_order(self):
        issues = [
            _make_issue("not_a_rule", Severity.LOW, line=1),
            _make_issue("ai_quantum_density", Severity.CRITICAL, line=2),
        ]
        plan = _planner().plan(issues)

        assert [i.line for i in plan.manual] == [1, 2]

    def test_learned_confidence_moves_bucket(self):
        issue = _make_issue("console_log_in_production", Severity.LOW, Category.OPTIMIZATION)
        plan = _planner({("replace_console_log", "console_log_in_production"): 0.65}).plan([issue])

        assert plan.risky == [issue]
        assert plan.safe == []

    def test_thresholds_are_configurable(self):
        issue = _make_issue("console_log_in_production", Severity.LOW, Category.OPTIMIZATION)
        plan = _planner(config=PlannerConfig(safe_confidence=0.99, risky_confidence=0.97)).plan([issue])

        assert plan.manual == [issue]

    def test_empty(self):
        plan = _planner().plan([])
        assert plan.total == 0
