"""Tests for the strategy catalog and registry."""

from __future__ import annotations

import pytest

from remedy.core.models import Category, Complexity, FixResult, Issue, Severity
from remedy.fix.strategies import (
    DEFAULT_STRATEGIES,
    FixStrategy,
    StrategyExecutionFailure,
    StrategyRegistry,
)


def _make_issue(rule_id: str = "custom_rule", line: int | None = 1) -> Issue:
    return Issue(
        rule_id=rule_id,
        severity=Severity.LOW,
        category=Category.WARNING,
        description="test issue",
        line=line,
    )


def _noop(text: str, issue: Issue) -> FixResult:
    return FixResult(success=True, original_text=text, fixed_text=text, confidence=1.0)


def _explode(text: str, issue: Issue) -> FixResult:
    raise RuntimeError("boom")


def _make_strategy(
    strategy_id: str = "custom",
    rule_ids: tuple[str, ...] = ("custom_rule",),
    confidence: float = 0.9,
    complexity: Complexity = Complexity.SIMPLE,
    transform=_noop,
) -> FixStrategy:
    return FixStrategy(
        id=strategy_id,
        name=strategy_id.title(),
        rule_ids=rule_ids,
        confidence=confidence,
        complexity=complexity,
        transform=transform,
    )


class TestFixStrategy:
    def test_score_weights_by_complexity(self):
        assert _make_strategy(confidence=0.8).score == pytest.approx(0.8)
        assert _make_strategy(confidence=0.8, complexity=Complexity.MEDIUM).score == pytest.approx(0.64)
        assert _make_strategy(confidence=0.8, complexity=Complexity.COMPLEX).score == pytest.approx(0.4)

    def test_apply_tags_result(self):
        strategy = _make_strategy()
        result = strategy.apply("text", _make_issue())

        assert result.strategy_id == "custom"
        assert result.rule_id == "custom_rule"
        assert result.fixed_text == "text"

    def test_apply_wraps_transform_errors(self):
        strategy = _make_strategy(transform=_explode)

        with pytest.raises(StrategyExecutionFailure) as exc_info:
            strategy.apply("text", _make_issue())

        assert exc_info.value.strategy_id == "custom"
        assert exc_info.value.rule_id == "custom_rule"
        assert isinstance(exc_info.value.cause, RuntimeError)

    def test_with_confidence_returns_copy(self):
        strategy = _make_strategy(confidence=0.9)
        learned = strategy.with_confidence(0.4)

        assert learned.confidence == 0.4
        assert strategy.confidence == 0.9
        assert learned.id == strategy.id

    def test_applies_to(self):
        strategy = _make_strategy(rule_ids=("a", "b"))
        assert strategy.applies_to("b") is True
        assert strategy.applies_to("c") is False


class TestStrategyRegistry:
    def test_default_catalog(self):
        registry = StrategyRegistry()

        assert len(registry) == len(DEFAULT_STRATEGIES) == 10
        assert "replace_console_log" in registry
        assert registry.get("reduce_complexity").confidence == 0.5
        assert registry.get("secure_hardcoded_secrets").complexity == Complexity.MEDIUM

    def test_for_rule_keeps_registration_order(self):
        registry = StrategyRegistry()
        ids = [s.id for s in registry.for_rule("async_without_await")]

        assert ids == ["add_error_handling", "remove_redundant_async"]

    def test_unknown_rule_has_no_strategies(self):
        assert StrategyRegistry().for_rule("nope") == []

    def test_every_detector_rule_but_density_is_covered(self):
        rule_ids = set(StrategyRegistry().rule_ids)

        assert "console_log_in_production" in rule_ids
        assert "high_complexity" in rule_ids
        assert "ai_quantum_density" not in rule_ids

    def test_duplicate_id_rejected(self):
        registry = StrategyRegistry([_make_strategy()])

        with pytest.raises(ValueError):
            registry.register(_make_strategy())

    def test_confidence_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            StrategyRegistry([_make_strategy(confidence=1.5)])

    def test_custom_catalog_replaces_defaults(self):
        registry = StrategyRegistry([_make_strategy()])

        assert len(registry) == 1
        assert [s.id for s in registry] == ["custom"]
        assert registry.get("replace_console_log") is None
