"""Reference issue detector: runs every rule over one file's text."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from remedy.core.config import DetectorConfig
from remedy.core.models import DetectionResult, Issue, Severity
from remedy.detector.metrics import compute_metrics
from remedy.detector.rules import ALL_RULES, BaseRule
from remedy.detector.rules.code_quality import HighComplexity
from remedy.detector.rules.quantum import QuantumDensity

logger = logging.getLogger(__name__)

SEVERITY_ORDER = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


@runtime_checkable
class IssueDetector(Protocol):
    """Anything that can report issues for a file's text."""

    async def detect_issues(self, file_path: str, content: str) -> DetectionResult:
        ...


class PatternDetector:
    """Regex and text-check based detector."""

    def __init__(self, config: DetectorConfig | None = None):
        self.config = config or DetectorConfig()

        self.rules: list[BaseRule] = []
        for rule_cls in ALL_RULES:
            if rule_cls.rule_id in self.config.ignore:
                continue
            # Apply config overrides
            if rule_cls is HighComplexity:
                rule: BaseRule = HighComplexity(max_branches=self.config.max_branches)
            elif rule_cls is QuantumDensity:
                rule = QuantumDensity(threshold=self.config.quantum_density)
            else:
                rule = rule_cls()
            self.rules.append(rule)

    def detect(self, file_path: str, content: str) -> DetectionResult:
        issues: list[Issue] = []
        for rule in self.rules:
            try:
                issues.extend(rule.run(content))
            except Exception:
                # One broken rule should not fail the whole file
                logger.warning("Rule %s failed on %s", rule.rule_id, file_path, exc_info=True)

        issues.sort(key=lambda i: SEVERITY_ORDER[i.severity])
        logger.debug("Detected %d issues in %s", len(issues), file_path)
        return DetectionResult(issues=issues, metrics=compute_metrics(content, issues))

    async def detect_issues(self, file_path: str, content: str) -> DetectionResult:
        return self.detect(file_path, content)
