"""Quantum-operation rules."""

from __future__ import annotations

import re

from remedy.core.models import Category, Issue, Severity
from remedy.detector.rules.base import BaseRule, PatternRule


class QuantumDecoherenceRisk(PatternRule):
    """Raw measurements that can collapse state without protection."""

    rule_id = "quantum_decoherence_risk"
    name = "Quantum decoherence risk"
    category = Category.QUANTUM
    severity = Severity.CRITICAL
    description = "Operation may cause quantum decoherence"
    suggestion = "Protect the measurement against decoherence or defer it"
    pattern = re.compile(r"(?:measureQuantum|observeState|collapseWaveFunction)\s*\([^)]*\)\s*(?:;|\n)")


class QuantumEntanglementLeak(PatternRule):
    rule_id = "quantum_entanglement_leak"
    name = "Entanglement leak"
    category = Category.QUANTUM
    severity = Severity.HIGH
    description = "Entanglement is never released"
    suggestion = "Always release entanglements to avoid decoherence"
    pattern = re.compile(r"\bentangle\([^)]+\)(?![^;]*\.release\(\))")
    per_file = True


class QuantumSuperpositionMisuse(PatternRule):
    rule_id = "quantum_superposition_misuse"
    name = "Superposition misuse"
    category = Category.QUANTUM
    severity = Severity.HIGH
    description = "Collapsed superposition is collapsed or measured again"
    suggestion = "Do not collapse an already collapsed superposition"
    pattern = re.compile(r"superposition\s*\.\s*collapse\(\)\s*\.\s*(?:collapse|measure)")
    per_file = True


class QuantumMeasurementTiming(PatternRule):
    rule_id = "quantum_measurement_timing"
    name = "Measurement timing"
    category = Category.QUANTUM
    severity = Severity.MEDIUM
    description = "Measurement happens before other quantum operations"
    suggestion = "Measure after all quantum operations"
    pattern = re.compile(r"measure\([^)]*\).*(?:entangle|superpose)")
    per_file = True


class QuantumDensity(BaseRule):
    """Too many quantum operations concentrated in one file."""

    rule_id = "ai_quantum_density"
    name = "High quantum density"
    category = Category.QUANTUM
    severity = Severity.MEDIUM
    description = "Too many quantum operations concentrated in one file"
    suggestion = "Spread quantum operations out or batch them"

    def __init__(self, threshold: int = 10):
        self.threshold = threshold

    def run(self, content: str) -> list[Issue]:
        density = len(re.findall(r"quantum", content, re.IGNORECASE))
        if density <= self.threshold:
            return []
        lines = content.count("\n") + 1
        return [self._make_issue(evidence=f"{density} quantum operations in {lines} lines")]
