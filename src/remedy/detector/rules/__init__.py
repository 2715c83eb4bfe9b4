"""Detector rule registry."""

from remedy.detector.rules.base import BaseRule
from remedy.detector.rules.code_quality import (
    AsyncWithoutAwait,
    ConsoleLogInProduction,
    HardcodedPrivateKeys,
    HighComplexity,
    MissingErrorHandling,
    UnusedImports,
)
from remedy.detector.rules.quantum import (
    QuantumDecoherenceRisk,
    QuantumDensity,
    QuantumEntanglementLeak,
    QuantumMeasurementTiming,
    QuantumSuperpositionMisuse,
)

ALL_RULES: list[type[BaseRule]] = [
    QuantumDecoherenceRisk,
    AsyncWithoutAwait,
    QuantumEntanglementLeak,
    ConsoleLogInProduction,
    HardcodedPrivateKeys,
    QuantumSuperpositionMisuse,
    UnusedImports,
    HighComplexity,
    MissingErrorHandling,
    QuantumMeasurementTiming,
    QuantumDensity,
]

__all__ = ["ALL_RULES", "BaseRule"]
