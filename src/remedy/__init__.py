"""remedy: automatic issue remediation with learned fix confidence."""

from remedy._version import __version__
from remedy.core.models import AutoFixSession, FixResult, Issue, SessionResult
from remedy.detector import IssueDetector, PatternDetector
from remedy.fix.engine import DetectorFailure, FixEngine
from remedy.fix.learning import LearningStore
from remedy.fix.strategies import FixStrategy, StrategyExecutionFailure, StrategyRegistry

__all__ = [
    "__version__",
    "AutoFixSession",
    "DetectorFailure",
    "FixEngine",
    "FixResult",
    "FixStrategy",
    "Issue",
    "IssueDetector",
    "LearningStore",
    "PatternDetector",
    "SessionResult",
    "StrategyExecutionFailure",
    "StrategyRegistry",
]
