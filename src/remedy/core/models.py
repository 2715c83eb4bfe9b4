"""Shared data models used across remedy modules."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime


class Severity(enum.Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Category(enum.Enum):
    SECURITY = "security"
    QUANTUM = "quantum"
    ERROR = "error"
    OPTIMIZATION = "optimization"
    WARNING = "warning"


class Complexity(enum.Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"

    @property
    def weight(self) -> float:
        return _COMPLEXITY_WEIGHTS[self]


_COMPLEXITY_WEIGHTS = {
    Complexity.SIMPLE: 1.0,
    Complexity.MEDIUM: 0.8,
    Complexity.COMPLEX: 0.5,
}


class ChangeKind(enum.Enum):
    ADD = "add"
    REMOVE = "remove"
    MODIFY = "modify"
    MOVE = "move"


@dataclass(frozen=True)
class Issue:
    """A single problem reported by the issue detector."""

    rule_id: str
    severity: Severity
    category: Category
    description: str
    line: int | None = None
    evidence: str = ""
    suggestion: str = ""

    @property
    def location(self) -> str:
        return f"line {self.line}" if self.line else "file"


@dataclass
class IssueMetrics:
    """Whole-file metrics computed alongside detection."""

    lines_of_code: int = 0
    complexity: int = 1
    maintainability_index: int = 100
    duplicated_lines: int = 0
    quality_score: int = 100
    quantum_features: int = 0


@dataclass
class DetectionResult:
    """What the issue detector returns for one file."""

    issues: list[Issue] = field(default_factory=list)
    metrics: IssueMetrics = field(default_factory=IssueMetrics)

    @property
    def critical_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == Severity.CRITICAL)


@dataclass(frozen=True)
class FixChange:
    """Audit record for one edit made by a transform."""

    kind: ChangeKind
    line_number: int
    description: str
    before: str | None = None
    after: str | None = None


@dataclass
class FixResult:
    """Outcome of running one strategy against one issue."""

    success: bool
    original_text: str
    fixed_text: str
    changes: list[FixChange] = field(default_factory=list)
    confidence: float = 0.0
    explanation: str = ""
    warnings: list[str] = field(default_factory=list)
    strategy_id: str = ""
    rule_id: str = ""


@dataclass
class FixPlan:
    """Risk-based partition of a session's issues."""

    safe: list[Issue] = field(default_factory=list)
    risky: list[Issue] = field(default_factory=list)
    manual: list[Issue] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.safe) + len(self.risky) + len(self.manual)


@dataclass
class AutoFixSession:
    """Counters and timing for one remediation run over one file."""

    id: str
    file_path: str
    start_time: datetime = field(default_factory=datetime.now)
    end_time: datetime | None = None
    total_fixes: int = 0
    successful_fixes: int = 0
    failed_fixes: int = 0
    risky_fixes: int = 0
    safety_mode: bool = True
    summary: str = ""
    error: str | None = None

    @property
    def finished(self) -> bool:
        return self.end_time is not None

    @property
    def duration(self) -> float:
        end = self.end_time or datetime.now()
        return (end - self.start_time).total_seconds()

    @property
    def success_rate(self) -> float:
        if not self.total_fixes:
            return 0.0
        return self.successful_fixes / self.total_fixes * 100


@dataclass
class Verification:
    """Before/after comparison of detected issues."""

    new_issues_introduced: int = 0
    issues_resolved: int = 0
    regression_detected: bool = False
    overall_improvement: bool = False


@dataclass
class SessionResult:
    """Everything a session produces for the reporting layer."""

    session: AutoFixSession
    original_text: str
    fixed_text: str
    applied_fixes: list[FixResult] = field(default_factory=list)
    verification: Verification = field(default_factory=Verification)
    recommendations: list[str] = field(default_factory=list)
    plan: FixPlan = field(default_factory=FixPlan)

    @property
    def changed(self) -> bool:
        return self.fixed_text != self.original_text


@dataclass
class LearningEntry:
    """Running outcome statistics for one (strategy, rule) pair."""

    strategy_id: str
    rule_id: str
    attempts: int = 0
    successes: int = 0
    confidence: float = 0.0
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def success_rate(self) -> float:
        if not self.attempts:
            return 0.0
        return self.successes / self.attempts
