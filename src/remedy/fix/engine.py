"""Fix engine: runs detect, plan, fix and verify over one file's text."""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from remedy.core.config import PlannerConfig
from remedy.core.models import (
    AutoFixSession,
    DetectionResult,
    FixPlan,
    FixResult,
    Issue,
    SessionResult,
    Severity,
    Verification,
)
from remedy.fix.learning import LearningStore
from remedy.fix.planner import FixPlanner
from remedy.fix.selector import StrategySelector
from remedy.fix.strategies import StrategyExecutionFailure, StrategyRegistry
from remedy.fix.verifier import verify

if TYPE_CHECKING:
    from remedy.detector.engine import IssueDetector

logger = logging.getLogger(__name__)

COMPLEXITY_WARNING_THRESHOLD = 20


class DetectorFailure(Exception):
    """The issue detector raised while analysing a file."""

    def __init__(self, file_path: str, cause: BaseException):
        super().__init__(f"Issue detection failed for {file_path}: {cause}")
        self.file_path = file_path
        self.cause = cause


def new_session_id() -> str:
    return f"fix_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class FixEngine:
    """Core engine that plans and applies fixes for a single file per session.

    The learning store is shared by every session run through this engine;
    each session reads a snapshot of it when planning so that outcomes
    recorded during the session only affect later sessions.  ``history``
    keeps every result a strategy returned, keyed by strategy id.
    """

    def __init__(
        self,
        detector: IssueDetector,
        registry: StrategyRegistry | None = None,
        learning: LearningStore | None = None,
        config: PlannerConfig | None = None,
        safety_mode: bool = True,
    ):
        self.detector = detector
        self.registry = registry if registry is not None else StrategyRegistry()
        self.learning = learning if learning is not None else LearningStore()
        self.config = config or PlannerConfig()
        self._safety_mode = safety_mode
        self._learning_enabled = True
        self.history: dict[str, list[FixResult]] = {}

    @property
    def safety_mode(self) -> bool:
        return self._safety_mode

    def set_safety_mode(self, enabled: bool) -> None:
        """Toggle safety mode for sessions started after this call."""
        self._safety_mode = enabled
        logger.info("Safety mode %s", "enabled" if enabled else "disabled")

    @property
    def learning_enabled(self) -> bool:
        return self._learning_enabled

    def set_learning_mode(self, enabled: bool) -> None:
        """Turn recording of fix outcomes in the learning store on or off."""
        self._learning_enabled = enabled
        logger.info("Learning mode %s", "enabled" if enabled else "disabled")

    async def run_session(self, file_path: str, text: str) -> SessionResult:
        """Detect issues in ``text``, fix what is safe, and verify the result.

        Never raises for detector or strategy errors: a detector failure
        yields an aborted session that returns the original text.
        """
        session = AutoFixSession(
            id=new_session_id(),
            file_path=file_path,
            safety_mode=self._safety_mode,
        )
        logger.info("Starting session %s for %s", session.id, file_path)

        try:
            before = await self._detect(file_path, text)
        except DetectorFailure as exc:
            logger.exception("Session %s aborted", session.id)
            return self._aborted(session, text, exc)

        selector = StrategySelector(self.registry, self.learning.snapshot())
        plan = FixPlanner(selector, self.config).plan(before.issues)
        logger.debug(
            "Plan for %s: %d safe, %d risky, %d manual",
            file_path, len(plan.safe), len(plan.risky), len(plan.manual),
        )

        buffer = text
        applied: list[FixResult] = []

        for issue in plan.safe:
            buffer = self._attempt(session, selector, issue, buffer, applied)

        if not session.safety_mode:
            for issue in plan.risky:
                session.risky_fixes += 1
                buffer = self._attempt(session, selector, issue, buffer, applied)

        try:
            after = await self._detect(file_path, buffer)
        except DetectorFailure as exc:
            logger.exception("Session %s aborted", session.id)
            return self._aborted(session, text, exc, plan)

        verification = verify(before.issues, after.issues)
        session.end_time = datetime.now()
        session.summary = _summarize(session, verification)
        logger.info("Session %s finished: %s", session.id, session.summary)

        return SessionResult(
            session=session,
            original_text=text,
            fixed_text=buffer,
            applied_fixes=applied,
            verification=verification,
            recommendations=_recommend(session, applied, verification, after, plan),
            plan=plan,
        )

    async def _detect(self, file_path: str, text: str) -> DetectionResult:
        try:
            return await self.detector.detect_issues(file_path, text)
        except Exception as exc:
            raise DetectorFailure(file_path, exc) from exc

    def _attempt(
        self,
        session: AutoFixSession,
        selector: StrategySelector,
        issue: Issue,
        buffer: str,
        applied: list[FixResult],
    ) -> str:
        """Apply the best strategy for one issue; return the new buffer."""
        session.total_fixes += 1
        strategy = selector.select(issue)
        if strategy is None:
            session.failed_fixes += 1
            return buffer

        base = self.registry.get(strategy.id)
        base_confidence = base.confidence if base else strategy.confidence

        try:
            result = strategy.apply(buffer, issue)
        except StrategyExecutionFailure as exc:
            logger.warning("%s", exc)
            session.failed_fixes += 1
            self._record(strategy.id, issue.rule_id, False, base_confidence)
            return buffer

        self.history.setdefault(strategy.id, []).append(result)
        self._record(strategy.id, issue.rule_id, result.success, base_confidence)
        if not result.success:
            logger.debug("%s did not fix %s: %s", strategy.id, issue.rule_id, result.explanation)
            session.failed_fixes += 1
            return buffer

        logger.debug("%s fixed %s at %s", strategy.id, issue.rule_id, issue.location)
        session.successful_fixes += 1
        applied.append(result)
        return result.fixed_text

    def _record(self, strategy_id: str, rule_id: str, success: bool, base_confidence: float) -> None:
        if self._learning_enabled:
            self.learning.record_outcome(strategy_id, rule_id, success, base_confidence)

    def _aborted(
        self,
        session: AutoFixSession,
        text: str,
        exc: DetectorFailure,
        plan: FixPlan | None = None,
    ) -> SessionResult:
        session.end_time = datetime.now()
        session.error = str(exc)
        session.summary = (
            f"Auto-fix aborted after {session.duration:.1f}s. "
            f"{session.successful_fixes}/{session.total_fixes} fixes succeeded "
            f"before the failure: {exc}"
        )
        return SessionResult(
            session=session,
            original_text=text,
            fixed_text=text,
            verification=Verification(),
            recommendations=["Auto-fix could not complete; review this file manually."],
            plan=plan or FixPlan(),
        )


def _summarize(session: AutoFixSession, verification: Verification) -> str:
    return (
        f"Auto-fix completed in {session.duration:.1f}s. "
        f"{session.successful_fixes}/{session.total_fixes} fixes succeeded "
        f"({session.success_rate:.0f}%). "
        f"{verification.issues_resolved} issues resolved, "
        f"{verification.new_issues_introduced} new issues introduced."
    )


def _recommend(
    session: AutoFixSession,
    applied: list[FixResult],
    verification: Verification,
    after: DetectionResult,
    plan: FixPlan,
) -> list[str]:
    recommendations: list[str] = []

    if any(fix.warnings for fix in applied):
        recommendations.append("Review the warnings of the applied fixes before committing.")

    if verification.regression_detected:
        recommendations.append(
            "Regression detected: the fixes introduced new critical issues; review before applying."
        )

    critical = sum(1 for i in after.issues if i.severity == Severity.CRITICAL)
    if critical:
        recommendations.append(f"{critical} critical issues remain and need immediate attention.")

    if after.metrics.complexity > COMPLEXITY_WARNING_THRESHOLD:
        recommendations.append("Code complexity is still high; consider refactoring.")

    if session.safety_mode and plan.risky:
        recommendations.append(
            f"{len(plan.risky)} risky fixes were skipped in safety mode; rerun with safety mode off to apply them."
        )

    if plan.manual:
        recommendations.append(f"{len(plan.manual)} issues need manual review.")

    return recommendations
