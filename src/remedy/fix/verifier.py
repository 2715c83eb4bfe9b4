"""Compare issue sets before and after fixing."""

from __future__ import annotations

from collections.abc import Sequence

from remedy.core.models import Issue, Severity, Verification


def verify(before: Sequence[Issue], after: Sequence[Issue]) -> Verification:
    """Classify a session as improving, neutral or regressive.

    Issues are matched by rule id only.  An issue counts as new when no issue
    of the same rule existed before, so a second occurrence of an already
    reported rule is never "introduced", and distinct occurrences can be
    misattributed as resolved.
    """
    known_rules = {issue.rule_id for issue in before}
    new_issues = [issue for issue in after if issue.rule_id not in known_rules]

    return Verification(
        new_issues_introduced=len(new_issues),
        issues_resolved=max(0, len(before) - len(after) + len(new_issues)),
        regression_detected=any(i.severity == Severity.CRITICAL for i in new_issues),
        overall_improvement=len(before) > len(after),
    )
