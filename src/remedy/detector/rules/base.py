"""Base classes for detector rules."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from remedy.core.models import Category, Issue, Severity
from remedy.core.text import line_at


class BaseRule(ABC):
    """Abstract base class for all detector rules."""

    rule_id: str = ""
    name: str = ""
    category: Category = Category.WARNING
    severity: Severity = Severity.LOW
    description: str = ""
    suggestion: str = ""

    @abstractmethod
    def run(self, content: str) -> list[Issue]:
        """Run the rule on one file's text. Return list of issues."""
        ...

    def _make_issue(self, line: int | None = None, evidence: str = "") -> Issue:
        """Helper to create an Issue with this rule's defaults."""
        return Issue(
            rule_id=self.rule_id,
            severity=self.severity,
            category=self.category,
            description=f"{self.name}: {self.description}",
            line=line,
            evidence=evidence,
            suggestion=self.suggestion,
        )


class PatternRule(BaseRule):
    """A rule that reports regex matches.

    By default every match is its own issue.  Rules whose fix rewrites the
    whole file set ``per_file`` and report a single issue at the first match.
    """

    pattern: re.Pattern[str]
    per_file: bool = False

    def run(self, content: str) -> list[Issue]:
        matches = list(self.pattern.finditer(content))
        if self.per_file and matches:
            first = matches[0]
            evidence = first.group(0).strip()
            if len(matches) > 1:
                evidence = f"{evidence} (+{len(matches) - 1} more)"
            return [self._make_issue(line=line_at(content, first.start()), evidence=evidence)]
        return [
            self._make_issue(line=line_at(content, m.start()), evidence=m.group(0).strip())
            for m in matches
        ]
