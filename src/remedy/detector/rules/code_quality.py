"""Error handling, security and optimization rules."""

from __future__ import annotations

import re

from remedy.core.models import Category, Issue, Severity
from remedy.core.text import is_referenced, line_at
from remedy.detector.rules.base import BaseRule, PatternRule


class AsyncWithoutAwait(PatternRule):
    rule_id = "async_without_await"
    name = "Async function without await"
    category = Category.ERROR
    severity = Severity.MEDIUM
    description = "Async function never awaits and could be synchronous"
    suggestion = "Remove async or await where needed"
    pattern = re.compile(r"\basync\s+function[^{]*\{(?![^}]*\bawait\b)[^}]*\}")


class MissingErrorHandling(PatternRule):
    rule_id = "missing_error_handling"
    name = "Missing error handling"
    category = Category.ERROR
    severity = Severity.MEDIUM
    description = "Awaited operation without error handling"
    suggestion = "Add try/catch to handle potential errors"
    pattern = re.compile(r"\bawait\s+[^;]+;(?![^}]*\}\s*catch)")


class ConsoleLogInProduction(PatternRule):
    rule_id = "console_log_in_production"
    name = "console.log in production"
    category = Category.OPTIMIZATION
    severity = Severity.LOW
    description = "Avoid console.log in production code"
    suggestion = "Use a configurable logging system"
    pattern = re.compile(r"console\.log\(")
    per_file = True


class HardcodedPrivateKeys(PatternRule):
    rule_id = "hardcoded_private_keys"
    name = "Hardcoded private keys"
    category = Category.SECURITY
    severity = Severity.CRITICAL
    description = "Possible private key or secret in source"
    suggestion = "Move secrets to environment variables"
    pattern = re.compile(
        r"(?:private[_-]?key|secret|password|token)\s*[:=]\s*['\"`][a-zA-Z0-9+/=]{20,}['\"`]",
        re.IGNORECASE,
    )
    per_file = True


class UnusedImports(BaseRule):
    """Named imports with at least one binding never referenced again."""

    rule_id = "unused_imports"
    name = "Unused imports"
    category = Category.OPTIMIZATION
    severity = Severity.LOW
    description = "Imports that are not used in the file"
    suggestion = "Remove unneeded imports to reduce bundle size"

    _named_import = re.compile(r"import\s+\{([^}]+)\}\s+from")

    def run(self, content: str) -> list[Issue]:
        lines = content.split("\n")
        for index, line in enumerate(lines):
            match = self._named_import.search(line)
            if not match:
                continue
            rest = "\n".join(lines[:index] + lines[index + 1:])
            for spec in match.group(1).split(","):
                if spec.strip() and not is_referenced(spec.split()[-1], rest):
                    return [self._make_issue(evidence=line.strip())]
        return []


class HighComplexity(BaseRule):
    """Function bodies with too many branches."""

    rule_id = "high_complexity"
    name = "High cyclomatic complexity"
    category = Category.OPTIMIZATION
    severity = Severity.MEDIUM
    description = "Function has too much cyclomatic complexity"
    suggestion = "Refactor into smaller functions"

    _function = re.compile(r"function[^{]*\{[^}]*\}")
    _branch = re.compile(r"\b(?:if|for|while|switch|case)\b|\?")

    def __init__(self, max_branches: int = 10):
        self.max_branches = max_branches

    def run(self, content: str) -> list[Issue]:
        for match in self._function.finditer(content):
            if len(self._branch.findall(match.group(0))) > self.max_branches:
                return [self._make_issue(
                    line=line_at(content, match.start()),
                    evidence=match.group(0).split("\n", 1)[0].strip(),
                )]
        return []
