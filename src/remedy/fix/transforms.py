"""Text transforms backing the built-in fix strategies.

Every transform takes the current buffer and the issue being fixed and returns
a :class:`FixResult`.  Transforms are pure: the result depends only on the two
arguments, never on the clock or on session state.  When a transform finds
nothing to rewrite it returns ``success=False`` with the buffer untouched and
no changes.

Text is split on ``"\\n"`` (not ``splitlines``) so that joining the lines back
restores the buffer byte for byte.  Line numbers recorded in :class:`FixChange`
refer to the text the transform received.
"""

from __future__ import annotations

import enum
import re
from typing import Callable

from remedy.core.models import ChangeKind, FixChange, FixResult, Issue
from remedy.core.text import is_referenced, line_at

PROTECTION_IMPORT = "import { measureQuantumWithProtection } from '../quantum/quantum-protection'"
LOGGER_IMPORT = "import { logger } from '../utils/logger'"
ENV_PLACEHOLDER = "REPLACE_WITH_ENV_VAR"


class TransformKind(enum.Enum):
    ADD_ERROR_HANDLING = "add_error_handling"
    REMOVE_REDUNDANT_ASYNC = "remove_redundant_async"
    PROTECT_MEASUREMENT = "protect_measurement"
    BIND_ENTANGLEMENT = "bind_entanglement"
    REPLACE_CONSOLE_LOG = "replace_console_log"
    EXTERNALIZE_SECRETS = "externalize_secrets"
    COLLAPSE_SUPERPOSITION = "collapse_superposition"
    PRUNE_IMPORTS = "prune_imports"
    ANNOTATE_COMPLEXITY = "annotate_complexity"
    DEFER_MEASUREMENT = "defer_measurement"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _no_match(text: str, explanation: str) -> FixResult:
    return FixResult(
        success=False,
        original_text=text,
        fixed_text=text,
        changes=[],
        confidence=0.0,
        explanation=explanation,
    )


def _locate(lines: list[str], issue: Issue, matches: Callable[[int], bool]) -> int | None:
    """0-based index of the line an issue refers to, or None.

    Earlier fixes in the same session can shift lines, so the reported line is
    a hint: the nearest line that satisfies ``matches`` and contains the
    issue's evidence wins.
    """
    if issue.line is None:
        return None
    marker = issue.evidence.split("\n", 1)[0].strip()
    target = issue.line - 1
    candidates = [
        i for i, line in enumerate(lines)
        if matches(i) and (not marker or marker in line)
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda i: (abs(i - target), i))


def _indent(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

def add_error_handling(text: str, issue: Issue) -> FixResult:
    """Wrap the awaited statement at the issue's line in try/catch."""
    lines = text.split("\n")

    def _unwrapped_await(i: int) -> bool:
        return "await" in lines[i] and not (i > 0 and lines[i - 1].strip() == "try {")

    index = _locate(lines, issue, _unwrapped_await)
    if index is None:
        return _no_match(text, "No unhandled awaited statement at the reported line")

    line = lines[index]
    indent = _indent(line)
    block = [
        f"{indent}try {{",
        f"{indent}  {line.strip()}",
        f"{indent}}} catch (error) {{",
        f"{indent}  console.error('Async operation failed:', error)",
        f"{indent}  throw error",
        f"{indent}}}",
    ]
    lines[index:index + 1] = block

    return FixResult(
        success=True,
        original_text=text,
        fixed_text="\n".join(lines),
        changes=[FixChange(
            kind=ChangeKind.ADD,
            line_number=index + 1,
            before=line,
            after="\n".join(block),
            description="Wrapped awaited statement in try/catch",
        )],
        confidence=0.9,
        explanation="Added error handling around async operation",
    )


_ASYNC_FUNCTION = re.compile(r"\basync\s+function\b")


def remove_redundant_async(text: str, issue: Issue) -> FixResult:
    """Drop the ``async`` keyword from a function that never awaits."""
    lines = text.split("\n")
    index = _locate(lines, issue, lambda i: bool(_ASYNC_FUNCTION.search(lines[i])))
    if index is None:
        return _no_match(text, "No async function declaration at the reported line")

    line = lines[index]
    new_line = _ASYNC_FUNCTION.sub("function", line, count=1)
    lines[index] = new_line

    return FixResult(
        success=True,
        original_text=text,
        fixed_text="\n".join(lines),
        changes=[FixChange(
            kind=ChangeKind.MODIFY,
            line_number=index + 1,
            before=line,
            after=new_line,
            description="Removed async from function without await",
        )],
        confidence=0.85,
        explanation="Function declared async but never awaits; made it synchronous",
        warnings=["Callers that rely on a returned Promise must be checked"],
    )


# ---------------------------------------------------------------------------
# Quantum operations
# ---------------------------------------------------------------------------

_MEASURE_QUANTUM = re.compile(r"(?:await\s+)?\bmeasureQuantum\(")


def protect_measurement(text: str, issue: Issue) -> FixResult:
    """Route a raw quantum measurement through the decoherence-safe helper."""
    lines = text.split("\n")
    index = _locate(lines, issue, lambda i: bool(_MEASURE_QUANTUM.search(lines[i])))
    if index is None:
        return _no_match(text, "No measureQuantum() call at the reported line")

    line = lines[index]
    new_line = _MEASURE_QUANTUM.sub("await measureQuantumWithProtection(", line, count=1)
    lines[index] = new_line
    changes = [FixChange(
        kind=ChangeKind.MODIFY,
        line_number=index + 1,
        before=line,
        after=new_line,
        description="Replaced quantum measurement with decoherence-protected call",
    )]

    if "measureQuantumWithProtection" not in text:
        lines.insert(0, PROTECTION_IMPORT)
        changes.append(FixChange(
            kind=ChangeKind.ADD,
            line_number=1,
            after=PROTECTION_IMPORT,
            description="Imported measureQuantumWithProtection",
        ))

    return FixResult(
        success=True,
        original_text=text,
        fixed_text="\n".join(lines),
        changes=changes,
        confidence=0.85,
        explanation="Added protection against quantum decoherence",
    )


_BARE_ENTANGLE = re.compile(r"^([ \t]*)entangle\(([^)]+)\);", re.MULTILINE)
_ENTANGLEMENT_NAME = re.compile(r"\bentanglement_(\d+)\b")


def bind_entanglement(text: str, issue: Issue) -> FixResult:
    """Bind bare ``entangle(...)`` statements so they can be released."""
    taken = [int(n) for n in _ENTANGLEMENT_NAME.findall(text)]
    counter = max(taken, default=0)
    changes: list[FixChange] = []

    def _bind(match: re.Match[str]) -> str:
        nonlocal counter
        counter += 1
        indent, args = match.group(1), match.group(2)
        name = f"entanglement_{counter}"
        replacement = (
            f"{indent}const {name} = entangle({args});\n"
            f"{indent}// Release {name} once the operation completes:\n"
            f"{indent}// {name}.release();"
        )
        changes.append(FixChange(
            kind=ChangeKind.MODIFY,
            line_number=line_at(text, match.start()),
            before=match.group(0),
            after=replacement,
            description=f"Bound entanglement to {name} with release reminder",
        ))
        return replacement

    fixed = _BARE_ENTANGLE.sub(_bind, text)
    if not changes:
        return _no_match(text, "No unbound entangle() statements found")

    return FixResult(
        success=True,
        original_text=text,
        fixed_text=fixed,
        changes=changes,
        confidence=0.8,
        explanation="Added release reminders for entanglements",
        warnings=["Review where each entanglement should be released"],
    )


_DOUBLE_COLLAPSE = re.compile(r"superposition\s*\.\s*collapse\(\)(?:\s*\.\s*collapse\(\))+")
_MEASURE_AFTER_COLLAPSE = re.compile(r"superposition\s*\.\s*collapse\(\)\s*\.\s*measure\(\)")


def collapse_superposition(text: str, issue: Issue) -> FixResult:
    """Remove repeated collapses and measurements of a collapsed state."""
    changes: list[FixChange] = []

    def _rewrite(source: str, replacement: str, description: str):
        def _sub(match: re.Match[str]) -> str:
            changes.append(FixChange(
                kind=ChangeKind.MODIFY,
                line_number=line_at(source, match.start()),
                before=match.group(0),
                after=replacement,
                description=description,
            ))
            return replacement
        return _sub

    fixed = _DOUBLE_COLLAPSE.sub(
        _rewrite(text, "superposition.collapse()", "Removed repeated collapse"), text,
    )
    fixed = _MEASURE_AFTER_COLLAPSE.sub(
        _rewrite(
            fixed,
            "superposition.collapse() /* already measured during collapse */",
            "Removed measurement of collapsed superposition",
        ),
        fixed,
    )

    if not changes:
        return _no_match(text, "No misuse of collapsed superposition found")

    return FixResult(
        success=True,
        original_text=text,
        fixed_text=fixed,
        changes=changes,
        confidence=0.75,
        explanation="Corrected operations on collapsed superposition states",
    )


_TIMING_LINE = re.compile(r"measure\([^)]*\).*(?:entangle|superpose)")
_MEASURE_CALL = re.compile(r"\bmeasure\(")
_QUANTUM_OP = re.compile(r"\b(?:entangle|superpose)\(")


def _is_measurement(statement: str) -> bool:
    return bool(_MEASURE_CALL.search(statement)) and not _QUANTUM_OP.search(statement)


def defer_measurement(text: str, issue: Issue) -> FixResult:
    """Move measurements behind the entangle/superpose calls on the same line."""
    lines = text.split("\n")
    changes: list[FixChange] = []

    for index, line in enumerate(lines):
        if "//" in line or not _TIMING_LINE.search(line):
            continue
        statements = [s.strip() for s in line.split(";") if s.strip()]
        measures = [s for s in statements if _is_measurement(s)]
        others = [s for s in statements if not _is_measurement(s)]
        if not measures or not others:
            continue

        new_line = _indent(line) + "; ".join(others + measures) + ";"
        if new_line == line:
            continue
        lines[index] = new_line
        changes.append(FixChange(
            kind=ChangeKind.MOVE,
            line_number=index + 1,
            before=line,
            after=new_line,
            description="Moved measurement after quantum operations",
        ))

    if not changes:
        return _no_match(text, "No measurement precedes a quantum operation")

    return FixResult(
        success=True,
        original_text=text,
        fixed_text="\n".join(lines),
        changes=changes,
        confidence=0.8,
        explanation="Reordered quantum operations so measurement happens last",
    )


# ---------------------------------------------------------------------------
# Logging, secrets, imports, complexity
# ---------------------------------------------------------------------------

_CONSOLE_LOG = re.compile(r"console\.log\(")


def replace_console_log(text: str, issue: Issue) -> FixResult:
    """Replace ``console.log(`` with ``logger.debug(`` across the buffer."""
    lines = text.split("\n")
    changes: list[FixChange] = []
    count = 0

    for index, line in enumerate(lines):
        hits = len(_CONSOLE_LOG.findall(line))
        if not hits:
            continue
        count += hits
        new_line = _CONSOLE_LOG.sub("logger.debug(", line)
        lines[index] = new_line
        changes.append(FixChange(
            kind=ChangeKind.MODIFY,
            line_number=index + 1,
            before=line,
            after=new_line,
            description="Replaced console.log with logger.debug",
        ))

    if not count:
        return _no_match(text, "No console.log calls found")

    fixed = "\n".join(lines)
    if "import" not in text and "logger" not in text:
        fixed = f"{LOGGER_IMPORT}\n\n{fixed}"
        changes.append(FixChange(
            kind=ChangeKind.ADD,
            line_number=1,
            after=LOGGER_IMPORT,
            description="Imported logger",
        ))

    return FixResult(
        success=True,
        original_text=text,
        fixed_text=fixed,
        changes=changes,
        confidence=0.95,
        explanation=f"Replaced {count} console.log call(s) with logger.debug",
    )


_SECRET_ASSIGNMENT = re.compile(r"(\w+)(\s*)([:=])\s*['\"`]([a-zA-Z0-9+/=]{20,})['\"`]")


def externalize_secrets(text: str, issue: Issue) -> FixResult:
    """Swap long literal secrets for environment variable lookups."""
    changes: list[FixChange] = []

    def _replace(match: re.Match[str]) -> str:
        name, gap, sep = match.group(1), match.group(2), match.group(3)
        env_name = name.upper()
        if sep == ":":
            replacement = f"{name}: process.env.{env_name} || '{ENV_PLACEHOLDER}'"
        else:
            replacement = f"{name}{gap}= process.env.{env_name} || '{ENV_PLACEHOLDER}'"
        changes.append(FixChange(
            kind=ChangeKind.MODIFY,
            line_number=line_at(text, match.start()),
            before=match.group(0),
            after=replacement,
            description=f"Moved secret {name} to environment variable {env_name}",
        ))
        return replacement

    fixed = _SECRET_ASSIGNMENT.sub(_replace, text)
    if not changes:
        return _no_match(text, "No hardcoded secret literals found")

    return FixResult(
        success=True,
        original_text=text,
        fixed_text=fixed,
        changes=changes,
        confidence=0.7,
        explanation="Moved secrets to environment variables",
        warnings=["Set the corresponding environment variables before deploying"],
    )


_NAMED_IMPORT = re.compile(r"import\s+\{([^}]+)\}\s+from")


def _local_name(spec: str) -> str:
    """Name an import binds locally: ``a as b`` -> ``b``, ``type X`` -> ``X``."""
    return spec.split()[-1]


def prune_imports(text: str, issue: Issue) -> FixResult:
    """Drop named imports whose binding is not referenced anywhere else."""
    lines: list[str | None] = list(text.split("\n"))
    changes: list[FixChange] = []
    removed = 0

    for index, line in enumerate(lines):
        if line is None:
            continue
        match = _NAMED_IMPORT.search(line)
        if not match:
            continue
        names = [n.strip() for n in match.group(1).split(",") if n.strip()]
        rest = "\n".join(l for i, l in enumerate(lines) if i != index and l is not None)
        used = [n for n in names if is_referenced(_local_name(n), rest)]
        if len(used) == len(names):
            continue

        removed += len(names) - len(used)
        if used:
            new_line = f"{line[:match.start(1)]} {', '.join(used)} {line[match.end(1):]}"
            lines[index] = new_line
            changes.append(FixChange(
                kind=ChangeKind.MODIFY,
                line_number=index + 1,
                before=line,
                after=new_line,
                description=f"Removed {len(names) - len(used)} unused import(s)",
            ))
        else:
            lines[index] = None
            changes.append(FixChange(
                kind=ChangeKind.REMOVE,
                line_number=index + 1,
                before=line,
                description="Removed import with no used bindings",
            ))

    if not removed:
        return _no_match(text, "No unused named imports found")

    return FixResult(
        success=True,
        original_text=text,
        fixed_text="\n".join(l for l in lines if l is not None),
        changes=changes,
        confidence=0.9,
        explanation=f"Removed {removed} unused import(s)",
    )


def annotate_complexity(text: str, issue: Issue) -> FixResult:
    """Leave refactoring guidance above an overly complex function."""
    lines = text.split("\n")
    index = _locate(lines, issue, lambda i: True)
    if index is None:
        return _no_match(text, "Complexity issue has no line to annotate")

    indent = _indent(lines[index])
    notes = [
        f"{indent}// REFACTOR: high cyclomatic complexity detected here",
        f"{indent}// Consider splitting this function into smaller ones",
    ]
    lines[index:index] = notes

    return FixResult(
        success=True,
        original_text=text,
        fixed_text="\n".join(lines),
        changes=[FixChange(
            kind=ChangeKind.ADD,
            line_number=index + 1,
            after="\n".join(notes),
            description="Added refactoring guidance comments",
        )],
        confidence=0.5,
        explanation="Added comments to guide manual refactoring",
        warnings=["This function needs manual refactoring to reduce its complexity"],
    )


TRANSFORMS: dict[TransformKind, Callable[[str, Issue], FixResult]] = {
    TransformKind.ADD_ERROR_HANDLING: add_error_handling,
    TransformKind.REMOVE_REDUNDANT_ASYNC: remove_redundant_async,
    TransformKind.PROTECT_MEASUREMENT: protect_measurement,
    TransformKind.BIND_ENTANGLEMENT: bind_entanglement,
    TransformKind.REPLACE_CONSOLE_LOG: replace_console_log,
    TransformKind.EXTERNALIZE_SECRETS: externalize_secrets,
    TransformKind.COLLAPSE_SUPERPOSITION: collapse_superposition,
    TransformKind.PRUNE_IMPORTS: prune_imports,
    TransformKind.ANNOTATE_COMPLEXITY: annotate_complexity,
    TransformKind.DEFER_MEASUREMENT: defer_measurement,
}
