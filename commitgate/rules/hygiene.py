"""Debug leftovers and work markers in added lines."""

from __future__ import annotations

from commitgate.severity import Severity

from . import Scope, define

RULES = (
    define(
        "hygiene.debugger",
        r"^[^/]*\bdebugger\b",
        "debugger statement added ({count} occurrence(s))",
        severity=Severity.HIGH,
        scope=Scope.DIFF_ADDED_LINE,
        category="debug",
        hint="Remove 'debugger' before committing",
        unless=r"""//|/\*|no-debugger|['"]debugger['"]""",
        count_occurrences=True,
    ),
    define(
        "hygiene.console-log",
        r"console\.(?:log|debug)\b",
        "console.log statement added ({count} occurrence(s))",
        severity=Severity.MEDIUM,
        scope=Scope.DIFF_ADDED_LINE,
        category="debug",
        hint="Consider using a proper logger or removing debug logs",
        unless=r"//|/\*|logger",
        count_occurrences=True,
    ),
    define(
        "hygiene.todo",
        r"\b(?:TODO|FIXME|HACK|XXX):",
        "Found {count} TODO/FIXME comment(s)",
        severity=Severity.LOW,
        scope=Scope.DIFF_ADDED_LINE,
        category="maintainability",
        hint="Consider creating issues for important TODOs",
        count_occurrences=True,
    ),
)
