"""Human-readable rendering of scan results."""

from __future__ import annotations

from typing import Dict, List

from .gate import Decision
from .result import SEVERITY_ORDER, Finding, ScanResult
from .rules import RuleCatalog

STATUS_MESSAGES: Dict[Decision, str] = {
    Decision.FAIL: "Security check FAILED - fix critical/high issues before committing",
    Decision.PASS_WITH_WARNINGS: "Security check passed with warnings - review medium issues",
}


def _status_line(result: ScanResult, decision: Decision) -> str:
    if decision in STATUS_MESSAGES:
        return STATUS_MESSAGES[decision]
    if result.tally.low > 0:
        return "Security check passed - minor improvements suggested"
    return "No security issues detected"


def _finding_line(finding: Finding) -> str:
    tag = f" [{finding.owasp}]" if finding.owasp else ""
    return f"  {finding.location} - {finding.message}{tag}"


def format_report(result: ScanResult, decision: Decision, verbose: bool = False) -> str:
    """Group findings by severity, then print totals and the gate status."""

    lines: List[str] = []
    lines.append("Security Scan Summary")
    lines.append("=" * 40)
    for severity in SEVERITY_ORDER:
        findings = result.by_severity(severity)
        if not findings:
            continue
        lines.append("")
        lines.append(f"{severity.value} ({len(findings)}):")
        for finding in findings:
            lines.append(_finding_line(finding))
            if verbose:
                lines.append(f"    rule: {finding.rule_id} category: {finding.category or '-'}")
                if finding.detail:
                    lines.append(f"    at: {finding.detail}")
                if finding.hint:
                    lines.append(f"    hint: {finding.hint}")

    tally = result.tally
    lines.append("")
    lines.append("-" * 40)
    lines.append(
        f"Total: {tally.total} issues "
        f"(critical {tally.critical}, high {tally.high}, medium {tally.medium}, low {tally.low})"
    )
    lines.append("-" * 40)
    lines.append(f"Status    : {decision.value}")
    lines.append(_status_line(result, decision))
    return "\n".join(lines)


def format_catalog(catalog: RuleCatalog) -> str:
    """List every rule in catalog order."""

    lines = [f"{'Rule':<44} {'Scope':<5} {'Severity':<9} Category"]
    lines.append("-" * len(lines[0]))
    for rule in catalog:
        lines.append(f"{rule.id:<44} {rule.scope.value:<5} {rule.severity.value:<9} {rule.category or '-'}")
    return "\n".join(lines)
