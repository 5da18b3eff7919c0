"""Core result data structures for the scanner."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .severity import Severity

SEVERITY_ORDER: Sequence[Severity] = tuple(sorted(Severity, key=lambda severity: severity.rank, reverse=True))

DIFF_LOCATION = "diff"


@dataclass(frozen=True)
class Finding:
    """Capture a single rule match against a file, a path or the diff."""

    rule_id: str
    severity: Severity
    location: str
    message: str
    category: Optional[str] = None
    owasp: Optional[str] = None
    hint: Optional[str] = None
    # Informational only, e.g. ``src/app.ts:12`` for diff matches.
    detail: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Optional[str]]:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


@dataclass(frozen=True)
class SeverityTally:
    """Finding counts by severity, always derived from a finding list."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @classmethod
    def from_findings(cls, findings: Iterable[Finding]) -> "SeverityTally":
        counts = {severity: 0 for severity in SEVERITY_ORDER}
        for finding in findings:
            counts[finding.severity] += 1
        return cls(
            critical=counts[Severity.CRITICAL],
            high=counts[Severity.HIGH],
            medium=counts[Severity.MEDIUM],
            low=counts[Severity.LOW],
        )

    def count(self, severity: Severity) -> int:
        return getattr(self, severity.value.lower())

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    @property
    def total(self) -> int:
        return sum(self.count(severity) for severity in SEVERITY_ORDER)


@dataclass(frozen=True)
class ScanResult:
    """Bundle the ordered findings and their tally."""

    findings: Tuple[Finding, ...] = ()
    tally: SeverityTally = field(default_factory=SeverityTally)

    def by_severity(self, severity: Severity) -> List[Finding]:
        return [finding for finding in self.findings if finding.severity is severity]

    def to_dict(self) -> Dict[str, object]:
        return {
            "summary": self.tally.to_dict(),
            "findings": [finding.to_dict() for finding in self.findings],
        }


def aggregate(*finding_lists: Iterable[Finding]) -> ScanResult:
    """Merge scanner outputs in the order given and tally them."""

    findings: List[Finding] = []
    for batch in finding_lists:
        findings.extend(batch)
    return ScanResult(findings=tuple(findings), tally=SeverityTally.from_findings(findings))
