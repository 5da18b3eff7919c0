from commitgate.gate import Decision, decide
from commitgate.report import format_catalog, format_report
from commitgate.result import Finding, aggregate
from commitgate.rules import default_catalog
from commitgate.severity import Severity


def _finding(severity, location="a.js", **kwargs):
    return Finding(
        rule_id=kwargs.pop("rule_id", "test.rule"),
        severity=severity,
        location=location,
        message=kwargs.pop("message", f"{severity.value.lower()} issue"),
        **kwargs,
    )


def test_groups_follow_severity_order():
    result = aggregate(
        [_finding(Severity.LOW), _finding(Severity.CRITICAL, owasp="A03:2021")],
        [_finding(Severity.MEDIUM, location="diff")],
    )

    report = format_report(result, decide(result.tally))

    assert report.startswith("Security Scan Summary")
    assert report.index("CRITICAL (1):") < report.index("MEDIUM (1):") < report.index("LOW (1):")
    assert "HIGH (" not in report
    assert "  a.js - critical issue [A03:2021]" in report
    assert "  diff - medium issue" in report
    assert "Total: 3 issues (critical 1, high 0, medium 1, low 1)" in report
    assert "Status    : FAIL" in report
    assert "Security check FAILED" in report


def test_status_lines():
    warnings = aggregate([_finding(Severity.MEDIUM)])
    lows = aggregate([_finding(Severity.LOW)])
    clean = aggregate()

    assert "passed with warnings" in format_report(warnings, Decision.PASS_WITH_WARNINGS)
    assert "minor improvements suggested" in format_report(lows, Decision.PASS)
    clean_report = format_report(clean, Decision.PASS)
    assert "No security issues detected" in clean_report
    assert "Total: 0 issues" in clean_report


def test_verbose_adds_rule_location_and_hint():
    finding = _finding(
        Severity.HIGH,
        location="diff",
        rule_id="crypto.sensitive-storage",
        category="crypto",
        hint="Keep tokens in httpOnly cookies",
        detail="src/lib/session.ts:2",
    )
    result = aggregate([finding])

    quiet = format_report(result, Decision.FAIL)
    verbose = format_report(result, Decision.FAIL, verbose=True)

    assert "hint:" not in quiet
    assert "rule: crypto.sensitive-storage category: crypto" in verbose
    assert "at: src/lib/session.ts:2" in verbose
    assert "hint: Keep tokens in httpOnly cookies" in verbose


def test_catalog_listing_covers_every_rule():
    catalog = default_catalog()

    listing = format_catalog(catalog).splitlines()

    assert len(listing) == len(catalog) + 2
    assert any(line.startswith("runtime.dynamic-execution ") for line in listing)
