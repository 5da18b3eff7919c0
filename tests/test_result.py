from commitgate.result import SEVERITY_ORDER, Finding, SeverityTally, aggregate
from commitgate.severity import Severity


def _finding(rule_id, severity, location="a.ts"):
    return Finding(rule_id=rule_id, severity=severity, location=location, message=rule_id)


def test_aggregate_preserves_input_order_and_tallies():
    files = [_finding("one", Severity.CRITICAL), _finding("two", Severity.LOW, "b.ts")]
    diff = [_finding("three", Severity.LOW, "diff")]

    result = aggregate(files, [], diff)

    assert [finding.rule_id for finding in result.findings] == ["one", "two", "three"]
    assert result.tally == SeverityTally(critical=1, high=0, medium=0, low=2)
    assert result.tally.total == 3


def test_tally_counts_follow_severity_order():
    tally = SeverityTally(critical=1, high=2, medium=3, low=4)

    assert [tally.count(severity) for severity in SEVERITY_ORDER] == [1, 2, 3, 4]
    assert tally.total == 10


def test_detail_is_not_part_of_finding_identity():
    first = Finding(rule_id="r", severity=Severity.HIGH, location="diff", message="m", detail="a.ts:1")
    second = Finding(rule_id="r", severity=Severity.HIGH, location="diff", message="m", detail="b.ts:9")

    assert first == second


def test_to_dict_serialises_severity_value():
    result = aggregate([_finding("one", Severity.MEDIUM)])

    data = result.to_dict()

    assert data["summary"]["medium"] == 1
    assert data["findings"][0]["severity"] == "MEDIUM"
    assert data["findings"][0]["location"] == "a.ts"


def test_severity_ranks_are_totally_ordered():
    ranks = [severity.rank for severity in (Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW)]

    assert ranks == sorted(ranks, reverse=True)
    assert len(set(ranks)) == 4


def test_only_critical_and_high_block_commits():
    assert [severity for severity in Severity if severity.blocks_commit] == [Severity.CRITICAL, Severity.HIGH]
    assert Severity.LOW.rank == 0
