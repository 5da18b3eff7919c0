import pytest

from commitgate.rules import (
    PathFilter,
    RuleCatalog,
    RuleDefinitionError,
    Scope,
    default_catalog,
    define,
)
from commitgate.severity import Severity


def test_invalid_pattern_fails_at_definition():
    with pytest.raises(RuleDefinitionError, match="broken.rule"):
        define("broken.rule", r"eval\(", "message", severity=Severity.HIGH, unless=r"(unclosed")


def test_invalid_alternative_fails_at_definition():
    with pytest.raises(RuleDefinitionError):
        define(
            "broken.alternatives",
            [(r"fine", "ok"), (r"[", "bad")],
            severity=Severity.LOW,
        )


def test_rule_without_patterns_is_rejected():
    with pytest.raises(RuleDefinitionError):
        define("empty", [], severity=Severity.LOW)


def test_diff_rule_cannot_filter_on_path():
    with pytest.raises(RuleDefinitionError):
        define(
            "diff.filtered",
            r"x",
            "x",
            severity=Severity.LOW,
            scope=Scope.DIFF_ADDED_LINE,
            applies_to=PathFilter(suffixes=(".ts",)),
        )


def test_duplicate_ids_are_rejected():
    rule = define("dup", r"x", "x", severity=Severity.LOW)

    with pytest.raises(RuleDefinitionError, match="duplicate"):
        RuleCatalog([rule, rule])


def test_rules_for_filters_by_scope_and_path_in_catalog_order():
    tsx_only = define("a.tsx", r"x", "x", severity=Severity.LOW, applies_to=PathFilter(suffixes=(".tsx",)))
    anywhere = define("b.any", r"x", "x", severity=Severity.LOW)
    diff = define("c.diff", r"x", "x", severity=Severity.LOW, scope=Scope.DIFF_ADDED_LINE)
    catalog = RuleCatalog([tsx_only, anywhere, diff])

    assert [rule.id for rule in catalog.rules_for(Scope.FILE_CONTENT, "src/page.tsx")] == ["a.tsx", "b.any"]
    assert [rule.id for rule in catalog.rules_for(Scope.FILE_CONTENT, "src/util.ts")] == ["b.any"]
    assert [rule.id for rule in catalog.rules_for(Scope.DIFF_ADDED_LINE)] == ["c.diff"]


def test_path_filter_combines_suffix_contains_and_excludes():
    api_routes = PathFilter(suffixes=("route.ts",), contains=("/api/",), excludes=("/internal/",))

    assert api_routes.matches("src/app/api/users/route.ts")
    assert not api_routes.matches("src/app/users/route.ts")
    assert not api_routes.matches("src/app/api/users/page.tsx")
    assert not api_routes.matches("src/app/api/internal/route.ts")


def test_first_match_uses_first_matching_alternative():
    rule = define(
        "alts",
        [(r"alpha", "first"), (r"beta", "second")],
        severity=Severity.MEDIUM,
    )

    matcher, match = rule.first_match("beta then alpha")

    assert matcher.message == "first"
    assert match.group(0) == "alpha"


def test_requires_and_unless_gate_the_match():
    rule = define(
        "gated",
        r"\.insert\(",
        "mutation without auth",
        severity=Severity.HIGH,
        requires=(r"use server",),
        unless=r"getUser",
    )

    assert rule.first_match("db.insert(x)") is None
    assert rule.first_match("'use server'\ndb.insert(x)") is not None
    assert rule.first_match("'use server'\nawait getUser()\ndb.insert(x)") is None


def test_rules_are_immutable():
    rule = define("frozen", r"x", "x", severity=Severity.LOW)

    with pytest.raises(AttributeError):
        rule.severity = Severity.CRITICAL


def test_default_catalog_is_built_once_with_unique_ids():
    catalog = default_catalog()

    assert catalog is default_catalog()
    ids = [rule.id for rule in catalog]
    assert len(ids) == len(set(ids)) == len(catalog)
    assert "runtime.dynamic-execution" in catalog
    assert "crypto.sensitive-storage" in catalog


def test_default_catalog_covers_every_scope():
    catalog = default_catalog()

    for scope in Scope:
        assert any(rule.scope is scope for rule in catalog)
    for rule in catalog.rules_for(Scope.DIFF_ADDED_LINE):
        assert rule.applies_to is None
