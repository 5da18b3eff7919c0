import time

from commitgate.rules import Scope, default_catalog
from commitgate.scan import scan_diff
from commitgate.severity import Severity
from commitgate.utils.diff import is_added_line, iter_added_lines

DIFF_RULES = default_catalog().rules_for(Scope.DIFF_ADDED_LINE)

SAMPLE_DIFF = """\
diff --git a/src/lib/auth.ts b/src/lib/auth.ts
index 1111111..2222222 100644
--- a/src/lib/auth.ts
+++ b/src/lib/auth.ts
@@ -10,2 +12,3 @@ export function login() {
 const user = await getUser();
+  localStorage.setItem('token', t)
+  return user;
"""


def test_added_lines_exclude_file_header():
    assert is_added_line("+const a = 1;")
    assert not is_added_line("+++ b/src/a.ts")
    assert not is_added_line("--- a/src/a.ts")
    assert not is_added_line(" context")


def test_iter_added_lines_tracks_path_and_line_numbers():
    lines = list(iter_added_lines(SAMPLE_DIFF))

    assert [line.text for line in lines] == ["  localStorage.setItem('token', t)", "  return user;"]
    assert [line.location for line in lines] == ["src/lib/auth.ts:13", "src/lib/auth.ts:14"]


def test_header_only_diff_produces_no_findings():
    diff = "+++ b/src/eval(localStorage.setItem('token')).ts\n"

    assert scan_diff(diff, DIFF_RULES) == []


def test_sensitive_storage_in_added_line():
    findings = scan_diff(SAMPLE_DIFF, DIFF_RULES)

    assert [finding.rule_id for finding in findings] == ["crypto.sensitive-storage"]
    assert findings[0].severity is Severity.HIGH
    assert findings[0].location == "diff"
    assert findings[0].detail == "src/lib/auth.ts:13"


def test_removed_and_context_lines_are_ignored():
    diff = "-const out = eval(input);\n const same = eval(input);\n"

    assert scan_diff(diff, DIFF_RULES) == []


def test_one_finding_per_rule_with_counted_lines():
    diff = "+debugger;\n+  debugger\n+// debugger\n"
    rule = default_catalog().get("hygiene.debugger")

    findings = scan_diff(diff, [rule])

    assert len(findings) == 1
    assert findings[0].message == "debugger statement added (2 occurrence(s))"


def test_line_level_exception_suppresses_only_that_line():
    rule = default_catalog().get("hygiene.console-log")

    assert scan_diff("+  // console.log(state)\n", [rule]) == []
    assert len(scan_diff("+  // console.log(state)\n+  console.log(state)\n", [rule])) == 1


def test_secret_rule_ignores_env_references():
    rule = default_catalog().get("secrets.hardcoded-api-key")

    assert scan_diff("+const apiKey = process.env.API_KEY_VALUE_FROM_ENV\n", [rule]) == []
    findings = scan_diff("+const apiKey = 'AbCdEfGh12345678Zz'\n", [rule])
    assert [finding.severity for finding in findings] == [Severity.CRITICAL]


def test_overlong_lines_are_skipped():
    rule = default_catalog().get("runtime.dynamic-execution-diff")
    diff = "+" + "x" * 5000 + " eval(code)\n"

    assert scan_diff(diff, [rule], max_line_length=2000) == []
    assert len(scan_diff(diff, [rule])) == 1


def test_diff_findings_follow_catalog_order():
    diff = "+// TODO: tidy\n+const r = eval(src);\n"

    findings = scan_diff(diff, DIFF_RULES)

    ids = [finding.rule_id for finding in findings]
    assert ids == sorted(ids, key=[rule.id for rule in DIFF_RULES].index)
    assert "hygiene.todo" in ids and "runtime.dynamic-execution-diff" in ids


def test_added_line_starting_with_plus_plus_is_content():
    diff = (
        "--- /dev/null\n"
        "+++ b/src/a.js\n"
        "@@ -0,0 +1,1 @@\n"
        "+++i; eval(userInput)\n"
        "--- a/src/b.js\n"
        "+++ b/src/b.js\n"
        "@@ -4,0 +5,1 @@\n"
        "+debugger;\n"
    )

    lines = list(iter_added_lines(diff))

    assert [(line.text, line.location) for line in lines] == [
        ("++i; eval(userInput)", "src/a.js:1"),
        ("debugger;", "src/b.js:5"),
    ]
    ids = [finding.rule_id for finding in scan_diff(diff, DIFF_RULES)]
    assert "runtime.dynamic-execution-diff" in ids


def test_hunk_without_count_covers_one_line():
    diff = "+++ b/src/a.ts\n@@ -3 +3 @@\n+const a = 1;\n+++ b/src/c.ts\n+const c = 2;\n"

    assert [line.location for line in iter_added_lines(diff)] == ["src/a.ts:3", "src/c.ts"]


def test_pathological_interpolation_lines_scan_quickly():
    diff = ("+" + "${}" * 600 + "\n") * 20

    started = time.perf_counter()
    findings = scan_diff(diff, DIFF_RULES, max_line_length=2000)

    assert time.perf_counter() - started < 2.0
    assert findings == []
