import json
from pathlib import Path

import pytest

from commitgate import cli

SAMPLES = Path(__file__).resolve().parent.parent / "samples"


@pytest.fixture(autouse=True)
def _no_hook_exclusions(monkeypatch):
    monkeypatch.delenv("LEFTHOOK_EXCLUDE", raising=False)


def test_cli_blocks_vulnerable_sample(tmp_path, capsys):
    output_path = tmp_path / "scan.json"
    root = SAMPLES / "vulnerable"

    exit_code = cli.main(
        [
            "--root",
            str(root),
            "--diff-file",
            str(root / "staged.diff"),
            "--out",
            str(output_path),
            "src/app/api/run/route.ts",
        ]
    )

    captured = capsys.readouterr()
    assert "Security Scan Summary" in captured.out
    assert "Security check FAILED" in captured.out
    assert exit_code == 1
    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert data["decision"] == "FAIL"
    assert data["passed"] is False
    assert data["summary"]["critical"] >= 1
    rule_ids = [finding["rule_id"] for finding in data["findings"]]
    assert "runtime.dynamic-execution" in rule_ids
    assert "crypto.sensitive-storage" in rule_ids
    assert data["findings"][-1]["location"] == "diff"


def test_cli_passes_safe_sample(tmp_path, capsys):
    output_path = tmp_path / "scan.json"
    root = SAMPLES / "safe"

    exit_code = cli.main(
        [
            "--root",
            str(root),
            "--diff-file",
            str(root / "staged.diff"),
            "--out",
            str(output_path),
            "src/lib/format.ts",
        ]
    )

    captured = capsys.readouterr()
    assert "Security Scan Summary" in captured.out
    assert exit_code == 0
    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert data["passed"] is True
    assert data["summary"]["critical"] == 0
    assert data["summary"]["high"] == 0


def test_cli_uses_staged_files_and_diff_by_default(tmp_path, monkeypatch, capsys):
    (tmp_path / "a.js").write_text("eval(userInput);\n", encoding="utf-8")
    monkeypatch.setattr(cli, "get_staged_files", lambda root: ["a.js"])
    monkeypatch.setattr(cli, "get_staged_diff", lambda root: "+// TODO: later\n")

    exit_code = cli.main(["--root", str(tmp_path)])

    out = capsys.readouterr().out
    assert exit_code == 1
    assert "CRITICAL (1):" in out
    assert "LOW (1):" in out


def test_cli_skips_test_files_unless_asked(tmp_path, monkeypatch, capsys):
    target = tmp_path / "src" / "__tests__"
    target.mkdir(parents=True)
    (target / "page.test.tsx").write_text("eval(fixture);\n", encoding="utf-8")
    args = ["--root", str(tmp_path), "src/__tests__/page.test.tsx"]

    assert cli.main(args) == 0
    assert cli.main(args + ["--include-tests"]) == 1


def test_cli_lists_rules(capsys):
    assert cli.main(["--list-rules"]) == 0

    out = capsys.readouterr().out
    assert "secrets.aws-credentials" in out
    assert "runtime.dynamic-execution" in out


def test_cli_honours_hook_exclusion(tmp_path, monkeypatch, capsys):
    (tmp_path / "a.js").write_text("eval(userInput);\n", encoding="utf-8")
    monkeypatch.setenv("LEFTHOOK_EXCLUDE", "lint,security-check")

    exit_code = cli.main(["--root", str(tmp_path), "a.js"])

    assert exit_code == 0
    assert "Skipping security check" in capsys.readouterr().out


def test_cli_rejects_bad_config(tmp_path):
    config = tmp_path / "gate.yml"
    config.write_text("unknown_knob: 1\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--root", str(tmp_path), "--config", str(config), "a.js"])

    assert "Failed to load settings" in str(excinfo.value)


def test_cli_reads_missing_diff_file_as_empty(tmp_path, capsys):
    exit_code = cli.main(["--root", str(tmp_path), "--diff-file", str(tmp_path / "none.diff"), "a.js"])

    assert exit_code == 0
    assert "No security issues detected" in capsys.readouterr().out
