import subprocess

from commitgate.utils import git


class _Completed:
    def __init__(self, stdout):
        self.stdout = stdout


def test_staged_files_are_listed(monkeypatch):
    calls = []

    def fake_run(args, **kwargs):
        calls.append(args)
        return _Completed("src/a.ts\n\nsrc/b.tsx\n")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert git.get_staged_files() == ["src/a.ts", "src/b.tsx"]
    assert calls[0] == ["git", "diff", "--cached", "--name-only", "--diff-filter=ACM"]


def test_staged_diff_is_returned(monkeypatch):
    monkeypatch.setattr(subprocess, "run", lambda args, **kwargs: _Completed("+added\n"))

    assert git.get_staged_diff() == "+added\n"


def test_missing_git_gives_empty_input(monkeypatch, caplog):
    def fake_run(args, **kwargs):
        raise FileNotFoundError("git")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert git.get_staged_files() == []
    assert git.get_staged_diff() == ""
    assert "git not found" in caplog.text


def test_git_failure_gives_empty_input(monkeypatch, caplog):
    def fake_run(args, **kwargs):
        raise subprocess.CalledProcessError(128, args, stderr="fatal: not a git repository\n")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert git.get_staged_files() == []
    assert git.get_staged_diff() == ""
    assert "not a git repository" in caplog.text
