"""Command-line entry point for the commit gate."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigError, Settings, load_settings, should_skip
from .gate import Decision, decide
from .report import format_catalog, format_report
from .result import ScanResult
from .rules import default_catalog
from .scan import ScanContext, run_scan
from .utils.code import select_candidates
from .utils.git import get_staged_diff, get_staged_files

logger = logging.getLogger("commitgate")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commitgate",
        description="Pattern-based security gate for staged files and the staged diff",
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Files to scan, relative to --root. Defaults to the files staged in git.",
    )
    parser.add_argument(
        "--root",
        default=".",
        help="Repository root that file paths are relative to.",
    )
    parser.add_argument(
        "--diff-file",
        default=None,
        help="Read the unified diff from this file ('-' for stdin) instead of git.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Settings file (defaults to .commitgate.yml under --root).",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        default=None,
        help="Path to write the JSON report (e.g., artifacts/commitgate.json).",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of scan workers (defaults to the CPU count).",
    )
    parser.add_argument(
        "--include-tests",
        action="store_true",
        default=None,
        help="Scan test files too; they are skipped by default.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=None,
        help="Show rule ids, locations and hints, and log debug output.",
    )
    parser.add_argument(
        "--list-rules",
        action="store_true",
        help="Print the rule catalog and exit.",
    )
    return parser


def _read_diff(diff_file: Optional[str]) -> str:
    if diff_file == "-":
        return sys.stdin.read()
    path = Path(diff_file)
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("Could not read diff file %s: %s", diff_file, exc)
        return ""


def build_context(args: argparse.Namespace, settings: Settings) -> ScanContext:
    root = Path(args.root)
    if args.files:
        paths = list(args.files)
        diff = _read_diff(args.diff_file) if args.diff_file else ""
    else:
        paths = get_staged_files(root)
        diff = _read_diff(args.diff_file) if args.diff_file else get_staged_diff(root)
    return ScanContext(
        paths=select_candidates(paths, include_tests=settings.include_tests),
        diff=diff,
        root=root,
    )


def write_output(result: ScanResult, decision: Decision, output_path: Optional[str], verbose: bool) -> None:
    print(format_report(result, decision, verbose=verbose))

    if output_path:
        payload = result.to_dict()
        payload["decision"] = decision.value
        payload["passed"] = decision is not Decision.FAIL
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"\nReport written to {output_path}")


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[commitgate] %(levelname)s %(message)s",
    )

    if args.list_rules:
        print(format_catalog(default_catalog()))
        return 0

    if should_skip():
        print("Skipping security check (LEFTHOOK_EXCLUDE)")
        return 0

    try:
        settings = load_settings(
            Path(args.root),
            Path(args.config) if args.config else None,
            overrides={
                "verbose": args.verbose,
                "workers": args.workers,
                "include_tests": args.include_tests,
            },
        )
    except ConfigError as exc:
        raise SystemExit(f"Failed to load settings: {exc}")
    if settings.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    context = build_context(args, settings)
    result = run_scan(context, settings=settings)
    decision = decide(result.tally)
    write_output(result, decision, args.output_path, settings.verbose)
    return decision.exit_code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
