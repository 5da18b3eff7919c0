"""Scanning engine: content store, file/path/diff scanners and the fan-out."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .config import Settings
from .result import DIFF_LOCATION, Finding, ScanResult, aggregate
from .rules import Matcher, Rule, RuleCatalog, Scope, default_catalog
from .utils.code import has_extension
from .utils.diff import iter_added_lines
from .utils.fileio import read_text_file

logger = logging.getLogger(__name__)

_UNREAD = object()


class ContentStore:
    """Read each candidate file at most once and cache the outcome."""

    def __init__(self, root: Path, max_bytes: Optional[int] = None) -> None:
        self._root = root
        self._max_bytes = max_bytes
        self._cache: Dict[str, object] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()
        self.reads = 0

    def get(self, path: str) -> Optional[str]:
        with self._guard:
            cached = self._cache.get(path, _UNREAD)
            if cached is not _UNREAD:
                return cached  # type: ignore[return-value]
            lock = self._locks.setdefault(path, threading.Lock())
        with lock:
            with self._guard:
                cached = self._cache.get(path, _UNREAD)
            if cached is not _UNREAD:
                return cached  # type: ignore[return-value]
            content = read_text_file(self._root / path, self._max_bytes)
            if content is None:
                logger.debug("Skipping unreadable, binary or oversized file %s", path)
            with self._guard:
                self._cache[path] = content
                self.reads += 1
            return content


@dataclass
class ScanContext:
    """Inputs for one invocation."""

    paths: Sequence[str] = ()
    diff: str = ""
    root: Path = field(default_factory=Path.cwd)
    store: Optional[ContentStore] = None

    def content_store(self, settings: Settings) -> ContentStore:
        if self.store is None:
            self.store = ContentStore(self.root, settings.max_file_bytes)
        return self.store


def _render(matcher: Matcher, match_text: str, count: int) -> str:
    return matcher.message.replace("{match}", match_text).replace("{count}", str(count))


def _finding(rule: Rule, location: str, message: str, detail: Optional[str] = None) -> Finding:
    return Finding(
        rule_id=rule.id,
        severity=rule.severity,
        location=location,
        message=message,
        category=rule.category,
        owasp=rule.owasp,
        hint=rule.hint,
        detail=detail,
    )


def scan_path(path: str, rules: Iterable[Rule]) -> List[Finding]:
    """Evaluate path-scope rules against the staged path name."""

    findings: List[Finding] = []
    for rule in rules:
        hit = rule.first_match(path)
        if hit is None:
            continue
        matcher, match = hit
        findings.append(_finding(rule, path, _render(matcher, match.group(0), 1)))
    return findings


def scan_file(path: str, content: str, rules: Iterable[Rule]) -> List[Finding]:
    """Evaluate content-scope rules against a whole file; one finding per rule."""

    findings: List[Finding] = []
    for rule in rules:
        hit = rule.first_match(content)
        if hit is None:
            continue
        matcher, match = hit
        count = 1
        if rule.count_occurrences:
            count = sum(1 for alternative in rule.matchers for _ in alternative.pattern.finditer(content))
        findings.append(_finding(rule, path, _render(matcher, match.group(0), count)))
    return findings


def scan_diff(diff_text: str, rules: Iterable[Rule], max_line_length: Optional[int] = None) -> List[Finding]:
    """Evaluate diff-scope rules against each added line independently."""

    lines = []
    for added in iter_added_lines(diff_text):
        if max_line_length is not None and len(added.text) > max_line_length:
            logger.debug("Skipping %d character diff line at %s", len(added.text), added.location or DIFF_LOCATION)
            continue
        lines.append(added)

    findings: List[Finding] = []
    for rule in rules:
        first = None
        count = 0
        for added in lines:
            hit = rule.first_match(added.text)
            if hit is None:
                continue
            count += 1
            if first is None:
                first = (hit, added)
        if first is None:
            continue
        (matcher, match), added = first
        message = _render(matcher, match.group(0), count)
        findings.append(_finding(rule, DIFF_LOCATION, message, detail=added.location))
    return findings


def _scan_candidate(path: str, catalog: RuleCatalog, store: ContentStore, settings: Settings) -> List[Finding]:
    findings = scan_path(path, catalog.rules_for(Scope.FILE_PATH, path))
    if not has_extension(path, settings.extensions):
        return findings
    content = store.get(path)
    if content is None:
        return findings
    findings.extend(scan_file(path, content, catalog.rules_for(Scope.FILE_CONTENT, path)))
    return findings


def run_scan(
    context: ScanContext,
    catalog: Optional[RuleCatalog] = None,
    settings: Optional[Settings] = None,
) -> ScanResult:
    """Scan every candidate file and the diff in parallel, then aggregate.

    Results are collected in submission order once every task has finished,
    so output does not depend on scheduling.
    """

    catalog = default_catalog() if catalog is None else catalog
    settings = Settings() if settings is None else settings
    store = context.content_store(settings)
    diff_rules = catalog.rules_for(Scope.DIFF_ADDED_LINE)

    logger.debug("Scanning %d file(s) with %d worker(s)", len(context.paths), settings.worker_count)
    with ThreadPoolExecutor(max_workers=settings.worker_count) as executor:
        file_futures = [
            executor.submit(_scan_candidate, path, catalog, store, settings) for path in context.paths
        ]
        diff_future = executor.submit(scan_diff, context.diff, diff_rules, settings.max_line_length)
        file_results = [future.result() for future in file_futures]
        diff_result = diff_future.result()

    return aggregate(*file_results, diff_result)
