"""Rule model and catalog for the scanner."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Tuple, Union

from commitgate.severity import Severity

# Matches any text, for rules whose whole condition is carried by
# ``requires``/``unless``.
ALWAYS = r"\A"


class RuleDefinitionError(ValueError):
    """Raised when a rule is structurally invalid."""


class Scope(str, Enum):
    """Which text a rule is evaluated against."""

    FILE_CONTENT = "file"
    DIFF_ADDED_LINE = "diff"
    FILE_PATH = "path"


@dataclass(frozen=True)
class Matcher:
    """One pattern alternative and the message it reports."""

    pattern: Pattern[str]
    message: str


@dataclass(frozen=True)
class PathFilter:
    """Applicability predicate on a staged path.

    ``suffixes`` and ``contains`` are each satisfied by any one entry; an
    empty tuple accepts every path. Any ``excludes`` substring rejects.
    """

    suffixes: Tuple[str, ...] = ()
    contains: Tuple[str, ...] = ()
    excludes: Tuple[str, ...] = ()

    def matches(self, path: str) -> bool:
        if self.suffixes and not path.endswith(self.suffixes):
            return False
        if self.contains and not any(part in path for part in self.contains):
            return False
        return not any(part in path for part in self.excludes)


@dataclass(frozen=True)
class Rule:
    """An immutable, precompiled rule descriptor."""

    id: str
    severity: Severity
    scope: Scope
    matchers: Tuple[Matcher, ...]
    category: Optional[str] = None
    owasp: Optional[str] = None
    hint: Optional[str] = None
    unless: Optional[Pattern[str]] = None
    requires: Tuple[Pattern[str], ...] = ()
    applies_to: Optional[PathFilter] = None
    count_occurrences: bool = False

    def applies(self, path: Optional[str]) -> bool:
        if self.scope is Scope.DIFF_ADDED_LINE or self.applies_to is None:
            return True
        if path is None:
            return False
        return self.applies_to.matches(path)

    def first_match(self, text: str) -> Optional[Tuple[Matcher, "re.Match[str]"]]:
        """Return the first matching alternative if the rule holds on ``text``."""

        for matcher in self.matchers:
            match = matcher.pattern.search(text)
            if match is not None:
                break
        else:
            return None
        if any(pattern.search(text) is None for pattern in self.requires):
            return None
        if self.unless is not None and self.unless.search(text):
            return None
        return matcher, match


def _compile(rule_id: str, pattern: str) -> Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise RuleDefinitionError(f"{rule_id}: invalid pattern {pattern!r}: {exc}") from exc


PatternSpec = Union[str, Sequence[Tuple[str, str]]]


def define(
    rule_id: str,
    pattern: PatternSpec,
    message: Optional[str] = None,
    *,
    severity: Severity,
    scope: Scope = Scope.FILE_CONTENT,
    category: Optional[str] = None,
    owasp: Optional[str] = None,
    hint: Optional[str] = None,
    unless: Optional[str] = None,
    requires: Iterable[str] = (),
    applies_to: Optional[PathFilter] = None,
    count_occurrences: bool = False,
) -> Rule:
    """Build a rule, compiling every pattern up front.

    ``pattern`` is either a single regular expression (reported with
    ``message``) or a sequence of ``(regex, message)`` alternatives.
    """

    if isinstance(pattern, str):
        if not message:
            raise RuleDefinitionError(f"{rule_id}: a single pattern needs a message")
        alternatives: Sequence[Tuple[str, str]] = [(pattern, message)]
    else:
        alternatives = list(pattern)
    if not alternatives:
        raise RuleDefinitionError(f"{rule_id}: at least one pattern is required")
    if scope is Scope.DIFF_ADDED_LINE and applies_to is not None:
        raise RuleDefinitionError(f"{rule_id}: diff rules cannot filter on path")

    return Rule(
        id=rule_id,
        severity=severity,
        scope=scope,
        matchers=tuple(Matcher(_compile(rule_id, regex), text) for regex, text in alternatives),
        category=category,
        owasp=owasp,
        hint=hint,
        unless=_compile(rule_id, unless) if unless is not None else None,
        requires=tuple(_compile(rule_id, regex) for regex in requires),
        applies_to=applies_to,
        count_occurrences=count_occurrences,
    )


class RuleCatalog:
    """Ordered, fixed collection of rules."""

    def __init__(self, rules: Iterable[Rule]) -> None:
        self._rules: Tuple[Rule, ...] = tuple(rules)
        seen: Dict[str, Rule] = {}
        for rule in self._rules:
            if not isinstance(rule, Rule):
                raise RuleDefinitionError(f"not a rule: {rule!r}")
            if rule.id in seen:
                raise RuleDefinitionError(f"duplicate rule id: {rule.id}")
            if not rule.matchers:
                raise RuleDefinitionError(f"{rule.id}: at least one pattern is required")
            seen[rule.id] = rule
        self._by_id = seen

    def __iter__(self):
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id

    def get(self, rule_id: str) -> Rule:
        return self._by_id[rule_id]

    def rules_for(self, scope: Scope, path: Optional[str] = None) -> List[Rule]:
        """Return the rules of ``scope`` applicable to ``path`` in catalog order."""

        return [rule for rule in self._rules if rule.scope is scope and rule.applies(path)]


@lru_cache(maxsize=1)
def default_catalog() -> RuleCatalog:
    """Return the built-in catalog; built once per process."""

    from . import hygiene, nextjs, owasp, secrets

    return RuleCatalog(
        [
            *secrets.RULES,
            *hygiene.RULES,
            *owasp.RULES,
            *nextjs.RULES,
        ]
    )


__all__ = [
    "ALWAYS",
    "Matcher",
    "PathFilter",
    "Rule",
    "RuleCatalog",
    "RuleDefinitionError",
    "Scope",
    "default_catalog",
    "define",
]
