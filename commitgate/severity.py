"""Severity levels attached to rules and findings."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Finding severities, most severe first."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        """Higher is more severe; LOW is 0."""

        members = list(Severity)
        return len(members) - 1 - members.index(self)

    @property
    def blocks_commit(self) -> bool:
        return self.rank >= Severity.HIGH.rank
