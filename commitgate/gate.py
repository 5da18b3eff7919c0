"""Map severity tallies to a commit decision."""

from __future__ import annotations

from enum import Enum

from .result import SeverityTally
from .severity import Severity


class Decision(str, Enum):
    """Possible outcomes of the commit gate."""

    PASS = "PASS"
    PASS_WITH_WARNINGS = "PASS_WITH_WARNINGS"
    FAIL = "FAIL"

    @property
    def exit_code(self) -> int:
        return 1 if self is Decision.FAIL else 0


def decide(tally: SeverityTally) -> Decision:
    """Return the gate outcome for ``tally``.

    Critical or high findings block the commit, medium findings let it
    through with warnings, low findings are informational only.
    """

    if any(tally.count(severity) for severity in Severity if severity.blocks_commit):
        return Decision.FAIL
    if tally.medium > 0:
        return Decision.PASS_WITH_WARNINGS
    return Decision.PASS
