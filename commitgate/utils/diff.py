"""Unified diff helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional

HUNK_HEADER = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,(\d+))? @@")


@dataclass(frozen=True)
class AddedLine:
    """A line added by the diff, without its leading ``+``."""

    text: str
    path: Optional[str] = None
    lineno: Optional[int] = None

    @property
    def location(self) -> Optional[str]:
        if self.path is None:
            return None
        if self.lineno is None:
            return self.path
        return f"{self.path}:{self.lineno}"


def is_added_line(line: str) -> bool:
    """Return True for ``+`` lines that are not the ``+++`` file header."""

    return line.startswith("+") and not line.startswith("+++")


def iter_added_lines(diff_text: str) -> Iterator[AddedLine]:
    """Yield the added lines of a unified diff in order.

    File and line information is tracked from ``+++`` and ``@@`` headers
    when present; bare ``+`` lines without headers are still yielded.
    Inside a hunk the new-side line count decides what is content, so an
    added line that itself starts with ``++`` is not taken for a header.
    """

    path: Optional[str] = None
    lineno: Optional[int] = None
    remaining = 0
    for line in diff_text.splitlines():
        if remaining > 0 and line.startswith(("+", " ")):
            remaining -= 1
            if line.startswith("+"):
                yield AddedLine(text=line[1:], path=path, lineno=lineno)
            if lineno is not None:
                lineno += 1
            continue
        if line.startswith("+++"):
            target = line[3:].strip()
            if target == "/dev/null":
                path = None
            else:
                path = target[2:] if target.startswith("b/") else target
            lineno = None
            continue
        header = HUNK_HEADER.match(line)
        if header:
            lineno = int(header.group(1))
            remaining = int(header.group(2)) if header.group(2) is not None else 1
            continue
        if is_added_line(line):
            yield AddedLine(text=line[1:], path=path, lineno=lineno)
            if lineno is not None:
                lineno += 1
        elif line.startswith(" ") and lineno is not None:
            lineno += 1
