"""Basic file IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml


def read_yaml_file(path: Path) -> Any:
    """Return the parsed YAML if the file exists, otherwise ``None``."""

    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def read_text_file(path: Path, max_bytes: Optional[int] = None) -> Optional[str]:
    """Return the file contents as UTF-8 text, or ``None`` if it cannot be scanned.

    Missing, unreadable, oversized and binary files all come back as ``None``.
    """

    try:
        if max_bytes is not None and path.stat().st_size > max_bytes:
            return None
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    if "\x00" in text:
        return None
    return text
