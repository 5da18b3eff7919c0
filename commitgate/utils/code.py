"""Source path helper utilities."""

from __future__ import annotations

from typing import Iterable, List, Tuple

DEFAULT_EXTENSIONS: Tuple[str, ...] = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".json",
    ".env",
    ".yml",
    ".yaml",
    ".html",
)

TEST_DIRECTORIES = ("__tests__", "__mocks__", "tests", "e2e")
TEST_NAME_MARKERS = (".test.", ".spec.")


def has_extension(path: str, extensions: Iterable[str]) -> bool:
    """Return True when ``path`` ends with one of ``extensions``."""

    return path.endswith(tuple(extensions))


def is_test_file(path: str) -> bool:
    """Test code carries mock credentials that would only produce noise."""

    *directories, name = path.split("/")
    if any(directory in TEST_DIRECTORIES for directory in directories):
        return True
    return any(marker in name for marker in TEST_NAME_MARKERS)


def select_candidates(paths: Iterable[str], include_tests: bool = False) -> List[str]:
    """Normalise and de-duplicate staged paths, keeping their order."""

    selected: List[str] = []
    seen = set()
    for raw in paths:
        path = raw.strip().replace("\\", "/")
        if not path or path in seen:
            continue
        if not include_tests and is_test_file(path):
            continue
        seen.add(path)
        selected.append(path)
    return selected
