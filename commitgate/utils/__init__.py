"""Utility helpers for the scanner."""

from .code import has_extension, is_test_file, select_candidates
from .diff import AddedLine, iter_added_lines
from .fileio import read_text_file, read_yaml_file
from .git import get_staged_diff, get_staged_files

__all__ = [
    "AddedLine",
    "get_staged_diff",
    "get_staged_files",
    "has_extension",
    "is_test_file",
    "iter_added_lines",
    "read_text_file",
    "read_yaml_file",
    "select_candidates",
]
