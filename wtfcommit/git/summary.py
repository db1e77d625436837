"""Fallback summary for diffs that exceed the context budget."""

import posixpath
from collections import Counter
from typing import Sequence

from wtfcommit.config import MAX_PARTIAL_DIFF_CHARS, MAX_SUMMARY_DIRS
from wtfcommit.git.models import ChangeEntry, normalize_change_path

ROOT_DIRECTORY_LABEL = "(root)"
TRUNCATION_MARKER = "\n... (truncated)"

# Keeps the summary bounded even with pathological directory names
MAX_DIRECTORY_LABEL_CHARS = 120


def get_change_directory(path: str) -> str:
    """Get the containing directory of a change, posix style.

    Files at the repository root map to ROOT_DIRECTORY_LABEL.
    """
    directory = posixpath.dirname(normalize_change_path(path))
    if directory in ("", "."):
        return ROOT_DIRECTORY_LABEL
    if len(directory) > MAX_DIRECTORY_LABEL_CHARS:
        directory = "..." + directory[-(MAX_DIRECTORY_LABEL_CHARS - 3):]
    return directory


def rank_directories(changes: Sequence[ChangeEntry], limit: int = MAX_SUMMARY_DIRS) -> list[tuple[str, int]]:
    """Count changes per directory, most changed first.

    Directories with equal counts keep the order they were first seen in.

    Args:
        changes: The changes to group.
        limit: Maximum number of directories to return.

    Returns:
        List of (directory, file_count) tuples.
    """
    dir_counts: Counter[str] = Counter()
    for change in changes:
        dir_counts[get_change_directory(change.path)] += 1
    return dir_counts.most_common(limit)


def _partial_diff(diff: str) -> str:
    return diff[:MAX_PARTIAL_DIFF_CHARS] + TRUNCATION_MARKER


def build_large_diff_summary(diff: str, changes: Sequence[ChangeEntry]) -> str:
    """Build a bounded summary of a diff that is too large to send as is.

    Args:
        diff: The full, untruncated diff text.
        changes: The changes the diff covers.

    Returns:
        Summary text: total file count, busiest directories and the start
        of the diff. Without changes, only the start of the diff.
    """
    if not changes:
        return _partial_diff(diff)

    top_dirs = "\n".join(
        f"- {directory}: {count} files" for directory, count in rank_directories(changes)
    )

    return "\n".join([
        f"The diff is too large ({len(diff)} characters). Here is a summary of the changes:",
        "",
        f"Total changed files: {len(changes)}",
        "",
        "Changes by directory:",
        top_dirs,
        "",
        f"Partial diff (first {MAX_PARTIAL_DIFF_CHARS} characters):",
        _partial_diff(diff),
    ])
