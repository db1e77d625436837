"""Git status utilities.

Contains:
- get_change_set: Read the repository status into a ChangeSet
- parse_porcelain_status: Parse `git status --porcelain=v1 -z` output
- get_stageable_paths: Paths to stage when committing unstaged changes
"""

from pathlib import Path
from typing import Optional

from wtfcommit.git.models import ChangeEntry, ChangeOrigin, ChangeSet, ChangeStatus
from wtfcommit.git.runner import _run_git_command


# Porcelain status letters (either column) mapped to status codes
_STATUS_CODES = {
    "M": ChangeStatus.MODIFIED,
    "A": ChangeStatus.ADDED,
    "D": ChangeStatus.DELETED,
    "R": ChangeStatus.RENAMED,
    "C": ChangeStatus.COPIED,
    "T": ChangeStatus.TYPE_CHANGED,
    "U": ChangeStatus.UNMERGED,
}


def parse_porcelain_status(output: str) -> ChangeSet:
    """Parse NUL-separated porcelain v1 status output.

    Each record is ``XY path``. Renames and copies are followed by an extra
    record holding the original path, which is skipped.

    The first column (X) is the index status, the second (Y) the worktree
    status. ``??`` marks untracked files and ``!!`` ignored ones.

    Args:
        output: Raw output of ``git status --porcelain=v1 -z``.

    Returns:
        The parsed ChangeSet.
    """
    staged: list[ChangeEntry] = []
    working_tree: list[ChangeEntry] = []
    untracked: list[ChangeEntry] = []

    records = output.split("\0")
    index = 0
    while index < len(records):
        record = records[index]
        index += 1
        if len(record) < 4:
            continue

        index_col, worktree_col, path = record[0], record[1], record[3:]

        if index_col in ("R", "C"):
            # Skip the original path record
            index += 1

        if index_col == "?":
            untracked.append(ChangeEntry(path, ChangeOrigin.UNTRACKED, ChangeStatus.UNTRACKED))
            continue
        if index_col == "!":
            continue

        if index_col != " ":
            status = _STATUS_CODES.get(index_col, ChangeStatus.MODIFIED)
            staged.append(ChangeEntry(path, ChangeOrigin.STAGED, status))
        if worktree_col != " ":
            status = _STATUS_CODES.get(worktree_col, ChangeStatus.MODIFIED)
            working_tree.append(ChangeEntry(path, ChangeOrigin.WORKING_TREE, status))

    return ChangeSet(
        staged=tuple(staged),
        working_tree=tuple(working_tree),
        untracked=tuple(untracked),
    )


def get_change_set(cwd: Optional[Path] = None) -> ChangeSet:
    """Get the pending changes of the repository.

    Args:
        cwd: Repository directory.

    Returns:
        The parsed ChangeSet.
    """
    output = _run_git_command(
        ["status", "--porcelain=v1", "-z", "--untracked-files=all"],
        cwd=cwd,
        strip=False,
    )
    return parse_porcelain_status(output)


def get_stageable_paths(change_set: ChangeSet) -> list[str]:
    """Get the working-tree and untracked paths, without duplicates.

    Args:
        change_set: The current change set.

    Returns:
        Paths in first-seen order.
    """
    paths: dict[str, None] = {}
    for change in change_set.working_tree + change_set.untracked:
        paths.setdefault(change.path, None)
    return list(paths)
