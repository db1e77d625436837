"""Pseudo-diffs for untracked files.

Untracked files have no history, so ``git diff`` never shows them. To give
the model visibility into new files, their content is rendered as a unified
diff against /dev/null.

Contains:
- get_untracked_changes: Deduplicated untracked entries of a change set
- build_untracked_patch: Synthesize the pseudo-diff for one file
- build_untracked_patches: Synthesize patches for the capped untracked list
"""

import re
from typing import Optional

from wtfcommit.config import (
    MAX_UNTRACKED_FILE_BYTES,
    MAX_UNTRACKED_FILE_LINES,
    MAX_UNTRACKED_FILES,
)
from wtfcommit.git.models import ChangeEntry, ChangeSet, ChangeStatus, Repository
from wtfcommit.logging import get_logger

logger = get_logger("git.untracked")

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def get_untracked_changes(change_set: ChangeSet) -> list[ChangeEntry]:
    """Collect untracked entries without duplicates.

    Some hosts report untracked files in the working-tree bucket too, with
    an untracked status. Both sources are merged by normalized path so no
    file is synthesized twice.

    Args:
        change_set: The current change set.

    Returns:
        Untracked entries in first-seen order.
    """
    changes_by_path: dict[str, ChangeEntry] = {}

    for change in change_set.untracked:
        changes_by_path.setdefault(change.key, change)

    for change in change_set.working_tree:
        if change.status == ChangeStatus.UNTRACKED:
            changes_by_path.setdefault(change.key, change)

    return list(changes_by_path.values())


def _split_lines(content: str) -> list[str]:
    """Split text on any line-ending style.

    A trailing line terminator ends the last line rather than starting a
    new, empty one.
    """
    if not content:
        return []
    lines = _LINE_BREAK.split(content)
    if lines[-1] == "":
        lines.pop()
    return lines


def _patch_header(path: str) -> list[str]:
    return [
        f"diff --git a/{path} b/{path}",
        "new file",
        "--- /dev/null",
        f"+++ b/{path}",
    ]


def build_untracked_patch(repository: Repository, path: str) -> Optional[str]:
    """Render an untracked file as a new-file unified diff.

    Files larger than MAX_UNTRACKED_FILE_BYTES are never read; a single
    placeholder line states their size instead. Files with more than
    MAX_UNTRACKED_FILE_LINES lines are cut and followed by a marker line
    counting the elided lines. The hunk header only counts emitted lines.

    Args:
        repository: Repository giving access to the file.
        path: Repository-relative path of the untracked file.

    Returns:
        The patch text, or None if the file could not be read as text.
    """
    relative_path = path.replace("\\", "/")

    try:
        size = repository.file_size(path)
        if size > MAX_UNTRACKED_FILE_BYTES:
            return "\n".join(
                _patch_header(relative_path)
                + [
                    "@@ -0,0 +1,1 @@",
                    f"+[content omitted: {relative_path} is {size} bytes]",
                ]
            )

        content = repository.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.info("Skipping unreadable untracked file: %s (%s)", relative_path, e)
        return None

    lines = _split_lines(content)
    visible_lines = lines[:MAX_UNTRACKED_FILE_LINES]

    patch_lines = _patch_header(relative_path)
    patch_lines.append(f"@@ -0,0 +1,{len(visible_lines)} @@")
    patch_lines.extend(f"+{line}" for line in visible_lines)

    if len(lines) > MAX_UNTRACKED_FILE_LINES:
        patch_lines.append(
            f"\\ [content truncated: {len(lines) - MAX_UNTRACKED_FILE_LINES} more lines]"
        )

    return "\n".join(patch_lines)


def build_untracked_patches(repository: Repository, change_set: ChangeSet) -> list[str]:
    """Synthesize patches for the untracked files of a change set.

    The list is capped at MAX_UNTRACKED_FILES before any file is touched,
    and files are processed one at a time in a stable order.

    Args:
        repository: Repository giving access to the files.
        change_set: The current change set.

    Returns:
        Patches for the files that could be read.
    """
    untracked = get_untracked_changes(change_set)
    if len(untracked) > MAX_UNTRACKED_FILES:
        logger.info(
            "Limiting untracked files from %d to %d", len(untracked), MAX_UNTRACKED_FILES
        )
        untracked = untracked[:MAX_UNTRACKED_FILES]

    patches = []
    for change in untracked:
        patch = build_untracked_patch(repository, change.path)
        if patch:
            patches.append(patch)
    return patches
