"""Diff context builder.

Contains:
- build_diff_context: Build the diff text sent to the LLM
"""

from wtfcommit.config import MAX_DIFF_CHARS
from wtfcommit.git.exceptions import NoStagedChangesError
from wtfcommit.git.models import ChangeSet, Repository
from wtfcommit.git.summary import build_large_diff_summary
from wtfcommit.git.untracked import build_untracked_patches
from wtfcommit.logging import get_logger

logger = get_logger("git.context")


def build_diff_context(
    repository: Repository,
    change_set: ChangeSet,
    has_staged_changes: bool,
    smart_stage: bool,
) -> str:
    """Build the diff context for the LLM.

    Staged changes win. Without them, smart stage falls back to the unstaged
    diff. Untracked files are appended as synthesized new-file patches. If
    the combined text reaches MAX_DIFF_CHARS, a summary of the changes is
    returned instead.

    Args:
        repository: Repository to read diffs and files from.
        change_set: The current change set.
        has_staged_changes: Whether the index holds changes.
        smart_stage: Whether to fall back to unstaged changes.

    Returns:
        The diff text, a summary of it, or an empty string if there is
        nothing to describe.

    Raises:
        NoStagedChangesError: If nothing is staged and smart stage is off.
        GitError: If reading the diff fails.
    """
    if has_staged_changes:
        diff = repository.diff(staged=True)
    elif smart_stage:
        diff = repository.diff(staged=False)
    else:
        raise NoStagedChangesError(
            "No staged changes found. Please stage your changes first."
        )

    patches = build_untracked_patches(repository, change_set)
    if patches:
        diff = f"{diff}\n" + "\n".join(patches)

    if not diff.strip():
        return ""

    if len(diff) < MAX_DIFF_CHARS:
        return diff

    logger.info(
        "Diff has %d characters (limit %d), sending a summary instead", len(diff), MAX_DIFF_CHARS
    )
    changes = change_set.staged if has_staged_changes else change_set.working_tree
    return build_large_diff_summary(diff, changes)
