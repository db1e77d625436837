"""Git diff utilities.

Contains:
- get_diff: Get the staged or unstaged diff of tracked files
"""

from pathlib import Path
from typing import Optional

from wtfcommit.git.runner import _run_git_command


def get_diff(staged: bool, cwd: Optional[Path] = None) -> str:
    """Get the natural diff text of tracked changes.

    Untracked files never show up here; they are covered by synthesized
    patches (see wtfcommit.git.untracked).

    Args:
        staged: True for the index diff, False for the worktree diff.
        cwd: Repository directory.

    Returns:
        The diff string (may be empty).
    """
    args = ["diff", "--staged"] if staged else ["diff"]
    return _run_git_command(args, cwd=cwd)
