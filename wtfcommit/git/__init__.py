"""Git context collector module for wtfcommit.

This package provides modular git context collection with:
- exceptions: GitError, NoStagedChangesError
- runner: _run_git_command, get_repo_root
- models: ChangeStatus, ChangeOrigin, ChangeEntry, ChangeSet, Repository
- status: get_change_set, parse_porcelain_status, get_stageable_paths
- diff: get_diff
- untracked: get_untracked_changes, build_untracked_patch, build_untracked_patches
- summary: build_large_diff_summary, rank_directories
- context: build_diff_context
- repository: GitRepository
"""

# Exceptions
from wtfcommit.git.exceptions import (
    GitError,
    NoStagedChangesError,
)

# Runner utilities
from wtfcommit.git.runner import (
    _run_git_command,
    get_repo_root,
)

# Change models
from wtfcommit.git.models import (
    ChangeEntry,
    ChangeOrigin,
    ChangeSet,
    ChangeStatus,
    Repository,
)

# Status utilities
from wtfcommit.git.status import (
    get_change_set,
    get_stageable_paths,
    parse_porcelain_status,
)

# Diff utilities
from wtfcommit.git.diff import get_diff

# Untracked file patches
from wtfcommit.git.untracked import (
    build_untracked_patch,
    build_untracked_patches,
    get_untracked_changes,
)

# Large diff summary
from wtfcommit.git.summary import (
    build_large_diff_summary,
    rank_directories,
)

# Diff context builder
from wtfcommit.git.context import build_diff_context

# Command-line backed repository
from wtfcommit.git.repository import GitRepository


__all__ = [
    # Exceptions
    "GitError",
    "NoStagedChangesError",
    # Runner
    "_run_git_command",
    "get_repo_root",
    # Models
    "ChangeEntry",
    "ChangeOrigin",
    "ChangeSet",
    "ChangeStatus",
    "Repository",
    # Status
    "get_change_set",
    "get_stageable_paths",
    "parse_porcelain_status",
    # Diff
    "get_diff",
    # Untracked
    "build_untracked_patch",
    "build_untracked_patches",
    "get_untracked_changes",
    # Summary
    "build_large_diff_summary",
    "rank_directories",
    # Context
    "build_diff_context",
    # Repository
    "GitRepository",
]
