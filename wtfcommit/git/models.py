"""Data models for pending repository changes.

Contains:
- ChangeStatus: Opaque per-entry status code reported by the git adapter
- ChangeOrigin: Which bucket (staged, working tree, untracked) an entry came from
- ChangeEntry: One changed path
- ChangeSet: The three buckets of pending changes
- Repository: Protocol the diff assembler and pipeline talk to
"""

import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class ChangeStatus(Enum):
    """Status of a changed path as reported by the host git adapter."""

    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    TYPE_CHANGED = "type_changed"
    UNMERGED = "unmerged"
    UNTRACKED = "untracked"
    IGNORED = "ignored"


class ChangeOrigin(Enum):
    """Bucket a change was reported in."""

    STAGED = "staged"
    WORKING_TREE = "working_tree"
    UNTRACKED = "untracked"


def normalize_change_path(path: str) -> str:
    """Normalize a repository-relative path to posix form.

    Args:
        path: The path as reported by the host.

    Returns:
        Path with forward slashes and no redundant separators.
    """
    normalized = posixpath.normpath(path.replace("\\", "/"))
    return normalized.lstrip("/") if normalized != "/" else normalized


@dataclass(frozen=True)
class ChangeEntry:
    """A single changed path.

    Attributes:
        path: Repository-relative path (posix separators).
        origin: The bucket the entry was reported in.
        status: Host-defined status code.
    """

    path: str
    origin: ChangeOrigin
    status: ChangeStatus = ChangeStatus.MODIFIED

    @property
    def key(self) -> str:
        """Identity of the entry: its normalized path."""
        return normalize_change_path(self.path)


@dataclass(frozen=True)
class ChangeSet:
    """Pending changes of a repository, split into three buckets."""

    staged: tuple[ChangeEntry, ...] = ()
    working_tree: tuple[ChangeEntry, ...] = ()
    untracked: tuple[ChangeEntry, ...] = ()

    @property
    def has_staged_changes(self) -> bool:
        return len(self.staged) > 0

    @property
    def has_working_tree_changes(self) -> bool:
        return len(self.working_tree) > 0 or len(self.untracked) > 0

    @property
    def is_empty(self) -> bool:
        return not self.has_staged_changes and not self.has_working_tree_changes


class Repository(Protocol):
    """Host collaborator providing change data and git operations."""

    def get_change_set(self) -> ChangeSet:
        """Return the current staged, working-tree and untracked changes."""
        ...

    def diff(self, staged: bool) -> str:
        """Return the natural diff text for staged or unstaged changes."""
        ...

    def file_size(self, path: str) -> int:
        """Return the size in bytes of a repository-relative file."""
        ...

    def read_text(self, path: str) -> str:
        """Return the decoded text content of a repository-relative file."""
        ...

    def stage(self, paths: list[str]) -> None:
        ...

    def commit(self, message: str) -> None:
        ...

    def push(self) -> None:
        ...
