"""Repository adapter backed by the git command line."""

from pathlib import Path
from typing import Optional

from wtfcommit.git.diff import get_diff
from wtfcommit.git.models import ChangeSet
from wtfcommit.git.runner import _run_git_command, get_repo_root
from wtfcommit.git.status import get_change_set


class GitRepository:
    """Git working copy rooted at ``root``.

    Implements the Repository protocol: change buckets come from
    ``git status``, diffs from ``git diff`` and file access goes through the
    filesystem relative to the repository root.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    @classmethod
    def discover(cls, cwd: Optional[Path] = None) -> "GitRepository":
        """Open the repository containing ``cwd``.

        Raises:
            GitError: If not in a git repository.
        """
        return cls(get_repo_root(cwd))

    def get_change_set(self) -> ChangeSet:
        return get_change_set(cwd=self.root)

    def diff(self, staged: bool) -> str:
        return get_diff(staged, cwd=self.root)

    def file_size(self, path: str) -> int:
        return (self.root / path).stat().st_size

    def read_text(self, path: str) -> str:
        # Strict decoding: binary content raises UnicodeDecodeError
        return (self.root / path).read_bytes().decode("utf-8")

    def stage(self, paths: list[str]) -> None:
        if not paths:
            return
        _run_git_command(["add", "-A", "--"] + paths, cwd=self.root)

    def commit(self, message: str) -> None:
        _run_git_command(["commit", "-F", "-"], cwd=self.root, input_text=message)

    def push(self) -> None:
        _run_git_command(["push"], cwd=self.root)
