"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

from wtfcommit.config import GenerationConfig, LLMProvider, build_system_prompt
from wtfcommit.git.models import ChangeEntry, ChangeOrigin, ChangeSet, ChangeStatus


class FakeRepository:
    """In-memory Repository: files, diffs and a record of git operations."""

    def __init__(self, change_set=None, staged_diff="", unstaged_diff="", files=None):
        self.change_set = change_set or ChangeSet()
        self.staged_diff = staged_diff
        self.unstaged_diff = unstaged_diff
        self.files = dict(files or {})
        self.read_paths = []
        self.staged_paths = []
        self.commits = []
        self.pushes = 0

    def get_change_set(self):
        return self.change_set

    def diff(self, staged):
        return self.staged_diff if staged else self.unstaged_diff

    def _content(self, path):
        if path not in self.files:
            raise FileNotFoundError(path)
        content = self.files[path]
        return content if isinstance(content, bytes) else content.encode("utf-8")

    def file_size(self, path):
        return len(self._content(path))

    def read_text(self, path):
        self.read_paths.append(path)
        return self._content(path).decode("utf-8")

    def stage(self, paths):
        self.staged_paths.extend(paths)

    def commit(self, message):
        self.commits.append(message)

    def push(self):
        self.pushes += 1


def staged(path, status=ChangeStatus.MODIFIED):
    return ChangeEntry(path, ChangeOrigin.STAGED, status)


def unstaged(path, status=ChangeStatus.MODIFIED):
    return ChangeEntry(path, ChangeOrigin.WORKING_TREE, status)


def untracked(path):
    return ChangeEntry(path, ChangeOrigin.UNTRACKED, ChangeStatus.UNTRACKED)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_dir(temp_dir, mocker):
    """Point ~/.wtfcommit at a temporary directory."""
    mock_dir = temp_dir / ".wtfcommit"
    mocker.patch("wtfcommit.global_config._CONFIG_DIR", mock_dir)
    return mock_dir


@pytest.fixture(autouse=True)
def clear_api_key_env(monkeypatch):
    """Keep API keys from the developer's environment out of tests."""
    for name in (
        "OPENAI_API_KEY",
        "DEEPSEEK_API_KEY",
        "MOONSHOT_API_KEY",
        "GLM_API_KEY",
        "GEMINI_API_KEY",
        "OPENROUTER_API_KEY",
        "WTFCOMMIT_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_repository():
    """Factory for FakeRepository instances."""
    return FakeRepository


@pytest.fixture
def generation_config():
    """A resolved config pointing at a test endpoint."""
    return GenerationConfig(
        provider=LLMProvider.OPENAI,
        base_url="https://api.example.com/v1",
        model="test-model",
        system_prompt=build_system_prompt(None, "English"),
    )


@pytest.fixture
def sample_diff():
    """Sample staged diff for testing."""
    return """diff --git a/src/app.py b/src/app.py
index 1234567..abcdefg 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,4 @@
 import os
+import sys

 def main():
"""


@pytest.fixture
def completion_body():
    """Build a chat-completion response body with the given content."""

    def _build(content):
        return {
            "id": "chatcmpl-123",
            "object": "chat.completion",
            "created": 1700000000,
            "model": "test-model",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
        }

    return _build
