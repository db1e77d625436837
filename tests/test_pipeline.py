"""Tests for wtfcommit.pipeline module."""

import dataclasses
import json

import httpx
import pytest
from conftest import staged, unstaged, untracked

from wtfcommit.config import LLMProvider
from wtfcommit.git import NoStagedChangesError
from wtfcommit.git.models import ChangeSet
from wtfcommit.llm import CancellationToken, FailureKind
from wtfcommit.llm.client import USER_PROMPT_PREFIX
from wtfcommit.pipeline import (
    GenerationStatus,
    commit_generated_message,
    generate_commit_message,
)


def _transport(responses, captured=None):
    def handler(request):
        if captured is not None:
            captured.append(request)
        return responses

    return httpx.MockTransport(handler)


class TestGenerateCommitMessage:
    """Tests for generate_commit_message function."""

    def test_generates_normalized_message(
        self, make_repository, generation_config, completion_body, sample_diff
    ):
        """Test the full path from staged diff to normalized message."""
        repository = make_repository(
            change_set=ChangeSet(staged=(staged("src/app.py"),)),
            staged_diff=sample_diff,
        )
        captured = []
        response = httpx.Response(200, json=completion_body("```\nfeat: import sys\n```"))

        result = generate_commit_message(
            repository, generation_config, "sk-test", transport=_transport(response, captured)
        )

        assert result.ok
        assert result.status == GenerationStatus.GENERATED
        assert result.message == "feat: import sys"
        assert result.is_conventional
        assert result.change_set is repository.change_set

        payload = json.loads(captured[0].content)
        assert payload["messages"][1]["content"] == f"{USER_PROMPT_PREFIX}{sample_diff}"

    def test_flags_non_conventional_message(self, make_repository, generation_config, completion_body):
        """Test that free-form messages are returned but flagged."""
        repository = make_repository(
            change_set=ChangeSet(staged=(staged("a.py"),)),
            staged_diff="diff --git a/a.py b/a.py",
        )
        response = httpx.Response(200, json=completion_body("Updated some stuff"))

        result = generate_commit_message(
            repository, generation_config, "sk-test", transport=_transport(response)
        )

        assert result.ok
        assert not result.is_conventional

    def test_no_changes(self, make_repository, generation_config):
        """Test that a clean repository sends no request."""
        captured = []

        result = generate_commit_message(
            make_repository(), generation_config, "sk-test",
            transport=_transport(httpx.Response(200), captured),
        )

        assert result.status == GenerationStatus.NO_CHANGES
        assert captured == []

    def test_empty_diff(self, make_repository, generation_config):
        """Test that a blank assembled diff sends no request."""
        captured = []
        repository = make_repository(
            change_set=ChangeSet(working_tree=(unstaged("mode_only.sh"),)),
            unstaged_diff="",
        )

        result = generate_commit_message(
            repository, generation_config, "sk-test",
            transport=_transport(httpx.Response(200), captured),
        )

        assert result.status == GenerationStatus.EMPTY_DIFF
        assert captured == []

    def test_no_staged_changes_without_smart_stage(self, make_repository, generation_config):
        """Test that disabled smart stage propagates the git error."""
        repository = make_repository(change_set=ChangeSet(working_tree=(unstaged("a.py"),)))
        config = dataclasses.replace(generation_config, smart_stage=False)

        with pytest.raises(NoStagedChangesError):
            generate_commit_message(repository, config, "sk-test")

    def test_request_failure_is_returned(self, make_repository, generation_config):
        """Test that request failures come back as FAILED results."""
        repository = make_repository(
            change_set=ChangeSet(staged=(staged("a.py"),)),
            staged_diff="diff --git a/a.py b/a.py",
        )

        result = generate_commit_message(
            repository, generation_config, "sk-bad",
            transport=_transport(httpx.Response(401, json={"error": {}})),
        )

        assert result.status == GenerationStatus.FAILED
        assert result.failure.kind == FailureKind.AUTH

    def test_cancelled_token(self, make_repository, generation_config):
        """Test that a cancelled token yields a cancelled failure."""
        repository = make_repository(
            change_set=ChangeSet(staged=(staged("a.py"),)),
            staged_diff="diff --git a/a.py b/a.py",
        )
        token = CancellationToken()
        token.cancel()

        result = generate_commit_message(repository, generation_config, "sk-test", token=token)

        assert result.status == GenerationStatus.FAILED
        assert result.failure.kind == FailureKind.CANCELLED

    def test_invalid_base_url_is_configuration_failure(self, make_repository, generation_config):
        """Test that a malformed base URL fails before touching git."""
        repository = make_repository(change_set=ChangeSet(staged=(staged("a.py"),)))
        config = dataclasses.replace(
            generation_config, provider=LLMProvider.CUSTOM, base_url="file:///tmp/llm"
        )

        result = generate_commit_message(repository, config, "sk-test")

        assert result.status == GenerationStatus.FAILED
        assert result.failure.kind == FailureKind.CONFIGURATION

    def test_empty_message_after_normalization(
        self, make_repository, generation_config, completion_body
    ):
        """Test that an empty fenced block is an empty message."""
        repository = make_repository(
            change_set=ChangeSet(staged=(staged("a.py"),)),
            staged_diff="diff --git a/a.py b/a.py",
        )
        response = httpx.Response(200, json=completion_body("```\n```"))

        result = generate_commit_message(
            repository, generation_config, "sk-test", transport=_transport(response)
        )

        assert result.status == GenerationStatus.EMPTY_MESSAGE


class TestCommitGeneratedMessage:
    """Tests for commit_generated_message function."""

    def test_commits_staged_changes_directly(self, make_repository):
        """Test that staged changes are committed without staging more."""
        change_set = ChangeSet(staged=(staged("a.py"),), working_tree=(unstaged("b.py"),))
        repository = make_repository(change_set=change_set)

        commit_generated_message(repository, change_set, "fix: a")

        assert repository.staged_paths == []
        assert repository.commits == ["fix: a"]

    def test_stages_working_tree_and_untracked_first(self, make_repository):
        """Test smart-stage commits include the described files."""
        change_set = ChangeSet(
            working_tree=(unstaged("b.py"),),
            untracked=(untracked("new.txt"),),
        )
        repository = make_repository(change_set=change_set)

        commit_generated_message(repository, change_set, "feat: b")

        assert repository.staged_paths == ["b.py", "new.txt"]
        assert repository.commits == ["feat: b"]
