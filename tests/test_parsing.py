"""Tests for wtfcommit.llm.parsing module."""

import json

import pytest

from wtfcommit.llm.exceptions import FailureKind, RequestFailure
from wtfcommit.llm.parsing import parse_completion_response, strip_reasoning_blocks


class TestStripReasoningBlocks:
    """Tests for strip_reasoning_blocks function."""

    def test_removes_think_block(self):
        """Test that a leading think block is removed."""
        text = "<think>\nLet me look at the diff.\n</think>\nfeat: add login"

        assert strip_reasoning_blocks(text) == "feat: add login"

    def test_removes_multiple_blocks_case_insensitive(self):
        """Test that every block is removed regardless of case."""
        text = "<THINK>a</THINK>fix: x<think>b</think>"

        assert strip_reasoning_blocks(text) == "fix: x"

    def test_text_without_blocks_is_stripped(self):
        """Test that plain text only loses surrounding whitespace."""
        assert strip_reasoning_blocks("  docs: readme \n") == "docs: readme"


class TestParseCompletionResponse:
    """Tests for parse_completion_response function."""

    def test_returns_first_choice_content(self, completion_body):
        """Test extraction of the message content."""
        body = json.dumps(completion_body("feat: add parser"))

        assert parse_completion_response(body) == "feat: add parser"

    def test_strips_reasoning_from_content(self, completion_body):
        """Test that think blocks never reach the caller."""
        body = json.dumps(completion_body("<think>hmm</think>\n\nfix: typo"))

        assert parse_completion_response(body) == "fix: typo"

    def test_invalid_json(self):
        """Test that a non-JSON body is an invalid response."""
        with pytest.raises(RequestFailure) as exc_info:
            parse_completion_response("<html>Bad Gateway</html>")

        assert exc_info.value.kind == FailureKind.INVALID_RESPONSE
        assert "Failed to parse API response" in exc_info.value.message

    def test_schema_mismatch(self):
        """Test that a body of the wrong shape is an invalid response."""
        with pytest.raises(RequestFailure) as exc_info:
            parse_completion_response(json.dumps({"choices": "oops"}))

        assert exc_info.value.kind == FailureKind.INVALID_RESPONSE

    @pytest.mark.parametrize(
        "body",
        [
            {"choices": []},
            {},
            {"choices": [{"message": {"content": None}}]},
            {"choices": [{"message": {"content": "   \n"}}]},
            {"choices": [{}]},
        ],
    )
    def test_missing_content(self, body):
        """Test that absent or blank content is an invalid response."""
        with pytest.raises(RequestFailure) as exc_info:
            parse_completion_response(json.dumps(body))

        assert exc_info.value.kind == FailureKind.INVALID_RESPONSE
        assert exc_info.value.message == "No content in API response."
