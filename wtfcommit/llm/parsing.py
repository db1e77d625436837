"""Parsing and validation of chat-completion responses.

Contains:
- ChatCompletionResponse: Pydantic model of the expected response body
- parse_completion_response: Extract the message text from a raw body
- strip_reasoning_blocks: Remove <think>...</think> sections from model output
"""

import json
import re
from typing import Optional

from pydantic import BaseModel, ValidationError

from wtfcommit.llm.exceptions import FailureKind, RequestFailure

_REASONING_BLOCK = re.compile(r"<think>.*?</think>", re.IGNORECASE | re.DOTALL)


class ChatMessage(BaseModel):
    """The assistant message of a choice."""

    content: Optional[str] = None


class ChatChoice(BaseModel):
    """One completion choice."""

    message: Optional[ChatMessage] = None


class ChatCompletionResponse(BaseModel):
    """The part of a chat-completion body wtfcommit relies on."""

    choices: list[ChatChoice] = []

    @property
    def first_content(self) -> Optional[str]:
        if not self.choices or self.choices[0].message is None:
            return None
        return self.choices[0].message.content


def strip_reasoning_blocks(text: str) -> str:
    """Remove chain-of-thought blocks emitted by reasoning models.

    Args:
        text: Raw model output.

    Returns:
        The text without any <think>...</think> blocks, stripped.
    """
    return _REASONING_BLOCK.sub("", text).strip()


def parse_completion_response(raw_body: str) -> str:
    """Extract the generated text from a chat-completion response body.

    Args:
        raw_body: The HTTP response body.

    Returns:
        The message content with reasoning blocks removed.

    Raises:
        RequestFailure: With kind INVALID_RESPONSE if the body is not the
            expected JSON shape or carries no content.
    """
    try:
        data = json.loads(raw_body)
    except json.JSONDecodeError as e:
        raise RequestFailure(FailureKind.INVALID_RESPONSE, f"Failed to parse API response: {e}")

    try:
        response = ChatCompletionResponse.model_validate(data)
    except ValidationError as e:
        raise RequestFailure(
            FailureKind.INVALID_RESPONSE,
            f"API response does not match the chat completion schema: {e.error_count()} error(s)",
        )

    content = response.first_content
    if not content or not content.strip():
        raise RequestFailure(FailureKind.INVALID_RESPONSE, "No content in API response.")

    return strip_reasoning_blocks(content)
