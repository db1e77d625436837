"""LLM module for wtfcommit.

This module talks to OpenAI-compatible chat-completion endpoints.
The active provider is resolved per run by wtfcommit.config.
"""

import os

from dotenv import load_dotenv

from wtfcommit.config import LLMProvider, get_api_key_env_var
from wtfcommit.llm.cancellation import CancellationRegistration, CancellationToken
from wtfcommit.llm.client import (
    GenerationOutcome,
    GenerationRequest,
    build_chat_completions_endpoint,
    generate,
    request_completion,
)
from wtfcommit.llm.exceptions import (
    FailureKind,
    LLMError,
    MissingAPIKeyError,
    RequestFailure,
)

# Load environment variables from .env file
load_dotenv()


def get_api_key(provider: LLMProvider) -> str:
    """Get the API key for a provider.

    Checks in order:
    1. Environment variable (including a loaded .env file)
    2. ~/.wtfcommit/credentials file

    Args:
        provider: The provider whose key is needed.

    Returns:
        The API key string.

    Raises:
        MissingAPIKeyError: If the API key is not found.
    """
    from wtfcommit.global_config import get_credential

    env_var_name = get_api_key_env_var(provider)

    # First check environment variable
    api_key = os.getenv(env_var_name, "").strip()
    if api_key:
        return api_key

    # Then check credentials file
    api_key = (get_credential(env_var_name) or "").strip()
    if api_key:
        return api_key

    raise MissingAPIKeyError(
        f"API key for {provider.value} is not set. Set it using:\n"
        f"  1. Environment variable: export {env_var_name}=your_key_here\n"
        f"  2. Run: wtfcommit config set-key {provider.value}\n"
        f"  3. Manually add to ~/.wtfcommit/credentials"
    )


# Export commonly used items
__all__ = [
    "CancellationRegistration",
    "CancellationToken",
    "FailureKind",
    "GenerationOutcome",
    "GenerationRequest",
    "LLMError",
    "MissingAPIKeyError",
    "RequestFailure",
    "build_chat_completions_endpoint",
    "generate",
    "get_api_key",
    "request_completion",
]
