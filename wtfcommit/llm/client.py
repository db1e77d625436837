"""Chat-completion client for OpenAI-compatible endpoints.

One generation request is exactly one POST to ``{base_url}/chat/completions``.
The request races three events: the HTTP response, a deadline timer and an
external CancellationToken. Whichever comes first ends the call; failures
are classified into FailureKind and reported once, never retried.

Contains:
- build_chat_completions_endpoint: Derive and validate the endpoint URL
- GenerationRequest / GenerationOutcome: Input and result of one call
- request_completion: Async request with deadline and cancellation
- generate: Synchronous wrapper around request_completion
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlsplit

import httpx
import openai
from openai import AsyncOpenAI

from wtfcommit.config import (
    DEFAULT_TIMEOUT_SECONDS,
    MAX_TOKENS,
    TEMPERATURE,
    ConfigurationError,
    LLMProvider,
)
from wtfcommit.llm.cancellation import CancellationToken
from wtfcommit.llm.exceptions import FailureKind, RequestFailure
from wtfcommit.llm.parsing import parse_completion_response
from wtfcommit.logging import get_logger

logger = get_logger("llm.client")

CHAT_COMPLETIONS_PATH = "/chat/completions"
USER_PROMPT_PREFIX = "Here is the git diff:\n\n"
MAX_ERROR_BODY_CHARS = 500
CANCELLED_MESSAGE = "Commit message generation cancelled."


def validate_endpoint(endpoint: str) -> None:
    """Check that an endpoint is an http(s) chat-completions URL.

    Raises:
        ConfigurationError: If the URL cannot be used.
    """
    try:
        parts = urlsplit(endpoint)
        # Accessing port validates it
        parts.port
    except ValueError:
        raise ConfigurationError(f"Invalid Base URL: {endpoint}")

    if parts.scheme not in ("http", "https"):
        raise ConfigurationError(f"Unsupported URL protocol: {parts.scheme or '(none)'}:")
    if not parts.hostname:
        raise ConfigurationError(f"Invalid Base URL: {endpoint}")
    if not endpoint.rstrip("/").endswith(CHAT_COMPLETIONS_PATH):
        raise ConfigurationError(f"Endpoint must end with {CHAT_COMPLETIONS_PATH}: {endpoint}")


def build_chat_completions_endpoint(base_url: str, provider: LLMProvider) -> str:
    """Build the chat-completions endpoint from a configured base URL.

    Trailing slashes are removed and ``/chat/completions`` appended, unless
    the custom provider is selected and the URL already ends with it.

    Args:
        base_url: The configured base URL.
        provider: The active provider.

    Returns:
        The endpoint URL.

    Raises:
        ConfigurationError: If the URL is empty, malformed or not http(s).
    """
    sanitized = base_url.strip().rstrip("/")
    if not sanitized:
        raise ConfigurationError("Base URL is empty.")

    if provider == LLMProvider.CUSTOM and sanitized.endswith(CHAT_COMPLETIONS_PATH):
        endpoint = sanitized
    else:
        endpoint = f"{sanitized}{CHAT_COMPLETIONS_PATH}"

    validate_endpoint(endpoint)
    return endpoint


@dataclass(frozen=True)
class GenerationRequest:
    """Everything needed for one chat-completion call."""

    endpoint: str
    api_key: str
    model: str
    system_prompt: str
    diff: str
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    token: CancellationToken = field(default_factory=CancellationToken)

    @property
    def messages(self) -> list[dict]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": f"{USER_PROMPT_PREFIX}{self.diff}"},
        ]


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of one generation call: text or a failure, never both."""

    text: Optional[str] = None
    failure: Optional[RequestFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def kind(self) -> Optional[FailureKind]:
        return self.failure.kind if self.failure else None


def classify_status(status: int, body: str) -> RequestFailure:
    """Map a non-2xx HTTP status to a RequestFailure.

    Args:
        status: The HTTP status code.
        body: The (already truncated) response body.

    Returns:
        The failure to report.
    """
    if status in (401, 403):
        return RequestFailure(FailureKind.AUTH, f"Authentication failed ({status})", status)
    if status == 429:
        return RequestFailure(FailureKind.RATE_LIMIT, "Rate limit reached. Please retry later.", status)
    return RequestFailure(
        FailureKind.API,
        f"API request failed ({status}): {body or 'No error details returned.'}",
        status,
    )


def _safe_response_text(response: httpx.Response) -> str:
    """Read up to MAX_ERROR_BODY_CHARS of a response body, or "" if unreadable."""
    try:
        return response.text[:MAX_ERROR_BODY_CHARS]
    except (httpx.HTTPError, httpx.StreamError):
        return ""


def _sdk_base_url(endpoint: str) -> str:
    # The SDK appends the chat-completions path itself
    return endpoint.rstrip("/")[: -len(CHAT_COMPLETIONS_PATH)]


async def _post_chat_completion(
    request: GenerationRequest,
    transport: Optional[httpx.AsyncBaseTransport],
) -> httpx.Response:
    """Send the POST and return the raw HTTP response."""
    http_client = httpx.AsyncClient(transport=transport) if transport is not None else None

    async with AsyncOpenAI(
        api_key=request.api_key,
        base_url=_sdk_base_url(request.endpoint),
        max_retries=0,
        # The deadline is enforced by request_completion
        timeout=httpx.Timeout(None),
        http_client=http_client,
    ) as client:
        raw = await client.chat.completions.with_raw_response.create(
            model=request.model,
            messages=request.messages,
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
        )
        return raw.http_response


async def _complete(
    request: GenerationRequest,
    transport: Optional[httpx.AsyncBaseTransport],
) -> str:
    try:
        validate_endpoint(request.endpoint)
    except ConfigurationError as e:
        raise RequestFailure(FailureKind.CONFIGURATION, str(e))

    token = request.token
    if token.is_cancelled:
        raise RequestFailure(FailureKind.CANCELLED, CANCELLED_MESSAGE)

    logger.debug(
        "POST %s (model %s, %d diff characters)", request.endpoint, request.model, len(request.diff)
    )

    loop = asyncio.get_running_loop()
    task = loop.create_task(_post_chat_completion(request, transport))
    timed_out = False

    def on_timeout() -> None:
        nonlocal timed_out
        timed_out = True
        task.cancel()

    timer = loop.call_later(request.timeout, on_timeout)
    registration = token.on_cancel(lambda: loop.call_soon_threadsafe(task.cancel))

    try:
        response = await task
    except openai.APIStatusError as e:
        raise classify_status(e.status_code, _safe_response_text(e.response))
    except (asyncio.CancelledError, openai.APIConnectionError, httpx.TransportError) as e:
        if token.is_cancelled:
            raise RequestFailure(FailureKind.CANCELLED, CANCELLED_MESSAGE)
        if timed_out:
            raise RequestFailure(
                FailureKind.TIMEOUT,
                f"Request timed out after {round(request.timeout)} seconds.",
            )
        if isinstance(e, asyncio.CancelledError):
            # Cancelled from outside this call: not ours to classify
            raise
        raise RequestFailure(FailureKind.NETWORK, f"Network request failed: {e}")
    finally:
        timer.cancel()
        registration.dispose()

    if not response.is_success:
        raise classify_status(response.status_code, _safe_response_text(response))

    return parse_completion_response(response.text)


async def request_completion(
    request: GenerationRequest,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> GenerationOutcome:
    """Run one chat-completion request.

    Args:
        request: The request to send.
        transport: Optional httpx transport (tests use httpx.MockTransport).

    Returns:
        A GenerationOutcome with the generated text (reasoning blocks
        removed) or the failure that ended the call.
    """
    try:
        text = await _complete(request, transport)
    except RequestFailure as failure:
        if failure.kind == FailureKind.CANCELLED:
            logger.info("LLM request cancelled")
        else:
            logger.error("LLM request failed: %s", failure)
        return GenerationOutcome(failure=failure)
    return GenerationOutcome(text=text)


def generate(
    request: GenerationRequest,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> GenerationOutcome:
    """Synchronous entry point: run request_completion in a fresh event loop."""
    return asyncio.run(request_completion(request, transport))
