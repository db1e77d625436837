"""LLM-related exception classes.

Contains all exception classes for LLM operations:
- LLMError: Base exception for LLM-related errors
- MissingAPIKeyError: Raised when API key is not set
- FailureKind: Closed set of request failure categories
- RequestFailure: Raised (and reported) when a generation request fails
"""

from enum import Enum
from typing import Optional


class LLMError(Exception):
    """Base exception for LLM-related errors."""

    pass


class MissingAPIKeyError(LLMError):
    """Raised when the required API key is not set."""

    pass


class FailureKind(str, Enum):
    """Why a generation request failed."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    NETWORK = "network"
    CANCELLED = "cancelled"
    INVALID_RESPONSE = "invalid_response"
    API = "api"
    CONFIGURATION = "configuration"


class RequestFailure(LLMError):
    """A generation request that did not produce text.

    Attributes:
        kind: The failure category.
        status: HTTP status code, when the server answered.
    """

    def __init__(self, kind: FailureKind, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.status = status

    @property
    def message(self) -> str:
        return str(self)

    def __repr__(self) -> str:
        return f"RequestFailure(kind={self.kind.value!r}, message={str(self)!r}, status={self.status!r})"
