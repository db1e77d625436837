"""Shared utility functions for CLI commands."""

import signal
import threading
from contextlib import contextmanager
from typing import Iterator

import typer

from wtfcommit.config import LLMProvider
from wtfcommit.llm import CancellationToken, FailureKind, RequestFailure

# Exit code for runs cancelled by the user (128 + SIGINT)
EXIT_CANCELLED = 130


def mask_api_key(api_key: str) -> str:
    """Mask an API key for display.

    Args:
        api_key: The key to mask.

    Returns:
        First 8 and last 4 characters, or *** for short keys.
    """
    return api_key[:8] + "..." + api_key[-4:] if len(api_key) > 12 else "***"


@contextmanager
def cancel_on_interrupt(token: CancellationToken) -> Iterator[CancellationToken]:
    """Turn Ctrl-C into a cancellation request while the block runs.

    The previous SIGINT handler is restored on exit. Outside the main
    thread signal handlers cannot be installed, and the token is yielded
    unchanged.
    """
    if threading.current_thread() is not threading.main_thread():
        yield token
        return

    def handle_interrupt(signum, frame) -> None:
        token.cancel()

    previous = signal.signal(signal.SIGINT, handle_interrupt)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)


def report_request_failure(failure: RequestFailure, provider: LLMProvider) -> int:
    """Print a request failure and return the exit code to use.

    Args:
        failure: The failure returned by the generation pipeline.
        provider: The provider the request went to.

    Returns:
        EXIT_CANCELLED for cancelled runs, 1 otherwise.
    """
    if failure.kind == FailureKind.CANCELLED:
        typer.echo(failure.message, err=True)
        return EXIT_CANCELLED

    if failure.kind == FailureKind.AUTH:
        typer.echo(failure.message, err=True)
        typer.echo(f"Check your API key with: wtfcommit config set-key {provider.value}", err=True)
        return 1

    if failure.kind == FailureKind.INVALID_RESPONSE:
        typer.echo(f"Invalid API response: {failure.message}", err=True)
        return 1

    if failure.kind == FailureKind.CONFIGURATION:
        typer.echo(f"Configuration error: {failure.message}", err=True)
        return 1

    typer.echo(failure.message, err=True)
    return 1
