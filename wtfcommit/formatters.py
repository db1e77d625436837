"""Commit message normalization and checks."""

import re

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_+.-]*\s*$")
_CLOSING_FENCE = re.compile(r"^\s*```\s*$")

CONVENTIONAL_TYPES = [
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "perf",
    "test",
    "chore",
    "ci",
    "build",
]

_CONVENTIONAL_HEADER = re.compile(
    r"^(" + "|".join(CONVENTIONAL_TYPES) + r")(\([^)]+\))?!?:\s+.+$"
)


def _is_fenced(lines: list[str]) -> bool:
    return (
        len(lines) >= 2
        and _OPENING_FENCE.match(lines[0]) is not None
        and _CLOSING_FENCE.match(lines[-1]) is not None
    )


def normalize_commit_message(raw_message: str) -> str:
    """Clean raw model output into a commit message.

    Surrounding whitespace and blank lines are removed, and a Markdown code
    fence (with optional language tag) wrapping the whole message is
    dropped. Lines are joined with ``\\n``; blank lines inside the message
    are kept. Normalizing a normalized message returns it unchanged.

    Args:
        raw_message: The text returned by the model.

    Returns:
        The cleaned message, possibly empty.

    Example:
        >>> normalize_commit_message("```\\nfix: x\\n```")
        'fix: x'
    """
    message = raw_message.strip()
    lines = _LINE_BREAK.split(message)

    # Some models wrap plain text in markdown fences
    while _is_fenced(lines):
        message = "\n".join(lines[1:-1]).strip()
        lines = _LINE_BREAK.split(message)

    return "\n".join(lines)


def looks_like_conventional_commit(message: str) -> bool:
    """Check whether the first line is a Conventional Commits header.

    Only used to warn the user; the message is never rejected.

    Args:
        message: The commit message.

    Returns:
        True if the header looks like ``type(scope)!: description``.
    """
    first_line = _LINE_BREAK.split(message, maxsplit=1)[0]
    return _CONVENTIONAL_HEADER.match(first_line) is not None
