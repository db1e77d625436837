"""Commit message generation pipeline.

assemble diff → request completion → normalize message. Every step's
inputs are explicit: the repository, the resolved GenerationConfig, the API
key and a CancellationToken.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from wtfcommit.config import ConfigurationError, GenerationConfig
from wtfcommit.formatters import looks_like_conventional_commit, normalize_commit_message
from wtfcommit.git.context import build_diff_context
from wtfcommit.git.models import ChangeSet, Repository
from wtfcommit.git.status import get_stageable_paths
from wtfcommit.llm.cancellation import CancellationToken
from wtfcommit.llm.client import GenerationRequest, build_chat_completions_endpoint, generate
from wtfcommit.llm.exceptions import FailureKind, RequestFailure
from wtfcommit.logging import get_logger

logger = get_logger("pipeline")


class GenerationStatus(Enum):
    """How a generation run ended."""

    GENERATED = "generated"
    NO_CHANGES = "no_changes"
    EMPTY_DIFF = "empty_diff"
    EMPTY_MESSAGE = "empty_message"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerationResult:
    """Result of generate_commit_message.

    Attributes:
        status: How the run ended.
        message: The normalized commit message (GENERATED only).
        failure: The request failure (FAILED only).
        change_set: The change set the message describes.
        is_conventional: Whether the message has a Conventional Commits header.
    """

    status: GenerationStatus
    message: str = ""
    failure: Optional[RequestFailure] = None
    change_set: Optional[ChangeSet] = None
    is_conventional: bool = False

    @property
    def ok(self) -> bool:
        return self.status == GenerationStatus.GENERATED


def generate_commit_message(
    repository: Repository,
    config: GenerationConfig,
    api_key: str,
    token: Optional[CancellationToken] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> GenerationResult:
    """Generate a commit message for the pending changes of a repository.

    Args:
        repository: The repository to describe.
        config: Settings for this run.
        api_key: Credential for the configured provider.
        token: Cancellation signal for the network call.
        transport: Optional httpx transport for the request.

    Returns:
        A GenerationResult. Request failures (including a malformed
        endpoint) are returned, not raised.

    Raises:
        NoStagedChangesError: If nothing is staged and smart stage is off.
        GitError: If git commands fail.
    """
    try:
        endpoint = build_chat_completions_endpoint(config.base_url, config.provider)
    except ConfigurationError as e:
        failure = RequestFailure(FailureKind.CONFIGURATION, str(e))
        logger.error("Invalid endpoint configuration: %s", failure)
        return GenerationResult(GenerationStatus.FAILED, failure=failure)

    change_set = repository.get_change_set()
    if change_set.is_empty:
        return GenerationResult(GenerationStatus.NO_CHANGES, change_set=change_set)

    diff = build_diff_context(
        repository,
        change_set,
        has_staged_changes=change_set.has_staged_changes,
        smart_stage=config.smart_stage,
    )
    if not diff.strip():
        return GenerationResult(GenerationStatus.EMPTY_DIFF, change_set=change_set)

    logger.info("Requesting commit message from %s (%s)", config.provider.value, config.model)
    outcome = generate(
        GenerationRequest(
            endpoint=endpoint,
            api_key=api_key,
            model=config.model,
            system_prompt=config.system_prompt,
            diff=diff,
            timeout=config.timeout,
            token=token or CancellationToken(),
        ),
        transport=transport,
    )
    if not outcome.ok:
        return GenerationResult(GenerationStatus.FAILED, failure=outcome.failure, change_set=change_set)

    message = normalize_commit_message(outcome.text or "")
    if not message:
        return GenerationResult(GenerationStatus.EMPTY_MESSAGE, change_set=change_set)

    return GenerationResult(
        GenerationStatus.GENERATED,
        message=message,
        change_set=change_set,
        is_conventional=looks_like_conventional_commit(message),
    )


def commit_generated_message(
    repository: Repository,
    change_set: ChangeSet,
    message: str,
) -> None:
    """Commit with a generated message.

    When nothing was staged, the working-tree and untracked paths the
    message describes are staged first.

    Raises:
        GitError: If staging or committing fails.
    """
    if not change_set.has_staged_changes and change_set.has_working_tree_changes:
        paths = get_stageable_paths(change_set)
        if paths:
            logger.info("Staging %d path(s) before commit", len(paths))
            repository.stage(paths)

    repository.commit(message)
