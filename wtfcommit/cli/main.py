"""Main CLI command for generating commit messages."""

from pathlib import Path
from typing import Optional

import typer

from wtfcommit.config import ConfigurationError, load_generation_config
from wtfcommit.git import GitError, GitRepository
from wtfcommit.global_config import GlobalConfigError
from wtfcommit.llm import CancellationToken, MissingAPIKeyError, get_api_key
from wtfcommit.logging import configure_logging
from wtfcommit.pipeline import (
    GenerationStatus,
    commit_generated_message,
    generate_commit_message,
)
from wtfcommit.cli.utils import cancel_on_interrupt, report_request_failure


def main_command(
    ctx: typer.Context,
    provider: Optional[str] = typer.Option(
        None,
        "--provider",
        "-p",
        help="Override the provider (openai, deepseek, moonshot, glm, gemini, openrouter, custom)",
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Override the model",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        help="Override the API base URL",
    ),
    language: Optional[str] = typer.Option(
        None,
        "--language",
        "-l",
        help="Language of the commit message (default: English)",
    ),
    smart_stage: Optional[bool] = typer.Option(
        None,
        "--smart-stage/--no-smart-stage",
        help="Describe unstaged changes when nothing is staged",
    ),
    commit: Optional[bool] = typer.Option(
        None,
        "--commit/--no-commit",
        help="Commit with the generated message",
    ),
    push: Optional[bool] = typer.Option(
        None,
        "--push/--no-push",
        help="Push after committing",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Bypass confirmation prompt and commit immediately",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Request timeout in seconds (default: 45)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append log records to this file",
    ),
) -> None:
    """Generate a commit message for your pending git changes."""
    # If a subcommand is invoked, don't run the default behavior
    if ctx.invoked_subcommand is not None:
        return

    configure_logging(verbose=verbose, log_file=log_file)

    try:
        config = load_generation_config(
            provider=provider,
            model=model,
            base_url=base_url,
            language=language,
            smart_stage=smart_stage,
            auto_commit=commit,
            auto_push=push,
            confirm_before_commit=False if yes else None,
            timeout=timeout,
        )
    except (ConfigurationError, GlobalConfigError) as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1)

    try:
        api_key = get_api_key(config.provider)
    except MissingAPIKeyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    try:
        repository = GitRepository.discover()
        with cancel_on_interrupt(CancellationToken()) as token:
            result = generate_commit_message(repository, config, api_key, token)
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if result.status == GenerationStatus.NO_CHANGES:
        typer.echo("No changes detected in working tree or staging area.", err=True)
        return

    if result.status == GenerationStatus.EMPTY_DIFF:
        typer.echo("No diff content found.", err=True)
        return

    if result.status == GenerationStatus.FAILED:
        raise typer.Exit(report_request_failure(result.failure, config.provider))

    if result.status == GenerationStatus.EMPTY_MESSAGE:
        typer.echo("Generated commit message is empty. Please try again.", err=True)
        raise typer.Exit(1)

    typer.echo(result.message)

    if not result.is_conventional:
        typer.echo("Warning: Generated message may not follow Conventional Commits format.", err=True)

    if not config.auto_commit:
        typer.echo(f"[{config.provider.value}] Commit message generated.", err=True)
        return

    if config.confirm_before_commit:
        if not typer.confirm(f"[{config.provider.value}] Commit with this message?", default=True):
            typer.echo("Commit cancelled.", err=True)
            return

    try:
        commit_generated_message(repository, result.change_set, result.message)
    except GitError as e:
        typer.echo(f"Commit failed: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("Commit successful.", err=True)

    if config.auto_push:
        try:
            repository.push()
        except GitError as e:
            typer.echo(f"Commit successful, but push failed: {e}", err=True)
            raise typer.Exit(1)
        typer.echo("Push successful.", err=True)
