"""CLI commands for global configuration management."""

import os

import typer

from wtfcommit import global_config
from wtfcommit.config import (
    DEFAULT_LANGUAGE,
    DEFAULT_TIMEOUT_SECONDS,
    PROVIDER_PRESETS,
    LLMProvider,
    as_provider,
    get_api_key_env_var,
)
from wtfcommit.cli.utils import mask_api_key

_VALID_PROVIDERS = ", ".join(p.value for p in LLMProvider)

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage global wtfcommit configuration in ~/.wtfcommit/",
    add_completion=False,
)


def _parse_provider(provider: str) -> LLMProvider:
    try:
        return LLMProvider(provider.strip().lower())
    except ValueError:
        typer.echo(f"Invalid provider: {provider}", err=True)
        typer.echo(f"Valid providers: {_VALID_PROVIDERS}", err=True)
        raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Show current global configuration."""
    try:
        config = global_config.load_global_config()
        llm_provider = as_provider(config.get("provider"))
        preset = PROVIDER_PRESETS.get(llm_provider)

        if global_config.is_configured():
            typer.echo("Current wtfcommit configuration (~/.wtfcommit/config.yaml):")
        else:
            typer.echo("No configuration file found. Showing defaults.")
        typer.echo()

        typer.echo(f"  Provider: {llm_provider.value}")
        typer.echo(f"  Base URL: {config.get('base_url') or (preset.base_url if preset else 'not set')}")
        typer.echo(f"  Model: {config.get('model') or (preset.model if preset else 'not set')}")
        typer.echo(f"  Language: {config.get('language', DEFAULT_LANGUAGE)}")
        typer.echo(f"  Smart Stage: {config.get('smart_stage', True)}")
        typer.echo(f"  Auto Commit: {config.get('auto_commit', False)}")
        typer.echo(f"  Auto Push: {config.get('auto_push', False)}")
        typer.echo(f"  Confirm Before Commit: {config.get('confirm_before_commit', True)}")
        typer.echo(f"  Timeout: {config.get('timeout', DEFAULT_TIMEOUT_SECONDS)}s")

        if config.get("prompt"):
            typer.echo("  Prompt: custom")

        typer.echo()

        env_var = get_api_key_env_var(llm_provider)
        api_key = os.getenv(env_var, "").strip()
        source = "environment"
        if not api_key:
            api_key = (global_config.get_credential(env_var) or "").strip()
            source = "credentials file"
        if api_key:
            typer.echo(f"  API Key ({env_var}): {mask_api_key(api_key)} [{source}]")
        else:
            typer.echo(f"  API Key ({env_var}): not set")

    except global_config.GlobalConfigError as e:
        typer.echo(f"Error reading configuration: {e}", err=True)
        raise typer.Exit(1)


@config_app.command("set-key")
def config_set_key(
    provider: str = typer.Argument(
        ...,
        help=f"Provider name ({_VALID_PROVIDERS})"
    )
) -> None:
    """Set or update an API key for a provider."""
    llm_provider = _parse_provider(provider)
    env_var = get_api_key_env_var(llm_provider)

    typer.echo(f"Setting API key for {llm_provider.value}")
    api_key = typer.prompt(f"Enter your {llm_provider.value} API key", hide_input=True).strip()
    if not api_key:
        typer.echo("API key cannot be empty.", err=True)
        raise typer.Exit(1)

    try:
        global_config.save_credential(env_var, api_key)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ API key saved for {llm_provider.value}")


@config_app.command("set-provider")
def config_set_provider(
    provider: str = typer.Argument(
        ...,
        help=f"Provider name ({_VALID_PROVIDERS})"
    ),
    model: str = typer.Option(
        None,
        "--model",
        "-m",
        help="Model name (optional, uses the provider default if not provided)"
    )
) -> None:
    """Set the active LLM provider and model."""
    llm_provider = _parse_provider(provider)

    try:
        global_config.set_provider(llm_provider, model)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Provider set to: {llm_provider.value}")
    if model:
        typer.echo(f"✓ Model set to: {model}")
    elif llm_provider in PROVIDER_PRESETS:
        typer.echo(f"✓ Model: {PROVIDER_PRESETS[llm_provider].model} (default)")
    else:
        typer.echo("Set the endpoint with: wtfcommit config set base_url <url>")
        typer.echo("Set the model with: wtfcommit config set model <name>")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Setting name (e.g. language, timeout, auto_commit)"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set a single configuration value."""
    try:
        stored = global_config.set_setting(key, value)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ {key} set to: {stored}")


@config_app.command("unset")
def config_unset(
    key: str = typer.Argument(..., help="Setting name to remove"),
) -> None:
    """Remove a configuration value so the default applies."""
    try:
        removed = global_config.unset_setting(key)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if removed:
        typer.echo(f"✓ {key} removed")
    else:
        typer.echo(f"{key} is not set")


@config_app.command("list-providers")
def config_list_providers() -> None:
    """List all available LLM providers."""
    typer.echo("Available LLM providers:")
    typer.echo()
    for llm_provider in LLMProvider:
        preset = PROVIDER_PRESETS.get(llm_provider)
        if preset:
            typer.echo(f"  • {llm_provider.value} ({preset.model} @ {preset.base_url})")
        else:
            typer.echo(f"  • {llm_provider.value} (configure base_url and model)")
    typer.echo()
    typer.echo("Use 'wtfcommit config set-provider <provider>' to switch.")
