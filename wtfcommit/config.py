"""Configuration for wtfcommit.

User settings live in ~/.wtfcommit/config.yaml (see wtfcommit.global_config).
Use 'wtfcommit config' commands to modify them. This module holds the
provider presets, the fixed limits of the diff pipeline and the immutable
per-invocation GenerationConfig.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Optional


class ConfigurationError(Exception):
    """Raised when settings are missing or malformed."""

    pass


class LLMProvider(Enum):
    """Supported OpenAI-compatible providers."""

    OPENAI = "openai"
    DEEPSEEK = "deepseek"
    MOONSHOT = "moonshot"
    GLM = "glm"
    GEMINI = "gemini"
    OPENROUTER = "openrouter"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ProviderPreset:
    """Default endpoint and model of a provider."""

    base_url: str
    model: str


# ============================================================
# PROVIDER PRESETS
# ============================================================
# The custom provider has no preset: base URL and model must be configured.

PROVIDER_PRESETS = MappingProxyType({
    LLMProvider.OPENAI: ProviderPreset("https://api.openai.com/v1", "gpt-5-nano"),
    LLMProvider.DEEPSEEK: ProviderPreset("https://api.deepseek.com", "deepseek-chat"),
    LLMProvider.MOONSHOT: ProviderPreset("https://api.moonshot.cn/v1", "kimi-k2-turbo-preview"),
    LLMProvider.GLM: ProviderPreset("https://open.bigmodel.cn/api/paas/v4", "glm-4.7"),
    LLMProvider.GEMINI: ProviderPreset(
        "https://generativelanguage.googleapis.com/v1beta/openai", "gemini-2.5-flash-lite"
    ),
    LLMProvider.OPENROUTER: ProviderPreset("https://openrouter.ai/api/v1", "openrouter/free"),
})

# ============================================================
# API KEY ENVIRONMENT VARIABLES
# ============================================================

API_KEY_ENV_VARS = MappingProxyType({
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.DEEPSEEK: "DEEPSEEK_API_KEY",
    LLMProvider.MOONSHOT: "MOONSHOT_API_KEY",
    LLMProvider.GLM: "GLM_API_KEY",
    LLMProvider.GEMINI: "GEMINI_API_KEY",
    LLMProvider.OPENROUTER: "OPENROUTER_API_KEY",
    LLMProvider.CUSTOM: "WTFCOMMIT_API_KEY",
})

# ============================================================
# DEFAULT FALLBACK VALUES
# ============================================================
# These are used only if ~/.wtfcommit/config.yaml doesn't set them

DEFAULT_PROVIDER = LLMProvider.OPENAI
DEFAULT_LANGUAGE = "English"
DEFAULT_SYSTEM_PROMPT = (
    "You are an expert software developer. Generate a clear and concise "
    "Git commit message based on the provided diff."
)
DEFAULT_TIMEOUT_SECONDS = 45.0

# ============================================================
# REQUEST PARAMETERS
# ============================================================

TEMPERATURE = 0.7
MAX_TOKENS = 256

# ============================================================
# DIFF BUDGETS
# ============================================================

MAX_DIFF_CHARS = 20_000
MAX_PARTIAL_DIFF_CHARS = 5_000
MAX_UNTRACKED_FILE_BYTES = 120 * 1024
MAX_UNTRACKED_FILE_LINES = 400
MAX_UNTRACKED_FILES = 30
MAX_SUMMARY_DIRS = 10


def get_api_key_env_var(provider: LLMProvider) -> str:
    """Get the environment variable name for the API key.

    Args:
        provider: The LLM provider.

    Returns:
        The environment variable name.
    """
    return API_KEY_ENV_VARS[provider]


def as_provider(raw_provider: Optional[str]) -> LLMProvider:
    """Parse a provider name, falling back to DEFAULT_PROVIDER.

    Args:
        raw_provider: Provider name from settings (case-insensitive).

    Returns:
        The matching LLMProvider, or DEFAULT_PROVIDER if unknown.
    """
    if raw_provider:
        try:
            return LLMProvider(raw_provider.strip().lower())
        except ValueError:
            pass
    return DEFAULT_PROVIDER


def build_system_prompt(prompt: Optional[str], language: str) -> str:
    """Build the system prompt with the output language instruction."""
    base = prompt or DEFAULT_SYSTEM_PROMPT
    return f"{base}\n\nIMPORTANT: Please write the commit message in {language}."


@dataclass(frozen=True)
class GenerationConfig:
    """Settings for one generation run, resolved once and never mutated."""

    provider: LLMProvider
    base_url: str
    model: str
    system_prompt: str
    language: str = DEFAULT_LANGUAGE
    smart_stage: bool = True
    auto_commit: bool = False
    auto_push: bool = False
    confirm_before_commit: bool = True
    timeout: float = DEFAULT_TIMEOUT_SECONDS


def _pick(override, settings: dict, key: str, default):
    if override is not None:
        return override
    value = settings.get(key)
    return default if value is None else value


def load_generation_config(
    provider: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    language: Optional[str] = None,
    smart_stage: Optional[bool] = None,
    auto_commit: Optional[bool] = None,
    auto_push: Optional[bool] = None,
    confirm_before_commit: Optional[bool] = None,
    timeout: Optional[float] = None,
) -> GenerationConfig:
    """Resolve the generation settings for one run.

    Explicit arguments win over ~/.wtfcommit/config.yaml, which wins over
    the provider preset and built-in defaults.

    Returns:
        The resolved GenerationConfig.

    Raises:
        ConfigurationError: If the base URL or model cannot be resolved,
            or the timeout is not positive.
        GlobalConfigError: If the config file cannot be read.
    """
    # Import here to avoid circular dependency
    from wtfcommit import global_config

    settings = global_config.load_global_config()

    llm_provider = as_provider(provider or settings.get("provider"))
    preset = PROVIDER_PRESETS.get(llm_provider)

    # Stored base URL and model belong to the stored provider only
    endpoint_settings = settings if as_provider(settings.get("provider")) == llm_provider else {}

    resolved_base_url = str(_pick(base_url, endpoint_settings, "base_url", "")).strip()
    resolved_model = str(_pick(model, endpoint_settings, "model", "")).strip()

    if not resolved_base_url and preset:
        resolved_base_url = preset.base_url
    if not resolved_model and preset:
        resolved_model = preset.model

    if not resolved_base_url:
        raise ConfigurationError(
            f"Base URL is missing for {llm_provider.value}. "
            f"Set it with: wtfcommit config set base_url <url>"
        )
    if not resolved_model:
        raise ConfigurationError(
            f"Model is missing for {llm_provider.value}. "
            f"Set it with: wtfcommit config set model <name>"
        )

    resolved_language = str(_pick(language, settings, "language", DEFAULT_LANGUAGE)).strip()
    resolved_language = resolved_language or DEFAULT_LANGUAGE

    try:
        resolved_timeout = float(_pick(timeout, settings, "timeout", DEFAULT_TIMEOUT_SECONDS))
    except (TypeError, ValueError):
        raise ConfigurationError("Timeout must be a number of seconds.")
    if resolved_timeout <= 0:
        raise ConfigurationError("Timeout must be a positive number of seconds.")

    return GenerationConfig(
        provider=llm_provider,
        base_url=resolved_base_url,
        model=resolved_model,
        system_prompt=build_system_prompt(settings.get("prompt"), resolved_language),
        language=resolved_language,
        smart_stage=bool(_pick(smart_stage, settings, "smart_stage", True)),
        auto_commit=bool(_pick(auto_commit, settings, "auto_commit", False)),
        auto_push=bool(_pick(auto_push, settings, "auto_push", False)),
        confirm_before_commit=bool(
            _pick(confirm_before_commit, settings, "confirm_before_commit", True)
        ),
        timeout=resolved_timeout,
    )
