"""Tests for wtfcommit.config module."""

import pytest
import yaml

from wtfcommit.config import (
    API_KEY_ENV_VARS,
    DEFAULT_PROVIDER,
    DEFAULT_TIMEOUT_SECONDS,
    PROVIDER_PRESETS,
    ConfigurationError,
    LLMProvider,
    as_provider,
    build_system_prompt,
    get_api_key_env_var,
    load_generation_config,
)
from wtfcommit.global_config import set_setting


def _write_config(config_dir, data):
    config_dir.mkdir(parents=True, exist_ok=True)
    with open(config_dir / "config.yaml", "w") as f:
        yaml.dump(data, f)


class TestProviderTables:
    """Tests for provider presets and key variables."""

    def test_every_provider_has_key_env_var(self):
        """Test that all providers map to an environment variable."""
        for provider in LLMProvider:
            assert get_api_key_env_var(provider) == API_KEY_ENV_VARS[provider]

    def test_custom_provider_has_no_preset(self):
        """Test that the custom provider must be configured."""
        assert LLMProvider.CUSTOM not in PROVIDER_PRESETS
        assert all(p in PROVIDER_PRESETS for p in LLMProvider if p != LLMProvider.CUSTOM)

    def test_default_provider_is_openai(self):
        """Test the default provider."""
        assert DEFAULT_PROVIDER == LLMProvider.OPENAI


class TestAsProvider:
    """Tests for as_provider function."""

    def test_parses_case_insensitive(self):
        """Test that provider names are case-insensitive."""
        assert as_provider(" DeepSeek ") == LLMProvider.DEEPSEEK

    def test_unknown_falls_back_to_default(self):
        """Test the fallback for unknown and missing names."""
        assert as_provider("nope") == DEFAULT_PROVIDER
        assert as_provider(None) == DEFAULT_PROVIDER


class TestBuildSystemPrompt:
    """Tests for build_system_prompt function."""

    def test_appends_language_instruction(self):
        """Test that the language line ends the prompt."""
        prompt = build_system_prompt("Be brief.", "German")

        assert prompt.startswith("Be brief.")
        assert prompt.endswith("IMPORTANT: Please write the commit message in German.")

    def test_uses_default_prompt(self):
        """Test the default prompt when none is configured."""
        prompt = build_system_prompt(None, "English")

        assert "commit message" in prompt
        assert prompt.endswith("in English.")


class TestLoadGenerationConfig:
    """Tests for load_generation_config function."""

    def test_defaults_without_config_file(self, config_dir):
        """Test the resolved defaults."""
        config = load_generation_config()

        preset = PROVIDER_PRESETS[LLMProvider.OPENAI]
        assert config.provider == LLMProvider.OPENAI
        assert config.base_url == preset.base_url
        assert config.model == preset.model
        assert config.language == "English"
        assert config.smart_stage is True
        assert config.auto_commit is False
        assert config.auto_push is False
        assert config.confirm_before_commit is True
        assert config.timeout == DEFAULT_TIMEOUT_SECONDS

    def test_reads_config_file(self, config_dir):
        """Test that stored settings are applied."""
        _write_config(config_dir, {
            "provider": "deepseek",
            "model": "deepseek-reasoner",
            "language": "French",
            "smart_stage": False,
            "auto_commit": True,
            "timeout": 10,
        })

        config = load_generation_config()

        assert config.provider == LLMProvider.DEEPSEEK
        assert config.base_url == PROVIDER_PRESETS[LLMProvider.DEEPSEEK].base_url
        assert config.model == "deepseek-reasoner"
        assert config.language == "French"
        assert config.system_prompt.endswith("in French.")
        assert config.smart_stage is False
        assert config.auto_commit is True
        assert config.timeout == 10.0

    def test_arguments_override_config_file(self, config_dir):
        """Test that explicit arguments win."""
        _write_config(config_dir, {"language": "French", "auto_commit": True})

        config = load_generation_config(language="Spanish", auto_commit=False)

        assert config.language == "Spanish"
        assert config.auto_commit is False

    def test_stored_model_ignored_for_other_provider(self, config_dir):
        """Test that a provider override does not inherit the stored model."""
        _write_config(config_dir, {"provider": "openai", "model": "gpt-custom"})

        config = load_generation_config(provider="gemini")

        assert config.provider == LLMProvider.GEMINI
        assert config.model == PROVIDER_PRESETS[LLMProvider.GEMINI].model

    def test_provider_switch_uses_new_preset_endpoint(self, config_dir):
        """Test that switching provider by setting does not keep a custom URL."""
        _write_config(config_dir, {
            "provider": "custom",
            "base_url": "http://localhost:8080/v1",
            "model": "local",
        })

        set_setting("provider", "deepseek")
        config = load_generation_config()

        assert config.provider == LLMProvider.DEEPSEEK
        assert config.base_url == PROVIDER_PRESETS[LLMProvider.DEEPSEEK].base_url
        assert config.model == PROVIDER_PRESETS[LLMProvider.DEEPSEEK].model

    def test_custom_provider_requires_base_url(self, config_dir):
        """Test that the custom provider without a URL is an error."""
        with pytest.raises(ConfigurationError, match="Base URL is missing"):
            load_generation_config(provider="custom", model="llama3")

    def test_custom_provider_requires_model(self, config_dir):
        """Test that the custom provider without a model is an error."""
        with pytest.raises(ConfigurationError, match="Model is missing"):
            load_generation_config(provider="custom", base_url="http://localhost:8080/v1")

    def test_custom_provider_from_config_file(self, config_dir):
        """Test a fully configured custom provider."""
        _write_config(config_dir, {
            "provider": "custom",
            "base_url": "http://localhost:11434/v1",
            "model": "qwen2.5-coder",
        })

        config = load_generation_config()

        assert config.provider == LLMProvider.CUSTOM
        assert config.base_url == "http://localhost:11434/v1"
        assert config.model == "qwen2.5-coder"

    @pytest.mark.parametrize("timeout", [0, -5])
    def test_rejects_non_positive_timeout(self, config_dir, timeout):
        """Test that the timeout must be positive."""
        with pytest.raises(ConfigurationError, match="Timeout"):
            load_generation_config(timeout=timeout)

    def test_rejects_non_numeric_timeout(self, config_dir):
        """Test that a stored non-numeric timeout is an error."""
        _write_config(config_dir, {"timeout": "soon"})

        with pytest.raises(ConfigurationError, match="Timeout"):
            load_generation_config()
