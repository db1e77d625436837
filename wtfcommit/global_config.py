"""Global configuration management for wtfcommit.

Handles user-level configuration stored in ~/.wtfcommit/:
- config.yaml: Provider, endpoint, model and behaviour settings
- credentials: API keys for LLM providers
"""

import os
import stat
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from wtfcommit.config import LLMProvider


class GlobalConfigError(Exception):
    """Raised when there's an error with global configuration."""
    pass


_CONFIG_DIR = Path.home() / ".wtfcommit"

# Settings accepted by `wtfcommit config set`, with their value types
SETTING_TYPES: Dict[str, type] = {
    "provider": str,
    "base_url": str,
    "model": str,
    "language": str,
    "prompt": str,
    "smart_stage": bool,
    "auto_commit": bool,
    "auto_push": bool,
    "confirm_before_commit": bool,
    "timeout": float,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def get_global_config_dir() -> Path:
    """Get the global wtfcommit configuration directory.

    Returns:
        Path to ~/.wtfcommit/
    """
    return _CONFIG_DIR


def ensure_global_config_dir() -> Path:
    """Ensure the global config directory exists.

    Returns:
        Path to ~/.wtfcommit/
    """
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file_path() -> Path:
    """Get path to config.yaml file.

    Returns:
        Path to ~/.wtfcommit/config.yaml
    """
    return get_global_config_dir() / "config.yaml"


def get_credentials_file_path() -> Path:
    """Get path to credentials file.

    Returns:
        Path to ~/.wtfcommit/credentials
    """
    return get_global_config_dir() / "credentials"


def load_global_config() -> Dict[str, Any]:
    """Load global configuration from ~/.wtfcommit/config.yaml.

    Returns:
        Dictionary with configuration values. Empty dict if file doesn't exist.
    """
    config_file = get_config_file_path()

    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(config, dict):
        raise GlobalConfigError(f"Config file {config_file} must contain a mapping.")
    return config


def save_global_config(config: Dict[str, Any]) -> None:
    """Save global configuration to ~/.wtfcommit/config.yaml.

    Args:
        config: Configuration dictionary to save.
    """
    ensure_global_config_dir()
    config_file = get_config_file_path()

    try:
        with open(config_file, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to save config to {config_file}: {e}")


def _parse_credentials(text: str) -> Dict[str, str]:
    credentials = {}
    for line in text.splitlines():
        line = line.strip()
        # Skip empty lines and comments
        if not line or line.startswith("#"):
            continue

        # Parse KEY=value format
        if "=" in line:
            key, value = line.split("=", 1)
            credentials[key.strip()] = value.strip()
    return credentials


def load_credentials() -> Dict[str, str]:
    """Load API keys from ~/.wtfcommit/credentials.

    Returns:
        Dictionary mapping environment variable names to API keys.
    """
    credentials_file = get_credentials_file_path()

    if not credentials_file.exists():
        return {}

    try:
        return _parse_credentials(credentials_file.read_text())
    except OSError as e:
        raise GlobalConfigError(f"Failed to load credentials from {credentials_file}: {e}")


def save_credential(provider_key: str, api_key: str) -> None:
    """Save or update an API key in the credentials file.

    Args:
        provider_key: Environment variable name (e.g., "OPENAI_API_KEY")
        api_key: The API key value.
    """
    ensure_global_config_dir()
    credentials_file = get_credentials_file_path()

    existing_creds = load_credentials()
    existing_creds[provider_key] = api_key

    # Write back all credentials
    try:
        with open(credentials_file, "w") as f:
            f.write("# wtfcommit API credentials\n")
            f.write("# This file stores API keys for LLM providers\n")
            f.write("# Format: PROVIDER_API_KEY=your_key_here\n\n")

            for key, value in existing_creds.items():
                f.write(f"{key}={value}\n")

        # Set secure permissions (owner read/write only)
        os.chmod(credentials_file, stat.S_IRUSR | stat.S_IWUSR)

    except OSError as e:
        raise GlobalConfigError(f"Failed to save credential: {e}")


def get_credential(provider_key: str) -> Optional[str]:
    """Get an API key from credentials file.

    Args:
        provider_key: Environment variable name (e.g., "OPENAI_API_KEY")

    Returns:
        The API key if found, None otherwise.
    """
    credentials = load_credentials()
    return credentials.get(provider_key) or None


def get_active_provider() -> Optional[LLMProvider]:
    """Get the active LLM provider from global config.

    Returns:
        LLMProvider enum value, or None if not configured.
    """
    config = load_global_config()
    provider_str = config.get("provider")

    if not provider_str:
        return None

    try:
        return LLMProvider(provider_str)
    except ValueError:
        return None


def set_provider(provider: LLMProvider, model: Optional[str] = None) -> None:
    """Switch the active provider.

    A stored base URL and model belong to the previous provider, so they are
    dropped unless a model is given.

    Args:
        provider: The LLM provider to use.
        model: The model name to use (preset default if None).
    """
    config = load_global_config()
    if config.get("provider") != provider.value:
        config.pop("base_url", None)
        config.pop("model", None)
    config["provider"] = provider.value
    if model:
        config["model"] = model
    save_global_config(config)


def coerce_setting(key: str, raw_value: str) -> Any:
    """Convert a command-line value to the type of a setting.

    Args:
        key: Setting name (one of SETTING_TYPES).
        raw_value: The value as typed by the user.

    Returns:
        The converted value.

    Raises:
        GlobalConfigError: If the key is unknown or the value invalid.
    """
    if key not in SETTING_TYPES:
        valid = ", ".join(SETTING_TYPES)
        raise GlobalConfigError(f"Unknown setting: {key}. Valid settings: {valid}")

    value_type = SETTING_TYPES[key]
    if value_type is bool:
        lowered = raw_value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise GlobalConfigError(f"Invalid boolean for {key}: {raw_value}")
    if value_type is float:
        try:
            return float(raw_value)
        except ValueError:
            raise GlobalConfigError(f"Invalid number for {key}: {raw_value}")
    if key == "provider":
        try:
            return LLMProvider(raw_value.strip().lower()).value
        except ValueError:
            valid = ", ".join(p.value for p in LLMProvider)
            raise GlobalConfigError(f"Invalid provider: {raw_value}. Valid providers: {valid}")
    return raw_value


def set_setting(key: str, raw_value: str) -> Any:
    """Store one setting in global config.

    Changing the provider goes through set_provider, so the stored base URL
    and model of the previous provider are dropped.

    Args:
        key: Setting name (one of SETTING_TYPES).
        raw_value: The value as typed by the user.

    Returns:
        The stored (converted) value.
    """
    value = coerce_setting(key, raw_value)
    if key == "provider":
        set_provider(LLMProvider(value))
        return value
    config = load_global_config()
    config[key] = value
    save_global_config(config)
    return value


def unset_setting(key: str) -> bool:
    """Remove a setting from global config.

    Returns:
        True if the setting was present, False otherwise.
    """
    config = load_global_config()
    if key not in config:
        return False
    del config[key]
    save_global_config(config)
    return True


def is_configured() -> bool:
    """Check if wtfcommit has been configured.

    Returns:
        True if config.yaml exists, False otherwise.
    """
    return get_config_file_path().exists()
