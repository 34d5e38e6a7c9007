"""
Configuration management utilities for the conceptlab package.

Configuration Hierarchy:
1. Default configuration (conceptlab/core/default_config.json) - LLM endpoint, model,
   sampling per prompt variant, token ceiling, timeouts
2. User configuration (~/.conceptlab/config.json) - User-specific overrides, deep merged
3. Runtime overrides - Temporary changes made via set_config_value(..., save=False)

API keys never live in either file; see conceptlab.core.credentials.
"""

import os
import json
from typing import Dict, Any

# Default configuration paths
DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "default_config.json")
USER_CONFIG_PATH = os.path.expanduser("~/.conceptlab/config.json")

# Configuration singleton
_config_cache = {}

def get_config(reload: bool = False) -> Dict[str, Any]:
    """
    Get the configuration dictionary, loading it if necessary.

    Args:
        reload (bool): Force reload the configuration even if cached

    Returns:
        Dict[str, Any]: The configuration dictionary
    """
    global _config_cache

    if not _config_cache or reload:
        _config_cache = load_config()

    return _config_cache

def load_config() -> Dict[str, Any]:
    """
    Load configuration from the packaged defaults and the user override file.

    The user file only needs to contain the keys it overrides, e.g.
    ``{"llm": {"model": "gpt-4o-mini"}}`` keeps every other ``llm`` setting.

    Returns:
        Dict[str, Any]: The merged configuration dictionary
    """
    config = {}

    if os.path.exists(DEFAULT_CONFIG_PATH):
        with open(DEFAULT_CONFIG_PATH, 'r') as f:
            config.update(json.load(f))

    if os.path.exists(USER_CONFIG_PATH):
        with open(USER_CONFIG_PATH, 'r') as f:
            user_config = json.load(f)
            deep_merge(config, user_config)

    return config

def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """
    Recursively merge override dictionary into base dictionary.

    Nested dictionaries are merged key by key; any other value in the
    override replaces the base value.

    Args:
        base (Dict[str, Any]): Base dictionary to be updated
        override (Dict[str, Any]): Dictionary with values to override
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value

def save_user_config(config: Dict[str, Any]) -> None:
    """
    Save configuration to the user config file and refresh the cache.

    Args:
        config (Dict[str, Any]): Configuration dictionary to save
    """
    os.makedirs(os.path.dirname(USER_CONFIG_PATH), exist_ok=True)

    with open(USER_CONFIG_PATH, 'w') as f:
        json.dump(config, f, indent=2)

    global _config_cache
    _config_cache = load_config()

def get_config_value(key: str, default: Any = None) -> Any:
    """
    Get a specific configuration value by key.

    Dot notation reaches nested values, so 'llm.temperature.remix' reads
    config['llm']['temperature']['remix'].

    Examples:
        >>> get_config_value('llm.model', 'gpt-3.5-turbo')
        'gpt-3.5-turbo'

        >>> get_config_value('nonexistent.key', 'default-value')
        'default-value'

    Args:
        key (str): The configuration key (can use dot notation for nested keys)
        default (Any): Default value if key is not found

    Returns:
        Any: The configuration value or default
    """
    config = get_config()

    if '.' in key:
        parts = key.split('.')
        current = config

        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    return config.get(key, default)

def set_config_value(key: str, value: Any, save: bool = True) -> None:
    """
    Set a specific configuration value by key.

    Intermediate dictionaries are created as needed. With save=False the
    change only lives for the current process (the CLI uses this for
    --model and similar flags).

    Args:
        key (str): The configuration key (can use dot notation for nested keys)
        value (Any): The value to set
        save (bool): Whether to save the updated configuration to disk
    """
    config = get_config()

    if '.' in key:
        parts = key.split('.')
        current = config

        for part in parts[:-1]:
            if part not in current or not isinstance(current[part], dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = value
    else:
        config[key] = value

    global _config_cache
    _config_cache = config

    if save:
        save_user_config(config)
