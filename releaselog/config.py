#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import toml
import yaml

from .exit_codes import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("releaselog")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. RELEASELOG_CONFIG environment variable
    2. ~/.releaselog/ directory
    """
    # Check for environment variable override
    if 'RELEASELOG_CONFIG' in os.environ:
        return Path(os.environ['RELEASELOG_CONFIG']).expanduser()

    config_dir = Path.home() / '.releaselog'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def read_config_file(config_path: Path) -> dict:
    """
    Read a JSON, TOML or YAML config file.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    try:
        suffix = config_path.suffix.lower()
        if suffix == '.toml':
            with open(config_path, 'rb') as f:
                file_config = tomllib.load(f)
        elif suffix in ['.yaml', '.yml']:
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f)
        else:
            # Default to JSON format
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Error loading config from {config_path}: {e}") from e

    if file_config is None:
        return {}
    if not isinstance(file_config, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return file_config


def load_config():
    """Load configuration: defaults, then the config file, then environment."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        logger.debug(f"Loading config from {config_path}")
        config = merge_configs(config, read_config_file(config_path))

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def save_config(config, config_path=None):
    """Save configuration to file; the format follows the file suffix."""
    config_path = Path(config_path) if config_path else get_config_path()

    try:
        # Create directory if it doesn't exist
        config_path.parent.mkdir(parents=True, exist_ok=True)

        suffix = config_path.suffix.lower()
        if suffix == '.toml':
            # tomllib is read-only; the toml package writes
            with open(config_path, 'w', encoding='utf-8') as f:
                toml.dump(_without_none(config), f)
        elif suffix in ['.yaml', '.yml']:
            with open(config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
        else:
            # Default to JSON format
            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump(config, f, indent=2)
    except OSError as e:
        raise ConfigError(f"Error saving config to {config_path}: {e}") from e

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def _without_none(config):
    """TOML has no null; drop unset keys."""
    if isinstance(config, dict):
        return {k: _without_none(v) for k, v in config.items() if v is not None}
    return config


def get_default_config():
    """Get default configuration."""
    return {
        "changelog": {
            "title": "Changelog",
            "formats": ["markdown"],
            "output_dir": None,
            "since": None,
            "date_format": "%Y-%m-%d"
        },
        "filters": {
            "exclude_merges": False,
            "exclude_pattern": "",
            "exclude_authors": []
        },
        "tags": {
            "include_lightweight": False
        },
        "git": {
            "timeout_seconds": 30
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        }
    }


def configure_logging(config=None, verbose=False):
    """Apply the logging section of the config to the releaselog logger."""
    settings = (config or {}).get("logging", {})
    level_name = "DEBUG" if verbose else str(settings.get("level", "WARNING")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ConfigError(f"Unknown logging level: {level_name}")

    logger.setLevel(level)
    if settings.get("format"):
        formatter = logging.Formatter(settings["format"])
        for handler in logging.getLogger().handlers:
            handler.setFormatter(formatter)


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.

    Variables follow the pattern RELEASELOG_<SECTION>_<KEY>, for example
    RELEASELOG_FILTERS_EXCLUDE_MERGES=true. Only keys that already exist
    in the config are overridden. List values are comma-separated:
    RELEASELOG_CHANGELOG_FORMATS=markdown,html
    """
    env_prefix = "RELEASELOG_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "RELEASELOG_CONFIG":
            continue

        name = env_key[len(env_prefix):].lower()
        section, key = _split_env_name(config, name)
        if section is None:
            logger.debug(f"Ignoring {env_key}: no matching config key")
            continue

        current = config[section][key]
        if isinstance(current, list):
            config[section][key] = [v.strip() for v in value.split(',') if v.strip()]
        else:
            config[section][key] = _convert_env_value(value)

    return config


def _split_env_name(config, name):
    """Find (section, key) such that "<section>_<key>" == name."""
    for section, values in config.items():
        if not isinstance(values, dict) or not name.startswith(section + '_'):
            continue
        key = name[len(section) + 1:]
        if key in values:
            return section, key
    return None, None


def _convert_env_value(value):
    if value.lower() in ('true', 'yes', 'on'):
        return True
    if value.lower() in ('false', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    return value
