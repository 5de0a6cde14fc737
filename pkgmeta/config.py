#!/usr/bin/env python3

import os
import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import logging
import sys

from .domain.version import Version

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("pkgmeta")


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. PKGMETA_CONFIG environment variable
    2. ~/.pkgmeta/ directory
    """
    if 'PKGMETA_CONFIG' in os.environ:
        path = Path(os.environ['PKGMETA_CONFIG'])
        if path.exists():
            return path

    pkgmeta_dir = Path.home() / '.pkgmeta'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = pkgmeta_dir / filename
        if path.exists() and path.stat().st_size > 10:  # Not empty/trivial
            return path

    # If no file exists, return default path for saving
    return pkgmeta_dir / 'config.json'


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                import yaml
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                # Default to JSON format
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            # Merge file config with defaults
            config = merge_configs(config, file_config)
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def save_config(config):
    """Save configuration to file."""
    config_path = get_config_path()

    try:
        # Create directory if it doesn't exist
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.suffix.lower() in ['.toml']:
            # tomllib is read-only
            import toml
            with open(config_path, 'w') as f:
                toml.dump(config, f)
        elif config_path.suffix.lower() in ['.yaml', '.yml']:
            import yaml
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        else:
            # Default to JSON format
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)

        logger.info(f"Configuration saved to {config_path}")
    except Exception as e:
        logger.error(f"Error saving config to {config_path}: {e}")
    return config_path


def get_default_config():
    """Get default configuration."""
    return {
        "general": {
            "packages_dir": "~/.pkgmeta/packages",
            "package_remote": "origin",     # Remote package tags are pushed to
        },
        "registry": {
            "path": "",                     # Defaults to <packages_dir>/METADATA
            "remote": "origin",
            "branch": "metadata-v2",
            "requirements_file": "REQUIRE",
            "fixed": {},                    # Package -> pinned version (e.g. a runtime)
        },
        "github": {
            "token": "",
            "rate_limit": {
                "max_retries": 3,
                "max_delay_seconds": 60,
            }
        },
        "git": {
            "timeout_seconds": 300,
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        },
    }


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
    Environment variables follow the pattern: PKGMETA_SECTION_SUBSECTION_KEY
    For example: PKGMETA_REGISTRY_BRANCH=metadata-v3
    """
    env_prefix = "PKGMETA_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "PKGMETA_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts_from_key = config_key.split('_')
                if key_parts[i : i + len(config_key_parts_from_key)] == config_key_parts_from_key:
                    if len(config_key_parts_from_key) > best_match_len:
                        best_match_len = len(config_key_parts_from_key)
                        matched_key = config_key

            if matched_key:
                # If we are at the end of the env var, we have found the key to set
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                # Otherwise, we descend into the dictionary
                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    # Path conflict, e.g., env var is longer but we found a non-dict value
                    break
            else:
                # No match found
                break

    return config


def configure_logging(config, verbose: bool = False) -> None:
    """Apply the logging section of the configuration."""
    log_config = config.get("logging", {})
    level = logging.DEBUG if verbose else getattr(logging, str(log_config.get("level", "INFO")).upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    fmt = log_config.get("format")
    if fmt:
        for handler in root.handlers:
            handler.setFormatter(logging.Formatter(fmt))


@dataclass(frozen=True)
class Workspace:
    """
    Explicit locations and settings every operation works against.

    Package repositories live at <packages_dir>/<name>; the registry
    working copy lives at `registry`. `remote` is the registry's
    upstream; package tags are pushed to each package's `package_remote`.
    """
    packages_dir: Path
    registry: Path
    remote: str = "origin"
    branch: str = "metadata-v2"
    requirements_file: str = "REQUIRE"
    fixed: Dict[str, Version] = field(default_factory=dict)
    package_remote: str = "origin"

    def package_path(self, pkg: str) -> Path:
        return self.packages_dir / pkg


def workspace_from_config(config) -> Workspace:
    """Build a Workspace from a loaded configuration."""
    general = config.get("general", {})
    registry = config.get("registry", {})

    packages_dir = Path(os.path.expanduser(general.get("packages_dir", "~/.pkgmeta/packages")))
    registry_path = registry.get("path") or str(packages_dir / "METADATA")

    return Workspace(
        packages_dir=packages_dir,
        registry=Path(os.path.expanduser(registry_path)),
        remote=registry.get("remote", "origin"),
        branch=registry.get("branch", "metadata-v2"),
        requirements_file=registry.get("requirements_file", "REQUIRE"),
        fixed={name: Version.parse(str(v)) for name, v in (registry.get("fixed") or {}).items()},
        package_remote=general.get("package_remote", "origin"),
    )


def github_settings(config) -> Dict[str, Any]:
    """Keyword arguments for GitHubClient from the github section."""
    github = config.get("github", {})
    rate_limit = github.get("rate_limit", {})
    return {
        "token": github.get("token") or None,
        "max_retries": int(rate_limit.get("max_retries", 3)),
        "max_delay": float(rate_limit.get("max_delay_seconds", 60)),
    }
