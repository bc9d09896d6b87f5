"""Configuration and profile loaders."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from jobmatch.domain.models import SearchProfile

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_LOCATIONS = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)


def load_config(config_path: Optional[Path] = None) -> tuple[AppConfig, EnvironmentConfig]:
    """Load and validate configuration from YAML and environment variables.

    Lookup order for the config file:
    1. config_path, if given (must exist)
    2. config.yaml in the current directory
    3. config/config.yaml
    4. built-in defaults (all four providers, batch size 5, 15s timeout)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    config_file = _find_config_file(config_path)

    if config_file is None:
        logger.info(
            "No configuration file found, using defaults",
            extra={"event": "config.defaults", "tried": [str(p) for p in DEFAULT_CONFIG_LOCATIONS]},
        )
        app_config = AppConfig()
    else:
        config_dict = _read_yaml(config_file, suggestions=["Copy config.example.yaml to config.yaml"])

        warnings = check_for_warnings(config_dict)
        if warnings:
            emit_warnings(warnings)

        try:
            app_config = AppConfig.model_validate(config_dict)
        except ValidationError as e:
            raise ConfigurationError(
                "Configuration validation failed",
                errors=_format_validation_errors(e),
                suggestions=[
                    "Review config.example.yaml for the expected format",
                    "Valid source types are: jsearch, adzuna, themuse, remoteok",
                ],
            ) from e

    env_config = load_environment_config()

    return app_config, env_config


def load_profile(profile_path: Path) -> SearchProfile:
    """Load a candidate search profile from a YAML file.

    Args:
        profile_path: Path to a YAML mapping with SearchProfile fields

    Raises:
        ConfigurationError: If the file is missing or does not describe a valid profile
    """
    if not profile_path.exists():
        raise ConfigurationError(
            f"Profile file not found: {profile_path}",
            suggestions=["Copy profile.example.yaml and fill in your details"],
        )

    profile_dict = _read_yaml(profile_path, suggestions=["Compare with profile.example.yaml"])

    try:
        return SearchProfile.model_validate(profile_dict)
    except ValidationError as e:
        raise ConfigurationError(
            "Search profile validation failed",
            errors=_format_validation_errors(e),
            suggestions=[
                "remote_preference must be one of: remote_only, hybrid, onsite, no_preference",
                "min_salary must be a non-negative whole number",
            ],
        ) from e


def _read_yaml(path: Path, suggestions: List[str]) -> Dict[str, Any]:
    """Read a YAML file that must contain a non-empty mapping."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML in {path}: {e}",
            suggestions=["Check YAML syntax and indentation (spaces, not tabs)"],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read {path}: {e}",
            suggestions=[f"Ensure {path} is readable"],
        ) from e

    if not data:
        raise ConfigurationError(f"{path} is empty", suggestions=suggestions)

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"{path} must contain a mapping at the top level, got {type(data).__name__}",
            suggestions=suggestions,
        )

    return data


def _format_validation_errors(error: ValidationError) -> List[str]:
    """Turn pydantic errors into one readable line per problem."""
    messages = []
    for item in error.errors():
        field_path = " -> ".join(str(loc) for loc in item["loc"]) or "(root)"
        if item["type"] == "missing":
            messages.append(f"Missing required field: {field_path}")
        else:
            messages.append(f"{field_path}: {item['msg']}")
    return messages


def _find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """Resolve the config file, or None when defaults should be used."""
    if config_path:
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                suggestions=[f"Ensure {config_path} exists", "Omit --config to use defaults"],
            )
        return config_path

    for candidate in DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return candidate

    return None
