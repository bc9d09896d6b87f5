"""Configuration management for the job match pipeline."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, load_profile
from .models import (
    DEFAULT_SOURCE_ORDER,
    AdvancedConfig,
    AppConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ScoringConfig,
    SourceConfig,
)

__all__ = [
    # Loaders
    "load_config",
    "load_profile",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "SourceConfig",
    "ScoringConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    "DEFAULT_SOURCE_ORDER",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
