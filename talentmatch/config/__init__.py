"""Configuration management for the matching service."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError, FixtureError
from .loader import load_config, parse_config, validate_config_file
from .models import (
    AppConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    MatchingConfig,
    RankingConfig,
    RankingView,
    ScoringPolicy,
)

__all__ = [
    # Loader functions
    "load_config",
    "parse_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "MatchingConfig",
    "RankingConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "ScoringPolicy",
    "RankingView",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
    "FixtureError",
]
