"""Configuration management for bash-helpers."""

from bash_helpers.config.exceptions import (
    ConfigurationError,
    InvalidConfigurationError,
)
from bash_helpers.config.models import HelperConfig

__all__ = [
    "ConfigurationError",
    "HelperConfig",
    "InvalidConfigurationError",
]
