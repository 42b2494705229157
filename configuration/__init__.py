"""
Configuration Module for the Storm Forcing System.

This module builds the immutable configuration consumed by all components.
"""

from configuration.storm_config import (
    ConfigLoader,
    FatalConfigError,
    StormConfig,
    StormType,
    load_storm_config,
    count_values,
    parse_values,
)

__all__ = [
    "ConfigLoader",
    "FatalConfigError",
    "StormConfig",
    "StormType",
    "load_storm_config",
    "count_values",
    "parse_values",
]
