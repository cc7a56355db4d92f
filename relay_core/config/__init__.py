"""
Runtime Configuration Module

Provides configuration loading and management for the relay merkle core.
"""

from .runtime import (
    ENV_PREFIX,
    LoggingConfig,
    RuntimeConfig,
    TreeConfig,
    get_default_config_template,
    load_config,
)

__all__ = [
    "ENV_PREFIX",
    "LoggingConfig",
    "RuntimeConfig",
    "TreeConfig",
    "get_default_config_template",
    "load_config",
]
