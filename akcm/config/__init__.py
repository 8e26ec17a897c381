# AKCM Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from akcm.config.defaults import DEFAULT_CONFIG, default_config, generate_default_config
from akcm.config.loader import (
    apply_overrides,
    ensure_config_exists,
    get_config_path,
    load_config,
    save_config,
    validate_config_file,
)
from akcm.config.schema import (
    AkcmConfig,
    Category,
    DesiredState,
    DirectCallConfig,
    HostConfig,
    LogLevel,
    OutputConfig,
    Policy,
    TimingConfig,
)

__all__ = [
    # Schema
    "AkcmConfig",
    "Policy",
    "TimingConfig",
    "HostConfig",
    "DirectCallConfig",
    "OutputConfig",
    "DesiredState",
    "Category",
    "LogLevel",
    # Loader
    "load_config",
    "save_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    "apply_overrides",
    # Defaults
    "DEFAULT_CONFIG",
    "default_config",
    "generate_default_config",
]
