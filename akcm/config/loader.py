# AKCM Configuration Loader
# Load, save, and manage YAML configuration files

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from akcm.config.defaults import default_config, generate_default_config
from akcm.config.schema import AkcmConfig


def get_config_dir() -> Path:
    """Get the AKCM configuration directory."""
    return Path.home() / ".config" / "akcm"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get("AKCM_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> AkcmConfig:
    """
    Load configuration from YAML file.

    Every option has a default, so a missing file yields the default
    configuration rather than an error.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        AkcmConfig: Validated configuration object.

    Raises:
        ValidationError: If config file is invalid.
        yaml.YAMLError: If config file is not valid YAML.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return AkcmConfig.model_validate(default_config())

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}

    return AkcmConfig.model_validate(_merge_with_defaults(data))


def save_config(config: AkcmConfig, config_path: Optional[Path] = None) -> Path:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration object to save.
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Path: Path where config was saved.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    # Use mode='json' to serialize Enums as their string values
    data = config.model_dump(mode="json")

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    return config_path


def ensure_config_exists(config_path: Optional[Path] = None) -> tuple[Path, bool]:
    """
    Ensure configuration file exists, creating default if needed.

    Returns:
        Tuple of (config_path, was_created).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists():
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file without using it.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]

    if not isinstance(data, dict):
        return False, ["Configuration root must be a mapping"]

    errors: list[str] = []
    try:
        AkcmConfig.model_validate(_merge_with_defaults(data))
    except ValidationError as e:
        for error in e.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

    return len(errors) == 0, errors


def apply_overrides(config: AkcmConfig, **overrides: Any) -> AkcmConfig:
    """
    Return a copy of config with policy/host/output overrides applied.

    Keys are dotted section paths such as ``policy.mode`` passed with the dot
    replaced by a double underscore (``policy__mode``). ``None`` values are
    ignored so unset CLI options keep the file value.

    Args:
        config: Base configuration.
        **overrides: Section-qualified option values.

    Returns:
        New validated AkcmConfig.
    """
    data = config.model_dump(mode="json")
    for key, value in overrides.items():
        if value is None:
            continue
        section, _, option = key.partition("__")
        if section not in data or not option:
            raise KeyError(f"Unknown configuration option: {key}")
        data[section][option] = value
    return AkcmConfig.model_validate(data)


def _merge_with_defaults(data: dict) -> dict:
    """Merge loaded data with default values for missing keys."""
    result = default_config()

    for section, values in data.items():
        if section in result and isinstance(values, dict):
            result[section] = {**result[section], **values}
        else:
            result[section] = values

    return result
