"""
Configuration loader for txgen.

Supports YAML configuration files whose keys mirror RunConfig fields.
Values given on the command line override values from the file.

Example config.yaml:

    users: 10000
    transactions: 1000000
    providers: 15
    skewed: true
    format: csv
    id_mode: per-kind
    start_ids:
      user: 1
      transaction: 5000000
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .ids import ID_MODES
from .models import ENTITY_KINDS
from .sinks import validate_format
from .values import VALUE_PROVIDERS

INT_KEYS = ("users", "transactions", "providers", "start_id", "seed")
FLOAT_KEYS = ("min_amount", "max_amount")
BOOL_KEYS = ("skewed", "address_ids")
STR_KEYS = ("output_dir", "format", "id_mode", "values", "locale")

KNOWN_KEYS = frozenset(INT_KEYS + FLOAT_KEYS + BOOL_KEYS + STR_KEYS + ("start_ids",))


def validate_integer(value, name: str = "value") -> int:
    """
    Validate and coerce a value to an integer.

    Args:
        value: Value to validate (int or numeric string)
        name: Name of the field (for error messages)

    Returns:
        Validated integer

    Raises:
        ValueError: If value cannot be safely converted to int
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid integer for {name}: '{value}'")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid integer for {name}: '{value}'")


def validate_float(value, name: str = "value") -> float:
    """
    Validate and coerce a value to a finite float.

    Raises:
        ValueError: If value cannot be safely converted to float
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid float for {name}: '{value}'")
    try:
        result = float(value)
        if not (-1e15 < result < 1e15):  # Sanity bound, also rejects inf/nan
            raise ValueError(f"Float value out of range for {name}: {result}")
        return result
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid float for {name}: '{value}'") from e


def load_config(path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        path: Path to YAML config file

    Returns:
        Parsed configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is not valid YAML or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if config is None:
        config = {}
    validate_config(config)
    return config


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure.

    Only checks shape and types; cross-field rules (e.g. transactions
    without users) are enforced by RunConfig.

    Raises:
        ValueError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValueError("Configuration must be a mapping of option names to values")

    unknown = sorted(set(config) - KNOWN_KEYS)
    if unknown:
        raise ValueError(f"Unknown configuration key(s): {', '.join(unknown)}")

    for key in INT_KEYS:
        if config.get(key) is not None:
            validate_integer(config[key], key)
    for key in FLOAT_KEYS:
        if config.get(key) is not None:
            validate_float(config[key], key)
    for key in BOOL_KEYS:
        if config.get(key) is not None and not isinstance(config[key], bool):
            raise ValueError(f"Config '{key}' must be a boolean (true/false)")
    for key in STR_KEYS:
        if config.get(key) is not None and not isinstance(config[key], str):
            raise ValueError(f"Config '{key}' must be a string")

    if config.get("format") is not None:
        validate_format(config["format"])
    if config.get("id_mode") is not None and config["id_mode"] not in ID_MODES:
        raise ValueError(
            f"Invalid id_mode: '{config['id_mode']}'. Must be one of: {', '.join(ID_MODES)}"
        )
    if config.get("values") is not None and config["values"] not in VALUE_PROVIDERS:
        raise ValueError(
            f"Invalid values: '{config['values']}'. "
            f"Must be one of: {', '.join(sorted(VALUE_PROVIDERS))}"
        )

    if config.get("start_ids") is not None:
        start_ids = config["start_ids"]
        if not isinstance(start_ids, dict):
            raise ValueError("Config 'start_ids' must be a mapping of entity kind to start id")
        for kind, value in start_ids.items():
            if kind not in ENTITY_KINDS:
                raise ValueError(
                    f"Invalid start_ids kind: '{kind}'. Must be one of: {', '.join(ENTITY_KINDS)}"
                )
            validate_integer(value, f"start_ids.{kind}")

    return True


def run_config_from_dict(
    config: Optional[Dict[str, Any]] = None, overrides: Optional[Dict[str, Any]] = None
):
    """
    Build a RunConfig from a config mapping plus overrides.

    Overrides whose value is None are ignored, so unset CLI flags fall
    through to the file value and then to the RunConfig default.

    Raises:
        ValueError: If the merged configuration is invalid
    """
    from .runner import RunConfig

    merged: Dict[str, Any] = dict(config or {})
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key == "start_ids":
            start_ids = dict(merged.get("start_ids") or {})
            start_ids.update({k: v for k, v in value.items() if v is not None})
            if start_ids:
                merged["start_ids"] = start_ids
            continue
        merged[key] = value

    validate_config(merged)

    kwargs: Dict[str, Any] = {}
    for key in INT_KEYS:
        if merged.get(key) is not None:
            kwargs[key] = validate_integer(merged[key], key)
    for key in FLOAT_KEYS:
        if merged.get(key) is not None:
            kwargs[key] = validate_float(merged[key], key)
    for key in BOOL_KEYS + STR_KEYS:
        if merged.get(key) is not None:
            kwargs[key] = merged[key]
    if merged.get("start_ids"):
        kwargs["start_ids"] = {
            kind: validate_integer(value, f"start_ids.{kind}")
            for kind, value in merged["start_ids"].items()
        }

    return RunConfig(**kwargs)
