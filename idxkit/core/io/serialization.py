"""
Recipe Serialization & Persistence Utilities.

Reads YAML recipes and registry manifests, and writes recipes back to disk
(``idxkit init``) with Path objects converted to portable strings.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from ..paths import LOGGER_NAME


def load_config_from_yaml(yaml_path: Path) -> dict[str, Any]:
    """
    Loads a raw configuration dictionary from a YAML file.

    Args:
        yaml_path (Path): Path to the source YAML file.

    Returns:
        dict[str, Any]: The loaded mapping (empty for an empty file).

    Raises:
        FileNotFoundError: If the specified path does not exist.
    """
    if not yaml_path.exists():
        raise FileNotFoundError(f"YAML configuration file not found at: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def save_config_as_yaml(data: Any, yaml_path: Path) -> Path:
    """
    Serializes configuration data to a YAML file.

    Supports pydantic models (via ``model_dump(mode="json")``) and plain
    dictionaries.

    Args:
        data (Any): The configuration object to save.
        yaml_path (Path): The destination filesystem path.

    Returns:
        Path: The path where the YAML was written.

    Raises:
        OSError: If a filesystem-level error occurs.
    """
    logger = logging.getLogger(LOGGER_NAME)

    raw = data.model_dump(mode="json") if hasattr(data, "model_dump") else data
    final_data = _sanitize_for_yaml(raw)

    yaml_path.parent.mkdir(parents=True, exist_ok=True)
    with open(yaml_path, "w", encoding="utf-8") as f:
        yaml.dump(final_data, f, default_flow_style=False, sort_keys=False, indent=4)
        f.flush()
        os.fsync(f.fileno())

    logger.debug(f"Recipe written to → {yaml_path.name}")
    return yaml_path


def _sanitize_for_yaml(obj: Any) -> Any:
    """Recursively converts Paths to strings and tuples to lists."""
    if isinstance(obj, dict):
        return {k: _sanitize_for_yaml(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitize_for_yaml(i) for i in obj]
    if isinstance(obj, Path):
        return str(obj)
    return obj
