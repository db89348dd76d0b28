"""
Pipeline Configuration Manifest.

Aggregates the acquisition and batching sub-configs into one immutable
object, resolves the descriptor registry it targets, and builds itself from
a YAML recipe plus dotted ``key.path=value`` overrides.
"""

from __future__ import annotations

import copy
from functools import cached_property
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...exceptions import IdxkitConfigError
from ..io import load_config_from_yaml
from ..metadata import DescriptorRegistry, FileDescriptor, get_registry, load_registry_manifest
from .acquisition_config import AcquisitionConfig
from .batching_config import BatchingConfig
from .types import LogLevel


class Config(BaseModel):
    """
    Main pipeline manifest.

    Attributes:
        acquisition: Cache location and fetch policy.
        batching: Split selection, scaling and batch size.
        weights: Optional descriptor for pretrained network parameters.
        log_level: Console/file logging level.

    Example:
        >>> cfg = Config.from_recipe(Path("recipe.yaml"), overrides={"batching.batch_size": 50})
        >>> cfg.cache_dir
        PosixPath('/home/user/project/dataset/mnist')
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    acquisition: AcquisitionConfig = Field(default_factory=AcquisitionConfig)
    batching: BatchingConfig = Field(default_factory=BatchingConfig)
    weights: FileDescriptor | None = Field(default=None)
    log_level: LogLevel = "INFO"

    @cached_property
    def registry(self) -> DescriptorRegistry:
        """
        The descriptor registry selected by the acquisition section.

        Resolved once per Config; a custom manifest is read from disk on first
        access only.

        Raises:
            IdxkitConfigError: Unknown registry name, or a manifest that is
                missing, not valid YAML, or fails validation.
        """
        manifest = self.acquisition.registry_manifest
        try:
            if manifest is not None:
                return load_registry_manifest(manifest)
            return get_registry(self.acquisition.dataset)
        except KeyError as e:
            raise IdxkitConfigError(f"Unknown registry or missing manifest field: {e}") from e
        except FileNotFoundError as e:
            raise IdxkitConfigError(f"Registry manifest not found: {manifest}") from e
        except yaml.YAMLError as e:
            raise IdxkitConfigError(f"Registry manifest {manifest} is not valid YAML: {e}") from e
        except ValidationError as e:
            raise IdxkitConfigError(f"Invalid registry manifest {manifest}: {e}") from e

    @property
    def cache_dir(self) -> Path:
        """Absolute cache directory for the selected registry."""
        return self.acquisition.cache_path(self.registry.cache_dir)

    @classmethod
    def from_recipe(cls, recipe_path: Path, overrides: dict[str, Any] | None = None) -> "Config":
        """
        Builds a Config from a YAML recipe.

        Args:
            recipe_path: Path to the YAML recipe.
            overrides: Dotted-key overrides applied on top of the recipe,
                e.g. ``{"acquisition.max_workers": 2}``.

        Raises:
            FileNotFoundError: If the recipe does not exist.
            IdxkitConfigError: If the recipe is not valid YAML or fails validation.
        """
        try:
            raw = load_config_from_yaml(recipe_path)
        except yaml.YAMLError as e:
            raise IdxkitConfigError(f"Recipe {recipe_path} is not valid YAML: {e}") from e
        return cls.from_dict(raw, overrides=overrides)

    @classmethod
    def from_dict(cls, raw: dict[str, Any], overrides: dict[str, Any] | None = None) -> "Config":
        """Validates a raw mapping (plus optional dotted overrides) into a Config."""
        data = copy.deepcopy(raw)
        for dotted_key, value in (overrides or {}).items():
            _deep_set(data, dotted_key, value)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise IdxkitConfigError(f"Invalid recipe: {e}") from e


def _deep_set(data: dict[str, Any], dotted_key: str, value: Any) -> None:
    """Sets ``data['a']['b'] = value`` for ``dotted_key='a.b'``, creating sections."""
    *parents, leaf = dotted_key.split(".")
    node = data
    for part in parents:
        child = node.setdefault(part, {})
        if not isinstance(child, dict):
            raise IdxkitConfigError(f"Cannot override '{dotted_key}': '{part}' is not a section")
        node = child
    node[leaf] = value
