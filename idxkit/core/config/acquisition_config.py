"""
Acquisition Configuration.

Where the dataset cache lives and how the fetch orchestrator retrieves and
re-validates remote archives.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from ..paths import DEFAULT_DATA_ROOT
from .types import PositiveFloat, ValidatedPath, WorkerCount


class AcquisitionConfig(BaseModel):
    """
    Validated manifest for the fetch → verify stage.

    Attributes:
        dataset: Built-in registry name (ignored when ``registry_manifest`` is set).
        registry_manifest: Optional path to a custom registry YAML.
        data_root: Base directory holding cache directories. Resolved to an
            absolute path once, at construction.
        max_workers: Upper bound on concurrent retrievals.
        timeout: Per-request network timeout in seconds.
        verify_cached: Re-hash cached archives; mismatching files count as missing.
        keep_decompressed: Persist the decompressed IDX file next to the archive.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dataset: str = Field(default="mnist", description="Built-in registry name")
    registry_manifest: ValidatedPath | None = Field(
        default=None, description="Custom registry YAML (overrides 'dataset')"
    )
    data_root: ValidatedPath = Field(default=DEFAULT_DATA_ROOT)
    max_workers: WorkerCount = 4
    timeout: PositiveFloat = 60.0
    verify_cached: bool = True
    keep_decompressed: bool = False

    def cache_path(self, cache_dir: str) -> Path:
        """Joins a registry's cache directory name onto the data root."""
        return self.data_root / cache_dir
