"""
Descriptor Registry.

An ordered, immutable catalog of the remote archives making up one dataset
family, together with the name of the local cache directory they are stored
in and the split layout used to pair images with labels.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..config.types import FileName
from .base import DatasetSplit, FileDescriptor


class DescriptorRegistry(BaseModel):
    """
    Immutable catalog of expected remote files.

    Attributes:
        name: Registry identifier (e.g. ``'mnist'``).
        cache_dir: Name of the cache directory, joined onto the data root.
        descriptors: Ordered file descriptors; names must be unique.
        splits: Split name → image/label descriptor names.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Registry identifier")
    cache_dir: FileName = Field(..., description="Local cache directory name")
    descriptors: tuple[FileDescriptor, ...] = Field(..., min_length=1)
    splits: dict[str, DatasetSplit] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_consistency(self) -> "DescriptorRegistry":
        """Rejects duplicate descriptor names and splits naming unknown files."""
        names = [d.name for d in self.descriptors]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate descriptor names in registry '{self.name}': {duplicates}")

        known = set(names)
        for split_name, split in self.splits.items():
            unknown = {split.images, split.labels} - known
            if unknown:
                raise ValueError(f"Split '{split_name}' references unknown files: {sorted(unknown)}")
        return self

    def get(self, name: str) -> FileDescriptor:
        """
        Retrieves a descriptor by file name.

        Raises:
            KeyError: If no descriptor has that name.
        """
        for descriptor in self.descriptors:
            if descriptor.name == name:
                return descriptor
        raise KeyError(f"File '{name}' not found. Available: {[d.name for d in self.descriptors]}")

    def split(self, name: str) -> tuple[FileDescriptor, FileDescriptor]:
        """
        Returns the ``(images, labels)`` descriptors of a split.

        Raises:
            KeyError: If the split is not defined.
        """
        if name not in self.splits:
            raise KeyError(f"Split '{name}' not found. Available: {list(self.splits)}")
        split = self.splits[name]
        return self.get(split.images), self.get(split.labels)

    def __len__(self) -> int:
        return len(self.descriptors)
