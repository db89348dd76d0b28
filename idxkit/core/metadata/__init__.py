"""
Dataset Metadata Package

Single source of truth for the remote archives IdxKit knows how to fetch:
their locations, expected SHA-256 digests and split layout.
"""

from __future__ import annotations

from typing import Final

from .base import DatasetSplit, FileDescriptor
from .domains import MNIST, load_registry_manifest
from .registry import DescriptorRegistry

REGISTRIES: Final[dict[str, DescriptorRegistry]] = {
    MNIST.name: MNIST,
}


def get_registry(name: str) -> DescriptorRegistry:
    """
    Retrieves a built-in registry by name.

    Raises:
        KeyError: If no registry is registered under that name.
    """
    if name not in REGISTRIES:
        raise KeyError(f"Registry '{name}' not found. Available: {list(REGISTRIES)}")
    return REGISTRIES[name]


__all__ = [
    "DatasetSplit",
    "DescriptorRegistry",
    "FileDescriptor",
    "REGISTRIES",
    "get_registry",
    "load_registry_manifest",
]
