"""
MNIST Registry Definition.

Loads the DescriptorRegistry for the MNIST IDX archives from mnist.yaml.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final

from ...io import load_config_from_yaml
from ..base import DatasetSplit, FileDescriptor
from ..registry import DescriptorRegistry

_YAML_PATH: Final[Path] = Path(__file__).parent / "mnist.yaml"


def load_registry_manifest(yaml_path: Path) -> DescriptorRegistry:
    """
    Build a DescriptorRegistry from a YAML manifest.

    The manifest declares a shared ``location`` and a list of ``files``
    (``name``, ``sha256`` and an optional ``query``), plus a ``splits``
    mapping pairing image and label archives.

    Args:
        yaml_path: Path to the manifest.

    Returns:
        The validated registry.
    """
    data = load_config_from_yaml(yaml_path)
    location = data["location"]

    descriptors = tuple(
        FileDescriptor(
            location=entry.get("location", location),
            name=entry["name"],
            content_hash=entry["sha256"],
            query=entry.get("query", ""),
        )
        for entry in data["files"]
    )
    splits = {
        split_name: DatasetSplit(**split_info)
        for split_name, split_info in data.get("splits", {}).items()
    }

    return DescriptorRegistry(
        name=data["name"],
        cache_dir=data["cache_dir"],
        descriptors=descriptors,
        splits=splits,
    )


MNIST: Final[DescriptorRegistry] = load_registry_manifest(_YAML_PATH)
