"""
Dataset Registry Domains.

Each module loads one dataset family's descriptors from its YAML manifest.
"""

from .mnist import MNIST, load_registry_manifest

__all__ = [
    "MNIST",
    "load_registry_manifest",
]
