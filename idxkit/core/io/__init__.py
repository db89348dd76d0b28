"""
Input/Output & Integrity Utilities.

YAML recipe persistence and SHA-256 verification helpers.
"""

from .data_io import digests_match, normalize_hex, sha256_checksum, sha256_digest
from .serialization import load_config_from_yaml, save_config_as_yaml

__all__ = [
    # Serialization
    "load_config_from_yaml",
    "save_config_as_yaml",
    # Data Integrity
    "digests_match",
    "normalize_hex",
    "sha256_checksum",
    "sha256_digest",
]
