"""
Core Utilities Package

Exposes the shared building blocks of IdxKit: project constants, logging,
integrity and YAML helpers, the descriptor registry and the configuration
manifest.
"""

# Constants & Paths
from .paths import DEFAULT_DATA_ROOT, LOGGER_NAME

# Logging
from .logger import Logger, LogStyle

# Input/Output Utilities
from .io import (
    digests_match,
    load_config_from_yaml,
    normalize_hex,
    save_config_as_yaml,
    sha256_checksum,
    sha256_digest,
)

# Dataset Registry
from .metadata import (
    REGISTRIES,
    DatasetSplit,
    DescriptorRegistry,
    FileDescriptor,
    get_registry,
    load_registry_manifest,
)

# Configuration
from .config import AcquisitionConfig, BatchingConfig, Config

__all__ = [
    # Constants & Paths
    "DEFAULT_DATA_ROOT",
    "LOGGER_NAME",
    # Logging
    "Logger",
    "LogStyle",
    # I/O
    "digests_match",
    "load_config_from_yaml",
    "normalize_hex",
    "save_config_as_yaml",
    "sha256_checksum",
    "sha256_digest",
    # Metadata
    "DatasetSplit",
    "DescriptorRegistry",
    "FileDescriptor",
    "REGISTRIES",
    "get_registry",
    "load_registry_manifest",
    # Configuration
    "Config",
    "AcquisitionConfig",
    "BatchingConfig",
]
