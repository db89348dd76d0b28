"""
IdxKit: verified acquisition, decoding and batching of IDX datasets.

Top-level convenience API re-exporting the most commonly used components:

    from idxkit import Config, LocalCache, FetchOrchestrator, load_batches
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

try:
    __version__ = _pkg_version("idxkit")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

from .core import Config, DescriptorRegistry, FileDescriptor, Logger, LogStyle, get_registry
from .data_handler import (
    Batch,
    DecodedDataset,
    FetchOrchestrator,
    LocalCache,
    Record,
    assemble_batches,
    decode_file,
    load_batches,
    load_records,
)

__all__ = [
    "__version__",
    # Core
    "Config",
    "DescriptorRegistry",
    "FileDescriptor",
    "Logger",
    "LogStyle",
    "get_registry",
    # Pipeline
    "Batch",
    "DecodedDataset",
    "FetchOrchestrator",
    "LocalCache",
    "Record",
    "assemble_batches",
    "decode_file",
    "load_batches",
    "load_records",
]
