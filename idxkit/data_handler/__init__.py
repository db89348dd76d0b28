"""
Data Handler Package.

The acquisition pipeline: local cache management, concurrent verified
fetching, IDX decoding and batch assembly.
"""

from .batcher import Batch, Record, assemble_batches, check_partition, iter_batches, pair_records
from .cache import CacheEntry, CacheStatus, LocalCache
from .decoder import (
    MAGIC_IMAGES,
    MAGIC_LABELS,
    DecodedDataset,
    decode_file,
    decompress,
    parse_idx,
    read_archive,
)
from .fetcher import FetchOrchestrator, FetchReport, HttpTransport, Transport
from .loader import (
    acquire,
    build_orchestrator,
    load_batches,
    load_configured_params,
    load_records,
)
from .params import NetworkParams, fetch_network_params, load_network_params
from .preview import record_to_image, save_record_image

__all__ = [
    # Cache
    "CacheEntry",
    "CacheStatus",
    "LocalCache",
    # Fetching
    "FetchOrchestrator",
    "FetchReport",
    "HttpTransport",
    "Transport",
    # Decoding
    "MAGIC_IMAGES",
    "MAGIC_LABELS",
    "DecodedDataset",
    "decode_file",
    "decompress",
    "parse_idx",
    "read_archive",
    # Batching
    "Batch",
    "Record",
    "assemble_batches",
    "check_partition",
    "iter_batches",
    "pair_records",
    # Pipeline
    "acquire",
    "build_orchestrator",
    "load_batches",
    "load_configured_params",
    "load_records",
    # Parameters & preview
    "NetworkParams",
    "fetch_network_params",
    "load_network_params",
    "record_to_image",
    "save_record_image",
]
