"""
Dataset Loading Pipeline.

Wires the stages together: fetch → verify → decode → batch. ``load_records``
works against an already populated cache; ``load_batches`` runs the whole
pipeline from a ``Config``.
"""

from __future__ import annotations

import logging

from ..core import LOGGER_NAME, Config, DescriptorRegistry, LogStyle
from ..exceptions import IdxkitConfigError
from .batcher import Batch, Record, assemble_batches, pair_records
from .cache import LocalCache
from .decoder import decode_file
from .fetcher import FetchOrchestrator, FetchReport, HttpTransport, Transport
from .params import NetworkParams, fetch_network_params

logger = logging.getLogger(LOGGER_NAME)


def build_orchestrator(cfg: Config, transport: Transport | None = None) -> FetchOrchestrator:
    """Creates the fetch orchestrator described by ``cfg.acquisition``."""
    acquisition = cfg.acquisition
    return FetchOrchestrator(
        cfg.registry.descriptors,
        LocalCache(cfg.cache_dir),
        transport=transport if transport is not None else HttpTransport(acquisition.timeout),
        max_workers=acquisition.max_workers,
        verify_cached=acquisition.verify_cached,
    )


def acquire(cfg: Config, transport: Transport | None = None) -> FetchReport:
    """Ensures every archive of the configured registry is cached and verified."""
    orchestrator = build_orchestrator(cfg, transport)
    LogStyle.log_phase_header(logger, f"ACQUIRING {cfg.registry.name.upper()}")
    report = orchestrator.ensure_cached()
    logger.info(
        LogStyle.status_line(
            "Cache",
            f"{len(report.fetched)} fetched, {len(report.skipped)} already cached",
            symbol=LogStyle.SUCCESS,
        )
    )
    return report


def load_records(
    cache: LocalCache,
    registry: DescriptorRegistry,
    split: str,
    normalize: bool = True,
    keep_decompressed: bool = False,
) -> list[Record]:
    """
    Decodes one split's image and label archives and pairs them.

    Raises:
        KeyError: Unknown split.
        CacheNotFoundError: An archive is not cached.
        FormatError: An archive is malformed.
        BatchSizeError: Image and label counts differ.
    """
    image_desc, label_desc = registry.split(split)
    images = decode_file(cache, image_desc, keep_decompressed=keep_decompressed)
    labels = decode_file(cache, label_desc, keep_decompressed=keep_decompressed)
    records = pair_records(images, labels, normalize=normalize)
    logger.info(LogStyle.status_line("Records", f"{len(records)} ({registry.name}/{split})"))
    return records


def load_batches(cfg: Config, transport: Transport | None = None) -> list[Batch]:
    """Runs fetch → verify → decode → batch for the configured split."""
    acquire(cfg, transport)
    records = load_records(
        LocalCache(cfg.cache_dir),
        cfg.registry,
        cfg.batching.split,
        normalize=cfg.batching.normalize,
        keep_decompressed=cfg.acquisition.keep_decompressed,
    )
    batches = assemble_batches(records, cfg.batching.batch_size)
    logger.info(LogStyle.status_line("Batches", f"{len(batches)} x {cfg.batching.batch_size}"))
    return batches


def load_configured_params(cfg: Config, transport: Transport | None = None) -> NetworkParams:
    """
    Fetches, verifies and loads the parameter file named by ``cfg.weights``.

    The file is cached next to the dataset archives.

    Raises:
        IdxkitConfigError: If the config declares no ``weights`` descriptor.
    """
    if cfg.weights is None:
        raise IdxkitConfigError("No 'weights' descriptor configured")

    params = fetch_network_params(
        cfg.weights,
        LocalCache(cfg.cache_dir),
        transport=transport if transport is not None else HttpTransport(cfg.acquisition.timeout),
        verify_cached=cfg.acquisition.verify_cached,
    )
    logger.info(LogStyle.status_line("Parameters", f"{cfg.weights.name} {params.layer_sizes}"))
    return params
