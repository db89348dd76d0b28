"""
Network Parameter Loading.

Reads a pretrained three-layer network's parameters (``W1``..``W3`` weight
matrices, ``b1``..``b3`` bias vectors) from a pickled dictionary or an
``.npz`` archive. Remote parameter files go through the fetch orchestrator
first, so a pickle is only ever unpickled after its SHA-256 has been checked.
"""

from __future__ import annotations

import pickle  # nosec B403
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Mapping

import numpy as np

from ..core import FileDescriptor
from ..exceptions import CacheNotFoundError, FormatError
from .cache import LocalCache
from .fetcher import FetchOrchestrator, Transport

WEIGHT_KEYS: Final[tuple[str, ...]] = ("W1", "W2", "W3")
BIAS_KEYS: Final[tuple[str, ...]] = ("b1", "b2", "b3")


@dataclass(frozen=True)
class NetworkParams:
    """Ordered weight matrices and bias vectors, layer by layer."""

    weights: tuple[np.ndarray, ...]
    biases: tuple[np.ndarray, ...]

    def __getitem__(self, key: str) -> np.ndarray:
        if key in WEIGHT_KEYS:
            return self.weights[WEIGHT_KEYS.index(key)]
        if key in BIAS_KEYS:
            return self.biases[BIAS_KEYS.index(key)]
        raise KeyError(f"Unknown parameter '{key}'. Available: {WEIGHT_KEYS + BIAS_KEYS}")

    @property
    def layer_sizes(self) -> tuple[int, ...]:
        """Input width followed by each layer's output width."""
        return (self.weights[0].shape[0],) + tuple(w.shape[1] for w in self.weights)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "NetworkParams":
        """
        Builds parameters from a name → array mapping.

        Raises:
            FormatError: If a key is missing, has the wrong rank, or layers
                do not chain.
        """
        missing = [k for k in WEIGHT_KEYS + BIAS_KEYS if k not in mapping]
        if missing:
            raise FormatError(f"Parameter file is missing keys: {missing}")

        weights = tuple(np.asarray(mapping[k]) for k in WEIGHT_KEYS)
        biases = tuple(np.asarray(mapping[k]) for k in BIAS_KEYS)

        for key, w, b in zip(WEIGHT_KEYS, weights, biases):
            if w.ndim != 2 or b.ndim != 1 or w.shape[1] != b.shape[0]:
                raise FormatError(
                    f"Layer {key}: weight {w.shape} and bias {b.shape} are incompatible"
                )
        for prev, nxt in zip(weights, weights[1:]):
            if prev.shape[1] != nxt.shape[0]:
                raise FormatError(f"Layers do not chain: {prev.shape} -> {nxt.shape}")

        return cls(weights=weights, biases=biases)


def load_network_params(path: Path) -> NetworkParams:
    """
    Loads parameters from ``.npz`` or a pickled dict.

    Raises:
        CacheNotFoundError: If ``path`` does not exist.
        FormatError: If the file cannot be parsed or lacks a parameter.
    """
    if not path.is_file():
        raise CacheNotFoundError(f"Parameter file not found: {path}")

    if path.suffix == ".npz":
        with np.load(path) as data:
            return NetworkParams.from_mapping({k: data[k] for k in data.files})

    try:
        with open(path, "rb") as f:
            mapping = pickle.load(f)  # nosec B301
    except (pickle.UnpicklingError, EOFError, AttributeError, ImportError) as e:
        raise FormatError(f"Cannot unpickle parameters from {path}: {e}") from e

    if not isinstance(mapping, Mapping):
        raise FormatError(f"Expected a dict of arrays in {path}, got {type(mapping).__name__}")
    return NetworkParams.from_mapping(mapping)


def fetch_network_params(
    descriptor: FileDescriptor,
    cache: LocalCache,
    transport: Transport | None = None,
    verify_cached: bool = True,
) -> NetworkParams:
    """
    Ensures the parameter file is cached and verified, then loads it.

    Args:
        descriptor: Remote parameter file.
        cache: Destination cache.
        transport: Network backend (defaults to ``HttpTransport``).
        verify_cached: Re-hash an already cached file before trusting it.
    """
    FetchOrchestrator(
        [descriptor], cache, transport=transport, max_workers=1, verify_cached=verify_cached
    ).ensure_cached()
    return load_network_params(cache.resolve_path(descriptor.name))
