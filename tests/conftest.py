"""
Pytest Configuration and Shared Fixtures for the IdxKit Test Suite.

Provides synthetic IDX archives, a counting in-memory transport and a small
descriptor registry whose digests match those archives, so no test ever
touches the network.
"""

from __future__ import annotations

import gzip
import hashlib
import struct
import threading

import pytest
import yaml

from idxkit.core import DatasetSplit, DescriptorRegistry, FileDescriptor
from idxkit.data_handler import LocalCache
from idxkit.exceptions import TransportError

FAKE_LOCATION = "https://example.com/data/"


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast, isolated tests")
    config.addinivalue_line("markers", "integration: multi-component pipeline tests")


# SYNTHETIC ARCHIVES
def idx_bytes(magic: int, dims: tuple[int, ...], payload: bytes) -> bytes:
    """Serializes an uncompressed IDX stream."""
    return struct.pack(">I", magic) + struct.pack(f">{len(dims)}I", *dims) + bytes(payload)


def gzipped(data: bytes) -> bytes:
    """Deterministic gzip (fixed mtime) so digests are stable."""
    return gzip.compress(data, mtime=0)


def sha256_of(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class FakeTransport:
    """In-memory transport serving fixed payloads and counting calls."""

    def __init__(self, payloads: dict[str, bytes], fail_on: set[str] | None = None):
        self.payloads = payloads
        self.fail_on = fail_on or set()
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def get(self, url: str) -> bytes:
        with self._lock:
            self.calls.append(url)
        if url in self.fail_on or url not in self.payloads:
            raise TransportError(f"GET {url} failed: simulated")
        return self.payloads[url]


@pytest.fixture
def make_idx():
    """Factory fixture building uncompressed IDX streams."""
    return idx_bytes


# 4 images of 2x2 pixels and their labels
IMAGE_PIXELS = bytes([0, 127, 255, 0, 10, 20, 30, 40, 1, 2, 3, 4, 50, 60, 70, 80])
LABELS = bytes([0, 1, 2, 3])


@pytest.fixture
def archives():
    """File name → gzipped bytes for a tiny image/label pair."""
    return {
        "imgs-idx3-ubyte.gz": gzipped(idx_bytes(2051, (4, 2, 2), IMAGE_PIXELS)),
        "lbls-idx1-ubyte.gz": gzipped(idx_bytes(2049, (4,), LABELS)),
    }


@pytest.fixture
def registry(archives):
    """Registry whose descriptors match ``archives``."""
    return DescriptorRegistry(
        name="tiny",
        cache_dir="tiny",
        descriptors=tuple(
            FileDescriptor(location=FAKE_LOCATION, name=name, content_hash=sha256_of(data))
            for name, data in archives.items()
        ),
        splits={"test": DatasetSplit(images="imgs-idx3-ubyte.gz", labels="lbls-idx1-ubyte.gz")},
    )


@pytest.fixture
def transport(archives):
    """Counting transport serving ``archives`` at their descriptor URLs."""
    return FakeTransport({FAKE_LOCATION + name: data for name, data in archives.items()})


@pytest.fixture
def cache(tmp_path):
    """Empty cache rooted in a temporary directory (not yet created)."""
    return LocalCache(tmp_path / "tiny")


@pytest.fixture
def populated_cache(cache, archives):
    """Cache already holding every archive of ``registry``."""
    cache.ensure_directory()
    for name, data in archives.items():
        cache.write_file(name, data)
    return cache


@pytest.fixture
def transport_factory():
    """Builds FakeTransport instances for custom payloads."""
    return FakeTransport


@pytest.fixture
def make_archive():
    """Factory fixture: IDX fields → gzipped archive bytes."""

    def _make(magic: int, dims: tuple[int, ...], payload: bytes) -> bytes:
        return gzipped(idx_bytes(magic, dims, payload))

    return _make


@pytest.fixture
def digest():
    """SHA-256 hex digest helper."""
    return sha256_of


@pytest.fixture
def manifest(tmp_path, registry):
    """Writes ``registry`` to disk as a YAML registry manifest."""
    path = tmp_path / "tiny.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "name": registry.name,
                "cache_dir": registry.cache_dir,
                "location": FAKE_LOCATION,
                "files": [{"name": d.name, "sha256": d.content_hash} for d in registry.descriptors],
                "splits": {
                    name: split.model_dump() for name, split in registry.splits.items()
                },
            }
        )
    )
    return path
