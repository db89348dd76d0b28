"""
Pytest test suite for the Fetch Orchestrator and HTTP transport.

Covers the fast path, concurrent retrieval, the integrity gate, fail-fast
error propagation and idempotence, without performing real network calls.
"""

from types import SimpleNamespace

import pytest
import requests

from idxkit.core import FileDescriptor
from idxkit.data_handler import FetchOrchestrator, HttpTransport
from idxkit.data_handler import fetcher as fetcher_module
from idxkit.exceptions import CacheIOError, IntegrityError, TransportError


def _snapshot(cache):
    """File name → bytes for every committed cache file."""
    return {name: cache.read_file(name) for name in cache.list_files()}


# FETCH: HAPPY PATH
@pytest.mark.unit
def test_fetches_every_missing_file(registry, cache, transport, archives):
    orchestrator = FetchOrchestrator(registry.descriptors, cache, transport=transport)

    report = orchestrator.ensure_cached()

    assert sorted(report.fetched) == sorted(archives)
    assert report.skipped == ()
    assert report.satisfied is False
    assert _snapshot(cache) == archives
    assert len(transport.calls) == 2


@pytest.mark.unit
def test_requests_descriptor_urls(registry, cache, transport):
    FetchOrchestrator(registry.descriptors, cache, transport=transport).ensure_cached()

    assert sorted(transport.calls) == sorted(d.url for d in registry.descriptors)


@pytest.mark.unit
def test_single_worker_still_fetches_all(registry, cache, transport, archives):
    FetchOrchestrator(registry.descriptors, cache, transport=transport, max_workers=1).ensure_cached()

    assert _snapshot(cache) == archives


@pytest.mark.unit
def test_rejects_non_positive_worker_count(registry, cache, transport):
    with pytest.raises(ValueError):
        FetchOrchestrator(registry.descriptors, cache, transport=transport, max_workers=0)


# IDEMPOTENCE
@pytest.mark.unit
def test_second_run_makes_no_network_calls(registry, cache, transport):
    orchestrator = FetchOrchestrator(registry.descriptors, cache, transport=transport)
    orchestrator.ensure_cached()
    calls_after_first = len(transport.calls)
    before = _snapshot(cache)
    mtimes = {n: cache.resolve_path(n).stat().st_mtime_ns for n in cache.list_files()}

    report = orchestrator.ensure_cached()

    assert report.satisfied is True
    assert sorted(report.skipped) == sorted(d.name for d in registry.descriptors)
    assert len(transport.calls) == calls_after_first
    assert _snapshot(cache) == before
    assert {n: cache.resolve_path(n).stat().st_mtime_ns for n in cache.list_files()} == mtimes


@pytest.mark.unit
def test_decoded_form_satisfies_completeness(registry, cache, transport):
    """A file present only under its extension-stripped name is not re-fetched."""
    cache.ensure_directory()
    for descriptor in registry.descriptors:
        cache.write_file(descriptor.stem, b"already decompressed")

    report = FetchOrchestrator(registry.descriptors, cache, transport=transport).ensure_cached()

    assert report.satisfied is True
    assert transport.calls == []


@pytest.mark.unit
def test_only_missing_files_are_fetched(registry, cache, transport, archives):
    first = registry.descriptors[0]
    cache.ensure_directory()
    cache.write_file(first.name, archives[first.name])

    report = FetchOrchestrator(registry.descriptors, cache, transport=transport).ensure_cached()

    assert report.skipped == (first.name,)
    assert report.fetched == (registry.descriptors[1].name,)
    assert transport.calls == [registry.descriptors[1].url]


@pytest.mark.unit
def test_force_refetches_everything(registry, populated_cache, transport):
    report = FetchOrchestrator(
        registry.descriptors, populated_cache, transport=transport
    ).ensure_cached(force=True)

    assert len(report.fetched) == 2
    assert len(transport.calls) == 2


@pytest.mark.unit
def test_corrupt_cached_file_is_refetched(registry, cache, transport, archives):
    """A cached archive that fails its digest is treated as absent and overwritten."""
    target = registry.descriptors[0]
    cache.ensure_directory()
    for name, data in archives.items():
        cache.write_file(name, data)
    cache.write_file(target.name, b"partial garbage")

    report = FetchOrchestrator(registry.descriptors, cache, transport=transport).ensure_cached()

    assert report.fetched == (target.name,)
    assert cache.read_file(target.name) == archives[target.name]


@pytest.mark.unit
def test_corrupt_cached_file_kept_without_verification(registry, cache, transport, archives):
    target = registry.descriptors[0]
    cache.ensure_directory()
    for name, data in archives.items():
        cache.write_file(name, data)
    cache.write_file(target.name, b"partial garbage")

    report = FetchOrchestrator(
        registry.descriptors, cache, transport=transport, verify_cached=False
    ).ensure_cached()

    assert report.satisfied is True
    assert transport.calls == []


# INTEGRITY GATE
@pytest.mark.unit
def test_hash_mismatch_writes_nothing(registry, cache, transport_factory):
    tampered = transport_factory({d.url: b"tampered bytes" for d in registry.descriptors})
    cache.ensure_directory()
    before = set(cache.list_files())

    with pytest.raises(IntegrityError) as exc_info:
        FetchOrchestrator(registry.descriptors, cache, transport=tampered).ensure_cached()

    assert set(cache.list_files()) == before
    assert exc_info.value.expected in {d.content_hash for d in registry.descriptors}
    assert list(cache.directory.iterdir()) == []


@pytest.mark.unit
def test_uppercase_digest_is_accepted(archives, cache, transport, digest):
    name = "imgs-idx3-ubyte.gz"
    descriptor = FileDescriptor(
        location="https://example.com/data/",
        name=name,
        content_hash=digest(archives[name]).upper(),
    )

    FetchOrchestrator([descriptor], cache, transport=transport).ensure_cached()

    assert cache.read_file(name) == archives[name]


# FAILURE PROPAGATION
@pytest.mark.unit
def test_transport_error_propagates(registry, cache, archives, transport_factory):
    failing_url = registry.descriptors[1].url
    flaky = transport_factory(
        {d.url: archives[d.name] for d in registry.descriptors}, fail_on={failing_url}
    )

    with pytest.raises(TransportError):
        FetchOrchestrator(registry.descriptors, cache, transport=flaky).ensure_cached()

    assert registry.descriptors[1].name not in cache.list_files()


@pytest.mark.unit
def test_failed_run_does_not_look_complete(registry, cache, archives, transport_factory, transport):
    """After a failure, the next run still sees missing files and fetches them."""
    flaky = transport_factory({}, fail_on={d.url for d in registry.descriptors})
    orchestrator = FetchOrchestrator(registry.descriptors, cache, transport=flaky)
    with pytest.raises(TransportError):
        orchestrator.ensure_cached()

    assert orchestrator.is_satisfied() is False

    report = FetchOrchestrator(registry.descriptors, cache, transport=transport).ensure_cached()
    assert sorted(report.fetched) == sorted(archives)


@pytest.mark.unit
def test_write_failure_surfaces_as_cache_io_error(registry, cache, transport, monkeypatch):
    def broken_write(name, payload):
        raise CacheIOError("disk full")

    monkeypatch.setattr(cache, "write_file", broken_write)

    with pytest.raises(CacheIOError):
        FetchOrchestrator(registry.descriptors, cache, transport=transport).ensure_cached()


# HTTP TRANSPORT
class _FakeResponse:
    def __init__(self, chunks, status=200, content_type="application/octet-stream"):
        self.chunks = chunks
        self.status = status
        self.headers = {"Content-Type": content_type}

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error", response=SimpleNamespace())

    def iter_content(self, chunk_size):
        return iter(self.chunks)


@pytest.mark.unit
def test_http_transport_joins_chunks(monkeypatch):
    captured = {}

    def fake_get(url, **kwargs):
        captured.update(url=url, **kwargs)
        return _FakeResponse([b"ab", b"", b"cd"])

    monkeypatch.setattr(fetcher_module.requests, "get", fake_get)

    body = HttpTransport(timeout=5.0).get("https://example.com/x.gz")

    assert body == b"abcd"
    assert captured["url"] == "https://example.com/x.gz"
    assert captured["timeout"] == 5.0


@pytest.mark.unit
def test_http_transport_wraps_http_errors(monkeypatch):
    monkeypatch.setattr(
        fetcher_module.requests, "get", lambda url, **kw: _FakeResponse([], status=404)
    )

    with pytest.raises(TransportError):
        HttpTransport().get("https://example.com/missing.gz")


@pytest.mark.unit
def test_http_transport_wraps_connection_errors(monkeypatch):
    def refuse(url, **kwargs):
        raise requests.ConnectionError("network down")

    monkeypatch.setattr(fetcher_module.requests, "get", refuse)

    with pytest.raises(TransportError):
        HttpTransport().get("https://example.com/x.gz")


@pytest.mark.unit
def test_http_transport_rejects_html(monkeypatch):
    monkeypatch.setattr(
        fetcher_module.requests,
        "get",
        lambda url, **kw: _FakeResponse([b"<html>"], content_type="text/html; charset=utf-8"),
    )

    with pytest.raises(TransportError, match="HTML"):
        HttpTransport().get("https://example.com/x.gz")


@pytest.mark.unit
def test_default_transport_is_http(registry, cache):
    orchestrator = FetchOrchestrator(registry.descriptors, cache)

    assert isinstance(orchestrator.transport, HttpTransport)
