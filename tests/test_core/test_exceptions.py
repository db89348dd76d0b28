"""
Test Suite for the exception hierarchy.
"""

import pytest

from idxkit.exceptions import (
    BatchSizeError,
    CacheIOError,
    CacheNotFoundError,
    FormatError,
    IdxkitConfigError,
    IdxkitError,
    IntegrityError,
    TransportError,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "exc_type,builtin",
    [
        (IdxkitConfigError, ValueError),
        (CacheNotFoundError, FileNotFoundError),
        (CacheIOError, OSError),
        (FormatError, ValueError),
        (BatchSizeError, ValueError),
    ],
)
def test_errors_keep_builtin_compatibility(exc_type, builtin):
    assert issubclass(exc_type, IdxkitError)
    assert issubclass(exc_type, builtin)


@pytest.mark.unit
def test_transport_error_is_idxkit_error():
    with pytest.raises(IdxkitError):
        raise TransportError("boom")


@pytest.mark.unit
def test_integrity_error_carries_digests():
    err = IntegrityError("a.gz", "aa" * 32, "bb" * 32)

    assert err.name == "a.gz"
    assert err.expected == "aa" * 32
    assert err.actual == "bb" * 32
    assert "a.gz" in str(err)
