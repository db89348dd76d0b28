"""
Test Suite for the Batch Assembler.

Covers image/label pairing, exact partitioning, order preservation and the
rejection of batch sizes that do not divide the record count.
"""

import numpy as np
import pytest

from idxkit.data_handler import (
    MAGIC_IMAGES,
    MAGIC_LABELS,
    Batch,
    Record,
    assemble_batches,
    check_partition,
    iter_batches,
    pair_records,
    parse_idx,
)
from idxkit.exceptions import BatchSizeError, FormatError


def _records(n: int, width: int = 3) -> list[Record]:
    return [Record(features=np.full(width, float(i)), label=i % 10) for i in range(n)]


@pytest.fixture
def image_dataset(make_idx):
    return parse_idx(make_idx(MAGIC_IMAGES, (4, 2, 2), bytes(range(16))))


@pytest.fixture
def label_dataset(make_idx):
    return parse_idx(make_idx(MAGIC_LABELS, (4,), bytes([0, 1, 2, 3])))


# PAIRING
@pytest.mark.unit
def test_pair_records_by_position(image_dataset, label_dataset):
    records = pair_records(image_dataset, label_dataset, normalize=False)

    assert [r.label for r in records] == [0, 1, 2, 3]
    np.testing.assert_array_equal(records[1].features, [4.0, 5.0, 6.0, 7.0])


@pytest.mark.unit
def test_pair_records_count_mismatch(image_dataset, make_idx):
    labels = parse_idx(make_idx(MAGIC_LABELS, (3,), bytes([0, 1, 2])))

    with pytest.raises(BatchSizeError, match="mismatch"):
        pair_records(image_dataset, labels)


@pytest.mark.unit
def test_pair_records_wrong_kinds(image_dataset, label_dataset):
    with pytest.raises(FormatError):
        pair_records(label_dataset, image_dataset)


# PARTITION
@pytest.mark.unit
@pytest.mark.parametrize("count,size,expected", [(10, 5, 2), (10, 10, 1), (10, 1, 10), (0, 4, 0)])
def test_check_partition_valid(count, size, expected):
    assert check_partition(count, size) == expected


@pytest.mark.unit
@pytest.mark.parametrize("size", [0, -1, 3, 4, 11])
def test_check_partition_invalid(size):
    with pytest.raises(BatchSizeError):
        check_partition(10, size)


@pytest.mark.unit
def test_remainder_rejected_before_any_batch():
    with pytest.raises(BatchSizeError, match="does not divide"):
        iter_batches(_records(10), 3)


@pytest.mark.unit
def test_ten_records_in_two_batches():
    batches = assemble_batches(_records(10), 5)

    assert len(batches) == 2
    assert all(len(b) == 5 for b in batches)
    assert batches[0].features.shape == (5, 3)


# ORDER
@pytest.mark.unit
def test_batches_preserve_order(image_dataset, label_dataset):
    records = pair_records(image_dataset, label_dataset)

    first, second = assemble_batches(records, 2)

    np.testing.assert_array_equal(first.labels, [0, 1])
    np.testing.assert_array_equal(second.labels, [2, 3])
    np.testing.assert_allclose(second.features[0], np.arange(8, 12) / 255.0)


@pytest.mark.unit
def test_concatenated_batches_equal_input():
    records = _records(12)

    batches = assemble_batches(records, 4)

    np.testing.assert_array_equal(
        np.concatenate([b.labels for b in batches]), [r.label for r in records]
    )
    np.testing.assert_array_equal(
        np.vstack([b.features for b in batches]), np.stack([r.features for r in records])
    )


@pytest.mark.unit
def test_batch_dtypes():
    (batch,) = assemble_batches(_records(2), 2)

    assert batch.features.dtype == np.float64
    assert batch.labels.dtype == np.int64


@pytest.mark.unit
def test_empty_input_gives_no_batches():
    assert assemble_batches([], 5) == []


@pytest.mark.unit
def test_iter_batches_is_lazy():
    iterator = iter_batches(_records(6), 2)

    first = next(iterator)

    np.testing.assert_array_equal(first.labels, [0, 1])
    assert len(list(iterator)) == 2


# VALIDATION
@pytest.mark.unit
def test_mixed_feature_lengths_rejected():
    records = _records(2, width=3) + _records(2, width=4)

    with pytest.raises(BatchSizeError, match="feature lengths"):
        iter_batches(records, 2)


@pytest.mark.unit
def test_batch_shape_mismatch():
    with pytest.raises(BatchSizeError):
        Batch(features=np.zeros((3, 4)), labels=np.zeros(2, dtype=np.int64))
