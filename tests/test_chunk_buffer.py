from __future__ import annotations

import math

import numpy as np
import pytest

from sdeplot.core.chunk_buffer import ChunkBuffer, as_columns, as_times, chunk_capacity


def test_chunk_capacity_is_one_chunk_per_pixel_column() -> None:
    assert chunk_capacity(1000, 500) == 2
    assert chunk_capacity(1001, 100) == 11
    assert chunk_capacity(5, 3) == 2


def test_chunk_capacity_is_bounded_by_run_length_and_minimum() -> None:
    # wider than the run: one sample per chunk
    assert chunk_capacity(10, 1000) == 1
    # sub-pixel drawable never exceeds the run itself
    assert chunk_capacity(3, 0.5) == 3
    assert chunk_capacity(10, 3, minimum=7) == 7
    assert chunk_capacity(0, 100) == 1


@pytest.mark.parametrize("width", [0, -5, math.nan, -math.inf, None, "wide"])
def test_chunk_capacity_unusable_width_uses_whole_run(width) -> None:
    assert chunk_capacity(40, width) == 40


def test_chunk_capacity_infinite_width_gives_smallest_chunk() -> None:
    assert chunk_capacity(40, math.inf) == 1
    assert chunk_capacity(40, math.inf, minimum=3) == 3


def test_as_times_accepts_scalars_and_sequences() -> None:
    np.testing.assert_array_equal(as_times(0.5), [0.5])
    np.testing.assert_array_equal(as_times([[1.0], [2.0]]), [1.0, 2.0])
    assert as_times([]).size == 0


def test_as_columns_shapes() -> None:
    single = as_columns([1.0, 2.0, 3.0], rows=3, count=1)
    assert single.shape == (3, 1)

    series = as_columns([1.0, 2.0], rows=1, count=2)
    np.testing.assert_array_equal(series, [[1.0, 2.0]])

    block = np.arange(6.0).reshape(3, 2)
    assert as_columns(block.T, rows=2, count=3).shape == (2, 3)
    np.testing.assert_array_equal(as_columns(block.T, rows=2, count=3), block.T)
    np.testing.assert_array_equal(as_columns(block, rows=2, count=3), block.T)


def test_as_columns_rejects_ambiguous_or_wrong_sizes() -> None:
    with pytest.raises(ValueError):
        as_columns([1.0, 2.0, 3.0, 4.0], rows=2, count=2)
    with pytest.raises(ValueError):
        as_columns([1.0, 2.0], rows=3, count=1)
    with pytest.raises(ValueError):
        as_columns(np.zeros((2, 2, 2)), rows=2, count=2)


def test_chunk_buffer_requires_positive_sizes() -> None:
    with pytest.raises(ValueError):
        ChunkBuffer(0, 1)
    with pytest.raises(ValueError):
        ChunkBuffer(4, 0)
    with pytest.raises(ValueError):
        ChunkBuffer(4, 1, noise_dim=0)


def test_append_fills_columns_in_order_and_refuses_overflow() -> None:
    buf = ChunkBuffer(3, state_dim=2)
    buf.append(np.array([0.0, 1.0]), np.array([[1.0, 2.0], [3.0, 4.0]]))
    assert buf.write_index == 2
    assert buf.fits(1)
    assert not buf.fits(2)

    with pytest.raises(ValueError):
        buf.append(np.array([2.0, 3.0]), np.zeros((2, 2)))
    assert buf.write_index == 2

    chunk = buf.pending()
    assert len(chunk) == 2
    np.testing.assert_array_equal(chunk.times, [0.0, 1.0])
    np.testing.assert_array_equal(chunk.states, [[1.0, 2.0], [3.0, 4.0]])
    assert chunk.noises is None


def test_append_checks_noise_layout() -> None:
    buf = ChunkBuffer(4, state_dim=1, noise_dim=2)
    assert buf.has_noise
    with pytest.raises(ValueError):
        buf.append(np.array([0.0]), np.zeros((1, 1)))
    with pytest.raises(ValueError):
        buf.append(np.array([0.0]), np.zeros((1, 1)), np.zeros((3, 1)))

    buf.append(np.array([0.0]), np.zeros((1, 1)), np.array([[5.0], [6.0]]))
    np.testing.assert_array_equal(buf.pending().noises, [[5.0], [6.0]])


def test_pending_skips_samples_already_drawn() -> None:
    buf = ChunkBuffer(4, state_dim=1)
    buf.append(np.array([0.0]), np.array([[10.0]]))
    buf.mark_drawn()
    assert len(buf.pending()) == 0

    buf.append(np.array([1.0, 2.0]), np.array([[11.0, 12.0]]))
    chunk = buf.pending()
    np.testing.assert_array_equal(chunk.times, [1.0, 2.0])
    # the drawn seed still occupies its slot
    assert buf.write_index == 3


def test_pending_returns_copies() -> None:
    buf = ChunkBuffer(2, state_dim=1)
    buf.append(np.array([0.0]), np.array([[1.0]]))
    chunk = buf.pending()
    buf.reset()
    buf.append(np.array([9.0]), np.array([[9.0]]))
    np.testing.assert_array_equal(chunk.times, [0.0])


def test_reset_reallocates_only_on_capacity_change() -> None:
    buf = ChunkBuffer(2, state_dim=2, noise_dim=1)
    buf.append(np.array([0.0]), np.zeros((2, 1)), np.zeros((1, 1)))
    buf.mark_drawn()
    buf.reset(5)
    assert buf.capacity == 5
    assert buf.write_index == 0
    assert buf.state_dim == 2
    assert buf.noise_dim == 1

    buf.append(np.array([1.0]), np.ones((2, 1)), np.ones((1, 1)))
    assert len(buf.pending()) == 1

    buf.reset()
    assert buf.capacity == 5
    with pytest.raises(ValueError):
        buf.reset(0)
