from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike


def chunk_capacity(expected_samples: int, width_px: float, *, minimum: int = 1) -> int:
    """
    Compute how many samples to accumulate between two redraws.

    One flush per drawable pixel column is the most that can be seen, so the
    chunk holds ``ceil(expected_samples / width_px)`` samples, never more than
    the whole run and never fewer than ``minimum``. An unusable width (zero,
    negative, NaN) collapses to a single chunk for the whole run; an infinite
    one gives the smallest chunk.
    """
    expected = max(1, int(expected_samples))
    try:
        width = float(width_px)
    except (TypeError, ValueError):
        width = 0.0
    if math.isnan(width) or width <= 0.0:
        capacity = expected
    else:
        capacity = min(int(math.ceil(expected / width)), expected)
    return max(1, int(minimum), capacity)


def as_times(values: ArrayLike) -> np.ndarray:
    """Return sample times as a contiguous 1D float array."""
    return np.atleast_1d(np.asarray(values, dtype=np.float64)).reshape(-1)


def as_columns(values: ArrayLike, rows: int, count: int, *, name: str = "values") -> np.ndarray:
    """
    Return ``values`` as a ``rows x count`` matrix, one column per sample.

    A flat input is accepted when it is unambiguous: a single sample vector
    (``count == 1``) or a single-component series (``rows == 1``).
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim <= 1:
        flat = arr.reshape(-1)
        if flat.size == rows * count:
            if count == 1:
                return flat.reshape(rows, 1)
            if rows == 1:
                return flat.reshape(1, count)
        raise ValueError(
            f"{name} has {flat.size} elements; expected a {rows}x{count} matrix"
        )
    if arr.ndim == 2:
        if arr.shape == (rows, count):
            return arr
        if arr.shape == (count, rows):
            return arr.T
    raise ValueError(f"{name} has shape {arr.shape}; expected ({rows}, {count})")


@dataclass(slots=True)
class Chunk:
    """Samples drained from a :class:`ChunkBuffer`, ready to be drawn."""

    times: np.ndarray
    states: np.ndarray
    noises: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return int(self.times.size)


class ChunkBuffer:
    """
    Preallocated time/state(/noise) storage for one redraw chunk.

    Columns ``[0, write_index)`` hold the samples appended since the last
    reset. The buffer never grows in place: :meth:`append` refuses a batch
    that does not fit and the owner is expected to drain and :meth:`reset`.
    """

    __slots__ = ("_times", "_states", "_noises", "_write_index", "_drawn")

    def __init__(self, capacity: int, state_dim: int, noise_dim: int | None = None) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        if state_dim <= 0:
            raise ValueError("state_dim must be positive")
        if noise_dim is not None and noise_dim <= 0:
            raise ValueError("noise_dim must be positive")
        self._times = np.zeros(capacity, dtype=np.float64)
        self._states = np.zeros((state_dim, capacity), dtype=np.float64)
        self._noises: np.ndarray | None = None
        if noise_dim is not None:
            self._noises = np.zeros((noise_dim, capacity), dtype=np.float64)
        self._write_index = 0
        # leading samples already on the surface (the init seed)
        self._drawn = 0

    # ------------------------------------------------------------ properties
    @property
    def capacity(self) -> int:
        return int(self._times.size)

    @property
    def write_index(self) -> int:
        return self._write_index

    @property
    def state_dim(self) -> int:
        return int(self._states.shape[0])

    @property
    def noise_dim(self) -> int | None:
        if self._noises is None:
            return None
        return int(self._noises.shape[0])

    @property
    def has_noise(self) -> bool:
        return self._noises is not None

    def __len__(self) -> int:
        return self._write_index

    def fits(self, count: int) -> bool:
        """Return True when ``count`` more samples fit without a flush."""
        return self._write_index + int(count) <= self.capacity

    # ---------------------------------------------------------------- ingest
    def append(
        self,
        times: np.ndarray,
        states: np.ndarray,
        noises: np.ndarray | None = None,
    ) -> None:
        """
        Copy a block of samples into the next free columns.

        ``states``/``noises`` must already be ``dim x n`` matrices matching
        ``times`` (see :func:`as_columns`).
        """
        count = int(times.size)
        if count == 0:
            return
        if states.shape != (self.state_dim, count):
            raise ValueError(
                f"states has shape {states.shape}; expected ({self.state_dim}, {count})"
            )
        if (noises is None) != (self._noises is None):
            raise ValueError("noise block presence does not match the buffer layout")
        if noises is not None and noises.shape != (self.noise_dim, count):
            raise ValueError(
                f"noises has shape {noises.shape}; expected ({self.noise_dim}, {count})"
            )
        if not self.fits(count):
            raise ValueError(
                f"chunk overflow: {self._write_index} + {count} > capacity {self.capacity}"
            )
        start = self._write_index
        end = start + count
        self._times[start:end] = times
        self._states[:, start:end] = states
        if noises is not None and self._noises is not None:
            self._noises[:, start:end] = noises
        self._write_index = end

    def mark_drawn(self) -> None:
        """Record that every sample currently held is already on the surface."""
        self._drawn = self._write_index

    # ----------------------------------------------------------------- drain
    def pending(self) -> Chunk:
        """
        Return copies of the buffered samples not yet on the surface.

        Trailing preallocated slots are never included.
        """
        start, end = self._drawn, self._write_index
        noises = None
        if self._noises is not None:
            noises = self._noises[:, start:end].copy()
        return Chunk(
            times=self._times[start:end].copy(),
            states=self._states[:, start:end].copy(),
            noises=noises,
        )

    def reset(self, capacity: int | None = None) -> None:
        """Discard the contents, reallocating when ``capacity`` changes."""
        if capacity is not None and capacity != self.capacity:
            if capacity <= 0:
                raise ValueError("capacity must be positive")
            self._times = np.zeros(capacity, dtype=np.float64)
            self._states = np.zeros((self.state_dim, capacity), dtype=np.float64)
            if self._noises is not None:
                self._noises = np.zeros((self._noises.shape[0], capacity), dtype=np.float64)
        self._write_index = 0
        self._drawn = 0
