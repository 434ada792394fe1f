"""Headless render surface that keeps every series in memory."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .base import SeriesStyle

__all__ = ["MemorySeries", "MemorySurface"]


@dataclass
class MemorySeries:
    """Accumulated data for one line series."""

    style: SeriesStyle
    xdata: np.ndarray
    ydata: np.ndarray
    appends: int = 0


@dataclass
class MemorySurface:
    """
    Render surface for batch runs and tests.

    ``width`` can be changed between solver steps to mimic a window resize and
    :meth:`close` mimics the user closing the plot window. ``events`` records
    the order of width queries, appends and renders.
    """

    width: float = 800.0
    overlay: bool = False

    series: List[MemorySeries] = field(init=False, default_factory=list)
    events: List[str] = field(init=False, default_factory=list)
    axis_range: Optional[Tuple[float, float]] = field(init=False, default=None)
    autoscale: bool = field(init=False, default=True)
    render_count: int = field(init=False, default=0)
    width_queries: int = field(init=False, default=0)
    session_cleared: bool = field(init=False, default=False)
    released: bool = field(init=False, default=False)
    _opened: bool = field(init=False, default=False, repr=False)
    _closed: bool = field(init=False, default=False, repr=False)

    def open(self) -> None:
        self._opened = True
        self._closed = False
        self.events.append("open")

    def close(self) -> None:
        self._closed = True

    def drawable_width(self) -> float:
        self.width_queries += 1
        self.events.append("width")
        return float(self.width)

    def create_line_series(self, x0: np.ndarray, y0: np.ndarray, style: SeriesStyle) -> MemorySeries:
        series = MemorySeries(
            style=style,
            xdata=np.array(x0, dtype=np.float64).reshape(-1),
            ydata=np.array(y0, dtype=np.float64).reshape(-1),
        )
        self.series.append(series)
        return series

    def append_series_data(self, series: MemorySeries, xs: np.ndarray, ys: np.ndarray) -> None:
        series.xdata = np.concatenate([series.xdata, np.asarray(xs, dtype=np.float64).reshape(-1)])
        series.ydata = np.concatenate([series.ydata, np.asarray(ys, dtype=np.float64).reshape(-1)])
        series.appends += 1
        self.events.append("append")

    def is_open(self) -> bool:
        return self._opened and not self._closed

    def render(self) -> None:
        self.render_count += 1
        self.events.append("render")

    def set_axis_range(self, lo: float, hi: float) -> None:
        self.axis_range = (float(lo), float(hi))
        self.autoscale = False

    def set_axis_autoscale(self) -> None:
        self.autoscale = True

    def clear_session_data(self) -> None:
        self.session_cleared = True

    def release(self) -> None:
        self.released = True
        self._closed = True

    # -------------------------------------------------------------- helpers
    def state_series(self) -> List[MemorySeries]:
        return [s for s in self.series if s.style.role == "state"]

    def noise_series(self) -> List[MemorySeries]:
        return [s for s in self.series if s.style.role == "noise"]
