"""Render-surface contract used by the streaming plot controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

import numpy as np

__all__ = [
    "RenderSurface",
    "SeriesStyle",
    "STATE_STYLE",
    "NOISE_STYLE",
]


@dataclass(frozen=True, slots=True)
class SeriesStyle:
    """Backend-neutral description of how a line series is drawn."""

    linestyle: str = "-"
    role: str = "state"
    index: int = 0
    color: Optional[str] = None

    @property
    def label(self) -> str:
        prefix = "y" if self.role == "state" else "w"
        return f"{prefix}{self.index + 1}"


STATE_STYLE = SeriesStyle(linestyle="-", role="state")
NOISE_STYLE = SeriesStyle(linestyle="--", role="noise")


@runtime_checkable
class RenderSurface(Protocol):
    """
    Passive drawing sink driven by :class:`~sdeplot.core.StreamingPlotController`.

    Implementations own the window, the drawable region and the line series;
    the controller only ever appends data and asks for a redraw.
    """

    overlay: bool

    def open(self) -> None:  # pragma: no cover - protocol
        """Create the surface and its drawable region."""
        ...

    def drawable_width(self) -> float:  # pragma: no cover - protocol
        """Return the live width of the drawable in pixels."""
        ...

    def create_line_series(
        self, x0: np.ndarray, y0: np.ndarray, style: SeriesStyle
    ) -> Any:  # pragma: no cover - protocol
        ...

    def append_series_data(
        self, series: Any, xs: np.ndarray, ys: np.ndarray
    ) -> None:  # pragma: no cover - protocol
        """Concatenate ``xs``/``ys`` onto the existing series data."""
        ...

    def is_open(self) -> bool:  # pragma: no cover - protocol
        ...

    def render(self) -> None:  # pragma: no cover - protocol
        ...

    def set_axis_range(self, lo: float, hi: float) -> None:  # pragma: no cover - protocol
        ...

    def set_axis_autoscale(self) -> None:  # pragma: no cover - protocol
        ...

    def clear_session_data(self) -> None:  # pragma: no cover - protocol
        """Drop any per-session bookkeeping attached to the surface."""
        ...

    def release(self) -> None:  # pragma: no cover - protocol
        """Undo :meth:`open`: close whatever it created and restore global state."""
        ...
