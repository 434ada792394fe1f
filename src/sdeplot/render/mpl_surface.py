"""Matplotlib render surface for live SDE trajectory plots."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, TYPE_CHECKING

import matplotlib as mpl
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.lines import Line2D

from .base import SeriesStyle

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..config import SdePlotConfig


log = logging.getLogger(__name__)

_MPL_CONFIGURED = False


def configure_matplotlib_for_realtime() -> None:
    """
    Apply global Matplotlib tweaks that improve interactive / real-time performance.

    This should be called once before any figures are created.
    """
    global _MPL_CONFIGURED
    if _MPL_CONFIGURED:
        return

    try:
        mpl.style.use("fast")
    except (OSError, ValueError):
        log.debug("matplotlib 'fast' style unavailable")

    rc = mpl.rcParams
    rc["path.simplify"] = True
    rc["path.simplify_threshold"] = 0.2
    rc["agg.path.chunksize"] = 10000

    _MPL_CONFIGURED = True


@dataclass
class MatplotlibSurface:
    """
    Draw the trajectory into a ``pyplot`` figure.

    Outside overlay mode every session gets a fresh figure. In overlay mode the
    current axes are reused (a new figure is only created when none exists),
    so successive runs pile up on the same plot.
    """

    overlay: bool = False
    xlabel: Optional[str] = "t"
    ylabel: Optional[str] = "y(t)"
    title: Optional[str] = None
    grid: bool = True
    figsize: Tuple[float, float] = (6.4, 4.8)
    dpi: float = 100.0
    realtime_rc: bool = True

    # Optional injection of existing Matplotlib Axes
    ax: Any = field(default=None, repr=False)
    fig: Any = field(init=False, default=None, repr=False)
    _lines: List[Line2D] = field(init=False, default_factory=list, repr=False)
    _owns_figure: bool = field(init=False, default=False, repr=False)
    _turned_interactive_on: bool = field(init=False, default=False, repr=False)

    # ---------------------------------------------------------------- factory
    @classmethod
    def from_config(cls, cfg: "SdePlotConfig", **overrides: Any) -> "MatplotlibSurface":
        params = dict(
            overlay=cfg.overlay,
            xlabel=cfg.xlabel,
            ylabel=cfg.ylabel,
            title=cfg.title,
            grid=cfg.grid,
            figsize=tuple(cfg.figsize),
            dpi=cfg.dpi,
            realtime_rc=cfg.realtime_rc,
        )
        params.update(overrides)
        return cls(**params)

    # -------------------------------------------------------------- lifecycle
    def open(self) -> None:
        if self.realtime_rc:
            configure_matplotlib_for_realtime()

        self._owns_figure = False
        if self.ax is not None:
            self.fig = self.ax.figure
        elif self.overlay and plt.get_fignums():
            self.fig = plt.gcf()
            self.ax = self.fig.gca()
        else:
            self.fig = plt.figure(figsize=self.figsize, dpi=self.dpi)
            self.ax = self.fig.add_subplot()
            self._owns_figure = True
            if self.xlabel:
                self.ax.set_xlabel(self.xlabel)
            if self.ylabel:
                self.ax.set_ylabel(self.ylabel)
            if self.title:
                self.ax.set_title(self.title)
            self.ax.grid(self.grid)

        if not plt.isinteractive():
            # Windows appear on creation and never block the solver loop.
            # Undone by clear_session_data()/release().
            plt.ion()
            self._turned_interactive_on = True

    def _restore_interactive(self) -> None:
        if self._turned_interactive_on:
            plt.ioff()
            self._turned_interactive_on = False

    def release(self) -> None:
        self._restore_interactive()
        self._lines.clear()
        if self._owns_figure and self.fig is not None:
            plt.close(self.fig)
        self._owns_figure = False

    def is_open(self) -> bool:
        if self.fig is None or self.ax is None:
            return False
        # Figures built outside pyplot (e.g. embedded canvases) have no number.
        number = getattr(self.fig, "number", None)
        if number is not None and not plt.fignum_exists(number):
            return False
        return self.ax in self.fig.axes

    def drawable_width(self) -> float:
        return float(self.ax.get_window_extent().width)

    # ----------------------------------------------------------------- series
    def create_line_series(self, x0: np.ndarray, y0: np.ndarray, style: SeriesStyle) -> Line2D:
        kwargs: dict[str, Any] = {"linestyle": style.linestyle, "label": style.label}
        if style.color is not None:
            kwargs["color"] = style.color
        (line,) = self.ax.plot(
            np.asarray(x0, dtype=np.float64).reshape(-1),
            np.asarray(y0, dtype=np.float64).reshape(-1),
            **kwargs,
        )
        self._lines.append(line)
        return line

    def append_series_data(self, series: Line2D, xs: np.ndarray, ys: np.ndarray) -> None:
        x_old = np.asarray(series.get_xdata(), dtype=np.float64)
        y_old = np.asarray(series.get_ydata(), dtype=np.float64)
        series.set_data(
            np.concatenate([x_old, np.asarray(xs, dtype=np.float64).reshape(-1)]),
            np.concatenate([y_old, np.asarray(ys, dtype=np.float64).reshape(-1)]),
        )

    # ------------------------------------------------------------------- axes
    def set_axis_range(self, lo: float, hi: float) -> None:
        if hi <= lo:
            # matplotlib warns on a singular range; pad it like autoscale does
            hi = lo + 1.0
        self.ax.set_xlim(lo, hi)

    def set_axis_autoscale(self) -> None:
        self.ax.set_autoscalex_on(True)

    def render(self) -> None:
        # Only the y axis follows the data while the x range is preset.
        self.ax.relim()
        self.ax.autoscale_view()
        canvas = self.fig.canvas
        canvas.draw_idle()
        canvas.flush_events()

    def clear_session_data(self) -> None:
        self._lines.clear()
        self._restore_interactive()

    @property
    def lines(self) -> List[Line2D]:
        return list(self._lines)
