"""PyQtGraph render surface for live SDE trajectory plots."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, TYPE_CHECKING

import numpy as np
import pyqtgraph as pg
from pyqtgraph.Qt import QtCore

from .base import SeriesStyle

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..config import SdePlotConfig


log = logging.getLogger(__name__)

_PEN_STYLES = {
    "-": QtCore.Qt.PenStyle.SolidLine,
    "--": QtCore.Qt.PenStyle.DashLine,
    ":": QtCore.Qt.PenStyle.DotLine,
    "-.": QtCore.Qt.PenStyle.DashDotLine,
}


class PyQtGraphSurface:
    """
    Draw the trajectory into a :class:`pyqtgraph.PlotWidget`.

    A ``widget`` can be injected to draw into an existing plot; in overlay mode
    it is reused as-is, otherwise its contents are cleared on :meth:`open`.
    """

    def __init__(
        self,
        *,
        overlay: bool = False,
        xlabel: Optional[str] = "t",
        ylabel: Optional[str] = "y(t)",
        title: Optional[str] = None,
        grid: bool = True,
        line_width: float = 1.0,
        widget: Optional[pg.PlotWidget] = None,
    ) -> None:
        self.overlay = bool(overlay)
        self._xlabel = xlabel
        self._ylabel = ylabel
        self._title = title
        self._grid = grid
        self._line_width = max(1.0, float(line_width))
        self._widget = widget
        self._app: Any = None
        self._items: List[pg.PlotDataItem] = []
        self._owns_widget = False

    @classmethod
    def from_config(cls, cfg: "SdePlotConfig", **overrides: Any) -> "PyQtGraphSurface":
        params: dict[str, Any] = dict(
            overlay=cfg.overlay,
            xlabel=cfg.xlabel,
            ylabel=cfg.ylabel,
            title=cfg.title,
            grid=cfg.grid,
        )
        params.update(overrides)
        return cls(**params)

    @property
    def widget(self) -> Optional[pg.PlotWidget]:
        return self._widget

    # -------------------------------------------------------------- lifecycle
    def open(self) -> None:
        self._app = pg.mkQApp()
        if self._widget is None:
            self._widget = pg.PlotWidget()
            self._owns_widget = True
        elif not self.overlay:
            self._widget.clear()

        plot = self._widget.getPlotItem()
        plot.setMenuEnabled(False)
        plot.showGrid(x=self._grid, y=self._grid, alpha=0.3)
        if self._xlabel:
            plot.setLabel("bottom", self._xlabel)
        if self._ylabel:
            plot.setLabel("left", self._ylabel)
        if self._title:
            plot.setTitle(self._title)
        self._widget.show()
        self._app.processEvents()

    def is_open(self) -> bool:
        if self._widget is None:
            return False
        try:
            return bool(self._widget.isVisible())
        except RuntimeError:
            # underlying C++ object already deleted
            return False

    def drawable_width(self) -> float:
        view_box = self._widget.getPlotItem().getViewBox()
        width = float(view_box.width())
        if width <= 0.0:
            width = float(self._widget.width())
        return width

    # ----------------------------------------------------------------- series
    def create_line_series(
        self, x0: np.ndarray, y0: np.ndarray, style: SeriesStyle
    ) -> pg.PlotDataItem:
        color = style.color if style.color is not None else pg.intColor(len(self._items), hues=9)
        pen = pg.mkPen(
            color,
            width=self._line_width,
            style=_PEN_STYLES.get(style.linestyle, QtCore.Qt.PenStyle.SolidLine),
        )
        item = self._widget.getPlotItem().plot(
            np.asarray(x0, dtype=np.float64).reshape(-1),
            np.asarray(y0, dtype=np.float64).reshape(-1),
            pen=pen,
            name=style.label,
        )
        self._items.append(item)
        return item

    def append_series_data(self, series: pg.PlotDataItem, xs: np.ndarray, ys: np.ndarray) -> None:
        x_old, y_old = series.getData()
        if x_old is None or y_old is None:
            x_old = np.empty(0, dtype=np.float64)
            y_old = np.empty(0, dtype=np.float64)
        series.setData(
            np.concatenate([np.asarray(x_old, dtype=np.float64), np.asarray(xs, dtype=np.float64).reshape(-1)]),
            np.concatenate([np.asarray(y_old, dtype=np.float64), np.asarray(ys, dtype=np.float64).reshape(-1)]),
        )

    # ------------------------------------------------------------------- axes
    def set_axis_range(self, lo: float, hi: float) -> None:
        plot = self._widget.getPlotItem()
        plot.setXRange(lo, hi, padding=0.0)
        plot.enableAutoRange(x=False, y=True)

    def set_axis_autoscale(self) -> None:
        self._widget.getPlotItem().enableAutoRange(x=True, y=True)

    def render(self) -> None:
        self._app.processEvents()

    def clear_session_data(self) -> None:
        self._items.clear()

    def release(self) -> None:
        self._items.clear()
        if not self._owns_widget:
            return
        try:
            self._widget.close()
        except RuntimeError:
            log.debug("Plot widget was already deleted")
        self._widget = None
        self._owns_widget = False
