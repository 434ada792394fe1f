from __future__ import annotations

import numpy as np
import pytest

pytest.importorskip("PySide6")
pytest.importorskip("pyqtgraph")

from sdeplot import SdePlotConfig, Status, StreamingPlotController  # noqa: E402
from sdeplot.render import STATE_STYLE  # noqa: E402
from sdeplot.render.pg_surface import PyQtGraphSurface  # noqa: E402


def test_surface_appends_by_concatenation() -> None:
    surface = PyQtGraphSurface()
    surface.open()
    assert surface.is_open()
    assert surface.drawable_width() > 0

    item = surface.create_line_series(np.array([0.0]), np.array([1.0]), STATE_STYLE)
    surface.append_series_data(item, np.array([1.0, 2.0]), np.array([2.0, 3.0]))
    surface.render()

    xs, ys = item.getData()
    np.testing.assert_array_equal(xs, [0.0, 1.0, 2.0])
    np.testing.assert_array_equal(ys, [1.0, 2.0, 3.0])
    surface.widget.close()


def test_controller_streams_and_detects_close() -> None:
    plot = StreamingPlotController.from_config(SdePlotConfig(backend="pyqtgraph"))
    tspan = np.linspace(0.0, 1.0, 50)
    plot.on_init(tspan, [0.0], [0.0])
    session = plot.session
    assert isinstance(session.surface, PyQtGraphSurface)
    for k in range(1, 25):
        assert plot.on_step(tspan[k], [tspan[k]], [0.0]) == Status.OPEN

    session.surface.widget.close()
    assert plot.on_step(tspan[25], [tspan[25]], [0.0]) == Status.CLOSED
    assert plot.on_done([]) == Status.CLOSED


def test_overlay_reuses_injected_widget() -> None:
    import pyqtgraph as pg

    pg.mkQApp()
    widget = pg.PlotWidget()
    widget.plot([0.0, 1.0], [2.0, 2.0])

    surface = PyQtGraphSurface(overlay=True, widget=widget)
    surface.open()
    surface.create_line_series(np.array([0.0]), np.array([0.0]), STATE_STYLE)
    assert len(widget.getPlotItem().listDataItems()) == 2
    widget.close()


def test_release_closes_owned_widget_only() -> None:
    import pyqtgraph as pg

    surface = PyQtGraphSurface()
    surface.open()
    owned = surface.widget
    surface.release()
    assert not owned.isVisible()
    assert surface.widget is None
    assert not surface.is_open()

    widget = pg.PlotWidget()
    widget.show()
    injected = PyQtGraphSurface(widget=widget)
    injected.open()
    injected.release()
    assert widget.isVisible()
    widget.close()
