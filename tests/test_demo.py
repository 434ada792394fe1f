from __future__ import annotations

import numpy as np

from sdeplot import Status, StreamingPlotController
from sdeplot.render import MemorySurface
from sdeplot.tools import demo


class ClosingSurface(MemorySurface):
    """Memory surface the "user" closes after a few redraws."""

    def render(self) -> None:
        super().render()
        if self.render_count >= 3:
            self.close()


def test_simulate_feeds_every_sample(memory_factory, surfaces) -> None:
    plot = StreamingPlotController(memory_factory(width=50))
    t, y = demo.simulate(
        plot,
        steps=300,
        dt=0.01,
        dim=2,
        refine=3,
        noise=True,
        rng=np.random.default_rng(3),
    )
    assert t.size == 301
    assert not plot.active

    surface = surfaces[0]
    for row, series in enumerate(surface.state_series()):
        np.testing.assert_allclose(series.xdata, t)
        np.testing.assert_allclose(series.ydata, y[row])
    assert len(surface.noise_series()) == 2


def test_simulate_stops_when_plot_closes() -> None:
    made: list[ClosingSurface] = []

    def factory() -> ClosingSurface:
        made.append(ClosingSurface(width=100))
        return made[-1]

    plot = StreamingPlotController(factory)
    t, _ = demo.simulate(plot, steps=1000, dt=0.001, rng=np.random.default_rng(0))
    assert t.size < 1001
    assert not made[0].is_open()
    assert not plot.active


def test_main_runs_headless() -> None:
    assert demo.main(["--steps", "50", "--seed", "1", "--no-show"]) == 0


def test_status_values() -> None:
    assert Status.OPEN == 1
    assert Status.CLOSED == 0
