from __future__ import annotations

import os

# Headless backends; must be set before matplotlib/Qt are imported.
os.environ.setdefault("MPLBACKEND", "Agg")
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import matplotlib  # noqa: E402

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from sdeplot.render import MemorySurface  # noqa: E402


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


@pytest.fixture
def surfaces() -> list[MemorySurface]:
    """Every surface handed out by :func:`memory_factory`, in creation order."""
    return []


@pytest.fixture
def memory_factory(surfaces):
    def build(width: float = 800.0, overlay: bool = False):
        def factory() -> MemorySurface:
            surface = MemorySurface(width=width, overlay=overlay)
            surfaces.append(surface)
            return surface

        return factory

    return build
