"""Render surfaces the streaming plot controller can draw into.

:mod:`base` defines the narrow contract the controller relies on. The
Matplotlib surface is the default; :mod:`pg_surface` (PyQtGraph, needs the
``qt`` extra) is imported on demand, and :mod:`memory` keeps everything in
NumPy arrays for headless runs and tests.
"""

from __future__ import annotations

from .base import NOISE_STYLE, STATE_STYLE, RenderSurface, SeriesStyle
from .memory import MemorySeries, MemorySurface
from .mpl_surface import MatplotlibSurface, configure_matplotlib_for_realtime

__all__ = [
    "RenderSurface",
    "SeriesStyle",
    "STATE_STYLE",
    "NOISE_STYLE",
    "MemorySeries",
    "MemorySurface",
    "MatplotlibSurface",
    "configure_matplotlib_for_realtime",
]
