"""Live, incrementally drawn plots of SDE solutions.

Pass a :class:`StreamingPlotController` (or the ready-made :func:`sdeplot`
factory) to a solver as its output function::

    plot = sdeplot()
    plot(tspan, y0, "init")
    for t, y in steps:
        if plot(t, y) == 0:
            break
    plot([], [], "done")
"""

from __future__ import annotations

from pathlib import Path

from .config import SdePlotConfig, load_config
from .core import Status, StreamingPlotController
from .errors import (
    InitializationMismatchError,
    InvalidFlagError,
    NotInitializedError,
    SdePlotError,
)

__all__ = [
    "sdeplot",
    "SdePlotConfig",
    "load_config",
    "Status",
    "StreamingPlotController",
    "SdePlotError",
    "NotInitializedError",
    "InitializationMismatchError",
    "InvalidFlagError",
]


def sdeplot(config: SdePlotConfig | str | Path | None = None) -> StreamingPlotController:
    """Return a controller configured from ``config`` (an object or a YAML path)."""
    if config is None or isinstance(config, SdePlotConfig):
        return StreamingPlotController(config=config)
    return StreamingPlotController.from_config(load_config(config))
