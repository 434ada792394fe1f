"""Core streaming machinery: the chunk buffer and the output-function controller.

The solver drives :class:`StreamingPlotController`, which batches incoming
samples into a :class:`ChunkBuffer` sized from the drawable width and flushes
them onto the render surface one chunk at a time.
"""

from .chunk_buffer import Chunk, ChunkBuffer, as_columns, as_times, chunk_capacity
from .controller import (
    PlotSession,
    Status,
    StreamingPlotController,
    SurfaceFactory,
    surface_factory_for,
)

__all__ = [
    "Chunk",
    "ChunkBuffer",
    "as_columns",
    "as_times",
    "chunk_capacity",
    "PlotSession",
    "Status",
    "StreamingPlotController",
    "SurfaceFactory",
    "surface_factory_for",
]
