"""Streaming output function that plots an SDE trajectory while it is solved."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any, Callable, List, Optional

import numpy as np
from numpy.typing import ArrayLike

from ..config import SdePlotConfig
from ..errors import InitializationMismatchError, InvalidFlagError, NotInitializedError
from ..render.base import NOISE_STYLE, STATE_STYLE, RenderSurface
from ..render.mpl_surface import MatplotlibSurface
from ..tools.debug import time_block
from .chunk_buffer import ChunkBuffer, as_columns, as_times, chunk_capacity

__all__ = [
    "Status",
    "PlotSession",
    "StreamingPlotController",
    "SurfaceFactory",
    "surface_factory_for",
]

log = logging.getLogger(__name__)

SurfaceFactory = Callable[[], RenderSurface]

INIT_FLAGS = frozenset({"init"})
STEP_FLAGS = frozenset({"", "step"})
DONE_FLAGS = frozenset({"done"})


class Status(IntEnum):
    """Value returned to the solver after every call."""

    CLOSED = 0
    OPEN = 1


def surface_factory_for(cfg: SdePlotConfig) -> SurfaceFactory:
    """Return a factory producing a fresh surface of the configured backend."""
    if cfg.backend == "pyqtgraph":
        from ..render.pg_surface import PyQtGraphSurface

        return lambda: PyQtGraphSurface.from_config(cfg)
    return lambda: MatplotlibSurface.from_config(cfg)


@dataclass
class PlotSession:
    """Everything one ``init`` .. ``done`` run owns."""

    surface: RenderSurface
    buffer: ChunkBuffer
    expected_samples: int
    series: List[Any]
    overlay: bool
    flush_count: int = 0
    samples_seen: int = 1
    closed_reported: bool = False
    capacity_history: List[int] = field(default_factory=list)

    @property
    def noise_enabled(self) -> bool:
        return self.buffer.has_noise

    @property
    def state_dim(self) -> int:
        return self.buffer.state_dim

    @property
    def noise_dim(self) -> Optional[int]:
        return self.buffer.noise_dim


class StreamingPlotController:
    """
    Output function that builds a live plot of an SDE solution incrementally.

    The solver calls :meth:`on_init` once, :meth:`on_step` after every step (or
    block of refined steps) and :meth:`on_done` at the end; instances are also
    callable with the selector protocol ``fn(t, y, flag, w)``.

    Samples are collected in a chunk sized to roughly one redraw per pixel
    column of the drawable, so the number of redraws stays bounded by the
    plot width no matter how many steps the solver takes.
    """

    def __init__(
        self,
        surface_factory: SurfaceFactory | None = None,
        *,
        config: SdePlotConfig | None = None,
    ) -> None:
        self._config = (config or SdePlotConfig()).sanitized()
        self._surface_factory = surface_factory or surface_factory_for(self._config)
        self._session: PlotSession | None = None

    @classmethod
    def from_config(cls, cfg: SdePlotConfig) -> "StreamingPlotController":
        """Build a controller drawing with the backend selected in ``cfg``."""
        return cls(config=cfg)

    @property
    def config(self) -> SdePlotConfig:
        return self._config

    @property
    def session(self) -> PlotSession | None:
        return self._session

    @property
    def active(self) -> bool:
        return self._session is not None

    # ------------------------------------------------------------- selector
    def __call__(
        self,
        t: ArrayLike,
        y: ArrayLike,
        flag: str = "",
        w: ArrayLike | None = None,
    ) -> Status:
        if not isinstance(flag, str):
            raise InvalidFlagError.for_flag(flag)
        if flag in STEP_FLAGS:
            return self.on_step(t, y, w)
        if flag in INIT_FLAGS:
            return self.on_init(t, y, w)
        if flag in DONE_FLAGS:
            return self.on_done(w)
        raise InvalidFlagError.for_flag(flag)

    # ----------------------------------------------------------------- init
    def on_init(self, tspan: ArrayLike, y0: ArrayLike, w0: ArrayLike | None = None) -> Status:
        """Open a new surface, size the first chunk and draw the first sample."""
        times = as_times(tspan)
        if times.size == 0:
            raise ValueError("tspan must contain at least one time")
        state0 = np.asarray(y0, dtype=np.float64).reshape(-1)
        if state0.size == 0:
            raise ValueError("y0 must not be empty")
        noise0: np.ndarray | None = None
        if w0 is not None:
            noise0 = np.asarray(w0, dtype=np.float64).reshape(-1)
            if noise0.size == 0:
                raise ValueError("w0 must not be empty when noise increments are plotted")

        if self._session is not None:
            log.warning("Output function re-initialized before 'done'; finalizing previous plot")
            previous, self._session = self._session, None
            if previous.surface.is_open():
                self._finish(previous)
            else:
                previous.surface.release()

        surface = self._surface_factory()
        surface.open()
        expected = int(times.size)
        try:
            width = surface.drawable_width()
            capacity = chunk_capacity(expected, width)

            buffer = ChunkBuffer(capacity, state0.size, None if noise0 is None else noise0.size)
            t0 = times[:1]
            buffer.append(t0, state0.reshape(-1, 1), None if noise0 is None else noise0.reshape(-1, 1))
            # the seed is drawn right away, so the first flush must skip it
            buffer.mark_drawn()

            overlay = bool(surface.overlay)
            state_style = replace(STATE_STYLE, linestyle=self._config.state_linestyle)
            series: List[Any] = [
                surface.create_line_series(t0, state0[i : i + 1], replace(state_style, index=i))
                for i in range(state0.size)
            ]
            if noise0 is not None:
                noise_style = replace(NOISE_STYLE, linestyle=self._config.noise_linestyle)
                series.extend(
                    surface.create_line_series(t0, noise0[i : i + 1], replace(noise_style, index=i))
                    for i in range(noise0.size)
                )
            if not overlay:
                surface.set_axis_range(float(times.min()), float(times.max()))
            surface.render()
        except Exception:
            log.warning("Plot setup failed; releasing the surface")
            surface.release()
            raise

        self._session = PlotSession(
            surface=surface,
            buffer=buffer,
            expected_samples=expected,
            series=series,
            overlay=overlay,
            capacity_history=[capacity],
        )
        log.info(
            "Streaming plot started: %d expected samples, %d state / %s noise series, "
            "chunk capacity %d (drawable %.0f px)",
            expected,
            state0.size,
            0 if noise0 is None else noise0.size,
            capacity,
            width,
        )
        return Status.OPEN

    # ----------------------------------------------------------------- step
    def on_step(self, t: ArrayLike, y: ArrayLike, w: ArrayLike | None = None) -> Status:
        """Buffer a block of new samples, redrawing only when the chunk is full."""
        session = self._require_session("step", w)
        surface = session.surface
        if not surface.is_open():
            if not session.closed_reported:
                log.warning("Plot surface closed; ignoring further samples until 'done'")
                session.closed_reported = True
            return Status.CLOSED

        times = as_times(t)
        count = int(times.size)
        if count == 0:
            return Status.OPEN
        states = as_columns(y, session.state_dim, count, name="y")
        noises = None
        if session.noise_dim is not None:
            noises = as_columns(w, session.noise_dim, count, name="w")

        buffer = session.buffer
        session.samples_seen += count
        if buffer.fits(count):
            buffer.append(times, states, noises)
            return Status.OPEN

        with time_block("sdeplot flush #%d", session.flush_count + 1):
            flushed = self._flush(session)
            surface.render()
        session.flush_count += 1

        # The drawable may have been resized since the chunk was sized.
        width = surface.drawable_width()
        capacity = chunk_capacity(session.expected_samples, width, minimum=count)
        if capacity != buffer.capacity:
            log.debug(
                "Chunk capacity %d -> %d (drawable %.0f px)", buffer.capacity, capacity, width
            )
            session.capacity_history.append(capacity)
        log.debug("Flushed %d samples (flush %d)", flushed, session.flush_count)

        buffer.reset(capacity)
        buffer.append(times, states, noises)
        return Status.OPEN

    # ----------------------------------------------------------------- done
    def on_done(self, w: ArrayLike | None = None) -> Status:
        """Draw whatever is left in the chunk and release the session."""
        session = self._require_session("done", w)
        self._session = None

        if not session.surface.is_open():
            log.info("Plot surface was closed before the run finished")
            session.surface.release()
            return Status.CLOSED

        self._finish(session)
        log.info(
            "Streaming plot finished: %d samples, %d intermediate redraws",
            session.samples_seen,
            session.flush_count,
        )
        return Status.OPEN

    # -------------------------------------------------------------- helpers
    def _require_session(self, operation: str, w: ArrayLike | None) -> PlotSession:
        session = self._session
        if session is None:
            raise NotInitializedError.for_call(with_noise=w is not None)
        if (w is not None) != session.noise_enabled:
            raise InitializationMismatchError.for_call(operation, noise_enabled=session.noise_enabled)
        return session

    @staticmethod
    def _flush(session: PlotSession) -> int:
        """Concatenate the pending chunk onto every series; return its length."""
        chunk = session.buffer.pending()
        count = len(chunk)
        if count == 0:
            return 0
        state_dim = session.state_dim
        surface = session.surface
        for row, series in enumerate(session.series[:state_dim]):
            surface.append_series_data(series, chunk.times, chunk.states[row])
        if chunk.noises is not None:
            for row, series in enumerate(session.series[state_dim:]):
                surface.append_series_data(series, chunk.times, chunk.noises[row])
        return count

    def _finish(self, session: PlotSession) -> None:
        surface = session.surface
        self._flush(session)
        session.buffer.reset()
        surface.clear_session_data()
        if not session.overlay:
            surface.set_axis_autoscale()
        surface.render()
