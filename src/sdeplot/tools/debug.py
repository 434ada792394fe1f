"""Opt-in timing of redraws, switched on with ``SDEPLOT_DEBUG``."""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator

DEBUG_SDEPLOT = os.getenv("SDEPLOT_DEBUG", "").lower() in {"1", "true", "yes", "on"}

log = logging.getLogger(__name__)


def debug_enabled() -> bool:
    """Return True when redraw timing should be measured and reported."""
    return DEBUG_SDEPLOT


@contextmanager
def time_block(
    label: str,
    *args: Any,
    emitter: Callable[[str], None] | None = None,
) -> Iterator[None]:
    """
    Report how long the enclosed block took when debugging is enabled.

    ``label`` is a ``%``-style format string; ``args`` are only interpolated
    when a report is actually emitted, so a disabled block costs one flag check.
    """
    if not debug_enabled():
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        name = label % args if args else label
        (emitter or log.info)(f"[DEBUG] {name} took {elapsed_ms:.3f} ms")
