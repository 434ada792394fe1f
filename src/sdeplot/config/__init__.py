"""Configuration objects and helpers for sdeplot.

:mod:`runtime` loads an optional YAML file (a flat mapping, or one nested under
a top-level ``sdeplot:`` key) into the typed :class:`SdePlotConfig` that picks
the render backend and the plot's cosmetics.
"""

from .runtime import BACKENDS, SdePlotConfig, config_from_mapping, load_config

__all__ = ["BACKENDS", "SdePlotConfig", "config_from_mapping", "load_config"]
