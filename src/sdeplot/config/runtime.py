"""Runtime configuration for the streaming SDE plot."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional, Tuple

import yaml

BACKENDS = ("matplotlib", "pyqtgraph")


@dataclass(slots=True)
class SdePlotConfig:
    """
    Appearance and backend knobs for the live trajectory plot.

    None of these affect how samples are buffered; chunk sizing is always
    derived from the drawable width and the length of ``tspan``.
    """

    backend: str = "matplotlib"
    overlay: bool = False

    state_linestyle: str = "-"
    noise_linestyle: str = "--"

    xlabel: Optional[str] = "t"
    ylabel: Optional[str] = "y(t)"
    title: Optional[str] = None
    grid: bool = True

    figsize: Tuple[float, float] = (6.4, 4.8)
    dpi: float = 100.0
    realtime_rc: bool = True

    def sanitized(self) -> SdePlotConfig:
        """Return a copy with derived limits applied."""
        backend = str(self.backend).strip().lower()
        if backend not in BACKENDS:
            raise ValueError(f"Unknown plot backend {self.backend!r}; expected one of {BACKENDS}")
        try:
            width, height = (float(v) for v in self.figsize)
        except (TypeError, ValueError):
            width, height = 6.4, 4.8
        if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
            width, height = 6.4, 4.8
        dpi = float(self.dpi)
        if not math.isfinite(dpi) or dpi <= 0:
            dpi = 100.0
        return SdePlotConfig(
            backend=backend,
            overlay=bool(self.overlay),
            state_linestyle=str(self.state_linestyle or "-"),
            noise_linestyle=str(self.noise_linestyle or "--"),
            xlabel=None if self.xlabel is None else str(self.xlabel),
            ylabel=None if self.ylabel is None else str(self.ylabel),
            title=None if self.title is None else str(self.title),
            grid=bool(self.grid),
            figsize=(width, height),
            dpi=dpi,
            realtime_rc=bool(self.realtime_rc),
        )


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`SdePlotConfig`."""
    return {f.name for f in fields(SdePlotConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten a top-level ``sdeplot`` block into the surrounding mapping."""
    if "sdeplot" in data and isinstance(data["sdeplot"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "sdeplot":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> SdePlotConfig:
    """Build :class:`SdePlotConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return SdePlotConfig()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    if "figsize" in payload and isinstance(payload["figsize"], list):
        payload["figsize"] = tuple(payload["figsize"])
    return SdePlotConfig(**payload).sanitized()


def load_config(path: str | Path | None) -> SdePlotConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`SdePlotConfig`.
    """
    if path is None:
        return SdePlotConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return SdePlotConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


__all__ = ["BACKENDS", "SdePlotConfig", "config_from_mapping", "load_config"]
