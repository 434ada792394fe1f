#!/usr/bin/env python3
"""
Drive the streaming plot with a small Ornstein-Uhlenbeck simulation.

The loop below is a bare Euler-Maruyama stepper standing in for a real SDE
solver; it calls the output function exactly the way a solver does
(``init``, one call per step or per ``--refine`` block, ``done``) and stops
early when the plot window is closed.

Examples::

    sdeplot-demo --steps 20000 --dim 2 --noise
    sdeplot-demo --refine 4 --backend pyqtgraph
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import Optional, Sequence

import numpy as np

from ..config import SdePlotConfig, load_config
from ..core import Status, StreamingPlotController

log = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Live plot of a simulated OU process")
    parser.add_argument("--steps", type=int, default=5000, help="Number of time steps (default: 5000)")
    parser.add_argument("--dt", type=float, default=1e-3, help="Step size (default: 1e-3)")
    parser.add_argument("--dim", type=int, default=1, help="State dimension (default: 1)")
    parser.add_argument("--theta", type=float, default=2.0, help="Mean reversion rate (default: 2.0)")
    parser.add_argument("--mu", type=float, default=0.0, help="Long-run mean (default: 0.0)")
    parser.add_argument("--sigma", type=float, default=0.5, help="Diffusion coefficient (default: 0.5)")
    parser.add_argument("--y0", type=float, default=1.0, help="Initial value (default: 1.0)")
    parser.add_argument(
        "--refine",
        type=int,
        default=1,
        help="Samples handed to the output function per call (default: 1)",
    )
    parser.add_argument("--noise", action="store_true", help="Also plot the integrated Wiener paths")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--backend",
        choices=("matplotlib", "pyqtgraph"),
        default=None,
        help="Render backend (default: from --config, else matplotlib)",
    )
    parser.add_argument("--config", type=str, default=None, help="YAML file with plot settings")
    parser.add_argument("--overlay", action="store_true", help="Draw onto the current axes")
    parser.add_argument("--no-show", action="store_true", help="Do not block on the final window")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    return parser


def _resolve_config(args: argparse.Namespace) -> SdePlotConfig:
    cfg = load_config(args.config)
    overrides = {}
    if args.backend is not None:
        overrides["backend"] = args.backend
    if args.overlay:
        overrides["overlay"] = True
    if not overrides:
        return cfg
    return replace(cfg, **overrides).sanitized()


def simulate(
    output_fn: StreamingPlotController,
    *,
    steps: int,
    dt: float,
    dim: int = 1,
    theta: float = 2.0,
    mu: float = 0.0,
    sigma: float = 0.5,
    y0: float = 1.0,
    refine: int = 1,
    noise: bool = False,
    rng: Optional[np.random.Generator] = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Integrate ``dim`` independent OU processes, feeding ``output_fn`` as we go.

    Returns the full ``(t, y)`` trajectory that was computed (``y`` is
    ``dim x len(t)``), which may be shorter than requested if the plot window
    was closed.
    """
    if steps < 1:
        raise ValueError("steps must be at least 1")
    if dim < 1:
        raise ValueError("dim must be at least 1")
    refine = max(1, int(refine))
    rng = rng or np.random.default_rng()

    tspan = dt * np.arange(steps + 1, dtype=np.float64)
    ys = np.empty((dim, steps + 1), dtype=np.float64)
    ws = np.zeros((dim, steps + 1), dtype=np.float64)
    ys[:, 0] = y0

    if noise:
        output_fn(tspan, ys[:, 0], "init", ws[:, 0])
    else:
        output_fn(tspan, ys[:, 0], "init")

    sqrt_dt = np.sqrt(dt)
    last = 0
    for k in range(1, steps + 1):
        dw = sqrt_dt * rng.standard_normal(dim)
        ys[:, k] = ys[:, k - 1] + theta * (mu - ys[:, k - 1]) * dt + sigma * dw
        ws[:, k] = ws[:, k - 1] + dw

        if k - last < refine and k < steps:
            continue
        block = slice(last + 1, k + 1)
        if noise:
            status = output_fn(tspan[block], ys[:, block], "", ws[:, block])
        else:
            status = output_fn(tspan[block], ys[:, block], "")
        last = k
        if status == Status.CLOSED:
            log.info("Plot closed at t=%.4g; stopping integration", tspan[k])
            break

    output_fn([], [], "done", [] if noise else None)
    return tspan[: last + 1], ys[:, : last + 1]


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(2, args.verbose)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    cfg = _resolve_config(args)
    controller = StreamingPlotController.from_config(cfg)
    rng = np.random.default_rng(args.seed)
    t, _ = simulate(
        controller,
        steps=args.steps,
        dt=args.dt,
        dim=args.dim,
        theta=args.theta,
        mu=args.mu,
        sigma=args.sigma,
        y0=args.y0,
        refine=args.refine,
        noise=args.noise,
        rng=rng,
    )
    log.info("Integrated %d samples", t.size)

    if not args.no_show:
        if cfg.backend == "pyqtgraph":
            import pyqtgraph as pg

            pg.exec()
        else:
            import matplotlib.pyplot as plt

            plt.ioff()
            plt.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
