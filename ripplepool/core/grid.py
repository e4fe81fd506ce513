from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ripplepool.utils.canvas import Surface, draw_polygon

from .errors import InvalidConfiguration
from .noise import NoiseField

logger = logging.getLogger(__name__)


@dataclass
class GridParams:
    cell_size: int = 40
    noise_scale: float = 0.2
    magnitude: float = 25.0
    # frame counter -> noise time coordinate
    time_scale: float = 0.02
    # shifts the y-displacement samples away from the x ones
    decorrelation: float = 1000.0
    background: Tuple[int, int, int] = (173, 216, 230)
    stroke: Tuple[int, int, int] = (100, 150, 200)
    stroke_width: int = 2
    animate: bool = True


def lattice_offsets(noise: NoiseField, gx: np.ndarray, gy: np.ndarray, params: GridParams, time_phase: float):
    s = params.noise_scale
    mag = params.magnitude
    dx = noise.sample(gx * s, gy * s, time_phase) * mag - mag / 2
    dy = noise.sample(gx * s + params.decorrelation, gy * s, time_phase) * mag - mag / 2
    return dx, dy


def grid_quads(bounds: Tuple[int, int], noise: NoiseField, params: GridParams, time_phase: float = 0.0) -> np.ndarray:
    """Distorted cell corners, shape (rows, cols, 4, 2).

    Corners are ordered top-left, top-right, bottom-right, bottom-left.
    Neighbouring cells sample the same lattice node, so the mesh has no gaps.
    """
    cs = int(params.cell_size)
    if cs < 1:
        raise InvalidConfiguration(f"grid cell size must be >= 1, got {params.cell_size}")
    width, height = int(bounds[0]), int(bounds[1])
    if width < 1 or height < 1:
        return np.zeros((0, 0, 4, 2), dtype=np.float64)

    xs = np.arange(0, width, cs, dtype=np.float64)
    ys = np.arange(0, height, cs, dtype=np.float64)
    node_x = np.append(xs, xs[-1] + cs)
    node_y = np.append(ys, ys[-1] + cs)
    gx, gy = np.meshgrid(node_x, node_y)
    dx, dy = lattice_offsets(noise, gx, gy, params, time_phase)
    nodes = np.stack([gx + dx, gy + dy], axis=-1)

    return np.stack(
        [nodes[:-1, :-1], nodes[:-1, 1:], nodes[1:, 1:], nodes[1:, :-1]],
        axis=2,
    )


def render_grid(
    surface: Surface,
    noise: NoiseField,
    params: GridParams | None = None,
    time_phase: float = 0.0,
    bounds: Tuple[int, int] | None = None,
) -> np.ndarray:
    params = params or GridParams()
    bounds = bounds or surface.size
    quads = grid_quads(bounds, noise, params, time_phase)
    surface.clear(params.background)
    for quad in quads.reshape(-1, 4, 2):
        draw_polygon(surface, quad, stroke=params.stroke, width=params.stroke_width)
    logger.debug("grid: %d quads at phase %.3f", quads.shape[0] * quads.shape[1], time_phase)
    return quads
