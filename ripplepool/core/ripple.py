"""Worley-noise water ripples.

Feature points drift around their scatter positions; each pixel block is
colored by its distance to the nearest point, lighter further away.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np
from scipy.spatial import cKDTree

from ripplepool.utils.canvas import create_offscreen_buffer, write_pixel_blocks
from ripplepool.utils.image_ops import clamp_channel

from .errors import InvalidConfiguration
from .motion import FeaturePoint, MotionParams, advance_all
from .noise import NoiseField

logger = logging.getLogger(__name__)

# (divisor, exponent) of the distance curve for R, G, B
CHANNEL_CURVES = ((14.5, 2.5), (21.0, 2.5), (40.0, 3.0))


@dataclass
class RippleParams:
    point_count: int = 120
    background: Tuple[int, int, int] = (44, 169, 225)
    block_size: int = 3
    alpha: int = 200
    motion: MotionParams = field(default_factory=lambda: MotionParams(step=0.1))
    # advance/render the field on every n-th tick
    update_every: int = 1


def wave_color(distance: np.ndarray, base: float, divisor: float, exponent: float) -> np.ndarray:
    return clamp_channel(base + np.power(distance / divisor, exponent))


class RippleField:
    def __init__(self, points: List[FeaturePoint], width: int, height: int, params: RippleParams):
        self.points = points
        self.width = int(width)
        self.height = int(height)
        self.params = params
        self.buffer = create_offscreen_buffer(self.width, self.height)

    @classmethod
    def initialize(
        cls,
        bounds: Tuple[int, int],
        params: RippleParams | None = None,
        rng: np.random.Generator | None = None,
    ) -> "RippleField":
        params = params or RippleParams()
        rng = rng if rng is not None else np.random.default_rng()
        width, height = int(bounds[0]), int(bounds[1])
        if params.point_count < 1:
            raise InvalidConfiguration(f"ripple needs at least one feature point, got {params.point_count}")
        if params.block_size < 1:
            raise InvalidConfiguration(f"ripple block size must be >= 1, got {params.block_size}")
        if not 0 <= params.alpha <= 255:
            raise InvalidConfiguration(f"ripple alpha must be within 0..255, got {params.alpha}")
        if params.update_every < 1:
            raise InvalidConfiguration(f"ripple update_every must be >= 1, got {params.update_every}")
        if width < 1 or height < 1:
            raise InvalidConfiguration(f"ripple bounds must be positive, got {width}x{height}")

        xs = rng.uniform(0, width, params.point_count)
        ys = rng.uniform(0, height, params.point_count)
        points = [FeaturePoint.scatter(x, y, rng) for x, y in zip(xs, ys)]
        logger.debug("ripple field: %d points on %dx%d, block %d", len(points), width, height, params.block_size)
        return cls(points, width, height, params)

    def positions(self) -> np.ndarray:
        return np.array([(p.x, p.y) for p in self.points], dtype=np.float64)

    def advance(self, noise: NoiseField) -> None:
        advance_all(self.points, noise, self.params.motion)

    def nearest_distances(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Distance from every (x, y) lattice node to its nearest feature point, shape (len(ys), len(xs))."""
        gx, gy = np.meshgrid(xs, ys)
        tree = cKDTree(self.positions())
        dist, _ = tree.query(np.column_stack([gx.ravel(), gy.ravel()]))
        return np.asarray(dist, dtype=np.float64).reshape(gy.shape)

    def render(self, into: np.ndarray | None = None) -> np.ndarray:
        buffer = self.buffer if into is None else into
        h, w = buffer.shape[:2]
        bs = int(self.params.block_size)
        xs = np.arange(0, w, bs, dtype=np.float64)
        ys = np.arange(0, h, bs, dtype=np.float64)
        d = self.nearest_distances(xs, ys)

        blocks = np.empty((len(ys), len(xs), 4), dtype=np.uint8)
        for i, (divisor, exponent) in enumerate(CHANNEL_CURVES):
            blocks[..., i] = np.rint(wave_color(d, self.params.background[i], divisor, exponent))
        blocks[..., 3] = self.params.alpha

        write_pixel_blocks(buffer, blocks, bs)
        return buffer
