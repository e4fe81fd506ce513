"""Swim rings: gradient band, concentric circles and dotted halos.

Rings are laid out once per scene with rejection sampling so that no two
centres are closer than ``min_distance``; afterwards they drift with the
shared motion model.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Protocol, Sequence, Tuple

import numpy as np

from ripplepool.utils.canvas import Surface, draw_ellipse, pick_random, uniform_random
from ripplepool.utils.image_ops import RGBA, gradient_color, with_alpha

from .errors import InvalidConfiguration
from .motion import FeaturePoint, MotionParams, advance
from .noise import NoiseField

logger = logging.getLogger(__name__)

DEFAULT_PALETTE: Tuple[Tuple[int, int, int], ...] = (
    (245, 185, 193),
    (237, 170, 63),
    (166, 233, 156),
    (238, 116, 178),
    (65, 124, 180),
    (149, 205, 232),
)


class Repositionable(Protocol):
    def get_position(self) -> Tuple[float, float]: ...

    def set_position(self, x: float, y: float) -> None: ...


@dataclass
class RingParams:
    inner_radius: float = 40.0
    outer_radius: float = 120.0
    gradient_steps: int = 80
    gradient_width: int = 5
    circle_count: int = 5
    circle_min_radius: float = 40.0
    circle_max_radius: float = 70.0
    circle_width: int = 2
    dot_radius: float = 80.0
    dot_count: int = 36
    dot_count_increment: int = 6
    dot_radius_increment: float = 10.0
    dot_alpha: int = 180
    dot_alpha_decrement: int = 20
    dot_layers: int = 4
    dot_size: float = 6.0
    dot_color: Tuple[int, int, int] = (255, 255, 255)
    shadow: bool = True
    shadow_offset: Tuple[float, float] = (80.0, 80.0)
    shadow_color: Tuple[int, int, int, int] = (6, 38, 96, 20)
    motion: MotionParams = field(default_factory=MotionParams)


@dataclass
class LayoutParams:
    count: int = 10
    min_distance: float = 250.0
    max_attempts: int = 100
    # candidates are drawn from [low, size - high) on both axes
    padding: Tuple[float, float] = (100.0, 50.0)
    ring_radius: float = 80.0


@dataclass
class RingPlacement:
    x: float
    y: float
    radius: float


@dataclass
class LayoutReport:
    accepted: List[RingPlacement]
    skipped: int


@dataclass
class GradientRing:
    inner_radius: float
    outer_radius: float
    steps: int
    colors: Sequence[Sequence[int]]
    width: int = 5

    def color_at(self, t: float) -> RGBA:
        return gradient_color(t, self.colors)

    def strokes(self) -> List[Tuple[float, RGBA]]:
        radii = np.linspace(self.inner_radius, self.outer_radius, max(1, int(self.steps)) + 1)
        span = self.outer_radius - self.inner_radius
        out = []
        for r in radii:
            t = (r - self.inner_radius) / span if span else 0.0
            out.append((float(r), self.color_at(t)))
        return out

    def draw(self, surface: Surface, center: Tuple[float, float]) -> None:
        for r, color in self.strokes():
            draw_ellipse(surface, center, r, r, stroke=color, width=self.width)


@dataclass
class ConcentricCircles:
    count: int
    min_radius: float
    max_radius: float
    color: Sequence[int]
    width: int = 2

    def radii(self) -> np.ndarray:
        if self.count <= 1:
            return np.array([self.min_radius] * max(0, self.count), dtype=np.float64)
        return np.linspace(self.min_radius, self.max_radius, self.count)

    def draw(self, surface: Surface, center: Tuple[float, float]) -> None:
        for r in self.radii():
            draw_ellipse(surface, center, r, r, stroke=self.color, width=self.width)


@dataclass
class DotRing:
    radius: float
    count: int
    color: Sequence[int]
    size: float = 6.0

    def centers(self, center: Tuple[float, float]) -> np.ndarray:
        if self.count < 1:
            return np.zeros((0, 2), dtype=np.float64)
        angles = np.arange(self.count) * (2 * math.pi / self.count)
        return np.column_stack([
            center[0] + self.radius * np.cos(angles),
            center[1] + self.radius * np.sin(angles),
        ])

    def draw(self, surface: Surface, center: Tuple[float, float]) -> None:
        half = self.size / 2
        for x, y in self.centers(center):
            draw_ellipse(surface, (x, y), half, half, fill=self.color)


class Ring:
    """One swim ring: optional shadow, gradient band, circles and dot halos."""

    def __init__(
        self,
        x: float,
        y: float,
        palette: Sequence[Sequence[int]],
        params: RingParams | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.params = params or RingParams()
        rng = rng if rng is not None else np.random.default_rng()
        p = self.params
        self.drifter = FeaturePoint.scatter(x, y, rng)

        stops = [pick_random(rng, palette) for _ in range(3)]
        self.gradient = GradientRing(p.inner_radius, p.outer_radius, p.gradient_steps, stops, p.gradient_width)
        self.shadow = None
        if p.shadow:
            shade = with_alpha(p.shadow_color)
            self.shadow = GradientRing(p.inner_radius, p.outer_radius, p.gradient_steps, [shade] * 3, p.gradient_width)
        self.circles = ConcentricCircles(
            p.circle_count, p.circle_min_radius, p.circle_max_radius, pick_random(rng, palette), p.circle_width
        )
        self.dots = [
            DotRing(
                p.dot_radius + j * p.dot_radius_increment,
                p.dot_count + j * p.dot_count_increment,
                with_alpha(p.dot_color, max(0, p.dot_alpha - j * p.dot_alpha_decrement)),
                p.dot_size,
            )
            for j in range(p.dot_layers)
        ]

    @property
    def position(self) -> Tuple[float, float]:
        return self.drifter.x, self.drifter.y

    @property
    def shadow_position(self) -> Tuple[float, float]:
        ox, oy = self.params.shadow_offset
        return self.drifter.x + ox, self.drifter.y + oy

    def get_position(self) -> Tuple[float, float]:
        return self.drifter.get_position()

    def set_position(self, x: float, y: float) -> None:
        self.drifter.set_position(x, y)

    def update(self, noise: NoiseField) -> Tuple[float, float]:
        return advance(self.drifter, noise, self.params.motion)

    def draw(self, surface: Surface) -> None:
        if self.shadow is not None:
            self.shadow.draw(surface, self.shadow_position)
        center = self.position
        self.gradient.draw(surface, center)
        self.circles.draw(surface, center)
        for dots in self.dots:
            dots.draw(surface, center)


def place_rings(bounds: Tuple[int, int], layout: LayoutParams | None = None, rng: np.random.Generator | None = None) -> LayoutReport:
    layout = layout or LayoutParams()
    rng = rng if rng is not None else np.random.default_rng()
    if layout.count < 1:
        raise InvalidConfiguration(f"ring count must be >= 1, got {layout.count}")
    if layout.max_attempts < 1:
        raise InvalidConfiguration(f"ring max_attempts must be >= 1, got {layout.max_attempts}")
    if layout.min_distance < 0:
        raise InvalidConfiguration(f"ring min_distance must be >= 0, got {layout.min_distance}")

    width, height = bounds
    lo, hi = layout.padding
    x0, x1 = lo, width - hi
    y0, y1 = lo, height - hi
    if x1 <= x0 or y1 <= y0:
        logger.warning("canvas %sx%s leaves no room for rings after padding %s", width, height, layout.padding)
        return LayoutReport([], layout.count)

    accepted: List[RingPlacement] = []
    skipped = 0
    for i in range(layout.count):
        for _ in range(layout.max_attempts):
            x = uniform_random(rng, x0, x1)
            y = uniform_random(rng, y0, y1)
            if all(math.hypot(x - r.x, y - r.y) >= layout.min_distance for r in accepted):
                accepted.append(RingPlacement(x, y, layout.ring_radius))
                break
        else:
            skipped += 1
            logger.warning("ring %d skipped: no free spot after %d attempts", i, layout.max_attempts)
    return LayoutReport(accepted, skipped)


def build_rings(
    bounds: Tuple[int, int],
    palette: Sequence[Sequence[int]] = DEFAULT_PALETTE,
    layout: LayoutParams | None = None,
    params: RingParams | None = None,
    rng: np.random.Generator | None = None,
) -> Tuple[List[Ring], LayoutReport]:
    rng = rng if rng is not None else np.random.default_rng()
    if not palette:
        raise InvalidConfiguration("ring palette is empty")
    report = place_rings(bounds, layout, rng)
    rings = [Ring(p.x, p.y, palette, params, rng) for p in report.accepted]
    return rings, report
