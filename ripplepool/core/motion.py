from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .noise import NoiseField

PHASE_RANGE = 1000.0


@dataclass
class MotionParams:
    amplitude: float = 30.0
    step: float = 0.02


@dataclass
class FeaturePoint:
    """A position that wanders around a fixed base using two noise phases."""

    base_x: float
    base_y: float
    phase_x: float
    phase_y: float
    x: float = field(init=False, default=0.0)
    y: float = field(init=False, default=0.0)

    def __post_init__(self):
        self.x = self.base_x
        self.y = self.base_y

    @classmethod
    def scatter(cls, x: float, y: float, rng: np.random.Generator) -> "FeaturePoint":
        return cls(float(x), float(y), float(rng.uniform(0, PHASE_RANGE)), float(rng.uniform(0, PHASE_RANGE)))

    def get_position(self) -> tuple[float, float]:
        return self.base_x, self.base_y

    def set_position(self, x: float, y: float) -> None:
        self.x += x - self.base_x
        self.y += y - self.base_y
        self.base_x = x
        self.base_y = y


def drift_offsets(noise: NoiseField, phases, amplitude: float) -> np.ndarray:
    return amplitude * (2.0 * np.asarray(noise.sample(phases)) - 1.0)


def advance_all(points: Sequence[FeaturePoint], noise: NoiseField, params: MotionParams) -> np.ndarray:
    """Move every point to base + noise offset and step its phases.

    Returns the new positions as an (n, 2) array.
    """
    if not points:
        return np.zeros((0, 2), dtype=np.float64)
    phase_x = np.array([p.phase_x for p in points], dtype=np.float64)
    phase_y = np.array([p.phase_y for p in points], dtype=np.float64)
    dx = drift_offsets(noise, phase_x, params.amplitude)
    dy = drift_offsets(noise, phase_y, params.amplitude)
    out = np.empty((len(points), 2), dtype=np.float64)
    for i, p in enumerate(points):
        p.x = p.base_x + float(dx[i])
        p.y = p.base_y + float(dy[i])
        p.phase_x += params.step
        p.phase_y += params.step
        out[i] = (p.x, p.y)
    return out


def advance(point: FeaturePoint, noise: NoiseField, params: MotionParams) -> tuple[float, float]:
    pos = advance_all([point], noise, params)[0]
    return float(pos[0]), float(pos[1])
