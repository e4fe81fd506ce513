"""Seeded smooth noise field.

Lattice value noise in the style of Processing/p5 ``noise()``: a table of
4096 random values addressed by the integer part of the coordinates, blended
with cosine interpolation and summed over a few octaves. Works on scalars or
numpy arrays of any (broadcastable) shape.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import InvalidConfiguration

YWRAPB = 4
YWRAP = 1 << YWRAPB
ZWRAPB = 8
ZWRAP = 1 << ZWRAPB
TABLE_MASK = 4095

# Lattice indices are masked to the table size on every axis and octave, so
# the field repeats with this period and coordinates can be wrapped freely.
PERIOD = float(TABLE_MASK + 1)


@dataclass
class NoiseParams:
    seed: int | None = None
    octaves: int = 4
    falloff: float = 0.5


def _scaled_cosine(t: np.ndarray) -> np.ndarray:
    return 0.5 * (1.0 - np.cos(t * np.pi))


def _split(v) -> tuple[np.ndarray, np.ndarray]:
    # negative coordinates mirror the positive side, like p5
    v = np.abs(np.asarray(v, dtype=np.float64)) % PERIOD
    vi = np.floor(v).astype(np.int64)
    return vi, v - vi


class NoiseField:
    """Deterministic smooth scalar field in [0, 1] over 1, 2 or 3 coordinates."""

    def __init__(self, params: NoiseParams | None = None):
        self.params = params or NoiseParams()
        if int(self.params.octaves) < 1:
            raise InvalidConfiguration(f"noise octaves must be >= 1, got {self.params.octaves}")
        if not 0.0 < float(self.params.falloff) <= 1.0:
            raise InvalidConfiguration(f"noise falloff must be in (0, 1], got {self.params.falloff}")
        self.reseed(self.params.seed)

    def reseed(self, seed: int | None) -> None:
        rng = np.random.default_rng(seed)
        self.table = rng.random(TABLE_MASK + 1)

    def sample(self, x, y=0.0, z=0.0):
        """Sample the field; returns a float for scalar input, else an array."""
        xi, xf = _split(x)
        yi, yf = _split(y)
        zi, zf = _split(z)
        xi, yi, zi = np.broadcast_arrays(xi, yi, zi)
        xf, yf, zf = np.broadcast_arrays(xf, yf, zf)

        table = self.table
        out = np.zeros(xf.shape, dtype=np.float64)
        amp = 0.5
        for _ in range(int(self.params.octaves)):
            of = xi + (yi << YWRAPB) + (zi << ZWRAPB)
            rxf = _scaled_cosine(xf)
            ryf = _scaled_cosine(yf)

            n1 = table[of & TABLE_MASK]
            n1 = n1 + rxf * (table[(of + 1) & TABLE_MASK] - n1)
            n2 = table[(of + YWRAP) & TABLE_MASK]
            n2 = n2 + rxf * (table[(of + YWRAP + 1) & TABLE_MASK] - n2)
            n1 = n1 + ryf * (n2 - n1)

            of = of + ZWRAP
            n2 = table[of & TABLE_MASK]
            n2 = n2 + rxf * (table[(of + 1) & TABLE_MASK] - n2)
            n3 = table[(of + YWRAP) & TABLE_MASK]
            n3 = n3 + rxf * (table[(of + YWRAP + 1) & TABLE_MASK] - n3)
            n2 = n2 + ryf * (n3 - n2)

            n1 = n1 + _scaled_cosine(zf) * (n2 - n1)
            out += n1 * amp
            amp *= float(self.params.falloff)

            xi, xf = _next_octave(xi, xf)
            yi, yf = _next_octave(yi, yf)
            zi, zf = _next_octave(zi, zf)

        out = np.clip(out, 0.0, 1.0)
        if out.ndim == 0:
            return float(out)
        return out


def _next_octave(vi: np.ndarray, vf: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    vf = vf * 2.0
    carry = vf >= 1.0
    vi = ((vi << 1) + carry) & TABLE_MASK
    vf = vf - carry
    return vi, vf
