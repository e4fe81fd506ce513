from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
from PIL import Image

from ripplepool.core.errors import InvalidConfiguration

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]


def clamp_channel(x: np.ndarray | float) -> np.ndarray | float:
    return np.clip(x, 0.0, 255.0)


def with_alpha(color: Sequence[int], alpha: int = 255) -> RGBA:
    if len(color) >= 4:
        return (int(color[0]), int(color[1]), int(color[2]), int(color[3]))
    return (int(color[0]), int(color[1]), int(color[2]), int(alpha))


def lerp_color(c1: Sequence[int], c2: Sequence[int], t: float) -> RGBA:
    a = with_alpha(c1)
    b = with_alpha(c2)
    t = float(np.clip(t, 0.0, 1.0))
    return tuple(int(round(a[i] + (b[i] - a[i]) * t)) for i in range(4))  # type: ignore[return-value]


def gradient_color(t: float, stops: Sequence[Sequence[int]]) -> RGBA:
    """Three-stop gradient: stops[0] -> stops[1] on [0, .5), stops[1] -> stops[2] on [.5, 1]."""
    if len(stops) != 3:
        raise InvalidConfiguration(f"gradient needs exactly 3 color stops, got {len(stops)}")
    if t < 0.5:
        return lerp_color(stops[0], stops[1], t * 2)
    return lerp_color(stops[1], stops[2], (t - 0.5) * 2)


def compose(base_rgb: np.ndarray, overlay_rgba: np.ndarray, alpha: float = 1.0) -> np.ndarray:
    """Alpha-blend a uint8 RGBA overlay onto a uint8 RGB base of the same size."""
    base = base_rgb.astype(np.float32) / 255.0
    ov = overlay_rgba.astype(np.float32) / 255.0
    a = np.clip(ov[..., 3:4] * float(alpha), 0.0, 1.0)
    rgb = ov[..., 0:3]
    out = base * (1 - a) + rgb * a
    out = np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8)
    return out


def to_image(buffer: np.ndarray) -> Image.Image:
    # (h, w, 4) uint8 maps to RGBA, (h, w, 3) to RGB
    return Image.fromarray(np.ascontiguousarray(buffer, dtype=np.uint8))
