"""Drawing surface used by the generators, backed by Pillow.

Pixel buffers are plain ``(height, width, 4)`` uint8 numpy arrays; draw
surfaces wrap an RGB ``PIL.Image`` whose ImageDraw blends RGBA colors.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

from .image_ops import compose, to_image, with_alpha

Point = Tuple[float, float]


class Surface:
    def __init__(self, width: int, height: int, background: Sequence[int] = (0, 0, 0)):
        self.image = Image.new("RGB", (int(width), int(height)), tuple(int(c) for c in background[:3]))
        self.draw = ImageDraw.Draw(self.image, "RGBA")

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def clear(self, background: Sequence[int]) -> None:
        self.image.paste(tuple(int(c) for c in background[:3]), (0, 0, self.width, self.height))

    def blit(self, other: "Surface", x: int = 0, y: int = 0) -> None:
        self.image.paste(other.image, (int(x), int(y)))

    def to_array(self) -> np.ndarray:
        return np.array(self.image, dtype=np.uint8)


def create_offscreen_buffer(width: int, height: int) -> np.ndarray:
    return np.zeros((int(height), int(width), 4), dtype=np.uint8)


def create_surface(width: int, height: int, background: Sequence[int] = (0, 0, 0)) -> Surface:
    return Surface(width, height, background)


def draw_polygon(
    surface: Surface,
    vertices: Sequence[Point],
    stroke: Sequence[int] | None = None,
    fill: Sequence[int] | None = None,
    width: int = 1,
) -> None:
    pts = [(float(x), float(y)) for x, y in vertices]
    if len(pts) < 2:
        return
    surface.draw.polygon(
        pts,
        fill=with_alpha(fill) if fill is not None else None,
        outline=with_alpha(stroke) if stroke is not None else None,
        width=max(1, int(width)),
    )


def draw_ellipse(
    surface: Surface,
    center: Point,
    radius_x: float,
    radius_y: float,
    stroke: Sequence[int] | None = None,
    fill: Sequence[int] | None = None,
    width: int = 1,
) -> None:
    cx, cy = center
    rx = abs(float(radius_x))
    ry = abs(float(radius_y))
    surface.draw.ellipse(
        [cx - rx, cy - ry, cx + rx, cy + ry],
        fill=with_alpha(fill) if fill is not None else None,
        outline=with_alpha(stroke) if stroke is not None else None,
        width=max(1, int(width)),
    )


def write_pixel_blocks(buffer: np.ndarray, blocks: np.ndarray, block_size: int) -> None:
    """Fill ``buffer`` with a grid of square blocks, one per entry of ``blocks``.

    ``blocks`` is ``(rows, cols, 4)``; block (r, c) covers pixels starting at
    ``(c * block_size, r * block_size)``. Blocks on the right and bottom edges
    are cut to the buffer.
    """
    bh, bw = buffer.shape[:2]
    bs = int(block_size)
    expanded = np.repeat(np.repeat(blocks, bs, axis=0), bs, axis=1)[:bh, :bw]
    buffer[: expanded.shape[0], : expanded.shape[1]] = expanded


def composite(surface: Surface, buffer: np.ndarray, x: int = 0, y: int = 0) -> None:
    """Alpha-blend a pixel buffer onto the surface with its top-left at (x, y)."""
    bh, bw = buffer.shape[:2]
    x0, y0 = max(0, int(x)), max(0, int(y))
    x1, y1 = min(surface.width, int(x) + bw), min(surface.height, int(y) + bh)
    if x1 <= x0 or y1 <= y0:
        return
    base = np.array(surface.image.crop((x0, y0, x1, y1)), dtype=np.uint8)
    blended = compose(base, buffer[y0 - int(y) : y1 - int(y), x0 - int(x) : x1 - int(x)])
    surface.image.paste(to_image(blended), (x0, y0))


def uniform_random(rng: np.random.Generator, low: float, high: float) -> float:
    return float(rng.uniform(low, high))


def pick_random(rng: np.random.Generator, items: Sequence):
    return items[int(rng.integers(len(items)))]
