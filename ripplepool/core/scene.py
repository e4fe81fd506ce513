"""Scene orchestration: owns the layers and rings and draws one frame per tick.

Draw order is grid, ripple, rings. A resize discards the grid and ripple
layers and rebuilds them at the new size; rings keep their identity and are
rescaled to the new bounds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Sequence, Tuple

import numpy as np
from PIL import Image

from ripplepool.utils.canvas import Surface, composite, create_surface

from .errors import InvalidConfiguration
from .grid import GridParams, render_grid
from .noise import NoiseField, NoiseParams
from .rings import DEFAULT_PALETTE, LayoutParams, LayoutReport, Repositionable, Ring, RingParams, build_rings
from .ripple import RippleField, RippleParams

logger = logging.getLogger(__name__)


@dataclass
class SceneConfig:
    width: int = 800
    height: int = 600
    seed: int | None = None
    palette: Sequence[Tuple[int, int, int]] = DEFAULT_PALETTE
    noise: NoiseParams = field(default_factory=NoiseParams)
    ripple: RippleParams = field(default_factory=RippleParams)
    grid: GridParams = field(default_factory=GridParams)
    rings: RingParams = field(default_factory=RingParams)
    layout: LayoutParams = field(default_factory=LayoutParams)


def _check_size(width: int, height: int) -> Tuple[int, int]:
    width, height = int(width), int(height)
    if width < 1 or height < 1:
        raise InvalidConfiguration(f"canvas size must be positive, got {width}x{height}")
    return width, height


class SceneDirector:
    def __init__(self, config: SceneConfig | None = None):
        self.config = config or SceneConfig()
        self.width, self.height = _check_size(self.config.width, self.config.height)
        self.rng = np.random.default_rng(self.config.seed)
        noise_params = self.config.noise
        if noise_params.seed is None:
            noise_params = replace(noise_params, seed=self.config.seed)
        self.noise = NoiseField(noise_params)
        self.frame = 0

        self.rings: List[Ring]
        self.layout: LayoutReport
        self.rings, self.layout = build_rings(
            (self.width, self.height), self.config.palette, self.config.layout, self.config.rings, self.rng
        )
        self._commit_layers(*self._build_layers(self.width, self.height))
        logger.info("scene %dx%d with %d rings (%d skipped)", self.width, self.height, len(self.rings), self.layout.skipped)

    def _build_layers(self, width: int, height: int) -> Tuple[Surface, RippleField, Surface]:
        grid = self.config.grid
        grid_layer = create_surface(width, height, grid.background)
        render_grid(grid_layer, self.noise, grid, self.frame * grid.time_scale)
        ripple = RippleField.initialize((width, height), self.config.ripple, self.rng)
        ripple.render()
        canvas = create_surface(width, height)
        return grid_layer, ripple, canvas

    def _commit_layers(self, grid_layer: Surface, ripple: RippleField, canvas: Surface) -> None:
        self.grid_layer = grid_layer
        self.ripple = ripple
        self.canvas = canvas

    def repositionables(self) -> List[Repositionable]:
        return list(self.rings)

    def on_resize(self, width: int, height: int) -> None:
        width, height = _check_size(width, height)
        old_w, old_h = self.width, self.height
        # nothing is touched until the new layers exist
        layers = self._build_layers(width, height)
        for item in self.repositionables():
            x, y = item.get_position()
            item.set_position(x * width / old_w, y * height / old_h)
        self.width, self.height = width, height
        self._commit_layers(*layers)
        logger.info("scene resized %dx%d -> %dx%d", old_w, old_h, width, height)

    def on_tick(self) -> Surface:
        self.frame += 1
        grid = self.config.grid
        if grid.animate:
            render_grid(self.grid_layer, self.noise, grid, self.frame * grid.time_scale)
        if (self.frame - 1) % self.config.ripple.update_every == 0:
            self.ripple.advance(self.noise)
            self.ripple.render()

        self.canvas.blit(self.grid_layer)
        composite(self.canvas, self.ripple.buffer)
        for ring in self.rings:
            ring.update(self.noise)
            ring.draw(self.canvas)
        return self.canvas

    def frame_image(self) -> Image.Image:
        return self.canvas.image.copy()

    def save_frame(self, path) -> None:
        self.frame_image().save(path)
