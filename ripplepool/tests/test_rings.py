"""Tests for swim ring composition and layout."""
import itertools
import logging
import math

import pytest
import numpy as np

from ripplepool.core.errors import InvalidConfiguration
from ripplepool.core.noise import NoiseField, NoiseParams
from ripplepool.core.rings import (
    DEFAULT_PALETTE,
    ConcentricCircles,
    DotRing,
    GradientRing,
    LayoutParams,
    Ring,
    RingParams,
    build_rings,
    place_rings,
)
from ripplepool.utils.canvas import create_surface
from ripplepool.utils.image_ops import gradient_color

A, B, C = (255, 0, 0), (0, 255, 0), (0, 0, 255)


class TestGradient:
    def test_endpoints_and_midpoint(self):
        ring = GradientRing(40, 120, 80, [A, B, C])
        assert ring.color_at(0.0) == (255, 0, 0, 255)
        assert ring.color_at(0.5) == (0, 255, 0, 255)
        assert ring.color_at(1.0) == (0, 0, 255, 255)

    def test_no_seam_at_midpoint(self):
        """Colors just either side of the middle stop agree."""
        eps = 1e-6
        lo = np.array(gradient_color(0.5 - eps, [A, B, C]))
        hi = np.array(gradient_color(0.5 + eps, [A, B, C]))
        assert np.max(np.abs(lo - hi)) <= 1

    def test_quarter_point(self):
        assert gradient_color(0.25, [A, B, C]) == (128, 128, 0, 255)

    def test_needs_three_stops(self):
        with pytest.raises(InvalidConfiguration):
            gradient_color(0.3, [A, B])

    def test_strokes_span_inner_to_outer(self):
        strokes = GradientRing(40, 120, 80, [A, B, C]).strokes()
        assert len(strokes) == 81
        assert strokes[0][0] == pytest.approx(40)
        assert strokes[-1][0] == pytest.approx(120)
        assert strokes[0][1] == (255, 0, 0, 255)
        assert strokes[-1][1] == (0, 0, 255, 255)


class TestConcentricCircles:
    def test_radii_inclusive(self):
        circles = ConcentricCircles(5, 40, 70, (1, 2, 3))
        assert np.allclose(circles.radii(), [40, 47.5, 55, 62.5, 70])

    def test_single_circle(self):
        assert np.allclose(ConcentricCircles(1, 40, 70, (1, 2, 3)).radii(), [40])


class TestDotRing:
    def test_even_angular_spacing(self):
        dots = DotRing(80, 36, (255, 255, 255, 180))
        centers = dots.centers((100.0, 200.0))
        assert centers.shape == (36, 2)
        d = np.hypot(centers[:, 0] - 100, centers[:, 1] - 200)
        assert np.allclose(d, 80)
        angles = np.unwrap(np.arctan2(centers[:, 1] - 200, centers[:, 0] - 100))
        assert np.allclose(np.diff(angles), 2 * math.pi / 36)


class TestRing:
    def make_ring(self, **kw):
        return Ring(400.0, 300.0, DEFAULT_PALETTE, RingParams(**kw), np.random.default_rng(4))

    def test_dot_layers_grow_and_fade(self):
        """Each dot layer is 10 further out, 6 denser and 20 more transparent."""
        ring = self.make_ring()
        assert [d.radius for d in ring.dots] == [80, 90, 100, 110]
        assert [d.count for d in ring.dots] == [36, 42, 48, 54]
        assert [d.color[3] for d in ring.dots] == [180, 160, 140, 120]

    def test_colors_come_from_palette(self):
        ring = self.make_ring()
        palette = {tuple(c) for c in DEFAULT_PALETTE}
        assert all(tuple(c) in palette for c in ring.gradient.colors)
        assert tuple(ring.circles.color) in palette

    def test_shadow_offset_and_color(self):
        ring = self.make_ring()
        x, y = ring.position
        assert ring.shadow_position == (x + 80, y + 80)
        assert all(tuple(c) == (6, 38, 96, 20) for c in ring.shadow.colors)

    def test_shadow_optional(self):
        assert self.make_ring(shadow=False).shadow is None

    def test_update_bounded(self):
        ring = self.make_ring()
        noise = NoiseField(NoiseParams(seed=9))
        bx, by = ring.get_position()
        for _ in range(300):
            x, y = ring.update(noise)
            assert abs(x - bx) <= 30 + 1e-9
            assert abs(y - by) <= 30 + 1e-9

    def test_set_position_moves_base(self):
        ring = self.make_ring()
        ring.set_position(800.0, 600.0)
        assert ring.get_position() == (800.0, 600.0)

    def test_draw_marks_surface(self):
        ring = self.make_ring()
        surface = create_surface(800, 600, (0, 0, 0))
        ring.draw(surface)
        arr = surface.to_array()
        assert arr[300, 400 + 100].any()
        assert not arr[5, 5].any()


class TestPlacement:
    def test_min_distance_respected(self):
        report = place_rings((1600, 1200), LayoutParams(), np.random.default_rng(0))
        assert len(report.accepted) + report.skipped == 10
        assert len(report.accepted) >= 2
        for a, b in itertools.combinations(report.accepted, 2):
            assert math.hypot(a.x - b.x, a.y - b.y) >= 250

    def test_candidates_inside_padding(self):
        report = place_rings((1600, 1200), LayoutParams(), np.random.default_rng(3))
        for r in report.accepted:
            assert 100 <= r.x <= 1550
            assert 100 <= r.y <= 1150

    def test_small_canvas_fits_one(self, caplog):
        """300x300 only has room for one ring; the other nine are skipped and logged."""
        with caplog.at_level(logging.WARNING, logger="ripplepool.core.rings"):
            report = place_rings((300, 300), LayoutParams(min_distance=250), np.random.default_rng(1))
        assert len(report.accepted) == 1
        assert report.skipped == 9
        assert sum("skipped" in rec.getMessage() for rec in caplog.records) == 9

    def test_canvas_too_small_for_any(self):
        report = place_rings((120, 120), LayoutParams(), np.random.default_rng(1))
        assert report.accepted == []
        assert report.skipped == 10

    def test_zero_count_rejected(self):
        with pytest.raises(InvalidConfiguration):
            place_rings((800, 600), LayoutParams(count=0))

    def test_build_rings_only_accepted(self):
        """Skipped placements never produce ring objects."""
        rings, report = build_rings((300, 300), rng=np.random.default_rng(2))
        assert len(rings) == len(report.accepted) == 1
        assert rings[0].get_position() == (report.accepted[0].x, report.accepted[0].y)
