"""Tests for the Worley ripple rasterizer."""
import pytest
import numpy as np

from ripplepool.core.errors import InvalidConfiguration
from ripplepool.core.motion import FeaturePoint
from ripplepool.core.noise import NoiseField, NoiseParams
from ripplepool.core.ripple import RippleField, RippleParams, wave_color
from ripplepool.utils.canvas import create_offscreen_buffer


def make_field(count=4, block=10, size=(200, 200), seed=0):
    params = RippleParams(point_count=count, background=(44, 169, 225), block_size=block, alpha=200)
    return RippleField.initialize(size, params, np.random.default_rng(seed))


class TestInitialize:
    def test_zero_points_rejected(self):
        """A field without feature points is invalid."""
        with pytest.raises(InvalidConfiguration):
            make_field(count=0)

    def test_zero_block_rejected(self):
        with pytest.raises(InvalidConfiguration):
            make_field(block=0)

    def test_alpha_out_of_range_rejected(self):
        with pytest.raises(InvalidConfiguration):
            RippleField.initialize((50, 50), RippleParams(alpha=300))

    def test_points_scattered_in_bounds(self):
        field = make_field(count=50, size=(320, 180))
        pos = field.positions()
        assert pos.shape == (50, 2)
        assert np.all((pos[:, 0] >= 0) & (pos[:, 0] < 320))
        assert np.all((pos[:, 1] >= 0) & (pos[:, 1] < 180))

    def test_buffer_matches_bounds(self):
        field = make_field(size=(64, 48))
        assert field.buffer.shape == (48, 64, 4)
        assert field.buffer.dtype == np.uint8


class TestRender:
    def test_pool_scenario(self):
        """200x200, 4 points, block 10: alpha is uniform and red never drops below the pool color."""
        field = make_field()
        buf = field.render()
        assert np.all(buf[..., 3] == 200)
        assert np.all(buf[..., 0] >= 44)
        assert np.all(buf[..., 1] >= 169)
        assert np.all(buf[..., 2] >= 225)

    def test_render_is_idempotent(self):
        """Rendering twice without advancing yields identical bytes."""
        field = make_field(count=12, block=3)
        first = field.render().copy()
        second = field.render()
        assert first.tobytes() == second.tobytes()

    def test_blocks_are_uniform(self):
        """Every pixel of a block carries the color of its origin."""
        buf = make_field(count=6, block=10).render()
        for by in range(0, 200, 10):
            for bx in range(0, 200, 10):
                block = buf[by:by + 10, bx:bx + 10]
                assert np.all(block == buf[by, bx])

    def test_partial_blocks_clamped_to_buffer(self):
        """Buffers not divisible by the block size are filled to the edge."""
        field = make_field(count=5, block=10, size=(205, 203))
        buf = field.render()
        assert buf.shape == (203, 205, 4)
        assert np.all(buf[..., 3] == 200)
        assert np.all(buf[200:, 200:] == buf[200, 200])

    def test_render_into_external_buffer(self):
        field = make_field(count=3, block=4, size=(40, 40))
        target = create_offscreen_buffer(30, 20)
        field.render(target)
        assert np.all(target[..., 3] == 200)

    def test_point_on_block_origin_gives_background(self):
        """Zero distance leaves the pool color unchanged."""
        params = RippleParams(point_count=1, background=(44, 169, 225), block_size=5, alpha=200)
        field = RippleField([FeaturePoint(0.0, 0.0, 1.0, 2.0)], 20, 20, params)
        buf = field.render()
        assert tuple(buf[0, 0]) == (44, 169, 225, 200)
        # further away is lighter
        assert buf[19, 19, 0] > buf[0, 0, 0]

    def test_color_follows_nearest_distance(self):
        """Block color matches the distance curve for the nearest point."""
        params = RippleParams(point_count=2, background=(10, 20, 30), block_size=1, alpha=255)
        points = [FeaturePoint(0.0, 0.0, 0.0, 0.0), FeaturePoint(100.0, 0.0, 0.0, 0.0)]
        field = RippleField(points, 120, 10, params)
        buf = field.render()
        # (60, 0) is 40 away from the second point
        assert buf[0, 60, 0] == int(np.rint(10 + (40 / 14.5) ** 2.5))
        assert buf[0, 60, 1] == int(np.rint(20 + (40 / 21.0) ** 2.5))
        assert buf[0, 60, 2] == 31

    def test_channel_clamped(self):
        assert wave_color(np.array([10_000.0]), 250, 14.5, 2.5)[0] == 255.0


class TestAdvance:
    def test_advance_keeps_points_near_base(self):
        field = make_field(count=30, block=5)
        noise = NoiseField(NoiseParams(seed=2))
        for _ in range(50):
            field.advance(noise)
        for p in field.points:
            assert abs(p.x - p.base_x) <= field.params.motion.amplitude + 1e-9
            assert abs(p.y - p.base_y) <= field.params.motion.amplitude + 1e-9

    def test_advance_uses_ripple_step(self):
        """Ripple points step their phases by the ripple motion step."""
        field = make_field(count=3)
        before = [p.phase_x for p in field.points]
        field.advance(NoiseField(NoiseParams(seed=2)))
        after = [p.phase_x for p in field.points]
        assert np.allclose(np.subtract(after, before), 0.1)
