# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""Tests for widget geometry: mappings, masks, boundary and clamps."""

import itertools
import math

import numpy as np
import pytest

from okpicker.color.codec import hex_to_rgb, oklrch_to_rgb, rgb_to_hex
from okpicker.color.gamut import max_chroma
from okpicker.schema import PickerConfig, PickerMode
from okpicker.widget.geometry import (
    CHROMA_SCALE,
    WidgetLayout,
    angle_from_hue,
    clamp_chroma_to_hue,
    clamp_diamond,
    clamp_inner,
    clamp_oklch,
    clamp_triangle,
    color_from_position,
    diamond_mask,
    hue_from_angle,
    oklch_color,
    oklch_edge_x,
    oklch_mask,
    position_from_color,
    ring_mask,
    sample_boundary,
    triangle_mask,
)

_SIN60 = math.sqrt(3.0) / 2.0
_FAR = [(10000.0, 10000.0), (-10000.0, 5.0), (5.0, -10000.0), (10000.0, -3.0), (-8000.0, -8000.0)]


@pytest.fixture
def layout():
    return WidgetLayout.from_config(PickerConfig())


def _triangle_vertices(layout):
    r = layout.shape_radius
    return (
        (layout.cx + r, layout.cy),
        (layout.cx - r / 2, layout.cy - r * _SIN60),
        (layout.cx - r / 2, layout.cy + r * _SIN60),
    )


def _triangle_distances(layout, x, y):
    dx, dy = x - layout.cx, y - layout.cy
    ri = layout.shape_radius / 2
    return (
        ri - dx * 0.5 - dy * _SIN60,
        ri - dx * 0.5 + dy * _SIN60,
        ri + dx,
    )


def _grid_colors():
    levels = [0, 51, 102, 153, 204, 255]
    return [np.array(c, dtype=np.float64) for c in itertools.product(levels, repeat=3)]


class TestLayout:
    """WidgetLayout.from_config."""

    def test_default_radii(self, layout):
        assert layout.cx == 100.0
        assert layout.cy == 75.0
        assert layout.outer_radius == 72.0
        assert layout.inner_radius == 54.0
        assert layout.shape_radius == 46.0

    def test_oklch_square(self, layout):
        assert layout.side == pytest.approx(46.0 * math.sqrt(2.0))
        assert layout.bottom - layout.top == pytest.approx(layout.side)
        assert layout.cx - layout.left == pytest.approx(layout.side / 2)

    def test_inner_area(self, layout):
        assert layout.in_inner_area(100.0, 75.0)
        assert not layout.in_inner_area(100.0, 75.0 + 60.0)

    def test_hue_handle_on_track(self, layout):
        x, y = layout.hue_handle_point(1.0)
        assert math.hypot(x - layout.cx, y - layout.cy) == pytest.approx(63.0)


class TestHueAngle:
    """Ring angle ↔ hue."""

    def test_up_is_zero(self):
        assert float(hue_from_angle(-math.pi / 2)) == pytest.approx(0.0, abs=1e-9)

    def test_down_is_180(self):
        assert float(hue_from_angle(math.pi / 2)) == pytest.approx(180.0)

    @pytest.mark.parametrize("hue", [0.0, 45.0, 180.0, 300.0, 359.5])
    def test_roundtrip(self, hue):
        assert float(hue_from_angle(angle_from_hue(hue))) == pytest.approx(hue, abs=1e-9)

    def test_range(self):
        hues = hue_from_angle(np.linspace(-10.0, 10.0, 101))
        assert np.all((hues >= 0.0) & (hues < 360.0))


class TestPositionRoundtrip:
    """position_from_color(color_from_position(p)) ≈ p inside each shape."""

    def test_hsv_triangle(self, layout):
        a, b, k = _triangle_vertices(layout)
        hue = 200.0
        for wa, wb in itertools.product(np.linspace(0.0, 1.0, 6), repeat=2):
            if wa + wb > 1.0:
                continue
            wk = 1.0 - wa - wb
            x = wa * a[0] + wb * b[0] + wk * k[0]
            y = wa * a[1] + wb * b[1] + wk * k[1]
            rgb = color_from_position(layout, PickerMode.HSV, x, y, hue)
            h = position_from_color(layout, PickerMode.HSV, rgb)
            assert h.x == pytest.approx(x, abs=1.0)
            assert h.y == pytest.approx(y, abs=1.0)

    def test_hsl_diamond(self, layout):
        r = layout.shape_radius * 0.95
        hue = 75.0
        for u, w in itertools.product(np.linspace(-r, r, 9), repeat=2):
            if abs(u) + abs(w) > r:
                continue
            x, y = layout.cx + u, layout.cy + w
            rgb = color_from_position(layout, PickerMode.HSL, x, y, hue)
            h = position_from_color(layout, PickerMode.HSL, rgb)
            assert h.x == pytest.approx(x, abs=1.0)
            assert h.y == pytest.approx(y, abs=1.0)

    @pytest.mark.parametrize("hue", [29.0, 142.0, 264.0])
    def test_oklch_area(self, layout, hue):
        for lr in np.linspace(0.05, 0.95, 7):
            for frac in (0.0, 0.5, 0.9):
                c = frac * max_chroma(float(lr), hue)
                x = layout.left + layout.side * c / CHROMA_SCALE
                y = layout.bottom - float(lr) * layout.side
                rgb = oklch_color(layout, x, y, hue)
                h = position_from_color(layout, PickerMode.OKLCH, rgb)
                assert h.x == pytest.approx(x, abs=2.0)
                assert h.y == pytest.approx(y, abs=2.0)


class TestColorRoundtrip:
    """color → position → color gives the same hex in every mode."""

    @pytest.mark.parametrize("mode", list(PickerMode))
    def test_grid(self, layout, mode):
        for rgb in _grid_colors():
            h = position_from_color(layout, mode, rgb)
            back = color_from_position(layout, mode, h.x, h.y, hue_from_angle(h.hue_angle))
            assert rgb_to_hex(back) == rgb_to_hex(rgb)

    @pytest.mark.parametrize("k", [0, 64, 128, 255])
    def test_achromatic_on_left_edge_in_oklch(self, layout, k):
        h = position_from_color(layout, PickerMode.OKLCH, [k, k, k])
        assert h.x == pytest.approx(layout.left, abs=1e-3)

    def test_red_sits_on_cusp(self, layout):
        h = position_from_color(layout, PickerMode.OKLCH, hex_to_rgb("#FF0000"))
        boundary = sample_boundary(layout, float(hue_from_angle(h.hue_angle)))
        cx, cy = boundary.cusp_point
        assert h.x == pytest.approx(cx, abs=0.5)
        assert h.y == pytest.approx(cy, abs=0.5)

    def test_white_and_black_corners_in_oklch(self, layout):
        white = position_from_color(layout, PickerMode.OKLCH, [255, 255, 255])
        black = position_from_color(layout, PickerMode.OKLCH, [0, 0, 0])
        assert white.y == pytest.approx(layout.top, abs=1e-3)
        assert black.y == pytest.approx(layout.bottom, abs=1e-9)


class TestMasks:
    """Antialiased shape masks."""

    def test_ring(self, layout):
        assert ring_mask(layout, 100, 75) == 0.0
        assert ring_mask(layout, 100, 75 + 62) == 255.0
        assert ring_mask(layout, 0, 0) == 0.0

    def test_triangle(self, layout):
        assert triangle_mask(layout, 100, 75) == 255.0
        assert triangle_mask(layout, int(layout.cx + layout.shape_radius) + 5, 75) == 0.0

    def test_diamond(self, layout):
        assert diamond_mask(layout, 100, 75) == 255.0
        assert diamond_mask(layout, 100, int(layout.cy + layout.shape_radius) + 3) == 0.0

    def test_masks_are_alpha_range(self, layout):
        ys, xs = np.mgrid[0:layout.height, 0:layout.width]
        for mask in (ring_mask, triangle_mask, diamond_mask):
            alpha = mask(layout, xs, ys)
            assert alpha.min() >= 0.0
            assert alpha.max() <= 255.0

    @pytest.mark.parametrize("hue", [29.0, 142.0, 264.0])
    def test_oklch_follows_max_chroma(self, layout, hue):
        boundary = sample_boundary(layout, hue)
        for y in range(int(layout.top) + 12, int(layout.bottom) - 12, 6):
            lr = (layout.bottom - (y + 0.5)) / layout.side
            limit = max_chroma(lr, hue)
            for x in range(int(layout.left) + 2, layout.width):
                chroma = CHROMA_SCALE * (x + 0.5 - layout.left) / layout.side
                alpha = float(oklch_mask(layout, x, y, boundary))
                if chroma <= 0.8 * limit:
                    assert alpha == 255.0
                elif chroma >= 1.2 * limit + 0.02:
                    assert alpha == 0.0

    def test_oklch_left_of_square_is_empty(self, layout):
        boundary = sample_boundary(layout, 29.0)
        assert float(oklch_mask(layout, int(layout.left) - 3, 75, boundary)) == 0.0


class TestBoundary:
    """sample_boundary."""

    @pytest.fixture
    def boundary(self, layout):
        return sample_boundary(layout, 29.0, segments=50)

    def test_shapes(self, boundary):
        assert boundary.upper.shape == (26, 2)
        assert boundary.lower.shape == (26, 2)

    def test_endpoints(self, layout, boundary):
        np.testing.assert_allclose(boundary.upper[0], [layout.left, layout.top])
        np.testing.assert_allclose(boundary.lower[-1], [layout.left, layout.bottom])
        np.testing.assert_allclose(boundary.upper[-1], boundary.lower[0])

    def test_cusp_point_matches_cusp(self, layout, boundary):
        x, y = boundary.cusp_point
        assert x == pytest.approx(layout.left + layout.side * boundary.cusp.C / CHROMA_SCALE)
        assert y == pytest.approx(layout.bottom - layout.side * boundary.cusp.Lr)

    def test_inside_square_vertically(self, layout, boundary):
        for points in (boundary.upper, boundary.lower):
            assert np.all(points[:, 0] >= layout.left - 1e-9)
            assert np.all(points[:, 1] >= layout.top - 1e-9)
            assert np.all(points[:, 1] <= layout.bottom + 1e-9)

    def test_upper_points_touch_white_side(self, layout, boundary):
        """Above the cusp one channel saturates at 255."""
        for x, y in boundary.upper[1:-1]:
            rgb = oklch_color(layout, x, y, boundary.hue)
            assert rgb.max() == pytest.approx(255.0, abs=1.5)

    def test_lower_points_touch_black_side(self, layout, boundary):
        """Below the cusp one channel is 0."""
        for x, y in boundary.lower[1:-1]:
            rgb = oklch_color(layout, x, y, boundary.hue)
            assert rgb.min() == pytest.approx(0.0, abs=1.5)

    def test_outline_is_closed(self, boundary):
        outline = boundary.outline
        np.testing.assert_array_equal(outline[0], outline[-1])
        assert len(outline) == 2 * 26


class TestClamps:
    """Drag clamps never leave the shape."""

    @pytest.mark.parametrize("point", _FAR)
    def test_triangle_far_lands_on_edge(self, layout, point):
        x, y = clamp_triangle(layout, *point)
        d = _triangle_distances(layout, x, y)
        assert min(d) == pytest.approx(0.0, abs=1e-9)
        assert all(v >= -1e-9 for v in d)

    def test_triangle_inside_unchanged(self, layout):
        assert clamp_triangle(layout, 100.0, 75.0) == (100.0, 75.0)

    @pytest.mark.parametrize("point", _FAR)
    def test_diamond_far_lands_on_edge(self, layout, point):
        x, y = clamp_diamond(layout, *point)
        ri = layout.shape_radius
        assert abs(x - layout.cx) + abs(y - layout.cy) == pytest.approx(ri, abs=1e-9)

    def test_diamond_inside_unchanged(self, layout):
        x, y = clamp_diamond(layout, 110.0, 70.0)
        assert (x, y) == (pytest.approx(110.0), pytest.approx(70.0))

    @pytest.mark.parametrize("hue", [29.0, 142.0, 264.0])
    @pytest.mark.parametrize("point", _FAR)
    def test_oklch_far_lands_on_edge(self, layout, hue, point):
        boundary = sample_boundary(layout, hue)
        x, y = clamp_oklch(layout, *point, boundary)
        assert layout.top <= y <= layout.bottom
        assert x >= layout.left
        if x != layout.left:
            assert x == pytest.approx(oklch_edge_x(layout, y, boundary), abs=1e-9)
        rgb = oklch_color(layout, x, y, hue)
        assert np.all(np.isfinite(rgb))
        assert rgb.min() > -1.0
        assert rgb.max() < 256.0

    def test_oklch_inside_unchanged(self, layout):
        boundary = sample_boundary(layout, 29.0)
        assert clamp_oklch(layout, layout.left + 1.0, 75.0, boundary) == (layout.left + 1.0, 75.0)

    def test_chroma_to_hue_pulls_in(self, layout):
        boundary = sample_boundary(layout, 180.0)
        y = 75.0
        x, y2 = clamp_chroma_to_hue(layout, layout.left + layout.side, y, boundary)
        assert y2 == y
        assert x == pytest.approx(oklch_edge_x(layout, y, boundary))

    def test_clamp_inner_dispatches(self, layout):
        assert clamp_inner(layout, PickerMode.HSV, 1e4, 1e4) == clamp_triangle(layout, 1e4, 1e4)
        assert clamp_inner(layout, PickerMode.HSL, 1e4, 1e4) == clamp_diamond(layout, 1e4, 1e4)

    def test_clamp_inner_oklch_needs_boundary(self, layout):
        with pytest.raises(ValueError):
            clamp_inner(layout, PickerMode.OKLCH, 100.0, 75.0)
