# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""Tests for the OKLab gamut solver."""

import numpy as np
import pytest

from okpicker.color.codec import hex_to_rgb, oklrch_to_rgb, rgb_to_oklrch
from okpicker.color.gamut import (
    find_cusp,
    hue_direction,
    max_chroma,
    max_saturation,
)

# Fully saturated sRGB colours sit exactly on their hue's cusp
_CUSP_COLORS = ["#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#00FFFF", "#FF00FF"]

_HUES = list(range(0, 360, 15))


def _out_of_gamut(rgb, tol=0.5):
    return bool(rgb.min() < -tol or rgb.max() > 255.0 + tol)


class TestHueDirection:
    """Unit hue vectors."""

    @pytest.mark.parametrize("hue", [0.0, 90.0, 200.0, 359.0])
    def test_unit_length(self, hue):
        a, b = hue_direction(hue)
        assert a * a + b * b == pytest.approx(1.0)

    def test_zero_hue_points_along_a(self):
        assert hue_direction(0.0) == pytest.approx((1.0, 0.0))


class TestCusp:
    """find_cusp / max_saturation."""

    @pytest.mark.parametrize("hex_color", _CUSP_COLORS)
    def test_saturated_colors_are_cusps(self, hex_color):
        lr, c, h = rgb_to_oklrch(hex_to_rgb(hex_color))
        cusp = find_cusp(*hue_direction(float(h)))
        assert cusp.Lr == pytest.approx(float(lr), abs=2e-3)
        assert cusp.C == pytest.approx(float(c), abs=2e-3)

    def test_red_cusp_values(self):
        cusp = find_cusp(*hue_direction(29.2339))
        assert cusp.L == pytest.approx(0.628, abs=2e-3)
        assert cusp.C == pytest.approx(0.2577, abs=2e-3)

    @pytest.mark.parametrize("hue", _HUES)
    def test_cusp_is_in_unit_range(self, hue):
        cusp = find_cusp(*hue_direction(hue))
        assert 0.0 < cusp.L < 1.0
        assert cusp.C > 0.0

    @pytest.mark.parametrize("hue", _HUES)
    def test_saturation_positive(self, hue):
        assert max_saturation(*hue_direction(hue)) > 0.0


class TestMaxChroma:
    """max_chroma / gamut_intersection."""

    @pytest.mark.parametrize("hue", _HUES)
    def test_black_has_no_chroma(self, hue):
        assert max_chroma(0.0, hue) == 0.0

    @pytest.mark.parametrize("hue", _HUES)
    def test_white_has_no_chroma(self, hue):
        assert max_chroma(1.0, hue) == pytest.approx(0.0, abs=1e-9)

    @pytest.mark.parametrize("hue", _HUES)
    def test_never_negative(self, hue):
        for lr in np.linspace(0.0, 1.0, 21):
            assert max_chroma(float(lr), hue) >= 0.0

    @pytest.mark.parametrize("hue", [10.0, 29.2339, 110.0, 142.5, 200.0, 264.0, 330.0])
    def test_matches_cusp_at_cusp_lightness(self, hue):
        cusp = find_cusp(*hue_direction(hue))
        assert max_chroma(cusp.Lr, hue, cusp) == pytest.approx(cusp.C, abs=1e-3)

    @pytest.mark.parametrize("hue", [10.0, 90.0, 142.5, 200.0, 264.0, 330.0])
    @pytest.mark.parametrize("lr", [0.2, 0.4, 0.6, 0.8, 0.95])
    def test_is_the_gamut_edge(self, hue, lr):
        """Just inside the returned chroma is in gamut, clearly beyond is not."""
        chroma = max_chroma(lr, hue)
        assert not _out_of_gamut(oklrch_to_rgb(lr, chroma * 0.98, hue), tol=1.0)
        assert _out_of_gamut(oklrch_to_rgb(lr, chroma * 1.1 + 0.005, hue))

    def test_precomputed_cusp_matches(self):
        cusp = find_cusp(*hue_direction(200.0))
        assert max_chroma(0.5, 200.0, cusp) == max_chroma(0.5, 200.0)
