# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
sRGB gamut boundary in OKLab.

For a fixed hue the sRGB gamut is a wedge in the (L, C) plane: straight
lines from black and white meet at the cusp, the point of maximum chroma.
Above the cusp the true edge is slightly curved, so intersections there
are refined with one step of Halley's method per RGB channel.

References:
- https://bottosson.github.io/posts/gamutclipping/

All functions take the unit hue direction (a, b) = (cos h, sin h) and raw
OKLab lightness L. They are total over unit hue vectors and never raise.
Each Halley refinement is a single step with no convergence check; the
result is accurate to well under a pixel at widget scale. Batch colour
management would need an iteration loop with a tolerance instead.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from okpicker.color.codec import LMS_TO_RGB, OKLAB_TO_LMS, l_to_lr, lr_to_l
from okpicker.schema import Cusp


# Linear (a, b) → cube-rooted LMS coefficients; column 0 of OKLAB_TO_LMS is L
_AB_TO_LMS = OKLAB_TO_LMS[:, 1:]


def hue_direction(hue: float) -> tuple[float, float]:
    """Unit OKLab direction (a, b) for a hue in degrees."""
    h = np.radians(hue)
    return float(np.cos(h)), float(np.sin(h))


def _lms_coefficients(a: float, b: float) -> np.ndarray:
    """Rate of change of cube-rooted (l, m, s) per unit chroma along (a, b)."""
    return _AB_TO_LMS @ np.array([a, b], dtype=np.float64)


# =============================================================================
# Maximum saturation
# =============================================================================

# Polynomial fit of S_max per clipping channel: (k0, k1, k2, k3, k4)
_SATURATION_FIT = np.array([
    [1.19086277, 1.76576728, 0.59662641, 0.75515197, 0.56771245],   # red
    [0.73956515, -0.45954404, 0.08285427, 0.12541070, 0.14503204],  # green
    [1.35733652, -0.00915799, -1.15130210, -0.50559606, 0.00692167],  # blue
], dtype=np.float64)


def _clipping_channel(a: float, b: float) -> int:
    """Index of the RGB channel that clips first along hue (a, b)."""
    if -1.88170328 * a - 0.80936493 * b > 1.0:
        return 0
    if 1.81444104 * a - 1.19445276 * b > 1.0:
        return 1
    return 2


def max_saturation(a: float, b: float) -> float:
    """
    Largest S such that (L=1, S·a, S·b) stays inside the unit RGB cube.

    Saturation here is C / L. A polynomial estimate for the clipping
    channel is refined by one Halley step toward that channel reaching zero.

    Args:
        a, b: Unit hue direction

    Returns:
        Maximum saturation S
    """
    channel = _clipping_channel(a, b)
    k0, k1, k2, k3, k4 = _SATURATION_FIT[channel]
    w = LMS_TO_RGB[channel]

    sat = k0 + k1 * a + k2 * b + k3 * a * a + k4 * a * b

    k = _lms_coefficients(a, b)
    lms_ = 1.0 + sat * k
    lms = lms_ ** 3
    d1 = 3.0 * k * lms_ ** 2
    d2 = 6.0 * k * k * lms_

    f = w @ lms
    f1 = w @ d1
    f2 = w @ d2

    return float(sat - f * f1 / (f1 * f1 - 0.5 * f * f2))


# =============================================================================
# Cusp
# =============================================================================


def find_cusp(a: float, b: float) -> Cusp:
    """
    Find the cusp (maximum chroma point) for a hue direction.

    Args:
        a, b: Unit hue direction

    Returns:
        Cusp with raw L, C and toe-mapped Lr
    """
    s_cusp = max_saturation(a, b)

    lms_ = OKLAB_TO_LMS @ np.array([1.0, s_cusp * a, s_cusp * b])
    rgb_at_max = LMS_TO_RGB @ lms_ ** 3
    l_cusp = float(np.cbrt(1.0 / np.max(rgb_at_max)))
    return Cusp(L=l_cusp, C=l_cusp * s_cusp, Lr=float(l_to_lr(l_cusp)))


# =============================================================================
# Ray / gamut intersection
# =============================================================================


def gamut_intersection(
    a: float,
    b: float,
    cusp: Cusp,
    l1: float,
    c1: float,
    l0: float,
) -> float:
    """
    Find where a ray leaves the gamut.

    The ray is L = l0·(1 - t) + l1·t, C = c1·t, starting on the grey axis.

    Args:
        a, b: Unit hue direction
        cusp: Cusp for the same hue
        l1, c1: Target point of the ray
        l0: Starting lightness on the grey axis

    Returns:
        Parameter t at the gamut edge
    """
    if (l1 - l0) * cusp.C - (cusp.L - l0) * c1 <= 0.0:
        # Below the cusp line: the edge toward black is straight
        return float(cusp.C * l0 / (c1 * cusp.L + cusp.C * (l0 - l1)))

    # Above: intersect the straight white-to-cusp line first
    t = cusp.C * (l0 - 1.0) / (c1 * (cusp.L - 1.0) + cusp.C * (l0 - l1))

    k = _lms_coefficients(a, b)
    dl = l1 - l0
    lms_dt = dl + c1 * k

    lum = l0 * (1.0 - t) + t * l1
    chroma = t * c1
    lms_ = lum + chroma * k

    lms = lms_ ** 3
    d1 = 3.0 * lms_dt * lms_ ** 2
    d2 = 6.0 * lms_dt ** 2 * lms_

    f = LMS_TO_RGB @ lms - 1.0
    f1 = LMS_TO_RGB @ d1
    f2 = LMS_TO_RGB @ d2

    # One Halley step per channel; keep the nearest valid crossing
    with np.errstate(divide="ignore", invalid="ignore"):
        u = f1 / (f1 * f1 - 0.5 * f * f2)
        step = np.where(u >= 0.0, -f * u, np.inf)
    finite = step[np.isfinite(step)]
    if finite.size:
        t += float(finite.min())
    return float(t)


def max_chroma(lr: float, hue: float, cusp: Optional[Cusp] = None) -> float:
    """
    Largest in-gamut chroma at a given Lr and hue.

    Args:
        lr: Toe-mapped lightness [0, 1]
        hue: Hue in degrees
        cusp: Cusp for ``hue``; computed when omitted

    Returns:
        Chroma >= 0; 0 at black (lr=0) and white (lr=1)
    """
    a, b = hue_direction(hue)
    if cusp is None:
        cusp = find_cusp(a, b)
    L = float(lr_to_l(lr))
    # Horizontal ray: constant lightness, unit chroma per t
    return max(0.0, gamut_intersection(a, b, cusp, L, 1.0, L))
