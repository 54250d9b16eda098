# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Widget geometry: pointer position ↔ colour.

The widget is a hue ring around an inner shape whose meaning depends on
the picker mode:

- HSV: equilateral triangle, apex pointing right (full colour), value
  running from the bottom-left corner (black) to the opposite edge
- HSL: square rotated 45°, lightness top (white) to bottom (black)
- OKLCH: region bounded by the achromatic left edge and the sRGB gamut
  edge, chroma to the right, Lr upwards

Every function takes all the state it needs as arguments and works on
scalars or numpy pixel grids alike, so masks and colours can be evaluated
for a whole pixel buffer at once.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from okpicker.color.codec import (
    hsl_to_rgb,
    hsv_to_rgb,
    l_to_lr,
    lr_to_l,
    oklrch_to_rgb,
    rgb_to_hsl,
    rgb_to_hsv,
    rgb_to_oklrch,
)
from okpicker.color.gamut import (
    find_cusp,
    gamut_intersection,
    hue_direction,
    max_chroma,
)
from okpicker.schema import BoundaryPolyline, Handles, PickerConfig, PickerMode

_COS60 = 0.5
_SIN60 = math.sqrt(3.0) / 2.0
_COS45 = math.sqrt(0.5)

# Default chroma at the right edge of the OKLCH square
CHROMA_SCALE = 0.27


# =============================================================================
# Layout
# =============================================================================


@dataclass(frozen=True, slots=True)
class WidgetLayout:
    """
    Pixel geometry of one widget.

    Attributes:
        width, height: Widget size in pixels
        cx, cy: Widget centre
        outer_radius: Outer edge of the hue ring
        inner_radius: Inner edge of the hue ring; pointer-down closer than
           this drags the inner handle
        shape_radius: Circumradius of the inner shape
    """
    width: int
    height: int
    cx: float
    cy: float
    outer_radius: float
    inner_radius: float
    shape_radius: float

    @classmethod
    def from_config(cls, config: PickerConfig) -> WidgetLayout:
        outer = min(config.width, config.height) / 2 - config.ring_padding
        inner = outer * config.ring_ratio
        return cls(
            width=config.width,
            height=config.height,
            cx=config.width / 2,
            cy=config.height / 2,
            outer_radius=outer,
            inner_radius=inner,
            shape_radius=inner - config.shape_margin,
        )

    @property
    def side(self) -> float:
        """Side of the square inscribed in the shape radius (OKLCH area)."""
        return self.shape_radius * _COS45 * 2.0

    @property
    def left(self) -> float:
        """x of the achromatic edge in OKLCH mode."""
        return self.cx - self.side / 2

    @property
    def top(self) -> float:
        return self.cy - self.side / 2

    @property
    def bottom(self) -> float:
        return self.cy + self.side / 2

    @property
    def ring_radius(self) -> float:
        """Radius of the hue handle's track."""
        return (self.outer_radius + self.inner_radius) / 2

    def hue_handle_point(self, hue_angle: float) -> tuple[float, float]:
        return (
            self.cx + math.cos(hue_angle) * self.ring_radius,
            self.cy + math.sin(hue_angle) * self.ring_radius,
        )

    def in_inner_area(self, x: float, y: float) -> bool:
        """True if a pointer-down here grabs the inner handle."""
        return math.hypot(x - self.cx, y - self.cy) < self.inner_radius


# =============================================================================
# Hue angle
# =============================================================================


def hue_from_angle(angle: ArrayLike) -> NDArray[np.float64]:
    """Hue in degrees [0, 360) for a ring angle; straight up is 0°."""
    angle = np.asarray(angle, dtype=np.float64)
    return np.mod(angle / (2.0 * math.pi) + 1.25, 1.0) * 360.0


def angle_from_hue(hue: float) -> float:
    """Ring angle in radians for a hue in degrees."""
    return (hue / 360.0 - 0.25) * 2.0 * math.pi


# =============================================================================
# Forward mapping: position → colour
# =============================================================================


def hsv_color(
    layout: WidgetLayout, x: ArrayLike, y: ArrayLike, hue: ArrayLike
) -> NDArray[np.float64]:
    """RGB for a point of the HSV triangle."""
    dx = np.asarray(x, dtype=np.float64) - layout.cx
    dy = np.asarray(y, dtype=np.float64) - layout.cy
    r = layout.shape_radius

    # Value grows from the black corner toward the opposite edge
    proj = dx * _COS60 - dy * _SIN60
    v = (proj + r) / (1.5 * r)
    # Saturation runs across the triangle, whose width shrinks with value
    span = v * 2.0 * r * _SIN60
    perp = dx * _SIN60 + dy * _COS60
    s = np.where(span > 0.0, (perp + span / 2) / np.where(span > 0.0, span, 1.0), 0.0)
    return hsv_to_rgb(hue, s, v)


def hsl_color(
    layout: WidgetLayout, x: ArrayLike, y: ArrayLike, hue: ArrayLike
) -> NDArray[np.float64]:
    """RGB for a point of the HSL diamond."""
    dx = np.asarray(x, dtype=np.float64) - layout.cx
    dy = np.asarray(y, dtype=np.float64) - layout.cy
    r = layout.shape_radius

    span = 2.0 * (r - np.abs(dy))
    s = np.where(span > 0.0, (dx + span / 2) / np.where(span > 0.0, span, 1.0), 0.0)
    l = 1.0 - (dy + r) / r / 2.0
    return hsl_to_rgb(hue, s, l)


def oklch_color(
    layout: WidgetLayout,
    x: ArrayLike,
    y: ArrayLike,
    hue: ArrayLike,
    chroma_scale: float = CHROMA_SCALE,
) -> NDArray[np.float64]:
    """RGB for a point of the OKLCH area; may be out of gamut."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    lr = (layout.bottom - y) / layout.side
    c = chroma_scale * (x - layout.left) / layout.side
    return oklrch_to_rgb(lr, c, hue)


def color_from_position(
    layout: WidgetLayout,
    mode: PickerMode,
    x: ArrayLike,
    y: ArrayLike,
    hue: ArrayLike,
    chroma_scale: float = CHROMA_SCALE,
) -> NDArray[np.float64]:
    """
    Forward mapping for any mode.

    Args:
        layout: Widget geometry
        mode: Picker mode
        x, y: Inner position(s) in widget pixels
        hue: Hue in degrees
        chroma_scale: OKLCH chroma at the right edge of the square

    Returns:
        RGB array of shape (..., 3), unclipped
    """
    if mode is PickerMode.HSV:
        return hsv_color(layout, x, y, hue)
    if mode is PickerMode.HSL:
        return hsl_color(layout, x, y, hue)
    return oklch_color(layout, x, y, hue, chroma_scale)


# =============================================================================
# Inverse mapping: colour → position
# =============================================================================


def position_from_color(
    layout: WidgetLayout,
    mode: PickerMode,
    rgb: ArrayLike,
    chroma_scale: float = CHROMA_SCALE,
) -> Handles:
    """
    Place both handles for a colour.

    Exact inverse of color_from_position for colours inside the shape.

    Args:
        layout: Widget geometry
        mode: Picker mode
        rgb: Array (3,) with channels in [0, 255]
        chroma_scale: OKLCH chroma at the right edge of the square

    Returns:
        Handles for the hue ring and the inner shape
    """
    r = layout.shape_radius

    if mode is PickerMode.HSV:
        h, s, v = (float(c) for c in rgb_to_hsv(rgb))
        proj = -r + v * 1.5 * r
        span = v * 2.0 * r * _SIN60
        perp = s * span - span / 2
        x = layout.cx + proj * _COS60 + perp * _SIN60
        y = layout.cy - proj * _SIN60 + perp * _COS60
    elif mode is PickerMode.HSL:
        h, s, l = (float(c) for c in rgb_to_hsl(rgb))
        span = 2.0 * r * (1.0 - abs(2.0 * l - 1.0))
        x = layout.cx - span / 2 + s * span
        y = layout.cy + r - l * r * 2.0
    else:
        lr, c, h = (float(v) for v in rgb_to_oklrch(rgb))
        x = layout.left + c * layout.side / chroma_scale
        y = layout.bottom - lr * layout.side

    return Handles(hue_angle=angle_from_hue(h), x=x, y=y)


# =============================================================================
# Masks (alpha 0-255, sampled at pixel centres)
# =============================================================================


def _coverage(distance: NDArray[np.float64]) -> NDArray[np.float64]:
    return np.clip(distance, 0.0, 1.0)


def ring_mask(layout: WidgetLayout, x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
    """Alpha of the hue ring annulus."""
    dx = np.asarray(x, dtype=np.float64) + 0.5 - layout.cx
    dy = np.asarray(y, dtype=np.float64) + 0.5 - layout.cy
    d = np.sqrt(dx * dx + dy * dy)
    return 255.0 * _coverage(layout.outer_radius - d) * _coverage(d - layout.inner_radius)


def triangle_mask(layout: WidgetLayout, x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
    """Alpha of the HSV triangle (product of three half-planes)."""
    dx = np.asarray(x, dtype=np.float64) + 0.5 - layout.cx
    dy = np.asarray(y, dtype=np.float64) + 0.5 - layout.cy
    ri = layout.shape_radius * _COS60
    return 255.0 * (
        _coverage(ri - dx * _COS60 - dy * _SIN60)
        * _coverage(ri - dx * _COS60 + dy * _SIN60)
        * _coverage(ri + dx)
    )


def diamond_mask(layout: WidgetLayout, x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
    """Alpha of the HSL diamond (product of four half-planes)."""
    u = (np.asarray(x, dtype=np.float64) + 0.5 - layout.cx) * _COS45
    w = (np.asarray(y, dtype=np.float64) + 0.5 - layout.cy) * _COS45
    ri = layout.shape_radius * _COS45
    return 255.0 * (
        _coverage(ri - u + w)
        * _coverage(ri - u - w)
        * _coverage(ri + u + w)
        * _coverage(ri + u - w)
    )


def _boundary_vertices(boundary: BoundaryPolyline) -> NDArray[np.float64]:
    """Vertices 0..segments of the gamut edge, one per sampling angle."""
    return np.vstack([boundary.upper, boundary.lower[1:]])


def oklch_mask(
    layout: WidgetLayout,
    x: ArrayLike,
    y: ArrayLike,
    boundary: BoundaryPolyline,
    chroma_scale: float = CHROMA_SCALE,
) -> NDArray[np.float64]:
    """
    Alpha of the OKLCH area.

    The boundary segment for each pixel is chosen by the pixel's angle
    around (C=0, L=cusp.L), the point the boundary rays were cast from.
    """
    px = np.asarray(x, dtype=np.float64) + 0.5
    py = np.asarray(y, dtype=np.float64) + 0.5
    side = layout.side
    n = boundary.segments

    chroma = chroma_scale * (px - layout.left) / side
    L = lr_to_l(np.clip((layout.bottom - py) / side, 0.0, 1.0))
    angle = np.arctan2(chroma, L - boundary.cusp.L)
    index = np.clip(np.floor(angle / (math.pi / n)), 0, n - 1).astype(np.int64)

    verts = _boundary_vertices(boundary)
    p0 = verts[index]
    edge = verts[index + 1] - p0
    length = np.hypot(edge[..., 0], edge[..., 1])
    cross = edge[..., 0] * (py - p0[..., 1]) - edge[..., 1] * (px - p0[..., 0])
    distance = cross / np.where(length > 0.0, length, 1.0)

    return 255.0 * _coverage(0.5 + distance) * _coverage(px - layout.left + 0.5)


# =============================================================================
# OKLCH boundary sampling
# =============================================================================


def _oklch_point(
    layout: WidgetLayout, C: float, L: float, chroma_scale: float
) -> tuple[float, float]:
    """Widget pixel for raw (C, L)."""
    return (
        layout.left + layout.side * C / chroma_scale,
        layout.bottom - layout.side * float(l_to_lr(L)),
    )


def sample_boundary(
    layout: WidgetLayout,
    hue: float,
    chroma_scale: float = CHROMA_SCALE,
    segments: int = 100,
) -> BoundaryPolyline:
    """
    Sample the gamut edge for one hue.

    Rays leave (C=0, L=cusp.L) at angles k·π/segments from straight up;
    each is intersected with the gamut. The first half ends at the cusp,
    the second half continues from it down to black. The cusp is computed
    here too, so boundary and cusp always share a hue.

    Args:
        layout: Widget geometry
        hue: Hue in degrees
        chroma_scale: OKLCH chroma at the right edge of the square
        segments: Angular steps over 0..π (even)

    Returns:
        BoundaryPolyline carrying its cusp
    """
    a, b = hue_direction(hue)
    cusp = find_cusp(a, b)
    half = segments // 2
    step = math.pi / segments
    cusp_px = _oklch_point(layout, cusp.C, cusp.L, chroma_scale)

    upper = [(layout.left, layout.top)]
    for k in range(1, half):
        c1 = (1.0 - cusp.L) * math.tan(k * step)
        t = gamut_intersection(a, b, cusp, 1.0, c1, cusp.L)
        upper.append(
            _oklch_point(layout, c1 * t, cusp.L + t * (1.0 - cusp.L), chroma_scale)
        )
    upper.append(cusp_px)

    lower = [cusp_px]
    for k in range(half + 1, segments):
        c1 = -cusp.L * math.tan(k * step)
        t = gamut_intersection(a, b, cusp, 0.0, c1, cusp.L)
        lower.append(_oklch_point(layout, c1 * t, cusp.L * (1.0 - t), chroma_scale))
    lower.append((layout.left, layout.bottom))

    return BoundaryPolyline(
        hue=float(hue),
        cusp=cusp,
        upper=np.array(upper, dtype=np.float64),
        lower=np.array(lower, dtype=np.float64),
        segments=segments,
    )


# =============================================================================
# Drag clamps
# =============================================================================


def clamp_triangle(layout: WidgetLayout, x: float, y: float) -> tuple[float, float]:
    """Snap a point outside the HSV triangle onto its edge."""
    r = layout.shape_radius
    ri = r * _COS60
    half_edge = r * _SIN60
    dx = x - layout.cx
    dy = y - layout.cy

    if dx < -ri:
        # Left edge
        return layout.cx - ri, layout.cy + min(max(dy, -half_edge), half_edge)

    if dx * _COS60 + dy * _SIN60 > ri:
        # Lower-right edge, from the apex to the bottom-left corner
        along = dx * _SIN60 - dy * _COS60
        if along > half_edge:
            return layout.cx + r, layout.cy
        if along < -half_edge:
            return layout.cx - ri, layout.cy + half_edge
        return (
            layout.cx + ri * _COS60 + along * _SIN60,
            layout.cy + ri * _SIN60 - along * _COS60,
        )

    if dx * _COS60 - dy * _SIN60 > ri:
        # Upper-right edge, from the apex to the top-left corner
        along = dx * _SIN60 + dy * _COS60
        if along > half_edge:
            return layout.cx + r, layout.cy
        if along < -half_edge:
            return layout.cx - ri, layout.cy - half_edge
        return (
            layout.cx + ri * _COS60 + along * _SIN60,
            layout.cy - ri * _SIN60 + along * _COS60,
        )

    return x, y


def clamp_diamond(layout: WidgetLayout, x: float, y: float) -> tuple[float, float]:
    """Snap a point outside the HSL diamond onto its edge."""
    # Rotate so the diamond becomes an axis-aligned square
    u = (x - layout.cx) * _COS45 - (y - layout.cy) * _COS45
    w = (x - layout.cx) * _COS45 + (y - layout.cy) * _COS45
    ri = layout.shape_radius * _COS45
    u = min(max(u, -ri), ri)
    w = min(max(w, -ri), ri)
    return (
        layout.cx + u * _COS45 + w * _COS45,
        layout.cy - u * _COS45 + w * _COS45,
    )


def oklch_edge_x(
    layout: WidgetLayout,
    y: float,
    boundary: BoundaryPolyline,
    chroma_scale: float = CHROMA_SCALE,
) -> float:
    """x of the gamut edge at row y, from the exact maximum chroma."""
    lr = min(max((layout.bottom - y) / layout.side, 0.0), 1.0)
    chroma = max_chroma(lr, boundary.hue, boundary.cusp)
    return layout.left + layout.side * chroma / chroma_scale


def _nearest_on_outline(
    outline: NDArray[np.float64], x: float, y: float
) -> tuple[float, float]:
    """Nearest point to (x, y) on a closed polyline."""
    p0 = outline[:-1]
    edge = outline[1:] - p0
    length2 = np.sum(edge * edge, axis=1)
    rel = np.array([x, y]) - p0
    t = np.clip(np.sum(rel * edge, axis=1) / np.where(length2 > 0.0, length2, 1.0), 0.0, 1.0)
    nearest = p0 + t[:, None] * edge
    dist2 = np.sum((nearest - np.array([x, y])) ** 2, axis=1)
    best = int(np.argmin(dist2))
    return float(nearest[best, 0]), float(nearest[best, 1])


def clamp_oklch(
    layout: WidgetLayout,
    x: float,
    y: float,
    boundary: BoundaryPolyline,
    chroma_scale: float = CHROMA_SCALE,
) -> tuple[float, float]:
    """
    Snap a point outside the OKLCH area onto its edge.

    The nearest point of the sampled outline picks the lightness; on the
    gamut edge the chroma is then recomputed exactly, so the result is
    always a realizable colour.
    """
    if layout.top <= y <= layout.bottom and x >= layout.left:
        if x <= oklch_edge_x(layout, y, boundary, chroma_scale):
            return x, y

    nx, ny = _nearest_on_outline(boundary.outline, x, y)
    ny = min(max(ny, layout.top), layout.bottom)
    if nx <= layout.left:
        return layout.left, ny
    return oklch_edge_x(layout, ny, boundary, chroma_scale), ny


def clamp_chroma_to_hue(
    layout: WidgetLayout,
    x: float,
    y: float,
    boundary: BoundaryPolyline,
    chroma_scale: float = CHROMA_SCALE,
) -> tuple[float, float]:
    """Pull the OKLCH handle in after a hue change made its chroma illegal."""
    y = min(max(y, layout.top), layout.bottom)
    x = max(x, layout.left)
    return min(x, oklch_edge_x(layout, y, boundary, chroma_scale)), y


def clamp_inner(
    layout: WidgetLayout,
    mode: PickerMode,
    x: float,
    y: float,
    boundary: Optional[BoundaryPolyline] = None,
    chroma_scale: float = CHROMA_SCALE,
) -> tuple[float, float]:
    """
    Keep an inner-handle drag target inside the mode's shape.

    Args:
        layout: Widget geometry
        mode: Picker mode
        x, y: Drag target in widget pixels
        boundary: OKLCH boundary for the current hue (OKLCH only)
        chroma_scale: OKLCH chroma at the right edge of the square

    Returns:
        (x, y) inside or on the edge of the shape
    """
    if mode is PickerMode.HSV:
        return clamp_triangle(layout, x, y)
    if mode is PickerMode.HSL:
        return clamp_diamond(layout, x, y)
    if boundary is None:
        raise ValueError("OKLCH clamping needs the boundary for the current hue")
    return clamp_oklch(layout, x, y, boundary, chroma_scale)
