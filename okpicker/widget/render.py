# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Pixel buffer rendering.

Every state change recomputes the whole RGBA buffer: ring, inner shape,
then both handles on top. Cost is O(width × height), which is fine at
widget scale (around 200 × 150) and is the reason there is no caching.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from okpicker.color.codec import hex_to_rgb, hsv_to_rgb, oklrch_to_rgb
from okpicker.schema import BoundaryPolyline, Handles, PickerConfig, PickerMode
from okpicker.widget.geometry import (
    WidgetLayout,
    color_from_position,
    diamond_mask,
    hue_from_angle,
    oklch_mask,
    ring_mask,
    triangle_mask,
)

# Handle strokes: (radius, line width)
_HANDLE_OUTER = (9.0, 5.0)
_HANDLE_INNER = (6.0, 5.0)


def pixel_grid(layout: WidgetLayout) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Integer pixel coordinates (x, y), each of shape (height, width)."""
    ys, xs = np.mgrid[0:layout.height, 0:layout.width]
    return xs.astype(np.float64), ys.astype(np.float64)


def _ring_colors(
    layout: WidgetLayout,
    mode: PickerMode,
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    config: PickerConfig,
) -> NDArray[np.float64]:
    hue = hue_from_angle(np.arctan2(ys - layout.cy, xs - layout.cx))
    if mode is PickerMode.OKLCH:
        return oklrch_to_rgb(config.ring_lightness, config.ring_chroma, hue)
    return hsv_to_rgb(hue, 1.0, 1.0)


def _shape_mask(
    layout: WidgetLayout,
    mode: PickerMode,
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    boundary: Optional[BoundaryPolyline],
    config: PickerConfig,
) -> NDArray[np.float64]:
    if mode is PickerMode.HSV:
        return triangle_mask(layout, xs, ys)
    if mode is PickerMode.HSL:
        return diamond_mask(layout, xs, ys)
    if boundary is None:
        raise ValueError("OKLCH rendering needs the boundary for the current hue")
    return oklch_mask(layout, xs, ys, boundary, config.chroma_scale)


def _stroke_circle(
    buffer: NDArray[np.uint8],
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    center: tuple[float, float],
    radius: float,
    line_width: float,
    color: NDArray[np.float64],
) -> None:
    """Alpha-blend an antialiased circle outline into the buffer in place."""
    d = np.hypot(xs + 0.5 - center[0], ys + 0.5 - center[1])
    coverage = np.clip(line_width / 2 + 0.5 - np.abs(d - radius), 0.0, 1.0)
    hit = coverage > 0.0
    if not np.any(hit):
        return

    a = coverage[hit][:, None]
    dst = buffer[hit].astype(np.float64)
    dst_alpha = dst[:, 3:4] / 255.0
    out_alpha = a + dst_alpha * (1.0 - a)
    rgb = (color * a + dst[:, :3] * dst_alpha * (1.0 - a)) / np.where(out_alpha > 0, out_alpha, 1.0)
    buffer[hit, :3] = np.clip(np.round(rgb), 0, 255).astype(np.uint8)
    buffer[hit, 3] = np.clip(np.round(out_alpha[:, 0] * 255.0), 0, 255).astype(np.uint8)


def draw_handle(
    buffer: NDArray[np.uint8],
    layout: WidgetLayout,
    center: tuple[float, float],
    config: PickerConfig,
) -> None:
    """Draw one handle (two concentric rings) in place."""
    xs, ys = pixel_grid(layout)
    for (radius, width), color in (
        (_HANDLE_OUTER, config.handle_outer_color),
        (_HANDLE_INNER, config.handle_inner_color),
    ):
        _stroke_circle(buffer, xs, ys, center, radius, width, hex_to_rgb(color))


def render(
    layout: WidgetLayout,
    mode: PickerMode,
    handles: Handles,
    config: PickerConfig,
    boundary: Optional[BoundaryPolyline] = None,
) -> NDArray[np.uint8]:
    """
    Render the full widget.

    Args:
        layout: Widget geometry
        mode: Picker mode
        handles: Current handle positions
        config: Widget configuration (ring colours, handle colours)
        boundary: OKLCH boundary for the handle's hue (OKLCH only)

    Returns:
        RGBA buffer of shape (height, width, 4), dtype uint8
    """
    xs, ys = pixel_grid(layout)
    buffer = np.zeros((layout.height, layout.width, 4), dtype=np.uint8)

    ring = ring_mask(layout, xs, ys)
    shape = np.where(ring > 0.0, 0.0, _shape_mask(layout, mode, xs, ys, boundary, config))

    hue = float(hue_from_angle(handles.hue_angle))
    # Pixels far outside the OKLCH square map to nonsense lightness; they are masked out
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        rgb = np.where(
            (ring > 0.0)[..., None],
            _ring_colors(layout, mode, xs, ys, config),
            color_from_position(layout, mode, xs, ys, hue, config.chroma_scale),
        )
    alpha = np.maximum(ring, shape)

    visible = alpha > 0.0
    buffer[visible, :3] = np.clip(np.round(rgb[visible]), 0, 255).astype(np.uint8)
    buffer[..., 3] = np.clip(np.round(alpha), 0, 255).astype(np.uint8)

    draw_handle(buffer, layout, layout.hue_handle_point(handles.hue_angle), config)
    draw_handle(buffer, layout, (handles.x, handles.y), config)
    return buffer


# =============================================================================
# Optional Pillow export
# =============================================================================


def to_image(buffer: NDArray[np.uint8]):
    """
    Wrap a rendered buffer as a Pillow RGBA image.

    Returns:
        PIL.Image.Image
    """
    try:
        from PIL import Image
    except ImportError as e:
        raise ImportError(
            "Pillow is required for image export. "
            "Install with: pip install okpicker[image]"
        ) from e
    return Image.fromarray(np.ascontiguousarray(buffer, dtype=np.uint8))


def save_png(buffer: NDArray[np.uint8], path: Union[str, Path]) -> Path:
    """Write a rendered buffer to a PNG file."""
    path = Path(path)
    to_image(buffer).save(path, format="PNG")
    return path
