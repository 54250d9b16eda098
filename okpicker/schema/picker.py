# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Value types for the colour picker.

Design principles:
- Immutable: All types are frozen dataclasses
- Explicit: Everything a pure function needs is passed in, never captured
- Derived: Cusp, boundary and handles are recomputed from colour + mode

Coordinate conventions:
- Widget pixels: origin top-left, y grows downwards
- Hue angle: radians around the widget centre, 0 = pointing right
- Cusp: raw OKLab lightness L and chroma C, plus the toe-mapped Lr
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.typing import NDArray


# =============================================================================
# Modes and pointer states
# =============================================================================


class PickerMode(Enum):
    """Colour model used to map pointer position to colour."""
    HSV = "hsv"
    HSL = "hsl"
    OKLCH = "oklch"


class PointerState(Enum):
    """Pointer state machine of the interaction controller."""
    IDLE = "idle"
    DRAGGING_HUE = "dragging_hue"
    DRAGGING_INNER = "dragging_inner"

    @property
    def is_dragging(self) -> bool:
        return self is not PointerState.IDLE


# =============================================================================
# Configuration
# =============================================================================

_HEX_COLOR_RE = re.compile(r"#[0-9A-Fa-f]{6}")


@dataclass(frozen=True, slots=True)
class PickerConfig:
    """
    Static configuration of one picker widget.

    Attributes:
        width: Widget width in pixels
        height: Widget height in pixels
        chroma_scale: Chroma shown at the right edge of the OKLCH square.
           0.27 covers the largest chroma any sRGB hue reaches in Lr space.
        segments: Angular samples of the OKLCH boundary over 0..π
           (half above the cusp, half below). Must be even.
        ring_padding: Gap between widget edge and hue ring, in pixels
        ring_ratio: inner_radius / outer_radius of the hue ring
        shape_margin: Gap between hue ring and inner shape, in pixels
        ring_lightness: Lr used to paint the OKLCH hue ring
        ring_chroma: Chroma used to paint the OKLCH hue ring
        handle_outer_color: Stroke colour of the outer handle circle
        handle_inner_color: Stroke colour of the inner handle circle
    """
    width: int = 200
    height: int = 150
    chroma_scale: float = 0.27
    segments: int = 100
    ring_padding: float = 3.0
    ring_ratio: float = 0.75
    shape_margin: float = 8.0
    ring_lightness: float = 0.710
    ring_chroma: float = 0.125
    handle_outer_color: str = "#608188"
    handle_inner_color: str = "#2F4F55"

    def __post_init__(self) -> None:
        """Validate geometry and colours."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Widget size must be positive, got {self.width}x{self.height}"
            )
        if not 0.0 < self.chroma_scale <= 0.5:
            raise ValueError(f"Chroma scale must be in (0, 0.5], got {self.chroma_scale}")
        if self.segments < 4 or self.segments % 2:
            raise ValueError(f"Segments must be an even number >= 4, got {self.segments}")
        if not 0.0 < self.ring_ratio < 1.0:
            raise ValueError(f"Ring ratio must be in (0, 1), got {self.ring_ratio}")
        if not 0.0 <= self.ring_lightness <= 1.0:
            raise ValueError(f"Ring lightness must be 0-1, got {self.ring_lightness}")
        if self.ring_chroma < 0.0:
            raise ValueError(f"Ring chroma must be >= 0, got {self.ring_chroma}")
        for name in ("handle_outer_color", "handle_inner_color"):
            value = getattr(self, name)
            if not _HEX_COLOR_RE.fullmatch(value):
                raise ValueError(f"{name} must be #RRGGBB, got {value!r}")
        # Inner shape must keep a positive radius
        outer = min(self.width, self.height) / 2 - self.ring_padding
        if outer * self.ring_ratio - self.shape_margin <= 0.0:
            raise ValueError(
                f"Widget {self.width}x{self.height} is too small for the inner shape"
            )


# =============================================================================
# Gamut types
# =============================================================================


@dataclass(frozen=True, slots=True)
class Cusp:
    """
    Point of maximum chroma for one hue in the (L, C) plane.

    Attributes:
        L: Raw OKLab lightness of the cusp
        C: Chroma of the cusp
        Lr: Toe-mapped lightness of the cusp
    """
    L: float
    C: float
    Lr: float

    def __post_init__(self) -> None:
        if not all(math.isfinite(v) for v in (self.L, self.C, self.Lr)):
            raise ValueError(
                f"Cusp must be finite, got L={self.L}, C={self.C}, Lr={self.Lr}"
            )


@dataclass(frozen=True, slots=True, eq=False)
class BoundaryPolyline:
    """
    Sampled OKLCH gamut edge in widget pixels.

    ``upper`` runs from the white corner (top-left) down to the cusp,
    ``lower`` runs from the cusp down to the black corner (bottom-left).
    Point ``k`` of ``upper`` lies on the ray leaving (C=0, L=cusp.L) at
    angle ``k·π/segments`` from straight up; ``lower`` continues the same
    numbering from ``segments/2``.

    Attributes:
        hue: Hue in degrees the boundary was sampled for
        cusp: Cusp the boundary was sampled from
        upper: Array (segments/2 + 1, 2) of (x, y)
        lower: Array (segments/2 + 1, 2) of (x, y)
        segments: Number of angular steps over 0..π
    """
    hue: float
    cusp: Cusp
    upper: NDArray[np.float64] = field(repr=False)
    lower: NDArray[np.float64] = field(repr=False)
    segments: int = 100

    def __post_init__(self) -> None:
        half = self.segments // 2 + 1
        if self.upper.shape != (half, 2) or self.lower.shape != (half, 2):
            raise ValueError(
                f"Boundary halves must have shape ({half}, 2), got "
                f"{self.upper.shape} and {self.lower.shape}"
            )
        if not np.allclose(self.upper[-1], self.lower[0]):
            raise ValueError("Upper and lower boundary must meet at the cusp")

    @property
    def cusp_point(self) -> tuple[float, float]:
        """Cusp position in widget pixels."""
        return float(self.lower[0, 0]), float(self.lower[0, 1])

    @property
    def outline(self) -> NDArray[np.float64]:
        """Closed outline: upper, lower, then back up the achromatic edge."""
        return np.vstack([self.upper, self.lower[1:], self.upper[:1]])


# =============================================================================
# Handle state
# =============================================================================


@dataclass(frozen=True, slots=True)
class Handles:
    """
    Where the two handles currently sit.

    This is the only state the picker carries between events.

    Attributes:
        hue_angle: Hue ring handle angle in radians
        x: Inner handle x in widget pixels
        y: Inner handle y in widget pixels
    """
    hue_angle: float
    x: float
    y: float

    def __post_init__(self) -> None:
        if not all(math.isfinite(v) for v in (self.hue_angle, self.x, self.y)):
            raise ValueError(
                f"Handles must be finite, got angle={self.hue_angle}, "
                f"x={self.x}, y={self.y}"
            )

    def with_angle(self, hue_angle: float) -> Handles:
        return Handles(hue_angle=hue_angle, x=self.x, y=self.y)

    def with_position(self, x: float, y: float) -> Handles:
        return Handles(hue_angle=self.hue_angle, x=x, y=y)
