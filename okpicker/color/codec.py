# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Color space conversions and text notation.

Conversion chains:
- RGB [0,255] ↔ HSV, RGB [0,255] ↔ HSL
- sRGB → Linear RGB → LMS → OKLab → OKLrCH (toe-mapped lightness)

References:
- OKLab: https://bottosson.github.io/posts/oklab/
- Toe / Lr: https://bottosson.github.io/posts/colorpicker/

Every numeric function is pure and vectorised: scalars or arrays go in,
arrays come out. RGB results are NOT clipped; clamping happens only when a
colour is committed as hex text.
"""

from __future__ import annotations

import re
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray


# =============================================================================
# Text notation
# =============================================================================

_HEX_RE = re.compile(r"#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})")
_RGB_RE = re.compile(r"\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*")


def parse_hex_text(text: str) -> Optional[str]:
    """
    Normalize free text to ``#RRGGBB``.

    Accepts exactly six hex digits with or without a leading ``#``.

    Returns:
        Uppercase ``#RRGGBB``, or None if the text does not match
    """
    m = _HEX_RE.fullmatch(text)
    if m is None:
        return None
    return "#" + "".join(m.groups()).upper()


def hex_to_rgb(hex_color: str) -> NDArray[np.float64]:
    """
    Convert a hex color string to an RGB array.

    Args:
        hex_color: Hex string like "#3941C8" or "3941C8"

    Returns:
        Array (3,) with channels in [0, 255]

    Raises:
        ValueError: If the string is not six hex digits
    """
    m = _HEX_RE.fullmatch(hex_color)
    if m is None:
        raise ValueError(f"Expected #RRGGBB, got {hex_color!r}")
    return np.array([int(g, 16) for g in m.groups()], dtype=np.float64)


def clamp_rgb(rgb: ArrayLike) -> NDArray[np.int64]:
    """Round and clamp RGB channels into [0, 255]."""
    rgb = np.asarray(rgb, dtype=np.float64)
    # NaN would survive clip; treat it as 0
    rgb = np.nan_to_num(rgb, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(np.round(rgb), 0, 255).astype(np.int64)


def rgb_to_hex(rgb: ArrayLike) -> str:
    """
    Convert an RGB triple to ``#RRGGBB``.

    Channels are rounded and clamped into [0, 255] first, so any numeric
    input yields a well-formed string.
    """
    r, g, b = clamp_rgb(rgb)
    return f"#{r:02X}{g:02X}{b:02X}"


def parse_rgb_text(text: str) -> Optional[NDArray[np.float64]]:
    """
    Parse ``"r, g, b"`` with 1-3 digit groups.

    Values are returned as typed (e.g. 256 stays 256); callers clamp on
    commit.

    Returns:
        Array (3,) or None if the text does not match
    """
    m = _RGB_RE.fullmatch(text)
    if m is None:
        return None
    return np.array([int(g) for g in m.groups()], dtype=np.float64)


def format_rgb_text(rgb: ArrayLike) -> str:
    """Format RGB as ``"r, g, b"`` from clamped, rounded channels."""
    r, g, b = clamp_rgb(rgb)
    return f"{r}, {g}, {b}"


# =============================================================================
# RGB ↔ HSV / HSL
# =============================================================================


def _hue_from_rgb(
    r: NDArray[np.float64],
    g: NDArray[np.float64],
    b: NDArray[np.float64],
    mx: NDArray[np.float64],
    delta: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Hexcone hue in degrees [0, 360); 0 where the colour is achromatic."""
    safe = np.where(delta == 0, 1.0, delta)
    h = np.where(
        mx == r,
        (g - b) / safe,
        np.where(mx == g, (b - r) / safe + 2.0, (r - g) / safe + 4.0),
    )
    h = np.mod(h * 60.0, 360.0)
    return np.where(delta == 0, 0.0, h)


def rgb_to_hsv(rgb: ArrayLike) -> tuple[NDArray[np.float64], ...]:
    """
    Convert RGB [0,255] to HSV.

    Args:
        rgb: Array of shape (..., 3)

    Returns:
        (h, s, v) with h in degrees [0, 360), s and v in [0, 1]
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    mx = np.max(rgb, axis=-1)
    mn = np.min(rgb, axis=-1)
    delta = mx - mn

    s = np.where(mx == 0, 0.0, delta / np.where(mx == 0, 1.0, mx))
    h = _hue_from_rgb(r, g, b, mx, delta)
    return h, s, mx / 255.0


def rgb_to_hsl(rgb: ArrayLike) -> tuple[NDArray[np.float64], ...]:
    """
    Convert RGB [0,255] to HSL.

    Returns:
        (h, s, l) with h in degrees [0, 360), s and l in [0, 1]
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    mx = np.max(rgb, axis=-1)
    mn = np.min(rgb, axis=-1)
    delta = mx - mn
    l = (mx + mn) / 2.0

    denom = 255.0 - np.abs(2.0 * l - 255.0)
    s = np.where(delta == 0, 0.0, delta / np.where(denom == 0, 1.0, denom))
    h = _hue_from_rgb(r, g, b, mx, delta)
    return h, s, l / 255.0


def _chroma_to_rgb(
    h: NDArray[np.float64],
    c: NDArray[np.float64],
    m: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Place chroma c and offset m on the hexcone sector for hue h."""
    h = np.mod(h, 360.0)
    x = c * (1.0 - np.abs(np.mod(h / 60.0, 2.0) - 1.0))
    zero = np.zeros_like(c)
    sector = np.floor(h / 60.0).astype(np.int64)
    # Rows: (r, g, b) per 60° sector
    choices = [
        (c, x, zero),
        (x, c, zero),
        (zero, c, x),
        (zero, x, c),
        (x, zero, c),
        (c, zero, x),
    ]
    channels = [
        np.choose(np.clip(sector, 0, 5), [row[i] for row in choices])
        for i in range(3)
    ]
    return (np.stack(channels, axis=-1) + np.asarray(m)[..., None]) * 255.0


def hsv_to_rgb(h: ArrayLike, s: ArrayLike, v: ArrayLike) -> NDArray[np.float64]:
    """
    Convert HSV to RGB [0,255].

    Args:
        h: Hue in degrees
        s: Saturation [0, 1]
        v: Value [0, 1]

    Returns:
        Array of shape (..., 3)
    """
    h, s, v = np.broadcast_arrays(
        np.asarray(h, dtype=np.float64),
        np.asarray(s, dtype=np.float64),
        np.asarray(v, dtype=np.float64),
    )
    c = v * s
    return _chroma_to_rgb(h, c, v - c)


def hsl_to_rgb(h: ArrayLike, s: ArrayLike, l: ArrayLike) -> NDArray[np.float64]:
    """
    Convert HSL to RGB [0,255].

    Args:
        h: Hue in degrees
        s: Saturation [0, 1]
        l: Lightness [0, 1]

    Returns:
        Array of shape (..., 3)
    """
    h, s, l = np.broadcast_arrays(
        np.asarray(h, dtype=np.float64),
        np.asarray(s, dtype=np.float64),
        np.asarray(l, dtype=np.float64),
    )
    c = (1.0 - np.abs(2.0 * l - 1.0)) * s
    return _chroma_to_rgb(h, c, l - c / 2.0)


# =============================================================================
# sRGB ↔ Linear RGB
# =============================================================================


def srgb_to_linear(srgb: ArrayLike) -> NDArray[np.float64]:
    """
    Convert sRGB values [0,1] to linear RGB.

    sRGB uses a piecewise gamma curve:
    - For values <= 0.04045: linear/12.92
    - For values > 0.04045: ((value + 0.055) / 1.055) ^ 2.4
    """
    srgb = np.asarray(srgb, dtype=np.float64)
    return np.where(
        srgb <= 0.04045,
        srgb / 12.92,
        np.power((np.maximum(srgb, 0.04045) + 0.055) / 1.055, 2.4),
    )


def linear_to_srgb(linear: ArrayLike) -> NDArray[np.float64]:
    """
    Convert linear RGB to sRGB values.

    Inverse of srgb_to_linear. Not clipped: out-of-gamut input produces
    values outside [0,1] (negative input stays on the linear segment).
    """
    linear = np.asarray(linear, dtype=np.float64)
    return np.where(
        linear <= 0.0031308,
        linear * 12.92,
        1.055 * np.power(np.maximum(linear, 0.0031308), 1.0 / 2.4) - 0.055,
    )


# =============================================================================
# Lightness toe (L ↔ Lr)
# =============================================================================

# Raw OKLab L is too dark near black for a picker axis; Lr spaces the
# darks evenly.
TOE_K1 = 0.206
TOE_K2 = 0.03
TOE_K3 = (1.0 + TOE_K1) / (1.0 + TOE_K2)


def l_to_lr(L: ArrayLike) -> NDArray[np.float64]:
    """Map OKLab lightness L to toe-mapped Lr."""
    L = np.asarray(L, dtype=np.float64)
    x = TOE_K3 * L - TOE_K1
    return (x + np.sqrt(np.maximum(x * x + 4.0 * TOE_K2 * TOE_K3 * L, 0.0))) / 2.0


def lr_to_l(Lr: ArrayLike) -> NDArray[np.float64]:
    """Inverse of l_to_lr. Defined for Lr > -k2; the picker uses [0, 1]."""
    Lr = np.asarray(Lr, dtype=np.float64)
    return Lr * (Lr + TOE_K1) / (TOE_K3 * (Lr + TOE_K2))


# =============================================================================
# Linear RGB ↔ OKLab
# =============================================================================

# Matrices from https://bottosson.github.io/posts/oklab/

# Linear sRGB to LMS (cone responses)
_M1 = np.array([
    [0.4122214708, 0.5363325363, 0.0514459929],
    [0.2119034982, 0.6806995451, 0.1073969566],
    [0.0883024619, 0.2817188376, 0.6299787005],
], dtype=np.float64)

# Cube-rooted LMS to OKLab
_M2 = np.array([
    [0.2104542553, 0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050, 0.4505937099],
    [0.0259040371, 0.7827717662, -0.8086757660],
], dtype=np.float64)

# OKLab to cube-rooted LMS
OKLAB_TO_LMS = np.array([
    [1.0, 0.3963377774, 0.2158037573],
    [1.0, -0.1055613458, -0.0638541728],
    [1.0, -0.0894841775, -1.2914855480],
], dtype=np.float64)

# LMS to linear sRGB
LMS_TO_RGB = np.array([
    [4.0767416621, -3.3077115913, 0.2309699292],
    [-1.2684380046, 2.6097574011, -0.3413193965],
    [-0.0041960863, -0.7034186147, 1.7076147010],
], dtype=np.float64)


def linear_rgb_to_oklab(rgb: ArrayLike) -> NDArray[np.float64]:
    """
    Convert linear RGB to OKLab.

    Args:
        rgb: Array of shape (..., 3) with linear RGB values

    Returns:
        Array of shape (..., 3) with OKLab values (L, a, b)
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    lms = np.einsum('...j,ij->...i', rgb, _M1)
    return np.einsum('...j,ij->...i', np.cbrt(lms), _M2)


def oklab_to_linear_rgb(lab: ArrayLike) -> NDArray[np.float64]:
    """
    Convert OKLab to linear RGB.

    Args:
        lab: Array of shape (..., 3) with OKLab values (L, a, b)

    Returns:
        Array of shape (..., 3) with linear RGB values (unclipped)
    """
    lab = np.asarray(lab, dtype=np.float64)
    lms_ = np.einsum('...j,ij->...i', lab, OKLAB_TO_LMS)
    return np.einsum('...j,ij->...i', lms_ ** 3, LMS_TO_RGB)


# =============================================================================
# RGB ↔ OKLrCH
# =============================================================================


def rgb_to_oklrch(rgb: ArrayLike) -> tuple[NDArray[np.float64], ...]:
    """
    Convert RGB [0,255] to OKLrCH.

    Full chain: sRGB → Linear RGB → OKLab → (Lr, C, H)

    Returns:
        (Lr, C, H) with H in degrees [0, 360)
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    lab = linear_rgb_to_oklab(srgb_to_linear(rgb / 255.0))
    L, a, b = lab[..., 0], lab[..., 1], lab[..., 2]

    C = np.sqrt(a ** 2 + b ** 2)
    H = np.mod(np.degrees(np.arctan2(b, a)), 360.0)
    return l_to_lr(L), C, H


def oklrch_to_rgb(Lr: ArrayLike, C: ArrayLike, H: ArrayLike) -> NDArray[np.float64]:
    """
    Convert OKLrCH to RGB [0,255].

    Exact inverse of rgb_to_oklrch. Out-of-gamut input yields channels
    outside [0, 255].

    Args:
        Lr: Toe-mapped lightness [0, 1]
        C: Chroma
        H: Hue in degrees

    Returns:
        Array of shape (..., 3)
    """
    Lr, C, H = np.broadcast_arrays(
        np.asarray(Lr, dtype=np.float64),
        np.asarray(C, dtype=np.float64),
        np.asarray(H, dtype=np.float64),
    )
    h_rad = np.radians(H)
    lab = np.stack([lr_to_l(Lr), C * np.cos(h_rad), C * np.sin(h_rad)], axis=-1)
    return linear_to_srgb(oklab_to_linear_rgb(lab)) * 255.0
