# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Colour math for the picker.

Pure, deterministic conversions (HSV, HSL, OKLrCH) and the sRGB gamut
solver. No widget state lives here.
"""

from okpicker.color.codec import hex_to_rgb, rgb_to_hex
from okpicker.color.gamut import find_cusp, max_chroma

__all__ = ["hex_to_rgb", "rgb_to_hex", "find_cusp", "max_chroma"]
