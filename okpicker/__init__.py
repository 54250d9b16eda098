# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
okpicker -- Perceptual colour picker core.

Lets a user pick a colour on a hue ring plus an inner shape in one of
three models (HSV, HSL, OKLCH) and keeps colour, handle positions, hex
text and RGB text consistent.

Quick start::

    from okpicker import ColorPicker, PickerMode

    picker = ColorPicker("#FF0000", on_color_change=print, mode=PickerMode.OKLCH)
    picker.pointer_down(100, 75)   # grab the inner handle
    picker.pointer_move(90, 60)    # prints the new #RRGGBB
    picker.pointer_up()
    picker.buffer                  # (height, width, 4) RGBA pixels
"""

from __future__ import annotations

__version__ = "1.0.0"

from okpicker.schema import (
    BoundaryPolyline,
    Cusp,
    Handles,
    PickerConfig,
    PickerMode,
    PointerState,
)
from okpicker.widget import ColorPicker, SWATCHES

__all__ = [
    # Core API
    "ColorPicker",
    "PickerMode",
    "PickerConfig",
    # Types (commonly needed)
    "PointerState",
    "Handles",
    "Cusp",
    "BoundaryPolyline",
    "SWATCHES",
    # Version
    "__version__",
]
