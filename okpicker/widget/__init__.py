# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Picker widget: geometry, rendering and interaction.

This module maps pointer positions to colours and back, renders the
widget into an RGBA buffer and runs the pointer / text state machine.
"""

from okpicker.widget.controller import ColorPicker, PickerState, listening_events
from okpicker.widget.geometry import WidgetLayout
from okpicker.widget.render import render
from okpicker.widget.swatches import SWATCHES, swatch_grid

__all__ = [
    "ColorPicker",
    "PickerState",
    "WidgetLayout",
    "listening_events",
    "render",
    "SWATCHES",
    "swatch_grid",
]
