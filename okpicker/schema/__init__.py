# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Schema definitions for the colour picker.

All types in this module are immutable (frozen dataclasses).
Handles and boundaries are replaced, never mutated.
"""

from okpicker.schema.picker import (
    BoundaryPolyline,
    Cusp,
    Handles,
    PickerConfig,
    PickerMode,
    PointerState,
)

__all__ = [
    # Modes
    "PickerMode",
    "PointerState",
    # Configuration
    "PickerConfig",
    # Gamut types
    "Cusp",
    "BoundaryPolyline",
    # Handle state
    "Handles",
]
