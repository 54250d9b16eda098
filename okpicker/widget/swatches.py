# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Static swatch grid shown next to the picker.

Fifteen fixed colours: greys, primaries, secondaries and a few mixes.
Picking one commits it like a valid hex entry.
"""

from __future__ import annotations

SWATCHES: tuple[str, ...] = (
    "#000000", "#333333", "#666666", "#999999", "#FFFFFF",
    "#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#00FFFF",
    "#FF00FF", "#FF8800", "#8800FF", "#0088FF", "#00FF88",
)


def swatch_grid(columns: int = 5) -> tuple[tuple[str, ...], ...]:
    """
    Lay the swatches out in rows.

    Args:
        columns: Swatches per row; the last row may be shorter

    Returns:
        Tuple of rows, each a tuple of ``#RRGGBB`` strings
    """
    if columns < 1:
        raise ValueError(f"Columns must be >= 1, got {columns}")
    return tuple(
        SWATCHES[i:i + columns] for i in range(0, len(SWATCHES), columns)
    )
