# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Interaction controller.

Pointer and text events are pure transitions: each takes the current
PickerState and returns a Transition holding the next state and, when the
event changed the colour, the committed ``#RRGGBB``. ColorPicker owns the
state, applies transitions one at a time and calls back synchronously.

Pointer states:

    IDLE ──down inside inner radius──▶ DRAGGING_INNER
    IDLE ──down elsewhere───────────▶ DRAGGING_HUE
    DRAGGING_* ──move──▶ DRAGGING_* (recompute colour)
    DRAGGING_* ──up (document-wide)──▶ IDLE

Which listeners are attached is a function of the pointer state only
(see listening_events).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Optional

import numpy as np
from numpy.typing import NDArray

from okpicker.color.codec import (
    format_rgb_text,
    hex_to_rgb,
    parse_hex_text,
    parse_rgb_text,
    rgb_to_hex,
)
from okpicker.schema import (
    BoundaryPolyline,
    Handles,
    PickerConfig,
    PickerMode,
    PointerState,
)
from okpicker.widget.geometry import (
    WidgetLayout,
    clamp_chroma_to_hue,
    clamp_inner,
    color_from_position,
    hue_from_angle,
    position_from_color,
    sample_boundary,
)
from okpicker.widget.render import render

log = logging.getLogger(__name__)

FALLBACK_COLOR = "#000000"


def listening_events(pointer: PointerState) -> frozenset[str]:
    """
    Event listeners that should be attached in a pointer state.

    Move and up are document-wide while dragging so a drag that leaves
    the widget still ends cleanly.
    """
    if pointer.is_dragging:
        return frozenset({"pointerdown", "document:pointermove", "document:pointerup"})
    return frozenset({"pointerdown"})


# =============================================================================
# State types
# =============================================================================


@dataclass(frozen=True, slots=True)
class PickerContext:
    """Static per-widget data every transition needs."""
    config: PickerConfig
    layout: WidgetLayout

    @classmethod
    def from_config(cls, config: PickerConfig) -> PickerContext:
        return cls(config=config, layout=WidgetLayout.from_config(config))


@dataclass(frozen=True, slots=True)
class PickerState:
    """
    Everything the picker remembers between events.

    Attributes:
        mode: Current colour model
        color: Current colour as uppercase ``#RRGGBB``
        handles: Hue ring angle and inner handle position
        pointer: Pointer state machine state
        hex_text: Contents of the hex field (may be invalid while typing)
        rgb_text: Contents of the RGB field (may be invalid while typing)
    """
    mode: PickerMode
    color: str
    handles: Handles
    pointer: PointerState = PointerState.IDLE
    hex_text: str = ""
    rgb_text: str = ""


@dataclass(frozen=True, slots=True)
class Transition:
    """Result of one event: next state, and the colour to report if any."""
    state: PickerState
    committed: Optional[str] = None


# =============================================================================
# Helpers
# =============================================================================


def boundary_for(
    ctx: PickerContext, mode: PickerMode, hue_angle: float
) -> Optional[BoundaryPolyline]:
    """OKLCH boundary (with its cusp) for a ring angle; None in other modes."""
    if mode is not PickerMode.OKLCH:
        return None
    return sample_boundary(
        ctx.layout,
        float(hue_from_angle(hue_angle)),
        ctx.config.chroma_scale,
        ctx.config.segments,
    )


def _place(ctx: PickerContext, mode: PickerMode, rgb: NDArray[np.float64]) -> Handles:
    return position_from_color(ctx.layout, mode, rgb, ctx.config.chroma_scale)


def _commit(
    ctx: PickerContext,
    state: PickerState,
    handles: Handles,
    pointer: PointerState,
) -> Transition:
    """Derive colour, hex text and RGB text from one forward mapping."""
    rgb = color_from_position(
        ctx.layout,
        state.mode,
        handles.x,
        handles.y,
        hue_from_angle(handles.hue_angle),
        ctx.config.chroma_scale,
    )
    color = rgb_to_hex(rgb)
    next_state = replace(
        state,
        color=color,
        handles=handles,
        pointer=pointer,
        hex_text=color,
        rgb_text=format_rgb_text(hex_to_rgb(color)),
    )
    return Transition(next_state, committed=color)


def _drag_hue(ctx: PickerContext, state: PickerState, x: float, y: float) -> Transition:
    layout = ctx.layout
    angle = math.atan2(y - layout.cy, x - layout.cx)
    handles = state.handles.with_angle(angle)

    if state.mode is PickerMode.OKLCH:
        # A new hue can have less room for the current chroma
        boundary = boundary_for(ctx, state.mode, angle)
        x_in, y_in = clamp_chroma_to_hue(
            layout, handles.x, handles.y, boundary, ctx.config.chroma_scale
        )
        handles = handles.with_position(x_in, y_in)

    return _commit(ctx, state, handles, PointerState.DRAGGING_HUE)


def _drag_inner(ctx: PickerContext, state: PickerState, x: float, y: float) -> Transition:
    boundary = boundary_for(ctx, state.mode, state.handles.hue_angle)
    x_in, y_in = clamp_inner(
        ctx.layout, state.mode, x, y, boundary, ctx.config.chroma_scale
    )
    handles = state.handles.with_position(x_in, y_in)
    return _commit(ctx, state, handles, PointerState.DRAGGING_INNER)


# =============================================================================
# Transitions
# =============================================================================


def initial_state(ctx: PickerContext, color: str, mode: PickerMode) -> PickerState:
    """
    Build the state for a caller-supplied colour.

    A malformed colour falls back to black with a warning.
    """
    normalized = parse_hex_text(color)
    if normalized is None:
        log.warning("Invalid initial colour %r, using %s", color, FALLBACK_COLOR)
        normalized = FALLBACK_COLOR
    rgb = hex_to_rgb(normalized)
    return PickerState(
        mode=mode,
        color=normalized,
        handles=_place(ctx, mode, rgb),
        hex_text=normalized,
        rgb_text=format_rgb_text(rgb),
    )


def pointer_down(ctx: PickerContext, state: PickerState, x: float, y: float) -> Transition:
    """Start a drag; the inner radius decides which handle is grabbed."""
    if ctx.layout.in_inner_area(x, y):
        return _drag_inner(ctx, state, x, y)
    return _drag_hue(ctx, state, x, y)


def pointer_move(ctx: PickerContext, state: PickerState, x: float, y: float) -> Transition:
    """Continue a drag; ignored while idle."""
    if state.pointer is PointerState.DRAGGING_HUE:
        return _drag_hue(ctx, state, x, y)
    if state.pointer is PointerState.DRAGGING_INNER:
        return _drag_inner(ctx, state, x, y)
    return Transition(state)


def pointer_up(state: PickerState) -> Transition:
    """End any drag."""
    return Transition(replace(state, pointer=PointerState.IDLE))


def hex_text_changed(ctx: PickerContext, state: PickerState, text: str) -> Transition:
    """
    Hex field edited.

    The typed text is always kept; colour and handles only change when it
    is exactly six hex digits (``#`` optional).
    """
    color = parse_hex_text(text)
    if color is None:
        log.debug("Hex text %r not committed", text)
        return Transition(replace(state, hex_text=text))

    rgb = hex_to_rgb(color)
    next_state = replace(
        state,
        color=color,
        handles=_place(ctx, state.mode, rgb),
        hex_text=text,
        rgb_text=format_rgb_text(rgb),
    )
    return Transition(next_state, committed=color)


def rgb_text_changed(ctx: PickerContext, state: PickerState, text: str) -> Transition:
    """
    RGB field edited.

    ``"r, g, b"`` with 1-3 digit groups commits; channels above 255 are
    clamped on commit rather than rejected.
    """
    typed = parse_rgb_text(text)
    if typed is None:
        log.debug("RGB text %r not committed", text)
        return Transition(replace(state, rgb_text=text))

    color = rgb_to_hex(typed)
    rgb = hex_to_rgb(color)
    next_state = replace(
        state,
        color=color,
        handles=_place(ctx, state.mode, rgb),
        hex_text=color,
        rgb_text=text,
    )
    return Transition(next_state, committed=color)


def switch_mode(ctx: PickerContext, state: PickerState, mode: PickerMode) -> Transition:
    """
    Change colour model.

    Handles are re-derived from the current colour, never from the old
    pixel positions, so the colour itself does not change.
    """
    if mode is state.mode:
        return Transition(state)
    handles = _place(ctx, mode, hex_to_rgb(state.color))
    return Transition(
        replace(state, mode=mode, handles=handles, pointer=PointerState.IDLE)
    )


def external_color(ctx: PickerContext, state: PickerState, color: str) -> Transition:
    """
    The caller supplied a colour.

    Echoes of the current colour leave the handles where they are.
    Malformed colours are ignored with a warning.
    """
    normalized = parse_hex_text(color)
    if normalized is None:
        log.warning("Ignoring invalid colour %r from caller", color)
        return Transition(state)
    if normalized == state.color:
        return Transition(state)

    rgb = hex_to_rgb(normalized)
    return Transition(
        replace(
            state,
            color=normalized,
            handles=_place(ctx, state.mode, rgb),
            hex_text=normalized,
            rgb_text=format_rgb_text(rgb),
        )
    )


def pick_swatch(ctx: PickerContext, state: PickerState, color: str) -> Transition:
    """A swatch was clicked; commits like a valid hex entry."""
    normalized = parse_hex_text(color)
    if normalized is None:
        raise ValueError(f"Swatch colour must be #RRGGBB, got {color!r}")
    rgb = hex_to_rgb(normalized)
    next_state = replace(
        state,
        color=normalized,
        handles=_place(ctx, state.mode, rgb),
        hex_text=normalized,
        rgb_text=format_rgb_text(rgb),
    )
    return Transition(next_state, committed=normalized)


# =============================================================================
# Owner object
# =============================================================================


class ColorPicker:
    """
    Colour picker widget core.

    Owns the state, the boundary for the current hue and the rendered
    pixel buffer. Each event handler runs to completion: transition,
    re-render, then the callback.

    Args:
        color: Initial colour ``#RRGGBB``
        on_color_change: Called with every committed ``#RRGGBB``
        mode: Initial colour model
        on_mode_change: Called when the user picks another model
        config: Widget configuration; defaults to a 200 x 150 widget
    """

    def __init__(
        self,
        color: str,
        on_color_change: Callable[[str], None],
        mode: PickerMode = PickerMode.HSV,
        on_mode_change: Optional[Callable[[PickerMode], None]] = None,
        config: Optional[PickerConfig] = None,
    ) -> None:
        self._ctx = PickerContext.from_config(
            config if config is not None else PickerConfig()
        )
        self._on_color_change = on_color_change
        self._on_mode_change = on_mode_change
        self._state = initial_state(self._ctx, color, mode)
        self._boundary, self._buffer = self._draw()

    # ---- read-only views ----

    @property
    def state(self) -> PickerState:
        return self._state

    @property
    def color(self) -> str:
        return self._state.color

    @property
    def mode(self) -> PickerMode:
        return self._state.mode

    @property
    def handles(self) -> Handles:
        return self._state.handles

    @property
    def hex_text(self) -> str:
        return self._state.hex_text

    @property
    def rgb_text(self) -> str:
        return self._state.rgb_text

    @property
    def layout(self) -> WidgetLayout:
        return self._ctx.layout

    @property
    def boundary(self) -> Optional[BoundaryPolyline]:
        """OKLCH boundary for the current hue (None in HSV / HSL)."""
        return self._boundary

    @property
    def buffer(self) -> NDArray[np.uint8]:
        """Latest RGBA pixel buffer, shape (height, width, 4)."""
        return self._buffer

    @property
    def listening(self) -> frozenset[str]:
        return listening_events(self._state.pointer)

    # ---- events ----

    def pointer_down(self, x: float, y: float) -> None:
        self._apply(pointer_down(self._ctx, self._state, x, y))

    def pointer_move(self, x: float, y: float) -> None:
        self._apply(pointer_move(self._ctx, self._state, x, y))

    def pointer_up(self) -> None:
        self._apply(pointer_up(self._state))

    def set_hex_text(self, text: str) -> None:
        self._apply(hex_text_changed(self._ctx, self._state, text))

    def set_rgb_text(self, text: str) -> None:
        self._apply(rgb_text_changed(self._ctx, self._state, text))

    def pick_swatch(self, color: str) -> None:
        self._apply(pick_swatch(self._ctx, self._state, color))

    def select_mode(self, mode: PickerMode) -> None:
        """User picked a colour model; notifies on_mode_change."""
        previous = self._state.mode
        self._apply(switch_mode(self._ctx, self._state, mode))
        if mode is not previous and self._on_mode_change is not None:
            self._on_mode_change(mode)

    def set_mode(self, mode: PickerMode) -> None:
        """Caller changed the colour model; no callback."""
        self._apply(switch_mode(self._ctx, self._state, mode))

    def set_color(self, color: str) -> None:
        """Caller changed the colour; no callback."""
        self._apply(external_color(self._ctx, self._state, color))

    # ---- internals ----

    def _apply(self, transition: Transition) -> None:
        previous = self._state
        self._state = transition.state
        if (
            transition.state.handles != previous.handles
            or transition.state.mode is not previous.mode
        ):
            if transition.state.mode is not previous.mode:
                log.debug("Mode %s -> %s", previous.mode.value, transition.state.mode.value)
            self._boundary, self._buffer = self._draw()
        if transition.committed is not None:
            log.debug("Commit %s", transition.committed)
            self._on_color_change(transition.committed)

    def _draw(self) -> tuple[Optional[BoundaryPolyline], NDArray[np.uint8]]:
        """Boundary and pixel buffer for the current state."""
        state = self._state
        boundary = boundary_for(self._ctx, state.mode, state.handles.hue_angle)
        buffer = render(
            self._ctx.layout, state.mode, state.handles, self._ctx.config, boundary
        )
        return boundary, buffer
