"""Layered operation-stack canvas.

A Canvas owns a flat RGBA byte buffer and an ordered list of operations.
Operations are collected while the canvas is BUILDING; finalize() replays
them in append order, carrying the *current region* from one operation to
the next (starting at the root region), and marks the canvas FINALIZED.

Lifecycle:
    canvas = Canvas(32, 32, margin=1)
    canvas.add_operation(RectOp(corner_radius=4))
    canvas.add_operation(HLineOp(offset=3))
    buffer = canvas.finalize()

Invariants:
    - width and height are even and within [8, 4096]
    - buffer.size == width * height * 4 at all times
    - paint order equals append order
    - finalize() is not idempotent: calling it again paints every operation
      a second time over the existing pixels
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional, Sequence

import numpy as np

from spriteforge.ops.operations import OPERATION_TYPES, Operation
from spriteforge.raster.painters import apply_operation
from spriteforge.raster.region import Region
from spriteforge.utils.color import DEFAULT_BACKGROUND_COLOR, RGBA, as_rgba
from spriteforge.utils.validators import CanvasSizeError, validate_size

logger = logging.getLogger(__name__)

__all__ = ["Canvas", "CanvasSizeError", "CanvasState", "CanvasStateError"]


class CanvasStateError(RuntimeError):
    """Operation appended to a canvas that has already been finalized."""


class CanvasState(Enum):
    BUILDING = "building"
    FINALIZED = "finalized"


class Canvas:
    """RGBA sprite canvas with a replayable operation list.

    Parameters
    ----------
    width, height : int
        Pixel dimensions; even, within [8, 4096].
    margin : int
        Inset of the root region from every edge, clamped to
        ``[0, min(width, height) // 2 - 2]``.
    background_color : RGBA | None
        Initial colour of every pixel; defaults to transparent black.

    Raises
    ------
    CanvasSizeError
        If the dimensions are odd or out of range.
    """

    def __init__(
        self,
        width: int,
        height: int,
        margin: int = 0,
        background_color: Optional[Sequence[int]] = None,
    ) -> None:
        validate_size(width, height)
        self._width = int(width)
        self._height = int(height)

        max_margin = min(self._width, self._height) // 2 - 2
        self._margin = max(0, min(int(margin), max_margin))
        if self._margin != margin:
            logger.debug("Canvas margin %s clamped to %d", margin, self._margin)

        self._background: RGBA = as_rgba(background_color, DEFAULT_BACKGROUND_COLOR)
        self._buffer = np.empty(self._width * self._height * 4, dtype=np.uint8)
        self._buffer.reshape(-1, 4)[:] = self._background

        self._root = Region.root(self._width, self._height, self._margin)
        self._ops: list[Operation] = []
        self._state = CanvasState.BUILDING
        self._finalize_count = 0

    def __repr__(self) -> str:
        return (
            f"Canvas({self._width}x{self._height}, margin={self._margin}, "
            f"ops={len(self._ops)}, state={self._state.value})"
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def margin(self) -> int:
        return self._margin

    @property
    def pixel_count(self) -> int:
        return self._width * self._height

    @property
    def state(self) -> CanvasState:
        return self._state

    @property
    def root(self) -> Region:
        """Root region: canvas bounds inset by the margin."""
        return self._root

    @property
    def operations(self) -> tuple[Operation, ...]:
        return tuple(self._ops)

    @property
    def buffer(self) -> np.ndarray:
        """Flat row-major RGBA buffer, ``width * height * 4`` uint8 values."""
        return self._buffer

    @property
    def pixels(self) -> np.ndarray:
        """``(height, width, 4)`` view sharing memory with :attr:`buffer`."""
        return self._buffer.reshape(self._height, self._width, 4)

    def to_bytes(self) -> bytes:
        return self._buffer.tobytes()

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add_operation(self, op: Operation) -> Canvas:
        """Append *op*; returns the canvas for chaining.

        Raises
        ------
        CanvasStateError
            If the canvas has been finalized.
        TypeError
            If *op* is not a known operation.
        """
        if self._state is CanvasState.FINALIZED:
            raise CanvasStateError(
                f"Cannot add {type(op).__name__}: canvas already finalized"
            )
        if not isinstance(op, OPERATION_TYPES):
            raise TypeError(f"Expected a sprite operation, got {type(op).__name__}")
        self._ops.append(op)
        return self

    def extend(self, ops: Iterable[Operation]) -> Canvas:
        """Append several operations in order."""
        for op in ops:
            self.add_operation(op)
        return self

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def finalize(self) -> np.ndarray:
        """Replay every operation onto the buffer and return it."""
        if self._state is CanvasState.FINALIZED:
            logger.warning(
                "Canvas finalized again; replaying %d operations over existing pixels",
                len(self._ops),
            )

        pixels = self.pixels
        current = self._root
        for op in self._ops:
            current = apply_operation(op, current, self._root, pixels)

        self._state = CanvasState.FINALIZED
        self._finalize_count += 1
        logger.debug(
            "Finalized %dx%d canvas: %d operations (pass %d)",
            self._width, self._height, len(self._ops), self._finalize_count,
        )
        return self._buffer
