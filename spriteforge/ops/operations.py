"""Sprite operations -- the vocabulary between sprite documents and the canvas.

Every drawing action is an immutable, slotted dataclass. A canvas replays its
operations in append order; each one paints relative to the *current
region*, which starts as the canvas root region.

Region chaining
---------------
``RectOp`` paints a child of the current region and becomes the new current
region, so later operations nest inside it and are clipped by it.
``HLineOp``, ``VLineOp`` and ``PolyTileOp`` paint inside the current region
without replacing it. ``NewLayer`` resets the current region to the root.

Coordinates
-----------
Points are canvas pixels. Negative components count back from the current
region's inner far edge (``-1`` is the last inner pixel). Out-of-range values
are clamped when the operation is applied, never rejected here.

Colours
-------
``None`` selects the defaults from :mod:`spriteforge.utils.color`.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from typing import Optional, Sequence

from spriteforge.utils.color import RGBA

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Coord = tuple[int, int]
"""Signed pixel coordinate ``(x, y)``."""

UnitPolygon = tuple[tuple[float, float], ...]
"""Polygon vertices in unit-square coordinates (0..1 on both axes)."""


def _check_color(name: str, value: Optional[Sequence[int]]) -> None:
    if value is not None and len(value) != 4:
        raise ValueError(f"{name} must have 4 channels (RGBA), got {value!r}")


def _check_coord(name: str, value: Optional[Sequence[int]]) -> None:
    if value is not None and len(value) != 2:
        raise ValueError(f"{name} must be an (x, y) pair, got {value!r}")


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Operation(ABC):
    """Base class for all sprite operations."""

    pass


# ---------------------------------------------------------------------------
# Region operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RectOp(Operation):
    """Rounded rectangle with a border; becomes the current region.

    Parameters
    ----------
    point_a, point_b : tuple[int, int] | None
        Opposite corners. ``None`` selects the current region's inner
        top-left (a) or inner bottom-right (b).
    corner_radius : int
        Corner radius in pixels (clamped to half the shorter side).
    border_width : int
        Border band width in pixels (clamped so one inner pixel remains).
    fill_color, border_color : RGBA | None
        Interior and border colours.
    """

    point_a: Optional[Coord] = None
    point_b: Optional[Coord] = None
    corner_radius: int = 0
    border_width: int = 1
    fill_color: Optional[RGBA] = None
    border_color: Optional[RGBA] = None

    def __post_init__(self) -> None:
        _check_coord("point_a", self.point_a)
        _check_coord("point_b", self.point_b)
        _check_color("fill_color", self.fill_color)
        _check_color("border_color", self.border_color)


@dataclass(frozen=True, slots=True)
class NewLayer(Operation):
    """Reset the current region to the canvas root region."""

    pass


# ---------------------------------------------------------------------------
# Line operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HLineOp(Operation):
    """Horizontal line across the current region's inner box.

    Parameters
    ----------
    thickness : int
        Line height in pixels (at least 1).
    offset : int
        Rows below the inner top edge; negative values place the line's
        bottom row that many rows from the inner bottom (``-1`` = last row).
    color : RGBA | None
        Line colour; defaults to the border colour.
    """

    thickness: int = 1
    offset: int = 0
    color: Optional[RGBA] = None

    def __post_init__(self) -> None:
        _check_color("color", self.color)


@dataclass(frozen=True, slots=True)
class VLineOp(Operation):
    """Vertical line across the current region's inner box.

    Same parameters as :class:`HLineOp`, measured in columns from the inner
    left edge (negative: from the inner right edge).
    """

    thickness: int = 1
    offset: int = 0
    color: Optional[RGBA] = None

    def __post_init__(self) -> None:
        _check_color("color", self.color)


# ---------------------------------------------------------------------------
# Pattern operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PolyTileOp(Operation):
    """Polygon pattern tiled over the current region's inner box.

    Parameters
    ----------
    x_count, y_count : int
        Number of tile columns and rows (clamped to ``[1, inner size]``).
    resolution : int
        Vertex count of the generated polygon when *polygon* is ``None``
        (at least 3).
    polygon : tuple of (u, v) | None
        Custom tile shape in unit-square coordinates.
    border_thickness : int
        Border band width inside the polygon edge; 0 disables it.
    fill_color, border_color : RGBA | None
        Interior and border colours.
    """

    x_count: int = 1
    y_count: int = 1
    resolution: int = 4
    polygon: Optional[UnitPolygon] = None
    border_thickness: int = 0
    fill_color: Optional[RGBA] = None
    border_color: Optional[RGBA] = None

    def __post_init__(self) -> None:
        if self.polygon is not None:
            for i, vertex in enumerate(self.polygon):
                if len(vertex) != 2:
                    raise ValueError(f"polygon vertex {i} must be a (u, v) pair, got {vertex!r}")
        _check_color("fill_color", self.fill_color)
        _check_color("border_color", self.border_color)


OPERATION_TYPES: tuple[type[Operation], ...] = (RectOp, HLineOp, VLineOp, PolyTileOp, NewLayer)
"""Closed set of operation types the canvas knows how to apply."""
