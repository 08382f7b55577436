"""Paint routines: apply one operation to the canvas pixels.

Each ``apply_*`` function takes the operation, the current region and the
``(H, W, 4)`` pixel view, paints in place and returns the region that is
current afterwards. apply_operation() dispatches over the closed operation
set and is what the canvas folds over.

Clipping:
    Every write is gated on the current region classifying the pixel as
    INSIDE, so children never paint over their parent's border or outside
    its rounded corners.

Poly tiles:
    The tile shape is classified once per in-tile offset; each result is
    written to all tiles at once through per-tile base indices into the
    flattened buffer.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from spriteforge.ops.operations import (
    HLineOp,
    NewLayer,
    Operation,
    PolyTileOp,
    RectOp,
    VLineOp,
)
from spriteforge.raster.region import Region
from spriteforge.utils.color import (
    DEFAULT_BORDER_COLOR,
    DEFAULT_FILL_COLOR,
    as_rgba,
    composite_array,
)
from spriteforge.utils.geometry import (
    Containment,
    circle_contains,
    distance,
    point_in_polygon,
    polygon_factory,
    scale_polygon,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Rectangles
# ---------------------------------------------------------------------------


def apply_rect(op: RectOp, current: Region, pixels: np.ndarray) -> Region:
    """Resolve, paint and return the child region described by *op*."""
    child = Region.resolve(
        current,
        point_a=op.point_a,
        point_b=op.point_b,
        corner_radius=op.corner_radius,
        border_width=op.border_width,
        fill_color=op.fill_color,
        border_color=op.border_color,
    )
    written = child.paint(pixels, parent=current)
    logger.debug(
        "rect (%d,%d)-(%d,%d) r=%d b=%d: %d px",
        child.left, child.top, child.right, child.bottom, child.radius, child.border, written,
    )
    return child


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------


def _line_span(offset: int, thickness: int, lo: int, hi: int) -> Optional[tuple[int, int]]:
    """Inclusive ``(start, end)`` of a line band within ``[lo, hi]``, or None."""
    thickness = max(1, int(thickness))
    if offset >= 0:
        start = lo + offset
        end = start + thickness - 1
    else:
        end = hi + 1 + offset
        start = end - thickness + 1
    start, end = max(start, lo), min(end, hi)
    if start > end:
        return None
    return start, end


def line_as_rect(op: HLineOp | VLineOp, current: Region) -> Optional[RectOp]:
    """Express a line as a border-less RectOp in absolute coordinates.

    Returns None when the line falls entirely outside the current region's
    inner box.
    """
    color = as_rgba(op.color, DEFAULT_BORDER_COLOR)
    if isinstance(op, HLineOp):
        span = _line_span(op.offset, op.thickness, current.inner_top, current.inner_bottom)
        if span is None:
            return None
        a = (current.inner_left, span[0])
        b = (current.inner_right, span[1])
    else:
        span = _line_span(op.offset, op.thickness, current.inner_left, current.inner_right)
        if span is None:
            return None
        a = (span[0], current.inner_top)
        b = (span[1], current.inner_bottom)
    return RectOp(point_a=a, point_b=b, corner_radius=0, border_width=0, fill_color=color)


def apply_line(op: HLineOp | VLineOp, current: Region, pixels: np.ndarray) -> Region:
    """Paint a line inside *current*; the current region is unchanged."""
    rect = line_as_rect(op, current)
    if rect is None:
        logger.debug("%s offset=%d outside the current region; skipped", type(op).__name__, op.offset)
        return current
    apply_rect(rect, current, pixels)
    return current


# ---------------------------------------------------------------------------
# Polygon tiles
# ---------------------------------------------------------------------------


def tile_polygon(op: PolyTileOp, tile_w: int, tile_h: int) -> list[tuple[int, int]]:
    """Tile shape in tile-local pixel coordinates."""
    if op.polygon is not None:
        return scale_polygon(op.polygon, tile_w, tile_h)
    n = max(3, int(op.resolution))
    return list(polygon_factory(n, (tile_w - 1) / 2.0, (tile_h - 1) / 2.0))


def apply_poly_tile(op: PolyTileOp, current: Region, pixels: np.ndarray) -> Region:
    """Tile a polygon over the inner box of *current*.

    Parameters
    ----------
    op : PolyTileOp
        Tiling parameters; counts are clamped to ``[1, inner size]``.
    current : Region
        Region whose inner box is split into tiles; also the clip.
    pixels : np.ndarray
        ``(H, W, 4)`` uint8 canvas view, modified in place.

    Returns
    -------
    Region
        *current*, unchanged.
    """
    left, top, right, bottom = current.inner_box
    inner_w = right - left + 1
    inner_h = bottom - top + 1
    x_count = max(1, min(int(op.x_count), inner_w))
    y_count = max(1, min(int(op.y_count), inner_h))
    if (x_count, y_count) != (op.x_count, op.y_count):
        logger.debug("poly_tile counts clamped to %dx%d", x_count, y_count)

    tile_w = inner_w // x_count
    tile_h = inner_h // y_count
    polygon = tile_polygon(op, tile_w, tile_h)
    fill = as_rgba(op.fill_color, DEFAULT_FILL_COLOR)
    border = as_rgba(op.border_color, DEFAULT_BORDER_COLOR)

    canvas_w = pixels.shape[1]
    flat = pixels.reshape(-1, 4)

    # Tile origins relative to the inner box, and their flat buffer indices
    origin_x = np.tile(np.arange(x_count) * tile_w, y_count)
    origin_y = np.repeat(np.arange(y_count) * tile_h, x_count)
    bases = (top + origin_y) * canvas_w + (left + origin_x)

    clip = current.classify_window(left, top, right, bottom) == Containment.INSIDE

    # Every vertex lies within bound_r of the tile centre, so does the polygon
    centre = ((tile_w - 1) / 2.0, (tile_h - 1) / 2.0)
    bound_r = max(distance(centre, v) for v in polygon)

    written = 0
    for ty in range(tile_h):
        for tx in range(tile_w):
            if circle_contains((tx, ty), centre, bound_r) == Containment.OUTSIDE:
                continue
            cls = point_in_polygon(polygon, (tx, ty), op.border_thickness)
            if cls == Containment.OUTSIDE:
                continue
            keep = clip[origin_y + ty, origin_x + tx]
            if not keep.any():
                continue
            idx = bases[keep] + ty * canvas_w + tx
            color = border if cls == Containment.BORDER else fill
            flat[idx] = composite_array(flat[idx], color)
            written += int(idx.size)

    logger.debug(
        "poly_tile %dx%d tiles of %dx%d px, %d vertices: %d px",
        x_count, y_count, tile_w, tile_h, len(polygon), written,
    )
    return current


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def apply_operation(op: Operation, current: Region, root: Region, pixels: np.ndarray) -> Region:
    """Apply *op* and return the region that is current afterwards.

    Raises
    ------
    TypeError
        If *op* is not one of the known operation types.
    """
    if isinstance(op, RectOp):
        return apply_rect(op, current, pixels)
    if isinstance(op, (HLineOp, VLineOp)):
        return apply_line(op, current, pixels)
    if isinstance(op, PolyTileOp):
        return apply_poly_tile(op, current, pixels)
    if isinstance(op, NewLayer):
        return root
    raise TypeError(f"Unsupported operation type: {type(op).__name__}")
