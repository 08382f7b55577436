"""Rounded-rect / border region model.

A Region is an axis-aligned pixel rectangle with optional rounded corners and
an inner border band. It is used two ways:
    - to paint: border / fill colours composited onto the canvas buffer
    - to contain: children resolve their coordinates against its inner box
      and only write pixels the region classifies as INSIDE

Architecture:
    - Region.root(): the canvas paint area (canvas bounds inset by margin)
    - Region.resolve(): child bounds from signed corner points, clamped to
      the parent's inner box
    - contains(): scalar classification of one pixel
    - classify_window(): numpy classification of a pixel window (identical
      results to contains(), used for painting)

Coordinates:
    - Positive values are absolute canvas pixels
    - Negative values are measured from the parent's inner far edge
      (-1 is the last inner pixel column / row)

Invariants:
    - left <= right, top <= bottom (inclusive bounds)
    - radius <= min(right - left, bottom - top) // 2
    - border <= min(right - left, bottom - top) // 2, so the inner box keeps
      at least one pixel
    - Visual parameters are clamped, never rejected
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from spriteforge.utils.color import (
    DEFAULT_BORDER_COLOR,
    DEFAULT_FILL_COLOR,
    RGBA,
    as_rgba,
    composite_array,
)
from spriteforge.utils.geometry import Containment, circle_contains

logger = logging.getLogger(__name__)

Coord = tuple[int, int]


def _clamp(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def _from_far_edge(v: int, far: int) -> int:
    """Resolve a signed coordinate; negative counts back from *far* (inclusive)."""
    return far + 1 + v if v < 0 else v


@dataclass(frozen=True, slots=True)
class Region:
    """Immutable pixel region with rounded corners and a border band.

    Parameters
    ----------
    left, top, right, bottom : int
        Inclusive pixel bounds.
    radius : int
        Corner radius in pixels.
    border : int
        Border band width in pixels.
    fill_color, border_color : RGBA
        Colours painted for INSIDE and BORDER pixels.
    """

    left: int
    top: int
    right: int
    bottom: int
    radius: int = 0
    border: int = 0
    fill_color: RGBA = DEFAULT_FILL_COLOR
    border_color: RGBA = DEFAULT_BORDER_COLOR

    def __post_init__(self) -> None:
        if self.left > self.right or self.top > self.bottom:
            raise ValueError(
                f"Region bounds inverted: left={self.left} right={self.right} "
                f"top={self.top} bottom={self.bottom}"
            )
        limit = min(self.right - self.left, self.bottom - self.top) // 2
        if not 0 <= self.radius <= limit:
            raise ValueError(f"radius must be in [0, {limit}], got {self.radius}")
        if not 0 <= self.border <= limit:
            raise ValueError(f"border must be in [0, {limit}], got {self.border}")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def bounded(
        cls,
        left: int,
        top: int,
        right: int,
        bottom: int,
        corner_radius: int = 0,
        border_width: int = 0,
        fill_color: RGBA | None = None,
        border_color: RGBA | None = None,
    ) -> Region:
        """Build a region from resolved bounds, clamping radius and border."""
        limit = min(right - left, bottom - top) // 2
        radius = _clamp(int(corner_radius), 0, limit)
        border = _clamp(int(border_width), 0, limit)
        if radius != corner_radius or border != border_width:
            logger.debug(
                "Clamped region style: radius %s -> %d, border %s -> %d (limit %d)",
                corner_radius, radius, border_width, border, limit,
            )
        return cls(
            left=left,
            top=top,
            right=right,
            bottom=bottom,
            radius=radius,
            border=border,
            fill_color=as_rgba(fill_color, DEFAULT_FILL_COLOR),
            border_color=as_rgba(border_color, DEFAULT_BORDER_COLOR),
        )

    @classmethod
    def root(cls, width: int, height: int, margin: int = 0) -> Region:
        """Canvas paint area: canvas bounds inset by *margin*, no styling."""
        return cls(
            left=margin,
            top=margin,
            right=width - 1 - margin,
            bottom=height - 1 - margin,
        )

    @classmethod
    def resolve(
        cls,
        parent: Region,
        point_a: Coord | None = None,
        point_b: Coord | None = None,
        corner_radius: int = 0,
        border_width: int = 0,
        fill_color: RGBA | None = None,
        border_color: RGBA | None = None,
    ) -> Region:
        """Resolve a child region against *parent*.

        Parameters
        ----------
        parent : Region
            Containing region; its inner box clamps the result.
        point_a, point_b : tuple[int, int] | None
            Opposite corners in any order. Negative components count back
            from the parent's inner far edge. ``None`` selects the parent's
            inner top-left (a) or bottom-right (b).
        corner_radius, border_width : int
            Clamped to the region invariants.
        fill_color, border_color : RGBA | None
            ``None`` selects the documented defaults.

        Returns
        -------
        Region
            Child region, never larger than the parent's inner box.
        """
        lo_x, hi_x = parent.inner_left, parent.inner_right
        lo_y, hi_y = parent.inner_top, parent.inner_bottom

        ax, ay = point_a if point_a is not None else (lo_x, lo_y)
        bx, by = point_b if point_b is not None else (-1, -1)
        ax, bx = _from_far_edge(int(ax), hi_x), _from_far_edge(int(bx), hi_x)
        ay, by = _from_far_edge(int(ay), hi_y), _from_far_edge(int(by), hi_y)

        return cls.bounded(
            left=_clamp(min(ax, bx), lo_x, hi_x),
            top=_clamp(min(ay, by), lo_y, hi_y),
            right=_clamp(max(ax, bx), lo_x, hi_x),
            bottom=_clamp(max(ay, by), lo_y, hi_y),
            corner_radius=corner_radius,
            border_width=border_width,
            fill_color=fill_color,
            border_color=border_color,
        )

    # ------------------------------------------------------------------
    # Derived geometry
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self.right - self.left + 1

    @property
    def height(self) -> int:
        return self.bottom - self.top + 1

    @property
    def corners(self) -> tuple[Coord, Coord, Coord, Coord]:
        """Corner circle centres: top-left, top-right, bottom-right, bottom-left."""
        r = self.radius
        return (
            (self.left + r, self.top + r),
            (self.right - r, self.top + r),
            (self.right - r, self.bottom - r),
            (self.left + r, self.bottom - r),
        )

    @property
    def inner_left(self) -> int:
        return self.left + self.border

    @property
    def inner_right(self) -> int:
        return self.right - self.border

    @property
    def inner_top(self) -> int:
        return self.top + self.border

    @property
    def inner_bottom(self) -> int:
        return self.bottom - self.border

    @property
    def inner_box(self) -> tuple[int, int, int, int]:
        """Border-adjusted bounds ``(left, top, right, bottom)``."""
        return (self.inner_left, self.inner_top, self.inner_right, self.inner_bottom)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def contains(self, x: int, y: int) -> Containment:
        """Classify pixel ``(x, y)``.

        Order: bounds, rounded corner squares, border band, interior.
        """
        if x < self.left or x > self.right or y < self.top or y > self.bottom:
            return Containment.OUTSIDE

        if self.radius > 0:
            tl, tr, br, bl = self.corners
            corner = None
            if x < tl[0] and y < tl[1]:
                corner = tl
            elif x > tr[0] and y < tr[1]:
                corner = tr
            elif x > br[0] and y > br[1]:
                corner = br
            elif x < bl[0] and y > bl[1]:
                corner = bl
            if corner is not None:
                return circle_contains((x, y), corner, self.radius, self.border)

        if self.border > 0 and (
            x < self.inner_left
            or x > self.inner_right
            or y < self.inner_top
            or y > self.inner_bottom
        ):
            return Containment.BORDER
        return Containment.INSIDE

    def classify_window(self, left: int, top: int, right: int, bottom: int) -> np.ndarray:
        """Classify every pixel of an inclusive window.

        Parameters
        ----------
        left, top, right, bottom : int
            Window bounds in canvas pixels (may extend past the region).

        Returns
        -------
        np.ndarray
            Shape ``(bottom - top + 1, right - left + 1)``, dtype int8,
            holding Containment values. Matches contains() pixel for pixel.
        """
        ys, xs = np.mgrid[top:bottom + 1, left:right + 1]
        in_bounds = (
            (xs >= self.left) & (xs <= self.right)
            & (ys >= self.top) & (ys <= self.bottom)
        )
        out = np.where(in_bounds, Containment.INSIDE, Containment.OUTSIDE).astype(np.int8)

        if self.border > 0:
            band = in_bounds & (
                (xs < self.inner_left) | (xs > self.inner_right)
                | (ys < self.inner_top) | (ys > self.inner_bottom)
            )
            out[band] = Containment.BORDER

        if self.radius > 0:
            r = float(self.radius)
            tl, tr, br, bl = self.corners
            taken = np.zeros_like(in_bounds)
            for centre, square in (
                (tl, (xs < tl[0]) & (ys < tl[1])),
                (tr, (xs > tr[0]) & (ys < tr[1])),
                (br, (xs > br[0]) & (ys > br[1])),
                (bl, (xs < bl[0]) & (ys > bl[1])),
            ):
                # contains() checks the corners in order; the first match wins
                sel = in_bounds & square & ~taken
                taken |= sel
                dx = xs[sel].astype(np.float64) - centre[0]
                dy = ys[sel].astype(np.float64) - centre[1]
                d = np.sqrt(dx * dx + dy * dy)
                cls = np.where(
                    d > r,
                    Containment.OUTSIDE,
                    np.where(d >= r - self.border, Containment.BORDER, Containment.INSIDE),
                )
                out[sel] = cls
        return out

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paint(
        self,
        pixels: np.ndarray,
        parent: Region | None = None,
        window: tuple[int, int, int, int] | None = None,
    ) -> int:
        """Composite this region onto an ``(H, W, 4)`` uint8 pixel view.

        Parameters
        ----------
        pixels : np.ndarray
            Canvas pixels, modified in place.
        parent : Region | None
            Clip region; a pixel is written only when the parent classifies
            it as INSIDE. ``None`` disables clipping.
        window : tuple[int, int, int, int] | None
            Optional ``(left, top, right, bottom)`` limit on the pixels
            visited; defaults to the region bounds.

        Returns
        -------
        int
            Number of pixels written.
        """
        left, top, right, bottom = self.left, self.top, self.right, self.bottom
        if window is not None:
            left, top = max(left, window[0]), max(top, window[1])
            right, bottom = min(right, window[2]), min(bottom, window[3])
            if left > right or top > bottom:
                return 0

        target = pixels[top:bottom + 1, left:right + 1]
        cls = self.classify_window(left, top, right, bottom)
        if parent is not None:
            allowed = parent.classify_window(left, top, right, bottom) == Containment.INSIDE
        else:
            allowed = np.ones(cls.shape, dtype=bool)

        written = 0
        for code, color in (
            (Containment.BORDER, self.border_color),
            (Containment.INSIDE, self.fill_color),
        ):
            mask = (cls == code) & allowed
            count = int(mask.sum())
            if count:
                target[mask] = composite_array(target[mask], color)
                written += count
        return written
