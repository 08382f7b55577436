"""Mirror-symmetric box rendering (legacy fast path).

A single rounded box spanning the whole sprite is symmetric about both
centre lines, so only its top-left quadrant has to be classified; the other
three quadrants are copies.

Provides:
    - BoxSettings: box size, radius, border and colours
    - render_box_direct(): reference render of every pixel
    - render_box_quadrant(): top-left quadrant only
    - mirror_closed_form(): quadrant -> full box via an index formula
    - mirror_incremental(): same result via a division-free pixel walk
    - render_box_mirrored(): quadrant + mirror
    - border_box(): default-coloured box from width, height and radius

Invariants:
    - render_box_mirrored(s) == render_box_direct(s) byte for byte
    - Both mirror algorithms produce identical buffers
    - Buffers are flat uint8 arrays, 4 values per pixel, row-major
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional

import numpy as np

from spriteforge.raster.region import Region
from spriteforge.utils.color import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_BORDER_COLOR,
    DEFAULT_FILL_COLOR,
    RGBA,
    as_rgba,
)
from spriteforge.utils.validators import validate_size

logger = logging.getLogger(__name__)

MirrorAlgorithm = Literal["closed_form", "incremental"]
MIRROR_ALGORITHMS: tuple[str, ...] = ("closed_form", "incremental")


@dataclass(frozen=True, slots=True)
class BoxSettings:
    """Rounded box covering the whole sprite.

    Parameters
    ----------
    width, height : int
        Even, within [8, 4096].
    corner_radius : int
        Clamped to ``min(width // 2 - 1, height // 2 - 1)``.
    border_thickness : int
        Border band width (clamped like a Region border).
    border_color, inside_color, outside_color : RGBA | None
        ``None`` selects white, light grey and transparent.

    Raises
    ------
    CanvasSizeError
        If the dimensions are odd or out of range.
    """

    width: int = 32
    height: int = 32
    corner_radius: int = 3
    border_thickness: int = 1
    border_color: Optional[RGBA] = None
    inside_color: Optional[RGBA] = None
    outside_color: Optional[RGBA] = None

    def __post_init__(self) -> None:
        validate_size(self.width, self.height)

    def region(self) -> Region:
        """Box region spanning ``(0, 0)``-``(width - 1, height - 1)``."""
        return Region.bounded(
            0,
            0,
            self.width - 1,
            self.height - 1,
            corner_radius=self.corner_radius,
            border_width=self.border_thickness,
            fill_color=as_rgba(self.inside_color, DEFAULT_FILL_COLOR),
            border_color=as_rgba(self.border_color, DEFAULT_BORDER_COLOR),
        )

    @property
    def background(self) -> RGBA:
        return as_rgba(self.outside_color, DEFAULT_BACKGROUND_COLOR)


def _blank(width: int, height: int, color: RGBA) -> np.ndarray:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:] = color
    return pixels


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_box_direct(settings: BoxSettings) -> np.ndarray:
    """Classify and paint every pixel of the box; the reference result."""
    pixels = _blank(settings.width, settings.height, settings.background)
    settings.region().paint(pixels)
    return pixels.reshape(-1)


def render_box_quadrant(settings: BoxSettings) -> np.ndarray:
    """Render only the top-left ``width/2 x height/2`` quadrant.

    Returns
    -------
    np.ndarray
        Flat uint8 buffer of ``(width // 2) * (height // 2) * 4`` values.
    """
    qw, qh = settings.width // 2, settings.height // 2
    pixels = _blank(qw, qh, settings.background)
    settings.region().paint(pixels, window=(0, 0, qw - 1, qh - 1))
    return pixels.reshape(-1)


# ---------------------------------------------------------------------------
# Mirroring
# ---------------------------------------------------------------------------


def _quarter_pixels(quarter: np.ndarray, width: int, height: int) -> np.ndarray:
    qw, qh = width // 2, height // 2
    q = np.asarray(quarter, dtype=np.uint8).reshape(-1)
    if q.size != qw * qh * 4:
        raise ValueError(
            f"Quadrant buffer has {q.size} values, expected {qw * qh * 4} "
            f"for a {width}x{height} box"
        )
    return q.reshape(-1, 4)


def mirror_closed_form(quarter: np.ndarray, width: int, height: int) -> np.ndarray:
    """Expand a top-left quadrant to the full box with an index formula.

    Output column ``c`` reads quadrant column ``c`` below the vertical centre
    line and ``qw - 1 - (c mod qw)`` past it; output row ``r >= qh`` copies
    row ``height - 1 - r``.

    Parameters
    ----------
    quarter : np.ndarray
        ``(width // 2) * (height // 2)`` pixels, flat or shaped.
    width, height : int
        Full box size (even).

    Returns
    -------
    np.ndarray
        Flat uint8 buffer of ``width * height * 4`` values.
    """
    q = _quarter_pixels(quarter, width, height)
    qw, qh = width // 2, height // 2

    rows = np.arange(height)
    cols = np.arange(width)
    src_rows = np.where(rows >= qh, height - 1 - rows, rows)
    src_cols = np.where(cols >= qw, qw - 1 - (cols % qw), cols)
    index = src_rows[:, None] * qw + src_cols[None, :]
    return q[index.reshape(-1)].reshape(-1)


def mirror_incremental(quarter: np.ndarray, width: int, height: int) -> np.ndarray:
    """Expand a top-left quadrant by walking the top half pixel by pixel.

    The source index steps forward until the vertical centre line, holds
    for one pixel, then steps back; each pixel is also written at its point
    reflection ``(height - 1 - r, width - 1 - c)`` to fill the bottom half.
    Uses no division per pixel. Kept for parity with mirror_closed_form().
    """
    q = _quarter_pixels(quarter, width, height)
    qw = width // 2
    total = width * height
    out = np.empty((total, 4), dtype=np.uint8)

    last = total - 1
    col = 0
    row_start = 0
    src = 0
    for i in range(total // 2):
        if col == width:
            col = 0
            row_start += qw
            src = row_start
        elif col > 0:
            if col < qw:
                src += 1
            elif col > qw:
                src -= 1
        out[i] = q[src]
        out[last - i] = q[src]
        col += 1
    return out.reshape(-1)


_MIRRORS = {
    "closed_form": mirror_closed_form,
    "incremental": mirror_incremental,
}


def render_box_mirrored(settings: BoxSettings, algorithm: MirrorAlgorithm = "closed_form") -> np.ndarray:
    """Render the quadrant and mirror it to the full box.

    Raises
    ------
    ValueError
        If *algorithm* is not "closed_form" or "incremental".
    """
    try:
        mirror = _MIRRORS[algorithm]
    except KeyError:
        raise ValueError(
            f"Unknown mirror algorithm: {algorithm!r}. Use one of {MIRROR_ALGORITHMS}"
        ) from None
    quarter = render_box_quadrant(settings)
    logger.debug(
        "Mirroring %dx%d quadrant to %dx%d (%s)",
        settings.width // 2, settings.height // 2, settings.width, settings.height, algorithm,
    )
    return mirror(quarter, settings.width, settings.height)


def border_box(width: int, height: int, corner_radius: int) -> np.ndarray:
    """Default-styled box (1 px white border, grey inside, transparent corners)."""
    return render_box_direct(BoxSettings(width=width, height=height, corner_radius=corner_radius))
