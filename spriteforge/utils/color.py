"""RGBA pixel compositing.

Provides:
    - composite(): Alpha-weighted merge of one RGBA pixel onto another
    - composite_array(): Same rule applied to an (N, 4) uint8 pixel array
    - as_rgba(): Normalise any 4-sequence to an RGBA tuple

Used by:
    - Region painting: border / fill colours onto the canvas buffer
    - PolyTile painting: replicated tile colours
    - Symmetry path: box colours onto the outside colour

Compositing rule (src onto dst):
    - dst.a == 0 or src.a == 255  ->  src
    - src.a == 0                  ->  dst
    - otherwise weights wd = dst.a / (dst.a + src.a), ws = src.a / (dst.a + src.a)
      rgb = trunc(min(255, dst.rgb * wd + src.rgb * ws))
      a   = min(255, dst.a + src.a)

Invariants:
    - Channels are integers in [0, 255]
    - The operation is asymmetric; argument order matters
    - composite_array() agrees exactly with composite() for every pixel
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

RGBA = tuple[int, int, int, int]
"""One pixel: red, green, blue, alpha (0..255 each)."""

TRANSPARENT: RGBA = (0, 0, 0, 0)
DEFAULT_BORDER_COLOR: RGBA = (255, 255, 255, 255)
DEFAULT_FILL_COLOR: RGBA = (200, 200, 200, 255)
DEFAULT_BACKGROUND_COLOR: RGBA = TRANSPARENT


def as_rgba(value: Sequence[int] | None, default: RGBA = TRANSPARENT) -> RGBA:
    """Normalise a colour to an RGBA tuple.

    Parameters
    ----------
    value : Sequence[int] | None
        Four channel values. ``None`` selects *default*.
    default : RGBA
        Colour used when *value* is ``None``.

    Returns
    -------
    RGBA
        Tuple of four ints, each clamped into [0, 255].

    Raises
    ------
    ValueError
        If *value* does not have exactly four channels.
    """
    if value is None:
        return default
    if len(value) != 4:
        raise ValueError(f"RGBA colour needs 4 channels, got {len(value)}: {value!r}")
    r, g, b, a = (min(255, max(0, int(c))) for c in value)
    return (r, g, b, a)


def composite(dst: Sequence[int], src: Sequence[int]) -> RGBA:
    """Composite *src* onto *dst*.

    Parameters
    ----------
    dst : Sequence[int]
        Existing pixel (RGBA).
    src : Sequence[int]
        Pixel being painted (RGBA).

    Returns
    -------
    RGBA
        Resulting pixel.

    Examples
    --------
    >>> composite((0, 0, 255, 128), (255, 0, 0, 128))
    (127, 0, 127, 255)
    """
    if dst[3] == 0 or src[3] == 255:
        return (int(src[0]), int(src[1]), int(src[2]), int(src[3]))
    if src[3] == 0:
        return (int(dst[0]), int(dst[1]), int(dst[2]), int(dst[3]))

    sum_alpha = float(dst[3]) + float(src[3])
    wd = dst[3] / sum_alpha
    ws = src[3] / sum_alpha

    r = int(min(255.0, dst[0] * wd + src[0] * ws))
    g = int(min(255.0, dst[1] * wd + src[1] * ws))
    b = int(min(255.0, dst[2] * wd + src[2] * ws))
    a = int(min(255, int(dst[3]) + int(src[3])))
    return (r, g, b, a)


def composite_array(dst: np.ndarray, src: Sequence[int]) -> np.ndarray:
    """Composite a single colour onto many pixels at once.

    Parameters
    ----------
    dst : np.ndarray
        Existing pixels, shape (N, 4), dtype uint8.
    src : Sequence[int]
        Colour being painted (RGBA).

    Returns
    -------
    np.ndarray
        New pixels, shape (N, 4), dtype uint8. *dst* is not modified.

    Notes
    -----
    Weights are computed in float64, the same precision composite() uses,
    so both paths truncate to identical integers.
    """
    src_arr = np.asarray(src, dtype=np.uint8)
    if dst.size == 0 or src_arr[3] == 255:
        return np.broadcast_to(src_arr, dst.shape).copy()

    # Transparent destination pixels take the source colour verbatim, even a
    # fully transparent one
    empty = dst[:, 3] == 0
    if src_arr[3] == 0:
        out = dst.copy()
        out[empty] = src_arr
        return out

    dst_f = dst.astype(np.float64)
    src_f = src_arr.astype(np.float64)
    sum_alpha = dst_f[:, 3:4] + src_f[3]
    wd = dst_f[:, 3:4] / sum_alpha
    ws = src_f[3] / sum_alpha

    out = np.empty_like(dst)
    out[:, :3] = np.minimum(255.0, dst_f[:, :3] * wd + src_f[:3] * ws).astype(np.uint8)
    out[:, 3] = np.minimum(255.0, dst_f[:, 3] + src_f[3]).astype(np.uint8)
    out[empty] = src_arr
    return out
