"""Rasterization: region model, paint routines, canvas and symmetry path.

Convenience imports:
    from spriteforge.raster import Canvas, Region, BoxSettings
"""

from .canvas import Canvas, CanvasSizeError, CanvasState, CanvasStateError
from .region import Region
from .symmetry import (
    BoxSettings,
    border_box,
    mirror_closed_form,
    mirror_incremental,
    render_box_direct,
    render_box_mirrored,
    render_box_quadrant,
)

__all__ = [
    'Canvas',
    'CanvasSizeError',
    'CanvasState',
    'CanvasStateError',
    'Region',
    'BoxSettings',
    'border_box',
    'mirror_closed_form',
    'mirror_incremental',
    'render_box_direct',
    'render_box_mirrored',
    'render_box_quadrant',
]
