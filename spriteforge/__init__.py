"""spriteforge: procedural RGBA sprite rasterization.

Layers (lowest first):
    - utils: colour compositing, containment geometry, validation, I/O, logging
    - ops: operation vocabulary (RectOp, HLineOp, VLineOp, PolyTileOp, NewLayer)
    - raster: region model, paint routines, canvas, symmetry fast path
    - configs: render configuration loader

Quick start:
    from spriteforge import Canvas, RectOp
    canvas = Canvas(16, 16).add_operation(RectOp(corner_radius=3))
    buffer = canvas.finalize()
"""

from .ops import HLineOp, NewLayer, Operation, PolyTileOp, RectOp, VLineOp
from .raster import (
    BoxSettings,
    Canvas,
    CanvasSizeError,
    CanvasState,
    CanvasStateError,
    Region,
    border_box,
    render_box_direct,
    render_box_mirrored,
)

__version__ = "0.3.0"

__all__ = [
    'Operation',
    'RectOp',
    'HLineOp',
    'VLineOp',
    'PolyTileOp',
    'NewLayer',
    'Region',
    'Canvas',
    'CanvasState',
    'CanvasSizeError',
    'CanvasStateError',
    'BoxSettings',
    'border_box',
    'render_box_direct',
    'render_box_mirrored',
]
