"""Sprite operation vocabulary.

Convenience imports:
    from spriteforge.ops import RectOp, HLineOp, VLineOp, PolyTileOp, NewLayer
"""

from .operations import (
    OPERATION_TYPES,
    HLineOp,
    NewLayer,
    Operation,
    PolyTileOp,
    RectOp,
    VLineOp,
)

__all__ = [
    'OPERATION_TYPES',
    'Operation',
    'RectOp',
    'HLineOp',
    'VLineOp',
    'PolyTileOp',
    'NewLayer',
]
