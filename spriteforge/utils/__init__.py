"""Leaf utilities shared by every other spriteforge package.

Modules:
    - color: RGBA defaults and src-over-dst compositing
    - geometry: Containment enum, polygon and circle classification
    - validators: sprite.v1 document models and the canvas size rule
    - fs: atomic writes and YAML I/O
    - hashing: sha256 digests for output sidecars
    - logging_config: root handler setup and contextual log fields

Nothing here imports ops/ or raster/ at module import time; validators pulls
them in lazily when converting documents.

Convenience imports:
    from spriteforge.utils import color, geometry, validators
    from spriteforge.utils import setup_logging, push_context
"""

from . import color
from . import fs
from . import geometry
from . import hashing
from . import logging_config
from . import validators

from .logging_config import get_logger, pop_context, push_context, setup_logging

__all__ = [
    'color',
    'fs',
    'geometry',
    'hashing',
    'logging_config',
    'validators',
    'setup_logging',
    'get_logger',
    'push_context',
    'pop_context',
]
