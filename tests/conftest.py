"""Shared fixtures for the spriteforge test suite."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from spriteforge.raster.canvas import Canvas
from spriteforge.utils import logging_config

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture()
def repo_root() -> Path:
    return REPO_ROOT


@pytest.fixture()
def example_sprite_path() -> Path:
    """Example document bundled with the package."""
    return REPO_ROOT / "spriteforge" / "configs" / "examples" / "icon.yaml"


@pytest.fixture()
def pixel() -> Callable[[Canvas, int, int], tuple[int, ...]]:
    """Read pixel ``(x, y)`` of a canvas as a plain RGBA tuple."""

    def _pixel(canvas: Canvas, x: int, y: int) -> tuple[int, ...]:
        return tuple(int(c) for c in canvas.pixels[y, x])

    return _pixel


@pytest.fixture()
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture()
def restore_logging():
    """setup_logging() replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
    logging_config.pop_context()
