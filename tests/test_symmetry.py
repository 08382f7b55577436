"""Tests for the mirror-symmetric box fast path.

The mirrored render must match the direct render byte for byte, and the two
mirror algorithms must agree with each other on every size tried.
"""

from __future__ import annotations

import numpy as np
import pytest

from spriteforge.raster.symmetry import (
    MIRROR_ALGORITHMS,
    BoxSettings,
    border_box,
    mirror_closed_form,
    mirror_incremental,
    render_box_direct,
    render_box_mirrored,
    render_box_quadrant,
)
from spriteforge.utils.color import DEFAULT_BORDER_COLOR, DEFAULT_FILL_COLOR
from spriteforge.utils.validators import CanvasSizeError

MIRRORS = [mirror_closed_form, mirror_incremental]


def _quarter_3x3() -> np.ndarray:
    """3x3 quadrant whose red channel encodes ``10 * (col + 1) + row``."""
    q = np.zeros((3, 3, 4), dtype=np.uint8)
    for row in range(3):
        for col in range(3):
            q[row, col] = (10 * (col + 1) + row, 0, 0, 255)
    return q.reshape(-1)


# ---------------------------------------------------------------------------
# Mirroring
# ---------------------------------------------------------------------------


class TestMirror:
    @pytest.mark.parametrize("mirror", MIRRORS)
    def test_known_6x6(self, mirror) -> None:
        out = mirror(_quarter_3x3(), 6, 6).reshape(6, 6, 4)
        red = out[:, :, 0].tolist()
        assert red == [
            [10, 20, 30, 30, 20, 10],
            [11, 21, 31, 31, 21, 11],
            [12, 22, 32, 32, 22, 12],
            [12, 22, 32, 32, 22, 12],
            [11, 21, 31, 31, 21, 11],
            [10, 20, 30, 30, 20, 10],
        ]
        assert (out[:, :, 3] == 255).all()

    @pytest.mark.parametrize("size", [(6, 6), (8, 8), (8, 16), (16, 8), (10, 12), (64, 16)])
    def test_algorithms_agree(self, size, rng: np.random.Generator) -> None:
        w, h = size
        quarter = rng.integers(0, 256, size=(w // 2) * (h // 2) * 4, dtype=np.uint8)
        np.testing.assert_array_equal(
            mirror_closed_form(quarter, w, h), mirror_incremental(quarter, w, h)
        )

    @pytest.mark.parametrize("mirror", MIRRORS)
    def test_output_length(self, mirror) -> None:
        quarter = np.zeros(5 * 6 * 4, dtype=np.uint8)
        assert mirror(quarter, 10, 12).size == 10 * 12 * 4

    @pytest.mark.parametrize("mirror", MIRRORS)
    def test_wrong_quadrant_size(self, mirror) -> None:
        with pytest.raises(ValueError, match="Quadrant buffer"):
            mirror(np.zeros(10, dtype=np.uint8), 8, 8)


# ---------------------------------------------------------------------------
# Box rendering
# ---------------------------------------------------------------------------


class TestBoxRendering:
    def test_settings_defaults(self) -> None:
        s = BoxSettings()
        assert (s.width, s.height, s.corner_radius, s.border_thickness) == (32, 32, 3, 1)
        assert s.background == (0, 0, 0, 0)

    @pytest.mark.parametrize("size", [(7, 8), (8, 2), (4098, 8)])
    def test_settings_invalid_size(self, size) -> None:
        with pytest.raises(CanvasSizeError):
            BoxSettings(width=size[0], height=size[1])

    def test_radius_clamped(self) -> None:
        assert BoxSettings(corner_radius=32).region().radius == 15
        assert BoxSettings(width=32, height=16, corner_radius=32).region().radius == 7

    def test_quadrant_length(self) -> None:
        assert render_box_quadrant(BoxSettings(width=16, height=8)).size == 8 * 4 * 4

    @pytest.mark.parametrize(
        "size, radius, border",
        [
            ((8, 8), 2, 1),
            ((8, 16), 3, 1),
            ((32, 32), 3, 1),
            ((32, 32), 15, 4),
            ((64, 16), 7, 2),
            ((10, 12), 4, 0),
            ((16, 16), 0, 3),
        ],
    )
    @pytest.mark.parametrize("algorithm", MIRROR_ALGORITHMS)
    def test_mirrored_matches_direct(self, size, radius, border, algorithm) -> None:
        s = BoxSettings(width=size[0], height=size[1], corner_radius=radius, border_thickness=border)
        np.testing.assert_array_equal(render_box_mirrored(s, algorithm), render_box_direct(s))

    def test_custom_colors(self) -> None:
        s = BoxSettings(
            width=8, height=8, corner_radius=0, border_thickness=1,
            border_color=(1, 2, 3, 255), inside_color=(4, 5, 6, 255), outside_color=(7, 8, 9, 10),
        )
        out = render_box_mirrored(s).reshape(8, 8, 4)
        assert tuple(out[0, 0]) == (1, 2, 3, 255)
        assert tuple(out[4, 4]) == (4, 5, 6, 255)

    def test_unknown_algorithm(self) -> None:
        with pytest.raises(ValueError, match="Unknown mirror algorithm"):
            render_box_mirrored(BoxSettings(), "diagonal")  # type: ignore[arg-type]


class TestBorderBox:
    def test_pixels(self) -> None:
        out = border_box(8, 8, 2).reshape(8, 8, 4)
        assert tuple(out[0, 0]) == (0, 0, 0, 0)
        assert tuple(out[0, 1]) == (0, 0, 0, 0)
        assert tuple(out[0, 2]) == DEFAULT_BORDER_COLOR
        assert tuple(out[3, 3]) == DEFAULT_FILL_COLOR
        assert tuple(out[7, 7]) == (0, 0, 0, 0)

    def test_length(self) -> None:
        assert border_box(16, 8, 3).size == 16 * 8 * 4
