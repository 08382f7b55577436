"""Tests for the operation vocabulary and paint routines.

Validates dataclass defaults, immutability and validation, line placement,
polygon tiling (single classification per tile offset, replication, clip)
and exhaustive dispatch.
"""

from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from spriteforge.ops.operations import (
    HLineOp,
    NewLayer,
    Operation,
    PolyTileOp,
    RectOp,
    VLineOp,
)
from spriteforge.raster import painters
from spriteforge.raster.region import Region
from spriteforge.utils.color import DEFAULT_BORDER_COLOR, DEFAULT_FILL_COLOR
from spriteforge.utils.geometry import Containment

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
FULL_SQUARE = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def pixels() -> np.ndarray:
    return np.zeros((16, 16, 4), dtype=np.uint8)


@pytest.fixture()
def root() -> Region:
    return Region.root(16, 16)


@dataclasses.dataclass(frozen=True, slots=True)
class UnknownOp(Operation):
    pass


# ---------------------------------------------------------------------------
# Dataclass creation and immutability
# ---------------------------------------------------------------------------


class TestOperationDataclasses:
    def test_rect_defaults(self) -> None:
        op = RectOp()
        assert isinstance(op, Operation)
        assert op.point_a is None
        assert op.point_b is None
        assert op.corner_radius == 0
        assert op.border_width == 1
        assert op.fill_color is None
        assert op.border_color is None

    def test_line_defaults(self) -> None:
        for op in (HLineOp(), VLineOp()):
            assert op.thickness == 1
            assert op.offset == 0
            assert op.color is None

    def test_poly_tile_defaults(self) -> None:
        op = PolyTileOp()
        assert (op.x_count, op.y_count, op.resolution) == (1, 1, 4)
        assert op.polygon is None
        assert op.border_thickness == 0

    def test_new_layer(self) -> None:
        assert isinstance(NewLayer(), Operation)

    def test_frozen(self) -> None:
        op = RectOp(corner_radius=2)
        with pytest.raises(dataclasses.FrozenInstanceError):
            op.corner_radius = 3  # type: ignore[misc]

    def test_equality(self) -> None:
        assert RectOp(point_a=(1, 2)) == RectOp(point_a=(1, 2))
        assert HLineOp(offset=1) != VLineOp(offset=1)

    def test_bad_color(self) -> None:
        with pytest.raises(ValueError, match="fill_color must have 4 channels"):
            RectOp(fill_color=(1, 2, 3))
        with pytest.raises(ValueError, match="color must have 4 channels"):
            HLineOp(color=(1, 2))

    def test_bad_point(self) -> None:
        with pytest.raises(ValueError, match="point_a"):
            RectOp(point_a=(1, 2, 3))

    def test_bad_polygon_vertex(self) -> None:
        with pytest.raises(ValueError, match="polygon vertex 1"):
            PolyTileOp(polygon=((0.0, 0.0), (1.0,), (1.0, 1.0)))

    def test_oversized_values_accepted(self) -> None:
        op = RectOp(corner_radius=10_000, border_width=10_000)
        assert op.corner_radius == 10_000


# ---------------------------------------------------------------------------
# Rectangles
# ---------------------------------------------------------------------------


class TestApplyRect:
    def test_becomes_current_region(self, pixels: np.ndarray, root: Region) -> None:
        child = painters.apply_rect(RectOp(point_a=(2, 2), point_b=(9, 9)), root, pixels)
        assert (child.left, child.top, child.right, child.bottom) == (2, 2, 9, 9)
        assert tuple(pixels[2, 2]) == DEFAULT_BORDER_COLOR
        assert tuple(pixels[5, 5]) == DEFAULT_FILL_COLOR
        assert tuple(pixels[0, 0]) == (0, 0, 0, 0)

    def test_nested_rect_is_clipped(self, pixels: np.ndarray, root: Region) -> None:
        outer = painters.apply_rect(RectOp(border_width=2), root, pixels)
        painters.apply_rect(RectOp(point_a=(0, 0), point_b=(15, 15), border_width=0, fill_color=RED), outer, pixels)
        assert tuple(pixels[1, 1]) == DEFAULT_BORDER_COLOR
        assert tuple(pixels[2, 2]) == RED


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------


class TestLines:
    def test_hline_from_top(self, root: Region) -> None:
        rect = painters.line_as_rect(HLineOp(thickness=2, offset=3), root)
        assert rect is not None
        assert rect.point_a == (0, 3)
        assert rect.point_b == (15, 4)
        assert rect.border_width == 0
        assert rect.fill_color == DEFAULT_BORDER_COLOR

    def test_hline_from_bottom(self, root: Region) -> None:
        rect = painters.line_as_rect(HLineOp(thickness=2, offset=-1), root)
        assert rect is not None
        assert (rect.point_a[1], rect.point_b[1]) == (14, 15)

    def test_vline_from_right(self, root: Region) -> None:
        rect = painters.line_as_rect(VLineOp(offset=-3, color=RED), root)
        assert rect is not None
        assert rect.point_a == (13, 0)
        assert rect.point_b == (13, 15)
        assert rect.fill_color == RED

    def test_line_outside_region_skipped(self, pixels: np.ndarray, root: Region) -> None:
        assert painters.line_as_rect(HLineOp(offset=40), root) is None
        before = pixels.copy()
        assert painters.apply_line(HLineOp(offset=40), root, pixels) is root
        np.testing.assert_array_equal(pixels, before)

    def test_line_keeps_current_region(self, pixels: np.ndarray, root: Region) -> None:
        frame = Region.bounded(0, 0, 15, 15, border_width=2)
        assert painters.apply_line(VLineOp(offset=0, color=RED), frame, pixels) is frame
        assert tuple(pixels[5, 2]) == RED
        assert tuple(pixels[5, 1]) == (0, 0, 0, 0)

    def test_line_relative_to_inner_box(self, pixels: np.ndarray) -> None:
        frame = Region.bounded(0, 0, 15, 15, border_width=2)
        painters.apply_line(HLineOp(offset=1, color=BLUE), frame, pixels)
        assert tuple(pixels[3, 8]) == BLUE
        assert tuple(pixels[2, 8]) == (0, 0, 0, 0)
        assert tuple(pixels[3, 1]) == (0, 0, 0, 0)

    def test_thickness_clamped(self, root: Region) -> None:
        rect = painters.line_as_rect(HLineOp(thickness=0, offset=5), root)
        assert rect is not None
        assert rect.point_a[1] == rect.point_b[1] == 5


# ---------------------------------------------------------------------------
# Polygon tiles
# ---------------------------------------------------------------------------


class TestPolyTile:
    def test_full_square_covers_inner_box(self, pixels: np.ndarray, root: Region) -> None:
        op = PolyTileOp(x_count=4, y_count=4, polygon=FULL_SQUARE, fill_color=RED)
        painters.apply_poly_tile(op, root, pixels)
        assert (pixels.reshape(-1, 4) == RED).all()

    def test_tiles_identical(self, pixels: np.ndarray, root: Region) -> None:
        op = PolyTileOp(x_count=4, y_count=2, resolution=6, border_thickness=1, fill_color=RED, border_color=BLUE)
        painters.apply_poly_tile(op, root, pixels)
        first = pixels[0:8, 0:4]
        for ty in range(2):
            for tx in range(4):
                tile = pixels[ty * 8:(ty + 1) * 8, tx * 4:(tx + 1) * 4]
                np.testing.assert_array_equal(tile, first)
        assert (first.reshape(-1, 4) == RED).all(axis=1).any()

    def test_each_offset_classified_once(self, monkeypatch, pixels: np.ndarray, root: Region) -> None:
        calls = []
        original = painters.point_in_polygon

        def counting(polygon, p, border_thickness=0):
            calls.append(p)
            return original(polygon, p, border_thickness)

        monkeypatch.setattr(painters, "point_in_polygon", counting)
        painters.apply_poly_tile(PolyTileOp(x_count=4, y_count=4, resolution=8), root, pixels)
        assert 0 < len(calls) <= 16
        assert len(set(calls)) == len(calls)

    def test_respects_clip(self, pixels: np.ndarray) -> None:
        frame = Region.bounded(0, 0, 15, 15, corner_radius=5)
        op = PolyTileOp(x_count=2, y_count=2, polygon=FULL_SQUARE, fill_color=RED)
        painters.apply_poly_tile(op, frame, pixels)
        assert tuple(pixels[0, 0]) == (0, 0, 0, 0)
        assert tuple(pixels[8, 8]) == RED

    def test_uses_inner_box(self, pixels: np.ndarray) -> None:
        frame = Region.bounded(0, 0, 15, 15, border_width=2)
        op = PolyTileOp(polygon=FULL_SQUARE, fill_color=RED)
        painters.apply_poly_tile(op, frame, pixels)
        assert tuple(pixels[1, 1]) == (0, 0, 0, 0)
        assert tuple(pixels[2, 2]) == RED
        assert tuple(pixels[13, 13]) == RED

    def test_counts_clamped(self, pixels: np.ndarray, root: Region) -> None:
        op = PolyTileOp(x_count=100, y_count=0, polygon=FULL_SQUARE, fill_color=RED)
        painters.apply_poly_tile(op, root, pixels)
        assert (pixels.reshape(-1, 4) == RED).all()

    def test_generated_polygon_defaults(self, root: Region) -> None:
        shape = painters.tile_polygon(PolyTileOp(resolution=4), 5, 5)
        assert shape == [(4, 2), (2, 4), (0, 2), (2, 0)]
        assert len(painters.tile_polygon(PolyTileOp(resolution=1), 5, 5)) == 3

    def test_border_and_fill_colors(self, pixels: np.ndarray, root: Region) -> None:
        op = PolyTileOp(polygon=FULL_SQUARE, border_thickness=1, fill_color=RED, border_color=BLUE)
        painters.apply_poly_tile(op, root, pixels)
        assert tuple(pixels[0, 0]) == BLUE
        assert tuple(pixels[0, 7]) == BLUE
        assert tuple(pixels[8, 8]) == RED


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestApplyOperation:
    def test_new_layer_returns_root(self, pixels: np.ndarray, root: Region) -> None:
        child = Region.bounded(2, 2, 9, 9)
        assert painters.apply_operation(NewLayer(), child, root, pixels) is root

    def test_rect_returns_child(self, pixels: np.ndarray, root: Region) -> None:
        child = painters.apply_operation(RectOp(point_a=(4, 4)), root, root, pixels)
        assert child.left == 4

    def test_lines_and_tiles_keep_current(self, pixels: np.ndarray, root: Region) -> None:
        for op in (HLineOp(), VLineOp(), PolyTileOp()):
            assert painters.apply_operation(op, root, root, pixels) is root

    def test_unknown_type(self, pixels: np.ndarray, root: Region) -> None:
        with pytest.raises(TypeError, match="UnknownOp"):
            painters.apply_operation(UnknownOp(), root, root, pixels)

    def test_containment_enum_values(self) -> None:
        assert [c.value for c in Containment] == [0, 1, 2]
