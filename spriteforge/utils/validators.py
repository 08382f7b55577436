"""Sprite document schema validation and loading.

Provides centralized validation for sprite documents (sprite.v1.yaml) using
pydantic:
    - Canvas block: size, margin, background colour
    - Operation list: a discriminated union on the ``op`` key
      (rect, hline, vline, poly_tile, new_layer)
    - Size rules shared by Canvas and the symmetry path (validate_size)

Documents fail fast with actionable messages (offending key, expected range).
Visual parameters that the renderer clamps (radius, border, counts) are only
checked for sign here.

Units:
    - Geometry: pixels, top-left origin, +Y down
    - Colour: RGBA, integer channels 0..255

Usage:
    from spriteforge.utils import validators

    doc = validators.load_sprite_doc("configs/examples/icon.yaml")
    canvas = validators.build_canvas(doc)
    buffer = canvas.finalize()

Example document:
    schema: sprite.v1
    name: icon
    canvas: {width: 32, height: 32, margin: 1}
    operations:
      - {op: rect, corner_radius: 4, border_width: 1}
      - {op: hline, offset: 3, color: [255, 0, 0, 255]}
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, List, Literal, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

if TYPE_CHECKING:
    from spriteforge.ops.operations import Operation
    from spriteforge.raster.canvas import Canvas


MIN_SIZE = 8
MAX_SIZE = 4096

ColorField = Optional[Tuple[int, int, int, int]]


class CanvasSizeError(ValueError):
    """Canvas or box dimensions are odd or outside [MIN_SIZE, MAX_SIZE]."""


def validate_size(width: int, height: int) -> None:
    """Check sprite dimensions.

    Parameters
    ----------
    width, height : int
        Pixel dimensions.

    Raises
    ------
    CanvasSizeError
        If either dimension is odd or outside ``[MIN_SIZE, MAX_SIZE]``.
    """
    for name, value in (("width", width), ("height", height)):
        if not MIN_SIZE <= value <= MAX_SIZE:
            raise CanvasSizeError(
                f"{name}={value} out of range [{MIN_SIZE}, {MAX_SIZE}]"
            )
        if value % 2:
            raise CanvasSizeError(f"{name}={value} must be even")


def _check_channels(v: ColorField) -> ColorField:
    if v is not None and any(not 0 <= c <= 255 for c in v):
        raise ValueError(f"RGBA channels must be in [0, 255], got {list(v)}")
    return v


# ============================================================================
# CANVAS
# ============================================================================

class CanvasSpecV1(BaseModel):
    """Canvas block of a sprite document."""
    model_config = ConfigDict(extra='forbid')

    width: int = Field(..., description="Canvas width in pixels (even, 8..4096)")
    height: int = Field(..., description="Canvas height in pixels (even, 8..4096)")
    margin: int = Field(0, ge=0, description="Inset of the paint area (clamped)")
    background_color: ColorField = Field(None, description="Initial RGBA fill")

    @field_validator('background_color')
    @classmethod
    def validate_background(cls, v: ColorField) -> ColorField:
        return _check_channels(v)

    @model_validator(mode='after')
    def validate_dimensions(self) -> 'CanvasSpecV1':
        validate_size(self.width, self.height)
        return self


# ============================================================================
# OPERATIONS
# ============================================================================

class RectOpV1(BaseModel):
    """``op: rect`` -- rounded rectangle that becomes the current region."""
    model_config = ConfigDict(extra='forbid')

    op: Literal["rect"]
    point_a: Optional[Tuple[int, int]] = Field(None, description="First corner (x, y); negative from far edge")
    point_b: Optional[Tuple[int, int]] = Field(None, description="Opposite corner (x, y)")
    corner_radius: int = Field(0, ge=0)
    border_width: int = Field(1, ge=0)
    fill_color: ColorField = None
    border_color: ColorField = None

    @field_validator('fill_color', 'border_color')
    @classmethod
    def validate_colors(cls, v: ColorField) -> ColorField:
        return _check_channels(v)

    def to_operation(self) -> Operation:
        from spriteforge.ops.operations import RectOp

        return RectOp(
            point_a=self.point_a,
            point_b=self.point_b,
            corner_radius=self.corner_radius,
            border_width=self.border_width,
            fill_color=self.fill_color,
            border_color=self.border_color,
        )


class HLineOpV1(BaseModel):
    """``op: hline`` -- horizontal line inside the current region."""
    model_config = ConfigDict(extra='forbid')

    op: Literal["hline"]
    thickness: int = Field(1, ge=1)
    offset: int = 0
    color: ColorField = None

    @field_validator('color')
    @classmethod
    def validate_color(cls, v: ColorField) -> ColorField:
        return _check_channels(v)

    def to_operation(self) -> Operation:
        from spriteforge.ops.operations import HLineOp

        return HLineOp(thickness=self.thickness, offset=self.offset, color=self.color)


class VLineOpV1(BaseModel):
    """``op: vline`` -- vertical line inside the current region."""
    model_config = ConfigDict(extra='forbid')

    op: Literal["vline"]
    thickness: int = Field(1, ge=1)
    offset: int = 0
    color: ColorField = None

    @field_validator('color')
    @classmethod
    def validate_color(cls, v: ColorField) -> ColorField:
        return _check_channels(v)

    def to_operation(self) -> Operation:
        from spriteforge.ops.operations import VLineOp

        return VLineOp(thickness=self.thickness, offset=self.offset, color=self.color)


class PolyTileOpV1(BaseModel):
    """``op: poly_tile`` -- polygon pattern tiled over the current region."""
    model_config = ConfigDict(extra='forbid')

    op: Literal["poly_tile"]
    x_count: int = Field(1, ge=1)
    y_count: int = Field(1, ge=1)
    resolution: int = Field(4, ge=3, description="Vertices of the generated polygon")
    polygon: Optional[List[Tuple[float, float]]] = Field(
        None, description="Unit-square vertices [[u, v], ...]"
    )
    border_thickness: int = Field(0, ge=0)
    fill_color: ColorField = None
    border_color: ColorField = None

    @field_validator('polygon')
    @classmethod
    def validate_polygon(cls, v: Optional[List[Tuple[float, float]]]) -> Optional[List[Tuple[float, float]]]:
        if v is None:
            return v
        if len(v) < 3:
            raise ValueError(f"polygon needs at least 3 vertices, got {len(v)}")
        for i, (u, w) in enumerate(v):
            if not (0.0 <= u <= 1.0 and 0.0 <= w <= 1.0):
                raise ValueError(f"polygon vertex {i} ({u}, {w}) outside the unit square")
        return v

    @field_validator('fill_color', 'border_color')
    @classmethod
    def validate_colors(cls, v: ColorField) -> ColorField:
        return _check_channels(v)

    def to_operation(self) -> Operation:
        from spriteforge.ops.operations import PolyTileOp

        return PolyTileOp(
            x_count=self.x_count,
            y_count=self.y_count,
            resolution=self.resolution,
            polygon=tuple(self.polygon) if self.polygon is not None else None,
            border_thickness=self.border_thickness,
            fill_color=self.fill_color,
            border_color=self.border_color,
        )


class NewLayerV1(BaseModel):
    """``op: new_layer`` -- reset the current region to the canvas root."""
    model_config = ConfigDict(extra='forbid')

    op: Literal["new_layer"]

    def to_operation(self) -> Operation:
        from spriteforge.ops.operations import NewLayer

        return NewLayer()


OperationV1 = Annotated[
    Union[RectOpV1, HLineOpV1, VLineOpV1, PolyTileOpV1, NewLayerV1],
    Field(discriminator='op'),
]


# ============================================================================
# DOCUMENT
# ============================================================================

class SpriteDocV1(BaseModel):
    """Sprite document (sprite.v1.yaml schema)."""
    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    schema_version: str = Field("sprite.v1", alias="schema", description="Schema version")
    name: str = Field(..., min_length=1, description="Sprite name (output file stem)")
    canvas: CanvasSpecV1
    operations: List[OperationV1] = Field(default_factory=list)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "sprite.v1":
            raise ValueError(f"Expected schema 'sprite.v1', got '{v}'")
        return v

    def to_operations(self) -> List[Operation]:
        """Operations in document order."""
        return [spec.to_operation() for spec in self.operations]


# ============================================================================
# PUBLIC API
# ============================================================================

def parse_sprite_doc(data: dict, source: str = "<memory>") -> SpriteDocV1:
    """Validate an already-parsed sprite document.

    Raises
    ------
    ValueError
        If validation fails; the message names *source* and the offending key.
    """
    try:
        return SpriteDocV1.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Sprite document validation failed at {source}: {e}") from e


def load_sprite_doc(path: Union[str, Path]) -> SpriteDocV1:
    """Load and validate a sprite document from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to a sprite.v1 YAML file

    Returns
    -------
    SpriteDocV1
        Validated document

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If the file is not valid YAML or validation fails (with actionable
        error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sprite document not found: {path}")

    try:
        data = fs.load_yaml(path)
    except yaml.YAMLError as e:
        raise ValueError(f"Sprite document is not valid YAML: {path}: {e}") from e
    return parse_sprite_doc(data, source=str(path))


def build_canvas(doc: SpriteDocV1) -> Canvas:
    """Create a Canvas from *doc* with every operation appended (not finalized)."""
    from spriteforge.raster.canvas import Canvas

    canvas = Canvas(
        doc.canvas.width,
        doc.canvas.height,
        margin=doc.canvas.margin,
        background_color=doc.canvas.background_color,
    )
    canvas.extend(doc.to_operations())
    return canvas
