from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SHAPE_RECTANGLE = "rectangle"
SHAPE_CIRCLE = "circle"
SHAPE_ELLIPSE = "ellipse"
SHAPE_LINE = "line"
SHAPE_ARROW = "arrow"
SHAPE_TRIANGLE = "triangle"

DEFAULT_FILL_COLOR = "#3B82F6"
DEFAULT_STROKE_COLOR = "#1E40AF"
DEFAULT_TEXT_COLOR = "#C5C6C7"
DEFAULT_LINE_COLOR = "#66FCF1"


class CanvasModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Position(CanvasModel):
    x: float
    y: float


class ShapeStyle(CanvasModel):
    fill: str = DEFAULT_FILL_COLOR
    has_fill: bool = True
    stroke: str = DEFAULT_STROKE_COLOR
    stroke_width: float = 2.0


class Transform(CanvasModel):
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0


class CanvasObject(CanvasModel):
    id: str = Field(..., min_length=1)
    z_index: int = 0
    visible: bool = True
    opacity: float = 1.0
    locked: bool = False


class BaseShape(CanvasObject):
    type: str
    position: Position
    style: ShapeStyle = Field(default_factory=ShapeStyle)
    transform: Transform = Field(default_factory=Transform)


class RectangleShape(BaseShape):
    type: Literal["rectangle"] = SHAPE_RECTANGLE
    width: float
    height: float
    corner_radius: float = 0.0


class CircleShape(BaseShape):
    type: Literal["circle"] = SHAPE_CIRCLE
    radius: float


class EllipseShape(BaseShape):
    type: Literal["ellipse"] = SHAPE_ELLIPSE
    radius_x: float
    radius_y: float


class LineShape(BaseShape):
    type: Literal["line"] = SHAPE_LINE
    start_point: Position
    end_point: Position


class ArrowShape(BaseShape):
    type: Literal["arrow"] = SHAPE_ARROW
    start_point: Position
    end_point: Position
    arrow_at_start: bool = False
    arrow_at_end: bool = True
    arrow_size: float = 10.0


class TriangleShape(BaseShape):
    type: Literal["triangle"] = SHAPE_TRIANGLE
    points: List[Position]

    @field_validator("points", mode="after")
    @classmethod
    def ensure_three_vertices(cls, points: List[Position]) -> List[Position]:
        if len(points) != 3:
            msg = f"Triangle requires exactly 3 points, got {len(points)}"
            raise ValueError(msg)
        return points


class UnknownShape(BaseShape):
    """Shape of a kind this engine does not know; extra geometry is kept as is."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="allow"
    )


Shape = Union[
    RectangleShape,
    CircleShape,
    EllipseShape,
    LineShape,
    ArrowShape,
    TriangleShape,
    UnknownShape,
]

SHAPE_MODELS: dict[str, type[BaseShape]] = {
    SHAPE_RECTANGLE: RectangleShape,
    SHAPE_CIRCLE: CircleShape,
    SHAPE_ELLIPSE: EllipseShape,
    SHAPE_LINE: LineShape,
    SHAPE_ARROW: ArrowShape,
    SHAPE_TRIANGLE: TriangleShape,
}


def parse_shape(payload: Mapping[str, Any] | BaseShape) -> Shape:
    if isinstance(payload, BaseShape):
        return payload  # type: ignore[return-value]
    model = SHAPE_MODELS.get(str(payload.get("type", "")), UnknownShape)
    return model.model_validate(dict(payload))  # type: ignore[return-value]


class StrokeLine(CanvasObject):
    points: List[float] = Field(default_factory=list)
    color: str = DEFAULT_LINE_COLOR
    stroke_width: float = 2.0
    brush_type: Optional[str] = None

    @field_validator("points", mode="after")
    @classmethod
    def ensure_coordinate_pairs(cls, points: List[float]) -> List[float]:
        if len(points) % 2:
            msg = f"Stroke points must be interleaved x,y pairs, got {len(points)} values"
            raise ValueError(msg)
        return points

    def samples(self) -> List[Tuple[float, float]]:
        return list(zip(self.points[0::2], self.points[1::2]))


class TextAnnotation(CanvasObject):
    x: float
    y: float
    text: str = ""
    font_size: float = 18.0
    color: str = DEFAULT_TEXT_COLOR
    font_family: str = "Arial"
    rotation: float = 0.0


Drawable = Union[Shape, StrokeLine, TextAnnotation]


class CanvasSnapshot(CanvasModel):
    shapes: List[Shape] = Field(default_factory=list)
    lines: List[StrokeLine] = Field(default_factory=list)
    texts: List[TextAnnotation] = Field(default_factory=list)

    @field_validator("shapes", mode="before")
    @classmethod
    def dispatch_shape_kinds(cls, shapes: object) -> object:
        if isinstance(shapes, list):
            return [parse_shape(item) if isinstance(item, Mapping) else item for item in shapes]
        return shapes

    def drawables(self) -> List[Drawable]:
        return [*self.shapes, *self.lines, *self.texts]


class CameraState(CanvasModel):
    position_x: float = 0.0
    position_y: float = 0.0
    zoom: float = Field(default=1.0, gt=0)


class RemoteCursor(CanvasModel):
    name: str
    color: str
    cursor: Optional[Position] = None


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Size:
    width: float
    height: float


SurfaceSize = Size


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def x(self) -> float:
        return self.min_x

    @property
    def y(self) -> float:
        return self.min_y

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center_x(self) -> float:
        return self.min_x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.min_y + self.height / 2

    @property
    def center(self) -> Point:
        return Point(self.center_x, self.center_y)

    @property
    def top_left(self) -> Point:
        return Point(self.min_x, self.min_y)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        return (
            Point(self.min_x, self.min_y),
            Point(self.max_x, self.min_y),
            Point(self.max_x, self.max_y),
            Point(self.min_x, self.max_y),
        )

    @classmethod
    def from_rect(cls, x: float, y: float, width: float, height: float) -> BoundingBox:
        return cls(x, y, x + width, y + height)

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> Optional[BoundingBox]:
        xs: List[float] = []
        ys: List[float] = []
        for point in points:
            xs.append(point.x)
            ys.append(point.y)
        if not xs:
            return None
        return cls(min(xs), min(ys), max(xs), max(ys))


@dataclass(frozen=True)
class GeometryConfig:
    overview_size: Size = Size(200, 140)
    padding: float = 40.0
    default_region: Size = Size(1000, 700)
    default_arrow_size: float = 10.0
    unknown_shape_size: float = 100.0
    default_font_size: float = 18.0
    char_width_ratio: float = 0.6
    line_height_ratio: float = 1.2
    min_extent_size: float = 1.0
    stroke_sample_limit: int = 50
