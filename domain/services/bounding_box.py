from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import List, Optional, Tuple

from domain.models import (
    ArrowShape,
    BaseShape,
    BoundingBox,
    CircleShape,
    Drawable,
    EllipseShape,
    GeometryConfig,
    LineShape,
    Point,
    Position,
    RectangleShape,
    StrokeLine,
    TextAnnotation,
    TriangleShape,
)
from domain.ports.text_metrics import TextMetrics
from domain.services.text_metrics import EstimatedTextMetrics

logger = logging.getLogger(__name__)

# cos/sin for quarter turns, so 90/180/270 degree rotations stay exact.
_QUARTER_TURNS: Tuple[Tuple[float, float], ...] = ((1.0, 0.0), (0.0, 1.0), (-1.0, 0.0), (0.0, -1.0))


def bounding_box_of(
    primitive: Drawable,
    config: GeometryConfig | None = None,
    text_metrics: TextMetrics | None = None,
) -> BoundingBox:
    box = primitive_box(primitive, config, text_metrics)
    if box is None:
        # Empty strokes have no extent of their own.
        return BoundingBox(0.0, 0.0, 0.0, 0.0)
    return box


def primitive_box(
    primitive: Drawable,
    config: GeometryConfig | None = None,
    text_metrics: TextMetrics | None = None,
) -> Optional[BoundingBox]:
    """Untransformed box of any drawable, or None for a stroke without samples."""
    config = config or GeometryConfig()
    if isinstance(primitive, StrokeLine):
        return stroke_bounding_box(primitive)
    if isinstance(primitive, TextAnnotation):
        return text_bounding_box(primitive, text_metrics or EstimatedTextMetrics(config))
    return shape_bounding_box(primitive, config)


def shape_bounding_box(shape: BaseShape, config: GeometryConfig | None = None) -> BoundingBox:
    config = config or GeometryConfig()
    position = shape.position
    if isinstance(shape, RectangleShape):
        return BoundingBox.from_rect(position.x, position.y, shape.width, shape.height)
    if isinstance(shape, CircleShape):
        return BoundingBox(
            position.x - shape.radius,
            position.y - shape.radius,
            position.x + shape.radius,
            position.y + shape.radius,
        )
    if isinstance(shape, EllipseShape):
        return BoundingBox(
            position.x - shape.radius_x,
            position.y - shape.radius_y,
            position.x + shape.radius_x,
            position.y + shape.radius_y,
        )
    if isinstance(shape, ArrowShape):
        return expand_box(
            _segment_box(shape.start_point, shape.end_point),
            shape.arrow_size or config.default_arrow_size,
        )
    if isinstance(shape, LineShape):
        return _segment_box(shape.start_point, shape.end_point)
    if isinstance(shape, TriangleShape):
        box = _positions_box(shape.points)
        if box is None:
            logger.debug("Triangle %s has no vertices, using its position", shape.id)
            return BoundingBox(position.x, position.y, position.x, position.y)
        return box
    logger.debug("Unknown shape kind %r for %s, using default box", shape.type, shape.id)
    return BoundingBox.from_rect(
        position.x, position.y, config.unknown_shape_size, config.unknown_shape_size
    )


def stroke_bounding_box(stroke: StrokeLine) -> Optional[BoundingBox]:
    if len(stroke.points) < 2:
        return None
    xs = stroke.points[0::2]
    ys = stroke.points[1::2]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


def text_bounding_box(text: TextAnnotation, text_metrics: TextMetrics | None = None) -> BoundingBox:
    size = (text_metrics or EstimatedTextMetrics()).measure(text.text, text.font_size)
    return BoundingBox.from_rect(text.x, text.y, size.width, size.height)


def transformed_bounding_box_of(
    primitive: Drawable,
    config: GeometryConfig | None = None,
    text_metrics: TextMetrics | None = None,
) -> BoundingBox:
    local_box = bounding_box_of(primitive, config, text_metrics)
    if not isinstance(primitive, BaseShape):
        return local_box
    rotation = primitive.transform.rotation or 0.0
    if rotation == 0:
        return local_box
    return rotate_box(local_box, rotation)


def rotate_box(box: BoundingBox, degrees: float) -> BoundingBox:
    """AABB of ``box`` after rotating it about its own centre."""
    pivot = box.center
    rotated = [rotate_point(corner, pivot, degrees) for corner in box.corners()]
    return BoundingBox.from_points(rotated)  # type: ignore[return-value]


def rotate_point(point: Point, pivot: Point, degrees: float) -> Point:
    # Screen space has y pointing down, so positive angles turn clockwise.
    cos, sin = _cos_sin(degrees)
    dx = point.x - pivot.x
    dy = point.y - pivot.y
    return Point(dx * cos - dy * sin + pivot.x, dx * sin + dy * cos + pivot.y)


def contains_point(box: BoundingBox, point: Point, padding: float = 0.0) -> bool:
    return (
        box.min_x - padding <= point.x <= box.max_x + padding
        and box.min_y - padding <= point.y <= box.max_y + padding
    )


def boxes_intersect(first: BoundingBox, second: BoundingBox) -> bool:
    return not (
        first.max_x < second.min_x
        or first.min_x > second.max_x
        or first.max_y < second.min_y
        or first.min_y > second.max_y
    )


def expand_box(box: BoundingBox, padding: float) -> BoundingBox:
    return BoundingBox(
        box.min_x - padding,
        box.min_y - padding,
        box.max_x + padding,
        box.max_y + padding,
    )


def box_handles(box: BoundingBox) -> List[Point]:
    """Resize handles: the four corners clockwise from top-left, then the edge midpoints."""
    return [
        *box.corners(),
        Point(box.center_x, box.min_y),
        Point(box.max_x, box.center_y),
        Point(box.center_x, box.max_y),
        Point(box.min_x, box.center_y),
    ]


def _cos_sin(degrees: float) -> Tuple[float, float]:
    if not math.isfinite(degrees):
        return math.nan, math.nan
    if degrees % 90 == 0:
        return _QUARTER_TURNS[int(degrees // 90) % 4]
    radians = degrees * math.pi / 180
    return math.cos(radians), math.sin(radians)


def _segment_box(start: Position, end: Position) -> BoundingBox:
    return BoundingBox(
        min(start.x, end.x),
        min(start.y, end.y),
        max(start.x, end.x),
        max(start.y, end.y),
    )


def _positions_box(positions: Iterable[Position]) -> Optional[BoundingBox]:
    return BoundingBox.from_points(Point(item.x, item.y) for item in positions)
