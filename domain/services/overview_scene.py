from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from domain.models import (
    ArrowShape,
    BaseShape,
    BoundingBox,
    CameraState,
    CanvasSnapshot,
    CircleShape,
    EllipseShape,
    GeometryConfig,
    LineShape,
    Point,
    RemoteCursor,
    StrokeLine,
    SurfaceSize,
    TextAnnotation,
    TriangleShape,
)
from domain.ports.text_metrics import TextMetrics
from domain.services.aggregate_bounds import world_extent
from domain.services.bounding_box import text_bounding_box, transformed_bounding_box_of
from domain.services.camera import camera_viewport
from domain.services.overview_mapping import OverviewMapping, build_overview_mapping
from domain.services.text_metrics import EstimatedTextMetrics

MIN_SHAPE_SIDE = 1.5
MIN_SHAPE_RADIUS = 1.0
MIN_TEXT_WIDTH = 3.0
MIN_TEXT_HEIGHT = 1.5
MIN_STROKE_WIDTH = 0.5
MIN_VIEWPORT_SIDE = 2.0


@dataclass(frozen=True)
class OverviewRect:
    id: str
    x: float
    y: float
    width: float
    height: float
    fill: Optional[str]
    stroke: Optional[str]


@dataclass(frozen=True)
class OverviewCircle:
    id: str
    center: Point
    radius: float
    fill: Optional[str]
    stroke: str


@dataclass(frozen=True)
class OverviewEllipse:
    id: str
    center: Point
    radius_x: float
    radius_y: float
    fill: Optional[str]
    stroke: str


@dataclass(frozen=True)
class OverviewPolygon:
    id: str
    points: Tuple[Point, ...]
    fill: Optional[str]
    stroke: str


@dataclass(frozen=True)
class OverviewSegment:
    id: str
    start: Point
    end: Point
    stroke: str


@dataclass(frozen=True)
class OverviewPolyline:
    id: str
    points: Tuple[Point, ...]
    stroke: str
    stroke_width: float


@dataclass(frozen=True)
class OverviewCursor:
    name: str
    color: str
    position: Point


OverviewShape = Union[
    OverviewRect, OverviewCircle, OverviewEllipse, OverviewPolygon, OverviewSegment
]


@dataclass(frozen=True)
class OverviewScene:
    mapping: OverviewMapping
    camera_view: BoundingBox
    viewport: BoundingBox
    shapes: List[OverviewShape] = field(default_factory=list)
    strokes: List[OverviewPolyline] = field(default_factory=list)
    texts: List[OverviewRect] = field(default_factory=list)
    cursors: List[OverviewCursor] = field(default_factory=list)


def build_overview_scene(
    snapshot: CanvasSnapshot,
    camera: CameraState,
    surface: SurfaceSize,
    config: GeometryConfig | None = None,
    cursors: Iterable[RemoteCursor] = (),
    text_metrics: TextMetrics | None = None,
) -> OverviewScene:
    config = config or GeometryConfig()
    text_metrics = text_metrics or EstimatedTextMetrics(config)
    extent = world_extent(snapshot, camera, surface, config, text_metrics)
    mapping = build_overview_mapping(extent, config.overview_size, config)
    camera_view = camera_viewport(camera, surface)
    return OverviewScene(
        mapping=mapping,
        camera_view=camera_view,
        viewport=viewport_indicator(mapping, camera_view),
        shapes=[
            _shape_geometry(shape, mapping, config)
            for shape in snapshot.shapes
            if shape.visible
        ],
        strokes=[
            polyline
            for polyline in (
                _stroke_geometry(line, mapping, config.stroke_sample_limit)
                for line in snapshot.lines
            )
            if polyline is not None
        ],
        texts=[_text_geometry(text, mapping, text_metrics) for text in snapshot.texts],
        cursors=[
            OverviewCursor(
                name=user.name,
                color=user.color,
                position=mapping.world_to_surface(Point(user.cursor.x, user.cursor.y)),
            )
            for user in cursors
            if user.cursor is not None
        ],
    )


def viewport_indicator(mapping: OverviewMapping, camera_view: BoundingBox) -> BoundingBox:
    box = mapping.box_to_surface(camera_view)
    return BoundingBox.from_rect(
        box.x,
        box.y,
        max(box.width, MIN_VIEWPORT_SIDE),
        max(box.height, MIN_VIEWPORT_SIDE),
    )


def sample_stroke(points: List[float], limit: int = 50) -> List[Tuple[float, float]]:
    """Thin a flat x,y list down to roughly ``limit`` samples, keeping the last one."""
    if len(points) < 2:
        return []
    step = max(2, (len(points) // limit) * 2)
    samples = [(points[i], points[i + 1]) for i in range(0, len(points) - 1, step)]
    last = (points[-2], points[-1])
    if len(points) > 2 and samples[-1] != last:
        samples.append(last)
    return samples


def _shape_geometry(
    shape: BaseShape, mapping: OverviewMapping, config: GeometryConfig
) -> OverviewShape:
    stroke = shape.style.stroke or "#66FCF1"
    fill = shape.style.fill if shape.style.has_fill else None
    if isinstance(shape, CircleShape):
        return OverviewCircle(
            id=shape.id,
            center=mapping.world_to_surface(Point(shape.position.x, shape.position.y)),
            radius=max(mapping.length_to_surface(shape.radius), MIN_SHAPE_RADIUS),
            fill=fill,
            stroke=stroke,
        )
    if isinstance(shape, EllipseShape):
        return OverviewEllipse(
            id=shape.id,
            center=mapping.world_to_surface(Point(shape.position.x, shape.position.y)),
            radius_x=max(mapping.length_to_surface(shape.radius_x), MIN_SHAPE_RADIUS),
            radius_y=max(mapping.length_to_surface(shape.radius_y), MIN_SHAPE_RADIUS),
            fill=fill,
            stroke=stroke,
        )
    if isinstance(shape, TriangleShape):
        return OverviewPolygon(
            id=shape.id,
            points=tuple(mapping.world_to_surface(Point(p.x, p.y)) for p in shape.points),
            fill=fill,
            stroke=stroke,
        )
    if isinstance(shape, (LineShape, ArrowShape)):
        return OverviewSegment(
            id=shape.id,
            start=mapping.world_to_surface(Point(shape.start_point.x, shape.start_point.y)),
            end=mapping.world_to_surface(Point(shape.end_point.x, shape.end_point.y)),
            stroke=stroke,
        )
    box = mapping.box_to_surface(transformed_bounding_box_of(shape, config))
    return OverviewRect(
        id=shape.id,
        x=box.x,
        y=box.y,
        width=max(box.width, MIN_SHAPE_SIDE),
        height=max(box.height, MIN_SHAPE_SIDE),
        fill=fill,
        stroke=stroke,
    )


def _stroke_geometry(
    line: StrokeLine, mapping: OverviewMapping, limit: int
) -> Optional[OverviewPolyline]:
    if len(line.points) < 4:
        return None
    return OverviewPolyline(
        id=line.id,
        points=tuple(
            mapping.world_to_surface(Point(x, y)) for x, y in sample_stroke(line.points, limit)
        ),
        stroke=line.color,
        stroke_width=max(mapping.length_to_surface(line.stroke_width), MIN_STROKE_WIDTH),
    )


def _text_geometry(
    text: TextAnnotation, mapping: OverviewMapping, text_metrics: TextMetrics
) -> OverviewRect:
    box = mapping.box_to_surface(text_bounding_box(text, text_metrics))
    return OverviewRect(
        id=text.id,
        x=box.x,
        y=box.y,
        width=max(box.width, MIN_TEXT_WIDTH),
        height=max(box.height, MIN_TEXT_HEIGHT),
        fill=text.color,
        stroke=None,
    )
