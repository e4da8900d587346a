from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Sequence
from typing import List, Optional

from domain.models import (
    BoundingBox,
    CameraState,
    CanvasSnapshot,
    Drawable,
    GeometryConfig,
    SurfaceSize,
)
from domain.ports.text_metrics import TextMetrics
from domain.services.bounding_box import (
    expand_box,
    primitive_box,
    stroke_bounding_box,
    text_bounding_box,
    transformed_bounding_box_of,
)
from domain.services.camera import camera_viewport
from domain.services.text_metrics import EstimatedTextMetrics

logger = logging.getLogger(__name__)


def union_boxes(boxes: Iterable[Optional[BoundingBox]]) -> Optional[BoundingBox]:
    present = [box for box in boxes if box is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return BoundingBox(
        min(box.min_x for box in present),
        min(box.min_y for box in present),
        max(box.max_x for box in present),
        max(box.max_y for box in present),
    )


def combined_bounding_box(
    primitives: Sequence[Drawable],
    config: GeometryConfig | None = None,
    text_metrics: TextMetrics | None = None,
    *,
    transformed: bool = False,
) -> Optional[BoundingBox]:
    """Box enclosing every primitive, or None when there is nothing to enclose."""
    if not primitives:
        return None
    config = config or GeometryConfig()
    text_metrics = text_metrics or EstimatedTextMetrics(config)
    boxes: List[Optional[BoundingBox]] = []
    for primitive in primitives:
        box = primitive_box(primitive, config, text_metrics)
        if box is not None and transformed:
            box = transformed_bounding_box_of(primitive, config, text_metrics)
        boxes.append(box)
    return union_boxes(boxes)


def selection_bounds(
    snapshot: CanvasSnapshot,
    selected_ids: Collection[str],
    config: GeometryConfig | None = None,
    text_metrics: TextMetrics | None = None,
) -> Optional[BoundingBox]:
    if not selected_ids:
        return None
    selected: List[Drawable] = [
        item for item in snapshot.drawables() if item.id in selected_ids
    ]
    return combined_bounding_box(selected, config, text_metrics)


def content_bounds(
    snapshot: CanvasSnapshot,
    config: GeometryConfig | None = None,
    text_metrics: TextMetrics | None = None,
) -> Optional[BoundingBox]:
    config = config or GeometryConfig()
    text_metrics = text_metrics or EstimatedTextMetrics(config)
    boxes: List[Optional[BoundingBox]] = [
        transformed_bounding_box_of(shape, config, text_metrics)
        for shape in snapshot.shapes
        if shape.visible
    ]
    boxes.extend(stroke_bounding_box(line) for line in snapshot.lines)
    boxes.extend(text_bounding_box(text, text_metrics) for text in snapshot.texts)
    return union_boxes(boxes)


def default_region(config: GeometryConfig | None = None) -> BoundingBox:
    config = config or GeometryConfig()
    half_width = config.default_region.width / 2
    half_height = config.default_region.height / 2
    return BoundingBox(-half_width, -half_height, half_width, half_height)


def world_extent(
    snapshot: CanvasSnapshot,
    camera: CameraState,
    surface: SurfaceSize,
    config: GeometryConfig | None = None,
    text_metrics: TextMetrics | None = None,
) -> BoundingBox:
    config = config or GeometryConfig()
    content = content_bounds(snapshot, config, text_metrics)
    if content is None:
        logger.debug("Canvas has no content, using the default overview region")
        content = default_region(config)
    extent = union_boxes([content, camera_viewport(camera, surface)])
    return expand_box(extent, config.padding)  # type: ignore[arg-type]
