from __future__ import annotations

import pytest

from domain.models import (
    BoundingBox,
    CameraState,
    CanvasSnapshot,
    GeometryConfig,
    Point,
    Position,
    RemoteCursor,
    ShapeStyle,
    Size,
)
from domain.services.overview_scene import (
    MIN_SHAPE_SIDE,
    MIN_TEXT_WIDTH,
    MIN_VIEWPORT_SIDE,
    OverviewCircle,
    OverviewEllipse,
    OverviewPolygon,
    OverviewRect,
    OverviewSegment,
    build_overview_scene,
    sample_stroke,
)
from tests.helpers.canvas_fixtures import (
    arrow,
    circle,
    ellipse,
    line,
    rectangle,
    stroke,
    text,
    triangle,
)

STAGE = Size(800, 600)


def _snapshot() -> CanvasSnapshot:
    return CanvasSnapshot(
        shapes=[
            rectangle(0, 0, 100, 50, id="r"),
            circle(300, 300, 40, id="c"),
            ellipse(-200, 100, 60, 20, id="e"),
            triangle((0, 400), (50, 450), (-50, 450), id="t"),
            line(500, 0, 600, 100, id="l"),
            arrow(500, 200, 600, 200, id="a"),
        ],
        lines=[stroke(*[float(v) for v in range(0, 40)], id="s")],
        texts=[text(100, -100, "label", id="x")],
    )


def test_scene_maps_each_shape_kind_to_its_geometry() -> None:
    scene = build_overview_scene(_snapshot(), CameraState(), STAGE)
    kinds = {item.id: type(item) for item in scene.shapes}

    assert kinds == {
        "r": OverviewRect,
        "c": OverviewCircle,
        "e": OverviewEllipse,
        "t": OverviewPolygon,
        "l": OverviewSegment,
        "a": OverviewSegment,
    }


def test_scene_shapes_use_the_mapping() -> None:
    scene = build_overview_scene(_snapshot(), CameraState(), STAGE)
    mapping = scene.mapping
    circle_geometry = next(item for item in scene.shapes if item.id == "c")

    assert isinstance(circle_geometry, OverviewCircle)
    assert circle_geometry.center == mapping.world_to_surface(Point(300, 300))
    assert circle_geometry.radius == pytest.approx(40 * mapping.scale)


def test_tiny_shapes_keep_a_visible_size() -> None:
    snapshot = CanvasSnapshot(shapes=[rectangle(0, 0, 0.01, 0.01, id="dot")])

    scene = build_overview_scene(snapshot, CameraState(), STAGE)
    rect = scene.shapes[0]

    assert isinstance(rect, OverviewRect)
    assert rect.width == MIN_SHAPE_SIDE
    assert rect.height == MIN_SHAPE_SIDE


def test_hidden_shapes_are_not_rendered() -> None:
    snapshot = CanvasSnapshot(shapes=[rectangle(0, 0, 10, 10, id="gone", visible=False)])

    assert build_overview_scene(snapshot, CameraState(), STAGE).shapes == []


def test_unfilled_shapes_have_no_fill() -> None:
    style = ShapeStyle(has_fill=False, stroke="#ff0000")
    snapshot = CanvasSnapshot(shapes=[rectangle(0, 0, 10, 10, style=style)])

    rect = build_overview_scene(snapshot, CameraState(), STAGE).shapes[0]

    assert isinstance(rect, OverviewRect)
    assert rect.fill is None
    assert rect.stroke == "#ff0000"


def test_text_is_rendered_as_a_bar() -> None:
    scene = build_overview_scene(_snapshot(), CameraState(), STAGE)
    bar = scene.texts[0]

    assert bar.id == "x"
    assert bar.width >= MIN_TEXT_WIDTH
    assert (bar.x, bar.y) == (
        pytest.approx(scene.mapping.world_to_surface(Point(100, -100)).x),
        pytest.approx(scene.mapping.world_to_surface(Point(100, -100)).y),
    )


def test_short_strokes_are_not_rendered() -> None:
    snapshot = CanvasSnapshot(lines=[stroke(1, 1, id="dot")])

    assert build_overview_scene(snapshot, CameraState(), STAGE).strokes == []


def test_stroke_sampling_keeps_the_last_sample() -> None:
    points = [float(v) for v in range(0, 402)]

    samples = sample_stroke(points, limit=50)

    assert samples[0] == (0.0, 1.0)
    assert samples[-1] == (400.0, 401.0)
    assert len(samples) <= 52


def test_stroke_sampling_keeps_short_strokes_whole() -> None:
    assert sample_stroke([0, 0, 5, 5, 9, 1]) == [(0, 0), (5, 5), (9, 1)]
    assert sample_stroke([]) == []


def test_viewport_indicator_matches_camera_view() -> None:
    scene = build_overview_scene(CanvasSnapshot(), CameraState(), STAGE)

    expected = scene.mapping.box_to_surface(BoundingBox(0, 0, 800, 600))

    assert scene.viewport.x == pytest.approx(expected.x)
    assert scene.viewport.y == pytest.approx(expected.y)
    assert scene.viewport.width == pytest.approx(expected.width)
    assert scene.camera_view == BoundingBox(0, 0, 800, 600)


def test_viewport_indicator_has_minimum_size() -> None:
    snapshot = CanvasSnapshot(shapes=[rectangle(-1e6, -1e6, 2e6, 2e6)])

    scene = build_overview_scene(snapshot, CameraState(zoom=10), STAGE)

    assert scene.viewport.width == MIN_VIEWPORT_SIDE
    assert scene.viewport.height == MIN_VIEWPORT_SIDE


def test_remote_cursors_without_position_are_skipped() -> None:
    cursors = [
        RemoteCursor(name="ana", color="#f00", cursor=Position(x=10, y=20)),
        RemoteCursor(name="bo", color="#0f0"),
    ]

    scene = build_overview_scene(CanvasSnapshot(), CameraState(), STAGE, cursors=cursors)

    assert [cursor.name for cursor in scene.cursors] == ["ana"]
    assert scene.cursors[0].position == scene.mapping.world_to_surface(Point(10, 20))


def test_scene_uses_configured_overview_size() -> None:
    config = GeometryConfig(overview_size=Size(400, 400))

    scene = build_overview_scene(CanvasSnapshot(), CameraState(), STAGE, config)

    assert scene.mapping.surface == Size(400, 400)


def test_non_finite_rotation_does_not_break_the_scene() -> None:
    snapshot = CanvasSnapshot(
        shapes=[rectangle(0, 0, 10, 10, id="spun", rotation=float("inf")), circle(5, 5, 2, id="c")]
    )

    scene = build_overview_scene(snapshot, CameraState(), STAGE)

    assert [item.id for item in scene.shapes] == ["spun", "c"]
