from __future__ import annotations

from domain.models import BoundingBox, CameraState, Point, SurfaceSize


def camera_viewport(camera: CameraState, surface: SurfaceSize) -> BoundingBox:
    """World-space rectangle visible on a stage of ``surface`` pixels."""
    return BoundingBox.from_rect(
        -camera.position_x / camera.zoom,
        -camera.position_y / camera.zoom,
        surface.width / camera.zoom,
        surface.height / camera.zoom,
    )


def screen_to_world(point: Point, camera: CameraState) -> Point:
    return Point(
        (point.x - camera.position_x) / camera.zoom,
        (point.y - camera.position_y) / camera.zoom,
    )


def world_to_screen(point: Point, camera: CameraState) -> Point:
    return Point(
        point.x * camera.zoom + camera.position_x,
        point.y * camera.zoom + camera.position_y,
    )


def camera_centered_on(point: Point, camera: CameraState, surface: SurfaceSize) -> CameraState:
    return camera.model_copy(
        update={
            "position_x": surface.width / 2 - point.x * camera.zoom,
            "position_y": surface.height / 2 - point.y * camera.zoom,
        }
    )
