from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Optional, Union

from domain.models import BoundingBox, Point
from domain.services.bounding_box import contains_point
from domain.services.overview_mapping import OverviewMapping
from domain.services.overview_scene import OverviewScene, viewport_indicator

GesturePhase = Literal["idle", "pressed", "dragging_viewport"]


@dataclass(frozen=True)
class JumpIntent:
    """Centre the camera on ``target`` (a plain click on the overview)."""

    target: Point


@dataclass(frozen=True)
class RecenterIntent:
    """Centre the camera on ``center`` while the viewport indicator is dragged."""

    center: Point


NavigationIntent = Union[JumpIntent, RecenterIntent]


@dataclass(frozen=True)
class OverviewView:
    mapping: OverviewMapping
    camera_view: BoundingBox

    @property
    def indicator(self) -> BoundingBox:
        return viewport_indicator(self.mapping, self.camera_view)

    @classmethod
    def from_scene(cls, scene: OverviewScene) -> OverviewView:
        return cls(mapping=scene.mapping, camera_view=scene.camera_view)


@dataclass(frozen=True)
class OverviewGesture:
    phase: GesturePhase = "idle"
    drag_offset: Point = Point(0.0, 0.0)
    moved: bool = False

    @property
    def is_dragging(self) -> bool:
        return self.phase == "dragging_viewport"


IDLE = OverviewGesture()


@dataclass(frozen=True)
class GestureStep:
    gesture: OverviewGesture
    intent: Optional[NavigationIntent] = None


def pointer_down(gesture: OverviewGesture, position: Point, view: OverviewView) -> GestureStep:
    indicator = view.indicator
    if contains_point(indicator, position):
        # Keep the grab point under the cursor instead of snapping the
        # indicator's centre to it.
        return GestureStep(
            OverviewGesture(phase="dragging_viewport", drag_offset=position - indicator.top_left)
        )
    return GestureStep(OverviewGesture(phase="pressed"))


def pointer_move(gesture: OverviewGesture, position: Point, view: OverviewView) -> GestureStep:
    if gesture.phase == "idle":
        return GestureStep(gesture)
    moved = replace(gesture, moved=True)
    if gesture.phase == "pressed":
        return GestureStep(moved)
    top_left = view.mapping.surface_to_world(position - gesture.drag_offset)
    center = Point(
        top_left.x + view.camera_view.width / 2,
        top_left.y + view.camera_view.height / 2,
    )
    return GestureStep(moved, RecenterIntent(center))


def pointer_up(gesture: OverviewGesture, position: Point, view: OverviewView) -> GestureStep:
    if gesture.phase == "idle" or gesture.moved:
        return GestureStep(IDLE)
    return GestureStep(IDLE, JumpIntent(view.mapping.surface_to_world(position)))


def pointer_leave(gesture: OverviewGesture) -> GestureStep:
    return GestureStep(IDLE)
