from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping
from typing import Any, Optional

from app.config import AppSettings
from domain.models import (
    BoundingBox,
    CameraState,
    CanvasSnapshot,
    Point,
    RemoteCursor,
    SurfaceSize,
)
from domain.ports.text_metrics import TextMetrics
from domain.services.aggregate_bounds import selection_bounds
from domain.services.camera import camera_centered_on
from domain.services.overview_interaction import (
    IDLE,
    GestureStep,
    JumpIntent,
    NavigationIntent,
    OverviewGesture,
    OverviewView,
    pointer_down,
    pointer_leave,
    pointer_move,
    pointer_up,
)
from domain.services.overview_scene import OverviewScene, build_overview_scene
from domain.services.text_metrics import EstimatedTextMetrics

logger = logging.getLogger(__name__)


class OverviewNavigator:
    """Host-side glue around the overview engine.

    Holds the gesture in progress between pointer events; everything else is
    recomputed from the snapshot passed to :meth:`render`.
    """

    def __init__(self, settings: AppSettings, text_metrics: TextMetrics | None = None) -> None:
        self.settings = settings
        self.config = settings.geometry.to_geometry_config()
        self.text_metrics = text_metrics or EstimatedTextMetrics(self.config)
        self.gesture: OverviewGesture = IDLE
        self._view: Optional[OverviewView] = None

    def render(
        self,
        snapshot: CanvasSnapshot | Mapping[str, Any],
        camera: CameraState,
        surface: SurfaceSize,
        cursors: Iterable[RemoteCursor] = (),
    ) -> OverviewScene:
        if not isinstance(snapshot, CanvasSnapshot):
            snapshot = CanvasSnapshot.model_validate(snapshot)
        scene = build_overview_scene(
            snapshot,
            camera,
            surface,
            self.config,
            cursors=cursors,
            text_metrics=self.text_metrics,
        )
        self._view = OverviewView.from_scene(scene)
        return scene

    def selection(
        self, snapshot: CanvasSnapshot, selected_ids: Collection[str]
    ) -> Optional[BoundingBox]:
        return selection_bounds(snapshot, selected_ids, self.config, self.text_metrics)

    def press(self, position: Point) -> Optional[NavigationIntent]:
        return self._apply(pointer_down(self.gesture, position, self._require_view()))

    def move(self, position: Point) -> Optional[NavigationIntent]:
        return self._apply(pointer_move(self.gesture, position, self._require_view()))

    def release(self, position: Point) -> Optional[NavigationIntent]:
        return self._apply(pointer_up(self.gesture, position, self._require_view()))

    def leave(self) -> Optional[NavigationIntent]:
        return self._apply(pointer_leave(self.gesture))

    def camera_for(
        self, intent: NavigationIntent, camera: CameraState, surface: SurfaceSize
    ) -> CameraState:
        target = intent.target if isinstance(intent, JumpIntent) else intent.center
        return camera_centered_on(target, camera, surface)

    def _apply(self, step: GestureStep) -> Optional[NavigationIntent]:
        if step.gesture.phase != self.gesture.phase:
            logger.debug("Overview gesture %s -> %s", self.gesture.phase, step.gesture.phase)
        self.gesture = step.gesture
        if step.intent is not None:
            logger.debug("Overview navigation intent: %s", step.intent)
        return step.intent

    def _require_view(self) -> OverviewView:
        if self._view is None:
            msg = "Overview has not been rendered yet"
            raise RuntimeError(msg)
        return self._view
