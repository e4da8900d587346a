from __future__ import annotations

from dataclasses import dataclass

from domain.models import BoundingBox, GeometryConfig, Point, SurfaceSize


@dataclass(frozen=True)
class OverviewMapping:
    """Uniform world -> overview transform that fits ``extent`` into ``surface``.

    The scaled extent is centred on whichever axis has slack, so the same
    ``scale`` applies to both axes and shapes are never distorted. ``origin``
    is the world point drawn at ``offset``; it equals the extent's top-left
    unless a degenerate axis was widened around the extent centre.
    """

    extent: BoundingBox
    surface: SurfaceSize
    scale: float
    offset: Point
    origin: Point

    def world_to_surface(self, point: Point) -> Point:
        return Point(
            self.offset.x + (point.x - self.origin.x) * self.scale,
            self.offset.y + (point.y - self.origin.y) * self.scale,
        )

    def surface_to_world(self, point: Point) -> Point:
        return Point(
            (point.x - self.offset.x) / self.scale + self.origin.x,
            (point.y - self.offset.y) / self.scale + self.origin.y,
        )

    def box_to_surface(self, box: BoundingBox) -> BoundingBox:
        top_left = self.world_to_surface(Point(box.min_x, box.min_y))
        return BoundingBox.from_rect(
            top_left.x,
            top_left.y,
            self.length_to_surface(box.width),
            self.length_to_surface(box.height),
        )

    def length_to_surface(self, length: float) -> float:
        return length * self.scale


def build_overview_mapping(
    extent: BoundingBox,
    surface: SurfaceSize | None = None,
    config: GeometryConfig | None = None,
) -> OverviewMapping:
    config = config or GeometryConfig()
    surface = surface or config.overview_size
    extent_width = extent.width or config.min_extent_size
    extent_height = extent.height or config.min_extent_size
    scale = min(surface.width / extent_width, surface.height / extent_height)
    offset = Point(
        (surface.width - extent_width * scale) / 2,
        (surface.height - extent_height * scale) / 2,
    )
    origin = Point(extent.center_x - extent_width / 2, extent.center_y - extent_height / 2)
    return OverviewMapping(
        extent=extent, surface=surface, scale=scale, offset=offset, origin=origin
    )
