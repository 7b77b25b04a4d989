from __future__ import annotations

from forest.constants import MINIMAP_MARKER_SIZES, MINIMAP_SIZE, VISIBILITY_PADDING, Vec2
from forest.world.types import Bush, Chunk, ElementBatch, Flower, Hitbox, Tree, WorldElement


class WorldElementIndex:
    """Flat, append-only view of every element in the loaded chunks.

    Queries are linear scans; the element count stays proportional to the
    loaded area.
    """

    def __init__(self) -> None:
        self.trees: list[Tree] = []
        self.bushes: list[Bush] = []
        self.flowers: list[Flower] = []

    def __len__(self) -> int:
        return len(self.trees) + len(self.bushes) + len(self.flowers)

    def add(self, batch: ElementBatch | Chunk) -> int:
        # Called once per stored chunk; ids are not unique across sources.
        self.trees.extend(batch.trees)
        self.bushes.extend(batch.bushes)
        self.flowers.extend(batch.flowers)
        return len(batch.trees) + len(batch.bushes) + len(batch.flowers)

    def snapshot(self) -> ElementBatch:
        return ElementBatch(list(self.trees), list(self.bushes), list(self.flowers))

    def within(self, rect: Hitbox, padding: float = 0.0) -> ElementBatch:
        area = rect.expanded(padding) if padding else rect

        def hit(element: WorldElement) -> bool:
            return element.bounds().intersects(area)

        return ElementBatch(
            [t for t in self.trees if hit(t)],
            [b for b in self.bushes if hit(b)],
            [f for f in self.flowers if hit(f)],
        )

    def visible_within(self, view_rect: Hitbox) -> ElementBatch:
        return self.within(view_rect, VISIBILITY_PADDING)

    def minimap_points(
        self,
        world_width: float,
        world_height: float,
        map_width: float = MINIMAP_SIZE,
        map_height: float = MINIMAP_SIZE,
    ) -> dict[str, list[Vec2]]:
        """Top-left marker positions for the mini-map overlay, in map pixels."""
        scale_x = map_width / world_width
        scale_y = map_height / world_height
        points: dict[str, list[Vec2]] = {}
        for species, marker in MINIMAP_MARKER_SIZES.items():
            half = marker / 2
            points[species] = [
                (element.x * scale_x - half, element.y * scale_y - half) for element in getattr(self, species)
            ]
        return points
