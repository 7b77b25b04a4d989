from __future__ import annotations

from typing import Iterable, Sequence

from forest.constants import HITBOX_FOOT_INSET, HITBOX_SIDE_INSET
from forest.world.types import Hitbox, Tree


def intersects(a: Hitbox, b: Hitbox) -> bool:
    return a.intersects(b)


def out_of_bounds(hitbox: Hitbox, world_width: float, world_height: float) -> bool:
    return hitbox.left < 0 or hitbox.right > world_width or hitbox.top < 0 or hitbox.bottom > world_height


def player_hitbox(x: float, y: float, size: float) -> Hitbox:
    # Only the feet block movement: head and arms may overlap scenery.
    return Hitbox(
        left=x + HITBOX_SIDE_INSET,
        right=x + size - HITBOX_SIDE_INSET,
        top=y + size / 2,
        bottom=y + size - HITBOX_FOOT_INSET,
    )


def trunk_hitbox(tree: Tree) -> Hitbox:
    size = tree.footprint()
    return Hitbox(
        left=tree.x + size * 3 / 8,
        right=tree.x + size * 5 / 8,
        top=tree.y + size / 2,
        bottom=tree.y + size,
    )


def obstacle_hitboxes(trees: Iterable[Tree]) -> list[Hitbox]:
    return [trunk_hitbox(tree) for tree in trees]


class CollisionDetector:
    def __init__(
        self,
        character_size: float,
        world_width: float,
        world_height: float,
        obstacles: Sequence[Hitbox] = (),
    ) -> None:
        self.character_size = character_size
        self.world_width = world_width
        self.world_height = world_height
        self.obstacles: list[Hitbox] = list(obstacles)

    def set_obstacles(self, obstacles: Iterable[Hitbox]) -> None:
        self.obstacles = list(obstacles)

    def hitbox_at(self, x: float, y: float) -> Hitbox:
        return player_hitbox(x, y, self.character_size)

    def collides_at(self, x: float, y: float) -> bool:
        hitbox = self.hitbox_at(x, y)
        for obstacle in self.obstacles:
            if intersects(hitbox, obstacle):
                return True
        return out_of_bounds(hitbox, self.world_width, self.world_height)
