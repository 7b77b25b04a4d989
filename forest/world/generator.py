from __future__ import annotations

import math
from typing import Sequence

from forest.constants import (
    BUSH_ID_BASE,
    BUSH_SEED_OFFSET,
    CHUNK_SEED_STRIDE,
    FLOWER_COLORS,
    FLOWER_ID_BASE,
    FLOWER_SEED_OFFSET,
    TREE_ID_BASE,
)
from forest.world.placement import PlacementValidator
from forest.world.seeded import SeededRandom
from forest.world.types import Bush, Chunk, Flower, Tree, WorldElement


class IdAllocator:
    """Per-species monotonic element ids, owned by one world/session."""

    def __init__(
        self,
        tree_base: int = TREE_ID_BASE,
        bush_base: int = BUSH_ID_BASE,
        flower_base: int = FLOWER_ID_BASE,
    ) -> None:
        self._bases = {"tree": tree_base, "bush": bush_base, "flower": flower_base}
        self._next = dict(self._bases)

    def next_id(self, species: str) -> int:
        value = self._next[species]
        self._next[species] = value + 1
        return value

    def peek(self, species: str) -> int:
        return self._next[species]

    def reset(self) -> None:
        self._next = dict(self._bases)


def _css_number(value: float) -> str:
    # Integral values print without a trailing ".0" so colours match the
    # strings produced by the browser client.
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _hsl(random: SeededRandom, hue: tuple[float, float], sat: tuple[float, float], light: tuple[float, float]) -> str:
    h = random.uniform(*hue)
    s = random.uniform(*sat)
    lightness = random.uniform(*light)
    return f"hsl({_css_number(h)}, {_css_number(s)}%, {_css_number(lightness)}%)"


class ElementGenerator:
    """Deterministic trees, bushes and flowers for one chunk.

    Everything placed in a chunk is a pure function of the chunk coordinates
    and the chunk size; only the ids depend on the allocator state.
    """

    TREE_SIZE = (80, 40)
    BUSH_SIZE = (40, 20)
    VARIANTS = 3

    TREE_HSL = ((110.0, 30.0), (70.0, 10.0), (35.0, 15.0))
    BUSH_HSL = ((100.0, 50.0), (65.0, 15.0), (30.0, 15.0))

    def __init__(
        self,
        chunk_size: int,
        ids: IdAllocator | None = None,
        validator: PlacementValidator | None = None,
    ) -> None:
        self.chunk_size = chunk_size
        self.ids = ids or IdAllocator()
        self.validator = validator or PlacementValidator()

    @staticmethod
    def chunk_seed(chunk_x: int, chunk_y: int) -> int:
        return chunk_x * CHUNK_SEED_STRIDE + chunk_y

    @staticmethod
    def tree_count(seed: int) -> int:
        return 5 + math.floor((math.sin(seed) + 1) * 5)

    @staticmethod
    def bush_count(seed: int) -> int:
        return 8 + math.floor((math.cos(seed) + 1) * 7)

    @staticmethod
    def flower_count(seed: int) -> int:
        return 15 + math.floor((math.sin(seed * 0.1) + 1) * 10)

    def generate_trees(self, origin_x: float, origin_y: float, count: int, seed: int) -> list[Tree]:
        random = SeededRandom(seed)
        trees: list[Tree] = []
        base, spread = self.TREE_SIZE
        for _ in range(count):
            size = base + random.below(spread)
            variant = random.below(self.VARIANTS)
            spot = self.validator.find_position(random, origin_x, origin_y, self.chunk_size, size, trees)
            if spot is None:
                continue
            x, y = spot
            trees.append(
                Tree(
                    id=self.ids.next_id("tree"),
                    x=x,
                    y=y,
                    size=size,
                    color=_hsl(random, *self.TREE_HSL),
                    variant=variant,
                )
            )
        return trees

    def generate_bushes(
        self,
        origin_x: float,
        origin_y: float,
        count: int,
        seed: int,
        existing: Sequence[WorldElement] = (),
    ) -> list[Bush]:
        random = SeededRandom(seed)
        bushes: list[Bush] = []
        base, spread = self.BUSH_SIZE
        for _ in range(count):
            size = base + random.below(spread)
            variant = random.below(self.VARIANTS)
            spot = self.validator.find_position(
                random, origin_x, origin_y, self.chunk_size, size, [*existing, *bushes]
            )
            if spot is None:
                continue
            x, y = spot
            bushes.append(
                Bush(
                    id=self.ids.next_id("bush"),
                    x=x,
                    y=y,
                    size=size,
                    color=_hsl(random, *self.BUSH_HSL),
                    variant=variant,
                )
            )
        return bushes

    def generate_flowers(
        self,
        origin_x: float,
        origin_y: float,
        count: int,
        seed: int,
        existing: Sequence[WorldElement] = (),
    ) -> list[Flower]:
        random = SeededRandom(seed)
        flowers: list[Flower] = []
        for _ in range(count):
            x = origin_x + random.below(self.chunk_size)
            y = origin_y + random.below(self.chunk_size)
            color = random.choice(FLOWER_COLORS)
            # Single draw per flower; a blocked flower is not retried.
            if not self.validator.is_clear_of(x, y, existing):
                continue
            flowers.append(Flower(id=self.ids.next_id("flower"), x=x, y=y, color=color))
        return flowers

    def generate_chunk(self, chunk_x: int, chunk_y: int) -> Chunk:
        origin_x = chunk_x * self.chunk_size
        origin_y = chunk_y * self.chunk_size
        seed = self.chunk_seed(chunk_x, chunk_y)

        trees = self.generate_trees(origin_x, origin_y, self.tree_count(seed), seed)
        bushes = self.generate_bushes(
            origin_x,
            origin_y,
            self.bush_count(seed),
            seed + BUSH_SEED_OFFSET,
            trees,
        )
        flowers = self.generate_flowers(
            origin_x,
            origin_y,
            self.flower_count(seed),
            seed + FLOWER_SEED_OFFSET,
            [*trees, *bushes],
        )
        return Chunk(
            chunk_x=chunk_x,
            chunk_y=chunk_y,
            trees=tuple(trees),
            bushes=tuple(bushes),
            flowers=tuple(flowers),
        )
