from __future__ import annotations

import logging
import math
from contextlib import nullcontext

from forest.config import GameConfig
from forest.constants import ChunkKey
from forest.debug.profiler import RuntimeProfiler
from forest.world.generator import ElementGenerator
from forest.world.index import WorldElementIndex
from forest.world.types import Chunk, ElementBatch, Position

logger = logging.getLogger(__name__)


class ChunkStore:
    """Keyed cache of generated and received chunks.

    Chunks are created the first time the focus comes within render distance
    and are never unloaded. A stored chunk is never replaced: inserting a key
    that is already present is a no-op, whoever produced the second copy.
    """

    def __init__(
        self,
        config: GameConfig,
        generator: ElementGenerator | None = None,
        index: WorldElementIndex | None = None,
        profiler: RuntimeProfiler | None = None,
    ) -> None:
        self.config = config
        self.chunk_size = config.chunk_size
        self.generator = generator or ElementGenerator(config.chunk_size)
        self.index = index if index is not None else WorldElementIndex()
        self.profiler = profiler
        self._chunks: dict[ChunkKey, Chunk] = {}
        self._center_chunk: ChunkKey | None = None
        self._generated = 0
        self._received = 0

    def _profile(self, name: str):
        if self.profiler is None:
            return nullcontext()
        return self.profiler.section(name)

    def __contains__(self, key: ChunkKey) -> bool:
        return key in self._chunks

    def __len__(self) -> int:
        return len(self._chunks)

    def get(self, key: ChunkKey) -> Chunk | None:
        return self._chunks.get(key)

    def get_all_loaded(self) -> list[Chunk]:
        return list(self._chunks.values())

    def chunk_coords(self, x: float, y: float) -> ChunkKey:
        return math.floor(x / self.chunk_size), math.floor(y / self.chunk_size)

    def in_bounds(self, key: ChunkKey) -> bool:
        cx, cy = key
        return (
            cx >= 0
            and cy >= 0
            and cx * self.chunk_size < self.config.world_width
            and cy * self.chunk_size < self.config.world_height
        )

    def chunks_in_radius(self, center: ChunkKey, radius: int) -> list[ChunkKey]:
        cx, cy = center
        return [
            (cx + dcx, cy + dcy)
            for dcx in range(-radius, radius + 1)
            for dcy in range(-radius, radius + 1)
            if self.in_bounds((cx + dcx, cy + dcy))
        ]

    def insert(self, chunk: Chunk, source: str = "generated") -> bool:
        key = chunk.key
        if key in self._chunks:
            return False
        self._chunks[key] = chunk
        self.index.add(chunk)
        if source == "generated":
            self._generated += 1
        else:
            self._received += 1
        return True

    def request_around(self, position: Position, render_distance: int | None = None) -> ElementBatch:
        """Generate every missing chunk within ``render_distance`` of ``position``.

        Returns only the elements of chunks inserted by this call.
        """
        radius = self.config.render_distance if render_distance is None else render_distance
        center = self.chunk_coords(position.x, position.y)
        self._center_chunk = center
        added = ElementBatch()

        with self._profile("world.request.scan"):
            missing = [key for key in self.chunks_in_radius(center, radius) if key not in self._chunks]
        if not missing:
            return added

        with self._profile("world.request.generate"):
            for cx, cy in missing:
                chunk = self.generator.generate_chunk(cx, cy)
                self.insert(chunk)
                added.extend(chunk)
                logger.debug(
                    "generated chunk (%d, %d): %d trees, %d bushes, %d flowers",
                    cx,
                    cy,
                    len(chunk.trees),
                    len(chunk.bushes),
                    len(chunk.flowers),
                )
        return added

    def ensure_chunk_loaded(self, position: Position) -> bool:
        key = self.chunk_coords(position.x, position.y)
        if key in self._chunks:
            return True
        if not self.in_bounds(key):
            return False
        self.insert(self.generator.generate_chunk(*key))
        return True

    def diagnostics_snapshot(self) -> dict[str, int]:
        center = self._center_chunk or (-1, -1)
        return {
            "loaded_chunks": len(self._chunks),
            "generated_chunks": self._generated,
            "received_chunks": self._received,
            "indexed_elements": len(self.index),
            "center_chunk_x": center[0],
            "center_chunk_y": center[1],
        }
