from forest.world.chunks import ChunkStore
from forest.world.generator import ElementGenerator, IdAllocator
from forest.world.index import WorldElementIndex
from forest.world.placement import PlacementValidator
from forest.world.reconcile import ServerChunkReconciler
from forest.world.seeded import SeededRandom, create_seeded_random
from forest.world.types import Bush, Chunk, Direction, ElementBatch, Flower, Hitbox, Position, Tree, WorldElement

__all__ = [
    "Bush",
    "Chunk",
    "ChunkStore",
    "Direction",
    "ElementBatch",
    "ElementGenerator",
    "Flower",
    "Hitbox",
    "IdAllocator",
    "PlacementValidator",
    "Position",
    "SeededRandom",
    "ServerChunkReconciler",
    "Tree",
    "WorldElement",
    "WorldElementIndex",
    "create_seeded_random",
]
