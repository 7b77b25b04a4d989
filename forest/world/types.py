from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from forest.constants import ChunkKey


class ChunkPayloadError(ValueError):
    pass


class Direction(enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Position:
    x: float
    y: float

    def distance_sq(self, other: Position) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def distance(self, other: Position) -> float:
        return math.sqrt(self.distance_sq(other))

    def lerp(self, other: Position, factor: float) -> Position:
        return Position(self.x + (other.x - self.x) * factor, self.y + (other.y - self.y) * factor)

    def to_payload(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Hitbox:
    left: float
    right: float
    top: float
    bottom: float

    @classmethod
    def from_rect(cls, x: float, y: float, width: float, height: float) -> Hitbox:
        return cls(left=x, right=x + width, top=y, bottom=y + height)

    def expanded(self, padding: float) -> Hitbox:
        return Hitbox(self.left - padding, self.right + padding, self.top - padding, self.bottom + padding)

    def intersects(self, other: Hitbox) -> bool:
        return self.right > other.left and self.left < other.right and self.bottom > other.top and self.top < other.bottom


@dataclass(frozen=True)
class WorldElement:
    id: int
    x: float
    y: float
    size: float | None = None

    def footprint(self, default: float = 0.0) -> float:
        return self.size if self.size else default

    def bounds(self) -> Hitbox:
        size = self.footprint()
        return Hitbox.from_rect(self.x, self.y, size, size)


@dataclass(frozen=True)
class Tree(WorldElement):
    color: str = ""
    variant: int = 0


@dataclass(frozen=True)
class Bush(WorldElement):
    color: str = ""
    variant: int = 0


@dataclass(frozen=True)
class Flower(WorldElement):
    color: str = ""


@dataclass
class ElementBatch:
    trees: list[Tree] = field(default_factory=list)
    bushes: list[Bush] = field(default_factory=list)
    flowers: list[Flower] = field(default_factory=list)

    def extend(self, other: ElementBatch | Chunk) -> None:
        self.trees.extend(other.trees)
        self.bushes.extend(other.bushes)
        self.flowers.extend(other.flowers)

    def __len__(self) -> int:
        return len(self.trees) + len(self.bushes) + len(self.flowers)

    def __iter__(self) -> Iterator[WorldElement]:
        yield from self.trees
        yield from self.bushes
        yield from self.flowers

    def counts(self) -> dict[str, int]:
        return {"trees": len(self.trees), "bushes": len(self.bushes), "flowers": len(self.flowers)}


@dataclass(frozen=True)
class Chunk:
    chunk_x: int
    chunk_y: int
    trees: tuple[Tree, ...] = ()
    bushes: tuple[Bush, ...] = ()
    flowers: tuple[Flower, ...] = ()
    is_loaded: bool = True

    @property
    def key(self) -> ChunkKey:
        return self.chunk_x, self.chunk_y

    def elements(self) -> ElementBatch:
        return ElementBatch(list(self.trees), list(self.bushes), list(self.flowers))

    def to_payload(self) -> dict[str, Any]:
        return {
            "x": self.chunk_x,
            "y": self.chunk_y,
            "trees": [_element_payload(t, color=t.color, variant=t.variant) for t in self.trees],
            "bushes": [_element_payload(b, color=b.color, variant=b.variant) for b in self.bushes],
            "flowers": [_element_payload(f, color=f.color) for f in self.flowers],
            "isLoaded": self.is_loaded,
        }


def _element_payload(element: WorldElement, **extra: Any) -> dict[str, Any]:
    data: dict[str, Any] = {"id": element.id, "x": element.x, "y": element.y}
    if element.size is not None:
        data["size"] = element.size
    data.update(extra)
    return data


def _number(data: dict[str, Any], key: str, kind: type = float) -> Any:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ChunkPayloadError(f"{key!r} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ChunkPayloadError(f"{key!r} must be finite")
    if kind is int:
        if value != int(value):
            raise ChunkPayloadError(f"{key!r} must be an integer, got {value!r}")
        return int(value)
    return float(value)


def _flag(data: dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ChunkPayloadError(f"{key!r} must be a boolean, got {value!r}")
    return value


def _elements(data: dict[str, Any], key: str) -> Iterable[dict[str, Any]]:
    items = data.get(key) or []
    if not isinstance(items, list):
        raise ChunkPayloadError(f"{key!r} must be a list")
    for item in items:
        if not isinstance(item, dict):
            raise ChunkPayloadError(f"{key!r} entries must be objects")
        yield item


def _tree(item: dict[str, Any]) -> Tree:
    return Tree(
        id=_number(item, "id", int),
        x=_number(item, "x"),
        y=_number(item, "y"),
        size=_number(item, "size"),
        color=str(item.get("color", "")),
        variant=_number(item, "variant", int) if "variant" in item else 0,
    )


def _bush(item: dict[str, Any]) -> Bush:
    return Bush(
        id=_number(item, "id", int),
        x=_number(item, "x"),
        y=_number(item, "y"),
        size=_number(item, "size"),
        color=str(item.get("color", "")),
        variant=_number(item, "variant", int) if "variant" in item else 0,
    )


def _flower(item: dict[str, Any]) -> Flower:
    return Flower(
        id=_number(item, "id", int),
        x=_number(item, "x"),
        y=_number(item, "y"),
        size=_number(item, "size") if item.get("size") is not None else None,
        color=str(item.get("color", "")),
    )


def chunk_from_payload(data: Any) -> Chunk:
    """Decode one wire chunk.

    Accepts both the ``{x, y, ...}`` chunk shape and the ``{chunkX, chunkY,
    ...}`` world-sync shape. Raises ChunkPayloadError on anything malformed.
    """
    if not isinstance(data, dict):
        raise ChunkPayloadError("chunk payload must be an object")
    if "chunkX" in data or "chunkY" in data:
        chunk_x = _number(data, "chunkX", int)
        chunk_y = _number(data, "chunkY", int)
    else:
        chunk_x = _number(data, "x", int)
        chunk_y = _number(data, "y", int)
    return Chunk(
        chunk_x=chunk_x,
        chunk_y=chunk_y,
        trees=tuple(_tree(item) for item in _elements(data, "trees")),
        bushes=tuple(_bush(item) for item in _elements(data, "bushes")),
        flowers=tuple(_flower(item) for item in _elements(data, "flowers")),
        is_loaded=_flag(data, "isLoaded", default=True),
    )
