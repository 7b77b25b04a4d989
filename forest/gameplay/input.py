from __future__ import annotations

from typing import Iterable, Mapping

from forest.world.types import Direction

# Evaluation order matters: when several are held, the last one decides the
# facing direction.
MOVEMENT_KEYS: dict[Direction, tuple[str, ...]] = {
    Direction.UP: ("ArrowUp", "w", "UP", "W"),
    Direction.DOWN: ("ArrowDown", "s", "DOWN", "S"),
    Direction.LEFT: ("ArrowLeft", "a", "LEFT", "A"),
    Direction.RIGHT: ("ArrowRight", "d", "RIGHT", "D"),
}

_KEY_DIRECTIONS = {key: direction for direction, keys in MOVEMENT_KEYS.items() for key in keys}


def direction_for_key(key: str) -> Direction | None:
    return _KEY_DIRECTIONS.get(key)


def held_directions(keys: Mapping[str, bool]) -> list[Direction]:
    return [direction for direction, names in MOVEMENT_KEYS.items() if any(keys.get(name) for name in names)]


class InputState:
    """Key identifier -> pressed flag, fed by whatever owns the keyboard."""

    def __init__(self) -> None:
        self.keys: dict[str, bool] = {}

    def press(self, key: str) -> None:
        self.keys[key] = True

    def release(self, key: str) -> None:
        if self.keys.get(key):
            self.keys[key] = False

    def set_held(self, keys: Iterable[str]) -> None:
        self.keys = {key: True for key in keys}

    def clear(self) -> None:
        self.keys.clear()

    def is_pressed(self, key: str) -> bool:
        return bool(self.keys.get(key))

    def directions(self) -> list[Direction]:
        return held_directions(self.keys)
