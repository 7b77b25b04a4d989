from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from forest.config import GameConfig
from forest.constants import (
    ANIMATION_FRAME_COUNT,
    ANIMATION_FRAME_MS,
    ARRIVAL_EPSILON_SQ,
    MAX_FRAME_MS,
    MOVEMENT_SMOOTHING,
    REFERENCE_FRAME_MS,
)
from forest.gameplay.input import MOVEMENT_KEYS, held_directions
from forest.physics.collision import CollisionDetector
from forest.world.types import Direction, Position


@dataclass
class PlayerKinematicState:
    target_position: Position
    rendered_position: Position
    direction: Direction = Direction.DOWN
    is_moving: bool = False
    animation_frame: int = 0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class MovementKinematics:
    """Keyboard-driven player motion.

    The target position integrates held keys at a speed defined for a 60 Hz
    frame and scaled by the real frame time, with each axis collision-tested
    on its own. The rendered position trails the target through a
    frame-rate corrected exponential ease.
    """

    def __init__(
        self,
        config: GameConfig,
        collision: CollisionDetector | None = None,
        start: Position | None = None,
    ) -> None:
        self.config = config
        self.collision = collision or CollisionDetector(
            config.character_size, config.world_width, config.world_height
        )
        if start is None:
            start = Position(*config.world_center)
        self.state = PlayerKinematicState(target_position=start, rendered_position=start)
        self._animation_ms = 0.0
        self._last_time_ms: float | None = None

    @property
    def max_x(self) -> float:
        return self.config.world_width - self.config.character_size

    @property
    def max_y(self) -> float:
        return self.config.world_height - self.config.character_size

    @staticmethod
    def clamp_delta(delta_ms: float | None) -> float:
        if delta_ms is None:
            return REFERENCE_FRAME_MS
        return _clamp(delta_ms, 0.0, MAX_FRAME_MS)

    def frame_delta(self, now_ms: float) -> float | None:
        """Milliseconds since the previous timestamp, None on the first call."""
        last = self._last_time_ms
        self._last_time_ms = now_ms
        if last is None:
            return None
        return now_ms - last

    def update(self, keys: Mapping[str, bool] | Iterable[Direction], now_ms: float) -> PlayerKinematicState:
        """Advance using an absolute timestamp, as a display refresh callback would."""
        return self.step(keys, self.frame_delta(now_ms))

    def step(
        self,
        keys: Mapping[str, bool] | Iterable[Direction],
        delta_ms: float | None = None,
    ) -> PlayerKinematicState:
        held = set(held_directions(keys) if isinstance(keys, Mapping) else keys)
        delta = self.clamp_delta(delta_ms)
        state = self.state

        self._integrate(held, delta)
        self._smooth(delta)
        self._animate(delta)
        return state

    def _tentative(self, direction: Direction, x: float, y: float, distance: float) -> tuple[float, float]:
        if direction is Direction.UP:
            return x, _clamp(y - distance, 0.0, self.max_y)
        if direction is Direction.DOWN:
            return x, _clamp(y + distance, 0.0, self.max_y)
        if direction is Direction.LEFT:
            return _clamp(x - distance, 0.0, self.max_x), y
        return _clamp(x + distance, 0.0, self.max_x), y

    def _integrate(self, held: set[Direction], delta: float) -> None:
        state = self.state
        frame_speed = self.config.movement_speed * delta / REFERENCE_FRAME_MS
        x = state.target_position.x
        y = state.target_position.y
        direction = state.direction
        moving = False

        for candidate in MOVEMENT_KEYS:
            if candidate not in held:
                continue
            test_x, test_y = self._tentative(candidate, x, y, frame_speed)
            if not self.collision.collides_at(test_x, test_y):
                x, y = test_x, test_y
            direction = candidate
            moving = True

        state.target_position = Position(x, y)
        state.direction = direction
        state.is_moving = moving

    def _smooth(self, delta: float) -> None:
        state = self.state
        current = state.rendered_position
        target = state.target_position
        if current.distance_sq(target) <= ARRIVAL_EPSILON_SQ:
            return
        factor = min(1.0, MOVEMENT_SMOOTHING * delta / REFERENCE_FRAME_MS)
        state.rendered_position = current.lerp(target, factor)

    def _animate(self, delta: float) -> None:
        state = self.state
        if not state.is_moving:
            state.animation_frame = 0
            self._animation_ms = 0.0
            return
        self._animation_ms += delta
        while self._animation_ms >= ANIMATION_FRAME_MS:
            self._animation_ms -= ANIMATION_FRAME_MS
            state.animation_frame = (state.animation_frame + 1) % ANIMATION_FRAME_COUNT
