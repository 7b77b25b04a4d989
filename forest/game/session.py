from __future__ import annotations

import logging
from contextlib import nullcontext

from pyglet.clock import Clock

from forest.config import GameConfig
from forest.constants import POSE_SAMPLE_INTERVAL_MS, TICKS_PER_SECOND
from forest.debug.profiler import RuntimeProfiler
from forest.entities.player import MovementKinematics, PlayerKinematicState
from forest.gameplay.input import InputState
from forest.net.bridge import NetworkBridge, PoseSample, PoseSampler
from forest.physics.collision import CollisionDetector, intersects, obstacle_hitboxes
from forest.world.chunks import ChunkStore
from forest.world.daycycle import DayClock
from forest.world.generator import ElementGenerator, IdAllocator
from forest.world.index import WorldElementIndex
from forest.world.reconcile import ServerChunkReconciler
from forest.world.types import ElementBatch, Hitbox, Position

logger = logging.getLogger(__name__)


class SimulatedTime:
    """Manual time source for ``pyglet.clock.Clock`` in headless runs."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class GameSession:
    """One player's local world: chunk streaming plus movement, ticked together.

    Each tick applies queued server chunks, refreshes the obstacles around
    the player, moves the player, then streams chunks around the new
    rendered position.
    """

    RECONCILE_BUDGET_SECONDS = 0.002
    # Trees further than this from the player cannot touch its hitbox this tick.
    OBSTACLE_SCAN_MARGIN = 160.0

    def __init__(
        self,
        config: GameConfig | None = None,
        bridge: NetworkBridge | None = None,
        profiler: RuntimeProfiler | None = None,
        start: Position | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.profiler = profiler
        self.ids = IdAllocator()
        self.generator = ElementGenerator(self.config.chunk_size, self.ids)
        self.index = WorldElementIndex()
        self.chunks = ChunkStore(self.config, self.generator, self.index, profiler)
        self.reconciler = ServerChunkReconciler(self.chunks)
        self.input = InputState()
        self.collision = CollisionDetector(
            self.config.character_size, self.config.world_width, self.config.world_height
        )
        self.player = MovementKinematics(self.config, self.collision, start)
        self.day = DayClock(self.config.time_scale)
        self.bridge = bridge
        self.pose_sampler = PoseSampler(bridge, POSE_SAMPLE_INTERVAL_MS)
        self.ticks = 0
        self._first_update = True

        if bridge is not None:
            bridge.push_handlers(on_chunks=self.reconciler.submit)

        self.chunks.request_around(self.state.rendered_position)

    def _profile(self, name: str):
        if self.profiler is None:
            return nullcontext()
        return self.profiler.section(name)

    @property
    def state(self) -> PlayerKinematicState:
        return self.player.state

    def key_down(self, key: str) -> None:
        self.input.press(key)

    def key_up(self, key: str) -> None:
        self.input.release(key)

    def refresh_obstacles(self) -> None:
        if not self.config.solid_trees:
            self.collision.set_obstacles(())
            return
        target = self.state.target_position
        area = Hitbox.from_rect(target.x, target.y, self.config.character_size, self.config.character_size)
        nearby = self.index.within(area, self.OBSTACLE_SCAN_MARGIN).trees
        current = self.collision.hitbox_at(target.x, target.y)
        obstacles = []
        for box in obstacle_hitboxes(nearby):
            # A trunk already under the feet stays passable until the player has left it.
            if intersects(current, box):
                logger.debug("ignoring trunk overlapping the player at (%.1f, %.1f)", target.x, target.y)
                continue
            obstacles.append(box)
        self.collision.set_obstacles(obstacles)

    def tick(self, delta_ms: float | None = None) -> ElementBatch:
        """Run one simulation step; returns elements streamed in this tick."""
        elapsed = MovementKinematics.clamp_delta(delta_ms)
        if self.profiler is not None:
            self.profiler.begin_tick("tick", {"tick": self.ticks})
        try:
            with self._profile("tick.reconcile"):
                streamed = self.reconciler.drain(self.RECONCILE_BUDGET_SECONDS)
            with self._profile("tick.obstacles"):
                self.refresh_obstacles()
            with self._profile("tick.movement"):
                state = self.player.step(self.input.keys, delta_ms)
            with self._profile("tick.stream"):
                streamed.extend(self.chunks.request_around(state.rendered_position))
            with self._profile("tick.clock"):
                self.day.advance(elapsed)
                self.pose_sampler.advance(elapsed, self.pose_sample())
            self.ticks += 1
            return streamed
        finally:
            if self.profiler is not None:
                self.profiler.end_tick(extra_context=self.chunks.diagnostics_snapshot())

    def update(self, dt: float) -> None:
        # The first clock callback has no meaningful previous frame.
        delta_ms = None if self._first_update else dt * 1000.0
        self._first_update = False
        self.tick(delta_ms)

    def schedule(self, clock: Clock, rate: float = TICKS_PER_SECOND) -> None:
        self._first_update = True
        clock.schedule_interval(self.update, 1.0 / rate)

    def unschedule(self, clock: Clock) -> None:
        clock.unschedule(self.update)

    def pose_sample(self) -> PoseSample:
        state = self.state
        return PoseSample(state.rendered_position, state.direction, state.is_moving)

    def camera_position(self) -> Position:
        cfg = self.config
        rendered = self.state.rendered_position
        x = min(rendered.x - cfg.viewport_width / 2, cfg.world_width - cfg.viewport_width)
        y = min(rendered.y - cfg.viewport_height / 2, cfg.world_height - cfg.viewport_height)
        return Position(max(0.0, x), max(0.0, y))

    def view_rect(self) -> Hitbox:
        camera = self.camera_position()
        return Hitbox.from_rect(camera.x, camera.y, self.config.viewport_width, self.config.viewport_height)

    def visible_elements(self) -> ElementBatch:
        return self.index.visible_within(self.view_rect())

    def diagnostics_snapshot(self) -> dict[str, object]:
        rendered = self.state.rendered_position
        snapshot: dict[str, object] = dict(self.chunks.diagnostics_snapshot())
        snapshot.update(
            {
                "ticks": self.ticks,
                "x": round(rendered.x, 2),
                "y": round(rendered.y, 2),
                "direction": self.state.direction.value,
                "time_of_day": self.day.phase,
                "pending_server_batches": self.reconciler.pending(),
            }
        )
        return snapshot
