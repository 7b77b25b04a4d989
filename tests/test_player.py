"""Tests for keyboard-driven player kinematics."""

import pytest

from forest.config import GameConfig
from forest.entities.player import MovementKinematics
from forest.gameplay.input import InputState, direction_for_key, held_directions
from forest.physics.collision import CollisionDetector
from forest.world.types import Direction, Hitbox, Position

RIGHT = {"ArrowRight": True}


def _player(start=None, **overrides) -> MovementKinematics:
    return MovementKinematics(GameConfig().with_overrides(**overrides), start=start)


def test_starts_at_world_centre_facing_down():
    player = _player()
    assert player.state.target_position == Position(2500, 2500)
    assert player.state.rendered_position == Position(2500, 2500)
    assert player.state.direction is Direction.DOWN
    assert player.state.is_moving is False


def test_one_reference_frame_moves_by_speed():
    player = _player()
    state = player.step(RIGHT, 16.67)
    assert state.target_position.x == pytest.approx(2502.5)
    assert state.target_position.y == 2500
    assert state.direction is Direction.RIGHT
    assert state.is_moving is True


def test_missing_delta_falls_back_to_reference_frame():
    player = _player()
    player.step({"s": True})
    assert player.state.target_position.y == pytest.approx(2502.5)
    assert player.state.direction is Direction.DOWN


def test_delta_is_clamped():
    player = _player()
    player.step(RIGHT, 5000)
    assert player.state.target_position.x == pytest.approx(2500 + 2.5 * 100 / 16.67)

    still = _player()
    still.step(RIGHT, -20)
    assert still.state.target_position.x == 2500
    assert MovementKinematics.clamp_delta(None) == 16.67


def test_displacement_is_frame_rate_independent():
    fast = _player()
    slow = _player()
    for _ in range(60):
        fast.step(RIGHT, 16)
    for _ in range(30):
        slow.step(RIGHT, 32)
    assert fast.state.target_position.x == pytest.approx(slow.state.target_position.x, rel=1e-9)
    assert fast.state.target_position.x == pytest.approx(2500 + 2.5 * 960 / 16.67)


def test_target_never_leaves_world():
    player = _player(start=Position(4900, 20), movement_speed=40)
    for _ in range(50):
        player.step({"ArrowRight": True, "ArrowUp": True}, 16.67)
    assert player.state.target_position == Position(4936, 0)

    player = _player(start=Position(30, 4900), movement_speed=40)
    for _ in range(50):
        player.step({"a": True, "s": True}, 16.67)
    assert player.state.target_position == Position(0, 4936)


def test_rendered_position_converges_after_release():
    player = _player()
    for _ in range(30):
        player.step(RIGHT, 16.67)
    lag = player.state.target_position.x - player.state.rendered_position.x
    assert lag > 0

    previous = lag
    for _ in range(200):
        player.step({}, 16.67)
        gap = player.state.target_position.x - player.state.rendered_position.x
        assert gap <= previous
        previous = gap
    assert player.state.rendered_position.distance_sq(player.state.target_position) <= 0.1
    assert player.state.is_moving is False


def test_blocked_axis_does_not_stop_the_other():
    config = GameConfig()
    detector = CollisionDetector(config.character_size, config.world_width, config.world_height)
    # Wall just right of the feet hitbox (2516..2548) at the start position.
    detector.set_obstacles([Hitbox(left=2549, right=2600, top=2000, bottom=3000)])
    player = MovementKinematics(config, detector)

    player.step({"ArrowRight": True, "ArrowDown": True}, 16.67)
    assert player.state.target_position.x == 2500
    assert player.state.target_position.y == pytest.approx(2502.5)
    assert player.state.direction is Direction.RIGHT


def test_last_evaluated_key_sets_direction():
    player = _player()
    player.step({"w": True, "a": True}, 16.67)
    assert player.state.direction is Direction.LEFT
    assert player.state.target_position.x == pytest.approx(2497.5)
    assert player.state.target_position.y == pytest.approx(2497.5)

    player.step({"ArrowLeft": True, "ArrowRight": True}, 16.67)
    assert player.state.direction is Direction.RIGHT
    assert player.state.target_position.x == pytest.approx(2497.5)


def test_animation_advances_every_120ms_and_resets_on_stop():
    player = _player()
    for _ in range(7):
        player.step(RIGHT, 16.67)
    assert player.state.animation_frame == 0
    player.step(RIGHT, 16.67)
    assert player.state.animation_frame == 1

    for _ in range(6):
        player.step(RIGHT, 60)
        player.step(RIGHT, 60)
    assert player.state.animation_frame == 1

    player.step({}, 16.67)
    assert player.state.animation_frame == 0


def test_update_uses_timestamps():
    player = _player()
    player.update(RIGHT, 1000.0)
    first = player.state.target_position.x
    assert first == pytest.approx(2502.5)

    player.update(RIGHT, 1032.0)
    assert player.state.target_position.x == pytest.approx(first + 2.5 * 32 / 16.67)


def test_step_accepts_directions():
    player = _player()
    player.step([Direction.UP], 16.67)
    assert player.state.target_position.y == pytest.approx(2497.5)


def test_input_state_tracks_movement_keys():
    keys = InputState()
    keys.press("w")
    keys.press("ArrowLeft")
    keys.press("x")
    assert keys.directions() == [Direction.UP, Direction.LEFT]
    assert keys.is_pressed("w") is True

    keys.release("w")
    assert keys.is_pressed("w") is False
    assert keys.directions() == [Direction.LEFT]

    keys.set_held(["D"])
    assert held_directions(keys.keys) == [Direction.RIGHT]
    keys.clear()
    assert keys.directions() == []
    assert direction_for_key("ArrowDown") is Direction.DOWN
    assert direction_for_key("q") is None
