"""Tests for circular placement validation."""

from forest.world.placement import PlacementValidator
from forest.world.types import Flower, Tree


def test_empty_area_is_always_valid():
    assert PlacementValidator().is_valid(0, 0, 40, [])


def test_overlap_threshold_includes_buffer():
    validator = PlacementValidator()
    tree = Tree(id=1, x=0, y=0, size=40)

    # Centres 45 apart, radii 20 + 20 plus a buffer of 10.
    assert validator.is_valid(45, 0, 40, [tree]) is False
    assert validator.is_valid(50, 0, 40, [tree]) is True
    assert validator.is_valid(0, 49, 40, [tree]) is False


def test_sizeless_elements_use_default_size():
    validator = PlacementValidator()
    flower = Flower(id=3_000_000, x=0, y=0)

    assert validator.is_valid(20, 0, 10, [flower]) is True
    assert validator.is_valid(19, 0, 10, [flower]) is False


def test_point_clearance_uses_inscribed_circle():
    validator = PlacementValidator()
    tree = Tree(id=1, x=0, y=0, size=40)

    assert validator.is_clear_of(20, 20, [tree]) is False
    assert validator.is_clear_of(0, 0, [tree]) is True
    assert validator.is_clear_of(39, 39, [tree]) is True


def test_find_position_scales_draws_to_free_span():
    validator = PlacementValidator()
    draws = iter([0.5, 0.25])
    spot = validator.find_position(lambda: next(draws), 500, 1000, 500, 100, [])
    assert spot == (500 + 200, 1000 + 100)


def test_find_position_gives_up_after_attempt_limit():
    validator = PlacementValidator(attempts=5)
    blocker = Tree(id=1, x=0, y=0, size=500)
    calls = []

    def random():
        calls.append(1)
        return 0.0

    assert validator.find_position(random, 0, 0, 500, 40, [blocker]) is None
    assert len(calls) == 10
