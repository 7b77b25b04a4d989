"""Tests for the seeded linear congruential stream."""

from forest.world.seeded import SeededRandom, create_seeded_random


def test_first_values_follow_the_lcg_recurrence():
    assert SeededRandom(0)() == 49297 / 233280
    assert SeededRandom(1)() == (9301 + 49297) / 233280

    random = SeededRandom(0)
    random()
    assert random() == ((49297 * 9301 + 49297) % 233280) / 233280


def test_same_seed_same_sequence():
    a = create_seeded_random(5000001)
    b = create_seeded_random(5000001)
    first = [a() for _ in range(200)]
    assert first == [b() for _ in range(200)]
    assert all(0.0 <= value < 1.0 for value in first)


def test_different_seeds_diverge():
    a = SeededRandom(10)
    b = SeededRandom(11)
    assert [a() for _ in range(5)] != [b() for _ in range(5)]


def test_helpers_draw_from_the_same_stream():
    reference = SeededRandom(42)
    expected = reference()

    random = SeededRandom(42)
    assert random.below(100) == int(expected * 100)

    options = ("red", "green", "blue")
    picked = SeededRandom(42).choice(options)
    assert picked == options[int(expected * 3)]
    assert SeededRandom(42).uniform(110.0, 30.0) == 110.0 + expected * 30.0
