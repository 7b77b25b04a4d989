"""Tests for the in-game day clock."""

import pytest

from forest.world.daycycle import DayClock


def test_hour_advances_once_per_second():
    clock = DayClock(0.1)
    assert clock.advance(999) is False
    assert clock.hour == 8.0
    assert clock.advance(1) is True
    assert clock.hour == pytest.approx(8.1)

    assert clock.advance(2500) is True
    assert clock.hour == pytest.approx(8.3)


def test_wraps_to_midnight():
    clock = DayClock(1.0, start_hour=23.5)
    clock.advance(1000)
    assert clock.hour == 0.0
    assert clock.phase == "night"


@pytest.mark.parametrize(
    "hour, phase",
    [(5.9, "night"), (6.0, "dawn"), (8.0, "day"), (17.9, "day"), (18.5, "dusk"), (20.0, "night")],
)
def test_phase(hour, phase):
    assert DayClock(0.1, start_hour=hour).phase == phase


def test_formatted_twelve_hour_clock():
    assert DayClock(0.1).formatted() == "8:00 AM"
    assert DayClock(0.1, start_hour=13.5).formatted() == "1:30 PM"
    assert DayClock(0.1, start_hour=0).formatted() == "12:00 AM"
    assert DayClock(0.1, start_hour=12.25).formatted() == "12:15 PM"
