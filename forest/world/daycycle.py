from forest.constants import DAY_PHASES, DAY_START_HOUR


class DayClock:
    """In-game time of day, stepped once per elapsed real second."""

    STEP_MS = 1000.0

    def __init__(self, time_scale: float, start_hour: float = DAY_START_HOUR) -> None:
        self.time_scale = time_scale
        self.hour = start_hour % 24
        self._elapsed_ms = 0.0

    def advance(self, delta_ms: float) -> bool:
        """Accumulate ``delta_ms``; returns True if the hour changed."""
        self._elapsed_ms += max(0.0, delta_ms)
        changed = False
        while self._elapsed_ms >= self.STEP_MS:
            self._elapsed_ms -= self.STEP_MS
            self.hour += self.time_scale
            if self.hour >= 24:
                self.hour = 0.0
            changed = True
        return changed

    @property
    def phase(self) -> str:
        for start, end, name in DAY_PHASES:
            if start <= self.hour < end:
                return name
        return "night"

    def formatted(self) -> str:
        hours = int(self.hour)
        minutes = int((self.hour % 1) * 60)
        suffix = "PM" if hours >= 12 else "AM"
        return f"{hours % 12 or 12}:{minutes:02d} {suffix}"
