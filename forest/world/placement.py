import math
from typing import Callable, Sequence

from forest.constants import DEFAULT_ELEMENT_SIZE, PLACEMENT_ATTEMPTS, PLACEMENT_BUFFER
from forest.world.types import WorldElement


class PlacementValidator:
    """Rejection sampling of element positions inside a chunk.

    Every element is approximated by a circle of diameter ``size`` centred on
    its square footprint. This over-rejects for irregular sprites but never
    lets two footprints overlap.
    """

    def __init__(
        self,
        buffer: float = PLACEMENT_BUFFER,
        attempts: int = PLACEMENT_ATTEMPTS,
        default_size: float = DEFAULT_ELEMENT_SIZE,
    ) -> None:
        self.buffer = buffer
        self.attempts = attempts
        self.default_size = default_size

    def is_valid(self, x: float, y: float, size: float, placed: Sequence[WorldElement]) -> bool:
        half = size / 2
        cx = x + half
        cy = y + half
        for element in placed:
            element_size = element.footprint(self.default_size)
            element_half = element_size / 2
            dx = cx - (element.x + element_half)
            dy = cy - (element.y + element_half)
            if math.sqrt(dx * dx + dy * dy) < half + element_half + self.buffer:
                return False
        return True

    def is_clear_of(self, x: float, y: float, placed: Sequence[WorldElement]) -> bool:
        # Point test against each element's inscribed circle, no buffer.
        for element in placed:
            element_half = element.footprint(self.default_size) / 2
            dx = x - (element.x + element_half)
            dy = y - (element.y + element_half)
            if math.sqrt(dx * dx + dy * dy) < element_half:
                return False
        return True

    def find_position(
        self,
        random: Callable[[], float],
        origin_x: float,
        origin_y: float,
        extent: float,
        size: float,
        placed: Sequence[WorldElement],
    ) -> tuple[int, int] | None:
        span = extent - size
        for _ in range(self.attempts):
            x = origin_x + math.floor(random() * span)
            y = origin_y + math.floor(random() * span)
            if self.is_valid(x, y, size, placed):
                return x, y
        return None
