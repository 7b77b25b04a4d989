import math
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")


class SeededRandom:
    """Linear congruential stream: the whole sequence is a function of the seed.

    Generated chunks must come out identical on every client and on the
    server, so the constants below are part of the world format.
    """

    MULTIPLIER = 9301
    INCREMENT = 49297
    MODULUS = 233280

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._state = seed

    def __call__(self) -> float:
        self._state = (self._state * self.MULTIPLIER + self.INCREMENT) % self.MODULUS
        return self._state / self.MODULUS

    def below(self, bound: float) -> int:
        return math.floor(self() * bound)

    def uniform(self, low: float, span: float) -> float:
        return low + self() * span

    def choice(self, options: Sequence[T]) -> T:
        return options[self.below(len(options))]


def create_seeded_random(seed: int) -> Callable[[], float]:
    return SeededRandom(seed)
