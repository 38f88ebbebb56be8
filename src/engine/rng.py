"""Park–Miller multiplicative congruential generator.

The generator is intentionally tiny: every daily puzzle is derived from it, so
two callers that start from the same seed must observe the exact same stream
of values on every platform.  All arithmetic happens on Python integers and a
single IEEE division, which keeps the stream bit-for-bit reproducible.
"""

from __future__ import annotations

from typing import List, MutableSequence, Sequence, Tuple, TypeVar

from project_config import get_section

MULTIPLIER = 16807
MODULUS = 2147483647

ZERO_SEED_SUBSTITUTE = int(get_section("rng.zero_seed_substitute", 1))

T = TypeVar("T")


def lcg_next(state: int) -> Tuple[float, int]:
    """Advance ``state`` once and return ``(value, new_state)``.

    ``value`` lies in ``[0, 1)`` for any nonzero state below the modulus.
    """

    new_state = (state * MULTIPLIER) % MODULUS
    return new_state / MODULUS, new_state


def normalise_seed(seed: int) -> int:
    """Reduce ``seed`` into the generator's state space, remapping zero."""

    state = int(seed) % MODULUS
    if state == 0:
        state = ZERO_SEED_SUBSTITUTE % MODULUS or 1
    return state


class SeededRng:
    """Stateful stream over :func:`lcg_next`."""

    __slots__ = ("_state", "_seed")

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._state = normalise_seed(seed)

    @property
    def state(self) -> int:
        return self._state

    @property
    def seed(self) -> int:
        return self._seed

    def random(self) -> float:
        value, self._state = lcg_next(self._state)
        return value

    def randrange(self, n: int) -> int:
        """Return ``floor(random() * n)``; consumes exactly one value."""

        if n <= 0:
            raise ValueError("randrange() requires a positive bound")
        return int(self.random() * n)

    def shuffle(self, items: MutableSequence[T]) -> None:
        """Fisher–Yates shuffle in place, walking from the end."""

        for i in range(len(items) - 1, 0, -1):
            j = self.randrange(i + 1)
            items[i], items[j] = items[j], items[i]

    def __repr__(self) -> str:
        return f"SeededRng(seed={self._seed!r}, state={self._state})"


def integer_shuffle(items: Sequence[T], seed: int) -> List[T]:
    """Return a shuffled copy using the raw integer state as the swap source.

    Word banks were historically ordered with ``j = state % (i + 1)`` instead
    of scaling the float value, so the two shuffles are not interchangeable.
    The seed is used as-is; a zero seed leaves every swap at index zero.
    """

    result = list(items)
    state = seed
    for i in range(len(result) - 1, 0, -1):
        state = (state * MULTIPLIER) % MODULUS
        j = state % (i + 1)
        result[i], result[j] = result[j], result[i]
    return result


__all__ = [
    "MODULUS",
    "MULTIPLIER",
    "SeededRng",
    "integer_shuffle",
    "lcg_next",
    "normalise_seed",
]
