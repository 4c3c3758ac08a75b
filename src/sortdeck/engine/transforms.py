"""Pure value transforms applied by action cards.

Every function takes the selected values ordered by card position and returns
a new list of the same length, or ``None`` when the selection size does not
suit the transform. Nothing here touches game state.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Callable

from .types import (
    DerangeTransform,
    DivideTransform,
    ModifyTransform,
    MultiplyTransform,
    ShiftTransform,
    Transform,
)


def modify(values: Sequence[int], delta: int) -> list[int] | None:
    if len(values) != 1:
        return None
    return [values[0] + delta]


def multiply(values: Sequence[int], factor: int) -> list[int] | None:
    if len(values) != 1:
        return None
    return [values[0] * factor]


def divide(values: Sequence[int], divisor: int) -> list[int] | None:
    if len(values) != 1 or divisor == 0:
        return None
    return [values[0] // divisor]


def shift(values: Sequence[int], magnitude: int) -> list[int] | None:
    """Rotate values; positive magnitude moves each element toward the end."""
    n = len(values)
    if n == 0:
        return None
    k = magnitude % n
    if k == 0:
        return list(values)
    return list(values[-k:]) + list(values[:-k])


def reverse(values: Sequence[int]) -> list[int] | None:
    if len(values) == 0:
        return None
    return list(reversed(values))


def swap(values: Sequence[int]) -> list[int] | None:
    if len(values) < 2:
        return None
    result = list(values)
    result[0], result[-1] = result[-1], result[0]
    return result


def split_swap(values: Sequence[int]) -> list[int] | None:
    # Odd lengths: the middle element travels with the right half.
    if len(values) < 2:
        return None
    mid = len(values) // 2
    return list(values[mid:]) + list(values[:mid])


def derangement_indices(n: int, rng: random.Random) -> list[int] | None:
    """Return source indices for each target position, none of them fixed.

    Randomized backtracking: each position picks among unused sources that
    are neither itself nor already known to dead-end there. When a position
    runs out of choices, the previous assignment is released and remembered
    as tried for that earlier position.
    """
    if n < 2:
        return None

    result: list[int | None] = [None] * n
    available = set(range(n))
    tried: list[set[int]] = [set() for _ in range(n)]

    position = 0
    while position < n:
        choices = sorted(idx for idx in available if idx != position and idx not in tried[position])
        if not choices:
            if position == 0:
                # unreachable for n >= 2
                return list(range(1, n)) + [0]
            tried[position].clear()
            position -= 1
            previous = result[position]
            assert previous is not None
            available.add(previous)
            tried[position].add(previous)
            result[position] = None
            continue
        chosen = choices[rng.randrange(len(choices))]
        result[position] = chosen
        available.discard(chosen)
        position += 1

    return [idx for idx in result if idx is not None]


def derange(values: Sequence[int], rng: random.Random) -> list[int] | None:
    order = derangement_indices(len(values), rng)
    if order is None:
        return None
    return [values[idx] for idx in order]


TransformFn = Callable[[Transform, Sequence[int], random.Random], "list[int] | None"]


def _apply_modify(t: Transform, values: Sequence[int], rng: random.Random) -> list[int] | None:
    assert isinstance(t, ModifyTransform)
    return modify(values, t.delta)


def _apply_multiply(t: Transform, values: Sequence[int], rng: random.Random) -> list[int] | None:
    assert isinstance(t, MultiplyTransform)
    return multiply(values, t.factor)


def _apply_divide(t: Transform, values: Sequence[int], rng: random.Random) -> list[int] | None:
    assert isinstance(t, DivideTransform)
    return divide(values, t.divisor)


def _apply_shift(t: Transform, values: Sequence[int], rng: random.Random) -> list[int] | None:
    assert isinstance(t, ShiftTransform)
    return shift(values, t.magnitude)


def _apply_derange(t: Transform, values: Sequence[int], rng: random.Random) -> list[int] | None:
    assert isinstance(t, DerangeTransform)
    return derange(values, rng)


TRANSFORMS: dict[str, TransformFn] = {
    "modify": _apply_modify,
    "multiply": _apply_multiply,
    "divide": _apply_divide,
    "shift": _apply_shift,
    "reverse": lambda t, values, rng: reverse(values),
    "swap": lambda t, values, rng: swap(values),
    "split_swap": lambda t, values, rng: split_swap(values),
    "derange": _apply_derange,
}


def apply_transform(transform: Transform, values: Sequence[int], rng: random.Random) -> list[int] | None:
    handler = TRANSFORMS.get(transform.type)
    if handler is None:
        return None
    result = handler(transform, values, rng)
    if result is not None and len(result) != len(values):
        return None
    return result
