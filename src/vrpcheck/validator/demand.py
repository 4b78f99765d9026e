# src/vrpcheck/validator/demand.py
from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import zip_longest


def is_non_negative(demand: Sequence[int]) -> bool:
    return all(value >= 0 for value in demand)


def sum_demands(demands: Iterable[Sequence[int]]) -> list[int]:
    """
    @brief
    Elementwise sum of demand vectors.

    @details
    Shorter vectors are zero-padded to the longest one, so dimensions that a
    task does not mention count as zero.
    """
    total: list[int] = []
    for demand in demands:
        total = [a + b for a, b in zip_longest(total, demand, fillvalue=0)]
    return total


def _trim(demand: Sequence[int]) -> list[int]:
    values = list(demand)
    while values and values[-1] == 0:
        values.pop()
    return values


def balanced(a: Iterable[Sequence[int]], b: Iterable[Sequence[int]]) -> bool:
    """True iff both demand sets add up to the same vector after zero-padding."""
    return _trim(sum_demands(a)) == _trim(sum_demands(b))


__all__ = ["balanced", "is_non_negative", "sum_demands"]
