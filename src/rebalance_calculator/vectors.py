"""Numeric helpers over weight, price and quantity vectors aligned by asset index."""

import math
from typing import List, Sequence


def vector_sum(v: Sequence[float]) -> float:
    return math.fsum(v)


def normalize(v: Sequence[float]) -> List[float]:
    """
    Divide every element by the vector sum so the result sums to one.

    Raises:
        ValueError: If the vector sums to zero
    """
    total = vector_sum(v)
    if total == 0:
        raise ValueError(f"Cannot normalize a vector that sums to zero: {list(v)}")
    return [x / total for x in v]


def scale(v: Sequence[float], k: float) -> List[float]:
    return [x * k for x in v]


def elementwise_multiply(a: Sequence[float], b: Sequence[float]) -> List[float]:
    if len(a) != len(b):
        raise ValueError(f"Vector length mismatch: {len(a)} != {len(b)}")
    return [x * y for x, y in zip(a, b)]
