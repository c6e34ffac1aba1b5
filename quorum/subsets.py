"""
Subset Enumerator
Every k-element combination of the shares, in a fixed order.

Combinations come out in lexicographic order of their index tuples and
keep the input order within each tuple. The enumeration walks an index
vector instead of recursing, so deep thresholds cost no stack.
"""

from math import comb
from typing import Iterator, Sequence, TypeVar

T = TypeVar("T")


def count_combinations(n: int, k: int) -> int:
    """Number of k-combinations of n items (0 when k > n)."""
    if n < 0 or k < 1:
        raise ValueError(f"Invalid combination size: n={n}, k={k}")
    return comb(n, k)


def index_combinations(n: int, k: int) -> Iterator[tuple[int, ...]]:
    """
    Yield every ascending k-tuple of indices drawn from ``range(n)``.

    Args:
        n: Number of items.
        k: Combination size, at least 1.

    Yields:
        Index tuples in lexicographic order.
    """
    if n < 0 or k < 1:
        raise ValueError(f"Invalid combination size: n={n}, k={k}")
    if k > n:
        return

    indices = list(range(k))
    while True:
        yield tuple(indices)

        # Rightmost slot that can still move forward
        i = k - 1
        while i >= 0 and indices[i] == n - k + i:
            i -= 1
        if i < 0:
            return

        indices[i] += 1
        for j in range(i + 1, k):
            indices[j] = indices[j - 1] + 1


def combinations(items: Sequence[T], k: int) -> Iterator[tuple[T, ...]]:
    """Yield every k-combination of ``items`` in lexicographic index order."""
    for indices in index_combinations(len(items), k):
        yield tuple(items[i] for i in indices)
