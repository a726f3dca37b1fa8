"""
Ranking engine.

Ranks are computed without reordering the caller's sequence: rows keep
their position (and their display keys) across refreshes, only the rank
value attached to each position changes.
"""

from typing import Any, Callable, Sequence, TypeVar

T = TypeVar("T")


def compute_ranks(scores: Sequence[Any]) -> list[int]:
    """
    Compute a 1-based rank for every position of `scores`.

    The best (greatest) score gets rank 1. Equal scores still get distinct
    ranks, the earlier position winning; any real tie-break must be part of
    the score comparison itself.

    Args:
        scores: Totally ordered scores, in the caller's order

    Returns:
        Ranks aligned with `scores`
    """
    # Best-to-worst order of positions; sorted() is stable with reverse=True
    order = sorted(range(len(scores)), key=lambda i: scores[i], reverse=True)

    # Invert the permutation: the place of each position in that order
    ranks = [0] * len(scores)
    for place, index in enumerate(order):
        ranks[index] = place + 1
    return ranks


def rank_items(items: Sequence[T], key: Callable[[T], Any]) -> list[tuple[T, int]]:
    """Pair every item with its rank, keeping the input order."""
    ranks = compute_ranks([key(item) for item in items])
    return list(zip(items, ranks))
