"""Shuffles that keep categories spread out."""
import math
import random
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def interleaved_shuffle(
    items: Sequence[T],
    category_of: Callable[[T], str],
    rng: Optional[random.Random] = None,
    swap_ratio: float = 0.15,
) -> List[T]:
    """Shuffle items so that consecutive items rarely share a category.

    Items are shuffled within their category, dealt round-robin across
    categories in order of first appearance, and then lightly scrambled with
    ``max(1, floor(swap_ratio * n))`` random pairwise swaps.
    """
    rng = rng or random.Random()

    order: List[str] = []
    buckets: Dict[str, List[T]] = {}
    for item in items:
        category = category_of(item)
        if category not in buckets:
            order.append(category)
            buckets[category] = []
        buckets[category].append(item)

    for category in order:
        rng.shuffle(buckets[category])

    result: List[T] = []
    rotation = [buckets[category] for category in order]
    while rotation:
        for bucket in rotation:
            result.append(bucket.pop())
        rotation = [bucket for bucket in rotation if bucket]

    if len(result) < 2:
        return result

    for _ in range(max(1, math.floor(swap_ratio * len(result)))):
        i = rng.randrange(len(result))
        j = rng.randrange(len(result))
        result[i], result[j] = result[j], result[i]

    return result
