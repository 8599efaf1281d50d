from __future__ import annotations
from typing import List


def guess_order(n: int) -> List[int]:
    """Prefix lengths to try, in order, when `n` tokens remain.

    Two-word names (first + last) are the common case, then three. A single
    token is tried only after those so a generic word does not swallow the
    start of a longer name. Longer groupings follow in increasing length.
    An empty list means nothing more can be resolved.
    """
    if n <= 0:
        return []
    if n == 1:
        return [1]
    if n == 2:
        return [2, 1]
    return [2, 3, 1] + list(range(4, n + 1))
