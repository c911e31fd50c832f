"""
Assembly Module - Merging Imported Batches into One History

Users often re-paste their whole history with a few new values appended.
Batches fully contained in a newer batch are dropped; the rest are
concatenated oldest first.
"""

from __future__ import annotations

from typing import List, Optional, Sequence


def is_contiguous_subsequence(subset: Sequence[float], superset: Sequence[float]) -> bool:
    """True when `subset` appears as an unbroken run inside `superset`."""
    m, n = len(subset), len(superset)
    if m > n:
        return False
    if m == 0:
        return True

    subset = list(subset)
    superset = list(superset)
    return any(superset[i:i + m] == subset for i in range(n - m + 1))


def assemble_series(batches_newest_first: Sequence[Sequence[float]]) -> List[float]:
    """
    One chronological history from batches listed newest first.

    A batch is skipped when it is contained in a batch already kept.
    """
    kept: List[List[float]] = []
    for batch in batches_newest_first:
        batch = list(batch)
        if any(is_contiguous_subsequence(batch, newer) for newer in kept):
            continue
        kept.append(batch)

    history: List[float] = []
    for batch in reversed(kept):
        history.extend(batch)
    return history


def is_duplicate(latest: Optional[Sequence[float]], numbers: Sequence[float]) -> bool:
    """True when `numbers` equals the most recent batch element by element."""
    if latest is None:
        return False
    return list(latest) == list(numbers)
