"""In-place rearrangement primitives for mutable sequences.

These helpers move elements with swaps only, so they work on any
MutableSequence (list, bytearray, array.array) without allocating a
second buffer the size of the input.
"""

from collections.abc import Callable, MutableSequence
from typing import Any


def reverse(seq: MutableSequence[Any], lo: int, hi: int) -> None:
    """Reverse ``seq[lo:hi]`` in place."""
    hi -= 1
    while lo < hi:
        seq[lo], seq[hi] = seq[hi], seq[lo]
        lo += 1
        hi -= 1


def rotate(seq: MutableSequence[Any], lo: int, mid: int, hi: int) -> int:
    """Swap the blocks ``seq[lo:mid]`` and ``seq[mid:hi]`` in place.

    Returns the index where the former ``seq[lo:mid]`` block now starts.
    """
    if lo == mid:
        return hi
    if mid == hi:
        return lo
    reverse(seq, lo, mid)
    reverse(seq, mid, hi)
    reverse(seq, lo, hi)
    return lo + (hi - mid)


def stable_partition(
    seq: MutableSequence[Any],
    lo: int,
    hi: int,
    belongs_in_suffix: Callable[[int], bool],
) -> int:
    """Stably move the elements of ``seq[lo:hi]`` flagged by ``belongs_in_suffix`` to the end.

    ``belongs_in_suffix`` receives an index into ``seq`` as it was before the
    call. Each index is tested exactly once, before any element at that index
    has been moved, so the predicate may consult the original positions or
    read ``seq[index]``.

    Divide and conquer with block rotations. Each rotation is linear in the
    block it swaps, so the whole partition makes O(n log n) element moves
    with O(log n) stack depth; a linear-move stable partition would need a
    scratch buffer the size of the input.

    Returns:
        The partition point: first index of the suffix block.
    """
    count = hi - lo
    if count == 0:
        return lo
    if count == 1:
        return lo if belongs_in_suffix(lo) else hi

    mid = lo + count // 2
    left = stable_partition(seq, lo, mid, belongs_in_suffix)
    right = stable_partition(seq, mid, hi, belongs_in_suffix)
    # seq[left:mid] is the left half's suffix, seq[mid:right] the right half's prefix
    return rotate(seq, left, mid, right)
