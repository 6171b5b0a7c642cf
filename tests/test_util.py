import math

import pytest

from rangeset.util import reverse, rotate, stable_partition


def test_reverse_subrange() -> None:
    seq = list(range(8))
    reverse(seq, 2, 6)
    assert seq == [0, 1, 5, 4, 3, 2, 6, 7]


def test_reverse_empty_and_single() -> None:
    seq = [1, 2, 3]
    reverse(seq, 1, 1)
    reverse(seq, 1, 2)
    assert seq == [1, 2, 3]


@pytest.mark.parametrize(
    "lo, mid, hi, expected, point",
    [
        (0, 3, 5, [3, 4, 0, 1, 2], 2),
        (1, 2, 5, [0, 2, 3, 4, 1], 4),
        (0, 0, 5, [0, 1, 2, 3, 4], 5),
        (0, 5, 5, [0, 1, 2, 3, 4], 0),
    ],
)
def test_rotate(lo: int, mid: int, hi: int, expected: list[int], point: int) -> None:
    seq = list(range(5))
    assert rotate(seq, lo, mid, hi) == point
    assert seq == expected


def test_stable_partition_keeps_both_orders() -> None:
    seq = list(range(20))
    original = list(seq)

    point = stable_partition(seq, 0, len(seq), lambda i: original[i] % 3 == 0)

    assert seq[:point] == [x for x in original if x % 3 != 0]
    assert seq[point:] == [x for x in original if x % 3 == 0]


def test_stable_partition_predicate_sees_original_elements() -> None:
    seq = list("aBcDeFgH")
    seen: list[str] = []

    def is_upper(i: int) -> bool:
        seen.append(seq[i])
        return seq[i].isupper()

    point = stable_partition(seq, 0, len(seq), is_upper)

    assert "".join(seq) == "acegBDFH"
    assert point == 4
    assert "".join(seen) == "aBcDeFgH"


def test_stable_partition_subrange() -> None:
    seq = [9, 1, 2, 3, 4, 9]
    point = stable_partition(seq, 1, 5, lambda i: i % 2 == 1)

    assert seq == [9, 2, 4, 1, 3, 9]
    assert point == 3


def test_stable_partition_empty() -> None:
    seq: list[int] = []
    assert stable_partition(seq, 0, 0, lambda i: True) == 0


class CountingList(list):
    """List that counts item assignments."""

    writes = 0

    def __setitem__(self, index, value):  # type: ignore[no-untyped-def]
        self.writes += 1
        super().__setitem__(index, value)


@pytest.mark.parametrize("size", [64, 256, 1024])
def test_stable_partition_makes_n_log_n_moves(size: int) -> None:
    seq = CountingList(range(size))

    stable_partition(seq, 0, size, lambda i: i % 2 == 0)

    assert seq == [x for x in range(size) if x % 2] + [x for x in range(size) if x % 2 == 0]
    # Every reversal swap writes two slots
    assert seq.writes <= 2 * size * math.log2(size)
