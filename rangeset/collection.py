"""Discontiguous access to host sequences through a RangeSet of positions.

A RangeSet over integer positions names the elements of a host sequence to
view, remove, or regroup. Read-only operations accept any Sequence; the
in-place ones need a MutableSequence that supports slice deletion (list,
bytearray, array.array).
"""

import array
import bisect
from collections.abc import Callable, Iterator, MutableSequence, Sequence
from itertools import chain, pairwise
from typing import Any, Generic, NamedTuple, TypeVar, overload

from loguru import logger
from typing_extensions import override

from rangeset.core import RangeSet
from rangeset.interval import Interval
from rangeset.util import stable_partition

T = TypeVar("T")


class Index(NamedTuple):
    """Position in a DiscontiguousSlice: interval number plus host position."""

    range_offset: int
    base: int


def _check_positions(host: Sequence[Any], positions: RangeSet[int]) -> None:
    bounds = positions.bounds
    if bounds is not None and (bounds.lower < 0 or bounds.upper > len(host)):
        raise IndexError(
            f"Positions {positions!r} fall outside the host sequence.\n"
            f"Got: host of length {len(host)}, positions spanning {bounds}\n"
            f"Hint: Clip first with positions & RangeSet(range(len(host)))"
        )


def _check_destination(host: Sequence[Any], at: int) -> None:
    if not 0 <= at <= len(host):
        raise IndexError(
            f"Gather destination must be within 0..{len(host)}, got {at}"
        )


class DiscontiguousSlice(Sequence[T], Generic[T]):
    """Lazy view of the elements of ``host`` at the positions in ``positions``.

    Elements are read from the host on access; nothing is copied up front.
    Integer indexing addresses elements by their offset within the view, and
    composite ``Index`` values address them by interval and host position.

    Like RangeSet.ranges, the view borrows its host: mutating the host or the
    position set while the view is in use gives undefined results.

    Example:
        >>> view = DiscontiguousSlice("ABCdefGHI", RangeSet([(3, 6)]))
        >>> "".join(view)
        'def'
    """

    def __init__(self, host: Sequence[T], positions: RangeSet[int]):
        _check_positions(host, positions)
        self.host: Sequence[T] = host
        self.positions: RangeSet[int] = positions

        # Composite indices of a subslice keep its parent's interval numbering
        self._offset: int = 0
        self._end: Index = Index(len(positions), len(host))

        # starts[k] = number of selected elements before interval k
        self._starts: list[int] = []
        total = 0
        for interval in positions:
            self._starts.append(total)
            total += interval.upper - interval.lower
        self._count: int = total

    @override
    def __len__(self) -> int:
        return self._count

    @override
    def __iter__(self) -> Iterator[T]:
        host = self.host
        for interval in self.positions:
            for position in range(interval.lower, interval.upper):
                yield host[position]

    @override
    def __reversed__(self) -> Iterator[T]:
        host = self.host
        for interval in reversed(self.positions.ranges):
            for position in range(interval.upper - 1, interval.lower - 1, -1):
                yield host[position]

    @overload
    def __getitem__(self, index: int | Index) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> "list[T] | DiscontiguousSlice[T]": ...

    @override
    def __getitem__(
        self, index: int | Index | slice
    ) -> "T | list[T] | DiscontiguousSlice[T]":
        """Element by flat offset or composite Index.

        Slicing with integer offsets returns a list of elements; slicing with
        Index values (or None) returns a narrower DiscontiguousSlice that
        shares this view's indices.
        """
        if isinstance(index, Index):
            return self.element_at(index)
        if isinstance(index, slice):
            if isinstance(index.start, Index) or isinstance(index.stop, Index):
                lower = self.start_index if index.start is None else index.start
                upper = self.end_index if index.stop is None else index.stop
                return self.subslice(lower, upper)
            return [self[i] for i in range(*index.indices(self._count))]

        offset = index + self._count if index < 0 else index
        if not 0 <= offset < self._count:
            raise IndexError(
                f"DiscontiguousSlice index {index} out of range for length {self._count}"
            )
        k = bisect.bisect_right(self._starts, offset) - 1
        return self.host[self.positions.ranges[k].lower + offset - self._starts[k]]

    @property
    def start_index(self) -> Index:
        if self.positions.is_empty:
            return self.end_index
        return Index(self._offset, self.positions.ranges[0].lower)

    @property
    def end_index(self) -> Index:
        return self._end

    @property
    def indices(self) -> list[Index]:
        """Every valid composite index, in order (excluding end_index)."""
        return [
            Index(self._offset + k, position)
            for k, interval in enumerate(self.positions)
            for position in range(interval.lower, interval.upper)
        ]

    def _check_index(self, index: Index) -> Interval[int]:
        ranges = self.positions.ranges
        k = index.range_offset - self._offset
        if not 0 <= k < len(ranges) or index.base not in ranges[k]:
            raise IndexError(f"{index!r} is not a valid index into {self!r}")
        return ranges[k]

    def _check_bound(self, index: Index) -> None:
        if index != self.end_index:
            self._check_index(index)

    def index_after(self, index: Index) -> Index:
        interval = self._check_index(index)
        if index.base + 1 < interval.upper:
            return Index(index.range_offset, index.base + 1)
        k = index.range_offset - self._offset + 1
        if k < len(self.positions):
            return Index(index.range_offset + 1, self.positions.ranges[k].lower)
        return self.end_index

    def index_before(self, index: Index) -> Index:
        ranges = self.positions.ranges
        if index == self.end_index:
            if not ranges:
                raise IndexError("Cannot step back from the start of an empty slice")
            return Index(self._offset + len(ranges) - 1, ranges[-1].upper - 1)
        interval = self._check_index(index)
        if index.base > interval.lower:
            return Index(index.range_offset, index.base - 1)
        k = index.range_offset - self._offset
        if k == 0:
            raise IndexError(f"Cannot step back from the start index {index!r}")
        return Index(index.range_offset - 1, ranges[k - 1].upper - 1)

    def element_at(self, index: Index) -> T:
        self._check_index(index)
        return self.host[index.base]

    def subslice(self, lower: Index, upper: Index) -> "DiscontiguousSlice[T]":
        """View of the elements from ``lower`` up to (not including) ``upper``.

        Both bounds must be valid indices of this view or its end_index. The
        result shares this view's indices: ``upper`` becomes its end_index and
        every element keeps the Index it has here.
        """
        self._check_bound(lower)
        self._check_bound(upper)
        if upper < lower:
            raise ValueError(
                f"Subslice bounds out of order: {lower!r} > {upper!r}"
            )
        window = RangeSet(Interval(lower=lower.base, upper=upper.base))
        result = DiscontiguousSlice(self.host, self.positions & window)
        result._offset = lower.range_offset
        result._end = upper
        return result

    @override
    def __eq__(self, other: object) -> bool:
        if isinstance(other, DiscontiguousSlice):
            return len(self) == len(other) and all(
                a == b for a, b in zip(self, other)
            )
        if isinstance(other, Sequence):
            return len(self) == len(other) and all(
                a == b for a, b in zip(self, other)
            )
        return NotImplemented

    @override
    def __repr__(self) -> str:
        return f"DiscontiguousSlice({list(self)!r})"


def select(host: Sequence[T], positions: RangeSet[int]) -> DiscontiguousSlice[T]:
    """Lazy view of the elements of ``host`` at ``positions``."""
    return DiscontiguousSlice(host, positions)


def ranges_where(host: Sequence[T], predicate: Callable[[T], bool]) -> RangeSet[int]:
    """Positions of the elements satisfying ``predicate``, found in one forward pass.

    Consecutive matches become a single interval, so the cost is one append
    per run rather than one insert per element.

        >>> ranges_where([1, 2, 3, 4, 3, 3], lambda x: x == 3)
        RangeSet(2..<3, 4..<6)
    """
    result: RangeSet[int] = RangeSet()
    start: int | None = None
    for position, element in enumerate(host):
        if predicate(element):
            if start is None:
                start = position
        elif start is not None:
            result.insert(Interval(lower=start, upper=position))
            start = None
    if start is not None:
        result.insert(Interval(lower=start, upper=len(host)))
    return result


def ranges_of(host: Sequence[T], value: T) -> RangeSet[int]:
    """Positions of the elements equal to ``value``."""
    return ranges_where(host, lambda element: element == value)


def remove_all(host: MutableSequence[T], positions: RangeSet[int]) -> None:
    """Remove the elements at ``positions`` from ``host`` in place.

    The remaining elements keep their relative order. Kept elements are
    copied down over the removed ones and the tail is deleted once, so the
    host object itself is never replaced.
    """
    if positions.is_empty:
        return
    _check_positions(host, positions)

    length = len(host)
    end = Interval(lower=length, upper=length)
    write = positions.ranges[0].lower

    for removed, following in pairwise(chain(positions, (end,))):
        for read in range(removed.upper, following.lower):
            host[write] = host[read]
            write += 1

    del host[write:]
    logger.debug("remove_all: removed {} of {} elements", length - write, length)


def removing_all(host: Sequence[T], positions: RangeSet[int]) -> Sequence[T]:
    """Copy of ``host`` without the elements at ``positions``.

    The result type follows the host:
    - str, bytes: Joined from the kept slices
    - list, tuple, bytearray: Rebuilt with ``type(host)(elements)``
    - array.array: Rebuilt with the host's typecode
    - anything else (range, subclasses, custom Sequences): A list

        >>> removing_all("ABCdefGHI", RangeSet([(3, 6)]))
        'ABCGHI'
        >>> removing_all(range(6), RangeSet([(1, 3)]))
        [0, 3, 4, 5]
    """
    _check_positions(host, positions)
    kept = positions.inverted(range(len(host)))

    if isinstance(host, (str, bytes)):
        return host[0:0].join(  # pyright: ignore[reportReturnType]
            host[interval.lower : interval.upper] for interval in kept
        )

    elements = chain.from_iterable(
        (host[position] for position in interval.to_range()) for interval in kept
    )
    if type(host) in (list, tuple, bytearray):
        return type(host)(elements)
    if isinstance(host, array.array):
        return array.array(host.typecode, elements)
    return list(elements)


def gather(host: MutableSequence[T], positions: RangeSet[int], at: int) -> range:
    """Move the elements at ``positions`` to one block just before ``at``.

    ``at`` is a position in ``host`` as it is before the call. Selected
    elements before ``at`` slide up to it and selected elements from ``at``
    onward slide down to it; selected and unselected elements each keep
    their relative order. Elements are rotated in place, without a second
    buffer.

    Returns:
        The positions the gathered block occupies afterwards.

    Example:
        >>> numbers = list(range(1, 21))
        >>> gather(numbers, RangeSet([(10, 15), (18, 20)]), at=4)
        range(4, 11)
        >>> numbers[:11]
        [1, 2, 3, 4, 11, 12, 13, 14, 15, 19, 20]
    """
    _check_destination(host, at)
    bounds = positions.bounds
    if bounds is None:
        return range(at, at)
    _check_positions(host, positions)

    lower = at
    if bounds.lower < at:
        # Selected elements sink to the end of host[:at]
        lower = stable_partition(host, bounds.lower, at, positions.contains)

    upper = at
    if bounds.upper > at:
        # Unselected elements sink to the end of host[at:]
        upper = stable_partition(
            host, at, bounds.upper, lambda position: position not in positions
        )

    logger.debug(
        "gather: moved {} elements to {}..<{}", upper - lower, lower, upper
    )
    return range(lower, upper)


def gather_where(
    host: MutableSequence[T], predicate: Callable[[T], bool], at: int
) -> range:
    """Move the elements satisfying ``predicate`` to one block just before ``at``.

    Same ordering guarantees and return value as gather(); ``predicate`` is
    called once per element.
    """
    _check_destination(host, at)
    return gather(host, ranges_where(host, predicate), at)
