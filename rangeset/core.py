import bisect
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, Generic, overload

from typing_extensions import Self, override

from rangeset.interval import Bound, Interval, coerce

IntervalLike = Interval[Any] | range | tuple[Any, Any]


def _lower(interval: Interval[Any]) -> Any:
    return interval.lower


def _upper(interval: Interval[Any]) -> Any:
    return interval.upper


def _is_bound_pair(value: Any) -> bool:
    """True for a bare ``(lower, upper)`` tuple, as opposed to a tuple of intervals."""
    return (
        isinstance(value, tuple)
        and len(value) == 2
        and not any(isinstance(v, (Interval, range, tuple)) for v in value)
    )


class Ranges(Sequence[Interval[Bound]], Generic[Bound]):
    """Read-only view of the intervals that make up a RangeSet.

    The view borrows the set's storage rather than copying it, so it must not
    be used after the owning set has been mutated.
    """

    def __init__(self, ranges: list[Interval[Bound]]):
        self._ranges: list[Interval[Bound]] = ranges

    @override
    def __len__(self) -> int:
        return len(self._ranges)

    @overload
    def __getitem__(self, index: int) -> Interval[Bound]: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Interval[Bound]]: ...

    @override
    def __getitem__(
        self, index: int | slice
    ) -> Interval[Bound] | Sequence[Interval[Bound]]:
        if isinstance(index, slice):
            return tuple(self._ranges[index])
        return self._ranges[index]

    @override
    def __iter__(self) -> Iterator[Interval[Bound]]:
        return iter(self._ranges)

    @override
    def __eq__(self, other: object) -> bool:
        if isinstance(other, Ranges):
            return self._ranges == other._ranges
        if isinstance(other, Sequence) and not isinstance(other, str):
            return list(self._ranges) == list(other)
        return NotImplemented

    @override
    def __repr__(self) -> str:
        return f"Ranges({', '.join(map(str, self._ranges))})"


class RangeSet(Generic[Bound]):
    """A set of values of any ordered type, represented by intervals.

    Stored intervals are never empty, are sorted ascending, and neither
    overlap nor adjoin: ``[0..<5, 5..<10]`` is always held as ``[0..<10]``.
    Every public operation re-establishes these invariants before returning.

    Example:
        >>> allowed = RangeSet([(0, 0), (25, 50), (50, 100), (200, 500), (400, 600)])
        >>> allowed
        RangeSet(25..<100, 200..<600)
        >>> 75 in allowed
        True
    """

    __slots__ = ("_ranges",)

    def __init__(self, intervals: IntervalLike | Iterable[IntervalLike] = ()):
        self._ranges: list[Interval[Bound]] = []

        if isinstance(intervals, (Interval, range)) or _is_bound_pair(intervals):
            self.insert(intervals)  # pyright: ignore[reportArgumentType]
            return

        for interval in intervals:
            self.insert(interval)

    @classmethod
    def _from_normalized(cls, ranges: list[Interval[Bound]]) -> Self:
        """Adopt an already normalized interval list, verifying the invariants."""
        result = cls()
        result._ranges = ranges
        result._check_invariants()
        return result

    @classmethod
    def from_positions(cls, positions: Iterable[int]) -> "RangeSet[int]":
        """Build a set covering each integer position ``p`` as ``p..<p+1``."""
        result: RangeSet[int] = cls()  # pyright: ignore[reportAssignmentType]
        for position in positions:
            result.insert(Interval(lower=position, upper=position + 1))
        return result

    def _check_invariants(self) -> None:
        for interval in self._ranges:
            if interval.is_empty:
                raise ValueError(
                    f"Empty interval in range set: {interval}\n"
                    f"Hint: Build sets through RangeSet(...) or insert(), "
                    f"which drop empty intervals"
                )
        for a, b in zip(self._ranges, self._ranges[1:]):
            if not a.upper < b.lower:
                raise ValueError(
                    f"Out of order, overlapping or adjoining intervals in range set: "
                    f"{a}, {b}\n"
                    f"Hint: Build sets through RangeSet(...) or insert(), "
                    f"which merge intervals"
                )

    @property
    def ranges(self) -> Ranges[Bound]:
        return Ranges(self._ranges)

    @property
    def is_empty(self) -> bool:
        return not self._ranges

    @property
    def bounds(self) -> Interval[Bound] | None:
        """Smallest interval covering every value in the set, or None if empty."""
        if not self._ranges:
            return None
        return Interval(lower=self._ranges[0].lower, upper=self._ranges[-1].upper)

    def __bool__(self) -> bool:
        return bool(self._ranges)

    def __len__(self) -> int:
        """Number of stored intervals (not the number of values covered)."""
        return len(self._ranges)

    def __iter__(self) -> Iterator[Interval[Bound]]:
        return iter(self._ranges)

    def contains(self, value: Bound) -> bool:
        """Whether ``value`` is covered by one of the intervals. O(log n)."""
        # First interval whose upper bound exceeds the value.
        i = bisect.bisect_right(self._ranges, value, key=_upper)
        return i < len(self._ranges) and self._ranges[i].lower <= value

    def __contains__(self, value: Any) -> bool:
        return self.contains(value)

    def _indices_of(self, interval: Interval[Bound]) -> range:
        """Return the indices of the stored intervals that ``interval`` overlaps or adjoins.

        With ``self == [0..<5, 10..<15, 20..<25, 30..<35]``:

        - ``_indices_of(12..<14) == range(1, 2)``
        - ``_indices_of(12..<19) == range(1, 2)``
        - ``_indices_of(17..<19) == range(2, 2)``
        - ``_indices_of(12..<22) == range(1, 3)``
        """
        if interval.is_empty:
            raise ValueError(f"Cannot locate an empty interval: {interval}")
        if not self._ranges:
            raise ValueError("Cannot locate an interval in an empty range set")
        if (
            interval.lower > self._ranges[-1].upper
            or interval.upper < self._ranges[0].lower
        ):
            raise ValueError(
                f"Interval {interval} lies outside the range set bounds {self.bounds}"
            )

        # First stored interval reaching the query's lower bound. It may or
        # may not overlap the query.
        begin = bisect.bisect_left(self._ranges, interval.lower, key=_upper)

        # First stored interval starting past the query's upper bound. Equal
        # to begin when nothing overlaps.
        end = bisect.bisect_right(self._ranges, interval.upper, lo=begin, key=_lower)

        return range(begin, end)

    def _append(self, interval: Interval[Bound]) -> None:
        """Add an interval known to sit at or past the last stored upper bound."""
        if not self._ranges:
            self._ranges.append(interval)
        elif self._ranges[-1].upper == interval.lower:
            self._ranges[-1] = Interval(
                lower=self._ranges[-1].lower, upper=interval.upper
            )
        else:
            self._ranges.append(interval)

    def insert(self, interval: IntervalLike) -> None:
        """Add the values of ``interval``, merging with anything it overlaps or adjoins.

        Empty intervals are ignored.

            >>> rs = RangeSet([(0, 5), (10, 15)])
            >>> rs.insert((3, 7))
            >>> rs
            RangeSet(0..<7, 10..<15)
        """
        interval = coerce(interval)
        if interval.is_empty:
            return
        if not self._ranges:
            self._ranges.append(interval)
            return
        if interval.lower >= self._ranges[-1].upper:
            self._append(interval)
            return
        if interval.upper < self._ranges[0].lower:
            self._ranges.insert(0, interval)
            return

        indices = self._indices_of(interval)

        if not indices:
            self._ranges.insert(indices.start, interval)
            return

        lower = min(self._ranges[indices.start].lower, interval.lower)
        upper = max(self._ranges[indices.stop - 1].upper, interval.upper)
        self._ranges[indices.start : indices.stop] = [
            Interval(lower=lower, upper=upper)
        ]

    def remove(self, interval: IntervalLike) -> None:
        """Remove the values of ``interval``, truncating or splitting stored intervals.

        Empty intervals and intervals outside the set are ignored.

            >>> rs = RangeSet([(0, 50), (100, 150)])
            >>> rs.remove((25, 125))
            >>> rs
            RangeSet(0..<25, 125..<150)
        """
        interval = coerce(interval)
        if (
            interval.is_empty
            or not self._ranges
            or interval.lower >= self._ranges[-1].upper
            or interval.upper < self._ranges[0].lower
        ):
            return

        indices = self._indices_of(interval)
        if not indices:
            return

        first = self._ranges[indices.start]
        last = self._ranges[indices.stop - 1]
        cuts_lower = interval.lower > first.lower
        cuts_upper = interval.upper < last.upper

        replacement: list[Interval[Bound]] = []
        if cuts_lower:
            replacement.append(Interval(lower=first.lower, upper=interval.lower))
        if cuts_upper:
            replacement.append(Interval(lower=interval.upper, upper=last.upper))
        self._ranges[indices.start : indices.stop] = replacement

    def gaps(self, bounds: IntervalLike) -> "RangeSet[Bound]":
        """Values inside ``bounds`` that the set does not cover.

        Stored intervals are clipped to ``bounds``; those wholly outside are
        ignored.
        """
        bounds = coerce(bounds)
        result: RangeSet[Bound] = RangeSet()
        if bounds.is_empty:
            return result

        begin = bisect.bisect_right(self._ranges, bounds.lower, key=_upper)
        end = bisect.bisect_left(self._ranges, bounds.upper, lo=begin, key=_lower)

        low = bounds.lower
        for interval in self._ranges[begin:end]:
            if low < interval.lower:
                result._append(Interval(lower=low, upper=interval.lower))
            low = max(low, interval.upper)
        if low < bounds.upper:
            result._append(Interval(lower=low, upper=bounds.upper))
        return result

    def inverted(self, within: IntervalLike) -> "RangeSet[Bound]":
        """Complement of the set inside ``within``, e.g. ``range(len(host))``."""
        return self.gaps(within)

    # Set algebra

    def form_union(self, other: "RangeSet[Bound]") -> None:
        for interval in other._ranges:
            self.insert(interval)

    def form_intersection(self, other: "RangeSet[Bound]") -> None:
        self._ranges = self.intersection(other)._ranges

    def form_symmetric_difference(self, other: "RangeSet[Bound]") -> None:
        self._ranges = self.symmetric_difference(other)._ranges

    def subtract(self, other: "RangeSet[Bound]") -> None:
        for interval in other._ranges:
            self.remove(interval)

    def union(self, other: "RangeSet[Bound]") -> "RangeSet[Bound]":
        result = self.copy()
        result.form_union(other)
        return result

    def intersection(self, other: "RangeSet[Bound]") -> "RangeSet[Bound]":
        """Values covered by both sets, in a single merge pass. O(n + m).

        With ``self = [0..<5, 9..<14]`` and ``other = [1..<3, 4..<6, 8..<12]``::

            0   1   2   3   4   5   6   7   8   9  10  11  12  13  14
            xxxxxxxxxxxxxxxxxxx__               xxxxxxxxxxxxxxxxxxx__
                yyyyyyy__   yyyyyyy__       yyyyyyyyyyyyyyy__
                zzzzzzz__   zzz__               zzzzzzzzzzz__
        """
        theirs = other._ranges
        j = 0
        result: list[Interval[Bound]] = []

        for current in self._ranges:
            # Skip intervals in other that end before this one starts
            while j < len(theirs) and theirs[j].upper <= current.lower:
                j += 1

            while j < len(theirs) and theirs[j].lower < current.upper:
                result.append(
                    Interval(
                        lower=max(theirs[j].lower, current.lower),
                        upper=min(theirs[j].upper, current.upper),
                    )
                )
                # An interval in other running past this one may overlap the next
                if not current.upper > theirs[j].upper:
                    break
                j += 1

        return RangeSet._from_normalized(result)

    def subtracting(self, other: "RangeSet[Bound]") -> "RangeSet[Bound]":
        result = self.copy()
        result.subtract(other)
        return result

    def symmetric_difference(self, other: "RangeSet[Bound]") -> "RangeSet[Bound]":
        return self.union(other).subtracting(self.intersection(other))

    def is_subset(self, other: "RangeSet[Bound]") -> bool:
        return self.intersection(other) == self

    def is_superset(self, other: "RangeSet[Bound]") -> bool:
        return other.is_subset(self)

    def is_strict_subset(self, other: "RangeSet[Bound]") -> bool:
        return self != other and self.is_subset(other)

    def is_strict_superset(self, other: "RangeSet[Bound]") -> bool:
        return other.is_strict_subset(self)

    def is_disjoint(self, other: "RangeSet[Bound]") -> bool:
        return self.intersection(other).is_empty

    def __or__(self, other: "RangeSet[Bound]") -> "RangeSet[Bound]":
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self.union(other)

    def __and__(self, other: "RangeSet[Bound]") -> "RangeSet[Bound]":
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self.intersection(other)

    def __sub__(self, other: "RangeSet[Bound]") -> "RangeSet[Bound]":
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self.subtracting(other)

    def __xor__(self, other: "RangeSet[Bound]") -> "RangeSet[Bound]":
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self.symmetric_difference(other)

    def __ior__(self, other: "RangeSet[Bound]") -> Self:
        self.form_union(other)
        return self

    def __iand__(self, other: "RangeSet[Bound]") -> Self:
        self.form_intersection(other)
        return self

    def __isub__(self, other: "RangeSet[Bound]") -> Self:
        self.subtract(other)
        return self

    def __ixor__(self, other: "RangeSet[Bound]") -> Self:
        self.form_symmetric_difference(other)
        return self

    def __le__(self, other: "RangeSet[Bound]") -> bool:
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self.is_subset(other)

    def __lt__(self, other: "RangeSet[Bound]") -> bool:
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self.is_strict_subset(other)

    def __ge__(self, other: "RangeSet[Bound]") -> bool:
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self.is_superset(other)

    def __gt__(self, other: "RangeSet[Bound]") -> bool:
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self.is_strict_superset(other)

    # Value semantics

    def copy(self) -> "RangeSet[Bound]":
        # Intervals are frozen, so sharing them between copies is safe
        result: RangeSet[Bound] = RangeSet()
        result._ranges = list(self._ranges)
        return result

    __copy__ = copy

    def __deepcopy__(self, memo: dict[int, Any]) -> "RangeSet[Bound]":
        return self.copy()

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self._ranges == other._ranges

    @override
    def __hash__(self) -> int:
        return hash(tuple((r.lower, r.upper) for r in self._ranges))

    def __reduce__(self) -> tuple[Any, ...]:
        return (RangeSet, ([(r.lower, r.upper) for r in self._ranges],))

    @override
    def __repr__(self) -> str:
        return f"RangeSet({', '.join(map(str, self._ranges))})"
