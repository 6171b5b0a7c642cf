"""Hypothesis property-based tests for RangeSet.

Every generated set is compared against a brute-force set of the integers
it covers.

Properties tested:
- Invariants: stored intervals stay sorted, non-empty and non-adjoining
- Algebra: union, intersection, difference and relations match Python sets
- Laws: commutativity and the subset/intersection correspondences
- Gaps: the complement within bounds matches the brute-force difference
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from rangeset import Interval, RangeSet

UNIVERSE = 40


# =============================================================================
# Strategy Definitions
# =============================================================================


@st.composite
def intervals(draw: st.DrawFn) -> Interval[int]:
    lower = draw(st.integers(min_value=0, max_value=UNIVERSE))
    upper = draw(st.integers(min_value=lower, max_value=min(UNIVERSE, lower + 12)))
    return Interval(lower=lower, upper=upper)


range_sets = st.builds(RangeSet, st.lists(intervals(), max_size=6))

# (is_insert, interval) pairs applied in order
mutations = st.lists(st.tuples(st.booleans(), intervals()), max_size=60)


def values(ranges: RangeSet[int]) -> set[int]:
    return {v for interval in ranges for v in range(interval.lower, interval.upper)}


def assert_invariants(ranges: RangeSet[int]) -> None:
    stored = list(ranges.ranges)
    for interval in stored:
        assert interval.lower < interval.upper
    for a, b in zip(stored, stored[1:]):
        assert a.upper < b.lower


# =============================================================================
# Properties
# =============================================================================


class TestMutation:
    """insert and remove keep the canonical form."""

    @given(mutations)
    @settings(max_examples=200)
    def test_mutations_preserve_invariants(self, steps: list[tuple[bool, Interval[int]]]) -> None:
        ranges: RangeSet[int] = RangeSet()
        expected: set[int] = set()

        for is_insert, interval in steps:
            if is_insert:
                ranges.insert(interval)
                expected |= set(interval.to_range())
            else:
                ranges.remove(interval)
                expected -= set(interval.to_range())

            assert_invariants(ranges)
            assert values(ranges) == expected

    @given(range_sets, intervals())
    def test_insert_idempotent_and_remove_cancels(self, ranges: RangeSet[int], interval: Interval[int]) -> None:
        once = ranges.copy()
        once.insert(interval)
        twice = once.copy()
        twice.insert(interval)
        assert once == twice

        # Only holds when the interval is disjoint from the set
        if not values(ranges) & set(interval.to_range()):
            once.remove(interval)
            assert once == ranges

    @given(st.lists(st.integers(min_value=0, max_value=UNIVERSE)))
    def test_from_positions_covers_each_position(self, positions: list[int]) -> None:
        ranges = RangeSet.from_positions(positions)

        assert_invariants(ranges)
        assert values(ranges) == set(positions)


class TestAlgebra:
    """Set algebra agrees with a brute-force set of covered values."""

    @given(range_sets, range_sets)
    def test_algebra_matches_brute_force(self, a: RangeSet[int], b: RangeSet[int]) -> None:
        va, vb = values(a), values(b)

        for result, expected in [
            (a | b, va | vb),
            (a & b, va & vb),
            (a - b, va - vb),
            (a ^ b, va ^ vb),
        ]:
            assert_invariants(result)
            assert values(result) == expected

        assert a.is_subset(b) == (va <= vb)
        assert a.is_strict_subset(b) == (va < vb)
        assert a.is_superset(b) == (va >= vb)
        assert a.is_disjoint(b) == va.isdisjoint(vb)

    @given(range_sets, range_sets)
    def test_algebraic_laws(self, a: RangeSet[int], b: RangeSet[int]) -> None:
        assert a | b == b | a
        assert a & b == b & a
        assert a ^ b == (a | b) - (a & b)
        assert a.is_subset(b) == (a & b == a)
        assert a.is_superset(b) == (a & b == b)

    @given(range_sets)
    def test_membership_matches_brute_force(self, ranges: RangeSet[int]) -> None:
        expected = values(ranges)

        for v in range(-2, UNIVERSE + 2):
            assert (v in ranges) == (v in expected)

    @given(range_sets, intervals())
    def test_gaps_match_brute_force(self, ranges: RangeSet[int], bounds: Interval[int]) -> None:
        gaps = ranges.gaps(bounds)

        assert_invariants(gaps)
        assert values(gaps) == set(bounds.to_range()) - values(ranges)
