import pytest

from rangeset.interval import Interval, coerce


def test_interval_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError, match="must be <= upper"):
        Interval(lower=5, upper=2)


def test_empty_interval() -> None:
    assert Interval(lower=3, upper=3).is_empty
    assert not Interval(lower=3, upper=4).is_empty


def test_membership_is_half_open() -> None:
    interval = Interval(lower=2, upper=5)

    assert 1 not in interval
    assert 2 in interval
    assert 4 in interval
    assert 5 not in interval


def test_overlaps() -> None:
    interval = Interval(lower=2, upper=5)

    assert interval.overlaps(Interval(lower=4, upper=9))
    assert interval.overlaps(Interval(lower=0, upper=3))
    assert interval.overlaps(Interval(lower=3, upper=4))
    # Adjoining is not overlapping
    assert not interval.overlaps(Interval(lower=5, upper=9))
    assert not interval.overlaps(Interval(lower=0, upper=2))


def test_str_and_range() -> None:
    interval = Interval(lower=2, upper=5)

    assert str(interval) == "2..<5"
    assert interval.to_range() == range(2, 5)


def test_non_integer_bounds() -> None:
    interval = Interval(lower=0.25, upper=0.5)

    assert 0.3 in interval
    assert str(interval) == "0.25..<0.5"

    words = Interval(lower="apple", upper="banana")
    assert "avocado" in words
    assert "cherry" not in words


class TestCoerce:
    """Tests for building intervals from interval-like values."""

    def test_interval_passes_through(self) -> None:
        interval = Interval(lower=1, upper=2)
        assert coerce(interval) is interval

    def test_range(self) -> None:
        assert coerce(range(2, 5)) == Interval(lower=2, upper=5)

    def test_backwards_range_is_empty(self) -> None:
        assert coerce(range(5, 2)).is_empty

    def test_stepped_range_rejected(self) -> None:
        with pytest.raises(ValueError, match="step of 1"):
            coerce(range(0, 10, 2))

    def test_tuple(self) -> None:
        assert coerce((2, 5)) == Interval(lower=2, upper=5)

    def test_inverted_tuple_rejected(self) -> None:
        with pytest.raises(ValueError):
            coerce((5, 2))

    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError, match="Cannot build an Interval"):
            coerce(7)  # pyright: ignore[reportArgumentType]
