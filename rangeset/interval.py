from dataclasses import dataclass
from typing import Any, Generic, TypeVar

Bound = TypeVar("Bound")


@dataclass(frozen=True, kw_only=True)
class Interval(Generic[Bound]):
    """Half-open interval ``[lower, upper)`` over a totally ordered domain."""

    lower: Bound
    upper: Bound

    def __post_init__(self) -> None:
        if self.lower > self.upper:  # pyright: ignore[reportOperatorIssue]
            raise ValueError(
                f"Interval lower ({self.lower!r}) must be <= upper ({self.upper!r})"
            )

    @property
    def is_empty(self) -> bool:
        return self.lower == self.upper

    def __contains__(self, value: Any) -> bool:
        return self.lower <= value < self.upper  # pyright: ignore[reportOperatorIssue]

    def overlaps(self, other: "Interval[Bound]") -> bool:
        """True if both intervals share at least one value."""
        return (
            self.lower < other.upper  # pyright: ignore[reportOperatorIssue]
            and other.lower < self.upper  # pyright: ignore[reportOperatorIssue]
        )

    def to_range(self) -> range:
        """Equivalent builtin range, for integer bounds."""
        return range(self.lower, self.upper)  # pyright: ignore[reportArgumentType]

    def __str__(self) -> str:
        return f"{self.lower}..<{self.upper}"


def coerce(value: "Interval[Any] | range | tuple[Any, Any]") -> Interval[Any]:
    """Convert an interval-like value into an Interval.

    Accepts:
    - Interval: Passed through as-is
    - range: Must have a step of 1; ``range(2, 5)`` becomes ``2..<5``
    - tuple: A ``(lower, upper)`` pair

    Raises:
        ValueError: If a range has a step other than 1, or lower > upper
        TypeError: If value is of an unsupported type
    """
    if isinstance(value, Interval):
        return value
    if isinstance(value, range):
        if value.step != 1:
            raise ValueError(
                f"Only ranges with a step of 1 describe an interval.\n"
                f"Got: {value!r}\n"
                f"Hint: Insert each position separately, or use RangeSet.from_positions()"
            )
        return Interval(lower=value.start, upper=max(value.start, value.stop))
    if isinstance(value, tuple) and len(value) == 2:
        return Interval(lower=value[0], upper=value[1])
    raise TypeError(
        f"Cannot build an Interval from {type(value).__name__!r}: {value!r}\n"
        f"Examples:\n"
        f"  Interval(lower=2, upper=5)\n"
        f"  range(2, 5)\n"
        f"  (2, 5)"
    )
