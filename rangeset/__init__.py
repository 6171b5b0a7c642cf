from loguru import logger

from .collection import (
    DiscontiguousSlice,
    Index,
    gather,
    gather_where,
    ranges_of,
    ranges_where,
    remove_all,
    removing_all,
    select,
)
from .core import Ranges, RangeSet
from .interval import Interval, coerce

# Library code stays quiet unless the application opts in:
#   from loguru import logger; logger.enable("rangeset")
logger.disable(__name__)

__all__ = [
    "Interval",
    "coerce",
    "RangeSet",
    "Ranges",
    "DiscontiguousSlice",
    "Index",
    "select",
    "ranges_where",
    "ranges_of",
    "remove_all",
    "removing_all",
    "gather",
    "gather_where",
]
