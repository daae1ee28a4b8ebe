"""Stacked layout: cumulative baselines across series sharing an x value."""
import logging
from typing import Any, Dict, List, Optional, Sequence

from chartshape.normalize import normalize_series, normalize_y
from chartshape.series import SeriesCollection

logger = logging.getLogger(__name__)


def x_domain(series_collection: SeriesCollection) -> List[Any]:
    """Distinct x values in first-seen order (series order, then point order)."""
    seen: Dict[Any, None] = {}
    for series in series_collection:
        for point in series["data"]:
            seen.setdefault(point.get("x"), None)
    return list(seen)


class StackLayout:
    """
    Annotates every point with ``y0``, the running total of ``y`` for its x.

    Points group by x equality, numeric or categorical alike. Accumulation
    follows series order, so the first series sharing an x sits at 0 and
    each later one starts where the previous ended. The input is normalized
    first and the same series and point objects are returned with ``y0``
    added.
    """

    def __init__(self, categories: Optional[Sequence[Any]] = None, sort: bool = True):
        self.categories = categories
        self.sort = sort

    def __call__(self, data: Any) -> SeriesCollection:
        series_collection = normalize_series(data, self.categories, sort=self.sort)

        # Insertion order of the accumulator mirrors first appearance of each x.
        totals: Dict[Any, Any] = dict.fromkeys(x_domain(series_collection), 0)

        for series in series_collection:
            for point in series["data"]:
                x = point.get("x")
                point["y0"] = totals[x]
                y = normalize_y(point.get("y"))
                if y is not None:
                    totals[x] += y

        logger.debug(
            f"Stacked {len(series_collection)} series over {len(totals)} distinct x values"
        )
        return series_collection


def stack_layout(
    categories: Optional[Sequence[Any]] = None,
    sort: bool = True
) -> StackLayout:
    """Create a fresh stacked layout function."""
    return StackLayout(categories, sort)
