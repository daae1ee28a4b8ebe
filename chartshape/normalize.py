"""Shape detection and normalization of raw chart input into canonical series."""
import logging
import math
from collections.abc import Iterable, Mapping, MutableMapping
from operator import itemgetter
from typing import Any, Optional, Sequence

import numpy as np

from chartshape.series import (
    Point,
    SeriesCollection,
    ShapeKind,
    is_point_collection,
    is_sequence,
    is_series_like,
    make_point,
    make_series,
)

logger = logging.getLogger(__name__)


def as_sequence(data: Any) -> Sequence[Any]:
    """
    Coerce arbitrary input into something the classifier can iterate.

    Sequences come back unchanged (same object). Anything else is wrapped
    best-effort: ``None`` and empty numpy arrays become an empty list, a lone
    mapping or scalar becomes a one-element list and other iterables are
    materialised.
    """
    if data is None:
        return []
    if isinstance(data, np.ndarray):
        if data.ndim == 0:
            return [data.item()]
        if len(data) == 0:
            return []
    if is_sequence(data):
        return data
    if isinstance(data, (str, bytes, bytearray, Mapping)):
        return [data]
    if isinstance(data, Iterable):
        return list(data)
    return [data]


def classify_shape(data: Any) -> ShapeKind:
    """
    Classify input into one of the accepted shapes.

    Rules are checked in order and the first match wins:

    1. every element is series-like (``name`` and ``data``)
    2. every element is point-like (``x`` and/or ``y``)
    3. every element is itself a sequence
    4. anything else is treated as a flat array of raw values

    An empty sequence satisfies rule 1.
    """
    data = as_sequence(data)

    if all(is_series_like(item) for item in data):
        return ShapeKind.SERIES_COLLECTION
    if is_point_collection(data):
        return ShapeKind.POINT_COLLECTION
    if all(is_sequence(item) for item in data):
        return ShapeKind.ARRAY_OF_ARRAYS
    return ShapeKind.FLAT_ARRAY


def normalize_y(value: Any) -> Any:
    """Map missing values to ``None``; zero and other falsy values are kept."""
    if value is None:
        return None
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def normalize_x(index: int, categories: Optional[Sequence[Any]] = None) -> Any:
    """Category label at ``index`` when one exists, otherwise the index itself."""
    if categories is not None and index < len(categories):
        label = categories[index]
        if label is not None:
            return label.item() if isinstance(label, np.generic) else label
    return index


def _fill_point_keys(points: Sequence[Point], categories: Optional[Sequence[Any]]) -> None:
    """Add missing ``x``/``y`` keys to point mappings in place. Explicit ``x`` wins over categories."""
    for index, point in enumerate(points):
        if "x" in point and "y" in point:
            continue
        if not isinstance(point, MutableMapping):
            logger.debug(f"Point {index} is read-only, leaving missing keys unset")
            continue
        if "x" not in point:
            point["x"] = normalize_x(index, categories)
        if "y" not in point:
            point["y"] = None


def _sort_in_place(points: Sequence[Point]) -> None:
    """Stable ascending sort by ``x`` that keeps the list object itself."""
    if not isinstance(points, list):
        logger.debug(f"Cannot reorder {type(points).__name__} in place, leaving order as given")
        return

    try:
        ordered = sorted(points, key=itemgetter("x"))
    except (TypeError, KeyError) as e:
        logger.debug(f"Leaving series unsorted, x values not orderable: {e}")
        return

    points[:] = ordered


def _to_points(
    values: Any,
    categories: Optional[Sequence[Any]],
    sort: bool
) -> Sequence[Point]:
    """
    Convert one series' raw data into points, reusing point-shaped input.

    Without categories the points, including caller-owned point lists, are
    sorted by ``x`` in place so the list object is kept. This is deliberate;
    see "Sorting of point/series input without categories" in DESIGN.md.
    """
    values = as_sequence(values)

    if is_point_collection(values):
        _fill_point_keys(values, categories)
        points = values
    else:
        points = [
            make_point(normalize_x(i, categories), normalize_y(value))
            for i, value in enumerate(values)
        ]

    # Category order is display order; only uncategorised data is sorted.
    if sort and categories is None:
        _sort_in_place(points)

    return points


def normalize_series(
    data: Any,
    categories: Optional[Sequence[Any]] = None,
    *,
    sort: bool = True
) -> SeriesCollection:
    """
    Normalize loosely shaped chart input into a list of ``{name, data}`` series.

    Already-conformant input is returned by reference: a series collection
    comes back as the very same object, and a list of points is wrapped into
    one unnamed series whose ``data`` is that list. Other shapes are rebuilt
    into new series and point dicts.

    Args:
        data: Series collection, list of points, list of lists or flat values
        categories: Optional x labels used for raw values, by position
        sort: Sort uncategorised series by ``x``

    Returns:
        Canonical series collection
    """
    data = as_sequence(data)
    shape = classify_shape(data)
    logger.debug(f"Classified input of {len(data)} elements as {shape.value}")

    if shape is ShapeKind.SERIES_COLLECTION:
        for series in data:
            points = _to_points(series["data"], categories, sort)
            if points is series["data"]:
                continue
            if isinstance(series, MutableMapping):
                series["data"] = points
            else:
                logger.debug(f"Series '{series['name']}' is read-only, inner data left as given")
        return data

    if shape is ShapeKind.POINT_COLLECTION:
        return [make_series(_to_points(data, categories, sort))]

    if shape is ShapeKind.ARRAY_OF_ARRAYS:
        return [make_series(_to_points(values, categories, sort)) for values in data]

    return [make_series(_to_points(data, categories, sort))]


def count_points(series_collection: SeriesCollection) -> int:
    """Total number of points across all series."""
    return sum(len(series["data"]) for series in series_collection)
