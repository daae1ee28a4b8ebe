"""Data structures and shape predicates for chart series."""
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

# Canonical shapes are plain dicts so callers can rely on object identity.
Point = Dict[str, Any]
Series = Dict[str, Any]
SeriesCollection = List[Series]


class ShapeKind(str, Enum):
    """Input shapes recognised by the normalizer, in detection order."""
    SERIES_COLLECTION = "series_collection"
    POINT_COLLECTION = "point_collection"
    ARRAY_OF_ARRAYS = "array_of_arrays"
    FLAT_ARRAY = "flat_array"


def is_sequence(value: Any) -> bool:
    """List-like containers. Strings, bytes and mappings do not count."""
    if isinstance(value, np.ndarray):
        return value.ndim >= 1
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(value, Sequence)


def is_series_like(value: Any) -> bool:
    """A mapping exposing both ``name`` and ``data``."""
    return isinstance(value, Mapping) and "name" in value and "data" in value


def is_point_like(value: Any) -> bool:
    """A mapping exposing at least one of ``x`` and ``y``."""
    return isinstance(value, Mapping) and ("x" in value or "y" in value)


def is_point_collection(values: Sequence[Any]) -> bool:
    return all(is_point_like(item) for item in values)


def make_point(x: Any, y: Any) -> Point:
    return {"x": x, "y": y}


def make_series(data: Sequence[Point], name: Optional[str] = None) -> Series:
    return {"name": name, "data": data}
