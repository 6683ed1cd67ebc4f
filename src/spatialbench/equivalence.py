"""
equivalence.py

Equality predicates used to check that competing implementations compute
the same answer. Every predicate takes ``(baseline, other)`` and returns a
bool; the harness treats an exception raised by a predicate as a mismatch.

Public functions:
- `values_equal(a, b)` -> structural/value equality (the harness default)
- `allclose(rtol, atol)` -> tolerant predicate for numeric rasters
- `same_geometries(tolerance)` -> element-wise geometry comparison

"""
from collections.abc import Mapping
from typing import Any, Callable

import numpy as np
import pandas as pd
import shapely
from shapely.geometry.base import BaseGeometry

Predicate = Callable[[Any, Any], bool]


def _arrays_equal(a, b) -> bool:
    a = np.asarray(a)
    b = np.asarray(b)
    if a.shape != b.shape:
        return False
    if a.dtype.kind in 'fc' or b.dtype.kind in 'fc':
        try:
            return bool(np.array_equal(a, b, equal_nan=True))
        except TypeError:
            pass
    if a.dtype == object or b.dtype == object:
        return all(values_equal(x, y) for x, y in zip(a.ravel(), b.ravel()))
    return bool(np.array_equal(a, b))


def _is_nan(value) -> bool:
    # builtin float and every numpy floating scalar (float16/32/64)
    return isinstance(value, (float, np.floating)) and bool(np.isnan(value))


def values_equal(a: Any, b: Any) -> bool:
    """Structural/value equality that understands the scientific stack.

    numpy arrays compare by shape and values (NaN equal to NaN), pandas and
    geopandas objects through ``.equals``, shapely geometries through
    ``equals`` (same point set), xarray objects through ``.equals``, and
    mappings / sequences recursively. Anything else falls back to ``==``.
    """
    if a is b:
        return True
    if isinstance(a, BaseGeometry) or isinstance(b, BaseGeometry):
        if not (isinstance(a, BaseGeometry) and isinstance(b, BaseGeometry)):
            return False
        if a.is_empty or b.is_empty:
            return a.is_empty and b.is_empty
        return bool(a.equals(b))
    if isinstance(a, (pd.DataFrame, pd.Series)) or isinstance(b, (pd.DataFrame, pd.Series)):
        return type(a) is type(b) and bool(a.equals(b))
    if hasattr(a, 'dims') and hasattr(a, 'equals'):
        # xarray DataArray / Dataset
        if not hasattr(b, 'dims'):
            return _arrays_equal(a, b)
        try:
            return bool(a.equals(b))
        except (TypeError, ValueError, AttributeError):
            return False
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return _arrays_equal(a, b)
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if set(a) != set(b):
            return False
        return all(values_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(values_equal(x, y) for x, y in zip(a, b))
    if _is_nan(a) and _is_nan(b):
        return True
    result = a == b
    if isinstance(result, np.ndarray):
        return bool(result.all())
    return bool(result)


def allclose(rtol: float = 1e-5, atol: float = 1e-8) -> Predicate:
    """Return a predicate comparing numeric arrays within a tolerance.

    Masked arrays are compared on their filled data; xarray objects are
    compared on ``.values``.
    """
    def _close(a, b) -> bool:
        a = _plain_array(a)
        b = _plain_array(b)
        if a.shape != b.shape:
            return False
        return bool(np.allclose(a, b, rtol=rtol, atol=atol, equal_nan=True))

    _close.__name__ = f'allclose(rtol={rtol}, atol={atol})'
    return _close


def _plain_array(value) -> np.ndarray:
    if hasattr(value, 'dims') and hasattr(value, 'values'):
        value = value.values
    if np.ma.isMaskedArray(value):
        value = value.astype(float).filled(np.nan)
    return np.asarray(value, dtype=float)


def _geometry_array(value) -> np.ndarray:
    if hasattr(value, 'geometry') and not isinstance(value, BaseGeometry):
        value = value.geometry
    if isinstance(value, BaseGeometry):
        value = [value]
    if hasattr(value, 'values') and not isinstance(value, np.ndarray):
        value = value.values
    items = list(value)
    out = np.empty(len(items), dtype=object)
    out[:] = items
    return out


def same_geometries(tolerance: float = 0.0) -> Predicate:
    """Return a predicate comparing two geometry collections element-wise.

    Accepts GeoSeries, GeoDataFrames, lists or arrays of shapely geometries.
    Vertices must match within ``tolerance`` (``shapely.equals_exact``).
    """
    def _same(a, b) -> bool:
        ga = _geometry_array(a)
        gb = _geometry_array(b)
        if ga.shape != gb.shape:
            return False
        if ga.size == 0:
            return True
        return bool(np.all(shapely.equals_exact(ga, gb, tolerance=tolerance)))

    _same.__name__ = f'same_geometries(tolerance={tolerance})'
    return _same
