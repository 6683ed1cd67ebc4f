"""
raster.py

Raster comparisons: loading, cropping and resampling a GeoTIFF with rasterio,
xarray and plain numpy. Every case opens the file itself so that I/O is part
of what is measured for all competitors alike.

Public functions:
- `load_cases(path)` -> list of BenchmarkCase
- `crop_cases(path, window)` -> list of BenchmarkCase
- `resample_cases(path, factor)` -> list of BenchmarkCase
- `central_window(width, height, fraction)` -> rasterio Window

"""
from typing import List

import numpy as np
import rasterio
import xarray as xr
from rasterio.enums import Resampling
from rasterio.windows import Window, from_bounds
from rasterio.windows import bounds as window_bounds

from spatialbench.harness import BenchmarkCase


def to_dataarray(data: np.ndarray, transform, crs=None) -> xr.DataArray:
    """Label a 2D array with pixel-centre x/y coordinates from ``transform``."""
    height, width = data.shape
    xs = transform.c + (np.arange(width) + 0.5) * transform.a
    ys = transform.f + (np.arange(height) + 0.5) * transform.e
    attrs = {'crs': str(crs)} if crs is not None else {}
    return xr.DataArray(data, dims=('y', 'x'), coords={'y': ys, 'x': xs}, attrs=attrs)


def central_window(width: int, height: int, fraction: float) -> Window:
    """Integer window covering the central ``fraction`` of each axis."""
    if not 0.0 < fraction <= 1.0:
        raise ValueError(f'crop fraction must be in (0, 1], got {fraction}')
    w = max(1, int(width * fraction))
    h = max(1, int(height * fraction))
    return Window((width - w) // 2, (height - h) // 2, w, h)


def load_cases(path) -> List[BenchmarkCase]:
    path = str(path)

    def rasterio_read():
        with rasterio.open(path) as src:
            return src.read(1)

    def rasterio_blocks():
        with rasterio.open(path) as src:
            out = np.empty((src.height, src.width), dtype=src.dtypes[0])
            for _, window in src.block_windows(1):
                out[window.toslices()] = src.read(1, window=window)
            return out

    def xarray_wrap():
        with rasterio.open(path) as src:
            return to_dataarray(src.read(1), src.transform, src.crs)

    return [
        BenchmarkCase('rasterio.read', rasterio_read),
        BenchmarkCase('rasterio.block_windows', rasterio_blocks),
        BenchmarkCase('xarray.DataArray', xarray_wrap),
    ]


def crop_cases(path, window: Window) -> List[BenchmarkCase]:
    """Crop ``window`` three ways; all cases return identical pixels.

    The crop is expressed as map bounds, as a user would specify it, and each
    library turns the bounds back into pixels its own way.
    """
    path = str(path)
    with rasterio.open(path) as src:
        minx, miny, maxx, maxy = window_bounds(window, src.transform)

    def rasterio_window():
        with rasterio.open(path) as src:
            w = from_bounds(minx, miny, maxx, maxy, transform=src.transform)
            w = Window(round(w.col_off), round(w.row_off), round(w.width), round(w.height))
            return src.read(1, window=w)

    def numpy_slice():
        with rasterio.open(path) as src:
            data = src.read(1)
            inv = ~src.transform
        c0, r0 = inv * (minx, maxy)
        c1, r1 = inv * (maxx, miny)
        return data[int(round(r0)):int(round(r1)), int(round(c0)):int(round(c1))]

    def xarray_sel():
        with rasterio.open(path) as src:
            da = to_dataarray(src.read(1), src.transform, src.crs)
        # y decreases downwards in a north-up raster
        return da.sel(x=slice(minx, maxx), y=slice(maxy, miny))

    return [
        BenchmarkCase('rasterio.window', rasterio_window),
        BenchmarkCase('numpy.slice', numpy_slice),
        BenchmarkCase('xarray.sel', xarray_sel),
    ]


def resample_cases(path, factor: int) -> List[BenchmarkCase]:
    """Downsample by an integer ``factor`` with block averaging."""
    if isinstance(factor, bool) or not isinstance(factor, int) or factor < 1:
        raise ValueError(f'resample factor must be a positive integer, got {factor!r}')
    path = str(path)

    def rasterio_average():
        with rasterio.open(path) as src:
            shape = (src.height // factor, src.width // factor)
            return src.read(1, out_shape=shape, resampling=Resampling.average)

    def xarray_coarsen():
        with rasterio.open(path) as src:
            da = to_dataarray(src.read(1), src.transform, src.crs)
        return da.coarsen(y=factor, x=factor, boundary='trim').mean()

    def numpy_reshape():
        with rasterio.open(path) as src:
            data = src.read(1)
        h, w = data.shape[0] // factor, data.shape[1] // factor
        return data[:h * factor, :w * factor].reshape(h, factor, w, factor).mean(axis=(1, 3))

    return [
        BenchmarkCase('rasterio.average', rasterio_average),
        BenchmarkCase('xarray.coarsen', xarray_coarsen),
        BenchmarkCase('numpy.reshape_mean', numpy_reshape),
    ]
