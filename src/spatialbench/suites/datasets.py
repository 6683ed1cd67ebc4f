"""
datasets.py

Synthetic inputs for the benchmark suites: a single-band GeoTIFF and point /
polygon layers in a projected CRS. Generation is seeded so every run (and
every competing case inside a run) sees identical data.

Public functions:
- `raster_transform(size, pixel_size, origin)` -> affine.Affine
- `make_raster(path, ...)` -> Path of the written GeoTIFF
- `make_points(n, bounds, crs, seed)` -> GeoDataFrame of points
- `make_polygons(n, radius, bounds, crs, seed)` -> GeoDataFrame of polygons
- `write_vector(gdf, path, driver)` -> Path

"""
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import geopandas as gpd
import rasterio
from affine import Affine

from spatialbench.config import DATASET_DEFAULTS

logger = logging.getLogger(__name__)


def raster_transform(size: int, pixel_size: float, origin: Tuple[float, float]) -> Affine:
    """North-up transform with ``origin`` as the upper-left corner."""
    x0, y0 = origin
    return Affine.translation(x0, y0) * Affine.scale(pixel_size, -pixel_size)


def raster_bounds(size: int, pixel_size: float, origin: Tuple[float, float]) -> Tuple[float, float, float, float]:
    """(minx, miny, maxx, maxy) of a square raster."""
    x0, y0 = origin
    extent = size * pixel_size
    return (x0, y0 - extent, x0 + extent, y0)


def synthetic_surface(size: int, seed: int) -> np.ndarray:
    """Smooth elevation-like surface (float32) with a little noise."""
    rng = np.random.default_rng(seed)
    yy, xx = np.mgrid[0:size, 0:size].astype(np.float64) / max(size - 1, 1)
    surface = 100.0 + 40.0 * xx - 25.0 * yy + 10.0 * np.sin(6.0 * xx) * np.cos(4.0 * yy)
    surface += rng.normal(0.0, 0.5, size=surface.shape)
    return surface.astype('float32')


def make_raster(path, size: Optional[int] = None, pixel_size: Optional[float] = None,
                origin: Optional[Tuple[float, float]] = None, crs: Optional[str] = None,
                seed: Optional[int] = None) -> Path:
    """Write a single-band float32 GeoTIFF and return its path."""
    size = size or DATASET_DEFAULTS['raster_size']
    pixel_size = pixel_size or DATASET_DEFAULTS['pixel_size']
    origin = origin or DATASET_DEFAULTS['origin']
    crs = crs or DATASET_DEFAULTS['crs']
    seed = DATASET_DEFAULTS['seed'] if seed is None else seed

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = synthetic_surface(size, seed)
    with rasterio.open(path,
                       mode='w',
                       driver='GTiff',
                       width=size,
                       height=size,
                       count=1,
                       dtype='float32',
                       crs=crs,
                       transform=raster_transform(size, pixel_size, origin),
                       tiled=True,
                       blockxsize=256 if size >= 256 else 16,
                       blockysize=256 if size >= 256 else 16) as dst:
        dst.write(data, 1)
    logger.debug('wrote %dx%d raster %s', size, size, path)
    return path


def make_points(n: int, bounds: Tuple[float, float, float, float], crs: Optional[str] = None,
                seed: Optional[int] = None) -> gpd.GeoDataFrame:
    """Uniform random points inside ``bounds`` with a feature id column."""
    crs = crs or DATASET_DEFAULTS['crs']
    seed = DATASET_DEFAULTS['seed'] if seed is None else seed
    rng = np.random.default_rng(seed)
    minx, miny, maxx, maxy = bounds
    xs = rng.uniform(minx, maxx, size=n)
    ys = rng.uniform(miny, maxy, size=n)
    return gpd.GeoDataFrame({'fid': np.arange(n, dtype=np.int64)},
                            geometry=gpd.points_from_xy(xs, ys), crs=crs)


def make_polygons(n: int, radius: Optional[float] = None, bounds=None, crs: Optional[str] = None,
                  seed: Optional[int] = None) -> gpd.GeoDataFrame:
    """Random round-ish polygons: points buffered by ``radius``."""
    radius = radius or DATASET_DEFAULTS['polygon_radius']
    if bounds is None:
        bounds = raster_bounds(DATASET_DEFAULTS['raster_size'], DATASET_DEFAULTS['pixel_size'],
                               DATASET_DEFAULTS['origin'])
    gdf = make_points(n, bounds, crs=crs, seed=seed)
    gdf = gdf.set_geometry(gdf.geometry.buffer(radius, quad_segs=4))
    return gdf


def write_vector(gdf: gpd.GeoDataFrame, path, driver: Optional[str] = None) -> Path:
    driver = driver or DATASET_DEFAULTS['vector_driver']
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        path.unlink()
    gdf.to_file(path, driver=driver)
    logger.debug('wrote %d features to %s', len(gdf), path)
    return path


@dataclass
class SuiteContext:
    """Shared inputs for one CLI/notebook session.

    Datasets are created lazily on first use and cached, so building several
    suites from the same context writes each file only once.
    """
    workdir: Path
    raster_size: int = DATASET_DEFAULTS['raster_size']
    n_features: int = DATASET_DEFAULTS['n_features']
    seed: int = DATASET_DEFAULTS['seed']
    crs: str = DATASET_DEFAULTS['crs']
    pixel_size: float = DATASET_DEFAULTS['pixel_size']
    origin: Tuple[float, float] = DATASET_DEFAULTS['origin']

    _cache: dict = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        self.workdir = Path(self.workdir)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return raster_bounds(self.raster_size, self.pixel_size, self.origin)

    @property
    def transform(self) -> Affine:
        return raster_transform(self.raster_size, self.pixel_size, self.origin)

    def raster_path(self) -> Path:
        if 'raster' not in self._cache:
            path = self.workdir / f'surface_{self.raster_size}.tif'
            self._cache['raster'] = make_raster(path, self.raster_size, self.pixel_size,
                                                self.origin, self.crs, self.seed)
        return self._cache['raster']

    def points(self) -> gpd.GeoDataFrame:
        if 'points' not in self._cache:
            self._cache['points'] = make_points(self.n_features, self.bounds, self.crs, self.seed)
        return self._cache['points']

    def polygons(self) -> gpd.GeoDataFrame:
        if 'polygons' not in self._cache:
            self._cache['polygons'] = make_polygons(self.n_features, bounds=self.bounds,
                                                    crs=self.crs, seed=self.seed + 1)
        return self._cache['polygons']

    def vector_path(self) -> Path:
        if 'vector' not in self._cache:
            ext = 'gpkg' if DATASET_DEFAULTS['vector_driver'] == 'GPKG' else 'geojson'
            path = self.workdir / f'polygons_{self.n_features}.{ext}'
            self._cache['vector'] = write_vector(self.polygons(), path)
        return self._cache['vector']
