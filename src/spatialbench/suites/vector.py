"""
vector.py

Vector comparisons: reading a layer, buffering, distance to a target point,
nearest-neighbour lookup and reprojection, each done through geopandas and
through the lower-level libraries it is built on (fiona, shapely, pyproj,
scipy). Inputs that every competitor needs (coordinate arrays, geometry
arrays) are prepared once, outside the timed operations.
"""
import logging
from typing import List

import numpy as np
import geopandas as gpd
import fiona
import shapely
from pyproj import CRS, Transformer
from scipy.spatial import cKDTree
from scipy.spatial.distance import cdist
from shapely.geometry import Point, shape

from spatialbench.harness import BenchmarkCase
from spatialbench.suites.datasets import make_points

logger = logging.getLogger(__name__)


def reproject_to_metric(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Return ``gdf`` in a projected CRS; geographic layers go to their UTM zone."""
    if gdf.crs is None:
        raise ValueError('layer has no CRS; cannot pick a metric projection')
    if CRS.from_user_input(gdf.crs).is_projected:
        return gdf
    utm = gdf.estimate_utm_crs()
    logger.debug('reprojecting %s -> %s', gdf.crs, utm)
    return gdf.to_crs(utm)


def lonlat_to_crs(lon: float, lat: float, crs) -> Point:
    """Project a WGS84 lon/lat pair into ``crs``."""
    transformer = Transformer.from_crs('EPSG:4326', crs, always_xy=True)
    x, y = transformer.transform(lon, lat)
    return Point(x, y)


def layer_centre(gdf: gpd.GeoDataFrame) -> Point:
    minx, miny, maxx, maxy = gdf.total_bounds
    return Point((minx + maxx) / 2.0, (miny + maxy) / 2.0)


def load_cases(path) -> List[BenchmarkCase]:
    path = str(path)

    def geopandas_read():
        return gpd.read_file(path)

    def geopandas_read_fiona():
        return gpd.read_file(path, engine='fiona')

    def fiona_records():
        with fiona.open(path) as src:
            return [shape(feat['geometry']) for feat in src]

    return [
        BenchmarkCase('geopandas.read_file', geopandas_read),
        BenchmarkCase('geopandas.read_file[fiona]', geopandas_read_fiona),
        BenchmarkCase('fiona.records', fiona_records),
    ]


def buffer_cases(gdf: gpd.GeoDataFrame, distance: float, resolution: int = 16) -> List[BenchmarkCase]:
    series = gdf.geometry
    geoms = series.to_numpy()

    def geopandas_buffer():
        return series.buffer(distance, quad_segs=resolution)

    def shapely_vectorized():
        return shapely.buffer(geoms, distance, quad_segs=resolution)

    def shapely_loop():
        return [g.buffer(distance, quad_segs=resolution) for g in geoms]

    return [
        BenchmarkCase('geopandas.buffer', geopandas_buffer),
        BenchmarkCase('shapely.buffer', shapely_vectorized),
        BenchmarkCase('shapely.loop', shapely_loop),
    ]


def distance_cases(gdf: gpd.GeoDataFrame, target: Point) -> List[BenchmarkCase]:
    """Distance from every feature to ``target``, in layer units."""
    series = gdf.geometry
    geoms = series.to_numpy()
    coords = shapely.get_coordinates(geoms)
    point_layer = bool(len(geoms)) and bool(np.all(shapely.get_type_id(geoms) == 0))
    target_xy = np.array([[target.x, target.y]])

    def geopandas_distance():
        return series.distance(target).to_numpy()

    def shapely_distance():
        return shapely.distance(geoms, target)

    def scipy_cdist():
        return cdist(coords, target_xy)[:, 0]

    def numpy_hypot():
        return np.hypot(coords[:, 0] - target.x, coords[:, 1] - target.y)

    cases = [
        BenchmarkCase('geopandas.distance', geopandas_distance),
        BenchmarkCase('shapely.distance', shapely_distance),
    ]
    if point_layer:
        # coordinate shortcuts only agree with GEOS for point geometries
        cases += [
            BenchmarkCase('scipy.cdist', scipy_cdist),
            BenchmarkCase('numpy.hypot', numpy_hypot),
        ]
    return cases


def nearest_cases(points: gpd.GeoDataFrame, queries: gpd.GeoDataFrame) -> List[BenchmarkCase]:
    """Index of the nearest ``points`` feature for every query point."""
    pts = points.geometry.to_numpy()
    qs = queries.geometry.to_numpy()
    pts_xy = shapely.get_coordinates(pts)
    qs_xy = shapely.get_coordinates(qs)
    left = gpd.GeoDataFrame(geometry=queries.geometry.reset_index(drop=True), crs=queries.crs)
    right = gpd.GeoDataFrame(geometry=points.geometry.reset_index(drop=True), crs=points.crs)

    def geopandas_sjoin():
        joined = gpd.sjoin_nearest(left, right).sort_index(kind='stable')
        joined = joined[~joined.index.duplicated(keep='first')]
        return joined['index_right'].to_numpy()

    def shapely_strtree():
        tree = shapely.STRtree(pts)
        query_idx, tree_idx = tree.query_nearest(qs, all_matches=False)
        out = np.empty(len(qs), dtype=np.intp)
        out[query_idx] = tree_idx
        return out

    def scipy_kdtree():
        tree = cKDTree(pts_xy)
        return tree.query(qs_xy)[1]

    return [
        BenchmarkCase('geopandas.sjoin_nearest', geopandas_sjoin),
        BenchmarkCase('shapely.STRtree', shapely_strtree),
        BenchmarkCase('scipy.cKDTree', scipy_kdtree),
    ]


def reproject_cases(gdf: gpd.GeoDataFrame, dst_crs='EPSG:4326') -> List[BenchmarkCase]:
    series = gdf.geometry
    geoms = series.to_numpy()
    src_crs = gdf.crs

    def geopandas_to_crs():
        return series.to_crs(dst_crs)

    def pyproj_transform():
        transformer = Transformer.from_crs(src_crs, dst_crs, always_xy=True)

        def _xy(coords):
            x, y = transformer.transform(coords[:, 0], coords[:, 1])
            return np.column_stack([x, y])

        return shapely.transform(geoms, _xy)

    return [
        BenchmarkCase('geopandas.to_crs', geopandas_to_crs),
        BenchmarkCase('pyproj.Transformer', pyproj_transform),
    ]


def query_points(gdf: gpd.GeoDataFrame, n: int, seed: int) -> gpd.GeoDataFrame:
    """Random query points inside the bounds of ``gdf``."""
    minx, miny, maxx, maxy = (float(v) for v in gdf.total_bounds)
    return make_points(n, (minx, miny, maxx, maxy), crs=gdf.crs, seed=seed)
