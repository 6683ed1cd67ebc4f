"""Geospatial benchmark suites.

A suite is a list of competing `BenchmarkCase` objects that compute the same
thing with different libraries, plus the predicate that decides whether two
of their results agree. Suites are built from a `SuiteContext`, which owns
the synthetic datasets.

    from spatialbench.suites import SuiteContext, build_suite
    from spatialbench import harness

    suite = build_suite('vector-buffer', SuiteContext('/tmp/bench'))
    summaries = harness.run(suite.cases, config, equality=suite.equality)
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from spatialbench.config import SUITE_DEFAULTS
from spatialbench.equivalence import allclose, same_geometries, values_equal
from spatialbench.harness import BenchmarkCase
from spatialbench.suites import raster, vector
from spatialbench.suites.datasets import SuiteContext


@dataclass(frozen=True)
class Suite:
    name: str
    description: str
    cases: List[BenchmarkCase]
    equality: Callable[[Any, Any], bool] = values_equal


def _raster_close():
    return allclose(rtol=SUITE_DEFAULTS['raster_rtol'], atol=SUITE_DEFAULTS['raster_atol'])


def _geometry_match():
    return same_geometries(tolerance=SUITE_DEFAULTS['geometry_tolerance'])


def raster_load(ctx: SuiteContext) -> Suite:
    return Suite('raster-load', 'read a full GeoTIFF band',
                 raster.load_cases(ctx.raster_path()))


def raster_crop(ctx: SuiteContext) -> Suite:
    window = raster.central_window(ctx.raster_size, ctx.raster_size, SUITE_DEFAULTS['crop_fraction'])
    return Suite('raster-crop', 'read the central window of a GeoTIFF band',
                 raster.crop_cases(ctx.raster_path(), window))


def raster_resample(ctx: SuiteContext) -> Suite:
    factor = SUITE_DEFAULTS['resample_factor']
    return Suite('raster-resample', f'block-average downsampling by {factor}',
                 raster.resample_cases(ctx.raster_path(), factor), _raster_close())


def vector_load(ctx: SuiteContext) -> Suite:
    return Suite('vector-load', 'read a polygon layer',
                 vector.load_cases(ctx.vector_path()), _geometry_match())


def vector_buffer(ctx: SuiteContext) -> Suite:
    cases = vector.buffer_cases(ctx.polygons(), SUITE_DEFAULTS['buffer_distance'],
                                SUITE_DEFAULTS['buffer_resolution'])
    return Suite('vector-buffer', 'buffer every polygon', cases, _geometry_match())


def vector_distance(ctx: SuiteContext) -> Suite:
    points = ctx.points()
    cases = vector.distance_cases(points, vector.layer_centre(points))
    return Suite('vector-distance', 'distance from every point to the layer centre',
                 cases, _raster_close())


def vector_nearest(ctx: SuiteContext) -> Suite:
    points = ctx.points()
    queries = vector.query_points(points, max(1, ctx.n_features // 10), ctx.seed + 2)
    return Suite('vector-nearest', 'nearest point for a set of query points',
                 vector.nearest_cases(points, queries))


def vector_reproject(ctx: SuiteContext) -> Suite:
    return Suite('vector-reproject', 'reproject polygons to WGS84',
                 vector.reproject_cases(ctx.polygons()), same_geometries(tolerance=1e-9))


SUITES: Dict[str, Callable[[SuiteContext], Suite]] = {
    'raster-load': raster_load,
    'raster-crop': raster_crop,
    'raster-resample': raster_resample,
    'vector-load': vector_load,
    'vector-buffer': vector_buffer,
    'vector-distance': vector_distance,
    'vector-nearest': vector_nearest,
    'vector-reproject': vector_reproject,
}


def build_suite(name: str, ctx: SuiteContext) -> Suite:
    try:
        builder = SUITES[name]
    except KeyError:
        raise KeyError(f'unknown suite {name!r}; choose from {sorted(SUITES)}') from None
    return builder(ctx)


__all__ = ['Suite', 'SuiteContext', 'SUITES', 'build_suite']
