import numpy as np
import pytest
import rasterio

from spatialbench.harness import RunConfiguration, Verdict, run
from spatialbench.suites import build_suite, raster
from spatialbench.suites.datasets import make_raster, raster_bounds
from spatialbench.tests.fixtures.geodata import small_context


@pytest.fixture
def ctx(tmp_path):
    return small_context(tmp_path)


def test_make_raster_georeferencing(tmp_path):
    path = make_raster(tmp_path / 'dem.tif', size=32, pixel_size=5.0, origin=(1000.0, 2000.0),
                       crs='EPSG:32610', seed=1)
    with rasterio.open(path) as src:
        assert (src.width, src.height, src.count) == (32, 32, 1)
        assert src.dtypes[0] == 'float32'
        assert src.crs.to_epsg() == 32610
        assert tuple(src.bounds) == raster_bounds(32, 5.0, (1000.0, 2000.0))
        data = src.read(1)
    assert np.isfinite(data).all()


def test_make_raster_is_seeded(tmp_path):
    a = make_raster(tmp_path / 'a.tif', size=16, seed=3)
    b = make_raster(tmp_path / 'b.tif', size=16, seed=3)
    with rasterio.open(a) as ra, rasterio.open(b) as rb:
        assert np.array_equal(ra.read(1), rb.read(1))


def test_central_window():
    w = raster.central_window(64, 32, 0.5)
    assert (w.col_off, w.row_off, w.width, w.height) == (16, 8, 32, 16)
    with pytest.raises(ValueError):
        raster.central_window(10, 10, 0.0)


def test_load_suite_cases_agree(ctx):
    suite = build_suite('raster-load', ctx)
    out = run(suite.cases, RunConfiguration(iterations=2, check_equivalence=True), equality=suite.equality)
    assert [s.label for s in out] == ['rasterio.read', 'rasterio.block_windows', 'xarray.DataArray']
    assert all(s.verdict is Verdict.PASS for s in out)
    assert all(s.succeeded == 2 for s in out)


def test_crop_suite_cases_agree(ctx):
    suite = build_suite('raster-crop', ctx)
    out = run(suite.cases, RunConfiguration(iterations=2, check_equivalence=True), equality=suite.equality)
    assert all(s.failure is None for s in out)
    assert all(s.verdict is Verdict.PASS for s in out)
    assert suite.cases[0].operation().shape == (32, 32)


def test_resample_shapes_and_numpy_xarray_agree(ctx):
    suite = build_suite('raster-resample', ctx)
    results = {c.label: c.operation() for c in suite.cases}
    assert results['rasterio.average'].shape == (16, 16)
    assert results['xarray.coarsen'].shape == (16, 16)
    assert suite.equality(results['xarray.coarsen'], results['numpy.reshape_mean'])


def test_resample_suite_cases_agree_with_rasterio_baseline(ctx):
    suite = build_suite('raster-resample', ctx)
    out = run(suite.cases, RunConfiguration(iterations=2, check_equivalence=True), equality=suite.equality)
    assert [s.label for s in out] == ['rasterio.average', 'xarray.coarsen', 'numpy.reshape_mean']
    assert all(s.failure is None for s in out)
    assert [s.verdict for s in out] == [Verdict.PASS, Verdict.PASS, Verdict.PASS]


def test_resample_factor_validation(ctx):
    with pytest.raises(ValueError):
        raster.resample_cases(ctx.raster_path(), 0)


def test_raster_written_once(ctx):
    first = ctx.raster_path()
    mtime = first.stat().st_mtime_ns
    build_suite('raster-load', ctx)
    build_suite('raster-crop', ctx)
    assert ctx.raster_path() == first
    assert first.stat().st_mtime_ns == mtime
