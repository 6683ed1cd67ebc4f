from pathlib import Path

from spatialbench.suites.datasets import SuiteContext


def small_context(workdir, raster_size=64, n_features=50, seed=7):
    """A SuiteContext small enough for unit tests."""
    return SuiteContext(Path(workdir), raster_size=raster_size, n_features=n_features, seed=seed)
