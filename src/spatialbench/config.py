# -*- coding: utf-8 -*-

"""
config.py

This module centralizes the tunable defaults of spatialbench. By keeping run
settings, synthetic dataset sizes and logging levels in one place, the
harness, the suites and the command line stay consistent with each other.

Contents:
---------
1. RUN_DEFAULTS:
   - Iteration count and the equivalence / memory-tracking switches used when
     the caller does not pass a RunConfiguration of their own.

2. DATASET_DEFAULTS:
   - Size, extent and CRS of the synthetic rasters and vector layers that the
     suites generate. Coordinates are in the projected CRS (metres).

3. SUITE_DEFAULTS:
   - Operation parameters per suite (crop fraction, resampling factor,
     buffer distance, ...).

4. LOGGING:
   - Package log level/format and the levels forced onto third-party loggers.

Usage:
------
    from spatialbench.config import run_configuration

    config = run_configuration(iterations=10, check_equivalence=True)

If you later decide to read these values from a file, update this module to
load from external sources instead of hard-coding them.

"""
import logging

# ───────────────────────────────────────────────────────────────────────────────
# 1) RUN SETTINGS
# ───────────────────────────────────────────────────────────────────────────────
RUN_DEFAULTS = {
    'iterations': 5,                # timed calls per case (>= 1)
    'check_equivalence': False,     # compare every case against the first one
    'track_memory': False,          # bracket each call with tracemalloc snapshots
}

# ───────────────────────────────────────────────────────────────────────────────
# 2) SYNTHETIC DATASETS (projected units: metres)
# ───────────────────────────────────────────────────────────────────────────────
DATASET_DEFAULTS = {
    'crs': 'EPSG:32610',            # UTM zone 10N
    'origin': (500000.0, 5300000.0),  # upper-left corner (x, y)
    'pixel_size': 10.0,             # raster cell size (m)
    'raster_size': 512,             # raster width == height (cells)
    'n_features': 1000,             # vector features per layer
    'polygon_radius': 25.0,         # radius of synthetic polygons (m)
    'seed': 12345,
    'vector_driver': 'GPKG',
}

# ───────────────────────────────────────────────────────────────────────────────
# 3) SUITE PARAMETERS
# ───────────────────────────────────────────────────────────────────────────────
SUITE_DEFAULTS = {
    'crop_fraction': 0.5,           # central window, as a fraction of each axis
    'resample_factor': 4,           # integer downsampling factor
    'buffer_distance': 50.0,        # m
    'buffer_resolution': 16,        # quadrant segments
    'geometry_tolerance': 1e-6,     # m, for geometry equivalence
    'raster_rtol': 1e-5,
    'raster_atol': 1e-6,
}

# ───────────────────────────────────────────────────────────────────────────────
# 4) LOGGING
# ───────────────────────────────────────────────────────────────────────────────
LOGGING = {
    'level': logging.INFO,
    'format': '[%(levelname)s] %(message)s',
    'third_party_levels': {
        'fiona': logging.ERROR,
        'rasterio': logging.ERROR,
        'geopandas': logging.ERROR,
        'shapely': logging.ERROR,
        'pyproj': logging.ERROR,
        'matplotlib': logging.WARNING,
    },
}


def run_configuration(**overrides):
    """Build a validated RunConfiguration from RUN_DEFAULTS plus overrides.

    Unknown keys raise TypeError; ``None`` values keep the default.
    """
    from spatialbench.harness import RunConfiguration

    unknown = set(overrides) - set(RUN_DEFAULTS)
    if unknown:
        raise TypeError(f'unknown run settings: {sorted(unknown)}')
    settings = dict(RUN_DEFAULTS)
    settings.update({k: v for k, v in overrides.items() if v is not None})
    config = RunConfiguration(**settings)
    config.validate()
    return config
