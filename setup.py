"""
Setup script for spatialbench package
Timing harness comparing raster and vector geospatial libraries
"""
from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="spatialbench",
    version="0.1.0",
    description="Benchmark harness comparing the runtime of raster and vector geospatial libraries",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Education",
        "Topic :: Scientific/Engineering :: GIS",
        "Topic :: System :: Benchmark",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        # Core scientific stack
        "numpy>=1.22",
        "pandas>=1.5",
        "scipy>=1.9",
        # Geospatial
        "geopandas>=1.0",
        "shapely>=2.0",
        "fiona>=1.9",
        "pyogrio>=0.7",
        "rasterio>=1.3",
        "affine>=2.4,<3.0",
        "pyproj>=3.4",
        # Labelled arrays
        "xarray>=2022.6",
        # Plots
        "matplotlib>=3.6",
    ],
    extras_require={
        "dev": [
            "black>=22.0",
            "isort>=5.0",
            "pytest>=7.0",
            "pytest-cov>=3.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "spatialbench=spatialbench.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
