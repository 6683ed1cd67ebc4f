"""spatialbench: timing harness for comparing raster and vector libraries."""
from spatialbench.harness import (
    BenchmarkCase,
    EquivalenceMismatch,
    ExecutionFailure,
    InvalidConfiguration,
    Measurement,
    ResultSummary,
    RunConfiguration,
    Verdict,
    run,
    time_call,
)

__version__ = '0.1.0'
