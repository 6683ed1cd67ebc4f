"""
harness.py

Benchmark harness for comparing competing implementations of the same
operation. A run takes an ordered sequence of named zero-argument
operations, calls each one a fixed number of times on the invoking thread,
and returns one `ResultSummary` per case in input order.

Behaviour:
- configuration is validated before any operation is invoked
- each call is timed with a monotonic clock (`time.perf_counter`); the
  timer is a local value of `time_call`, there is no shared timer state
- an exception raised by an operation stops that case only; it is captured
  as an `ExecutionFailure` and the remaining cases still run
- statistics come from successful measurements only and are ``None`` (not
  zero) when a case produced none
- with ``check_equivalence`` the first case is the baseline and the last
  result of every other case is compared against the baseline's last result;
  a mismatch is a warning, never an error, and never discards timings
- with ``track_memory`` each call is bracketed by tracemalloc readings; the
  delta is ``None`` where the interpreter cannot trace allocations

Public API:
- `BenchmarkCase`, `RunConfiguration`, `Measurement`, `ResultSummary`, `Verdict`
- `InvalidConfiguration`, `ExecutionFailure`, `EquivalenceMismatch`
- `time_call(operation, track_memory=False)` -> (Measurement, result)
- `run(cases, config=None, equality=None)` -> list of ResultSummary

"""
from dataclasses import dataclass
import enum
import logging
import numbers
import statistics
import warnings
from typing import Any, Callable, Iterable, List, Optional, Tuple, Union

from spatialbench.equivalence import values_equal
from spatialbench.probes import MemoryProbe, clock, memory_tracking_available, tracing
from spatialbench.utils import safe_log_exception

logger = logging.getLogger(__name__)

_MISSING = object()


class InvalidConfiguration(ValueError):
    """Raised before any operation runs when the run cannot be configured."""


class ExecutionFailure(RuntimeError):
    """Captured failure of one case; the original exception is the cause."""

    def __init__(self, label: str, iteration: int, error: BaseException):
        self.label = label
        self.iteration = iteration
        self.error = error
        self.reason = f'{type(error).__name__}: {error}'
        super().__init__(f'case {label!r} failed on iteration {iteration}: {self.reason}')
        self.__cause__ = error


class EquivalenceMismatch(UserWarning):
    """A case produced a result that differs from the baseline's."""


class Verdict(enum.Enum):
    PASS = 'pass'
    FAIL = 'fail'
    NOT_CHECKED = 'not-checked'


@dataclass(frozen=True)
class BenchmarkCase:
    """A named zero-argument operation to be measured."""
    label: str
    operation: Callable[[], Any]

    def __post_init__(self):
        if not isinstance(self.label, str) or not self.label:
            raise InvalidConfiguration(f'case label must be a non-empty string, got {self.label!r}')
        if not callable(self.operation):
            raise InvalidConfiguration(f'operation of case {self.label!r} is not callable')


@dataclass(frozen=True)
class RunConfiguration:
    """Settings shared by every case of one run."""
    iterations: int = 1
    check_equivalence: bool = False
    track_memory: bool = False

    def validate(self) -> None:
        it = self.iterations
        if isinstance(it, bool) or not isinstance(it, numbers.Integral):
            raise InvalidConfiguration(f'iterations must be an integer, got {it!r}')
        if it < 1:
            raise InvalidConfiguration(f'iterations must be >= 1, got {it}')


@dataclass(frozen=True)
class Measurement:
    """One timed call: seconds elapsed and, optionally, bytes allocated."""
    elapsed: float
    memory_delta: Optional[int] = None


@dataclass(frozen=True)
class ResultSummary:
    """Everything measured for one case. Statistics are derived on access."""
    label: str
    iterations: int
    measurements: Tuple[Measurement, ...] = ()
    failure: Optional[ExecutionFailure] = None
    verdict: Verdict = Verdict.NOT_CHECKED
    warning: Optional[str] = None

    @property
    def elapsed(self) -> Tuple[float, ...]:
        return tuple(m.elapsed for m in self.measurements)

    @property
    def succeeded(self) -> int:
        return len(self.measurements)

    @property
    def all_failed(self) -> bool:
        return not self.measurements

    @property
    def min(self) -> Optional[float]:
        return min(self.elapsed) if self.measurements else None

    @property
    def max(self) -> Optional[float]:
        return max(self.elapsed) if self.measurements else None

    @property
    def mean(self) -> Optional[float]:
        return statistics.fmean(self.elapsed) if self.measurements else None

    @property
    def median(self) -> Optional[float]:
        return statistics.median(self.elapsed) if self.measurements else None

    @property
    def memory_delta(self) -> Optional[float]:
        """Median allocation delta in bytes; advisory only."""
        deltas = [m.memory_delta for m in self.measurements if m.memory_delta is not None]
        return statistics.median(deltas) if deltas else None

    @property
    def failure_reason(self) -> Optional[str]:
        return self.failure.reason if self.failure is not None else None

    @property
    def status(self) -> str:
        if self.failure is not None:
            return 'failed'
        if self.verdict is Verdict.FAIL:
            return 'equivalence-failed'
        return 'ok'

    def as_row(self) -> dict:
        return {
            'label': self.label,
            'iterations': self.iterations,
            'succeeded': self.succeeded,
            'min_s': self.min,
            'median_s': self.median,
            'mean_s': self.mean,
            'max_s': self.max,
            'memory_delta_bytes': self.memory_delta,
            'verdict': self.verdict.value,
            'status': self.status,
            'failure': self.failure_reason,
            'warning': self.warning,
        }


def time_call(operation: Callable[[], Any], track_memory: bool = False) -> Tuple[Measurement, Any]:
    """Call ``operation`` once and return its measurement and result.

    Exceptions from ``operation`` propagate to the caller.
    """
    if track_memory:
        with MemoryProbe() as probe:
            start = clock()
            result = operation()
            elapsed = clock() - start
        return Measurement(elapsed, probe.delta), result
    start = clock()
    result = operation()
    elapsed = clock() - start
    return Measurement(elapsed), result


def _as_case(case: Union[BenchmarkCase, Tuple[str, Callable[[], Any]]]) -> BenchmarkCase:
    if isinstance(case, BenchmarkCase):
        return case
    try:
        label, operation = case
    except (TypeError, ValueError):
        raise InvalidConfiguration(f'expected a BenchmarkCase or (label, operation) pair, got {case!r}') from None
    return BenchmarkCase(label, operation)


def _run_case(case, iterations, track_memory, keep_result):
    measurements = []
    failure = None
    last = _MISSING
    op = case.operation
    for i in range(iterations):
        try:
            m, result = time_call(op, track_memory)
        except Exception as exc:
            failure = ExecutionFailure(case.label, i, exc)
            safe_log_exception(f'case {case.label!r} failed', exc, iteration=i)
            break
        measurements.append(m)
        if keep_result:
            last = result
    if failure is not None:
        last = _MISSING
    return tuple(measurements), failure, last


def _compare(labels, results, equality):
    """Return (verdicts, warnings) for every case against the first one."""
    n = len(labels)
    verdicts = [Verdict.NOT_CHECKED] * n
    notes = [None] * n
    baseline = results[0]
    if baseline is _MISSING:
        logger.warning('baseline %r produced no result; equivalence not checked', labels[0])
        return verdicts, notes
    verdicts[0] = Verdict.PASS
    for i in range(1, n):
        if results[i] is _MISSING:
            continue
        try:
            same = bool(equality(baseline, results[i]))
            detail = f'result differs from baseline {labels[0]!r}'
        except Exception as exc:
            same = False
            detail = f'equality check raised {type(exc).__name__}: {exc}'
        if same:
            verdicts[i] = Verdict.PASS
            continue
        verdicts[i] = Verdict.FAIL
        notes[i] = f'{labels[i]!r}: {detail}'
        logger.warning('equivalence mismatch: %s', notes[i])
        warnings.warn(notes[i], EquivalenceMismatch, stacklevel=3)
    return verdicts, notes


def run(cases: Iterable, config: Optional[RunConfiguration] = None,
        equality: Optional[Callable[[Any, Any], bool]] = None) -> List[ResultSummary]:
    """Measure every case under one configuration.

    Parameters
    ----------
    cases : ordered iterable of `BenchmarkCase` or ``(label, operation)`` pairs
    config : `RunConfiguration`; defaults to a single iteration
    equality : predicate ``(baseline, other) -> bool`` used when
        ``config.check_equivalence`` is set; defaults to `values_equal`

    Raises `InvalidConfiguration` for an empty case sequence or a
    non-positive iteration count, before any operation is called.
    """
    if config is None:
        config = RunConfiguration()
    config.validate()
    cases = [_as_case(c) for c in cases]
    if not cases:
        raise InvalidConfiguration('at least one benchmark case is required')
    if equality is None:
        equality = values_equal

    track_memory = config.track_memory and memory_tracking_available()
    if config.track_memory and not track_memory:
        logger.info('memory tracking unavailable on this interpreter; deltas omitted')

    collected = []
    with tracing(track_memory):
        for case in cases:
            logger.debug('running %r x%d', case.label, config.iterations)
            collected.append(_run_case(case, config.iterations, track_memory, config.check_equivalence))

    labels = [c.label for c in cases]
    if config.check_equivalence:
        results = [c[2] for c in collected]
        verdicts, notes = _compare(labels, results, equality)
        del results
    else:
        verdicts, notes = [Verdict.NOT_CHECKED] * len(cases), [None] * len(cases)

    summaries = []
    for label, (measurements, failure, _), verdict, note in zip(labels, collected, verdicts, notes):
        summary = ResultSummary(label, config.iterations, measurements, failure, verdict, note)
        if summary.all_failed:
            logger.info('%s: no successful iterations (%s)', label, summary.failure_reason)
        else:
            logger.info('%s: n=%d min=%.6fs median=%.6fs mean=%.6fs max=%.6fs',
                        label, summary.succeeded, summary.min, summary.median, summary.mean, summary.max)
        summaries.append(summary)
    collected.clear()
    return summaries
