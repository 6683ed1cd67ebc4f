import time
import tracemalloc

import pytest

from spatialbench.probes import MemoryProbe, clock, memory_tracking_available, tracing


def test_clock_is_monotonic():
    assert clock is time.perf_counter
    a = clock()
    b = clock()
    assert b >= a


@pytest.mark.skipif(not memory_tracking_available(), reason='tracemalloc unavailable')
def test_memory_probe_sees_allocation_and_restores_state():
    was_tracing = tracemalloc.is_tracing()
    with MemoryProbe() as probe:
        blob = bytearray(1_000_000)
    assert probe.delta >= 900_000
    assert len(blob) == 1_000_000
    assert tracemalloc.is_tracing() == was_tracing


@pytest.mark.skipif(not memory_tracking_available(), reason='tracemalloc unavailable')
def test_tracing_leaves_existing_tracing_running():
    tracemalloc.start()
    try:
        with tracing() as active:
            assert active
        assert tracemalloc.is_tracing()
    finally:
        tracemalloc.stop()
    with tracing() as active:
        assert active and tracemalloc.is_tracing()
    assert not tracemalloc.is_tracing()


def test_tracing_disabled():
    with tracing(False) as active:
        assert active is False
