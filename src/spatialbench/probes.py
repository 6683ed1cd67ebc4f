"""Clock and memory probes used by the harness.

Both are capability-checked so the harness degrades to timing only when the
interpreter cannot report allocations.
"""
import time
from contextlib import contextmanager

try:
    import tracemalloc
except ImportError:   # interpreters without tracemalloc simply skip memory stats
    tracemalloc = None

# Monotonic, highest resolution clock available. Never use time.time() here.
clock = time.perf_counter


def memory_tracking_available() -> bool:
    """True when allocation tracing is supported by this interpreter."""
    return tracemalloc is not None and hasattr(tracemalloc, 'get_traced_memory')


@contextmanager
def tracing(enabled: bool = True):
    """Keep tracemalloc running for the duration of the block.

    Yields True when allocations are being traced. Tracing that was already
    active before the block is left running afterwards.
    """
    if not (enabled and memory_tracking_available()):
        yield False
        return
    started = False
    if not tracemalloc.is_tracing():
        tracemalloc.start()
        started = True
    try:
        yield True
    finally:
        if started:
            tracemalloc.stop()


class MemoryProbe:
    """Context manager reporting the traced-memory delta of its block.

    Starts tracemalloc on enter if it is not already tracing and stops it
    again on exit only in that case, so nested probes and callers that trace
    on their own are left alone. ``delta`` stays ``None`` when tracing is
    unsupported.
    """

    def __init__(self):
        self.delta = None
        self._before = None
        self._started = False

    def __enter__(self):
        if not memory_tracking_available():
            return self
        if not tracemalloc.is_tracing():
            tracemalloc.start()
            self._started = True
        self._before = tracemalloc.get_traced_memory()[0]
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._before is None:
            return False
        after = tracemalloc.get_traced_memory()[0]
        # may be negative when garbage is collected inside the block
        self.delta = int(after - self._before)
        if self._started:
            tracemalloc.stop()
            self._started = False
        return False
