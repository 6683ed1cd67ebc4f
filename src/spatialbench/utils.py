"""
utils.py

Small helpers shared by the harness, the suites and the CLI. This file
holds the package logging setup and a robust exception logger.

The public helpers:
- `configure_logging(level)` : console logging for the "spatialbench" logger
- `safe_log_exception(msg, exc, **ctx)` : logs exceptions robustly
- `quiet_third_party()` : lowers the chatty geospatial library loggers

"""

from typing import Any, Union
import sys
import logging

from spatialbench.config import LOGGING

logger = logging.getLogger(__name__)


def quiet_third_party() -> None:
    """Reduce noisy logging from GDAL/GEOS wrappers and plotting."""
    for name, level in LOGGING['third_party_levels'].items():
        logging.getLogger(name).setLevel(level)


def configure_logging(level: Union[int, str] = None) -> logging.Logger:
    """Attach a console handler to the package logger and return it.

    Safe to call repeatedly (notebooks, tests): the handler is only added
    once and later calls just change the level.
    """
    if level is None:
        level = LOGGING['level']
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f'unknown log level: {level!r}')

    log = logging.getLogger('spatialbench')
    if not any(getattr(h, '_spatialbench', False) for h in log.handlers):   # avoid dupes
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(LOGGING['format']))
        h._spatialbench = True
        log.addHandler(h)
    for h in log.handlers:
        if getattr(h, '_spatialbench', False):
            h.setLevel(level)
    log.setLevel(level)
    quiet_third_party()
    return log


def safe_log_exception(msg: str, exc: BaseException, **ctx: Any) -> None:
    """Log an exception robustly.

    Attempts to call `logger.exception`. If logging fails for any reason,
    falls back to writing a compact message to `sys.stderr`.
    """
    try:
        if ctx:
            ctx_s = ' | '.join(f"{k}={v!r}" for k, v in ctx.items())
            logger.exception('%s | %s | %s', msg, exc, ctx_s, exc_info=exc)
        else:
            logger.exception('%s | %s', msg, exc, exc_info=exc)
    except Exception:
        # Minimal fallback: a broken handler must not take the run down.
        try:
            sys.stderr.write(f'LOGGING FAILURE: {msg} {exc}\n')
        except Exception:
            pass
