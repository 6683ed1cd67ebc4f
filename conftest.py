import logging

import pytest


def pytest_configure(config):
    """Use a non-interactive matplotlib backend for every test run.

    Plot tests save PNGs only; an interactive backend would try to open a
    display on CI machines.
    """
    import matplotlib
    matplotlib.use('Agg')


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop console handlers that tests (or the CLI) attach to 'spatialbench'.

    The handler is bound to whatever sys.stdout was when it was created, which
    under pytest is a per-test capture stream.
    """
    yield
    log = logging.getLogger('spatialbench')
    for h in list(log.handlers):
        if getattr(h, '_spatialbench', False):
            log.removeHandler(h)
    log.setLevel(logging.NOTSET)
