import pytest

from spatialbench.config import RUN_DEFAULTS, run_configuration
from spatialbench.harness import InvalidConfiguration, RunConfiguration


def test_defaults():
    config = run_configuration()
    assert isinstance(config, RunConfiguration)
    assert config.iterations == RUN_DEFAULTS['iterations']
    assert config.check_equivalence is RUN_DEFAULTS['check_equivalence']
    assert config.track_memory is RUN_DEFAULTS['track_memory']


def test_overrides_and_none_keeps_default():
    config = run_configuration(iterations=9, check_equivalence=True, track_memory=None)
    assert config.iterations == 9
    assert config.check_equivalence is True
    assert config.track_memory is RUN_DEFAULTS['track_memory']


def test_unknown_setting():
    with pytest.raises(TypeError):
        run_configuration(repeats=3)


def test_invalid_iterations():
    with pytest.raises(InvalidConfiguration):
        run_configuration(iterations=0)


def test_configuration_is_frozen():
    config = run_configuration()
    with pytest.raises(Exception):
        config.iterations = 100
