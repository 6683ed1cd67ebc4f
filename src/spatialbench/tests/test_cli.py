import pandas as pd
import pytest

from spatialbench import cli
from spatialbench.harness import BenchmarkCase
from spatialbench.suites import SUITES, Suite
from spatialbench.tests.fixtures.operations import CountingOperation


def test_list(capsys):
    assert cli.main(['--list']) == 0
    assert capsys.readouterr().out.split() == list(SUITES)


def test_run_single_suite_with_outputs(tmp_path, capsys):
    csv = tmp_path / 'crop.csv'
    md = tmp_path / 'crop.md'
    rc = cli.main(['raster-crop', '--size', '32', '--iterations', '2', '--check-equivalence',
                   '--workdir', str(tmp_path / 'data'), '--csv', str(csv), '--markdown', str(md),
                   '--log-level', 'WARNING'])
    assert rc == 0
    assert '# raster-crop' in capsys.readouterr().out
    df = pd.read_csv(csv)
    assert list(df['verdict']) == ['pass', 'pass', 'pass']
    assert list(df['succeeded']) == [2, 2, 2]
    assert md.exists()


def test_several_suites_get_suffixed_outputs(tmp_path):
    rc = cli.main(['vector-buffer', 'vector-distance', '--features', '20', '--iterations', '1',
                   '--workdir', str(tmp_path), '--csv', str(tmp_path / 'out.csv'),
                   '--plot', str(tmp_path / 'box.png'), '--log-level', 'ERROR'])
    assert rc == 0
    assert (tmp_path / 'out_vector-buffer.csv').exists()
    assert (tmp_path / 'out_vector-distance.csv').exists()
    assert (tmp_path / 'box_vector-buffer.png').exists()


@pytest.mark.parametrize('argv', [
    ['raster-crop', '--iterations', '0'],
    ['no-such-suite'],
    ['raster-crop', '--size', '0'],
    ['raster-crop', '--log-level', 'LOUD'],
])
def test_bad_arguments_exit_2(argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    assert exc.value.code == 2


def _broken_suite(ctx):
    return Suite('raster-crop', 'every case raises',
                 [BenchmarkCase('broken-a', CountingOperation(fail_on=1)),
                  BenchmarkCase('broken-b', CountingOperation(fail_on=1, exc_type=ValueError))])


def test_every_case_failing_exits_1(tmp_path, monkeypatch, capsys):
    monkeypatch.setitem(SUITES, 'raster-crop', _broken_suite)
    rc = cli.main(['raster-crop', '--iterations', '2', '--workdir', str(tmp_path),
                   '--log-level', 'CRITICAL'])
    assert rc == 1
    out = capsys.readouterr().out
    assert 'broken-a' in out and 'RuntimeError' in out and 'ValueError' in out


def test_partial_failure_still_exits_0(tmp_path, monkeypatch):
    def half_broken(ctx):
        return Suite('raster-crop', 'one case raises',
                     [BenchmarkCase('ok', CountingOperation()),
                      BenchmarkCase('broken', CountingOperation(fail_on=1))])

    monkeypatch.setitem(SUITES, 'raster-crop', half_broken)
    assert cli.main(['raster-crop', '--workdir', str(tmp_path), '--log-level', 'CRITICAL']) == 0
