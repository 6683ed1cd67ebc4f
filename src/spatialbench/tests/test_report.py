import math

import pandas as pd
import pytest

from spatialbench import report
from spatialbench.harness import BenchmarkCase, RunConfiguration, run
from spatialbench.tests.fixtures.operations import CountingOperation


@pytest.fixture
def summaries():
    cases = [
        BenchmarkCase('ok', CountingOperation()),
        BenchmarkCase('broken', CountingOperation(fail_on=1)),
        BenchmarkCase('different', CountingOperation(value=2)),
    ]
    with pytest.warns(UserWarning):
        return run(cases, RunConfiguration(iterations=3, check_equivalence=True))


def test_to_frame_one_row_per_case(summaries):
    df = report.to_frame(summaries)
    assert list(df['label']) == ['ok', 'broken', 'different']
    assert list(df.columns) == report.COLUMNS
    assert list(df['succeeded']) == [3, 0, 3]
    assert list(df['status']) == ['ok', 'failed', 'equivalence-failed']
    # absent statistics are NaN, never zero
    assert math.isnan(df.loc[1, 'mean_s'])
    assert df.loc[0, 'mean_s'] >= 0.0
    assert df.loc[1, 'failure'].startswith('RuntimeError')


def test_timings_frame_long_form(summaries):
    df = report.timings_frame(summaries)
    assert len(df) == 6
    assert set(df['label']) == {'ok', 'different'}
    assert list(df.loc[df['label'] == 'ok', 'iteration']) == [0, 1, 2]
    assert df['memory_delta_bytes'].isna().all()


def test_markdown_marks_missing_values(summaries):
    text = report.to_markdown(summaries, title='demo')
    lines = text.splitlines()
    assert lines[0] == '# demo'
    broken = next(line for line in lines if line.startswith('| broken'))
    assert '| 0/3 | - | - | - | - |' in broken
    assert '- broken: RuntimeError: boom on call 1' in text
    assert "- different: 'different': result differs from baseline 'ok'" in text


def test_write_csv_roundtrip(summaries, tmp_path):
    path = report.write_csv(summaries, tmp_path / 'out' / 'results.csv')
    df = pd.read_csv(path)
    assert list(df['label']) == ['ok', 'broken', 'different']
    assert df['mean_s'].isna().tolist() == [False, True, False]


def test_write_markdown(summaries, tmp_path):
    path = report.write_markdown(summaries, tmp_path / 'results.md', title='demo')
    assert path.read_text().startswith('# demo')


def test_boxplot_writes_png(summaries, tmp_path):
    path = tmp_path / 'box.png'
    ax = report.boxplot(summaries, path=path, title='demo')
    assert path.exists() and path.stat().st_size > 0
    assert [t.get_text() for t in ax.get_xticklabels()] == ['ok', 'broken', 'different']
