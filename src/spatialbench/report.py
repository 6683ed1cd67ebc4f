"""Tabular and plotted views of harness results.

Everything here consumes `ResultSummary` objects after a run; nothing feeds
back into the harness. Absent statistics stay NaN/None in the tables so a
failed case can never be mistaken for a zero-duration one.
"""
import logging
import math
from pathlib import Path
from typing import Iterable, Optional, Sequence

import pandas as pd

from spatialbench.harness import ResultSummary

logger = logging.getLogger(__name__)

COLUMNS = ['label', 'iterations', 'succeeded', 'min_s', 'median_s', 'mean_s', 'max_s',
           'memory_delta_bytes', 'verdict', 'status', 'failure', 'warning']


def to_frame(summaries: Iterable[ResultSummary]) -> pd.DataFrame:
    """One row per case, in run order."""
    rows = [s.as_row() for s in summaries]
    df = pd.DataFrame(rows, columns=COLUMNS)
    for col in ('min_s', 'median_s', 'mean_s', 'max_s', 'memory_delta_bytes'):
        df[col] = pd.to_numeric(df[col], errors='coerce')
    return df


def timings_frame(summaries: Iterable[ResultSummary]) -> pd.DataFrame:
    """Long-form table of every successful iteration, for plotting."""
    rows = []
    for s in summaries:
        for i, m in enumerate(s.measurements):
            rows.append((s.label, i, m.elapsed, m.memory_delta))
    df = pd.DataFrame(rows, columns=['label', 'iteration', 'elapsed_s', 'memory_delta_bytes'])
    df['memory_delta_bytes'] = pd.to_numeric(df['memory_delta_bytes'], errors='coerce')
    return df


def _fmt(value, fmt='.6f') -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return '-'
    return format(value, fmt)


def to_markdown(summaries: Sequence[ResultSummary], title: Optional[str] = None) -> str:
    lines = []
    if title:
        lines.append(f'# {title}')
        lines.append('')
    lines.append('| case | n | min_s | median_s | mean_s | max_s | mem_bytes | verdict | status |')
    lines.append('|---|---:|---:|---:|---:|---:|---:|---|---|')
    for s in summaries:
        lines.append(
            f'| {s.label} | {s.succeeded}/{s.iterations} | {_fmt(s.min)} | {_fmt(s.median)} | '
            f'{_fmt(s.mean)} | {_fmt(s.max)} | {_fmt(s.memory_delta, ".0f")} | '
            f'{s.verdict.value} | {s.status} |'
        )
    notes = [(s.label, s.failure_reason or s.warning) for s in summaries if s.failure_reason or s.warning]
    if notes:
        lines.append('')
        for label, note in notes:
            lines.append(f'- {label}: {note}')
    return '\n'.join(lines) + '\n'


def write_csv(summaries: Iterable[ResultSummary], path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    to_frame(summaries).to_csv(path, index=False)
    logger.info('wrote %s', path)
    return path


def write_markdown(summaries: Sequence[ResultSummary], path, title: Optional[str] = None) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w') as fh:
        fh.write(to_markdown(summaries, title))
    logger.info('wrote %s', path)
    return path


def boxplot(summaries: Sequence[ResultSummary], ax=None, path=None, title: Optional[str] = None):
    """Box plot of elapsed-time distributions per case.

    Cases without successful iterations get an empty slot so the x axis still
    lists every case. Returns the axes; saves to ``path`` when given.
    """
    import matplotlib.pyplot as plt

    own_fig = ax is None
    if own_fig:
        fig, ax = plt.subplots(figsize=(max(4, 1.2 * len(summaries)), 4), dpi=150)
    else:
        fig = ax.figure

    data = [list(s.elapsed) if s.measurements else [float('nan')] for s in summaries]
    ax.boxplot(data)
    ax.set_xticks(range(1, len(summaries) + 1))
    ax.set_xticklabels([s.label for s in summaries], rotation=30, ha='right')
    ax.set_ylabel('elapsed (s)')
    if title:
        ax.set_title(title)
    fig.tight_layout()

    if path is not None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path)
        logger.info('wrote %s', path)
        if own_fig:
            plt.close(fig)
    return ax
