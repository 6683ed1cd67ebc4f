"""Command line entry point.

Usage:
    spatialbench raster-crop vector-buffer --iterations 10 --check-equivalence
    spatialbench --list

Options:
    SUITE: one or more suite names (default: all)
    --iterations: timed calls per case
    --size: raster width/height in cells
    --features: vector features per layer
    --seed: seed for the synthetic data
    --check-equivalence: compare every case against the first one
    --track-memory: record allocation deltas with tracemalloc
    --workdir: where synthetic datasets are written (default: a temp dir)
    --csv / --markdown / --plot: optional outputs; with several suites the
        suite name is appended to each file stem
"""
import argparse
import logging
import sys
import tempfile
from pathlib import Path

from spatialbench import harness, report
from spatialbench.config import DATASET_DEFAULTS, RUN_DEFAULTS, run_configuration
from spatialbench.suites import SUITES, SuiteContext, build_suite
from spatialbench.utils import configure_logging

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='spatialbench',
                                     description='Time competing raster/vector library calls.')
    parser.add_argument('suites', nargs='*', metavar='SUITE',
                        help=f'suites to run (default: all of {", ".join(SUITES)})')
    parser.add_argument('--list', action='store_true', help='list available suites and exit')
    parser.add_argument('--iterations', type=int, default=RUN_DEFAULTS['iterations'])
    parser.add_argument('--size', type=int, default=DATASET_DEFAULTS['raster_size'])
    parser.add_argument('--features', type=int, default=DATASET_DEFAULTS['n_features'])
    parser.add_argument('--seed', type=int, default=DATASET_DEFAULTS['seed'])
    parser.add_argument('--check-equivalence', action='store_true')
    parser.add_argument('--track-memory', action='store_true')
    parser.add_argument('--workdir', type=Path, default=None)
    parser.add_argument('--csv', type=Path, default=None)
    parser.add_argument('--markdown', type=Path, default=None)
    parser.add_argument('--plot', type=Path, default=None)
    parser.add_argument('--log-level', default='INFO')
    return parser


def _output_path(path: Path, suite: str, many: bool) -> Path:
    if not many:
        return path
    return path.with_name(f'{path.stem}_{suite}{path.suffix}')


def run_suites(names, ctx: SuiteContext, config, csv=None, markdown=None, plot=None):
    """Run each named suite and return ``{name: [ResultSummary, ...]}``."""
    results = {}
    many = len(names) > 1
    for name in names:
        suite = build_suite(name, ctx)
        log.info('suite %s: %s (%d cases)', name, suite.description, len(suite.cases))
        summaries = harness.run(suite.cases, config, equality=suite.equality)
        results[name] = summaries
        print(report.to_markdown(summaries, title=name))
        if csv is not None:
            report.write_csv(summaries, _output_path(csv, name, many))
        if markdown is not None:
            report.write_markdown(summaries, _output_path(markdown, name, many), title=name)
        if plot is not None:
            report.boxplot(summaries, path=_output_path(plot, name, many), title=name)
    return results


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        for name in SUITES:
            print(name)
        return 0

    names = args.suites or list(SUITES)
    unknown = [n for n in names if n not in SUITES]
    if unknown:
        parser.error(f'unknown suite(s): {", ".join(unknown)}')

    try:
        configure_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))

    try:
        config = run_configuration(iterations=args.iterations,
                                   check_equivalence=args.check_equivalence,
                                   track_memory=args.track_memory)
    except harness.InvalidConfiguration as e:
        parser.error(str(e))
    if args.size < 1 or args.features < 1:
        parser.error('--size and --features must be positive')

    with tempfile.TemporaryDirectory(prefix='spatialbench_') as tmp:
        workdir = args.workdir or Path(tmp)
        ctx = SuiteContext(workdir, raster_size=args.size, n_features=args.features, seed=args.seed)
        results = run_suites(names, ctx, config, csv=args.csv, markdown=args.markdown, plot=args.plot)

    if all(s.all_failed for summaries in results.values() for s in summaries):
        log.error('every case failed')
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
