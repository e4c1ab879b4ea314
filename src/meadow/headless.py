"""
Run the meadow model without a display.

usage:
    meadow-run                              # defaults: 100x100, 100 rabbits, 600 ticks
    meadow-run --ticks 2000 --seed 7 --csv run.csv
    meadow-run --set RABBIT_EAT_INTERVAL=0.2 --ground-update raster --verbose
"""
import argparse
import logging
import sys

from meadow.config import GROUND_UPDATE_MODES
from meadow.metrics import RunHistory
from meadow.simulation import Simulation
from meadow.utils import configure_logging, parse_assignments

log = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description='Headless ground/rabbit simulation')
    parser.add_argument('--ticks', type=int, default=600, help='Number of ticks to run')
    parser.add_argument('--dt', type=float, default=1.0 / 60.0, help='Seconds per tick')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--width', type=int, default=None, help='Grid width (cells)')
    parser.add_argument('--height', type=int, default=None, help='Grid height (cells)')
    parser.add_argument('--rabbits', type=int, default=None, help='Initial number of rabbits')
    parser.add_argument('--ground-update', dest='ground_update', choices=GROUND_UPDATE_MODES,
                        default=None, help='Ground update semantics')
    parser.add_argument('--set', dest='overrides', action='append', default=[],
                        metavar='NAME=VALUE', help='Override a parameter (repeatable)')
    parser.add_argument('--log-every', dest='log_every', type=int, default=60,
                        help='Log a summary every N ticks (0 disables)')
    parser.add_argument('--csv', default=None, help='Write per-tick statistics to this CSV file')
    parser.add_argument('--stop-when-extinct', dest='stop_when_extinct', action='store_true',
                        help='Stop as soon as no rabbits remain')
    parser.add_argument('--verbose', dest='verbose', action='store_true', help='Enable debug logging')
    return parser


def collect_params(args):
    params = parse_assignments(args.overrides)
    if args.width is not None:
        params['WIDTH'] = args.width
    if args.height is not None:
        params['HEIGHT'] = args.height
    if args.rabbits is not None:
        params['INIT_NUM_RABBITS'] = args.rabbits
    if args.ground_update is not None:
        params['GROUND_UPDATE'] = args.ground_update
    return params


def run(args) -> RunHistory:
    sim = Simulation(seed=args.seed)
    sim.configure(collect_params(args))
    sim.setup()

    history = RunHistory()
    history.record(sim)
    for _ in range(args.ticks):
        report = sim.step(args.dt)
        row = history.record(sim, report)
        if args.log_every and sim.tick % args.log_every == 0:
            log.info('tick %d t=%.2fs rabbits=%d mean_life=%.3f ground_mean=%.3f',
                     row['tick'], row['elapsed'], row['rabbits'],
                     row['mean_rabbit_life'], row['ground_mean'])
        if args.stop_when_extinct and not row['rabbits']:
            break

    if args.csv:
        history.to_csv(args.csv)
        log.info('wrote %d rows to %s', len(history), args.csv)
    return history


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    if args.ticks < 0:
        parser.error('--ticks must be non-negative')
    if args.dt < 0:
        parser.error('--dt must be non-negative')
    try:
        run(args)
    except ValueError as e:  # includes ConfigurationError
        log.error('%s', e)
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
