""" Command line entry point: block DMRG for the Heisenberg chain. """

import argparse
import logging
import sys

from blockdmrg.config import DMRGConfig
from blockdmrg.exceptions import DMRGError
from blockdmrg.finite_dmrg import run
from blockdmrg.operators import Coupling, Exact_E
from blockdmrg.storage import NpzBlockStore


def prompt_int(prompt, stdin=None):
    """ Ask for an integer on the terminal. """
    stdin = sys.stdin if stdin is None else stdin
    print(prompt, end='', flush=True)
    line = stdin.readline()
    try:
        return int(line.strip())
    except ValueError:
        raise DMRGError(f'Expected an integer, got {line.strip()!r}') from None


def build_parser():
    parser = argparse.ArgumentParser(description='Block DMRG for the spin-1/2 Heisenberg chain')
    parser.add_argument('-m', '--states', type=int, help='number of states to keep')
    parser.add_argument('-L', '--sites', type=int, help='system size (even, >= 4)')
    parser.add_argument('-n', '--sweeps', type=int, help='number of finite system sweeps')
    parser.add_argument('--J', type=float, default=1.0, help='XY exchange')
    parser.add_argument('--Jz', type=float, default=1.0, help='Z exchange')
    parser.add_argument('--h', type=float, default=0.0, help='magnetic field along z')
    parser.add_argument('--store', metavar='DIR', help='write block snapshots to DIR as .npz files')
    parser.add_argument('-v', '--verbose', action='store_true', help='log truncation details')
    return parser


def main(argv=None, stdin=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(format='%(asctime)s %(message)s',
                        level=logging.INFO if args.verbose else logging.WARNING)
    try:
        states = args.states if args.states is not None else prompt_int('# states to keep: ', stdin)
        sites = args.sites if args.sites is not None else prompt_int('System size : ', stdin)
        sweeps = args.sweeps if args.sweeps is not None else prompt_int('FSA sweeps : ', stdin)
        config = DMRGConfig(states=states, num_sites=sites, num_sweeps=sweeps,
                            coupling=Coupling(J=args.J, Jz=args.Jz, h=args.h))
        store = NpzBlockStore(args.store) if args.store else None
        result = run(config, store)
    except DMRGError as exc:
        print(f'Error: {exc}', file=sys.stderr)
        return 1

    print(f'# Energy = {result.energy:.12f}, energy per site = {result.energy_per_site:.12f}')
    if config.coupling == Coupling():
        print(f'# Infinite chain energy per site = {Exact_E:.12f}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
