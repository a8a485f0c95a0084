""" Finite DMRG sweeps on the blocks stored by the infinite DMRG.

The system block grows from the middle of the chain while the environment
shrinks, read back from the snapshots of the previous half sweep (or of the
growth phase). When the environment reaches the turnaround margin the roles
of the two ends swap and the next sweep starts from the small block.
"""

import enum
import logging
from typing import List, NamedTuple

from blockdmrg.config import DMRGConfig
from blockdmrg.exceptions import DMRGError
from blockdmrg.infinite_dmrg import StepResult, dmrg_step, infinite_dmrg, print_results
from blockdmrg.storage import BlockStore, MemoryBlockStore

logger = logging.getLogger(__name__)


class SweepState(enum.Enum):
    SWEEP_FORWARD = 'forward'
    SWEEP_BACKWARD = 'backward'
    SWEEP_DONE = 'done'


class DMRGResult(NamedTuple):
    """ Result of a DMRG run.

    Attributes:
        energy:           Ground state energy of the full chain at the L/2 | L/2 step
                          of the last sweep (last growth step without sweeps).
        energy_per_site:  energy / num_sites.
        growth:           StepResult of every infinite DMRG iteration.
        sweeps:           StepResult of every finite DMRG step.
    """
    energy: float
    energy_per_site: float
    growth: List[StepResult]
    sweeps: List[StepResult]


def turnaround_margin(states):
    """ Smallest block size, at least 3, whose untruncated basis has at least 2 * states states. """
    n = 3
    while 2 ** n < 2 * states:
        n += 1
    return n


def sweep_state(iteration, num_sweeps) -> SweepState:
    if iteration >= num_sweeps:
        return SweepState.SWEEP_DONE
    return SweepState.SWEEP_FORWARD if iteration % 2 == 0 else SweepState.SWEEP_BACKWARD


def finite_dmrg(config: DMRGConfig, store: BlockStore, out=None):
    """ Perform config.num_sweeps finite DMRG sweeps. Returns the list of StepResult. """
    config.validate()
    L = config.num_sites
    margin = turnaround_margin(config.states)
    steps = []
    if config.num_sweeps and margin > L // 2:
        logger.warning('Chain of %d sites is too short to sweep with %d states', L, config.states)
        return steps

    sites = L // 2
    iteration = 0
    state = sweep_state(iteration, config.num_sweeps)
    while state is not SweepState.SWEEP_DONE:
        logger.info('Sweep %d (%s) from %d sites', iteration, state.value, sites)
        blockS = store.latest(sites, before=iteration)

        while sites <= L - margin:
            Esites = L - sites
            blockE = store.latest(Esites, before=iteration)
            try:
                E0, trunc, blockS = dmrg_step(blockS, blockE, config)
            except DMRGError as exc:
                raise DMRGError(f'Sweep {iteration} with {sites} + {Esites} sites: {exc}') from exc

            if state is SweepState.SWEEP_FORWARD:
                left, right = sites, Esites
            else:
                left, right = Esites, sites
            step = StepResult(state.value, left, right, E0, E0 / L,
                              trunc.truncation_error, trunc.keep)
            print_results(step, out)
            steps.append(step)

            sites += 1
            store.write(blockS, sites, iteration)

        sites = margin
        iteration += 1
        state = sweep_state(iteration, config.num_sweeps)

    return steps


def run(config: DMRGConfig, store: BlockStore = None, out=None) -> DMRGResult:
    """ Infinite DMRG up to config.num_sites sites followed by the finite sweeps. """
    config.validate()
    store = MemoryBlockStore() if store is None else store
    _, growth = infinite_dmrg(config, store, out)
    sweeps = finite_dmrg(config, store, out)

    # the symmetric L/2 | L/2 step of the last sweep, or the last growth step
    centre = [s for s in sweeps if s.left_sites == s.right_sites]
    E0 = centre[-1].energy if centre else growth[-1].energy
    return DMRGResult(E0, E0 / config.num_sites, growth, sweeps)
