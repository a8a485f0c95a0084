""" Infinite DMRG algorithm for the 1D Heisenberg model.

A single reflection-symmetric block is grown one site at a time. Each
iteration pairs the block with its reflection, finds the superblock ground
state, truncates the block to the leading eigenvectors of the reduced
density matrix and adds a site. Every enlarged block is stored so that the
finite-system sweeps can use it as an environment later.
"""

import enum
import logging
import sys
from typing import NamedTuple

from blockdmrg.block import Block
from blockdmrg.config import DMRGConfig
from blockdmrg.exceptions import DMRGError
from blockdmrg.storage import GROWTH, BlockStore, MemoryBlockStore
from blockdmrg.superblock import solve_superblock
from blockdmrg.truncation import Truncation, reduced_density_matrix, truncate

logger = logging.getLogger(__name__)


class GrowthState(enum.Enum):
    GROWING_UNTRUNCATED = 'untruncated'
    GROWING_TRUNCATED_TRANSITION = 'transition'
    GROWING_TRUNCATED_STEADY = 'truncated'
    DONE = 'done'


class StepResult(NamedTuple):
    """ Diagnostics of one growth or sweep step. """
    phase: str
    left_sites: int
    right_sites: int
    energy: float
    energy_per_site: float
    truncation_error: float
    kept_states: int

    @property
    def num_sites(self):
        return self.left_sites + self.right_sites


def next_growth_state(state: GrowthState, block: Block, config: DMRGConfig) -> GrowthState:
    """ State of the growth step about to run on `block`. """
    if block.sites > config.num_sites // 2:
        return GrowthState.DONE
    if block.dim <= config.states:
        return GrowthState.GROWING_UNTRUNCATED
    if state is GrowthState.GROWING_UNTRUNCATED:
        return GrowthState.GROWING_TRUNCATED_TRANSITION
    return GrowthState.GROWING_TRUNCATED_STEADY


def dmrg_step(blockL: Block, blockR: Block, config: DMRGConfig):
    """ Solve the superblock, truncate the system block and add a site to it.

    Returns the ground state energy, the Truncation and the enlarged system
    block of the next step.
    """
    E0, psi = solve_superblock(blockL, blockR, config.coupling,
                               config.dense_threshold, config.lanczos_tol)
    rho = reduced_density_matrix(psi)
    trunc: Truncation = truncate(rho, config.states)
    block = blockL.transform(trunc.operator)
    if block.dim != trunc.keep:
        raise DMRGError(f'Transformed block has dimension {block.dim}, kept {trunc.keep} states')
    return E0, trunc, block.enlarge(config.coupling)


def print_results(step: StepResult, out=None):
    """ Write the diagnostic line of a step. """
    out = sys.stdout if out is None else out
    if step.phase == 'growth':
        n = step.num_sites
        print(f'{n} {1.0 / n:.10f} {step.energy_per_site:.12f}', file=out)
    else:
        print(f'{step.left_sites} {step.right_sites} {step.energy_per_site:.12f}', file=out)
    logger.info('%s %d+%d sites: E = %.12f, truncation error = %.5e, states kept = %d',
                step.phase, step.left_sites, step.right_sites, step.energy,
                step.truncation_error, step.kept_states)


def infinite_dmrg(config: DMRGConfig, store: BlockStore = None, out=None):
    """ Perform infinite DMRG up to a chain of config.num_sites sites.

    Returns the last enlarged block and the list of StepResult.
    """
    config.validate()
    store = MemoryBlockStore() if store is None else store
    block = Block.single_site(config.coupling)
    store.write(block, block.sites, GROWTH)

    steps = []
    state = GrowthState.GROWING_UNTRUNCATED
    while True:
        new_state = next_growth_state(state, block, config)
        if new_state is not state:
            logger.info('Growth: %s -> %s at %d sites', state.value, new_state.value, block.sites)
        state = new_state
        if state is GrowthState.DONE:
            break

        sites = block.sites
        try:
            E0, trunc, block = dmrg_step(block, block, config)
        except DMRGError as exc:
            raise DMRGError(f'Growth step with {2 * sites} sites: {exc}') from exc
        step = StepResult('growth', sites, sites, E0, E0 / (2 * sites),
                          trunc.truncation_error, trunc.keep)
        print_results(step, out)
        steps.append(step)
        store.write(block, block.sites, GROWTH)

    logger.info('End of growth, block of %d sites', block.sites)
    return block, steps
