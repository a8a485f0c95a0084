""" Superblock Hamiltonian and its ground state. """

import logging

import numpy as np
from numpy import kron
from scipy.sparse.linalg import ArpackError, ArpackNoConvergence, eigsh

from blockdmrg.block import Block
from blockdmrg.exceptions import DMRGError
from blockdmrg.operators import Coupling

logger = logging.getLogger(__name__)

DENSE_THRESHOLD = 256


def superblock_hamiltonian(blockL: Block, blockR: Block = None, coupling: Coupling = Coupling()):
    """ Construct the superblock Hamiltonian from the system and environment blocks.
        If the environment block is not provided, the superblock Hamiltonian will
        be constructed from the system block and its "reflection".
    """
    blockR = blockL if blockR is None else blockR

    superblockH = kron(blockL.H, blockR.identity()) + kron(blockL.identity(), blockR.H)
    superblockH += coupling.bond(blockL.Sz, blockL.Sp, blockL.Sm,
                                 blockR.Sz, blockR.Sp, blockR.Sm)
    return superblockH


def ground_state(matrix, dim, dense_threshold=DENSE_THRESHOLD, tol=0):
    """ Lowest eigenpair of a symmetric matrix.

    Small matrices are diagonalized densely, larger ones with Lanczos (ARPACK).
    Args:
        matrix: The symmetric superblock Hamiltonian.
        dim: Expected Hilbert space dimension.
        dense_threshold: Largest dimension handled by the dense solver.
        tol: Relative accuracy requested from ARPACK, 0 for machine precision.
    """
    if matrix.shape != (dim, dim):
        raise DMRGError(f'Superblock Hamiltonian has shape {matrix.shape}, expected ({dim}, {dim})')
    if dim <= dense_threshold:
        D, V = np.linalg.eigh(matrix)
        return float(D[0]), V[:, 0]
    try:
        (E0,), V = eigsh(matrix, k=1, which='SA', tol=tol)
    except (ArpackNoConvergence, ArpackError) as exc:
        raise DMRGError(f'Lanczos failed for a superblock of dimension {dim}: {exc}') from exc
    return float(E0), V[:, 0]


def solve_superblock(blockL: Block, blockR: Block = None, coupling: Coupling = Coupling(),
                     dense_threshold=DENSE_THRESHOLD, tol=0):
    """ Ground state energy and the wavefunction reshaped as a dS x dE matrix. """
    blockR = blockL if blockR is None else blockR
    superblockH = superblock_hamiltonian(blockL, blockR, coupling)
    dim = blockL.dim * blockR.dim
    E0, psi = ground_state(superblockH, dim, dense_threshold, tol)
    logger.debug('Superblock %d + %d sites, dimension %d, E0 = %.12f',
                  blockL.sites, blockR.sites, dim, E0)
    return E0, psi.reshape(blockL.dim, blockR.dim)
