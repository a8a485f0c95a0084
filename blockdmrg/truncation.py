""" Reduced density matrix and the truncation of a block basis. """

import logging
from typing import NamedTuple

import numpy as np

from blockdmrg.exceptions import DMRGError
from blockdmrg.tridiagonal import householder_tridiagonalize, tridiagonal_eigh

logger = logging.getLogger(__name__)


class Truncation(NamedTuple):
    """ Outcome of a density-matrix truncation.

    Attributes:
        operator:          keep x dim matrix, rows are the kept eigenvectors.
        eigenvalues:       All eigenvalues of the density matrix, from large to small.
        truncation_error:  Discarded weight, 1 - sum of the kept eigenvalues.
    """
    operator: np.ndarray
    eigenvalues: np.ndarray
    truncation_error: float

    @property
    def keep(self):
        return self.operator.shape[0]


def reduced_density_matrix(psi: np.ndarray):
    """ Trace the environment out of a system x environment wavefunction. """
    if psi.ndim != 2:
        raise DMRGError(f'Wavefunction must be a dS x dE matrix, got shape {psi.shape}')
    rho = psi @ psi.T
    return (rho + rho.T) / 2


def diagonalize_sort(matrix, sort=1):
    """ Diagonalize a symmetric matrix through its tridiagonal form and sort.
    Args:
        matrix: The matrix to be diagonalized.
        sort: The order of the eigenvalues and eigenvectors.
            1: from small to large
           -1: from large to small
    """
    D, V = tridiagonal_eigh(householder_tridiagonalize(matrix))
    indices = np.argsort(sort * D, kind='stable')
    return D[indices], V[:, indices]


def truncate(rho, keep) -> Truncation:
    """ Keep the `keep` highest-weight eigenvectors of a density matrix.

    If the matrix is no larger than `keep` every eigenvector is kept and the
    result is an exact change of basis.
    """
    if keep < 1:
        raise DMRGError(f'Number of states kept must be positive, got {keep}')
    D, V = diagonalize_sort(rho, sort=-1)
    keep = int(min(np.size(D), keep))
    O = V[:, :keep].T
    error = max(0.0, 1.0 - float(np.sum(D[:keep])))
    logger.debug('Kept %d of %d states, truncation error %.3e', keep, np.size(D), error)
    return Truncation(O, D, error)
