""" Householder reduction of a real symmetric matrix to tridiagonal form.

The reduction works in place on a copy of the input, row by row from the
last to the first. On return the copy holds the accumulated orthogonal
transform Q, so that Q.T @ A @ Q is the tridiagonal matrix described by
the diagonal and off-diagonal vectors. The eigenvalue problem of the
tridiagonal matrix is then handed to scipy.
"""

from typing import NamedTuple, Optional

import numpy as np
from scipy.linalg import eigh_tridiagonal

from blockdmrg.exceptions import DMRGError


class TridiagonalForm(NamedTuple):
    """ Result of the Householder reduction.

    Attributes:
        diagonal:      The n diagonal elements.
        off_diagonal:  off_diagonal[i] couples rows i and i+1; the last entry is 0.
        transform:     The orthogonal matrix Q, or None if eigenvectors were not requested.
    """
    diagonal: np.ndarray
    off_diagonal: np.ndarray
    transform: Optional[np.ndarray]

    def matrix(self):
        """ The dense tridiagonal matrix. """
        e = self.off_diagonal[:-1]
        return np.diag(self.diagonal) + np.diag(e, 1) + np.diag(e, -1)


def householder_tridiagonalize(matrix, eigenvectors=True) -> TridiagonalForm:
    """ Reduce a real symmetric matrix to tridiagonal form.

    Args:
        matrix: The symmetric matrix. Only its lower triangle is read and it
            is not modified. Symmetry is the caller's responsibility.
        eigenvectors: Accumulate the orthogonal transform. Skip it if only
            eigenvalues are needed.
    """
    a = np.array(matrix, dtype=float)
    if a.ndim != 2 or a.shape[0] != a.shape[1] or a.shape[0] == 0:
        raise DMRGError(f'Cannot tridiagonalize a matrix of shape {a.shape}')
    n = a.shape[0]
    d = np.zeros(n)
    e = np.zeros(n)

    for i in range(n - 1, 0, -1):
        l = i - 1
        h = 0.0
        if l > 0:
            # scaling by the absolute row sum keeps h from over- or underflowing
            scale = np.sum(np.abs(a[i, :l + 1]))
            if scale == 0.0:
                e[i] = a[i, l]
            else:
                a[i, :l + 1] /= scale
                h = np.dot(a[i, :l + 1], a[i, :l + 1])
                f = a[i, l]
                g = np.sqrt(h)
                if f > 0.0:
                    g = -g
                e[i] = scale * g
                h -= f * g
                a[i, l] = f - g
                f = 0.0
                for j in range(l + 1):
                    a[j, i] = a[i, j] / h
                    g = (np.dot(a[j, :j + 1], a[i, :j + 1]) +
                         np.dot(a[j + 1:l + 1, j], a[i, j + 1:l + 1]))
                    e[j] = g / h
                    f += e[j] * a[i, j]
                hh = f / (h + h)
                for j in range(l + 1):
                    f = a[i, j]
                    e[j] = g = e[j] - hh * f
                    a[j, :j + 1] -= f * e[:j + 1] + g * a[i, :j + 1]
        else:
            e[i] = a[i, l]
        d[i] = h

    if eigenvectors:
        d[0] = 0.0
        e[0] = 0.0
        for i in range(n):
            if d[i]:
                g = a[i, :i] @ a[:i, :i]
                a[:i, :i] -= np.outer(a[:i, i], g)
            d[i] = a[i, i]
            a[i, i] = 1.0
            a[i, :i] = 0.0
            a[:i, i] = 0.0
        transform = a
    else:
        d = np.diag(a).copy()
        transform = None

    e[:-1] = e[1:]
    e[-1] = 0.0
    return TridiagonalForm(d, e, transform)


def tridiagonal_eigh(form: TridiagonalForm):
    """ Eigenvalues (ascending) and column eigenvectors of the original matrix. """
    if form.transform is None:
        raise DMRGError('Eigenvectors need the accumulated Householder transform')
    if len(form.diagonal) == 1:
        return form.diagonal.copy(), form.transform.copy()
    D, V = eigh_tridiagonal(form.diagonal, form.off_diagonal[:-1])
    return D, form.transform @ V
