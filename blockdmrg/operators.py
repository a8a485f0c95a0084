""" Single-site spin-1/2 operators and the nearest-neighbour exchange model. """

from dataclasses import dataclass
from functools import reduce

import numpy as np
from numpy import kron

I = np.eye(2)
Sz = np.array([[0.5, 0], [0, -0.5]])
Sp = np.array([[0, 1.0], [0, 0]])
Sm = np.array([[0, 0], [1.0, 0]])

Exact_E = -0.4431471805599453  # -log(2) + 0.25, infinite chain energy per site


@dataclass(frozen=True)
class Coupling:
    """ Parameters of H = sum Jz Sz Sz + J/2 (S+ S- + S- S+) - h sum Sz. """
    J: float = 1.0
    Jz: float = 1.0
    h: float = 0.0

    def bond(self, leftSz, leftSp, leftSm, rightSz, rightSp, rightSm):
        """ Exchange term between the edge operators of two neighbouring parts. """
        return (self.J / 2 * (kron(leftSp, rightSm) + kron(leftSm, rightSp)) +
                self.Jz * kron(leftSz, rightSz))


def two_site_hamiltonian(coupling: Coupling = Coupling()):
    """ The 4x4 Hamiltonian of two coupled sites. """
    H = coupling.bond(Sz, Sp, Sm, Sz, Sp, Sm)
    H -= coupling.h * (kron(Sz, I) + kron(I, Sz))
    return H


def site_operator(op, site, L):
    """ Embed a single-site operator at `site` of an L-site chain. """
    return reduce(kron, [op if j == site else I for j in range(L)])


def chain_hamiltonian(L, coupling: Coupling = Coupling()):
    """ Full 2**L x 2**L Hamiltonian of an open chain, for exact diagonalization. """
    dim = 2 ** L
    H = np.zeros((dim, dim))
    for i in range(L):
        H -= coupling.h * site_operator(Sz, i, L)
    for i in range(L - 1):
        H += coupling.Jz * site_operator(Sz, i, L) @ site_operator(Sz, i + 1, L)
        H += coupling.J / 2 * (site_operator(Sp, i, L) @ site_operator(Sm, i + 1, L) +
                               site_operator(Sm, i, L) @ site_operator(Sp, i + 1, L))
    return H
