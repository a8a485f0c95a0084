""" Renormalized half-chain block. """

import numpy as np
from numpy import kron

from blockdmrg.exceptions import DMRGError
from blockdmrg.operators import I, Sm, Sp, Sz, Coupling


class Block:
    """ A half-chain of `sites` sites in a basis of dimension `dim`.

    Holds the block Hamiltonian H and the Sz, S+, S- operators of the edge
    site, all `dim x dim`. Blocks are never mutated: enlarging or changing
    basis returns a new block, so all operators change dimension together.
    """

    def __init__(self, blockH, blockSz, blockSp, blockSm, sites=1):
        self.H = np.asarray(blockH, dtype=float)
        self.Sz = np.asarray(blockSz, dtype=float)
        self.Sp = np.asarray(blockSp, dtype=float)
        self.Sm = np.asarray(blockSm, dtype=float)
        self.sites = int(sites)
        self.check()

    @classmethod
    def single_site(cls, coupling: Coupling = Coupling()):
        return cls(blockH=-coupling.h * Sz, blockSz=Sz, blockSp=Sp, blockSm=Sm, sites=1)

    @property
    def dim(self):
        return self.H.shape[0]

    def operators(self):
        return {'H': self.H, 'Sz': self.Sz, 'Sp': self.Sp, 'Sm': self.Sm}

    def identity(self):
        return np.eye(self.dim)

    def check(self):
        """ Raise if the stored operators disagree in shape. """
        if self.sites < 1:
            raise DMRGError(f'Block must hold at least one site, got {self.sites}')
        d = self.H.shape[0] if self.H.ndim == 2 else -1
        for name, op in self.operators().items():
            if op.shape != (d, d):
                raise DMRGError(f'Block of {self.sites} sites: {name} has shape {op.shape}, '
                                f'expected ({d}, {d})')

    def enlarge(self, coupling: Coupling = Coupling()):
        """ Add one fresh site at the edge of the block. """
        blockI = self.identity()
        H = kron(self.H, I) + coupling.bond(self.Sz, self.Sp, self.Sm, Sz, Sp, Sm)
        H -= coupling.h * kron(blockI, Sz)
        return Block(blockH=H,
                     blockSz=kron(blockI, Sz),
                     blockSp=kron(blockI, Sp),
                     blockSm=kron(blockI, Sm),
                     sites=self.sites + 1)

    def transform(self, O):
        """ Rotate every operator M into a new basis: O @ M @ O.T.

        Args:
            O: keep x dim matrix with orthonormal rows.
        """
        O = np.asarray(O, dtype=float)
        if O.ndim != 2 or O.shape[1] != self.dim:
            raise DMRGError(f'Block of {self.sites} sites has dimension {self.dim}, '
                            f'cannot transform with a matrix of shape {O.shape}')
        return Block(blockH=O @ self.H @ O.T,
                     blockSz=O @ self.Sz @ O.T,
                     blockSp=O @ self.Sp @ O.T,
                     blockSm=O @ self.Sm @ O.T,
                     sites=self.sites)

    def __repr__(self):
        return f'Block(sites={self.sites}, dim={self.dim})'
