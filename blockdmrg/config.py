""" Run parameters. """

from dataclasses import dataclass, field

from blockdmrg.exceptions import DMRGError
from blockdmrg.operators import Coupling
from blockdmrg.superblock import DENSE_THRESHOLD


@dataclass
class DMRGConfig:
    """ Configuration for a DMRG run.

    Attributes:
        states:           Number of states kept per block (m).
        num_sites:        Total length of the chain, even and at least 4.
        num_sweeps:       Number of finite-system sweeps after the growth phase.
        coupling:         Model parameters.
        dense_threshold:  Largest superblock dimension diagonalized densely.
        lanczos_tol:      Relative accuracy requested from Lanczos, 0 for machine precision.
    """

    states: int = 20
    num_sites: int = 40
    num_sweeps: int = 0
    coupling: Coupling = field(default_factory=Coupling)
    dense_threshold: int = DENSE_THRESHOLD
    lanczos_tol: float = 0.0

    def validate(self):
        if self.states < 1:
            raise DMRGError(f'Number of states to keep must be positive, got {self.states}')
        if self.num_sites < 4 or self.num_sites % 2:
            raise DMRGError(f'System size must be an even number >= 4, got {self.num_sites}')
        if self.num_sweeps < 0:
            raise DMRGError(f'Number of sweeps must not be negative, got {self.num_sweeps}')
        return self
