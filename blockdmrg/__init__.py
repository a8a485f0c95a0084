""" Block DMRG for the spin-1/2 Heisenberg chain. """

from blockdmrg.block import Block
from blockdmrg.config import DMRGConfig
from blockdmrg.exceptions import DMRGError
from blockdmrg.finite_dmrg import DMRGResult, run
from blockdmrg.infinite_dmrg import StepResult
from blockdmrg.operators import Coupling
from blockdmrg.storage import GROWTH, MemoryBlockStore, NpzBlockStore

__version__ = '0.1.0'
