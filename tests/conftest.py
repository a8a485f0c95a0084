"""Shared fixtures for the blockdmrg test suite."""

import numpy as np
import pytest

from blockdmrg.config import DMRGConfig
from blockdmrg.operators import Coupling, chain_hamiltonian


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def random_symmetric(rng):
    def make(n):
        a = rng.standard_normal((n, n))
        return (a + a.T) / 2
    return make


@pytest.fixture
def exact_energy():
    """Lowest eigenvalue of the open chain by exact diagonalization."""
    def energy(L, coupling=Coupling()):
        return np.linalg.eigvalsh(chain_hamiltonian(L, coupling))[0]
    return energy


@pytest.fixture
def small_config():
    return DMRGConfig(states=8, num_sites=16, num_sweeps=1)
