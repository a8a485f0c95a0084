"""Tests for the finite-system sweeps."""

import io

import numpy as np
import pytest

import blockdmrg.infinite_dmrg as infinite
from blockdmrg.config import DMRGConfig
from blockdmrg.exceptions import DMRGError
from blockdmrg.finite_dmrg import (DMRGResult, SweepState, finite_dmrg, run, sweep_state,
                                   turnaround_margin)
from blockdmrg.storage import MemoryBlockStore, NpzBlockStore


@pytest.mark.parametrize("states, margin", [(1, 3), (2, 3), (4, 3), (5, 4), (8, 4), (20, 6)])
def test_turnaround_margin(states, margin):
    assert turnaround_margin(states) == margin


def test_sweep_states_alternate():
    assert [sweep_state(k, 3) for k in range(4)] == [SweepState.SWEEP_FORWARD,
                                                     SweepState.SWEEP_BACKWARD,
                                                     SweepState.SWEEP_FORWARD,
                                                     SweepState.SWEEP_DONE]
    assert sweep_state(0, 0) is SweepState.SWEEP_DONE


def test_sweep_does_not_raise_energy(small_config):
    result = run(small_config, out=io.StringIO())
    growth_final = result.growth[-1]
    assert growth_final.num_sites == 16
    # the first sweep step repeats the last growth step
    assert result.sweeps[0].energy == pytest.approx(growth_final.energy, abs=1e-8)
    assert result.energy <= growth_final.energy + 1e-8
    assert result.energy_per_site <= growth_final.energy_per_site + 1e-9


def test_sweep_steps_cover_chain(small_config):
    store = MemoryBlockStore()
    config = DMRGConfig(states=8, num_sites=16, num_sweeps=3)
    result = run(config, store, out=io.StringIO())
    assert isinstance(result, DMRGResult)
    assert all(s.num_sites == 16 for s in result.sweeps)
    assert all(s.kept_states == 8 for s in result.sweeps)

    phases = [s.phase for s in result.sweeps]
    # sweep 0 from the middle, later sweeps from the turnaround margin
    assert phases == ['forward'] * 5 + ['backward'] * 9 + ['forward'] * 9
    assert [s.left_sites for s in result.sweeps[:5]] == [8, 9, 10, 11, 12]
    assert [s.right_sites for s in result.sweeps[5:14]] == list(range(4, 13))

    assert [sites for sites in range(9, 14) if (sites, 0) in store] == list(range(9, 14))
    assert all((sites, 2) in store for sites in range(5, 14))
    centre = result.sweeps[18]
    assert (centre.left_sites, centre.right_sites) == (8, 8)
    assert result.energy == centre.energy


def test_sweeps_converge(exact_energy):
    config = DMRGConfig(states=8, num_sites=12, num_sweeps=4)
    result = run(config, out=io.StringIO())
    assert result.energy <= result.growth[-1].energy + 1e-8
    assert result.energy >= exact_energy(12) - 1e-9
    assert result.energy == pytest.approx(exact_energy(12), abs=2e-3)


def test_no_sweeps_reports_growth():
    result = run(DMRGConfig(states=8, num_sites=12, num_sweeps=0), out=io.StringIO())
    assert result.sweeps == []
    assert result.energy == result.growth[-1].energy
    assert result.energy_per_site == pytest.approx(result.energy / 12)


def test_chain_too_short_to_sweep():
    config = DMRGConfig(states=20, num_sites=8, num_sweeps=2)
    result = run(config, out=io.StringIO())
    assert result.sweeps == []


def test_sweep_lines(small_config):
    out = io.StringIO()
    run(small_config, out=out)
    lines = out.getvalue().splitlines()
    assert len(lines) == 8 + 5
    left, right, energy = lines[-1].split()
    assert (int(left), int(right)) == (12, 4)
    assert float(energy) < -0.41


def test_missing_snapshot_is_fatal():
    config = DMRGConfig(states=4, num_sites=12, num_sweeps=1)
    with pytest.raises(DMRGError, match='No block of 6 sites'):
        finite_dmrg(config, MemoryBlockStore(), out=io.StringIO())


def test_solver_failure_has_context(monkeypatch, small_config):
    store = MemoryBlockStore()
    infinite.infinite_dmrg(small_config, store, out=io.StringIO())

    def fail(*args, **kwargs):
        raise DMRGError('Lanczos failed')

    monkeypatch.setattr(infinite, 'solve_superblock', fail)
    with pytest.raises(DMRGError, match='Sweep 0 with 8 \\+ 8 sites'):
        finite_dmrg(small_config, store, out=io.StringIO())


def test_npz_store_matches_memory(tmp_path, small_config):
    in_memory = run(small_config, out=io.StringIO())
    on_disk = run(small_config, NpzBlockStore(str(tmp_path)), out=io.StringIO())
    np.testing.assert_allclose([s.energy for s in on_disk.sweeps],
                               [s.energy for s in in_memory.sweeps], atol=1e-10)
    assert (tmp_path / 'block_growth_9.npz').exists()
    assert (tmp_path / 'block_sweep0_13.npz').exists()


@pytest.mark.parametrize("states", [3, 4, 6])
@pytest.mark.parametrize("num_sites", [8, 12, 16])
@pytest.mark.parametrize("num_sweeps", [1, 2])
def test_reported_energy_not_above_growth(states, num_sites, num_sweeps):
    config = DMRGConfig(states=states, num_sites=num_sites, num_sweeps=num_sweeps)
    result = run(config, out=io.StringIO())
    assert result.energy_per_site <= result.growth[-1].energy_per_site + 1e-9


def test_small_budget_keeps_three_site_environments():
    result = run(DMRGConfig(states=1, num_sites=4, num_sweeps=1), out=io.StringIO())
    assert result.sweeps == []
    assert result.energy == result.growth[-1].energy

    result = run(DMRGConfig(states=1, num_sites=8, num_sweeps=2), out=io.StringIO())
    assert result.sweeps
    assert min(min(s.left_sites, s.right_sites) for s in result.sweeps) == 3
    assert all(s.num_sites == 8 for s in result.sweeps)
