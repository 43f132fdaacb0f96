import numpy as np
import pytest

from ghd import CouplingOrder, Couplings, LiebLinigerModel, PhaseSpaceGrid
from ghd.core import CHEMICAL_POTENTIAL, INTERACTION


def test_constant_couplings_are_homogeneous():
    couplings = Couplings.from_constants(mu=2.0, c=1.0)
    assert couplings.is_homogeneous
    assert couplings.has(CouplingOrder.VALUE, INTERACTION)
    assert not couplings.has(CouplingOrder.TIME_DERIVATIVE, INTERACTION)
    value = couplings.evaluate(CouplingOrder.VALUE, CHEMICAL_POTENTIAL, 0.0, np.zeros(3))
    assert float(value) == 2.0


def test_absent_entry():
    couplings = Couplings.from_constants()
    assert couplings.get(CouplingOrder.SPACE_DERIVATIVE, INTERACTION) is None
    assert couplings.evaluate(CouplingOrder.SPACE_DERIVATIVE, INTERACTION, 0.0, 0.0) is None
    with pytest.raises(KeyError):
        couplings.require(CouplingOrder.SPACE_DERIVATIVE, INTERACTION)


def test_space_derivative_makes_inhomogeneous():
    couplings = Couplings.from_constants().replace_entries(dmu_dx=lambda t, x: -x)
    assert not couplings.is_homogeneous
    assert Couplings.from_constants().is_homogeneous


def test_invalid_entries():
    with pytest.raises(ValueError):
        Couplings({(CouplingOrder.VALUE, 3): lambda t, x: 1.0})
    with pytest.raises(TypeError):
        Couplings({(CouplingOrder.VALUE, 1): 1.0})
    with pytest.raises(ValueError):
        Couplings.from_constants().replace_entries(gravity=lambda t, x: 1.0)


def test_model_coupling_replacement(grid):
    model = LiebLinigerModel(grid, Couplings.from_constants(mu=1.0, c=2.0))
    assert model.is_homogeneous
    assert np.allclose(model.interaction(0.0), 2.0)

    model.set_couplings(model.couplings.replace_entries(c=lambda t, x: 1.0 + x**2))
    assert np.allclose(model.interaction(0.0), 1.0 + grid.x_grid**2)
    with pytest.raises(TypeError):
        model.set_couplings({"c": 1.0})


def test_lieb_liniger_coupling_derivatives(grid):
    model = LiebLinigerModel(grid, Couplings.from_constants(mu=1.0, c=2.0))
    assert np.all(model.energy_coupling_deriv(CHEMICAL_POTENTIAL, 0.0).data == -1.0)
    assert np.all(model.energy_coupling_deriv(INTERACTION, 0.0).data == 0.0)
    assert np.all(model.momentum_coupling_deriv(INTERACTION, 0.0).data == 0.0)
    assert np.all(model.scattering_coupling_deriv(CHEMICAL_POTENTIAL, 0.0).data == 0.0)

    dT = model.scattering_coupling_deriv(INTERACTION, 0.0).data[:, :, 0, 0, 0]
    diff = grid.rapid_grid[:, None] - grid.rapid_grid[None, :]
    assert np.allclose(dT, 2.0 * diff / (diff**2 + 4.0))


def test_coupling_shape_mismatch(grid):
    couplings = Couplings.from_functions(c=lambda t, x: np.ones(grid.n_x + 1))
    model = LiebLinigerModel(grid, couplings)
    with pytest.raises(ValueError):
        model.interaction(0.0)


def test_multi_species_grid_is_rejected():
    grid = PhaseSpaceGrid.uniform(-1.0, 1.0, 3, -1.0, 1.0, 4, n_types=2)
    with pytest.raises(ValueError):
        LiebLinigerModel(grid, Couplings.from_constants())
