import numpy as np
import pytest

from ghd import (
    Couplings,
    DivisionDegeneracyError,
    DressingSolver,
    EffectiveFieldComputer,
    LiebLinigerModel,
    PhaseSpaceField,
)
from ghd.core import INTERACTION


def test_free_velocity_is_bare_group_velocity(free_model, gaussian_theta, grid):
    v_eff, a_eff = EffectiveFieldComputer(free_model).effective_fields(gaussian_theta, 0.0)
    assert np.allclose(v_eff.data, 2.0 * grid.rapid_mesh())
    assert np.all(a_eff.data == 0.0)


def test_scenario_matches_brute_force(homogeneous_model, theta, grid):
    v_eff, _ = EffectiveFieldComputer(homogeneous_model).effective_fields(theta, 0.0)

    r = grid.rapid_grid
    diff = r[:, None] - r[None, :]
    K = (1.0 / np.pi) / (diff**2 + 1.0) * (grid.rapid_w * 0.3)[None, :]
    for ix in range(grid.n_x):
        X = np.eye(grid.n_r) - K
        de_dr = np.linalg.solve(X, 2.0 * r)
        dp_dr = np.linalg.solve(X, np.ones(grid.n_r))
        assert np.allclose(v_eff.data[:, 0, ix], de_dr / dp_dr, rtol=1e-12)


def test_homogeneous_acceleration_is_exactly_zero(homogeneous_model, gaussian_theta):
    for t in (0.0, 0.7):
        _, a_eff = EffectiveFieldComputer(homogeneous_model).effective_fields(
            gaussian_theta, t
        )
        assert np.all(a_eff.data == 0.0)


def test_chemical_potential_acceleration(grid, theta):
    couplings = Couplings.from_constants(mu=2.0, c=1.0).replace_entries(
        dmu_dx=lambda t, x: -2.0 * x
    )
    model = LiebLinigerModel(grid, couplings)
    _, a_eff = EffectiveFieldComputer(model).effective_fields(theta, 0.0)
    expected = np.broadcast_to(-2.0 * grid.x_grid[None, None, :], grid.shape)
    assert np.allclose(a_eff.data, expected)


def test_interaction_acceleration(trapped_model, gaussian_theta, grid):
    computer = EffectiveFieldComputer(trapped_model)
    _, a_eff = computer.effective_fields(gaussian_theta, 0.0)

    dressing = DressingSolver(trapped_model)
    de_dr, dp_dr = dressing.dress_many(
        [trapped_model.energy_rapid_deriv(0.0), trapped_model.momentum_rapid_deriv(0.0)],
        gaussian_theta,
        0.0,
    )
    B = (
        trapped_model.scattering_coupling_deriv(INTERACTION, 0.0).weighted(gaussian_theta)
        * (1.0 / (2.0 * np.pi))
    )
    f_dr = dressing.dress(PhaseSpaceField(grid, B.apply(dp_dr)), gaussian_theta, 0.0)
    L_dr = dressing.dress(PhaseSpaceField(grid, B.apply(de_dr)), gaussian_theta, 0.0)
    expected = (0.05 * f_dr.data + 0.1 * L_dr.data) / dp_dr.data - 2.0 * grid.x_mesh()
    assert np.allclose(a_eff.data, expected)
    assert np.all(np.isfinite(a_eff.data))


class FlatMomentumModel(LiebLinigerModel):
    def momentum_rapid_deriv(self, t):
        values = np.ones(self.grid.n_r)
        values[3] = 0.0
        return PhaseSpaceField.from_rapidity(self.grid, values)


def test_division_degeneracy_is_reported(grid, theta):
    model = FlatMomentumModel(grid, Couplings.from_constants(c=0.0))
    with pytest.raises(DivisionDegeneracyError) as excinfo:
        EffectiveFieldComputer(model).effective_fields(theta, 0.0)
    assert excinfo.value.indices == ((3, 0, 0), (3, 0, 1), (3, 0, 2))
    assert isinstance(excinfo.value, ZeroDivisionError)


def test_rapidity_dependent_potential_gradient(grid, theta):
    couplings = Couplings.from_constants(mu=2.0, c=1.0).replace_entries(
        dmu_dx=lambda t, x: np.outer(grid.rapid_grid, x)
    )
    model = LiebLinigerModel(grid, couplings)
    _, a_eff = EffectiveFieldComputer(model).effective_fields(theta, 0.0)
    expected = np.outer(grid.rapid_grid, grid.x_grid)[:, None, :]
    assert np.allclose(a_eff.data, np.broadcast_to(expected, grid.shape))
