import numpy as np
import pytest

from ghd import (
    CorrelatorEngine,
    Couplings,
    DressingSolver,
    LiebLinigerModel,
    PhaseSpaceField,
    SingularSystemError,
    compute_charges,
)


def test_first_order_is_unity(homogeneous_model, gaussian_theta):
    g1 = CorrelatorEngine(homogeneous_model).local_correlator(1, gaussian_theta, 0.0)
    assert np.allclose(g1, 1.0, rtol=1e-10)


def test_first_order_in_trap(trapped_model, gaussian_theta):
    g1 = CorrelatorEngine(trapped_model).local_correlator(1, gaussian_theta, 0.3)
    assert np.allclose(g1, 1.0, rtol=1e-10)


def test_first_order_formula(homogeneous_model, theta):
    engine = CorrelatorEngine(homogeneous_model)
    (B1,) = engine.calc_b(1, theta, 0.0)
    density = compute_charges(homogeneous_model, engine.dressing, theta, 0, 0.0)
    expected = engine.prefactor(1, density, 0.0) * B1 / np.pi
    assert np.allclose(engine.local_correlator(1, theta, 0.0), expected)


def test_second_order_is_finite(homogeneous_model, gaussian_theta, grid):
    engine = CorrelatorEngine(homogeneous_model)
    g2 = engine.local_correlator(2, gaussian_theta, 0.0)
    assert g2.shape == (grid.n_x,)
    assert np.all(np.isfinite(g2))


def test_calc_b_length(homogeneous_model, theta, grid):
    B = CorrelatorEngine(homogeneous_model).calc_b(3, theta, 0.0)
    assert len(B) == 3
    assert all(b.shape == (grid.n_x,) for b in B)


def test_correlators_over_time(homogeneous_model, theta, gaussian_theta, grid):
    engine = CorrelatorEngine(homogeneous_model)
    g = engine.local_correlators(2, [theta, gaussian_theta], [0.0, 0.1])
    assert g.shape == (grid.n_x, 2)
    assert np.allclose(g[:, 0], engine.local_correlator(2, theta, 0.0))
    with pytest.raises(ValueError):
        engine.local_correlators(2, [theta], [0.0, 0.1])


@pytest.mark.parametrize("n", [0, -1, 2.0])
def test_invalid_order(homogeneous_model, theta, n):
    with pytest.raises(ValueError):
        CorrelatorEngine(homogeneous_model).local_correlator(n, theta, 0.0)


def test_interaction_is_required(grid, theta):
    model = LiebLinigerModel(grid, Couplings.from_functions(mu=lambda t, x: 1.0))
    with pytest.raises(KeyError):
        CorrelatorEngine(model).local_correlator(1, theta, 0.0)


def brute_force_b(grid, c_values, theta, n):
    """位置ごとに漸化式を numpy の行列で解いた B_1..B_n"""
    r = grid.rapid_grid
    diff = r[:, None] - r[None, :]
    B = np.zeros((n, grid.n_x))
    for ix, c in enumerate(c_values):
        K1 = (1.0 / np.pi) * c / (diff**2 + c**2)
        K2 = -diff * K1 / c
        wt = grid.rapid_w * theta[:, 0, ix]
        X1 = np.eye(grid.n_r) - K1 * wt[None, :]
        b = {-1: np.zeros(grid.n_r), 0: np.zeros(grid.n_r)}
        for i in range(1, 2 * n):
            if i % 2 == 0:
                X2 = -K1 @ (wt * b[i - 2]) + K2 @ (wt * (2 * b[i - 1] - b[i - 3]))
            else:
                X2 = K2 @ (wt * b[i - 1]) - K1 @ (wt * b[i - 2])
                if i == 1:
                    X2 = X2 + 1.0
            b[i] = np.linalg.solve(X1, X2)
        for i in range(1, n + 1):
            B[i - 1, ix] = np.sum(wt * b[2 * i - 1]) / i
    return B


def test_calc_b_matches_brute_force(trapped_model, gaussian_theta, grid):
    B = CorrelatorEngine(trapped_model).calc_b(3, gaussian_theta, 0.0)
    expected = brute_force_b(grid, 1.0 + 0.1 * grid.x_grid, gaussian_theta.data, 3)
    for i in range(3):
        assert np.allclose(B[i], expected[i], rtol=1e-10, atol=1e-12)


def test_second_order_partition_sum(trapped_model, gaussian_theta, grid):
    engine = CorrelatorEngine(trapped_model)
    B1, B2 = engine.calc_b(2, gaussian_theta, 0.0)
    c = 1.0 + 0.1 * grid.x_grid
    density = compute_charges(trapped_model, engine.dressing, gaussian_theta, 0, 0.0)
    expected = engine.prefactor(2, density, 0.0) * (
        (B1 / (np.pi * c)) ** 2 / 2.0 + B2 / (np.pi * c)
    )
    g2 = engine.local_correlator(2, gaussian_theta, 0.0)
    assert np.allclose(g2, expected, rtol=1e-12)


def test_singular_recurrence_is_reported(grid, singular_model):
    engine = CorrelatorEngine(
        singular_model, dressing=DressingSolver(singular_model, condition_limit=1e8)
    )
    theta = np.zeros(grid.shape)
    theta[:, :, 2] = singular_model.theta0
    with pytest.raises(SingularSystemError) as excinfo:
        engine.calc_b(2, PhaseSpaceField(grid, theta), 0.0)
    assert "相関関数の漸化式" in excinfo.value.context
    assert excinfo.value.positions == (2,)


def test_zero_interaction_kernels_have_no_nan(free_model, grid):
    kernel1, kernel2 = CorrelatorEngine(free_model).recurrence_kernels(0.0)
    assert not np.any(np.isnan(kernel1.data))
    assert not np.any(np.isnan(kernel2.data))
    assert np.all(kernel2.data == 0.0)


def test_recurrence_kernels_in_trap(trapped_model, grid):
    kernel1, kernel2 = CorrelatorEngine(trapped_model).recurrence_kernels(0.0)
    diff = grid.rapid_grid[:, None] - grid.rapid_grid[None, :]
    c = 1.0 + 0.1 * grid.x_grid
    for ix in range(grid.n_x):
        expected = -diff * kernel1.data[:, :, 0, 0, ix] / c[ix]
        assert np.allclose(kernel2.data[:, :, 0, 0, ix], expected)
