import numpy as np
import pytest

from ghd import PhaseSpaceField, PhaseSpaceGrid, interp_phase_space


@pytest.fixture
def linear_field(grid):
    return PhaseSpaceField(grid, 0.5 * grid.rapid_mesh() - 2.0 * grid.x_mesh() + 1.0)


def test_grid_points_are_reproduced(gaussian_theta, grid):
    result = interp_phase_space(gaussian_theta, grid.rapid_mesh(), grid.x_mesh())
    assert np.allclose(result.data, gaussian_theta.data, rtol=0, atol=1e-14)


def test_linear_field_is_exact(linear_field, grid):
    r_q = grid.rapid_mesh() + 0.37
    x_q = grid.x_mesh() * 0.5 - 0.1
    result = interp_phase_space(linear_field, r_q, x_q)
    assert np.allclose(result.data, 0.5 * r_q - 2.0 * x_q + 1.0)


def test_linear_extrapolation(linear_field, grid):
    r_q = np.full(grid.shape, 5.0)
    x_q = np.full(grid.shape, -1.5)
    result = interp_phase_space(linear_field, r_q, x_q, extrapolate=True)
    assert np.allclose(result.data, 0.5 * 5.0 + 3.0 + 1.0)


def test_clamped_outside_domain(linear_field, grid):
    r_q = np.full(grid.shape, 5.0)
    x_q = np.full(grid.shape, -1.5)
    result = interp_phase_space(linear_field, r_q, x_q, extrapolate=False)
    assert np.allclose(result.data, 0.5 * 3.0 + 2.0 + 1.0)


def test_array_input_requires_grid(linear_field, grid):
    with pytest.raises(ValueError):
        interp_phase_space(linear_field.data, grid.rapid_mesh(), grid.x_mesh())
    result = interp_phase_space(
        linear_field.data, grid.rapid_mesh(), grid.x_mesh(), grid=grid
    )
    assert np.allclose(result.data, linear_field.data)


def test_single_position_sample():
    grid = PhaseSpaceGrid.uniform(0.0, 0.0, 1, -1.0, 1.0, 5)
    field = PhaseSpaceField.from_rapidity(grid, grid.rapid_grid**2)
    result = interp_phase_space(field, 0.5, 3.0)
    assert np.allclose(result.data, 0.25)
