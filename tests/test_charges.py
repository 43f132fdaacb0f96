import numpy as np
import pytest

from ghd import DressingSolver, compute_charges


def test_free_densities(free_model, theta, grid):
    dressing = DressingSolver(free_model)
    densities = compute_charges(free_model, dressing, theta, [0, 1, 2], 0.0)
    assert densities.shape == (3, grid.n_x)

    w = grid.rapid_w
    r = grid.rapid_grid
    expected = np.array(
        [
            np.sum(w * 0.3) / (2.0 * np.pi),
            np.sum(w * 0.3 * r) / (2.0 * np.pi),
            np.sum(w * 0.3 * (r**2 - 2.0)) / (2.0 * np.pi),
        ]
    )
    for ix in range(grid.n_x):
        assert np.allclose(densities[:, ix], expected)


def test_single_index_shape(homogeneous_model, gaussian_theta, grid):
    dressing = DressingSolver(homogeneous_model)
    density = compute_charges(homogeneous_model, dressing, gaussian_theta, 0, 0.0)
    assert density.shape == (grid.n_x,)
    assert np.all(density > 0)


def test_interaction_enhances_density(homogeneous_model, free_model, theta):
    interacting = compute_charges(
        homogeneous_model, DressingSolver(homogeneous_model), theta, 0, 0.0
    )
    free = compute_charges(free_model, DressingSolver(free_model), theta, 0, 0.0)
    assert np.all(interacting > free)


@pytest.mark.parametrize("index", [-1, 3])
def test_unsupported_index(homogeneous_model, theta, index):
    with pytest.raises(ValueError):
        compute_charges(
            homogeneous_model, DressingSolver(homogeneous_model), theta, index, 0.0
        )
