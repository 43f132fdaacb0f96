import numpy as np
import pytest

from ghd import Couplings, KernelTensor, LiebLinigerModel, PhaseSpaceField, PhaseSpaceGrid


class GridValidator:
    def __init__(self, n_x=3, n_r=8, rtol=1e-10, atol=1e-12):
        self.grid = PhaseSpaceGrid.uniform(-1.0, 1.0, n_x, -3.0, 3.0, n_r)
        self.rtol = rtol
        self.atol = atol


@pytest.fixture
def validator():
    return GridValidator()


@pytest.fixture
def grid(validator):
    return validator.grid


@pytest.fixture
def homogeneous_model(grid):
    return LiebLinigerModel(grid, Couplings.from_constants(mu=2.0, c=1.0))


@pytest.fixture
def free_model(grid):
    return LiebLinigerModel(grid, Couplings.from_constants(mu=2.0, c=0.0))


@pytest.fixture
def trapped_model(grid):
    couplings = Couplings.from_functions(
        mu=lambda t, x: 2.0 - x**2,
        c=lambda t, x: 1.0 + 0.1 * x,
        dmu_dx=lambda t, x: -2.0 * x,
        dc_dx=lambda t, x: 0.1 + 0.0 * x,
        dc_dt=lambda t, x: 0.05,
    )
    return LiebLinigerModel(grid, couplings)


@pytest.fixture
def theta(grid):
    return PhaseSpaceField(grid, 0.3)


@pytest.fixture
def gaussian_theta(grid):
    r = grid.rapid_mesh()
    x = grid.x_mesh()
    return PhaseSpaceField(grid, 0.8 * np.exp(-(r**2) / 2.0) * (1.0 - 0.2 * x**2))


class SingularModel(LiebLinigerModel):
    """θ = θ0 で I − K の対角成分が 0 となる散乱核を持つ模型"""

    theta0 = 0.5

    def scattering_rapid_deriv(self, t):
        grid = self.grid
        diagonal = -2.0 * np.pi / (grid.rapid_w * self.theta0)
        data = np.zeros(grid.kernel_shape)
        for i in range(grid.n_r):
            data[i, i, 0, 0, :] = diagonal[i]
        return KernelTensor(grid, data)


@pytest.fixture
def singular_model(grid):
    return SingularModel(grid, Couplings.from_constants())
