"""Lieb-Liniger模型

単位系:
    m = 1/2, ħ = 1, g_1d = 1
    ラピディティ k に対して p = ħk = k

結合定数:
    スロット1: 化学ポテンシャル μ(t, x)
    スロット2: 相互作用強度 c(t, x)
"""

import jax.numpy as jnp
import numpy as np
from jax import jit

from ..core import (
    CHEMICAL_POTENTIAL,
    INTERACTION,
    Couplings,
    CouplingOrder,
    KernelTensor,
    PhaseSpaceField,
    PhaseSpaceGrid,
)
from .model import IntegrableModel


@jit
def _rapid_deriv_kernel(rapid: jnp.ndarray, c: jnp.ndarray) -> jnp.ndarray:
    """∂T/∂k = −2c / ((k₁−k₂)² + c²)  形状 (N_r, N_r, N_x)"""
    diff = rapid[:, None, None] - rapid[None, :, None]
    c = c[None, None, :]
    return -2.0 * c / (diff**2 + c**2)


@jit
def _coupling_deriv_kernel(rapid: jnp.ndarray, c: jnp.ndarray) -> jnp.ndarray:
    """∂T/∂c = 2(k₁−k₂) / ((k₁−k₂)² + c²)  形状 (N_r, N_r, N_x)"""
    diff = rapid[:, None, None] - rapid[None, :, None]
    c = c[None, None, :]
    return 2.0 * diff / (diff**2 + c**2)


class LiebLinigerModel(IntegrableModel):
    """Lieb-Liniger模型（準粒子は1種のフェルミオン）"""

    def __init__(self, grid: PhaseSpaceGrid, couplings: Couplings, logger=None):
        if grid.n_types != 1:
            raise ValueError("Lieb-Liniger模型の準粒子種は1種のみです")
        super().__init__(grid, couplings, logger)

    def interaction(self, t: float) -> np.ndarray:
        """相互作用強度 c(t, x) (N_x,)"""
        self.couplings.require(CouplingOrder.VALUE, INTERACTION)
        return self.coupling_on_grid(CouplingOrder.VALUE, INTERACTION, t)

    def bare_energy(self, t: float) -> PhaseSpaceField:
        mu = self.coupling_on_grid(CouplingOrder.VALUE, CHEMICAL_POTENTIAL, t)
        energy = PhaseSpaceField.from_rapidity(self.grid, self.grid.rapid_grid**2)
        if mu is None:
            return energy
        return energy - PhaseSpaceField.from_position(self.grid, mu)

    def bare_momentum(self, t: float) -> PhaseSpaceField:
        return PhaseSpaceField.from_rapidity(self.grid, self.grid.rapid_grid)

    def energy_rapid_deriv(self, t: float) -> PhaseSpaceField:
        return PhaseSpaceField.from_rapidity(self.grid, 2.0 * self.grid.rapid_grid)

    def momentum_rapid_deriv(self, t: float) -> PhaseSpaceField:
        return PhaseSpaceField(self.grid, 1.0)

    def scattering_rapid_deriv(self, t: float) -> KernelTensor:
        dT = _rapid_deriv_kernel(
            jnp.asarray(self.grid.rapid_grid), jnp.asarray(self.interaction(t))
        )
        return KernelTensor(self.grid, np.asarray(dT)[:, :, None, None, :])

    def scattering_coupling_deriv(self, slot: int, t: float) -> KernelTensor:
        if slot != INTERACTION:
            return KernelTensor(self.grid, 0.0)
        dT = _coupling_deriv_kernel(
            jnp.asarray(self.grid.rapid_grid), jnp.asarray(self.interaction(t))
        )
        return KernelTensor(self.grid, np.asarray(dT)[:, :, None, None, :])

    def energy_coupling_deriv(self, slot: int, t: float) -> PhaseSpaceField:
        if slot == CHEMICAL_POTENTIAL:
            return PhaseSpaceField(self.grid, -1.0)
        return PhaseSpaceField(self.grid, 0.0)

    def momentum_coupling_deriv(self, slot: int, t: float) -> PhaseSpaceField:
        return PhaseSpaceField(self.grid, 0.0)
