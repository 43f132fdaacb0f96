"""局所相関関数 g_n の計算

    g_n(x) = n!²·cⁿ / (2ⁿ·Dⁿ) · Σ_{m} Π_j (1/m_j!)·(B_j / (π·c))^{m_j}

和は Σ_j j·m_j = n を満たす列 {m_j} について取ります。係数 B_i は補助関数 b_k の
線形漸化式から求めます。

    kernel1 = −(1/2π)·∂T/∂r
    kernel2 = −(r₁ − r₂)·kernel1 / c
    (I − kernel1·(w·θ)ᵗ)·b_i = X2_i
    B_i = (1/i)·θᵗ·(w·b_{2i−1})
"""

from math import factorial
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core import INTERACTION, CouplingOrder, KernelTensor, PhaseSpaceField
from ..numerics import DressingSolver, identity_minus, solve_per_position
from ..physics import compute_charges
from ..physics.model import IntegrableModel
from .partitions import find_m_sequences


class CorrelatorEngine:
    """局所相関関数の計算器"""

    def __init__(
        self,
        model: IntegrableModel,
        dressing: Optional[DressingSolver] = None,
        logger=None,
    ):
        """
        Args:
            model: 可積分モデル
            dressing: ドレッシングソルバー（Noneの場合は新規作成）
            logger: ロガー（オプション）
        """
        self.model = model
        self.dressing = dressing or DressingSolver(model, logger=logger)
        self.logger = logger

    @property
    def grid(self):
        return self.model.grid

    def _interaction(self, t: float) -> np.ndarray:
        self.model.couplings.require(CouplingOrder.VALUE, INTERACTION)
        return self.model.coupling_on_grid(CouplingOrder.VALUE, INTERACTION, t)

    def calc_b(self, n: int, theta, t: float) -> List[np.ndarray]:
        """係数 B_1..B_n を計算

        Args:
            n: 相関関数の次数
            theta: 占有関数
            t: 時刻

        Returns:
            位置の配列 (N_x,) のリスト [B_1, ..., B_n]

        Raises:
            SingularSystemError: 漸化式の線形方程式が特異な場合
        """
        _validate_order(n)
        grid = self.grid
        theta = self.dressing.theta_array(theta)
        kernel1, kernel2 = self.recurrence_kernels(t)
        X1 = identity_minus(kernel1.weighted(theta))
        occupation = grid.weights_mesh() * theta

        # b[k + 1] = b_k。b_{-1}, b_0 は 0 のダミー
        b = [np.zeros(grid.shape), np.zeros(grid.shape)]
        for i in range(1, 2 * n):
            X2 = self._recurrence_source(i, b, kernel1, kernel2, occupation)
            b.append(
                solve_per_position(
                    X1,
                    X2,
                    grid,
                    context=f"相関関数の漸化式 (i={i}, t={t:g})",
                    condition_limit=self.dressing.condition_limit,
                )
            )

        return [
            np.sum(occupation * b[2 * i - 1 + 1], axis=(0, 1)) / i
            for i in range(1, n + 1)
        ]

    def recurrence_kernels(self, t: float) -> Tuple[KernelTensor, KernelTensor]:
        """漸化式の核 (kernel1, kernel2)

        c = 0 の位置で生じる 0/0 は KernelTensor の構築時に 0 となります。
        """
        grid = self.grid
        c = self._interaction(t)
        kernel1 = self.model.dressing_kernel(t)
        rapid_diff = grid.rapid_grid[:, None] - grid.rapid_grid[None, :]
        with np.errstate(divide="ignore", invalid="ignore"):
            scale = -rapid_diff[:, :, None, None, None] / c[None, None, None, None, :]
        return kernel1, kernel1 * scale

    @staticmethod
    def _recurrence_source(
        i: int,
        b: Sequence[np.ndarray],
        kernel1: KernelTensor,
        kernel2: KernelTensor,
        occupation: np.ndarray,
    ) -> np.ndarray:
        """漸化式の右辺 X2_i"""
        if i % 2 == 0:
            return -kernel1.apply(occupation * b[i - 2 + 1]) + kernel2.apply(
                occupation * (2 * b[i - 1 + 1] - b[i - 3 + 1])
            )

        source = kernel2.apply(occupation * b[i - 1 + 1]) - kernel1.apply(
            occupation * b[i - 2 + 1]
        )
        if i == 1:  # デルタ関数の寄与
            source = source + 1.0
        return source

    def prefactor(self, n: int, density: np.ndarray, t: float) -> np.ndarray:
        """前因子 n!²·cⁿ / (2ⁿ·Dⁿ)"""
        c = self._interaction(t)
        return factorial(n) ** 2 * c**n / (2**n * np.asarray(density) ** n)

    def local_correlator(self, n: int, theta, t: float) -> np.ndarray:
        """1つの占有関数に対する局所相関関数 g_n(x)

        Args:
            n: 相関関数の次数
            theta: 占有関数
            t: 時刻

        Returns:
            位置の配列 (N_x,)
        """
        _validate_order(n)
        theta = PhaseSpaceField(self.grid, self.dressing.theta_array(theta))
        density = compute_charges(self.model, self.dressing, theta, 0, t)
        c = self._interaction(t)

        m_sequences = find_m_sequences(int(n))
        B = self.calc_b(n, theta, t)

        total = np.zeros(self.grid.n_x)
        for m_seq in m_sequences:
            term = np.ones(self.grid.n_x)
            for j, m_j in enumerate(m_seq, start=1):
                term = term * (B[j - 1] / (np.pi * c)) ** m_j / factorial(m_j)
            total = total + term

        if self.logger:
            self.logger.debug(
                f"g_{n} を計算: t={t:g}, 分割数={len(m_sequences)}"
            )
        return self.prefactor(n, density, t) * total

    def local_correlators(self, n: int, thetas: Sequence, t_array) -> np.ndarray:
        """占有関数のスナップショット列に対する局所相関関数

        Returns:
            (N_x, N_steps) の配列
        """
        t_array = np.atleast_1d(np.asarray(t_array, dtype=float))
        if len(thetas) != t_array.size:
            raise ValueError("thetasとt_arrayの長さが一致しません")
        return np.stack(
            [self.local_correlator(n, theta, t) for theta, t in zip(thetas, t_array)],
            axis=1,
        )


def _validate_order(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n <= 0:
        raise ValueError(f"nは正の整数である必要があります: {n!r}")
