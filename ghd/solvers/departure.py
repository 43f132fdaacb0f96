"""セミラグランジュ法の出発点ソルバー

特性曲線を1ステップ分さかのぼった出発点 (x_d, r_d) を各グリッド点で計算します。

- 陽的スキーム（1次オイラー）:
    x_d = x − dt·v_eff,  r_d = r − dt·a_eff
- 陰的スキーム（中点の不動点反復）:
    x_d ← x_d + (x − x_d − dt·v_eff(x_mid, r_mid))
    r_d ← r_d + (r − r_d − dt·a_eff(x_mid, r_mid))
  中点 ((x + x_d)/2, (r + r_d)/2) での値は、グリッド上の有効場を補間して求めます。
"""

import warnings
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import DepartureConfig
from ..core import NonConvergenceError, NonConvergenceWarning, PhaseSpaceField
from ..numerics import EffectiveFieldComputer, interp_phase_space
from ..physics.model import IntegrableModel
from .base import Solver


@dataclass(frozen=True)
class DeparturePoints:
    """出発点の計算結果

    (x_d, r_d, v_n, a_n) としてアンパックできます。
    v_n, a_n は現在の占有関数で評価したグリッド上の有効速度・有効加速度です。
    """

    x_d: np.ndarray
    r_d: np.ndarray
    v_n: PhaseSpaceField
    a_n: PhaseSpaceField
    converged: bool = True
    iterations: int = 0
    residual: float = 0.0

    def __iter__(self):
        return iter((self.x_d, self.r_d, self.v_n, self.a_n))


class DeparturePointSolver(Solver):
    """出発点ソルバー（陽的・陰的の2モード）"""

    def __init__(
        self,
        model: IntegrableModel,
        config: Optional[DepartureConfig] = None,
        effective_fields: Optional[EffectiveFieldComputer] = None,
        logger=None,
    ):
        """
        Args:
            model: 可積分モデル
            config: 出発点ソルバーの設定
            effective_fields: 有効速度の計算器（Noneの場合は新規作成）
            logger: ロガー（オプション）
        """
        self.config = config or DepartureConfig()
        self.config.validate()
        super().__init__(
            name="DeparturePoint",
            tolerance=self.config.tolerance,
            max_iterations=self.config.max_iterations,
            logger=logger,
        )
        self.model = model
        self.effective_fields = effective_fields or EffectiveFieldComputer(
            model, logger=logger
        )

    @property
    def implicit(self) -> bool:
        return self.config.implicit

    @property
    def grid(self):
        return self.model.grid

    def solve(self, theta, t: float, dt: float) -> DeparturePoints:
        """出発点を計算

        Args:
            theta: 現在の占有関数
            t: 現在の時刻
            dt: 時間刻み幅

        Returns:
            出発点と有効場

        Raises:
            SingularSystemError: ドレッシングの線形方程式が特異な場合
            DivisionDegeneracyError: (p')^dr がほぼ0となる点がある場合
            NonConvergenceError: strict設定で陰的反復が収束しなかった場合
        """
        self._start_solving()
        v_eff, a_eff = self.effective_fields.effective_fields(theta, t)

        if self.implicit:
            result = self._solve_implicit(v_eff, a_eff, dt)
        else:
            result = self._solve_explicit(v_eff, a_eff, dt)

        self._end_solving()
        return result

    calculate_departure_points = solve

    def _solve_explicit(
        self, v_eff: PhaseSpaceField, a_eff: PhaseSpaceField, dt: float
    ) -> DeparturePoints:
        x_d = self.grid.x_mesh() - dt * v_eff.data
        r_d = self.grid.rapid_mesh() - dt * a_eff.data
        return DeparturePoints(x_d, r_d, v_eff, a_eff)

    def _solve_implicit(
        self, v_eff: PhaseSpaceField, a_eff: PhaseSpaceField, dt: float
    ) -> DeparturePoints:
        x_grid = self.grid.x_mesh()
        r_grid = self.grid.rapid_mesh()
        x_d = np.array(x_grid)
        r_d = np.array(r_grid)

        residual = np.inf
        converged = False
        while self._iteration_count < self.max_iterations:
            r_mid = (r_grid + r_d) / 2
            x_mid = (x_grid + x_d) / 2
            v_mid = interp_phase_space(v_eff, r_mid, x_mid, self.config.extrapolate)
            a_mid = interp_phase_space(a_eff, r_mid, x_mid, self.config.extrapolate)

            g_x = x_grid - x_d - dt * v_mid.data
            g_r = r_grid - r_d - dt * a_mid.data
            x_d = x_d + g_x
            r_d = r_d + g_r

            residual = float(np.sum(g_x**2) + np.sum(g_r**2))
            self._residual_history.append(residual)
            self._iteration_count += 1

            if residual < self.tolerance:
                converged = True
                break

        if not converged:
            self._report_nonconvergence(residual)

        return DeparturePoints(
            x_d,
            r_d,
            v_eff,
            a_eff,
            converged=converged,
            iterations=self._iteration_count,
            residual=residual,
        )

    def _report_nonconvergence(self, residual: float) -> None:
        error = NonConvergenceError(self._iteration_count, residual, self.tolerance)
        if self.config.strict:
            if self._logger:
                self._logger.error(str(error))
            raise error
        if self._logger:
            self._logger.warning(str(error))
        warnings.warn(str(error), NonConvergenceWarning, stacklevel=3)
