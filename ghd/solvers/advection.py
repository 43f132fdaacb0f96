"""後退セミラグランジュ（BSL）法による1次の時間発展

各ステップで出発点を計算し、前ステップの占有関数を出発点で補間します。

    θ(x, r, t + dt) = θ(x_d, r_d, t)

位置・ラピディティの特性曲線 u, w も同じ出発点で補間して追跡します。
u(x, r, t), w(x, r, t) は時刻 t に (x, r) にある準粒子の初期時刻での位置とラピディティです。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from ..config import DepartureConfig
from ..core import GHDError, PhaseSpaceField
from ..numerics import interp_phase_space
from ..physics.model import IntegrableModel
from .base import Solver
from .departure import DeparturePoints, DeparturePointSolver


@dataclass(frozen=True)
class StepResult:
    """1ステップの結果"""

    theta: PhaseSpaceField
    departure: DeparturePoints
    u: Optional[PhaseSpaceField] = None
    w: Optional[PhaseSpaceField] = None


@dataclass
class PropagationResult:
    """時間発展の結果"""

    theta: List[PhaseSpaceField]
    t_array: np.ndarray
    u: List[PhaseSpaceField] = field(default_factory=list)
    w: List[PhaseSpaceField] = field(default_factory=list)
    diagnostics: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        """全ステップで出発点の反復が収束した場合に True"""
        return all(d["converged"] for d in self.diagnostics)


class AdvectionSolver(Solver):
    """BSL法による1次（オイラー）の移流ソルバー"""

    def __init__(
        self,
        model: IntegrableModel,
        config: Optional[DepartureConfig] = None,
        departure_solver: Optional[DeparturePointSolver] = None,
        logger=None,
    ):
        """
        Args:
            model: 可積分モデル
            config: 出発点ソルバーの設定
            departure_solver: 出発点ソルバー（Noneの場合は新規作成）
            logger: ロガー（オプション）
        """
        self.config = config or DepartureConfig()
        self.config.validate()
        super().__init__(
            name="AdvectionBSL",
            tolerance=self.config.tolerance,
            max_iterations=self.config.max_iterations,
            logger=logger,
        )
        self.model = model
        self.departure_solver = departure_solver or DeparturePointSolver(
            model, self.config, logger=logger
        )

    @property
    def grid(self):
        return self.model.grid

    def step(self, theta, t: float, dt: float, u=None, w=None) -> StepResult:
        """1ステップ進める

        Args:
            theta: 時刻 t の占有関数
            t: 現在の時刻
            dt: 時間刻み幅
            u: 時刻 t の位置の特性曲線（オプション）
            w: 時刻 t のラピディティの特性曲線（オプション）

        Returns:
            時刻 t + dt の占有関数・特性曲線と出発点
        """
        theta = PhaseSpaceField(self.grid, theta)
        departure = self.departure_solver.solve(theta, t, dt)
        theta_next = interp_phase_space(
            theta, departure.r_d, departure.x_d, self.config.extrapolate_filling
        )

        # 特性曲線は座標の写像なので線形外挿する
        u_next = w_next = None
        if u is not None:
            u_next = interp_phase_space(
                PhaseSpaceField(self.grid, u), departure.r_d, departure.x_d, True
            )
        if w is not None:
            w_next = interp_phase_space(
                PhaseSpaceField(self.grid, w), departure.r_d, departure.x_d, True
            )
        return StepResult(theta_next, departure, u_next, w_next)

    def solve(self, theta_init, t_array, u_init=None, w_init=None) -> PropagationResult:
        """初期の占有関数を時刻列に沿って発展させる

        Args:
            theta_init: 初期の占有関数
            t_array: 時刻の列（最初の要素が初期時刻）
            u_init: 位置の特性曲線の初期値（Noneの場合は位置グリッド）
            w_init: ラピディティの特性曲線の初期値（Noneの場合はラピディティグリッド）

        Returns:
            各時刻の占有関数・特性曲線と診断情報

        Raises:
            SingularSystemError, DivisionDegeneracyError:
                ステップが数値的に破綻した場合（そのステップで中断）
        """
        t_array = np.asarray(t_array, dtype=float).ravel()
        if t_array.size == 0:
            raise ValueError("t_arrayは1つ以上の時刻を含む必要があります")
        if np.any(np.diff(t_array) < 0):
            raise ValueError("t_arrayは単調非減少である必要があります")

        self._start_solving()
        theta = PhaseSpaceField(self.grid, theta_init)
        u = PhaseSpaceField(
            self.grid, self.grid.x_mesh() if u_init is None else u_init
        )
        w = PhaseSpaceField(
            self.grid, self.grid.rapid_mesh() if w_init is None else w_init
        )
        result = PropagationResult(theta=[theta], t_array=t_array, u=[u], w=[w])

        for k in range(1, t_array.size):
            t, dt = t_array[k - 1], t_array[k] - t_array[k - 1]
            try:
                step = self.step(theta, t, dt, u, w)
            except GHDError as e:
                if self._logger:
                    self._logger.log_error_with_context(
                        "時間発展ステップを中断", e, {"step": k, "t": float(t)}
                    )
                raise

            theta, u, w = step.theta, step.u, step.w
            result.theta.append(theta)
            result.u.append(u)
            result.w.append(w)
            result.diagnostics.append(
                {
                    "step": k,
                    "t": float(t_array[k]),
                    "converged": step.departure.converged,
                    "iterations": step.departure.iterations,
                    "residual": step.departure.residual,
                }
            )
            self._iteration_count = k
            if self._logger:
                self._logger.info(f"ステップ {k}/{t_array.size - 1}: t = {t_array[k]:.4g}")

        self._end_solving()
        return result

    propagate = solve
