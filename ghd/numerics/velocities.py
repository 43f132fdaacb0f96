"""有効速度と有効加速度の計算

    v_eff = (e')^dr / (p')^dr
    a_eff = (∂_t c·(B·p'^dr)^dr + ∂_x c·(B·e'^dr)^dr) / (p')^dr + ∂_x μ
    B = (1/2π)·(∂T/∂c)·(w·θ)ᵗ

化学ポテンシャル由来の加速度はラピディティ微分の寄与を持たないため、
一般的な結合定数微分の計算を行わずに直接結合定数テーブルから読み取ります。
"""

from typing import Optional, Tuple

import numpy as np

from ..core import (
    CHEMICAL_POTENTIAL,
    INTERACTION,
    CouplingOrder,
    DivisionDegeneracyError,
    PhaseSpaceField,
)
from ..physics.model import IntegrableModel
from .dressing import DressingSolver, FieldLike


class EffectiveFieldComputer:
    """有効速度・有効加速度の計算器"""

    def __init__(
        self,
        model: IntegrableModel,
        dressing: Optional[DressingSolver] = None,
        degeneracy_threshold: float = 1e-12,
        logger=None,
    ):
        """
        Args:
            model: 可積分モデル
            dressing: ドレッシングソルバー（Noneの場合は新規作成）
            degeneracy_threshold: |(p')^dr| の下限
            logger: ロガー（オプション）
        """
        if degeneracy_threshold < 0:
            raise ValueError("degeneracy_thresholdは非負である必要があります")
        self.model = model
        self.dressing = dressing or DressingSolver(model, logger=logger)
        self.degeneracy_threshold = degeneracy_threshold
        self.logger = logger

    @property
    def grid(self):
        return self.model.grid

    def effective_fields(
        self, theta: FieldLike, t: float
    ) -> Tuple[PhaseSpaceField, PhaseSpaceField]:
        """有効速度と有効加速度を計算

        Args:
            theta: 占有関数
            t: 時刻

        Returns:
            (v_eff, a_eff)

        Raises:
            SingularSystemError: ドレッシングの線形方程式が特異な場合
            DivisionDegeneracyError: (p')^dr がほぼ0となる点がある場合
        """
        de_dr, dp_dr = self.dressing.dress_many(
            [self.model.energy_rapid_deriv(t), self.model.momentum_rapid_deriv(t)],
            theta,
            t,
        )
        self._check_degeneracy(dp_dr, t)

        v_eff = de_dr / dp_dr

        if self.model.is_homogeneous:
            return v_eff, PhaseSpaceField(self.grid, 0.0)

        a_eff_mu = self._chemical_potential_acceleration(t)
        a_eff_c = self._interaction_acceleration(theta, t, de_dr, dp_dr)

        a_eff = a_eff_mu
        if a_eff_c is not None:
            a_eff = a_eff + a_eff_c / dp_dr
        return v_eff, a_eff

    def _check_degeneracy(self, dp_dr: PhaseSpaceField, t: float) -> None:
        small = ~(np.abs(dp_dr.data) >= self.degeneracy_threshold)
        if np.any(small):
            error = DivisionDegeneracyError(
                f"有効速度 (t={t:g})", np.argwhere(small), self.degeneracy_threshold
            )
            if self.logger:
                self.logger.error(str(error))
            raise error

    def _chemical_potential_acceleration(self, t: float) -> PhaseSpaceField:
        value = self.model.couplings.evaluate(
            CouplingOrder.SPACE_DERIVATIVE, CHEMICAL_POTENTIAL, t, self.grid.x_grid
        )
        if value is None:
            return PhaseSpaceField(self.grid, 0.0)
        if value.ndim == 3:
            return PhaseSpaceField(self.grid, value)
        if value.shape == (self.grid.n_r, self.grid.n_x):
            # ラピディティと位置の行列は種方向へ放送
            return PhaseSpaceField(self.grid, value[:, None, :])
        if value.size == 1:
            return PhaseSpaceField(self.grid, float(value.ravel()[0]))
        # 位置のみの場合はラピディティ方向へ放送
        return PhaseSpaceField.from_position(self.grid, value.reshape(-1))

    def _interaction_acceleration(
        self,
        theta: FieldLike,
        t: float,
        de_dr: PhaseSpaceField,
        dp_dr: PhaseSpaceField,
    ) -> Optional[PhaseSpaceField]:
        dc_dt = self.model.coupling_on_grid(
            CouplingOrder.TIME_DERIVATIVE, INTERACTION, t
        )
        dc_dx = self.model.coupling_on_grid(
            CouplingOrder.SPACE_DERIVATIVE, INTERACTION, t
        )
        if dc_dt is None and dc_dx is None:
            return None

        theta_data = self.dressing.theta_array(theta)
        B = (
            1.0
            / (2.0 * np.pi)
            * self.model.scattering_coupling_deriv(INTERACTION, t).weighted(theta_data)
        )

        sources, weights = [], []
        if dc_dt is not None:  # 時間微分の寄与
            sources.append(PhaseSpaceField(self.grid, B.apply(dp_dr)))
            weights.append(dc_dt)
        if dc_dx is not None:  # 空間微分の寄与
            sources.append(PhaseSpaceField(self.grid, B.apply(de_dr)))
            weights.append(dc_dx)

        a_eff_c = PhaseSpaceField(self.grid, 0.0)
        for dressed, weight in zip(self.dressing.dress_many(sources, theta, t), weights):
            a_eff_c = a_eff_c + PhaseSpaceField.from_position(self.grid, weight) * dressed
        return a_eff_c
