"""ドレッシング方程式のソルバー

    (I − K(θ, t))·h^dr = h
    K[r₁, r₂, s₁, s₂] = −(1/2π)·∂T/∂r(r₁, r₂, s₁, s₂; t)·w(r₂)·θ(r₂, s₂)

を各位置サンプルで独立に解きます。結果は与えられた (θ, t) の組に対してのみ有効で、
ステップをまたいでキャッシュしません。
"""

from typing import Optional, Union

import numpy as np

from ..core import KernelTensor, PhaseSpaceField
from ..physics.model import IntegrableModel
from .linear import identity_minus, solve_per_position

FieldLike = Union[PhaseSpaceField, np.ndarray, float]


class DressingSolver:
    """線形ドレッシング方程式のソルバー"""

    def __init__(
        self,
        model: IntegrableModel,
        condition_limit: Optional[float] = None,
        logger=None,
    ):
        """
        Args:
            model: 可積分モデル
            condition_limit: 条件数の上限（Noneの場合は 1/機械イプシロン）
            logger: ロガー（オプション）
        """
        self.model = model
        self.condition_limit = condition_limit
        self.logger = logger

    @property
    def grid(self):
        return self.model.grid

    def kernel(self, theta: FieldLike, t: float) -> KernelTensor:
        """占有で重み付けしたドレッシング核 K(θ, t)"""
        return self.model.dressing_kernel(t).weighted(self.theta_array(theta))

    def operator(self, theta: FieldLike, t: float) -> np.ndarray:
        """位置ごとの行列 I − K(θ, t) (N_x, N_r·S, N_r·S)"""
        return identity_minus(self.kernel(theta, t))

    def dress(self, bare: FieldLike, theta: FieldLike, t: float) -> PhaseSpaceField:
        """裸の量をドレスする

        Args:
            bare: 裸の場
            theta: 占有関数
            t: 時刻

        Returns:
            ドレスされた場

        Raises:
            SingularSystemError: 線形方程式が特異な位置がある場合
        """
        return self.dress_many([bare], theta, t)[0]

    def dress_many(self, sources, theta: FieldLike, t: float):
        """同じ (θ, t) に対して複数の裸の場をドレスする

        係数行列は1度だけ構築し、各右辺について解きます。
        """
        matrices = self.operator(theta, t)
        results = []
        for source in sources:
            solution = solve_per_position(
                matrices,
                self._field_array(source),
                self.grid,
                context=f"ドレッシング (t={t:g})",
                condition_limit=self.condition_limit,
            )
            results.append(PhaseSpaceField(self.grid, solution))
        if self.logger:
            self.logger.debug(f"ドレッシング完了: t={t:g}, 右辺数={len(results)}")
        return results

    def theta_array(self, theta: FieldLike) -> np.ndarray:
        if isinstance(theta, PhaseSpaceField):
            if theta.grid is not self.grid:
                raise ValueError("占有関数のグリッドがモデルと一致しません")
            return theta.data
        return PhaseSpaceField(self.grid, theta).data

    def _field_array(self, source: FieldLike) -> np.ndarray:
        if isinstance(source, PhaseSpaceField):
            if source.grid is not self.grid:
                raise ValueError("ドレスする場のグリッドがモデルと一致しません")
            return source.data
        return PhaseSpaceField(self.grid, source).data
