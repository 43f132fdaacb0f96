"""可積分モデルの基底クラスを提供するモジュール

このモジュールは、裸のエネルギー・運動量とその微分、散乱位相の微分など、
GHDの数値コアが必要とするモデル固有量のインターフェースを定義します。
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..core import (
    Couplings,
    CouplingOrder,
    KernelTensor,
    PhaseSpaceField,
    PhaseSpaceGrid,
)


class IntegrableModel(ABC):
    """可積分モデルの基底抽象クラス

    グリッドは参照のみを保持し、変更しません。
    結合定数テーブルは求解の間で丸ごと置き換えることができます。
    """

    def __init__(self, grid: PhaseSpaceGrid, couplings: Couplings, logger=None):
        """
        Args:
            grid: 位相空間グリッド
            couplings: 結合定数テーブル
            logger: ロガー（オプション）
        """
        self._grid = grid
        self._couplings = couplings
        self.logger = logger

    @property
    def grid(self) -> PhaseSpaceGrid:
        return self._grid

    @property
    def couplings(self) -> Couplings:
        return self._couplings

    def set_couplings(self, couplings: Couplings) -> None:
        """結合定数テーブルを置き換え"""
        if not isinstance(couplings, Couplings):
            raise TypeError("couplingsはCouplingsである必要があります")
        self._couplings = couplings
        if self.logger:
            self.logger.debug("結合定数テーブルを更新")

    @property
    def is_homogeneous(self) -> bool:
        """結合定数が位置に陽に依存しない場合に True"""
        return self._couplings.is_homogeneous

    def coupling_on_grid(
        self, order: CouplingOrder, slot: int, t: float
    ) -> Optional[np.ndarray]:
        """結合定数を位置グリッド上で評価

        Returns:
            (N_x,) の配列、要素が存在しない場合は None
        """
        value = self._couplings.evaluate(order, slot, t, self._grid.x_grid)
        if value is None:
            return None
        if value.size == 1:
            return np.full(self._grid.n_x, float(value.ravel()[0]))
        if value.size != self._grid.n_x:
            raise ValueError(
                f"結合定数 {CouplingOrder(order).name}[{slot}] の形状 {value.shape} が"
                f"位置グリッド ({self._grid.n_x},) と一致しません"
            )
        return value.reshape(self._grid.n_x)

    @abstractmethod
    def bare_energy(self, t: float) -> PhaseSpaceField:
        """裸のエネルギー"""
        pass

    @abstractmethod
    def bare_momentum(self, t: float) -> PhaseSpaceField:
        """裸の運動量"""
        pass

    @abstractmethod
    def energy_rapid_deriv(self, t: float) -> PhaseSpaceField:
        """エネルギーのラピディティ微分"""
        pass

    @abstractmethod
    def momentum_rapid_deriv(self, t: float) -> PhaseSpaceField:
        """運動量のラピディティ微分"""
        pass

    @abstractmethod
    def scattering_rapid_deriv(self, t: float) -> KernelTensor:
        """散乱位相 T のラピディティ微分 ∂T/∂r"""
        pass

    @abstractmethod
    def scattering_coupling_deriv(self, slot: int, t: float) -> KernelTensor:
        """散乱位相 T の結合定数微分 ∂T/∂λ"""
        pass

    @abstractmethod
    def energy_coupling_deriv(self, slot: int, t: float) -> PhaseSpaceField:
        """エネルギーの結合定数微分"""
        pass

    @abstractmethod
    def momentum_coupling_deriv(self, slot: int, t: float) -> PhaseSpaceField:
        """運動量の結合定数微分"""
        pass

    def dressing_kernel(self, t: float) -> KernelTensor:
        """ドレッシングの積分核 −(1/2π)·∂T/∂r"""
        return -1.0 / (2.0 * np.pi) * self.scattering_rapid_deriv(t)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(grid={self._grid!r})"
