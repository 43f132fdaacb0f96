"""位相空間グリッドを定義するモジュール

位置 × ラピディティ × 準粒子種の不変な計算グリッドを提供します。
グリッドはモデルが所有し、各コンポーネントは参照のみを保持します。
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True, eq=False)
class PhaseSpaceGrid:
    """位相空間グリッドの不変情報

    配列の軸順序は (ラピディティ, 準粒子種, 位置) に固定されます。

    Attributes:
        x_grid: 位置のサンプル点 (N_x,)
        rapid_grid: ラピディティのサンプル点 (N_r,)
        rapid_w: ラピディティ積分の求積重み (N_r,)
        n_types: 準粒子種の数
    """

    x_grid: np.ndarray
    rapid_grid: np.ndarray
    rapid_w: np.ndarray
    n_types: int = 1

    def __post_init__(self):
        """初期化後の検証と配列の凍結"""
        for name in ("x_grid", "rapid_grid", "rapid_w"):
            array = np.array(getattr(self, name), dtype=float).ravel()
            array.setflags(write=False)
            object.__setattr__(self, name, array)

        if self.x_grid.size == 0 or self.rapid_grid.size == 0:
            raise ValueError("グリッドサイズは正の値である必要があります")
        if self.rapid_w.shape != self.rapid_grid.shape:
            raise ValueError("求積重みの形状がラピディティ軸と一致しません")
        if int(self.n_types) < 1:
            raise ValueError("準粒子種の数は1以上である必要があります")
        if np.any(np.diff(self.x_grid) <= 0) or np.any(np.diff(self.rapid_grid) <= 0):
            raise ValueError("グリッド点は狭義単調増加である必要があります")
        object.__setattr__(self, "n_types", int(self.n_types))

    @classmethod
    def uniform(
        cls,
        x_min: float,
        x_max: float,
        n_x: int,
        r_min: float,
        r_max: float,
        n_r: int,
        n_types: int = 1,
    ) -> "PhaseSpaceGrid":
        """等間隔グリッドを生成

        ラピディティの求積重みは格子間隔 Δr で一定とします。
        """
        x_grid = np.linspace(x_min, x_max, n_x)
        rapid_grid = np.linspace(r_min, r_max, n_r)
        dr = (r_max - r_min) / (n_r - 1) if n_r > 1 else 1.0
        rapid_w = np.full(n_r, dr)
        return cls(x_grid, rapid_grid, rapid_w, n_types)

    @property
    def n_x(self) -> int:
        return self.x_grid.size

    @property
    def n_r(self) -> int:
        return self.rapid_grid.size

    @property
    def shape(self) -> Tuple[int, int, int]:
        """場の形状 (N_r, S, N_x)"""
        return (self.n_r, self.n_types, self.n_x)

    @property
    def kernel_shape(self) -> Tuple[int, int, int, int, int]:
        """カーネルの形状 (N_r, N_r, S, S, N_x)"""
        return (self.n_r, self.n_r, self.n_types, self.n_types, self.n_x)

    @property
    def system_size(self) -> int:
        """位置ごとの線形方程式のサイズ N_r·S"""
        return self.n_r * self.n_types

    def rapid_mesh(self) -> np.ndarray:
        """ラピディティを場の形状へ放送した配列"""
        return np.broadcast_to(self.rapid_grid[:, None, None], self.shape)

    def x_mesh(self) -> np.ndarray:
        """位置を場の形状へ放送した配列"""
        return np.broadcast_to(self.x_grid[None, None, :], self.shape)

    def weights_mesh(self) -> np.ndarray:
        """求積重みを場の形状へ放送した配列"""
        return np.broadcast_to(self.rapid_w[:, None, None], self.shape)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(n_r={self.n_r}, n_types={self.n_types}, "
            f"n_x={self.n_x})"
        )
