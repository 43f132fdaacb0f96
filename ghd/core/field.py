"""位相空間上の場とカーネルテンソルを定義するモジュール

軸順序を (ラピディティ, 準粒子種, 位置) に固定した固定ランクの配列型を提供します。
放送の軸の取り違えを防ぐため、1次元配列は明示的なコンストラクタからのみ受け付けます。
"""

from __future__ import annotations

from typing import Union

import numpy as np

from .grid import PhaseSpaceGrid

Number = Union[int, float, np.floating]


class PhaseSpaceField:
    """位相空間上のスカラー場 (N_r, S, N_x)"""

    # ndarray との演算でも反射演算子を使わせる
    __array_ufunc__ = None

    def __init__(self, grid: PhaseSpaceGrid, initial_value=0.0):
        """場を初期化

        Args:
            grid: 位相空間グリッド
            initial_value: スカラー、または (N_r, S, N_x) へ放送可能な3次元配列

        Raises:
            ValueError: 配列の形状がグリッドと一致しない場合
            TypeError: 未対応の初期値型の場合
        """
        self._grid = grid

        if isinstance(initial_value, PhaseSpaceField):
            if initial_value.grid is not grid:
                raise ValueError("グリッド情報が一致しません")
            initial_value = initial_value.data
        if np.isscalar(initial_value):
            self._data = np.full(grid.shape, float(initial_value))
        elif hasattr(initial_value, "shape"):
            array = np.asarray(initial_value, dtype=float)
            if array.ndim != 3:
                raise ValueError(
                    f"場の配列は3次元 (N_r, S, N_x) である必要があります: shape={array.shape}"
                )
            try:
                self._data = np.array(np.broadcast_to(array, grid.shape))
            except ValueError:
                raise ValueError(
                    f"初期値の形状 {array.shape} がグリッド {grid.shape} と一致しません"
                ) from None
        else:
            raise TypeError(f"未対応の初期値型: {type(initial_value)}")

    @classmethod
    def from_position(cls, grid: PhaseSpaceGrid, values) -> PhaseSpaceField:
        """位置のみの配列 (N_x,) をラピディティ・種方向へ放送して生成"""
        values = np.asarray(values, dtype=float)
        if values.ndim == 0:
            return cls(grid, float(values))
        if values.shape != (grid.n_x,):
            raise ValueError(
                f"位置配列の形状 {values.shape} が ({grid.n_x},) と一致しません"
            )
        return cls(grid, values[None, None, :])

    @classmethod
    def from_rapidity(cls, grid: PhaseSpaceGrid, values) -> PhaseSpaceField:
        """ラピディティのみの配列 (N_r,) を種・位置方向へ放送して生成"""
        values = np.asarray(values, dtype=float)
        if values.ndim == 0:
            return cls(grid, float(values))
        if values.shape != (grid.n_r,):
            raise ValueError(
                f"ラピディティ配列の形状 {values.shape} が ({grid.n_r},) と一致しません"
            )
        return cls(grid, values[:, None, None])

    @property
    def grid(self) -> PhaseSpaceGrid:
        return self._grid

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def shape(self):
        return self._data.shape

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._data
        return self._data.astype(dtype)

    def copy(self) -> PhaseSpaceField:
        """深いコピーを作成"""
        return PhaseSpaceField(self._grid, np.array(self._data))

    def _operand(self, other):
        if isinstance(other, PhaseSpaceField):
            if self._grid is not other._grid:
                raise ValueError("グリッド情報が一致しません")
            return other._data
        if np.isscalar(other):
            return other
        return None

    def __add__(self, other) -> PhaseSpaceField:
        value = self._operand(other)
        if value is None:
            return NotImplemented
        return PhaseSpaceField(self._grid, self._data + value)

    __radd__ = __add__

    def __sub__(self, other) -> PhaseSpaceField:
        value = self._operand(other)
        if value is None:
            return NotImplemented
        return PhaseSpaceField(self._grid, self._data - value)

    def __rsub__(self, other) -> PhaseSpaceField:
        value = self._operand(other)
        if value is None:
            return NotImplemented
        return PhaseSpaceField(self._grid, value - self._data)

    def __mul__(self, other) -> PhaseSpaceField:
        value = self._operand(other)
        if value is None:
            return NotImplemented
        return PhaseSpaceField(self._grid, self._data * value)

    __rmul__ = __mul__

    def __truediv__(self, other) -> PhaseSpaceField:
        value = self._operand(other)
        if value is None:
            return NotImplemented
        return PhaseSpaceField(self._grid, self._data / value)

    def __pow__(self, power: Number) -> PhaseSpaceField:
        return PhaseSpaceField(self._grid, self._data**power)

    def __neg__(self) -> PhaseSpaceField:
        return PhaseSpaceField(self._grid, -self._data)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PhaseSpaceField):
            return NotImplemented
        if self._grid is not other._grid:
            return False
        return np.array_equal(self._data, other._data)

    __hash__ = None

    def min(self) -> float:
        return float(np.min(self._data))

    def max(self) -> float:
        return float(np.max(self._data))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self.shape})"


class KernelTensor:
    """2体カーネルテンソル (N_r, N_r, S, S, N_x)

    インデックスは (ラピディティ₁, ラピディティ₂, 種₁, 種₂, 位置) の順です。
    0/0 に由来する NaN は構築時に 0 へ置き換えます。
    """

    __array_ufunc__ = None

    def __init__(self, grid: PhaseSpaceGrid, data):
        self._grid = grid
        array = np.asarray(data, dtype=float)
        if array.ndim == 0:
            array = np.full(grid.kernel_shape, float(array))
        if array.ndim != 5:
            raise ValueError(
                f"カーネル配列は5次元である必要があります: shape={array.shape}"
            )
        try:
            array = np.array(np.broadcast_to(array, grid.kernel_shape))
        except ValueError:
            raise ValueError(
                f"カーネルの形状 {array.shape} がグリッド {grid.kernel_shape} と一致しません"
            ) from None
        array[np.isnan(array)] = 0.0
        self._data = array

    @property
    def grid(self) -> PhaseSpaceGrid:
        return self._grid

    @property
    def data(self) -> np.ndarray:
        return self._data

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._data
        return self._data.astype(dtype)

    def __mul__(self, other) -> KernelTensor:
        if isinstance(other, KernelTensor):
            other = other.data
        with np.errstate(invalid="ignore"):
            return KernelTensor(self._grid, self._data * np.asarray(other, dtype=float))

    __rmul__ = __mul__

    def __truediv__(self, other) -> KernelTensor:
        if isinstance(other, KernelTensor):
            other = other.data
        with np.errstate(divide="ignore", invalid="ignore"):
            return KernelTensor(self._grid, self._data / np.asarray(other, dtype=float))

    def __neg__(self) -> KernelTensor:
        return KernelTensor(self._grid, -self._data)

    def weighted(self, theta) -> KernelTensor:
        """K[r₁,r₂,s₁,s₂,x]·w(r₂)·θ(r₂,s₂,x) を返す"""
        occupation = self._grid.weights_mesh() * np.asarray(theta, dtype=float)
        return KernelTensor(self._grid, self._data * occupation[None, :, None, :, :])

    def apply(self, field) -> np.ndarray:
        """(ラピディティ₂, 種₂) について縮約した場 (N_r, S, N_x) を返す"""
        values = np.asarray(field, dtype=float)
        values = np.broadcast_to(values, self._grid.shape)
        return np.einsum("ijklx,jlx->ikx", self._data, values)

    def matrices(self) -> np.ndarray:
        """位置ごとの行列 (N_x, N_r·S, N_r·S) を返す"""
        n = self._grid.system_size
        stacked = np.transpose(self._data, (4, 0, 2, 1, 3))
        return stacked.reshape(self._grid.n_x, n, n)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self._data.shape})"
