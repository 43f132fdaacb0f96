"""数値コアの例外と警告を定義するモジュール

- 特異な線形方程式（SingularSystemError）
- 有効速度計算での0除算（DivisionDegeneracyError）
- 陰的反復の非収束（NonConvergenceWarning / NonConvergenceError）

カーネル構築時の 0/0 による NaN はエラーではなく 0 として扱います。
"""

from typing import Optional, Sequence, Tuple

import numpy as np


class GHDError(RuntimeError):
    """GHD数値コアの基底例外"""


class SingularSystemError(GHDError):
    """位置ごとの稠密線形方程式が特異または悪条件の場合の例外"""

    def __init__(
        self,
        context: str,
        positions: Sequence[int],
        x_values: Optional[Sequence[float]] = None,
        condition_numbers: Optional[Sequence[float]] = None,
    ):
        self.context = context
        self.positions = tuple(int(i) for i in positions)
        self.x_values = tuple(float(x) for x in x_values) if x_values is not None else ()
        self.condition_numbers = (
            tuple(float(c) for c in condition_numbers)
            if condition_numbers is not None
            else ()
        )
        if self.x_values:
            locations = ", ".join(
                f"ix={i} (x={x:.6g})" for i, x in zip(self.positions, self.x_values)
            )
        else:
            locations = ", ".join(f"ix={i}" for i in self.positions)
        super().__init__(f"{context}: 線形方程式が特異です [{locations}]")


class DivisionDegeneracyError(GHDError, ZeroDivisionError):
    """ドレスされた運動量微分がほぼ0となる場合の例外"""

    def __init__(self, context: str, indices: np.ndarray, threshold: float):
        self.context = context
        self.indices: Tuple[Tuple[int, int, int], ...] = tuple(
            tuple(int(v) for v in idx) for idx in np.atleast_2d(indices)
        )
        self.threshold = threshold
        shown = ", ".join(
            f"(ir={ir}, type={it}, ix={ix})" for ir, it, ix in self.indices[:5]
        )
        if len(self.indices) > 5:
            shown += f", ... ({len(self.indices)}点)"
        super().__init__(
            f"{context}: |dp/dr^dr| < {threshold:g} となるグリッド点があります [{shown}]"
        )


class NonConvergenceError(GHDError):
    """陰的出発点反復が最大反復回数内に収束しなかった場合の例外"""

    def __init__(self, iterations: int, residual: float, tolerance: float):
        self.iterations = iterations
        self.residual = residual
        self.tolerance = tolerance
        super().__init__(
            f"出発点の反復が収束しませんでした: 反復回数 = {iterations}, "
            f"残差 = {residual:.3e}, 許容誤差 = {tolerance:.3e}"
        )


class NonConvergenceWarning(RuntimeWarning):
    """陰的出発点反復が収束しなかったことを示す警告"""
