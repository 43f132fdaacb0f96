"""位置ごとの稠密線形方程式を解くモジュール

ドレッシングと相関関数の漸化式は、どちらも各位置サンプルで独立な
サイズ N_r·S の稠密線形方程式 (I − K)·u = f を解きます。
位置方向は独立なので、バッチとしてまとめて解きます。
"""

from typing import Optional, Tuple

import jax.numpy as jnp
import numpy as np
from jax import jit

from ..core import KernelTensor, PhaseSpaceGrid, SingularSystemError


@jit
def _solve_with_condition(
    matrices: jnp.ndarray, rhs: jnp.ndarray
) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """バッチ線形方程式の解と条件数を計算"""
    solution = jnp.linalg.solve(matrices, rhs[..., None])[..., 0]
    condition = jnp.linalg.cond(matrices)
    return solution, condition


def to_system(values, grid: PhaseSpaceGrid) -> np.ndarray:
    """場 (N_r, S, N_x) を位置ごとのベクトル (N_x, N_r·S) へ変換"""
    values = np.broadcast_to(np.asarray(values, dtype=float), grid.shape)
    return np.transpose(values, (2, 0, 1)).reshape(grid.n_x, grid.system_size)


def from_system(vectors: np.ndarray, grid: PhaseSpaceGrid) -> np.ndarray:
    """位置ごとのベクトル (N_x, N_r·S) を場 (N_r, S, N_x) へ変換"""
    vectors = np.asarray(vectors).reshape(grid.n_x, grid.n_r, grid.n_types)
    return np.transpose(vectors, (1, 2, 0))


def identity_minus(kernel: KernelTensor) -> np.ndarray:
    """位置ごとの行列 I − K (N_x, N_r·S, N_r·S) を構築"""
    matrices = kernel.matrices()
    eye = np.eye(kernel.grid.system_size)
    return eye[None, :, :] - matrices


def solve_per_position(
    matrices: np.ndarray,
    rhs,
    grid: PhaseSpaceGrid,
    context: str,
    condition_limit: Optional[float] = None,
) -> np.ndarray:
    """各位置で稠密線形方程式を解く

    Args:
        matrices: 係数行列 (N_x, N_r·S, N_r·S)
        rhs: 右辺の場 (N_r, S, N_x)
        grid: 位相空間グリッド
        context: エラーメッセージに含める呼び出し元の名前
        condition_limit: 条件数の上限（Noneの場合は 1/機械イプシロン）

    Returns:
        解の場 (N_r, S, N_x)

    Raises:
        SingularSystemError: 特異・悪条件、または解が有限でない位置がある場合
    """
    if condition_limit is None:
        condition_limit = 1.0 / np.finfo(float).eps

    solution, condition = _solve_with_condition(
        jnp.asarray(matrices), jnp.asarray(to_system(rhs, grid))
    )
    solution = np.asarray(solution)
    condition = np.asarray(condition)

    bad = (
        ~np.isfinite(condition)
        | (condition > condition_limit)
        | ~np.all(np.isfinite(solution), axis=1)
    )
    if np.any(bad):
        positions = np.flatnonzero(bad)
        raise SingularSystemError(
            context,
            positions,
            x_values=grid.x_grid[positions],
            condition_numbers=condition[positions],
        )

    return from_system(solution, grid)
