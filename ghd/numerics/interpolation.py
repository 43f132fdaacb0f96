"""位相空間の補間

グリッド上の場を任意の (ラピディティ, 位置) 座標で補間します。
準粒子種ごとに正則格子上の線形補間を行います。
"""

from typing import Union

import numpy as np
from scipy.interpolate import RegularGridInterpolator

from ..core import PhaseSpaceField, PhaseSpaceGrid


def interp_phase_space(
    field: Union[PhaseSpaceField, np.ndarray],
    rapid_query,
    x_query,
    extrapolate: bool = True,
    grid: PhaseSpaceGrid = None,
) -> PhaseSpaceField:
    """場を位相空間の任意点で補間

    Args:
        field: グリッド上の場 (N_r, S, N_x)
        rapid_query: 問い合わせ点のラピディティ（場の形状へ放送可能）
        x_query: 問い合わせ点の位置（場の形状へ放送可能）
        extrapolate: Trueの場合は領域外を線形外挿、Falseの場合は境界値で一定

    Returns:
        補間された場 (N_r, S, N_x)
    """
    if isinstance(field, PhaseSpaceField):
        grid = field.grid
        values = field.data
    else:
        if grid is None:
            raise ValueError("配列を補間する場合はgridを指定する必要があります")
        values = PhaseSpaceField(grid, field).data

    rapid_query = np.broadcast_to(np.asarray(rapid_query, dtype=float), grid.shape)
    x_query = np.broadcast_to(np.asarray(x_query, dtype=float), grid.shape)

    if not extrapolate:
        rapid_query = np.clip(rapid_query, grid.rapid_grid[0], grid.rapid_grid[-1])
        x_query = np.clip(x_query, grid.x_grid[0], grid.x_grid[-1])

    result = np.empty(grid.shape)
    for species in range(grid.n_types):
        result[:, species, :] = _interp_species(
            grid,
            values[:, species, :],
            rapid_query[:, species, :],
            x_query[:, species, :],
        )
    return PhaseSpaceField(grid, result)


def _interp_species(
    grid: PhaseSpaceGrid,
    values: np.ndarray,
    rapid_query: np.ndarray,
    x_query: np.ndarray,
) -> np.ndarray:
    """1種の (N_r, N_x) 平面で補間"""
    axes, points = [], []
    # サンプル点が1つの軸は定数として扱う
    if grid.n_r > 1:
        axes.append(grid.rapid_grid)
        points.append(rapid_query.ravel())
    else:
        values = values[0, :]
    if grid.n_x > 1:
        axes.append(grid.x_grid)
        points.append(x_query.ravel())
    else:
        values = values[..., 0]

    if not axes:
        return np.full(rapid_query.shape, float(values))

    interpolator = RegularGridInterpolator(
        tuple(axes), values, method="linear", bounds_error=False, fill_value=None
    )
    return interpolator(np.stack(points, axis=-1)).reshape(rapid_query.shape)
