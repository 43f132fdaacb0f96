"""保存量密度の計算

    q_i(x) = (1/2π) Σ_{r,s} w(r)·θ(r,s,x)·(p')^dr(r,s,x)·h_i(r,s,x)

h_0 = 1（粒子数密度）、h_1 = p（運動量密度）、h_2 = e（エネルギー密度）です。
"""

from typing import Sequence, Union

import numpy as np

from ..core import PhaseSpaceField
from .model import IntegrableModel

SUPPORTED_CHARGES = (0, 1, 2)


def _bare_charge(model: IntegrableModel, index: int, t: float) -> PhaseSpaceField:
    if index == 0:
        return PhaseSpaceField(model.grid, 1.0)
    if index == 1:
        return model.bare_momentum(t)
    if index == 2:
        return model.bare_energy(t)
    raise ValueError(
        f"未対応の保存量インデックスです: {index} (対応: {SUPPORTED_CHARGES})"
    )


def compute_charges(
    model: IntegrableModel,
    dressing,
    theta,
    charge_index: Union[int, Sequence[int]],
    t: float,
) -> np.ndarray:
    """保存量密度を計算

    Args:
        model: 可積分モデル
        dressing: ドレッシングソルバー
        theta: 占有関数
        charge_index: 保存量のインデックス（整数またはその列）
        t: 時刻

    Returns:
        整数の場合は (N_x,)、列の場合は (len, N_x) の配列
    """
    indices = np.atleast_1d(charge_index)
    bare = [_bare_charge(model, int(i), t) for i in indices]

    theta_data = dressing.theta_array(theta)
    dp_dr = dressing.dress(model.momentum_rapid_deriv(t), theta_data, t)
    occupation = model.grid.weights_mesh() * theta_data * dp_dr.data / (2.0 * np.pi)

    densities = np.stack(
        [np.sum(occupation * h.data, axis=(0, 1)) for h in bare], axis=0
    )
    if np.ndim(charge_index) == 0:
        return densities[0]
    return densities
