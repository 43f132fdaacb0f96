"""物理モデルパッケージ

可積分モデルの基底クラス、Lieb-Liniger模型、保存量密度の計算を提供します。
"""

from .model import IntegrableModel
from .lieb_liniger import LiebLinigerModel
from .charges import compute_charges, SUPPORTED_CHARGES

__all__ = ["IntegrableModel", "LiebLinigerModel", "compute_charges", "SUPPORTED_CHARGES"]
