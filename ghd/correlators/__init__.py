"""局所相関関数パッケージ

重み付き整数分割の列挙と、線形漸化式による局所相関関数の計算を提供します。
"""

from .partitions import find_m_sequences
from .local import CorrelatorEngine

__all__ = ["find_m_sequences", "CorrelatorEngine"]
