"""重み付き整数分割の列挙

Σ_j j·m_j = n (m_j ≥ 0, j = 1..n) を満たす整数列 (m_1, ..., m_n) をすべて列挙します。
各列は n の分割において部分 j が現れる回数に対応し、列の総数は分割数 p(n) に等しくなります。
"""

from typing import List, Tuple

MSequence = Tuple[int, ...]


def find_m_sequences(n: int) -> List[MSequence]:
    """Σ_j j·m_j = n を満たす列をすべて求める

    Args:
        n: 正の整数

    Returns:
        長さ n のタプルのリスト（m_1 の大きい順）
    """
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise ValueError(f"nは正の整数である必要があります: {n!r}")
    return _search(1, (), n, n, [])


def _search(
    j: int,
    prefix: MSequence,
    remainder: int,
    n: int,
    found: List[MSequence],
) -> List[MSequence]:
    """m_j に取りうる最大値から順に割り当て、残りを m_{j+1} 以降で探索する"""
    for m_j in range(remainder // j, -1, -1):
        rest = remainder - j * m_j
        sequence = prefix + (m_j,)
        if rest == 0:
            found.append(sequence + (0,) * (n - j))
        elif j < n:
            found = _search(j + 1, sequence, rest, n, found)
    return found
