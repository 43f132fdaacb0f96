import pytest

from ghd import find_m_sequences


def partition_count(n, largest=None):
    """最大部分が largest 以下の n の分割数"""
    if largest is None:
        largest = n
    if n == 0:
        return 1
    return sum(partition_count(n - k, k) for k in range(1, min(n, largest) + 1))


@pytest.mark.parametrize("n", [1, 2, 3, 4, 5, 6])
def test_sequences_are_partitions(n):
    sequences = find_m_sequences(n)
    assert len(sequences) == partition_count(n)
    assert len(set(sequences)) == len(sequences)
    for seq in sequences:
        assert len(seq) == n
        assert all(m >= 0 for m in seq)
        assert sum(j * m for j, m in enumerate(seq, start=1)) == n


def test_small_orders():
    assert find_m_sequences(1) == [(1,)]
    assert sorted(find_m_sequences(2)) == [(0, 1), (2, 0)]
    assert sorted(find_m_sequences(3)) == [(0, 0, 1), (1, 1, 0), (3, 0, 0)]


@pytest.mark.parametrize("n", [0, -2, 1.5, True])
def test_invalid_order(n):
    with pytest.raises(ValueError):
        find_m_sequences(n)
