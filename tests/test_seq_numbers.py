from transitkit.seq_numbers import encode_seq_numbers, is_based


def test_is_based():
    assert is_based([0, 1, 2], 0, 1)
    assert not is_based([0, 2], 0, 1)
    assert is_based([], 5, 5)


def test_zero_based_is_empty():
    assert encode_seq_numbers([0, 1, 2, 3]) == []


def test_one_based():
    assert encode_seq_numbers([1, 2, 3]) == [1]


def test_ten_based():
    assert encode_seq_numbers([10, 20, 30]) == [10]


def test_irregular_kept():
    seq = [1, 5, 9]
    assert encode_seq_numbers(seq) == seq