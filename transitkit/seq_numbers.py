"""Compact encoding of GTFS stop sequence numbers."""

from __future__ import annotations

from collections.abc import Sequence


def is_based(seq: Sequence[int], start: int, inc: int) -> bool:
    """True if ``seq`` is ``start, start+inc, start+2*inc, ...``."""
    return all(x == start + i * inc for i, x in enumerate(seq))


def encode_seq_numbers(seq: Sequence[int]) -> list[int]:
    """Encode: [] for 0,1,..; [1] for 1,2,..; [10] for 10,20,..; else the list."""
    if is_based(seq, 0, 1):
        return []
    if is_based(seq, 1, 1):
        return [1]
    if is_based(seq, 10, 10):
        return [10]
    return list(seq)