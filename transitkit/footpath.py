"""Compact footpath: a target location and a walking duration packed in 32 bits."""

from __future__ import annotations

import logging
from dataclasses import dataclass

_log = logging.getLogger(__name__)

TOTAL_BITS = 32
TARGET_BITS = 22
DURATION_BITS = TOTAL_BITS - TARGET_BITS
MAX_VALUE = (1 << TOTAL_BITS) - 1
MAX_DURATION = MAX_VALUE >> TARGET_BITS
MAX_TARGET = MAX_VALUE >> DURATION_BITS


@dataclass(frozen=True)
class Footpath:
    """A footpath to ``target`` (location index) taking ``duration`` minutes."""

    target: int
    duration: int

    TARGET_BITS = TARGET_BITS
    DURATION_BITS = DURATION_BITS
    MAX_DURATION = MAX_DURATION

    def __post_init__(self) -> None:
        if not 0 <= self.target < MAX_TARGET:
            raise ValueError("station index overflow")
        if self.duration < 0:
            raise ValueError("negative footpath duration")
        if self.duration > MAX_DURATION:
            _log.error(
                "footpath overflow: %s > %s adjusted to %s",
                self.duration,
                MAX_DURATION,
                MAX_DURATION,
            )
            object.__setattr__(self, "duration", MAX_DURATION)

    @classmethod
    def from_value(cls, value: int) -> "Footpath":
        """Unpack a footpath from its 32-bit representation."""
        if not 0 <= value <= MAX_VALUE:
            raise ValueError("footpath value out of range")
        return cls(value & ((1 << TARGET_BITS) - 1), value >> TARGET_BITS)

    def value(self) -> int:
        """Pack this footpath into its 32-bit representation."""
        return self.target | (self.duration << TARGET_BITS)

    def __str__(self) -> str:
        return f"({self.target}, {self.duration}min)"