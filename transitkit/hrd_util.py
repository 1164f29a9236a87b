"""Small helpers for HRD data."""

from __future__ import annotations


def hhmm_to_min(hhmm: int) -> int:
    """Convert an HHMM integer to minutes; negative values pass through."""
    if hhmm < 0:
        return hhmm
    return (hhmm // 100) * 60 + hhmm % 100


def iso_8859_1_to_utf8(data: bytes) -> str:
    """Decode ISO-8859-1 bytes into text."""
    return bytes(data).decode("latin-1")


def parse_eva_number(s: str) -> int:
    """Parse an EVA station number, raising ``ValueError`` if invalid."""
    text = s.strip()
    if not text.isdigit():
        raise ValueError(f"invalid eva number: {s!r}")
    return int(text)