"""Small numeric helpers: RC4 random stream, power-of-two math, byte sizes."""

from __future__ import annotations

import re

__all__ = ["Rand", "is_pow2", "to_pow2", "bytes_to_size", "size_to_bytes"]

_UINT64_MASK = (1 << 64) - 1
_INT64_MAX = (1 << 63) - 1
_INT64_MIN = -(1 << 63)

_SIZE_SUFFIXES = ("KB", "MB", "GB", "TB", "PB", "EB")
_SIZE_THRESHOLD = 0xFFFCCCCCCCCCCCC

_UNIT_MULTIPLIERS = {
    "b": 1,
    "k": 1024,
    "m": 1024**2,
    "g": 1024**3,
    "t": 1024**4,
    "p": 1024**5,
    "e": 1024**6,
}

_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


class Rand:
    """RC4 pseudo random byte generator seeded with exactly 256 bytes."""

    SEED_SIZE = 256

    def __init__(self, seed: bytes) -> None:
        seed = bytes(seed)
        if len(seed) != self.SEED_SIZE:
            raise ValueError(f"seed must be {self.SEED_SIZE} bytes, got {len(seed)}")

        state = bytearray(seed)
        j = 0
        for i, seed_byte in enumerate(seed):
            j = (j + state[i] + seed_byte) & 0xFF
            state[i], state[j] = state[j], state[i]

        self._state = state
        self._i = 0
        self._j = j

    def read(self, size: int) -> bytes:
        """Return the next ``size`` bytes of the stream; empty if size <= 0."""
        if size <= 0:
            return b""

        state = self._state
        i, j = self._i, self._j
        out = bytearray(size)
        for n in range(size):
            i = (i + 1) & 0xFF
            t = state[i]
            j = (j + t) & 0xFF
            state[i] = state[j]
            state[j] = t
            out[n] = state[(t + state[i]) & 0xFF]

        self._i, self._j = i, j
        return bytes(out)


def is_pow2(num: int) -> bool:
    """Return True if ``num`` is a power of two."""
    return num > 0 and (num & (num - 1)) == 0


def to_pow2(size: int) -> int:
    """Return the smallest power of two not less than ``size`` (64-bit wrap)."""
    if size < 0 or size > _UINT64_MASK:
        raise ValueError("size must fit in an unsigned 64-bit integer")
    if size == 0:
        return 1
    return (1 << (size - 1).bit_length()) & _UINT64_MASK


def bytes_to_size(val: int) -> str:
    """Format a byte count in human readable form, e.g. 1024 -> '1.00 KB'."""
    if val < 0 or val > _UINT64_MASK:
        raise ValueError("value must fit in an unsigned 64-bit integer")

    if val < 1024:
        return f"{val} B"

    n = 0
    count = val
    for shift in (40, 30, 20, 10, 0):
        if val <= _SIZE_THRESHOLD >> shift:
            break
        n += 1
        count >>= 10

    return f"{count / 1024:.2f} {_SIZE_SUFFIXES[n]}"


def size_to_bytes(text: str) -> int:
    """Parse a size such as '10', '4k' or '2GB' into a number of bytes.

    Raises ValueError on malformed input or when the result does not fit
    in a signed 64-bit integer.
    """
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"no number in size: {text!r}")

    value = int(match.group(1))
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"number out of range: {text!r}")

    rest = text[match.end():]
    if not rest:
        return value
    if len(rest) > 2 or (len(rest) == 2 and rest[1].lower() != "b"):
        raise ValueError(f"invalid size suffix: {text!r}")

    multiplier = _UNIT_MULTIPLIERS.get(rest[0].lower())
    if multiplier is None:
        raise ValueError(f"invalid size suffix: {text!r}")

    result = value * multiplier
    if not _INT64_MIN <= result <= _INT64_MAX:
        raise ValueError(f"size out of range: {text!r}")
    return result