"""Mersenne Twister random source with the game's range helpers."""

from __future__ import annotations

import time

_N = 624
_M = 397
_MATRIX_A = 0x9908B0DF
_UPPER = 0x80000000
_LOWER = 0x7FFFFFFF
_WORD = 0xFFFFFFFF
DEFAULT_SEED = 5489


def _to_signed(value: int) -> int:
    return value - (1 << 32) if value & 0x80000000 else value


def _trunc_mod(a: int, b: int) -> int:
    """Remainder with the sign of the dividend."""
    r = abs(a) % abs(b)
    return -r if a < 0 else r


class RandomSource:
    """32-bit MT19937 generator.

    Produces the same stream as the standard MT19937 for a given 32-bit seed.
    """

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        self._state = [0] * _N
        self._index = _N
        self.seed(seed)

    def seed(self, value: int) -> None:
        mt = self._state
        mt[0] = value & _WORD
        for i in range(1, _N):
            prev = mt[i - 1]
            mt[i] = (1812433253 * (prev ^ (prev >> 30)) + i) & _WORD
        self._index = _N

    def seed_from_time(self) -> None:
        self.seed(int(time.time()))

    def _twist(self) -> None:
        mt = self._state
        for i in range(_N):
            y = (mt[i] & _UPPER) | (mt[(i + 1) % _N] & _LOWER)
            mt[i] = mt[(i + _M) % _N] ^ (y >> 1) ^ (_MATRIX_A if y & 1 else 0)
        self._index = 0

    def next_uint(self) -> int:
        """Next raw 32-bit output."""
        if self._index >= _N:
            self._twist()
        y = self._state[self._index]
        self._index += 1
        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & _WORD

    def uint_to(self, high: int) -> int:
        """Unsigned value in [0, high]."""
        if high < 0:
            raise ValueError(f"high must not be negative, got {high}")
        return self.next_uint() % (high + 1)

    def uint_between(self, low: int, high: int) -> int:
        """Unsigned value in [low, high]."""
        if high < low:
            raise ValueError(f"empty range [{low}, {high}]")
        return self.next_uint() % (high + 1 - low) + low

    def int_to(self, high: int) -> int:
        """Raw output read as signed, reduced modulo ``high + 1``.

        The result keeps the sign of the raw value, so it lies in
        [-high, high].
        """
        if high < 0:
            raise ValueError(f"high must not be negative, got {high}")
        return _trunc_mod(_to_signed(self.next_uint()), high + 1)

    def int_between(self, low: int, high: int) -> int:
        """Signed raw output reduced modulo the range width, plus ``low``."""
        if high < low:
            raise ValueError(f"empty range [{low}, {high}]")
        return _trunc_mod(_to_signed(self.next_uint()), high + 1 - low) + low

    def unit_float(self) -> float:
        """Value in [0, 1]."""
        return self.next_uint() / _WORD

    def float_to(self, high: float) -> float:
        return self.unit_float() * high

    def float_between(self, low: float, high: float) -> float:
        return self.unit_float() * (high - low) + low