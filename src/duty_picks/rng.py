"""Reproducible bit source for the draw.

The seeded generator is ChaCha with 12 rounds, keyed by expanding the 64-bit
seed through the PCG32 output function. With the same seed, every conforming
implementation produces the same 32-bit word stream, which together with the
sampling procedure in selector.py pins the selection exactly.
"""
from __future__ import annotations
from typing import List, Optional, Protocol

import numpy as np

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

# PCG32 constants used to expand a u64 seed into a 256-bit key
PCG_MUL = 6364136223846793005
PCG_INC = 11634580027462260723

# "expand 32-byte k"
SIGMA = (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)


class BitSource(Protocol):
    def next_u32(self) -> int: ...


def _rotl(v: int, n: int) -> int:
    return ((v << n) & MASK32) | (v >> (32 - n))


def _rotr(v: int, n: int) -> int:
    return ((v >> n) | (v << (32 - n))) & MASK32


def _quarter(s: List[int], a: int, b: int, c: int, d: int) -> None:
    s[a] = (s[a] + s[b]) & MASK32; s[d] = _rotl(s[d] ^ s[a], 16)
    s[c] = (s[c] + s[d]) & MASK32; s[b] = _rotl(s[b] ^ s[c], 12)
    s[a] = (s[a] + s[b]) & MASK32; s[d] = _rotl(s[d] ^ s[a], 8)
    s[c] = (s[c] + s[d]) & MASK32; s[b] = _rotl(s[b] ^ s[c], 7)


def seed_to_key(seed: int) -> List[int]:
    """Eight key words from a u64 seed, one PCG32 step per word."""
    if not 0 <= seed <= MASK64:
        raise ValueError(f"seed must be an unsigned 64-bit integer, got {seed}")
    state = seed
    words = []
    for _ in range(8):
        state = (state * PCG_MUL + PCG_INC) & MASK64
        xorshifted = (((state >> 18) ^ state) >> 27) & MASK32
        words.append(_rotr(xorshifted, state >> 59))
    return words


class ChaCha12:
    """ChaCha12 keystream as a word generator.

    State layout: 4 constant words, 8 key words, a 64-bit block counter in
    words 12-13 and a zero 64-bit stream id in words 14-15.
    """

    DOUBLE_ROUNDS = 6

    def __init__(self, key: List[int]):
        if len(key) != 8:
            raise ValueError("ChaCha12 needs exactly 8 key words")
        self._key = [int(w) & MASK32 for w in key]
        self._counter = 0
        self._block: List[int] = []
        self._index = 16

    @classmethod
    def seeded(cls, seed: int) -> "ChaCha12":
        return cls(seed_to_key(seed))

    @classmethod
    def from_entropy(cls) -> "ChaCha12":
        # SeedSequence() with no argument pulls fresh OS entropy
        key = np.random.SeedSequence().generate_state(8, dtype=np.uint32)
        return cls([int(w) for w in key])

    def _refill(self) -> None:
        init = list(SIGMA) + self._key + [
            self._counter & MASK32,
            (self._counter >> 32) & MASK32,
            0,
            0,
        ]
        s = list(init)
        for _ in range(self.DOUBLE_ROUNDS):
            _quarter(s, 0, 4, 8, 12)
            _quarter(s, 1, 5, 9, 13)
            _quarter(s, 2, 6, 10, 14)
            _quarter(s, 3, 7, 11, 15)
            _quarter(s, 0, 5, 10, 15)
            _quarter(s, 1, 6, 11, 12)
            _quarter(s, 2, 7, 8, 13)
            _quarter(s, 3, 4, 9, 14)
        self._block = [(x + y) & MASK32 for x, y in zip(s, init)]
        self._counter = (self._counter + 1) & MASK64
        self._index = 0

    def next_u32(self) -> int:
        if self._index >= 16:
            self._refill()
        v = self._block[self._index]
        self._index += 1
        return v


def make_source(seed: Optional[int] = None) -> ChaCha12:
    if seed is None:
        return ChaCha12.from_entropy()
    return ChaCha12.seeded(seed)


def gen_range_inclusive(source: BitSource, high: int) -> int:
    """Uniform integer in [0, high] by widening multiply with rejection."""
    rng = (high + 1) & MASK32
    if rng == 0:
        return source.next_u32()
    # conservative zone; rejects slightly more than strictly needed
    zone = ((rng << (32 - rng.bit_length())) - 1) & MASK32
    while True:
        m = source.next_u32() * rng
        if m & MASK32 <= zone:
            return m >> 32
