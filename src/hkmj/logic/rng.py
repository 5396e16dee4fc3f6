"""
Random number generation for wall shuffling, dice and AI decisions.

Uses PCG64DXSM (Permuted Congruential Generator with DXSM output function):
1. Generate a cryptographic seed (32 bytes) via the secrets module
2. Derive the generator state via SHA512 with domain separation (versioned prefix)
3. Use PCG64DXSM to generate 64-bit random values
4. Apply Fisher-Yates shuffle with rejection sampling for an unbiased permutation

A whole match draws from one TableRng, so dice, every round's wall and all
AI coin flips are reproducible from a single seed. Tests subclass TableRng
to script specific outcomes (fixed dice, fixed coin flips).
"""

from __future__ import annotations

import hashlib
import secrets
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Sequence

SEED_BYTES = 32
RNG_VERSION = "pcg64dxsm-v1"
_DOMAIN_PREFIX = b"hkmj-table-v1:"  # Domain separator for hash-based derivation (versioned)
DIE_FACES = 6

# PCG64DXSM constants
_PCG_MULTIPLIER = 0x2360ED051FC65DA44385DF649FCCF645
_PCG_DXSM_MUL = 0xDA942042E4DD58B5  # DXSM output permutation multiplier
_UINT128_MASK = (1 << 128) - 1
_UINT64_MASK = (1 << 64) - 1
_FLOAT_BITS = 53

T = TypeVar("T")


def validate_seed_hex(seed_hex: str) -> None:
    """Validate that a seed string is the correct hex format.

    Raises TypeError for non-string input, ValueError for invalid format.
    """
    if not isinstance(seed_hex, str):
        raise TypeError(f"Seed must be a string, got {type(seed_hex).__name__}")
    expected_length = SEED_BYTES * 2
    if len(seed_hex) != expected_length:
        raise ValueError(f"Seed must be exactly {expected_length} hex characters, got {len(seed_hex)}")
    try:
        bytes.fromhex(seed_hex)
    except ValueError:
        raise ValueError("Seed contains invalid hex characters") from None


class PCG64DXSM:
    """
    Pure Python PCG64DXSM (Permuted Congruential Generator).

    Uses a 128-bit LCG state with the full 128-bit multiplier and the DXSM
    (double-xorshift-multiply) output permutation for 64-bit output.
    """

    def __init__(self, state: int, increment: int) -> None:
        self._inc = ((increment << 1) | 1) & _UINT128_MASK  # increment must be odd
        self._state = (state + self._inc) & _UINT128_MASK
        self._state = (self._state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK
        self._state = (self._state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK

    def next_uint64(self) -> int:
        """Generate the next 64-bit unsigned integer and advance state."""
        state = self._state
        hi = (state >> 64) & _UINT64_MASK
        lo = state & _UINT64_MASK
        lo = lo | 1

        hi ^= hi >> 32
        hi = (hi * _PCG_DXSM_MUL) & _UINT64_MASK
        hi ^= hi >> 48
        hi = (hi * lo) & _UINT64_MASK

        self._state = (state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK

        return hi


def generate_seed() -> str:
    """Generate a cryptographic seed as a hex string."""
    return secrets.token_bytes(SEED_BYTES).hex()


def _derive_pcg(seed_hex: str) -> PCG64DXSM:
    """
    Derive a PCG64DXSM from SHA512 of the domain-separated seed.

    The first 16 bytes of the digest become the PCG state and the next
    16 bytes the increment.
    """
    validate_seed_hex(seed_hex)
    derived = hashlib.sha512(_DOMAIN_PREFIX + bytes.fromhex(seed_hex)).digest()
    state = int.from_bytes(derived[:16], byteorder="little")
    increment = int.from_bytes(derived[16:32], byteorder="little")
    return PCG64DXSM(state, increment)


def _bounded_uint64(pcg: PCG64DXSM, bound: int) -> int:
    """
    Generate an unbiased random integer in [0, bound) via rejection sampling.

    Rejects values from the partial final bucket to eliminate modulo bias.
    """
    if bound <= 0 or bound > (1 << 64):
        raise ValueError("bound must be in (0, 2^64]")
    limit = (1 << 64) - ((1 << 64) % bound)
    while True:
        r = pcg.next_uint64()
        if r < limit:
            return r % bound


class TableRng:
    """
    The single random source shared by a table.

    Every random decision in the engine goes through one of these methods so
    tests can replace any of them with scripted values.
    """

    def __init__(self, seed_hex: str | None = None) -> None:
        self.seed = seed_hex if seed_hex is not None else generate_seed()
        self._pcg = _derive_pcg(self.seed)

    def randrange(self, bound: int) -> int:
        """Return an integer in [0, bound)."""
        return _bounded_uint64(self._pcg, bound)

    def random(self) -> float:
        """Return a float in [0.0, 1.0)."""
        return (self._pcg.next_uint64() >> (64 - _FLOAT_BITS)) / (1 << _FLOAT_BITS)

    def roll_die(self) -> int:
        """Roll one six-sided die."""
        return self.randrange(DIE_FACES) + 1

    def choice(self, items: Sequence[T]) -> T:
        """Pick one element uniformly."""
        if not items:
            raise ValueError("cannot choose from an empty sequence")
        return items[self.randrange(len(items))]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """
        Return a Fisher-Yates (Knuth) shuffled copy of items.

        For i in n-1..1: swap result[i] with result[bounded(i + 1)].
        """
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.randrange(i + 1)
            result[i], result[j] = result[j], result[i]
        return result
