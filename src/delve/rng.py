from __future__ import annotations

import logging
import random
import secrets
from typing import Callable, List, MutableSequence, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Every random decision in the engine goes through a zero-argument callable
# returning a float in [0.0, 1.0). Tests substitute scripted sequences.
Rng = Callable[[], float]

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


class Mulberry32:
    """Small seedable 32-bit PRNG.

    The whole generator state is one unsigned 32-bit integer, which makes it
    trivial to persist alongside a save and resume the exact same stream.
    """

    def __init__(self, seed: int) -> None:
        self.state = int(seed) & _MASK32

    def __call__(self) -> float:
        self.state = (self.state + 0x6D2B79F5) & _MASK32
        s = self.state
        t = _imul(s ^ (s >> 15), s | 1)
        t = ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK32) ^ t
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296.0

    def __repr__(self) -> str:
        return f"Mulberry32(state={self.state:#010x})"


def create_rng(seed: Optional[int] = None) -> Rng:
    """Return a seeded generator, or an unseeded default when seed is None."""
    if seed is None:
        logger.debug("create_rng: no seed given; using non-deterministic source")
        return random.Random().random
    return Mulberry32(seed)


def new_seed() -> int:
    """Draw a fresh 32-bit seed from the system entropy pool."""
    seed = secrets.randbits(32)
    logger.info("No seed provided; generated random seed: %d", seed)
    return seed


def derive_seed(seed: int, salt: int) -> int:
    """Derive a sibling stream seed so generation and gameplay draws stay independent."""
    return (int(seed) ^ salt) & _MASK32


def seed_from(rng: Rng) -> int:
    """Draw a 32-bit seed out of an existing stream (used for level transitions)."""
    return int(rng() * 4294967296.0) & _MASK32


def rand_int(rng: Rng, n: int) -> int:
    """Uniform integer in [0, n). Returns 0 for n <= 1."""
    if n <= 1:
        return 0
    return min(n - 1, int(rng() * n))


def choice(rng: Rng, seq: Sequence[T]) -> T:
    if not seq:
        raise IndexError("Cannot choose from an empty sequence")
    return seq[rand_int(rng, len(seq))]


def shuffle(rng: Rng, items: MutableSequence[T]) -> MutableSequence[T]:
    """In-place Fisher-Yates shuffle driven by rng. Returns the same sequence."""
    for i in range(len(items) - 1, 0, -1):
        j = rand_int(rng, i + 1)
        items[i], items[j] = items[j], items[i]
    return items


def weighted_choice(rng: Rng, weights: Sequence[tuple[T, float]]) -> T:
    """Select a key from (key, weight) pairs where weights are non-negative."""
    keys: List[T] = []
    cumulative: List[float] = []
    total = 0.0
    for key, w in weights:
        if w < 0:
            raise ValueError(f"Weight for {key!r} must be non-negative, got {w}")
        if w == 0:
            continue
        total += w
        keys.append(key)
        cumulative.append(total)
    if total == 0:
        raise ValueError("All weights are zero; cannot make a weighted choice")
    r = rng() * total
    for i, c in enumerate(cumulative):
        if r < c:
            return keys[i]
    return keys[-1]
