"""
Alea pseudo-random number generator.

Based on Johannes Baagøe's Alea algorithm. Every stochastic step of a
terrain generation run (height jitter, decoration sampling) draws from a
single instance so that a run is fully reproducible from its seed.
"""

_TWO_POW_32 = 0x100000000
_TWO_POW_NEG_32 = 2.3283064365386963e-10


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class AleaPRNG:
    """
    Seeded Alea stream returning floats in [0, 1).

    Not thread-safe: a generation run owns exactly one instance and
    consumes it sequentially.
    """

    def __init__(self, seed: int):
        """Initialize with an integer seed."""
        self.seed = seed
        self.call_count = 0

        mash_n = 0xEFC8249D

        def mash(data):
            nonlocal mash_n
            for char in str(data):
                mash_n = mash_n + ord(char)
                h = 0.02519603282416938 * mash_n
                mash_n = _uint32(h)
                h -= mash_n
                h *= mash_n
                mash_n = _uint32(h)
                h -= mash_n
                mash_n += h * _TWO_POW_32
            return _uint32(mash_n) * _TWO_POW_NEG_32

        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        self.s0 -= mash(seed)
        if self.s0 < 0:
            self.s0 += 1
        self.s1 -= mash(seed)
        if self.s1 < 0:
            self.s1 += 1
        self.s2 -= mash(seed)
        if self.s2 < 0:
            self.s2 += 1

    def next_uniform(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * _TWO_POW_NEG_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def uniform(self, low: float, high: float) -> float:
        """Interpolate between low and high by the next draw."""
        return low + (high - low) * self.next_uniform()

    def draw_many(self, count: int) -> list:
        """Draw count values in stream order."""
        return [self.next_uniform() for _ in range(count)]
