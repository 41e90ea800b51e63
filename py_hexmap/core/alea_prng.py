"""
Seeded random stream shared by every generation stage.

The generator is Johannes Baagøe's Alea (three lag registers plus a carry,
seeded through his Mash hash). A stage never shares an instance: it builds
one from its own seed and a label, e.g. ``AleaPRNG([seed, "rivers"])``.
"""

FRAC_32 = 2.3283064365386963e-10  # 2**-32
MASH_START = 0xEFC8249D
MASH_FACTOR = 0.02519603282416938
ALEA_MULTIPLIER = 2091639


def _uint32(n):
    return int(n) & 0xFFFFFFFF


class Mash:
    """Stateful string hash feeding the Alea registers; returns values in [0, 1)."""

    def __init__(self):
        self.n = MASH_START

    def __call__(self, data) -> float:
        n = self.n
        for char in str(data):
            n += ord(char)
            h = MASH_FACTOR * n
            n = _uint32(h)
            h -= n
            h *= n
            n = _uint32(h)
            h -= n
            n += h * 0x100000000
        self.n = n
        return _uint32(n) * FRAC_32


def _seed_parts(seed) -> list:
    if hasattr(seed, "__iter__") and not isinstance(seed, str):
        return list(seed)
    return [seed]


class AleaPRNG:
    """
    Alea stream plus the draws the pipeline needs (uniform, randint, chance,
    choice, shuffle).

    ``seed`` is a value or a sequence of values. Each value is hashed through
    its string form, so ``42`` and ``"42"`` seed the same stream while
    ``[42, "rivers"]`` and ``[42, "lakes"]`` do not. ``call_count`` counts
    raw draws.
    """

    def __init__(self, seed):
        mash = Mash()
        registers = [mash(" "), mash(" "), mash(" ")]
        for part in _seed_parts(seed):
            for i in range(3):
                registers[i] -= mash(part)
                if registers[i] < 0:
                    registers[i] += 1

        self.s0, self.s1, self.s2 = registers
        self.c = 1
        self.call_count = 0

    def random(self) -> float:
        """Next value in [0, 1)."""
        self.call_count += 1
        t = ALEA_MULTIPLIER * self.s0 + self.c * FRAC_32
        self.c = int(t)
        self.s0, self.s1, self.s2 = self.s1, self.s2, t - self.c
        return self.s2

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.random()

    def randint(self, low: int, high: int) -> int:
        """Integer in [low, high], both ends inclusive."""
        if high < low:
            raise ValueError(f"Empty range [{low}, {high}]")
        return low + int(self.random() * (high - low + 1))

    def chance(self, probability: float) -> bool:
        """One draw; True when it falls below ``probability``."""
        return self.random() < probability

    def choice(self, seq):
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[int(self.random() * len(seq))]

    def shuffle(self, items: list) -> None:
        """Fisher-Yates, in place."""
        for i in range(len(items) - 1, 0, -1):
            j = int(self.random() * (i + 1))
            items[i], items[j] = items[j], items[i]
