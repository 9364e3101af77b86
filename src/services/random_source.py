"""Randomness source for the random masking strategies"""

import random
import string
from typing import Optional

ALPHANUMERIC = string.ascii_letters + string.digits
NUMERIC = string.digits


class RandomSource:
    """
    Draws replacement characters for RANDOM and FORMAT_PRESERVING

    Backed by the OS entropy pool unless a generator is supplied.
    Pass a seeded ``random.Random`` to get reproducible output in tests.
    """

    def __init__(self, generator: Optional[random.Random] = None):
        self.generator = generator or random.SystemRandom()

    def random_string(self, length: int) -> str:
        """Return ``length`` ASCII letters and digits"""
        return self._draw(ALPHANUMERIC, length)

    def random_numeric(self, length: int) -> str:
        """Return ``length`` decimal digits"""
        return self._draw(NUMERIC, length)

    def _draw(self, alphabet: str, length: int) -> str:
        if length <= 0:
            return ""
        return "".join(self.generator.choice(alphabet) for _ in range(length))
