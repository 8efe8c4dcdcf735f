import time
from typing import Optional

import numpy as np


class RandomSource:
    """Seedable uniform [0, 1) stream.

    Draws come from numpy's PCG64 generator in blocks and are handed out one at a
    time, so the sequence depends only on the seed. Pass the same instance to every
    consumer of a run; there is no module-level generator.
    """

    BLOCK_SIZE = 4096

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = time.time_ns() % (2 ** 32)
        self.seed = int(seed)
        self._generator = np.random.default_rng(self.seed)
        self._buffer = np.empty(0)
        self._index = 0
        self.draws = 0

    def next(self) -> float:
        if self._index >= len(self._buffer):
            self._buffer = self._generator.random(self.BLOCK_SIZE)
            self._index = 0
        value = float(self._buffer[self._index])
        self._index += 1
        self.draws += 1
        return value

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed}, draws={self.draws})"
