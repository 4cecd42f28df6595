import math
import time
from typing import Optional, Sequence

import numpy as np

def resolve_seed(seed: int) -> int:
    """-1 asks for a seed taken from the microseconds of the current time."""
    if seed == -1:
        return int(time.time() * 1_000_000) % 1_000_000
    return seed

class GaussianSampler:
    """1D Gaussian source using the polar form of the Box-Muller transform."""

    def __init__(self, mean: float = 0.0, std: float = 1.0, seed: Optional[int] = None) -> None:
        self.mean = mean
        self.std = std
        self.rng = np.random.default_rng(seed)
        self._spare: Optional[float] = None

    def _polar_pair(self):
        while True:
            x1, x2 = 2.0 * self.rng.random(2) - 1.0
            w = x1 * x1 + x2 * x2
            if 0.0 < w < 1.0:
                break
        w = math.sqrt((-2.0 * math.log(w)) / w)
        return float(x1 * w), float(x2 * w)

    def draw(self) -> float:
        if self._spare is not None:
            value, self._spare = self._spare, None
            return value * self.std + self.mean
        y1, self._spare = self._polar_pair()
        return y1 * self.std + self.mean

    def __call__(self) -> float:
        return self.draw()

def sample_mean(samples: Sequence[float]) -> float:
    if len(samples) == 0:
        return 0.0
    return float(np.mean(samples))

def sample_variance(samples: Sequence[float], mean: Optional[float] = None) -> float:
    if len(samples) < 2:
        return 0.0
    if mean is None:
        mean = sample_mean(samples)
    values = np.asarray(samples, dtype=np.float64)
    return float(np.sum((values - mean) ** 2) / (len(values) - 1))
