from typing import Hashable, Sequence, Set, Tuple

import numpy as np

BinKey = Tuple[float, ...]

def bin_key(sample: Sequence[float], bin_widths: Sequence[float]) -> BinKey:
    """Histogram cell of `sample`: floor(sample[d] / bin_widths[d]) for every dimension d."""
    cells = np.floor(np.asarray(sample, dtype=np.float64) / np.asarray(bin_widths, dtype=np.float64))
    return tuple(cells.tolist())

class SupportSet:
    """Occupied histogram cells seen during one round."""
    __slots__ = ("_keys",)

    def __init__(self):
        self._keys: Set[Hashable] = set()

    def add(self, key: BinKey) -> bool:
        if key in self._keys:
            return False
        self._keys.add(key)
        return True

    def __contains__(self, key) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self):
        return iter(self._keys)
