import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

import numpy as np
from scipy.stats import norm

from config import settings
from kld_sampling.utils.exceptions import ZTableError

logger = logging.getLogger(__name__)

class ZTable:
    """
    Read-only table of standard normal probabilities measured from the mean.

    values[i] is the mass between z=0 and z=i*step, so the sequence is
    non-decreasing and bounded by 0.5.
    """

    def __init__(self, values: Sequence[float], step: float = settings.ztable_step) -> None:
        table = np.array(values, dtype=np.float64).ravel()
        table.setflags(write=False)
        self._values = table
        self.step = step

    @classmethod
    def load(cls, path: Union[str, Path], step: float = settings.ztable_step) -> "ZTable":
        path = Path(path)
        try:
            with open(path, "r") as file:
                tokens = file.read().split()
        except OSError as e:
            raise ZTableError(f"{path} does not exist or cannot be read: {e}") from e
        try:
            values = [float(token) for token in tokens]
        except ValueError as e:
            raise ZTableError(f"{path} is not a whitespace separated list of reals: {e}") from e
        logger.debug("Loaded %d z-table entries from %s", len(values), path)
        return cls(values, step=step)

    @property
    def values(self) -> np.ndarray:
        return self._values

    def __len__(self) -> int:
        return len(self._values)

    def zvalue(self, confidence: float) -> float:
        confidence = min(settings.max_confidence, max(0.0, confidence))
        hits = np.flatnonzero(self._values >= confidence)
        if hits.size == 0:
            logger.warning(
                "No z-table entry reaches confidence %.5f, falling back to z=%s",
                confidence, settings.fallback_zvalue,
            )
            return settings.fallback_zvalue
        return int(hits[0]) / (1.0 / self.step)


_shared_tables: Dict[Path, ZTable] = {}
_shared_lock = threading.Lock()

def shared_ztable(path: Optional[Union[str, Path]] = None) -> ZTable:
    """Return the process-wide table for `path`, loading it on first use only."""
    key = Path(path if path is not None else settings.ztable_path).resolve()
    with _shared_lock:
        table = _shared_tables.get(key)
        if table is None:
            table = ZTable.load(key)
            _shared_tables[key] = table
    return table

def clear_shared_tables():
    with _shared_lock:
        _shared_tables.clear()

def generate_table(max_z: float = settings.ztable_max_z, step: float = settings.ztable_step,
                   decimals: int = settings.ztable_decimals) -> np.ndarray:
    """Standard normal mass between the mean and each z in [0, max_z]."""
    count = int(round(max_z / step)) + 1
    z = np.arange(count) * step
    return np.round(norm.cdf(z) - 0.5, decimals)

def write_table(path: Union[str, Path], values: Sequence[float], per_line: int = 10,
                decimals: int = settings.ztable_decimals):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = []
    for start in range(0, len(values), per_line):
        chunk = values[start:start + per_line]
        rows.append(" ".join(f"{float(v):.{decimals}f}" for v in chunk))
    path.write_text("\n".join(rows) + "\n")
    logger.info("Wrote %d z-table entries to %s", len(values), path)
    return path
