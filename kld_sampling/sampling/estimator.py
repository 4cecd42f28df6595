import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from config import settings
from kld_sampling.sampling.support import SupportSet, bin_key
from kld_sampling.stats.ztable import ZTable, shared_ztable
from kld_sampling.utils.exceptions import DimensionMismatchError, SamplerStateError

logger = logging.getLogger(__name__)

def required_samples(support_size: int, max_error: float, zvalue: float) -> int:
    """
    Wilson-Hilferty approximation of the chi-square quantile used by KLD-sampling.

    Returns the number of samples needed so that, with the confidence encoded in
    `zvalue`, the KL distance between the histogram over `support_size` occupied
    bins and the true distribution stays below `max_error`.
    """
    if support_size < 2:
        return 0
    k = support_size - 1
    a = 2.0 / (9.0 * k)
    return int(math.ceil(k / (2 * max_error) * math.pow(1 - a + math.sqrt(a) * zvalue, 3)))

@dataclass
class RoundState:
    """Configuration and counters of one sampling round."""
    quantile: float
    confidence: float
    max_error: float
    bin_widths: Tuple[float, ...]
    zvalue: float
    sample_min: int
    kld_samples: int
    num_samples: int = 0
    support: SupportSet = field(default_factory=SupportSet)

    @property
    def dimensions(self) -> int:
        return len(self.bin_widths)

    @property
    def support_size(self) -> int:
        return len(self.support)

class KLDSampler:
    """
    Uses KL-divergence to decide when an unknown distribution has been
    adequately sampled.

    Call init() to start a round, then feed every drawn sample to update() and
    keep drawing while fewer samples than the returned count have been drawn.
    """

    def __init__(self, ztable: Optional[ZTable] = None) -> None:
        self.ztable = ztable if ztable is not None else shared_ztable()
        self._round: Optional[RoundState] = None

    def init(self, quantile: float, max_error: float, bin_widths: Sequence[float], sample_min: Optional[int] = None):
        if sample_min is None:
            sample_min = settings.absolute_min_samples
        # the table is measured from the mean, so only the right half of the quantile counts
        confidence = min(settings.max_confidence, max(0.0, quantile - 0.5))
        zvalue = self.ztable.zvalue(confidence)
        self._round = RoundState(
            quantile=quantile,
            confidence=confidence,
            max_error=max_error,
            bin_widths=tuple(float(w) for w in bin_widths),
            zvalue=zvalue,
            sample_min=sample_min,
            kld_samples=max(sample_min, settings.absolute_min_samples),
        )
        logger.debug(
            "New round: quantile=%s confidence=%.5f z=%.2f error=%s bins=%s min=%d",
            quantile, confidence, zvalue, max_error, self._round.bin_widths, self._round.kld_samples,
        )

    def update(self, sample: Sequence[float]) -> int:
        state = self._round
        if state is None:
            raise SamplerStateError("Must run init() before update()")
        if len(sample) != state.dimensions:
            raise DimensionMismatchError(
                f"Sample has {len(sample)} dimensions but the bins have {state.dimensions}"
            )

        state.num_samples += 1
        if state.support.add(bin_key(sample, state.bin_widths)):
            estimate = required_samples(state.support_size, state.max_error, state.zvalue)
            if estimate > state.kld_samples:
                state.kld_samples = estimate
                logger.debug(
                    "Support grew to %d bins after %d samples, need %d",
                    state.support_size, state.num_samples, estimate,
                )
        return state.kld_samples

    @property
    def state(self) -> Optional[RoundState]:
        return self._round

    @property
    def is_active(self) -> bool:
        return self._round is not None

    def _active_state(self) -> RoundState:
        if self._round is None:
            raise SamplerStateError("Sampler has not been initialized with init()")
        return self._round

    @property
    def zvalue(self) -> float:
        return self._active_state().zvalue

    @property
    def num_samples(self) -> int:
        return self._active_state().num_samples

    @property
    def support_size(self) -> int:
        return self._active_state().support_size

    @property
    def kld_samples(self) -> int:
        return self._active_state().kld_samples
