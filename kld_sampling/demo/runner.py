import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

import pandas as pd
from pydantic import BaseModel, field_validator

from config import settings
from kld_sampling.demo.gaussian import GaussianSampler, resolve_seed, sample_mean, sample_variance
from kld_sampling.sampling.estimator import KLDSampler
from kld_sampling.stats.ztable import ZTable

logger = logging.getLogger(__name__)

class RoundParameters(BaseModel):
    """Validated parameters of a Gaussian demonstration round."""
    quantile: float = settings.demo.quantile
    kld_error: float = settings.demo.kld_error
    bin_size: float = settings.demo.bin_size
    min_samples: int = settings.demo.min_samples
    underlying_mean: float = settings.demo.underlying_mean
    underlying_var: float = settings.demo.underlying_var
    seed: int = settings.demo.seed

    @field_validator("quantile")
    @classmethod
    def check_quantile(cls, v: float) -> float:
        if v < 0.5 or v > 1:
            raise ValueError(f"quantile must be between 0.5 and 1.0 (max thresholded at {settings.max_quantile})")
        return min(settings.max_quantile, v)

    @field_validator("kld_error")
    @classmethod
    def check_error(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("error must be greater than 0")
        return v

    @field_validator("bin_size")
    @classmethod
    def check_bin_size(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("bin-size must be greater than 0")
        return v

    @field_validator("min_samples")
    @classmethod
    def check_min_samples(cls, v: int) -> int:
        if v < settings.absolute_min_samples:
            raise ValueError(f"min-samples needs to be at least {settings.absolute_min_samples}")
        return v

    @field_validator("underlying_var")
    @classmethod
    def check_var(cls, v: float) -> float:
        if v < 0:
            raise ValueError("underlying-var must be positive")
        return v

    @field_validator("seed")
    @classmethod
    def check_seed(cls, v: int) -> int:
        if v < -1:
            raise ValueError("seed must be -1 (time based) or a non-negative integer")
        return v

@dataclass
class RoundResult:
    parameters: RoundParameters
    seed: int
    samples: List[float] = field(default_factory=list)

    @property
    def num_samples(self) -> int:
        return len(self.samples)

    @property
    def mean(self) -> float:
        return sample_mean(self.samples)

    @property
    def variance(self) -> float:
        return sample_variance(self.samples, self.mean)

def run_round(sampler: KLDSampler, draw: Callable[[], Any], min_samples: int,
              to_vector: Callable[[Any], Any] = lambda s: s) -> List[Any]:
    """
    Draw from `draw` until at least as many samples as the sampler asks for
    have been taken. The sampler must already be initialized for the round.
    """
    samples = []
    needed = min_samples
    while len(samples) < needed:
        sample = draw()
        samples.append(sample)
        needed = sampler.update(to_vector(sample))
    logger.info("Round finished after %d samples over %d bins", len(samples), sampler.support_size)
    return samples

def run_gaussian_round(params: RoundParameters, ztable: Optional[ZTable] = None) -> RoundResult:
    seed = resolve_seed(params.seed)
    source = GaussianSampler(params.underlying_mean, math.sqrt(params.underlying_var), seed)
    sampler = KLDSampler(ztable)
    # the sampler works on vectors, so a 1D source gets a single bin width
    sampler.init(params.quantile, params.kld_error, [params.bin_size], params.min_samples)
    samples = run_round(sampler, source.draw, params.min_samples, to_vector=lambda s: [s])
    return RoundResult(parameters=params, seed=seed, samples=samples)

def run_trials(params: RoundParameters, trials: int, ztable: Optional[ZTable] = None) -> pd.DataFrame:
    """Repeat the round with consecutive seeds; one row per trial."""
    first_seed = resolve_seed(params.seed)
    rows = []
    for i in range(trials):
        trial_params = params.model_copy(update={"seed": first_seed + i})
        result = run_gaussian_round(trial_params, ztable)
        rows.append((result.seed, result.num_samples, result.mean, result.variance))
    return pd.DataFrame(rows, columns=["seed", "num_samples", "mean", "variance"])
