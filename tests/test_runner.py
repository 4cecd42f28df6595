from unittest.mock import MagicMock

import pandas as pd
import pytest
from pydantic import ValidationError

from config import settings
from kld_sampling.demo.runner import RoundParameters, run_gaussian_round, run_round, run_trials
from kld_sampling.sampling.estimator import KLDSampler

@pytest.mark.parametrize("field, value", [
    ("quantile", 0.49),
    ("quantile", 1.01),
    ("kld_error", 0.0),
    ("bin_size", -0.1),
    ("min_samples", 9),
    ("underlying_var", -1.0),
    ("seed", -2),
])
def test_invalid_parameters(field, value):
    with pytest.raises(ValidationError):
        RoundParameters(**{field: value})

def test_quantile_is_capped():
    assert RoundParameters(quantile=1.0).quantile == settings.max_quantile
    assert RoundParameters(quantile=0.95).quantile == 0.95

def test_defaults_come_from_settings():
    params = RoundParameters()
    assert params.min_samples == settings.demo.min_samples
    assert params.bin_size == settings.demo.bin_size

def test_run_round_stops_at_requested_count():
    sampler = MagicMock()
    sampler.update.side_effect = [10, 10, 12, 15, 15] + [15] * 20
    draws = iter(range(100))
    samples = run_round(sampler, lambda: next(draws), min_samples=10)
    assert samples == list(range(15))
    assert sampler.update.call_count == 15

def test_run_round_with_vector_wrapping(sampler):
    sampler.init(0.5, 0.1, [1.0])
    samples = run_round(sampler, lambda: 0.5, min_samples=10, to_vector=lambda s: [s])
    assert len(samples) == 10
    assert sampler.support_size == 1

def test_gaussian_round_is_reproducible(ztable):
    params = RoundParameters(quantile=0.95, kld_error=0.05, bin_size=0.2, seed=42)
    first = run_gaussian_round(params, ztable)
    second = run_gaussian_round(params, ztable)
    assert first.samples == second.samples
    assert first.seed == 42

def test_gaussian_round_meets_its_bound(ztable):
    params = RoundParameters(quantile=0.99, kld_error=0.1, bin_size=0.5, min_samples=20, seed=5)
    result = run_gaussian_round(params, ztable)

    replay = KLDSampler(ztable)
    replay.init(params.quantile, params.kld_error, [params.bin_size], params.min_samples)
    counts = [replay.update([s]) for s in result.samples]
    assert result.num_samples == counts[-1]
    assert all(i + 1 < c for i, c in enumerate(counts[:-1]))
    assert result.variance > 0

def test_run_trials_table(ztable):
    params = RoundParameters(quantile=0.9, seed=100)
    trials = run_trials(params, 4, ztable)
    assert isinstance(trials, pd.DataFrame)
    assert list(trials.columns) == ["seed", "num_samples", "mean", "variance"]
    assert trials["seed"].tolist() == [100, 101, 102, 103]
    assert (trials["num_samples"] >= params.min_samples).all()
