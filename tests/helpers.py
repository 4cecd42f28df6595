import math
import numpy as np

def expected_bound(support_size, max_error, zvalue):
    """Independent rendition of the KLD bound, for checking the sampler against."""
    k = support_size - 1
    inner = 1 - 2 / (9 * k) + math.sqrt(2 / (9 * k)) * zvalue
    return math.ceil(k / (2 * max_error) * inner ** 3)

def feed(sampler, samples):
    """Feed every sample to the sampler and return the list of returned counts."""
    return [sampler.update(sample) for sample in samples]

def assert_non_decreasing(counts):
    diffs = np.diff(np.asarray(counts))
    assert (diffs >= 0).all(), f"Counts decreased: {counts}"

def distinct_bin_samples(n, bin_size=0.1):
    """n one-dimensional samples, each in the middle of its own bin."""
    return [[(i + 0.5) * bin_size] for i in range(n)]
