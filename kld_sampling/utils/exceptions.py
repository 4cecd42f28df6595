"""
File containing custom errors raised by the sampling core.
"""

class KLDSamplingError(Exception):
    """Base class for every error raised by the kld_sampling package."""
    pass

class ZTableError(KLDSamplingError):
    """Raised when the z-table resource cannot be opened or parsed"""
    pass

class SamplerStateError(KLDSamplingError):
    """Raised when the sampler is in a state which has not initialized the attributes necessary for running a specific method"""
    pass

class DimensionMismatchError(KLDSamplingError, ValueError):
    """Raised when a sample does not have the same number of dimensions as the configured bins."""
    pass
