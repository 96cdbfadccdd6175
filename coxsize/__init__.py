"""
coxsize: sample size for Cox regression with a binary covariate of interest,
competing risks and a correlated adjustment covariate.

Public API is re-exported here for convenience.
"""

from importlib.metadata import PackageNotFoundError, version as _version

# ---- Version ----
try:
    __version__ = _version("coxsize")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

# Sample size / power
from .power import (  # noqa: F401
    SampleSizeResult,
    calculate_sample_size,
    required_sample_size,
    calculate_power,
    power_for_sample_size,
    z_alpha,
    z_beta,
)

# Grid
from .grid import expand_grid  # noqa: F401

# Errors
from .errors import (  # noqa: F401
    SampleSizeError,
    MissingRequiredParameter,
    InvalidDomainValue,
    DegenerateHazardRatio,
    NumericOverflow,
    NumericOverflowWarning,
)

__all__ = [
    "__version__",
    # power
    "SampleSizeResult",
    "calculate_sample_size",
    "required_sample_size",
    "calculate_power",
    "power_for_sample_size",
    "z_alpha",
    "z_beta",
    # grid
    "expand_grid",
    # errors
    "SampleSizeError",
    "MissingRequiredParameter",
    "InvalidDomainValue",
    "DegenerateHazardRatio",
    "NumericOverflow",
    "NumericOverflowWarning",
]
