"""
coxsize/errors.py

Exceptions and warnings raised by the sample size calculators.

All errors derive from ValueError so callers catching ValueError keep working.
"""

from __future__ import annotations

from typing import Sequence


class SampleSizeError(ValueError):
    """Base class for coxsize input errors."""


class MissingRequiredParameter(SampleSizeError):
    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"{parameter} is required (no default)")

    def __reduce__(self):
        return type(self), (self.parameter,)


class InvalidDomainValue(SampleSizeError):
    """A supplied value lies outside the domain of its parameter."""

    def __init__(self, parameter: str, values: Sequence, domain: str):
        self.parameter = parameter
        self.values = list(values)
        self.domain = domain
        super().__init__(f"{parameter} must be {domain}, got {self.values}")

    def __reduce__(self):
        return type(self), (self.parameter, self.values, self.domain)


class DegenerateHazardRatio(InvalidDomainValue):
    """theta == 1 gives log(theta) == 0 and an infinite number of events."""

    def __init__(self, values: Sequence):
        self.parameter = "theta"
        self.values = list(values)
        self.domain = "different from 1"
        SampleSizeError.__init__(
            self,
            f"theta must differ from 1, got {self.values}; "
            "a hazard ratio of 1 requires an infinite number of events",
        )

    def __reduce__(self):
        return type(self), (self.values,)


class NumericOverflow(SampleSizeError):
    """A single-scenario calculation produced a non-finite result."""


class NumericOverflowWarning(UserWarning):
    """Some grid rows produced non-finite results."""
