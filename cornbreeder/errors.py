"""Errors raised by the breeding engine.

Only malformed requests fail: bad configuration and generation advances
with too few parents.  A degenerate (zero-variance) trait distribution
is recovered locally and never surfaces here.
"""

from __future__ import annotations


class CornBreederError(Exception):
    """Base class for all engine errors."""


class InvalidSelectionError(CornBreederError):
    """A selection cannot be used to breed the next generation.

    Raised when fewer than two parents are supplied, when a selection
    intensity is outside ``(0, 1]``, or when selected ids do not belong
    to the population.
    """


class ConfigurationError(CornBreederError, ValueError):
    """Configuration is internally inconsistent.

    Covers loci indices outside ``[0, L)``, crossing genomes of
    different lengths, and out-of-range rates, sizes or variances.
    """
