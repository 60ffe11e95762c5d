"""Custom exceptions for experiments."""

from __future__ import annotations


class ExperimentError(Exception):
    """Base exception for experiment errors."""

    pass


class VariantNotFoundError(ExperimentError):
    """Raised when the control or test arm of an experiment is missing."""

    pass


class TrafficAllocationError(ExperimentError, ValueError):
    """Raised when variant traffic allocations do not sum to 100%."""

    pass
