"""Custom exceptions for attribution."""

from __future__ import annotations


class AttributionError(Exception):
    """Base exception for attribution errors."""

    pass


class InvalidModelError(AttributionError, ValueError):
    """Raised when an attribution model selector names no known model."""

    def __init__(self, model: object):
        self.model = model
        super().__init__(f"Unsupported attribution model: {model!r}")


class JourneyError(AttributionError):
    """Raised when touchpoint rows cannot be assembled into a journey."""

    pass
