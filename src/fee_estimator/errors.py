"""Typed failures raised by the fee engine and its configuration loaders."""

from __future__ import annotations


class FeeEstimatorError(Exception):
    """Base class for every error the estimator raises on purpose."""


class InvalidInputError(FeeEstimatorError, ValueError):
    """Inputs cannot be priced: non-positive average size or negative volume."""


class ConfigurationError(FeeEstimatorError):
    """The rate table or pricing policy is missing an entry, unreadable, or malformed.

    A programming / deployment error, never recovered from at runtime.
    """
