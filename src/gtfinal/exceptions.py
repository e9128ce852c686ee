"""Exceptions raised while finalizing merged variant records."""

from typing import Any


class GtfinalError(Exception):
    """Base exception for finalization failures."""


class BadInputError(GtfinalError, ValueError):
    """Raised when a record or genotype violates the structure finalization relies on."""

    def __init__(self, message: str, *, sample: str | None = None, locus: str | None = None) -> None:
        super().__init__(message)
        self.sample = sample
        self.locus = locus


class AttributeParseError(GtfinalError, ValueError):
    """Raised when a numeric attribute encoding cannot be parsed."""

    def __init__(self, key: str, value: Any, reason: str | None = None) -> None:
        message = f"Could not parse attribute {key}={value!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.key = key
        self.value = value


__all__ = [
    "AttributeParseError",
    "BadInputError",
    "GtfinalError",
]
