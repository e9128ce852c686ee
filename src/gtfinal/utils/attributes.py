"""
Parsing helpers for attribute values.

Upstream producers hand attribute values over either already typed (ints,
floats, lists) or as the literal VCF text (``"1,2,3,4"``). These helpers
accept both and raise :class:`AttributeParseError` for anything malformed.
"""

from collections.abc import Sequence
from typing import Any

from ..exceptions import AttributeParseError

__all__ = [
    "parse_float",
    "parse_float_list",
    "parse_int",
    "parse_int_list",
    "split_allele_entries",
]


def _split(value: Any) -> list[Any]:
    if isinstance(value, str):
        text = value.strip().strip("[]")
        if not text:
            return []
        return [part.strip() for part in text.split(",")]
    if isinstance(value, Sequence):
        return list(value)
    return [value]


def parse_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise AttributeParseError(key, value, "expected an integer")
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise AttributeParseError(key, value, "expected an integer") from e
    if not number.is_integer():
        raise AttributeParseError(key, value, "expected an integer")
    return int(number)


def parse_float(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise AttributeParseError(key, value, "expected a number")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise AttributeParseError(key, value, "expected a number") from e


def parse_int_list(key: str, value: Any, length: int | None = None) -> list[int]:
    """Parse a list of ints from a sequence or comma-joined string."""
    values = [parse_int(key, v) for v in _split(value)]
    if length is not None and len(values) != length:
        raise AttributeParseError(key, value, f"expected {length} values, found {len(values)}")
    return values


def parse_float_list(key: str, value: Any) -> list[float]:
    return [parse_float(key, v) for v in _split(value)]


def split_allele_entries(key: str, value: Any, separator: str = "|") -> list[str]:
    """
    Split an allele-specific raw value into one text entry per allele.

    VCF readers that split on commas hand these over as lists
    (``["0", "0|5", "3"]``); they are re-joined before splitting on the
    allele separator.
    """
    if isinstance(value, str):
        text = value
    elif isinstance(value, Sequence):
        text = ",".join(str(v) for v in value)
    else:
        raise AttributeParseError(key, value, "expected a string or list of strings")
    return [entry.strip() for entry in text.split(separator)]
