"""Scala value parsing for tuning definitions.

A Scala value expresses a pitch either as cents or as a frequency ratio
relative to the unison:

- numbers (JSON int/float) are already cents values
- strings containing a "." are decimal cents values, e.g. "700." or "386.314"
- strings containing a "/" are ratios of two integers, e.g. "5/4"
- any other string is a plain ratio, e.g. "2" (one octave)

Ratios are converted with the Ellis formula 1200 * log2(ratio).

This module also defines the base exception shared by the whole engine.
"""

import math
from fractions import Fraction
from typing import Any

import consts


class TuningError(Exception):
    """Base class for every error raised while building a tuning."""


class InvalidScalaValue(TuningError, ValueError):
    """Valore Scala non interpretabile / Scala value cannot be interpreted."""


def _ratio_to_cents(ratio: float, raw: Any) -> float:
    if ratio <= 0:
        raise InvalidScalaValue(f"Ratio must be positive: {raw!r}")
    cents = consts.CENTS_PER_OCTAVE * math.log2(ratio)
    if not math.isfinite(cents):
        raise InvalidScalaValue(f"Non-finite cents value for {raw!r}")
    return cents


def _parse_fraction(value: str) -> float:
    numerator_str, denominator_str = value.split("/", 1)
    try:
        numerator = int(numerator_str)
        denominator = int(denominator_str)
    except ValueError:
        raise InvalidScalaValue(f"Ratio parts must be integers: {value!r}") from None
    if denominator == 0:
        raise InvalidScalaValue(f"Zero denominator in ratio: {value!r}")
    ratio = Fraction(numerator, denominator)
    if ratio <= 0:
        raise InvalidScalaValue(f"Ratio must be positive: {value!r}")
    # log2 of the reduced integer terms, exact for numbers beyond float range
    return consts.CENTS_PER_OCTAVE * (math.log2(ratio.numerator) - math.log2(ratio.denominator))


def parse_scala_value(value: Any) -> float:
    """Convert a Scala value (number or string) to cents.

    Args:
        value: A number, already in cents, or a Scala string ("700.", "5/4", "2").

    Returns:
        The value in cents.

    Raises:
        InvalidScalaValue: if the value cannot be interpreted or is not finite.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            finite = math.isfinite(float(value))
        except OverflowError:
            raise InvalidScalaValue(f"Cents value out of range: {value!r}") from None
        if not finite:
            raise InvalidScalaValue(f"Non-finite cents value: {value!r}")
        return value
    if not isinstance(value, str):
        raise InvalidScalaValue(f"Expected string or number, got {type(value).__name__}")

    # Values containing a "." are cents, everything else is a relative frequency
    if "." in value:
        try:
            cents = float(value)
        except ValueError:
            raise InvalidScalaValue(f"Invalid cents value: {value!r}") from None
        if not math.isfinite(cents):
            raise InvalidScalaValue(f"Non-finite cents value: {value!r}")
        return cents
    if "/" in value:
        return _parse_fraction(value)
    try:
        ratio = float(value)
    except ValueError:
        raise InvalidScalaValue(f"Invalid ratio: {value!r}") from None
    return _ratio_to_cents(ratio, value)
