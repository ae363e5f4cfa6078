"""Generic value filter shared by values and section name checks."""

import math
import re
from collections.abc import Callable, Collection


Validator = Callable[[str], str | None] | Collection[str]

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
NUMBER_PATTERN = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def validate(
    value: str | None,
    valid: Validator | None = None,
    isnumber: bool = False,
    isinteger: bool = False,
) -> str | None:
    """Filter a submitted string.

    Numeric checks run first and only accept plain decimal text: padding,
    digit separators, hex and the inf/nan spellings are rejected. The
    submitted text is kept as is when it passes them. ``valid`` is either a
    callable returning the accepted value (or None to reject) or a collection
    of allowed values.

    Args:
        value: The value to check, None passes through as rejected.
        valid: Optional validating callable or allowed values.
        isnumber: Require a finite decimal number, exponent allowed.
        isinteger: Require a whole number written as digits only.

    Returns:
        The accepted value, or None if it was rejected.
    """
    if value is None:
        return None

    if isinteger and INTEGER_PATTERN.fullmatch(value) is None:
        return None
    if isnumber:
        if NUMBER_PATTERN.fullmatch(value) is None:
            return None
        # "1e999" matches but overflows
        if not math.isfinite(float(value)):
            return None

    if valid is None:
        return value
    if callable(valid):
        return valid(value)
    return value if value in valid else None
