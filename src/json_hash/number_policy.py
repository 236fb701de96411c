"""
number_policy.py — Number policy for reproducible hashes.

Numbers are validated, never rounded: a fractional value finer than the
configured precision, or outside the configured range, is rejected and an
accepted value is hashed exactly as given.

``format_number`` prints numbers with the ECMAScript ``Number#toString``
rules (shortest round-trip digits, ``1.0 -> "1"``, ``1e-05 -> "0.00001"``,
``1e21 -> "1e+21"``) so that canonical strings match other platforms.
"""

from __future__ import annotations

import logging
import math
import sys
from decimal import Decimal
from typing import Optional, Union

from .config import NumberHashingConfig
from .errors import AboveRangeError, BelowRangeError, NotFiniteError, PrecisionExceededError

logger = logging.getLogger(__name__)

Number = Union[int, float]


def format_number(value: Number) -> str:
    """Return the canonical text of a number."""
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers here")
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    # repr() yields the shortest digits that round-trip
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = k + exponent

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        text = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"

    return sign + text


def _round_half_up(x: float) -> float:
    floor = math.floor(x)
    return floor + 1 if x - floor >= 0.5 else floor


def exceeds_precision(value: float, precision: float) -> bool:
    steps = value / precision
    # a precision too fine to count in a float cannot be met
    if not math.isfinite(steps):
        return True
    rounded = _round_half_up(steps) * precision
    return abs(value - rounded) > sys.float_info.epsilon


def check_number(value: Number, config: Optional[NumberHashingConfig] = None) -> Number:
    """Validate a number for hashing and return it unchanged.

    Integral values are always accepted. Fractional values must resolve to
    ``config.precision`` and lie within ``[config.min_num, config.max_num]``.

    Raises:
        NotFiniteError: For NaN and infinities.
        PrecisionExceededError: If the value is finer than the precision.
        AboveRangeError: If the value exceeds ``max_num``.
        BelowRangeError: If the value is smaller than ``min_num``.
    """
    config = config or NumberHashingConfig()

    if isinstance(value, int):
        return value
    if not math.isfinite(value):
        raise NotFiniteError(value)
    if value.is_integer():
        return value

    if exceeds_precision(value, config.precision):
        raise PrecisionExceededError(value, config.precision)

    if value > config.max_num:
        if config.throw_on_range_error:
            raise AboveRangeError(value, config.max_num)
        logger.warning("Number %s exceeds max_num %s; hashing it anyway",
                       format_number(value), format_number(config.max_num))
    elif value < config.min_num:
        if config.throw_on_range_error:
            raise BelowRangeError(value, config.min_num)
        logger.warning("Number %s is smaller than min_num %s; hashing it anyway",
                       format_number(value), format_number(config.min_num))

    return value
