"""Input validation for deposit requests.

Amount helpers never raise: unparseable input comes back as NaN from
`format_amount` and as None from `parse_amount`, and the caller decides what
to tell the user.
"""

from __future__ import annotations

import math
import re
from typing import Optional, Union

Number = Union[int, float]

MPESA_COUNTRY_PREFIX = "254"
MIN_PHONE_DIGITS = 10

_NON_DIGITS = re.compile(r"\D")


def _to_float(amount: Union[str, Number, None]) -> float:
    if isinstance(amount, bool) or amount is None:
        return math.nan
    try:
        return float(amount.strip() if isinstance(amount, str) else amount)
    except (TypeError, ValueError):
        return math.nan


def validate_phone_number(phone_number: str) -> bool:
    """Digits only, at least 10 of them, starting with 254."""
    digits = _NON_DIGITS.sub("", phone_number or "")
    return len(digits) >= MIN_PHONE_DIGITS and digits.startswith(MPESA_COUNTRY_PREFIX)


def format_amount(amount: Union[str, Number]) -> float:
    """Round to two decimal places; NaN in, NaN out."""
    value = _to_float(amount)
    if math.isnan(value):
        return value
    return round(value, 2)


def parse_amount(amount: Union[str, Number, None]) -> Optional[float]:
    value = _to_float(amount)
    if not math.isfinite(value) or value <= 0:
        return None
    return value
