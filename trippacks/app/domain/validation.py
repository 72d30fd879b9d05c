"""
Field validation predicates.

Checks are composable: every check passed to ``is_valid`` must hold.
Validation never raises on bad values, it only answers ``False``. When a
``display`` callable is supplied, a failing check also sends it a message
naming the field in upper case, otherwise failures are silent.
"""

import enum
import logging
import re
from datetime import datetime
from typing import Any, Callable, List, Optional

import numpy as np

logger = logging.getLogger("trippacks.validation")

DATE_FORMAT = "%Y-%m-%d"
INVALID_FIELD_FORMAT = "Invalid value for {field}"

Display = Callable[[str], None]

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Decimal exponents Java prints without E-notation
PLAIN_MIN_EXPONENT = -3
PLAIN_MAX_EXPONENT = 6


class Check(enum.IntEnum):
    """Validation flags."""
    NOT_NULL = 1
    NOT_EMPTY = 2
    IS_NUMERIC = 3
    IS_WHOLE_NUMBER = 4
    IS_DATE = 5
    IS_POSITIVE = 6


NOT_NULL = Check.NOT_NULL
NOT_EMPTY = Check.NOT_EMPTY
IS_NUMERIC = Check.IS_NUMERIC
IS_WHOLE_NUMBER = Check.IS_WHOLE_NUMBER
IS_DATE = Check.IS_DATE
IS_POSITIVE = Check.IS_POSITIVE


class MessageCollector:
    """Display that keeps the messages instead of showing them."""

    def __init__(self):
        self.messages: List[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    def __bool__(self) -> bool:
        return bool(self.messages)


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def float32_to_string(value: np.float32) -> str:
    """Render a float32 the way java.lang.Float.toString does."""
    if np.isnan(value):
        return "NaN"
    if np.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "-0.0" if np.signbit(value) else "0.0"

    # Shortest digits that identify the float32, e.g. "-1.25e+02"
    mantissa, exponent = np.format_float_scientific(value, unique=True, trim="-").split("e")
    sign = "-" if mantissa.startswith("-") else ""
    digits = mantissa.lstrip("-").replace(".", "")
    exponent = int(exponent)

    # Java switches to E-notation outside [1e-3, 1e7)
    if PLAIN_MIN_EXPONENT <= exponent <= PLAIN_MAX_EXPONENT:
        if exponent < 0:
            return f"{sign}0.{'0' * (-exponent - 1)}{digits}"
        whole = digits[:exponent + 1].ljust(exponent + 1, "0")
        fraction = digits[exponent + 1:] or "0"
        return f"{sign}{whole}.{fraction}"
    return f"{sign}{digits[0]}.{digits[1:] or '0'}E{exponent}"


def is_numeric(value: Any) -> bool:
    """
    True when the text survives a float32 round trip unchanged.

    A text without a decimal point gets ".0" appended first, so "12"
    passes while "12.50", "+3", "1e5" or anything beyond float32
    precision fails. Magnitudes outside [1e-3, 1e7) only pass in
    E-notation ("1.0E7").
    """
    text = _as_text(value)
    if text is None:
        return False
    if "." not in text:
        text = text + ".0"

    try:
        with np.errstate(over="ignore"):
            parsed = np.float32(float(text))
    except (TypeError, ValueError, OverflowError):
        return False
    return float32_to_string(parsed) == text


def is_valid_date(value: Any) -> bool:
    """
    True for an exact yyyy-MM-dd text naming a real calendar day.

    Out-of-range months and days ("2018-13-45") are rejected, and any
    accepted text formats back to itself. This is stricter than a lenient
    Java-style date parse, which rolls "2018-13-45" over into 2019.
    """
    text = _as_text(value)
    if text is None or not _DATE_PATTERN.fullmatch(text):
        return False
    try:
        parsed = datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return False
    return parsed.isoformat() == text


def _not_null(value: Any) -> bool:
    return value is not None


def _not_empty(value: Any) -> bool:
    text = _as_text(value)
    return text is not None and text.strip() != ""


def _is_whole_number(value: Any) -> bool:
    return is_numeric(value) and "." not in _as_text(value)


def _is_positive(value: Any) -> bool:
    # Checks for a minus sign, i.e. the opposite of its name. The historical
    # behaviour is kept; no field rule uses this flag.
    return is_numeric(value) and "-" in _as_text(value)


def is_integer(value: Any) -> bool:
    """
    True for an int or plain base-10 integer text ("12", "-3").

    Unlike IS_WHOLE_NUMBER there is no float32 round trip, so values of
    1e7 and above pass. Booleans, "007", "+3" and "1.0" fail.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    text = _as_text(value)
    if text is None:
        return False
    try:
        return str(int(text)) == text
    except ValueError:
        return False


_PREDICATES = {
    Check.NOT_NULL: _not_null,
    Check.NOT_EMPTY: _not_empty,
    Check.IS_NUMERIC: is_numeric,
    Check.IS_WHOLE_NUMBER: _is_whole_number,
    Check.IS_DATE: is_valid_date,
    Check.IS_POSITIVE: _is_positive,
}


def report_invalid(field_name: Optional[str], display: Optional[Display]) -> None:
    logger.debug("Validation failed for %s", field_name or "value")
    if display is not None:
        display(INVALID_FIELD_FORMAT.format(field=(field_name or "value").upper()))


def is_valid(value: Any, *checks: int, field_name: Optional[str] = None,
             display: Optional[Display] = None) -> bool:
    """
    Run every check against ``value``.

    Args:
        value: The value to check, usually text.
        checks: Any combination of the ``Check`` flags.
        field_name: Name used in the failure message.
        display: Receives the failure message. Nothing is reported when None.

    Returns:
        True if all checks pass.
    """
    result = all(_PREDICATES[Check(check)](value) for check in checks)
    if not result:
        report_invalid(field_name, display)
    return result


def is_one_of(value: Any, *candidates: Any, field_name: Optional[str] = None,
              display: Optional[Display] = None) -> bool:
    """True when ``value`` equals one of ``candidates``."""
    result = any(value == candidate for candidate in candidates)
    if not result:
        report_invalid(field_name, display)
    return result
