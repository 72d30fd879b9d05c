"""
Per-table validation rules applied before every write.

Only columns present in the value map are checked, plus the columns a
table requires on insert.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from trippacks.app.domain.validation import (
    Display, IS_DATE, NOT_EMPTY, NOT_NULL, is_integer, is_one_of, is_valid, report_invalid,
)
from trippacks.app.models.trip_enums import TripState


@dataclass(frozen=True)
class FieldRule:
    """
    Checks for one column. ``one_of`` switches to a membership test and
    ``integer`` adds a plain integer parse after the checks.
    """
    checks: Tuple[int, ...] = ()
    one_of: Tuple[int, ...] = ()
    nullable: bool = False
    integer: bool = False

    def check(self, column: str, value: Any, display: Optional[Display] = None) -> bool:
        if value is None and self.nullable:
            return True
        if self.one_of:
            return is_one_of(_as_int(value), *self.one_of, field_name=column, display=display)
        if not self.integer:
            return is_valid(value, *self.checks, field_name=column, display=display)
        if is_valid(value, *self.checks) and is_integer(value):
            return True
        report_invalid(column, display)
        return False


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# Plain int parse, values from 1e7 up included
INTEGER_RULE = FieldRule(integer=True)
TRIP_NUMBER_RULE = FieldRule(checks=(NOT_NULL, NOT_EMPTY), integer=True)

FIELD_RULES: Dict[str, Dict[str, FieldRule]] = {
    "trips": {
        "trip_number": TRIP_NUMBER_RULE,
        "received_date": FieldRule(checks=(NOT_NULL, IS_DATE)),
        "submitted_date": FieldRule(checks=(IS_DATE,), nullable=True),
        "state": FieldRule(one_of=tuple(int(state) for state in TripState)),
        "hub_start": INTEGER_RULE,
        "hub_end": INTEGER_RULE,
    },
    "stops": {
        "trip_number": TRIP_NUMBER_RULE,
        "location": FieldRule(checks=(NOT_NULL, NOT_EMPTY)),
        "stop_index": INTEGER_RULE,
        "arrival_hub": INTEGER_RULE,
        "date_completed": FieldRule(checks=(IS_DATE,), nullable=True),
    },
}

REQUIRED_ON_INSERT: Dict[str, Tuple[str, ...]] = {
    "trips": ("trip_number", "received_date"),
    "stops": ("trip_number", "location", "stop_index"),
}


def validate_fields(table: str, values: Mapping[str, Any], display: Optional[Display] = None,
                    required: Iterable[str] = ()) -> bool:
    """
    Validate a value map for ``table``.

    Every failing column is reported to ``display``, not just the first.
    Columns without a rule pass.
    """
    rules = FIELD_RULES.get(table, {})
    all_valid = True

    for column in required:
        if column not in values:
            all_valid = is_valid(None, NOT_NULL, field_name=column, display=display) and all_valid

    for column, value in values.items():
        rule = rules.get(column)
        if rule is not None:
            all_valid = rule.check(column, value, display) and all_valid

    return all_valid
