"""
Unit tests for the field validation predicates and per-table rules.
"""

import pytest

from trippacks.app.domain.field_rules import validate_fields
from trippacks.app.domain.validation import (
    IS_DATE, IS_NUMERIC, IS_POSITIVE, IS_WHOLE_NUMBER, NOT_EMPTY, NOT_NULL,
    MessageCollector, is_integer, is_numeric, is_one_of, is_valid, is_valid_date,
)


@pytest.mark.parametrize("text", ["12", "12.5", "-3", "0", "0.1", "9999999", "1.0E7", "1.5E-4"])
def test_numeric_accepts_round_trip_text(text):
    assert is_numeric(text)


@pytest.mark.parametrize("text", [
    "12.50",       # trailing zero does not survive
    "+3",          # sign is not rendered back
    "1e5",         # no decimal point, so "1e5.0" does not parse
    "3.14159265",  # more precision than float32 holds
    "12345678",    # renders as 1.2345678E7
    "abc",
    "",
    " 5",
    "5.",
])
def test_numeric_rejects_text_that_changes(text):
    assert not is_numeric(text)


def test_numeric_handles_none_and_numbers():
    assert not is_numeric(None)
    assert is_numeric(42)
    assert is_numeric(2.5)


def test_whole_number_needs_no_decimal_point():
    assert is_valid("7", IS_WHOLE_NUMBER)
    assert not is_valid("7.5", IS_WHOLE_NUMBER)
    assert not is_valid("7.0", IS_WHOLE_NUMBER)
    assert not is_valid(None, IS_WHOLE_NUMBER)


def test_positive_flag_checks_for_minus_sign():
    """The flag accepts negative numbers only, its historical behaviour."""
    assert is_valid("-5", IS_POSITIVE)
    assert not is_valid("5", IS_POSITIVE)
    assert not is_valid("-x", IS_POSITIVE)


def test_not_null_and_not_empty():
    assert is_valid("", NOT_NULL)
    assert not is_valid(None, NOT_NULL)
    assert not is_valid("", NOT_EMPTY)
    assert not is_valid("   ", NOT_EMPTY)
    assert is_valid(" a ", NOT_NULL, NOT_EMPTY)


@pytest.mark.parametrize("text", ["2018-01-01", "2020-02-29", "1999-12-31"])
def test_date_accepts_calendar_dates(text):
    assert is_valid_date(text)


@pytest.mark.parametrize("text", [
    "2018-13-45",
    "2018-02-30",
    "2019-02-29",
    "0000-00-00",
    "2018-1-01",
    "18-01-01",
    "2018/01/01",
    "2018-01-01 ",
    "2018-01-01T00:00",
    None,
])
def test_date_rejects_non_calendar_text(text):
    assert not is_valid_date(text)


def test_accepted_dates_format_back_to_themselves():
    from datetime import datetime
    for text in ["2018-01-01", "2000-02-29", "0999-03-04"]:
        assert is_valid(text, IS_DATE)
        assert datetime.strptime(text, "%Y-%m-%d").date().isoformat() == text


def test_all_checks_must_pass():
    assert is_valid("12", NOT_NULL, NOT_EMPTY, IS_NUMERIC, IS_WHOLE_NUMBER)
    assert not is_valid("12.5", NOT_NULL, IS_NUMERIC, IS_WHOLE_NUMBER)


def test_failure_message_names_field_in_upper_case():
    display = MessageCollector()
    assert not is_valid("bad", IS_DATE, field_name="received_date", display=display)
    assert display.messages == ["Invalid value for RECEIVED_DATE"]


def test_success_and_silent_failure_report_nothing():
    display = MessageCollector()
    assert is_valid("2018-01-01", IS_DATE, field_name="received_date", display=display)
    assert not is_valid("bad", IS_DATE)
    assert not display


def test_one_of():
    display = MessageCollector()
    assert is_one_of(101, 100, 101, 102, 103)
    assert not is_one_of(104, 100, 101, 102, 103, field_name="state", display=display)
    assert display.messages == ["Invalid value for STATE"]


@pytest.mark.parametrize("state, accepted", [
    (100, True), (101, True), (102, True), (103, True),
    ("102", True), (99, False), (104, False), ("open", False), (None, False),
])
def test_trip_state_rule(state, accepted):
    assert validate_fields("trips", {"state": state}) is accepted


def test_rules_only_cover_present_columns():
    assert validate_fields("trips", {"from_to": "anything"})
    assert validate_fields("trips", {"submitted_date": None})
    assert not validate_fields("trips", {"received_date": None})


def test_required_columns_reported_when_missing():
    display = MessageCollector()
    ok = validate_fields("stops", {"location": "A"}, display, required=("trip_number", "location", "stop_index"))
    assert not ok
    assert display.messages == ["Invalid value for TRIP_NUMBER", "Invalid value for STOP_INDEX"]


def test_every_failing_column_is_reported():
    display = MessageCollector()
    assert not validate_fields("stops", {"location": " ", "stop_index": "1.5", "date_completed": "x"}, display)
    assert len(display.messages) == 3


@pytest.mark.parametrize("value, accepted", [
    (9_999_999, True), (10_000_000, True), ("10000000", True), ("-3", True), ("0", True),
    ("007", False), ("+3", False), ("1.0", False), (" 5", False), ("", False), (True, False), (None, False),
])
def test_integer_parse(value, accepted):
    assert is_integer(value) is accepted


def test_integer_columns_accept_values_past_float32_digits():
    assert not is_valid("10000000", IS_WHOLE_NUMBER)
    assert validate_fields("trips", {"hub_start": 9_999_999, "hub_end": 10_000_000})
    assert validate_fields("stops", {"trip_number": "10000000", "stop_index": 10_000_000, "arrival_hub": "12345678"})


def test_integer_columns_report_bad_values():
    display = MessageCollector()
    assert not validate_fields("trips", {"trip_number": "", "hub_end": "1.5"}, display)
    assert display.messages == ["Invalid value for TRIP_NUMBER", "Invalid value for HUB_END"]
