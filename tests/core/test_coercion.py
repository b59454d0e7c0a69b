"""Coerción best-effort.

Invariantes:
    - Strings que cumplen la gramática se convierten; el resto pasa sin tocar
    - Idempotencia: un valor ya tipado se devuelve igual
    - Ninguna función lanza
"""

from datetime import datetime, timezone

import pytest

from core.domain.coercion import (
    SECONDS_THRESHOLD,
    as_bool,
    as_epoch_seconds,
    as_float,
    as_int,
    as_timestamp,
)


# -- as_int -------------------------------------------------------------------


@pytest.mark.parametrize("text", ["0", "7", "42", "0012", "1570000000"])
def test_as_int_converts_digit_strings(text):
    assert as_int(text) == int(text)
    assert isinstance(as_int(text), int)


@pytest.mark.parametrize("text", ["", "-5", "1.5", "12a", " 12", "١٢"])
def test_as_int_returns_non_digit_strings_unchanged(text):
    assert as_int(text) is text


def test_as_int_keeps_digit_strings_beyond_the_conversion_limit():
    text = "9" * 5000
    assert as_int(text) is text


def test_as_int_passes_through_non_strings():
    obj = object()
    assert as_int(5) == 5
    assert as_int(-3.5) == -3.5
    assert as_int(None) is None
    assert as_int(obj) is obj


# -- as_float -----------------------------------------------------------------


@pytest.mark.parametrize(
    ("text", "expected"),
    [("3", 3.0), ("-12", -12.0), ("37.7749", 37.7749), ("-122.41", -122.41), ("3,5", 3.0), ("-2,75", -2.0), ("12.", 12.0)],
)
def test_as_float_converts_numeric_strings(text, expected):
    assert as_float(text) == pytest.approx(expected)
    assert isinstance(as_float(text), float)


@pytest.mark.parametrize("text", ["", ".5", "1e5", "abc", "1.2.3", "+4"])
def test_as_float_returns_other_strings_unchanged(text):
    assert as_float(text) is text


def test_as_float_keeps_numbers():
    assert as_float(1.25) == 1.25
    assert as_float(3) == 3


# -- as_bool ------------------------------------------------------------------


@pytest.mark.parametrize("value", ["1", 1, "yes", "true"])
def test_as_bool_true_literals(value):
    assert as_bool(value) is True


@pytest.mark.parametrize("value", ["0", 0, "no", "false"])
def test_as_bool_false_literals(value):
    assert as_bool(value) is False


@pytest.mark.parametrize("value", ["TRUE", "Yes", "on", 2, "", None, "y"])
def test_as_bool_passes_through_everything_else(value):
    assert as_bool(value) is value


def test_as_bool_is_idempotent():
    assert as_bool(True) is True
    assert as_bool(False) is False


def test_as_bool_does_not_fail_on_unhashable_values():
    data = {"a": 1}
    assert as_bool(data) is data


# -- as_timestamp -------------------------------------------------------------


@pytest.mark.parametrize("seconds", [0, 1, 1_570_000_000, 99_999_999_999])
def test_as_timestamp_seconds_become_milliseconds(seconds):
    result = as_timestamp(seconds)
    assert isinstance(result, datetime)
    assert round(result.timestamp() * 1000) == seconds * 1000


def test_as_timestamp_digit_string_is_seconds():
    result = as_timestamp("1570000000")
    assert result == datetime.fromtimestamp(1_570_000_000, tz=timezone.utc)


def test_as_timestamp_millisecond_values_are_kept():
    millis = 1_570_000_000_123
    assert millis >= SECONDS_THRESHOLD
    result = as_timestamp(millis)
    assert round(result.timestamp() * 1000) == millis


def test_as_timestamp_parses_iso_strings_as_utc():
    assert as_timestamp("2019-10-02T07:06:40Z") == datetime(2019, 10, 2, 7, 6, 40, tzinfo=timezone.utc)
    assert as_timestamp("2019-10-02T07:06:40").tzinfo is timezone.utc


@pytest.mark.parametrize("value", [None, "not a date", "", True, [1, 2]])
def test_as_timestamp_returns_unparseable_input_unchanged(value):
    assert as_timestamp(value) is value


def test_as_timestamp_keeps_oversized_digit_strings():
    text = "9" * 5000
    assert as_timestamp(text) is text


def test_as_timestamp_overflow_returns_input():
    huge = 10**30
    assert as_timestamp(huge) == huge


def test_as_timestamp_is_idempotent():
    moment = datetime(2020, 1, 1, tzinfo=timezone.utc)
    assert as_timestamp(moment) is moment
    assert as_timestamp(as_timestamp(1_570_000_000)) == as_timestamp(1_570_000_000)


# -- as_epoch_seconds ---------------------------------------------------------


def test_as_epoch_seconds_from_datetime():
    assert as_epoch_seconds(datetime(2019, 10, 2, 7, 6, 40, tzinfo=timezone.utc)) == 1_570_000_000


def test_as_epoch_seconds_naive_datetime_is_utc():
    assert as_epoch_seconds(datetime(1970, 1, 1, 0, 1)) == 60


def test_as_epoch_seconds_from_iso_string_and_numbers():
    assert as_epoch_seconds("1970-01-01T00:00:10Z") == 10
    assert as_epoch_seconds(1_570_000_000) == 1_570_000_000
    assert as_epoch_seconds(1_570_000_000_000) == 1_570_000_000


def test_as_epoch_seconds_passes_through_unknown():
    assert as_epoch_seconds("yesterday") == "yesterday"
