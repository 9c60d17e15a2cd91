"""Coercion tests for every supported field kind."""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_env_config.domain.coercion import FieldKind, UInt, coerce, kind_of, parse_duration, parse_timestamp
from lib_env_config.domain.errors import CoercionError, UnsupportedFieldType


@pytest.mark.parametrize(
    ("annotation", "kind"),
    [
        (str, FieldKind.STRING),
        (int, FieldKind.INT),
        (UInt, FieldKind.UINT),
        (float, FieldKind.FLOAT),
        (bool, FieldKind.BOOL),
        (timedelta, FieldKind.DURATION),
        (datetime, FieldKind.TIMESTAMP),
    ],
)
def test_kind_of_supported(annotation: object, kind: FieldKind) -> None:
    assert kind_of(annotation) is kind


@pytest.mark.parametrize("annotation", [list, dict, date, bytes, "str", None])
def test_kind_of_unsupported(annotation: object) -> None:
    with pytest.raises(UnsupportedFieldType):
        kind_of(annotation)


def test_string_is_verbatim() -> None:
    assert coerce(FieldKind.STRING, "  spaced  ") == "  spaced  "
    assert coerce(FieldKind.STRING, "") == ""


@pytest.mark.parametrize("raw", ["", " 1", "1.0", "1_000", "0x10", "abc", "9223372036854775808"])
def test_int_rejects(raw: str) -> None:
    with pytest.raises(CoercionError):
        coerce(FieldKind.INT, raw)


@pytest.mark.parametrize(("raw", "expected"), [("+7", 7), ("-7", -7), ("007", 7), ("-9223372036854775808", -(2**63))])
def test_int_accepts(raw: str, expected: int) -> None:
    assert coerce(FieldKind.INT, raw) == expected


@pytest.mark.parametrize("raw", ["-1", "+1", "", "18446744073709551616"])
def test_uint_rejects(raw: str) -> None:
    with pytest.raises(CoercionError):
        coerce(FieldKind.UINT, raw)


def test_uint_upper_bound() -> None:
    assert coerce(FieldKind.UINT, "18446744073709551615") == 2**64 - 1


@pytest.mark.parametrize(("raw", "expected"), [("3.14", 3.14), ("1e3", 1000.0), (".5", 0.5), ("-2", -2.0)])
def test_float_accepts(raw: str, expected: float) -> None:
    assert coerce(FieldKind.FLOAT, raw) == expected


def test_float_special_values() -> None:
    assert math.isinf(coerce(FieldKind.FLOAT, "inf"))
    assert math.isnan(coerce(FieldKind.FLOAT, "NaN"))


@pytest.mark.parametrize("raw", ["", "abc", " 1.0", "1_0", "1.0.0"])
def test_float_rejects(raw: str) -> None:
    with pytest.raises(CoercionError):
        coerce(FieldKind.FLOAT, raw)


@pytest.mark.parametrize("raw", ["42", "yes", "t", "", "on"])
def test_bool_rejects(raw: str) -> None:
    with pytest.raises(CoercionError):
        coerce(FieldKind.BOOL, raw)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0", timedelta(0)),
        ("3h", timedelta(hours=3)),
        ("-10s", timedelta(seconds=-10)),
        ("+5m", timedelta(minutes=5)),
        ("1h30m", timedelta(minutes=90)),
        ("2h45m30.5s", timedelta(hours=2, minutes=45, seconds=30.5)),
        ("300ms", timedelta(milliseconds=300)),
        ("1.5h", timedelta(minutes=90)),
        ("10us", timedelta(microseconds=10)),
        ("10µs", timedelta(microseconds=10)),
        ("1500ns", timedelta(microseconds=1)),
        (".5s", timedelta(milliseconds=500)),
    ],
)
def test_duration_accepts(raw: str, expected: timedelta) -> None:
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "-", "10", "3d", "1h 30m", "s", ".s", "1.2.3s", "abc"])
def test_duration_rejects(raw: str) -> None:
    with pytest.raises(CoercionError):
        parse_duration(raw)


def test_duration_out_of_range() -> None:
    with pytest.raises(CoercionError, match="out of range"):
        parse_duration("3000000h")


def test_duration_int64_bounds_are_asymmetric() -> None:
    assert parse_duration("-9223372036854775808ns") == -timedelta(microseconds=9223372036854775)
    assert parse_duration("9223372036854775807ns") == timedelta(microseconds=9223372036854775)
    with pytest.raises(CoercionError, match="out of range"):
        parse_duration("9223372036854775808ns")
    with pytest.raises(CoercionError, match="out of range"):
        parse_duration("-9223372036854775809ns")


@given(st.integers(min_value=-10**9, max_value=10**9))
def test_duration_seconds_round_trip(seconds: int) -> None:
    assert parse_duration(f"{seconds}s") == timedelta(seconds=seconds)


UTC = timezone.utc


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2025-06-13T10:20:30Z", datetime(2025, 6, 13, 10, 20, 30, tzinfo=UTC)),
        (
            "2025-06-13T10:20:30+02:00",
            datetime(2025, 6, 13, 10, 20, 30, tzinfo=timezone(timedelta(hours=2))),
        ),
        ("2025-06-13T10:20:30.123456789Z", datetime(2025, 6, 13, 10, 20, 30, 123456, tzinfo=UTC)),
        ("2025-06-13 10:20:30", datetime(2025, 6, 13, 10, 20, 30, tzinfo=UTC)),
        ("2025-06-13", datetime(2025, 6, 13, tzinfo=UTC)),
        ("10:20:30", datetime(1900, 1, 1, 10, 20, 30, tzinfo=UTC)),
        ("3:04PM", datetime(1900, 1, 1, 15, 4, tzinfo=UTC)),
        ("Jan  2 15:04:05", datetime(1900, 1, 2, 15, 4, 5, tzinfo=UTC)),
        ("Jan 12 15:04:05.000", datetime(1900, 1, 12, 15, 4, 5, tzinfo=UTC)),
        ("Jan 12 15:04:05.000000001", datetime(1900, 1, 12, 15, 4, 5, tzinfo=UTC)),
    ],
)
def test_timestamp_formats(raw: str, expected: datetime) -> None:
    assert parse_timestamp(raw) == expected


@pytest.mark.parametrize("raw", ["", "yesterday", "2025-13-01", "13/06/2025"])
def test_timestamp_unknown_format(raw: str) -> None:
    with pytest.raises(CoercionError, match="unknown time format"):
        parse_timestamp(raw)


def test_timestamp_through_coerce() -> None:
    assert coerce(FieldKind.TIMESTAMP, "1992-06-26") == datetime(1992, 6, 26, tzinfo=UTC)
