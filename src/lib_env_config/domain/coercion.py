"""Type-directed coercion of raw environment strings.

Purpose
-------
Define the closed set of field kinds the binder supports and convert raw
strings into values of those kinds. Everything here is pure: no environment
access, no logging.

Contents
--------
* :data:`UInt` – ``NewType`` marking unsigned integer fields.
* :class:`FieldKind` – enumeration of supported field kinds.
* :func:`kind_of` – map a resolved annotation onto a :class:`FieldKind`.
* :func:`coerce` – convert a raw string for a given kind.
* :func:`parse_duration` / :func:`parse_timestamp` – the two multi-format
  parsers, also reused by the lookup helpers.

System Role
-----------
Adding a new field kind means adding an enum member, a converter and an
entry in :data:`_KINDS`; nothing dispatches on arbitrary types at runtime.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Final, NewType

from .errors import CoercionError, UnsupportedFieldType

UInt = NewType("UInt", int)

_INT64_MIN: Final[int] = -(2**63)
_INT64_MAX: Final[int] = 2**63 - 1
_UINT64_MAX: Final[int] = 2**64 - 1

_SIGNED_DIGITS: Final = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_DIGITS: Final = re.compile(r"[0-9]+")

_TRUE_WORDS: Final[frozenset[str]] = frozenset({"true", "1"})
_FALSE_WORDS: Final[frozenset[str]] = frozenset({"false", "0"})


class FieldKind(Enum):
    """Supported leaf field kinds."""

    STRING = "string"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    BOOL = "bool"
    DURATION = "duration"
    TIMESTAMP = "timestamp"


_KINDS: Final[dict[Any, FieldKind]] = {
    str: FieldKind.STRING,
    int: FieldKind.INT,
    UInt: FieldKind.UINT,
    float: FieldKind.FLOAT,
    bool: FieldKind.BOOL,
    timedelta: FieldKind.DURATION,
    datetime: FieldKind.TIMESTAMP,
}


def kind_of(annotation: Any) -> FieldKind:
    """Return the :class:`FieldKind` for a resolved type annotation.

    Raises
    ------
    UnsupportedFieldType
        For anything outside the supported kinds (lists, ``Optional``, ...).

    Examples
    --------
    >>> kind_of(bool)
    <FieldKind.BOOL: 'bool'>
    >>> kind_of(list)
    Traceback (most recent call last):
    ...
    lib_env_config.domain.errors.UnsupportedFieldType: unsupported field type list
    """

    try:
        return _KINDS[annotation]
    except (KeyError, TypeError):
        raise UnsupportedFieldType(_type_name(annotation)) from None


def coerce(kind: FieldKind, raw: str) -> object:
    """Convert ``raw`` into a value of ``kind`` or raise :class:`CoercionError`.

    Examples
    --------
    >>> coerce(FieldKind.INT, "-42")
    -42
    >>> coerce(FieldKind.BOOL, "TRUE")
    True
    >>> coerce(FieldKind.DURATION, "-10s")
    datetime.timedelta(days=-1, seconds=86390)
    """

    return _CONVERTERS[kind](raw)


def _to_string(raw: str) -> str:
    return raw


def _to_int(raw: str) -> int:
    if _SIGNED_DIGITS.fullmatch(raw) is None:
        raise CoercionError(f"invalid int value {raw!r}")
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise CoercionError(f"int value {raw!r} out of range")
    return value


def _to_uint(raw: str) -> int:
    if _UNSIGNED_DIGITS.fullmatch(raw) is None:
        raise CoercionError(f"invalid uint value {raw!r}")
    value = int(raw)
    if value > _UINT64_MAX:
        raise CoercionError(f"uint value {raw!r} out of range")
    return value


def _to_float(raw: str) -> float:
    # float() also accepts surrounding blanks and digit separators.
    if not raw or raw != raw.strip() or "_" in raw:
        raise CoercionError(f"invalid float value {raw!r}")
    try:
        return float(raw)
    except ValueError:
        raise CoercionError(f"invalid float value {raw!r}") from None


def _to_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise CoercionError(f"invalid bool value {raw!r}")


_NANOS_PER_UNIT: Final[dict[str, int]] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_SEGMENT: Final = re.compile(r"([0-9]+\.?[0-9]*|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(raw: str) -> timedelta:
    """Parse a signed sequence of ``<number><unit>`` segments.

    Units are ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and ``h``; a bare
    ``0`` needs no unit. Sub-microsecond precision is truncated toward zero.

    Examples
    --------
    >>> parse_duration("1h30m")
    datetime.timedelta(seconds=5400)
    >>> parse_duration("1.5s")
    datetime.timedelta(seconds=1, microseconds=500000)
    >>> parse_duration("3d")
    Traceback (most recent call last):
    ...
    lib_env_config.domain.errors.CoercionError: invalid duration value '3d'
    """

    text = raw
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise CoercionError(f"invalid duration value {raw!r}")

    total = Decimal(0)
    position = 0
    while position < len(text):
        match = _DURATION_SEGMENT.match(text, position)
        if match is None:
            raise CoercionError(f"invalid duration value {raw!r}")
        number, unit = match.groups()
        total += Decimal(number) * _NANOS_PER_UNIT[unit]
        position = match.end()

    nanos = int(total)
    if nanos > _INT64_MAX + negative:
        raise CoercionError(f"duration value {raw!r} out of range")
    delta = timedelta(microseconds=nanos // 1_000)
    return -delta if negative else delta


def _to_duration(raw: str) -> timedelta:
    return parse_duration(raw)


_FRACTION: Final = re.compile(r"(\.[0-9]{6})[0-9]+")

# (format, has fractional seconds, lacks a year)
_TIME_FORMATS: Final[tuple[tuple[str, bool, bool], ...]] = (
    ("%Y-%m-%dT%H:%M:%S%z", False, False),
    ("%Y-%m-%dT%H:%M:%S.%f%z", True, False),
    ("%Y-%m-%d %H:%M:%S", False, False),
    ("%Y-%m-%d", False, False),
    ("%H:%M:%S", False, False),
    ("%I:%M%p", False, False),
    ("%Y %b %d %H:%M:%S", False, True),
    ("%Y %b %d %H:%M:%S.%f", True, True),
)
_STAMP_YEAR: Final[str] = "1900"


def parse_timestamp(raw: str) -> datetime:
    """Return the first successful parse of ``raw`` against the known formats.

    Results without an explicit offset are UTC. Formats without a date part
    resolve to 1900-01-01; stamp formats without a year resolve to 1900.

    Examples
    --------
    >>> parse_timestamp("1992-06-26")
    datetime.datetime(1992, 6, 26, 0, 0, tzinfo=datetime.timezone.utc)
    >>> parse_timestamp("2024-01-02T03:04:05.123456789+02:00").microsecond
    123456
    >>> parse_timestamp("3:04PM").hour
    15
    """

    for fmt, fractional, yearless in _TIME_FORMATS:
        candidate = _FRACTION.sub(r"\1", raw) if fractional else raw
        if yearless:
            candidate = f"{_STAMP_YEAR} {candidate}"
        try:
            parsed = datetime.strptime(candidate, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise CoercionError(f"unknown time format: {raw}")


def _to_timestamp(raw: str) -> datetime:
    return parse_timestamp(raw)


_CONVERTERS: Final[dict[FieldKind, Callable[[str], object]]] = {
    FieldKind.STRING: _to_string,
    FieldKind.INT: _to_int,
    FieldKind.UINT: _to_uint,
    FieldKind.FLOAT: _to_float,
    FieldKind.BOOL: _to_bool,
    FieldKind.DURATION: _to_duration,
    FieldKind.TIMESTAMP: _to_timestamp,
}


def _type_name(annotation: Any) -> str:
    return getattr(annotation, "__name__", None) or repr(annotation)
