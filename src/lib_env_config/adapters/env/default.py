"""Environment variable adapter.

Purpose
-------
Give the rest of the package one way to reach the ambient environment and
offer single-key lookup helpers with explicit fallbacks.

Key behaviours
--------------
* ``environ=None`` always means :data:`os.environ`; tests pass a plain ``dict``
  to stay isolated from the real process environment.
* A variable that is set but empty counts as absent for :func:`lookup`,
  :func:`get_string` and :func:`must_string`.
* Typed helpers return the fallback when the variable is absent **or** its
  value does not parse; they never raise.
"""

from __future__ import annotations

import os
from datetime import timedelta
from typing import MutableMapping

from ...domain.coercion import FieldKind, coerce, parse_duration
from ...domain.errors import CoercionError, MissingVariable


def resolve_environ(environ: MutableMapping[str, str] | None) -> MutableMapping[str, str]:
    """Return *environ* or the process environment when it is ``None``.

    Examples
    --------
    >>> resolve_environ(None) is os.environ
    True
    >>> empty: dict[str, str] = {}
    >>> resolve_environ(empty) is empty
    True
    """

    return os.environ if environ is None else environ


def lookup(key: str, environ: MutableMapping[str, str] | None = None) -> str | None:
    """Return the value of *key*, or ``None`` when it is absent or empty.

    Examples
    --------
    >>> lookup("HOST", {"HOST": "db"}), lookup("HOST", {"HOST": ""}), lookup("HOST", {})
    ('db', None, None)
    """

    value = resolve_environ(environ).get(key)
    return value or None


def get_string(key: str, fallback: str, *, environ: MutableMapping[str, str] | None = None) -> str:
    """Return the value of *key* or *fallback* when it is absent or empty.

    Examples
    --------
    >>> get_string("REGION", "eu-west-1", environ={})
    'eu-west-1'
    """

    value = lookup(key, environ)
    return fallback if value is None else value


def get_int(key: str, fallback: int, *, environ: MutableMapping[str, str] | None = None) -> int:
    """Return *key* parsed as a base-10 integer, or *fallback*.

    Examples
    --------
    >>> get_int("WORKERS", 4, environ={"WORKERS": "8"})
    8
    >>> get_int("WORKERS", 4, environ={"WORKERS": "eight"})
    4
    """

    return _typed(key, FieldKind.INT, fallback, environ)


def get_bool(key: str, fallback: bool, *, environ: MutableMapping[str, str] | None = None) -> bool:
    """Return *key* parsed as a boolean (``true``/``false``/``1``/``0``), or *fallback*.

    Examples
    --------
    >>> get_bool("DEBUG", False, environ={"DEBUG": "True"})
    True
    """

    return _typed(key, FieldKind.BOOL, fallback, environ)


def get_duration(
    key: str, fallback: timedelta, *, environ: MutableMapping[str, str] | None = None
) -> timedelta:
    """Return *key* parsed as a duration such as ``"90s"`` or ``"1h30m"``, or *fallback*.

    Examples
    --------
    >>> get_duration("TIMEOUT", timedelta(seconds=5), environ={"TIMEOUT": "250ms"})
    datetime.timedelta(microseconds=250000)
    """

    value = resolve_environ(environ).get(key)
    if value is None:
        return fallback
    try:
        return parse_duration(value)
    except CoercionError:
        return fallback


def must_string(key: str, *, environ: MutableMapping[str, str] | None = None) -> str:
    """Return the value of *key* or raise :class:`MissingVariable`.

    Examples
    --------
    >>> must_string("DATABASE_URL", environ={})
    Traceback (most recent call last):
    ...
    lib_env_config.domain.errors.MissingVariable: environment variable DATABASE_URL is not defined
    """

    value = lookup(key, environ)
    if value is None:
        raise MissingVariable(key)
    return value


def _typed(key: str, kind: FieldKind, fallback, environ):
    value = resolve_environ(environ).get(key)
    if value is None:
        return fallback
    try:
        return coerce(kind, value)
    except CoercionError:
        return fallback
