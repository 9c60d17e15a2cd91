"""Structured logging helpers shared by every layer.

Purpose
    Give the reader, parser, loader and binder one vocabulary of structured
    events. The library is silent unless the host application attaches a
    handler to the ``lib_env_config`` logger.

Contents
    - ``TRACE_ID``: context variable storing the active trace identifier.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_trace_id``: binds or clears the active trace identifier.
    - ``trace_scope``: correlates every event of one load or bind call.
    - ``log_debug`` / ``log_info`` / ``log_error``: emit structured entries via a
      single private emitter.
    - ``make_event``: builder for ``layer``/``path`` payloads.
    - ``key_names``: the only sanctioned way to describe a mapping in a log.

System Integration
    Environment values frequently hold credentials. Callers pass key names,
    file paths, counts and exception type names; never values.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_env_config_trace_id", default=None)
"""Current trace identifier attached to every structured log entry."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_env_config")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers.

    Why
        The library stays silent through a ``NullHandler`` until the host
        application decides on handlers and formatters.
    """

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Why
        Lets a host correlate load and bind events with its own request ids.
    Inputs
        trace_id: Identifier string or ``None`` to drop the binding.
    Side Effects
        Mutates :data:`TRACE_ID` for the current context.

    Examples
    --------
    >>> bind_trace_id('load-42')
    >>> TRACE_ID.get()
    'load-42'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


@contextmanager
def trace_scope() -> Iterator[str]:
    """Run a block under a trace identifier and restore the previous one after.

    What
        Reuses a trace id bound by the caller so that loading and binding done
        inside one request share it; otherwise generates a fresh one.
    Side Effects
        Sets :data:`TRACE_ID` inside the block and resets it on exit.

    Examples
    --------
    >>> bind_trace_id('request-7')
    >>> with trace_scope() as trace_id:
    ...     trace_id
    'request-7'
    >>> bind_trace_id(None)
    >>> with trace_scope() as trace_id:
    ...     len(trace_id)
    32
    >>> TRACE_ID.get() is None
    True
    """

    current = TRACE_ID.get()
    trace_id = current or uuid.uuid4().hex
    token = TRACE_ID.set(trace_id)
    try:
        yield trace_id
    finally:
        TRACE_ID.reset(token)


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry that includes the trace context."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info log entry that includes the trace context."""

    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error log entry that includes the trace context."""

    _emit(logging.ERROR, message, fields)


def make_event(
    layer: str,
    path: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured logging payload for loader and binder events.

    Examples
    --------
    >>> make_event('dotenv', '.env', {'keys': ['HOST']})
    {'layer': 'dotenv', 'path': '.env', 'keys': ['HOST']}
    >>> make_event('binder', None)
    {'layer': 'binder', 'path': None}
    """

    event: dict[str, Any] = {"layer": layer, "path": path}
    if payload:
        event |= dict(payload)
    return event


def key_names(data: Mapping[str, str] | Iterable[str]) -> list[str]:
    """Return the key names of *data* in order, dropping any values.

    Examples
    --------
    >>> key_names({'API_TOKEN': 'secret', 'HOST': 'db'})
    ['API_TOKEN', 'HOST']
    """

    return list(data.keys() if isinstance(data, Mapping) else data)


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": {"trace_id": TRACE_ID.get(), **fields}})
