"""Struct binder: populate dataclass records from the environment.

Purpose
-------
Walk a (possibly nested) dataclass instance, resolve each field's binding
directive, read its variable from the ambient environment, apply the
required/default policy, and coerce the string into the declared type.

Contents
--------
* :func:`env_field` – declare a bound field on a dataclass.
* :func:`bind_struct` – bind a record in place.

Rules
-----
* Fields whose name starts with ``_`` are private and never touched.
* A field annotated with a dataclass type is a nested record and is recursed
  into; ``None`` is replaced by a default-constructed instance first.
* Fields without ``metadata["env"]`` are skipped.
* Annotations are evaluated one field at a time in the declaring module. A
  name that does not resolve there (a ``TYPE_CHECKING`` import, a class local
  to a function) falls back to the type of a record value already held by
  the field; a tagged field that stays unresolved fails with
  :class:`UnsupportedFieldType`.
* A variable that is absent or set to the empty string is "missing": a
  ``required`` field fails, a field with ``default=`` receives the default,
  any other field is coerced from the empty string (text stays empty, the
  other kinds fail).
* The first failure aborts the call with a :class:`FieldError` carrying the
  dotted field path; fields bound before it keep their new values.
"""

from __future__ import annotations

import dataclasses
import inspect
import sys
from collections.abc import MutableMapping
from typing import Any, ForwardRef, TypeVar

from ..adapters.env.default import resolve_environ
from ..domain.coercion import coerce, kind_of
from ..domain.errors import EnvConfigError, FieldError, MissingRequired, ShapeError, UnsupportedFieldType
from ..domain.tags import METADATA_KEY, TagDescriptor, parse_tag
from ..observability import log_debug, log_error, log_info, trace_scope

T = TypeVar("T")

_UNRESOLVED: Any = object()


def env_field(directive: str, *, default: Any = None, **kwargs: Any) -> Any:
    """Return a ``dataclasses.field`` carrying a binding *directive*.

    ``default`` only seeds the attribute before binding so records can be
    instantiated without arguments; the environment policy comes from the
    directive. Extra keyword arguments go to :func:`dataclasses.field`.

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Api:
    ...     port: int = env_field("API_PORT,default=8080")
    >>> bind_struct(Api(), environ={}).port
    8080
    """

    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[METADATA_KEY] = directive
    if "default_factory" in kwargs:
        return dataclasses.field(metadata=metadata, **kwargs)
    return dataclasses.field(default=default, metadata=metadata, **kwargs)


def bind_struct(record: T, *, environ: MutableMapping[str, str] | None = None) -> T:
    """Populate every tagged field of *record* from *environ* and return it.

    Parameters
    ----------
    record:
        A mutable (non-frozen) dataclass instance.
    environ:
        Key/value store to read from; defaults to :data:`os.environ`.

    Raises
    ------
    ShapeError
        *record* is not a writable dataclass instance.
    FieldError
        A field failed; ``cause`` holds a :class:`TagError`,
        :class:`MissingRequired`, :class:`UnsupportedFieldType` or
        :class:`CoercionError`.

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Server:
    ...     env: str = env_field("ENVIRONMENT")
    ...     url: str = env_field("API_URL,default=localhost")
    ...     retries: int = env_field("RETRIES,default=3")
    >>> cfg = bind_struct(Server(), environ={"ENVIRONMENT": "development"})
    >>> cfg.env, cfg.url, cfg.retries
    ('development', 'localhost', 3)
    """

    _ensure_writable(record)
    env = resolve_environ(environ)
    with trace_scope():
        _bind_record(record, env, prefix="")
        log_info("record_bound", layer="binder", path=None, record=type(record).__name__)
    return record


def _ensure_writable(record: object) -> None:
    if isinstance(record, type) or not dataclasses.is_dataclass(record):
        raise ShapeError("value must be a dataclass instance")
    if type(record).__dataclass_params__.frozen:  # type: ignore[attr-defined]
        raise ShapeError("value must be a dataclass instance that is not frozen")


def _bind_record(record: Any, environ: MutableMapping[str, str], *, prefix: str) -> None:
    owner = type(record)
    for field in dataclasses.fields(record):
        if field.name.startswith("_"):
            continue
        path = f"{prefix}{field.name}"
        current = getattr(record, field.name, None)
        try:
            annotation = _resolve_annotation(owner, field)
        except (NameError, AttributeError):
            # Local or TYPE_CHECKING-only names; a record value still tells us the type.
            annotation = type(current) if _is_record_type(type(current)) else _UNRESOLVED

        if _is_record_type(annotation):
            _bind_nested(record, field.name, annotation, current, environ, path=path)
            continue

        directive = field.metadata.get(METADATA_KEY)
        if directive is None:
            continue

        key: str | None = None
        try:
            tag = parse_tag(directive)
            key = tag.key
            if annotation is _UNRESOLVED:
                raise UnsupportedFieldType(str(getattr(field.type, "__forward_arg__", field.type)))
            value = coerce(kind_of(annotation), _resolve_raw(tag, environ))
        except EnvConfigError as exc:
            log_error("field_bind_failed", layer="binder", path=None, field=path, key=key, error=type(exc).__name__)
            raise FieldError(path, key, exc) from exc
        setattr(record, field.name, value)
        log_debug("field_bound", layer="binder", path=None, field=path, key=key)


def _bind_nested(
    record: Any,
    name: str,
    annotation: type,
    current: Any,
    environ: MutableMapping[str, str],
    *,
    path: str,
) -> None:
    nested = current
    if nested is None:
        try:
            nested = annotation()
        except TypeError as exc:
            cause = ShapeError(f"cannot construct {annotation.__name__} without arguments: {exc}")
            raise FieldError(path, None, cause) from exc
        setattr(record, name, nested)
    try:
        _ensure_writable(nested)
    except ShapeError as exc:
        raise FieldError(path, None, exc) from exc
    _bind_record(nested, environ, prefix=f"{path}.")


def _resolve_annotation(owner: type, field: dataclasses.Field) -> Any:
    """Evaluate one field's annotation in the module of the class declaring it.

    Only this field is evaluated, so an unresolvable annotation elsewhere on
    the record cannot break binding. Raises ``NameError`` when a name is
    unknown to that module.

    Examples
    --------
    >>> from dataclasses import dataclass, fields
    >>> @dataclass
    ... class Api:
    ...     port: "int" = 0
    >>> _resolve_annotation(Api, fields(Api)[0])
    <class 'int'>
    """

    annotation = field.type
    if isinstance(annotation, ForwardRef):
        annotation = annotation.__forward_arg__
    if not isinstance(annotation, str):
        return annotation
    declaring = next(
        (klass for klass in owner.__mro__ if field.name in inspect.get_annotations(klass)),
        owner,
    )
    module = sys.modules.get(declaring.__module__)
    namespace = dict(vars(module)) if module is not None else {}
    return eval(annotation, namespace, dict(vars(declaring)))  # noqa: S307 - annotation text from the class body


def _resolve_raw(tag: TagDescriptor, environ: MutableMapping[str, str]) -> str:
    value = environ.get(tag.key, "")
    if value:
        return value
    if tag.required:
        raise MissingRequired(tag.key)
    if tag.has_default:
        return tag.default
    return ""


def _is_record_type(annotation: Any) -> bool:
    return isinstance(annotation, type) and dataclasses.is_dataclass(annotation)
