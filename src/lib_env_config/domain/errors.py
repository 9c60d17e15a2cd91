"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the dotenv parser, the layered
loader, the tag parser and the struct binder. The hierarchy lives in the
domain layer so adapters and the composition root can depend on it without
creating cycles.

Contents
--------
* :class:`EnvConfigError` – umbrella base class for every library failure.
* :class:`InvalidFormat` – dotenv syntax errors (:class:`MissingDelimiter`,
  :class:`MissingEndQuote`).
* :class:`NotFound` – a named dotenv file does not exist.
* :class:`FileLoadError` – any per-file failure, wrapped with the file name.
* :class:`TagError` – malformed binding directive.
* :class:`BindingError` – struct binding failures (:class:`ShapeError`,
  :class:`FieldError`) and their causes (:class:`MissingRequired`,
  :class:`UnsupportedFieldType`, :class:`CoercionError`).
* :class:`MissingVariable` – raised by :func:`must_string`.

System Role
-----------
Callers catch :class:`EnvConfigError` to handle all library failures
uniformly. Where a builtin exception expresses the same idea the classes also
inherit from it (``FileNotFoundError``, ``TypeError``, ``ValueError``,
``KeyError``) so generic handlers keep working.
"""

from __future__ import annotations


class EnvConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_env_config``."""


class InvalidFormat(EnvConfigError):
    """Raised when dotenv content cannot be parsed.

    Attributes
    ----------
    line:
        1-based line number where the problem was detected, if known.
    """

    reason = "malformed input"

    def __init__(self, line: int | None = None) -> None:
        self.line = line
        super().__init__(self._render())

    def _render(self) -> str:
        where = f" (line {self.line})" if self.line is not None else ""
        return f"{self.reason}{where}"


class MissingDelimiter(InvalidFormat):
    """A line carries a key but no ``=`` separating it from a value."""

    reason = "malformed line: Missing '=' in environment variable"


class MissingEndQuote(InvalidFormat):
    """A quoted value is not terminated before the end of input."""

    reason = "malformed value: Missing end quote '\"' in environment variable"


class InvalidEncoding(InvalidFormat):
    """The file content is not valid UTF-8."""

    reason = "malformed input: content is not valid UTF-8"


class NotFound(EnvConfigError, FileNotFoundError):
    """Represents a dotenv file that does not exist or cannot be opened."""


class FileLoadError(EnvConfigError):
    """Raised by the layered loader when one file fails to read, parse or apply.

    The original failure is available as ``cause`` and as ``__cause__``.

    Examples
    --------
    >>> str(FileLoadError(".env.ci", MissingDelimiter(3)))
    "Failed to load file '.env.ci': malformed line: Missing '=' in environment variable (line 3)"
    """

    def __init__(self, filename: str, cause: Exception) -> None:
        self.filename = filename
        self.cause = cause
        super().__init__(f"Failed to load file '{filename}': {cause}")


class TagError(EnvConfigError):
    """A binding directive is empty or contradicts itself."""


class BindingError(EnvConfigError):
    """Base type for failures raised while binding a record."""


class ShapeError(BindingError, TypeError):
    """The object handed to the binder is not a writable dataclass instance."""


class MissingRequired(BindingError):
    """A ``required`` variable is absent or empty."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"missing required env var {key}")


class UnsupportedFieldType(BindingError):
    """A tagged field declares a type outside the supported field kinds."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"unsupported field type {type_name}")


class CoercionError(BindingError, ValueError):
    """A raw string could not be converted into the field's declared type."""


class FieldError(BindingError):
    """Identify the field (dotted path) and key whose binding failed.

    Examples
    --------
    >>> err = FieldError("database.port", "DB_PORT", CoercionError("invalid int value 'x'"))
    >>> str(err)
    "error on field database.port: invalid int value 'x'"
    >>> err.key
    'DB_PORT'
    """

    def __init__(self, field: str, key: str | None, cause: Exception) -> None:
        self.field = field
        self.key = key
        self.cause = cause
        super().__init__(f"error on field {field}: {cause}")


class MissingVariable(EnvConfigError, KeyError):
    """A variable that must be present is absent or empty."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"environment variable {key} is not defined")

    def __str__(self) -> str:
        return str(self.args[0])
