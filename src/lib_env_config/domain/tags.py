"""Binding directive value object and parser.

Purpose
-------
Turn the compact per-field directive string (``"DB_PORT,default=5432"``) into
an immutable :class:`TagDescriptor`. The parser performs no I/O and never
consults the environment, so conflicting directives fail before any lookup.

Contents
--------
* :data:`METADATA_KEY` – dataclass ``field`` metadata key holding directives.
* :class:`TagDescriptor` – parsed directive.
* :func:`parse_tag` – directive parser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .errors import TagError

METADATA_KEY: Final[str] = "env"

_REQUIRED: Final[str] = "required"
_DEFAULT_PREFIX: Final[str] = "default="


@dataclass(frozen=True, slots=True)
class TagDescriptor:
    """Structured form of a binding directive.

    Attributes
    ----------
    key:
        Environment variable name, never empty.
    required:
        ``True`` when an absent or empty variable must fail the bind.
    default:
        Replacement string used when the variable is absent or empty. Only
        meaningful when :attr:`has_default` is ``True``.
    has_default:
        Distinguishes ``default=`` (empty default) from no default at all.
    """

    key: str
    required: bool = False
    default: str = ""
    has_default: bool = False


def parse_tag(directive: str) -> TagDescriptor:
    """Parse ``directive`` into a :class:`TagDescriptor`.

    Parts after the key are trimmed; unknown parts are ignored. The default
    value is everything after the first ``=`` of its part, so it may itself
    contain ``=`` but not ``,``.

    Raises
    ------
    TagError
        When the key is empty or the directive is both required and defaulted.

    Examples
    --------
    >>> parse_tag("API_PORT,default=8080")
    TagDescriptor(key='API_PORT', required=False, default='8080', has_default=True)
    >>> parse_tag(" DB_NAME , required ").required
    True
    >>> parse_tag("KEY,required,default=5")
    Traceback (most recent call last):
    ...
    lib_env_config.domain.errors.TagError: cannot be both required and have default: KEY
    """

    parts = directive.split(",")
    key = parts[0].strip()
    if not key:
        raise TagError("environment variable key must be set")

    required = False
    default = ""
    has_default = False
    for raw in parts[1:]:
        part = raw.strip()
        if part == _REQUIRED:
            required = True
        elif part.startswith(_DEFAULT_PREFIX):
            default = part[len(_DEFAULT_PREFIX) :]
            has_default = True

    if required and has_default:
        raise TagError(f"cannot be both required and have default: {key}")
    return TagDescriptor(key=key, required=required, default=default, has_default=has_default)
