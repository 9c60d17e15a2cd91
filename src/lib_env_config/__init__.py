"""Public package surface for ``lib_env_config``.

Load ``.env`` files into the process environment with layered precedence and
bind environment variables onto dataclass records::

    from dataclasses import dataclass, field
    from lib_env_config import bind_struct, env_field, load_files

    @dataclass
    class Database:
        name: str = env_field("DB_NAME,required")
        port: int = env_field("DB_PORT,default=5432")

    @dataclass
    class Settings:
        env: str = env_field("ENV,default=development")
        database: Database = field(default_factory=Database)

    load_files(".env", ".env.local")
    settings = bind_struct(Settings())
"""

from __future__ import annotations

from .adapters.dotenv.default import parse_dotenv
from .adapters.env.default import get_bool, get_duration, get_int, get_string, must_string
from .core import DEFAULT_DOTENV_FILE, bind_struct, env_field, load_files
from .domain.coercion import FieldKind, UInt
from .domain.errors import (
    BindingError,
    CoercionError,
    EnvConfigError,
    FieldError,
    FileLoadError,
    InvalidEncoding,
    InvalidFormat,
    MissingDelimiter,
    MissingEndQuote,
    MissingRequired,
    MissingVariable,
    NotFound,
    ShapeError,
    TagError,
    UnsupportedFieldType,
)
from .domain.tags import METADATA_KEY, TagDescriptor, parse_tag
from .observability import bind_trace_id, get_logger

__all__ = [
    "DEFAULT_DOTENV_FILE",
    "METADATA_KEY",
    "BindingError",
    "CoercionError",
    "EnvConfigError",
    "FieldError",
    "FieldKind",
    "FileLoadError",
    "InvalidEncoding",
    "InvalidFormat",
    "MissingDelimiter",
    "MissingEndQuote",
    "MissingRequired",
    "MissingVariable",
    "NotFound",
    "ShapeError",
    "TagDescriptor",
    "TagError",
    "UInt",
    "UnsupportedFieldType",
    "bind_struct",
    "bind_trace_id",
    "env_field",
    "get_bool",
    "get_duration",
    "get_int",
    "get_logger",
    "get_string",
    "load_files",
    "must_string",
    "parse_dotenv",
    "parse_tag",
]
