"""Composition root for ``lib_env_config``.

Purpose
-------
Provide the entry points that wire the file reader, the dotenv parser, the
merge policy and the binder together, and export only stable, consumer-ready
APIs.

Contents
--------
* :data:`DEFAULT_DOTENV_FILE` – file loaded when no names are given.
* :func:`load_files` – layered load of dotenv files into the environment.
* :func:`bind_struct` – re-exported from :mod:`lib_env_config.application.binding`.

System Role
-----------
This module is the canonical place to change precedence rules or wire new
adapters. Loading is meant to happen once, early, before other threads read
the environment; nothing here locks.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Final

from .adapters.dotenv.default import DefaultDotEnvLoader
from .adapters.env.default import resolve_environ
from .application.binding import bind_struct, env_field
from .application.merge import merge_layers
from .application.ports import DotEnvLoader, Environment, FileReader
from .domain.errors import EnvConfigError, FileLoadError
from .observability import log_error, log_info, trace_scope

DEFAULT_DOTENV_FILE: Final[str] = ".env"


def load_files(
    *names: str,
    environ: Environment | None = None,
    reader: FileReader | None = None,
) -> dict[str, str]:
    """Load dotenv files in order into *environ* and return provenance.

    The first file overwrites existing variables; each later file only fills
    variables that are still absent when it is processed. With no *names*,
    ``.env`` in the working directory is loaded.

    Parameters
    ----------
    names:
        File paths, highest precedence first.
    environ:
        Target store; defaults to :data:`os.environ`.
    reader:
        Byte reader adapter; defaults to the filesystem reader.

    Returns
    -------
    dict[str, str]
        Every key written during this call mapped to the file that wrote it.

    Raises
    ------
    FileLoadError
        On the first file that cannot be read, parsed or applied. Files merged before
        it stay applied.

    Examples
    --------
    >>> from pathlib import Path
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> first = Path(tmp.name) / 'a.env'
    >>> second = Path(tmp.name) / 'b.env'
    >>> _ = first.write_text('X=1\\nY=2\\n', encoding='utf-8')
    >>> _ = second.write_text('X=9\\nZ=3\\n', encoding='utf-8')
    >>> env: dict[str, str] = {}
    >>> sorted(load_files(str(first), str(second), environ=env).items()) == [
    ...     ('X', str(first)), ('Y', str(first)), ('Z', str(second))]
    True
    >>> env
    {'X': '1', 'Y': '2', 'Z': '3'}
    >>> tmp.cleanup()
    """

    filenames = names or (DEFAULT_DOTENV_FILE,)
    target = resolve_environ(environ)
    loader = DefaultDotEnvLoader(reader=reader)

    with trace_scope():
        provenance = merge_layers(target, _iter_layers(loader, filenames))
        log_info("files_loaded", layer="dotenv", path=None, files=list(filenames), written=len(provenance))
    return provenance


def _iter_layers(loader: DotEnvLoader, filenames: tuple[str, ...]) -> Iterator[tuple[str, Mapping[str, str]]]:
    """Yield ``(name, mapping)`` per file, wrapping failures with the file name."""

    for name in filenames:
        try:
            data = loader.load(name)
        except (EnvConfigError, OSError) as exc:
            log_error("file_load_failed", layer="dotenv", path=name, error=str(exc))
            raise FileLoadError(name, exc) from exc
        yield name, data


__all__ = [
    "DEFAULT_DOTENV_FILE",
    "bind_struct",
    "env_field",
    "load_files",
]
