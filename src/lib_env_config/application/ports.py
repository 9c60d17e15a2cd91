"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts the composition root relies on so adapters
can be swapped (for example an in-memory reader in tests) without touching
the loader or the binder.

Contents
--------
* :class:`FileReader` – returns the raw bytes of a named file.
* :class:`DotEnvLoader` – turns one named file into a flat key/value mapping.
* :data:`Environment` – the ambient key/value store (``os.environ`` or any
  ``MutableMapping[str, str]``).
"""

from __future__ import annotations

from typing import Mapping, MutableMapping, Protocol, runtime_checkable

Environment = MutableMapping[str, str]


@runtime_checkable
class FileReader(Protocol):
    """Open a named file and return its full content.

    Implementations raise :class:`lib_env_config.domain.errors.NotFound` when
    the file is missing.
    """

    def read(self, path: str) -> bytes:
        """Return the bytes stored at *path*."""


@runtime_checkable
class DotEnvLoader(Protocol):
    """Materialise one dotenv file into a flat mapping."""

    def load(self, path: str) -> Mapping[str, str]:
        """Read and parse *path* or raise ``NotFound`` / ``InvalidFormat``."""
