"""Byte-stream reader adapter.

Implements :class:`lib_env_config.application.ports.FileReader`: open a named
file, return its full content, and translate absence into :class:`NotFound`.
"""

from __future__ import annotations

from pathlib import Path

from ...domain.errors import NotFound
from ...observability import log_debug


class DefaultFileReader:
    """Read whole files from the local filesystem."""

    def read(self, path: str) -> bytes:
        """Return the raw bytes of *path*.

        Raises
        ------
        NotFound
            When the file does not exist or names a directory.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile(delete=False)
        >>> _ = tmp.write(b"KEY=value")
        >>> tmp.close()
        >>> DefaultFileReader().read(tmp.name)
        b'KEY=value'
        >>> Path(tmp.name).unlink()
        """

        file_path = Path(path)
        try:
            data = file_path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            log_debug("file_missing", layer="reader", path=path)
            raise NotFound(f"open {path}: no such file or directory") from exc
        log_debug("file_read", layer="reader", path=path, size=len(data))
        return data
