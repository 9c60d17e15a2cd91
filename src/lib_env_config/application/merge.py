"""Application-layer merge policy for layered dotenv loading.

Purpose
-------
Apply a sequence of parsed dotenv files to the ambient environment following
first-file-authoritative, later-files-fill-gaps precedence, and report which
file wrote each key. Free of I/O so alternative composition roots can reuse it.

Contents
    - ``merge_layers``: public entry point driven by a simple loop.
    - ``merge_layer``: apply one mapping with or without overload.

System Role
-----------
Receives ``(path, mapping)`` pairs from :func:`lib_env_config.core.load_files`.
Layers may be produced lazily; when producing a layer raises, the layers
already merged stay applied. A store that refuses a write (``os.environ``
rejects NUL characters) fails the layer with
:class:`~lib_env_config.domain.errors.FileLoadError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable

from ..domain.errors import FileLoadError
from ..observability import log_debug, log_error, make_event
from .ports import Environment


def merge_layers(
    environ: Environment,
    layers: Iterable[tuple[str, Mapping[str, str]]],
) -> dict[str, str]:
    """Merge *layers* into *environ* in order and return provenance.

    What
        The first layer overwrites existing variables; every later layer only
        sets variables absent from *environ* at the time it is merged.
    Side Effects
        Writes into *environ*. A write the store refuses (``os.environ``
        rejects NUL characters) stops the merge with :class:`FileLoadError`
        naming that layer; earlier writes stay.

    Returns
    -------
    dict[str, str]
        Maps each key written during this call to the path that wrote it.

    Examples
    --------
    >>> env = {"X": "os"}
    >>> merge_layers(env, [("a.env", {"X": "1", "Y": "2"}), ("b.env", {"X": "9", "Z": "3"})])
    {'X': 'a.env', 'Y': 'a.env', 'Z': 'b.env'}
    >>> env
    {'X': '1', 'Y': '2', 'Z': '3'}
    """

    provenance: dict[str, str] = {}
    for index, (path, data) in enumerate(layers):
        try:
            written = merge_layer(environ, data, overload=index == 0)
        except (ValueError, OSError) as exc:
            log_error("file_load_failed", layer="dotenv", path=path, error=type(exc).__name__)
            raise FileLoadError(path, exc) from exc
        provenance.update(dict.fromkeys(written, path))
        log_debug("file_merged", **make_event("dotenv", path, {"written": written, "overload": index == 0}))
    return provenance


def merge_layer(
    environ: Environment,
    data: Mapping[str, str],
    *,
    overload: bool,
) -> list[str]:
    """Apply *data* to *environ* and return the keys that were written.

    Empty keys are skipped because no environment variable can carry an empty
    name.

    Examples
    --------
    >>> env = {"HOST": "os"}
    >>> merge_layer(env, {"HOST": "file", "PORT": "80"}, overload=False)
    ['PORT']
    >>> env["HOST"]
    'os'
    """

    written: list[str] = []
    for key, value in data.items():
        if not key:
            log_debug("dotenv_empty_key", layer="dotenv", path=None)
            continue
        if overload or key not in environ:
            environ[key] = value
            written.append(key)
    return written
