"""`.env` adapter.

Purpose
-------
Implement the :class:`lib_env_config.application.ports.DotEnvLoader` protocol:
read one named dotenv file through a
:class:`~lib_env_config.application.ports.FileReader` and parse it into a flat
``dict[str, str]``.

Contents
--------
* :func:`parse_dotenv` – the file grammar (comments, quoting, inline comments,
  whitespace trimming).
* :class:`DefaultDotEnvLoader` – read + parse for a single path.

Grammar
-------
Entries are ``KEY=value``. Blank lines and lines whose first non-blank
character is ``#`` are ignored. The key runs to the next ``=`` anywhere in
the remaining input and is trimmed. The value starts at the first non-space
character after ``=``, which may sit on a later line. An unquoted value runs
to the end of its line, is cut at an inline comment (a ``#`` preceded by a
blank) and trimmed. A value starting with ``"`` runs verbatim to the next
``"`` (possibly across lines) and the remainder of the closing line is
discarded. There is no escaping, line continuation, or variable expansion.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from ...domain.errors import InvalidEncoding, InvalidFormat, MissingDelimiter, MissingEndQuote
from ...observability import key_names, log_debug, log_error
from ..file_reader.default import DefaultFileReader

if TYPE_CHECKING:
    from ...application.ports import FileReader

_QUOTE: Final[str] = '"'
_COMMENT: Final[str] = "#"
_DELIMITER: Final[str] = "="
# Blanks that may introduce an inline comment; line breaks are excluded.
_INLINE_SPACES: Final[frozenset[str]] = frozenset("\t\v\f\r \x85\xa0")


class DefaultDotEnvLoader:
    """Read and parse individual dotenv files."""

    def __init__(self, *, reader: FileReader | None = None) -> None:
        """Initialise the loader with an optional byte *reader* for testability.

        Parameters
        ----------
        reader:
            Object implementing ``read(path) -> bytes``. Defaults to
            :class:`DefaultFileReader`.
        """

        self._reader = reader or DefaultFileReader()

    def load(self, path: str) -> dict[str, str]:
        """Return the key/value pairs defined in *path*.

        Raises
        ------
        NotFound
            Propagated from the reader when *path* does not exist.
        InvalidFormat
            When the content violates the grammar; nothing is returned.

        Examples
        --------
        >>> from pathlib import Path
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> path = Path(tmp.name) / '.env'
        >>> _ = path.write_text('TOKEN="s3cret"  # local only', encoding='utf-8')
        >>> DefaultDotEnvLoader().load(str(path))
        {'TOKEN': 's3cret'}
        >>> tmp.cleanup()
        """

        data = self._reader.read(path)
        try:
            parsed = parse_dotenv(data)
        except InvalidFormat as exc:
            log_error("dotenv_invalid", layer="dotenv", path=path, line=exc.line, error=str(exc))
            raise
        log_debug("dotenv_parsed", layer="dotenv", path=path, keys=key_names(parsed))
        return parsed


def parse_dotenv(src: bytes | str) -> dict[str, str]:
    """Parse dotenv content into a mapping, last duplicate winning.

    Parameters
    ----------
    src:
        Raw file content. ``bytes`` are decoded as UTF-8.

    Raises
    ------
    MissingDelimiter
        An entry starts but no ``=`` follows before the end of input.
    MissingEndQuote
        A quoted value is never closed.
    InvalidEncoding
        *src* is bytes that do not decode as UTF-8.

    Examples
    --------
    >>> parse_dotenv(b'ENVIRONMENT = "development"\\r\\nAPI_URL=https://example.com/api   # prod-ish\\n')
    {'ENVIRONMENT': 'development', 'API_URL': 'https://example.com/api'}
    >>> parse_dotenv('KEY="value # not a comment"')
    {'KEY': 'value # not a comment'}
    >>> parse_dotenv('KEY')
    Traceback (most recent call last):
    ...
    lib_env_config.domain.errors.MissingDelimiter: malformed line: Missing '=' in environment variable (line 1)
    """

    if isinstance(src, bytes):
        try:
            text = src.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidEncoding() from exc
    else:
        text = src
    text = text.replace("\r\n", "\n")
    result: dict[str, str] = {}
    position = 0
    while True:
        start = _find_line_start(text, position)
        if start is None:
            return result
        key, position = _read_key(text, start)
        value, position = _read_value(text, position)
        result[key] = value


def _find_line_start(text: str, position: int) -> int | None:
    """Return the index of the next entry, skipping blanks and comment lines."""

    length = len(text)
    while True:
        while position < length and text[position].isspace():
            position += 1
        if position >= length:
            return None
        if text[position] != _COMMENT:
            return position
        newline = text.find("\n", position)
        if newline == -1:
            return None
        position = newline


def _read_key(text: str, start: int) -> tuple[str, int]:
    """Return the trimmed key and the index just past its ``=``.

    The ``=`` is searched on the remaining stream, so a key may span lines.

    Examples
    --------
    >>> _read_key("FOO\\nBAR=1", 0)
    ('FOO\\nBAR', 8)
    """

    delimiter = text.find(_DELIMITER, start)
    if delimiter == -1:
        raise MissingDelimiter(_line_number(text, start))
    return text[start:delimiter].strip(), delimiter + 1


def _read_value(text: str, position: int) -> tuple[str, int]:
    """Return the value starting at *position* and where the next entry may begin.

    Whitespace, line breaks included, is skipped before the mode is chosen.
    """

    length = len(text)
    while position < length and text[position].isspace():
        position += 1
    if position >= length:
        return "", length

    line_end = _line_end(text, position)
    if text[position] == _QUOTE:
        closing = text.find(_QUOTE, position + 1)
        if closing == -1:
            raise MissingEndQuote(_line_number(text, position))
        return text[position + 1 : closing], _next_line(text, closing + 1)

    raw = text[position:line_end]
    return _strip_inline_comment(raw).strip(), line_end + 1


def _strip_inline_comment(raw: str) -> str:
    """Cut *raw* at the first ``#`` preceded by a blank (never at index 0).

    Examples
    --------
    >>> _strip_inline_comment("value   # note")
    'value   '
    >>> _strip_inline_comment("#hash-first")
    '#hash-first'
    >>> _strip_inline_comment("pass#word")
    'pass#word'
    """

    for index in range(1, len(raw)):
        if raw[index] == _COMMENT and raw[index - 1] in _INLINE_SPACES:
            return raw[:index]
    return raw


def _line_end(text: str, position: int) -> int:
    newline = text.find("\n", position)
    return len(text) if newline == -1 else newline


def _next_line(text: str, position: int) -> int:
    newline = text.find("\n", position)
    return len(text) if newline == -1 else newline + 1


def _line_number(text: str, position: int) -> int:
    return text.count("\n", 0, position) + 1
