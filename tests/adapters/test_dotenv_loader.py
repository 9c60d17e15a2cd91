"""Dotenv grammar and loader adapter tests.

Cover whitespace trimming, comment handling inside and outside quotes, line
ending normalisation, and the two syntax errors.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_env_config.adapters.dotenv.default import DefaultDotEnvLoader, parse_dotenv
from lib_env_config.domain.errors import InvalidEncoding, MissingDelimiter, MissingEndQuote, NotFound


def test_parse_nicely_formatted_input() -> None:
    src = b" \n\t\t\tENVIRONMENT=development\n\t\t\tHOST=localhost\n\t\t\t"
    assert parse_dotenv(src) == {"ENVIRONMENT": "development", "HOST": "localhost"}


def test_parse_input_with_many_spaces() -> None:
    src = " \n\t  ENVIRONMENT  =   development\n\t\t\tHOST\t=  localhost\t\n"
    assert parse_dotenv(src) == {"ENVIRONMENT": "development", "HOST": "localhost"}


def test_full_line_comments_are_skipped() -> None:
    src = "ENVIRONMENT=development\n   # This is a comment\n  HOST=localhost\n# trailing comment"
    assert parse_dotenv(src) == {"ENVIRONMENT": "development", "HOST": "localhost"}


def test_inline_comment_is_stripped_from_unquoted_value() -> None:
    src = "ENVIRONMENT= development #This is a comment\nHOST=        localhost\t\n"
    assert parse_dotenv(src) == {"ENVIRONMENT": "development", "HOST": "localhost"}


def test_hash_without_leading_blank_is_part_of_value() -> None:
    assert parse_dotenv("PASSWORD=pa#ss\nCOLOR=#ff0000\n") == {"PASSWORD": "pa#ss", "COLOR": "#ff0000"}


def test_no_trailing_newline() -> None:
    assert parse_dotenv("ENVIRONMENT=development\nHOST=localhost") == {
        "ENVIRONMENT": "development",
        "HOST": "localhost",
    }


def test_quoted_values_are_verbatim() -> None:
    src = 'ENVIRONMENT=  " development "            # Comment with lots of spaces\nAPI_BASE_URL= "https://example.com/api"  # Another\n'
    assert parse_dotenv(src) == {"ENVIRONMENT": " development ", "API_BASE_URL": "https://example.com/api"}


def test_hash_inside_quotes_is_literal() -> None:
    src = "ENVIRONMENT=  \"development # a 'comment' inside a quoted value\"\n"
    assert parse_dotenv(src) == {"ENVIRONMENT": "development # a 'comment' inside a quoted value"}


def test_quoted_value_may_span_lines() -> None:
    assert parse_dotenv('CERT="line1\nline2"\nNEXT=1\n') == {"CERT": "line1\nline2", "NEXT": "1"}


def test_empty_lines_and_crlf_are_ignored() -> None:
    src = b'\r\n\r\nENVIRONMENT="development"\r\n\r\nAPI_BASE_URL="https://example.com/api"\r\n\r\n'
    assert parse_dotenv(src) == {"ENVIRONMENT": "development", "API_BASE_URL": "https://example.com/api"}


def test_key_runs_to_the_next_equals_sign_across_lines() -> None:
    assert parse_dotenv("FOO\nBAR=1\n") == {"FOO\nBAR": "1"}


def test_value_starts_at_first_non_space_after_equals() -> None:
    assert parse_dotenv('A=\n"quoted"\n') == {"A": "quoted"}
    assert parse_dotenv("EMPTY=\n\nNEXT\n") == {"EMPTY": "NEXT"}


def test_trailing_equals_yields_empty_value() -> None:
    assert parse_dotenv("FIRST=1\nLAST=   \n") == {"FIRST": "1", "LAST": ""}


def test_missing_delimiter_at_end_of_input_reports_entry_line() -> None:
    with pytest.raises(MissingDelimiter) as excinfo:
        parse_dotenv("A=1\n\nDANGLING\nTEXT\n")
    assert excinfo.value.line == 3


def test_value_may_contain_equals_sign() -> None:
    assert parse_dotenv("DSN=postgres://u:p@h/db?sslmode=require\n") == {"DSN": "postgres://u:p@h/db?sslmode=require"}


def test_last_duplicate_wins() -> None:
    assert parse_dotenv("KEY=first\nKEY=second\n") == {"KEY": "second"}


def test_empty_input_parses_to_empty_mapping() -> None:
    assert parse_dotenv(b"") == {}
    assert parse_dotenv("   \n# only a comment\n") == {}


def test_missing_delimiter_reports_line() -> None:
    src = 'ENVIRONMENT="development"\nAPI_BASE_URL:"https://example.com/api"\n'
    with pytest.raises(MissingDelimiter) as excinfo:
        parse_dotenv(src)
    assert excinfo.value.line == 2
    assert "Missing '='" in str(excinfo.value)


def test_missing_end_quote() -> None:
    src = 'ENVIRONMENT="development"\nAPI_BASE_URL="https://example.com/api\n'
    with pytest.raises(MissingEndQuote) as excinfo:
        parse_dotenv(src)
    assert excinfo.value.line == 2


def test_invalid_utf8_is_a_format_error() -> None:
    with pytest.raises(InvalidEncoding):
        parse_dotenv(b"KEY=\xff\xfe\n")


def test_loader_reads_file(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text('ENVIRONMENT = "development"\nAPI_URL=https://example.com/api   # prod-ish\n', encoding="utf-8")
    assert DefaultDotEnvLoader().load(str(env_file)) == {
        "ENVIRONMENT": "development",
        "API_URL": "https://example.com/api",
    }


def test_loader_missing_file_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(NotFound):
        DefaultDotEnvLoader().load(str(tmp_path / ".env.missing"))


def test_loader_uses_injected_reader() -> None:
    class MemoryReader:
        def read(self, path: str) -> bytes:
            return b"FROM_MEMORY=" + path.encode()

    assert DefaultDotEnvLoader(reader=MemoryReader()).load("virtual") == {"FROM_MEMORY": "virtual"}


KEY = st.text(alphabet=st.sampled_from("ABCDEFGHIJKLMNOPQRSTUVWXYZ_"), min_size=1, max_size=8)
BODY = st.text(
    alphabet=st.sampled_from([chr(code) for code in range(33, 127) if chr(code) not in '#"=']),
    min_size=1,
    max_size=12,
)
PADDING = st.text(alphabet=st.sampled_from(" \t"), max_size=4)


@given(key=KEY, body=BODY, left=PADDING, right=PADDING)
def test_unquoted_values_are_trimmed(key: str, body: str, left: str, right: str) -> None:
    """Surrounding blanks vanish outside quotes."""

    assert parse_dotenv(f"{key}={left}{body}{right}\n") == {key: body}


@given(key=KEY, body=BODY, left=PADDING, right=PADDING)
def test_quoted_values_keep_inner_blanks(key: str, body: str, left: str, right: str) -> None:
    """Blanks inside quotes survive untouched."""

    value = f"{left}{body}{right}"
    assert parse_dotenv(f'{key}="{value}"\n') == {key: value}
