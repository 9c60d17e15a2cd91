"""CLI adapter for ``lib_env_config`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect how dotenv files parse and layer without writing Python
code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_parse` – prints one parsed dotenv file as JSON.
* :func:`cli_load` – layered load, printing what each file contributed.
* :func:`cli_get` – single-key lookup through the typed helpers.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI works on a copy of the process environment, so nothing it loads
leaks back into the calling shell or into tests running in-process.
``lib_cli_exit_tools`` centralises the exit code strategy.
"""

from __future__ import annotations

import json
import os
import sys
from datetime import timedelta
from importlib import metadata
from pathlib import Path
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.dotenv.default import parse_dotenv
from .adapters.env.default import get_bool, get_duration, get_int, get_string, must_string
from .adapters.file_reader.default import DefaultFileReader
from .core import load_files
from .domain.coercion import FieldKind, coerce
from .domain.errors import CoercionError

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

TYPE_CHOICES: Final[tuple[str, ...]] = ("string", "int", "bool", "duration")


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` for source checkouts.

    Why
        ``click.version_option`` needs a string when the group is decorated;
        reading distribution metadata keeps the version in ``pyproject.toml``
        only.
    """

    try:
        return metadata.version("lib_env_config")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Layered .env loader and environment binding toolkit",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_env_config",
    message="lib_env_config version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_env_config")
    except metadata.PackageNotFoundError:
        click.echo("lib_env_config (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_env_config')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("parse", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument(
    "path",
    type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
)
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_parse(path: Path, indent: Optional[int]) -> None:
    """Parse a single dotenv file and print its key/value pairs as JSON.

    The process environment is not consulted or modified.
    """

    data = parse_dotenv(DefaultFileReader().read(str(path)))
    click.echo(json.dumps(data, indent=indent))


@cli.command("load", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("files", nargs=-1)
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
@click.option(
    "--provenance/--no-provenance",
    default=False,
    help="Include the file that wrote each key",
)
def cli_load(files: Sequence[str], indent: Optional[int], provenance: bool) -> None:
    """Layer FILES (default ``.env``) over the environment and print the written keys.

    The first file overrides inherited variables; later files only fill gaps.
    """

    environ = dict(os.environ)
    written = load_files(*files, environ=environ)
    values = {key: environ[key] for key in written}
    if provenance:
        click.echo(json.dumps({"values": values, "provenance": written}, indent=indent))
        return
    click.echo(json.dumps(values, indent=indent))


@cli.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@click.option(
    "--type",
    "value_type",
    type=click.Choice(TYPE_CHOICES, case_sensitive=False),
    default="string",
    show_default=True,
    help="Interpret the value as this type",
)
@click.option("--fallback", default=None, help="Value used when KEY is absent or does not parse")
@click.option("--required/--optional", default=False, help="Fail when KEY is absent or empty (string only)")
@click.option("--file", "files", multiple=True, help="Dotenv file layered in before the lookup (repeatable)")
def cli_get(
    key: str,
    value_type: str,
    fallback: Optional[str],
    required: bool,
    files: Sequence[str],
) -> None:
    """Look up KEY through the typed helpers and print the result."""

    environ = dict(os.environ)
    if files:
        load_files(*files, environ=environ)

    kind = value_type.lower()
    if required:
        if kind != "string":
            raise click.BadParameter("--required only applies to --type string", param_hint="--required")
        click.echo(must_string(key, environ=environ))
        return

    if kind == "string":
        click.echo(get_string(key, fallback or "", environ=environ))
    elif kind == "int":
        click.echo(get_int(key, _fallback(FieldKind.INT, fallback, 0), environ=environ))
    elif kind == "bool":
        click.echo(_render(get_bool(key, _fallback(FieldKind.BOOL, fallback, False), environ=environ)))
    else:
        fallback_duration = _fallback(FieldKind.DURATION, fallback, timedelta(0))
        click.echo(_render(get_duration(key, fallback_duration, environ=environ)))


def _fallback(kind: FieldKind, raw: Optional[str], zero: object):
    """Coerce the ``--fallback`` option or return the kind's zero value."""

    if raw is None:
        return zero
    try:
        return coerce(kind, raw)
    except CoercionError as exc:
        raise click.BadParameter(str(exc), param_hint="--fallback") from exc


def _render(value: object) -> str:
    """Render booleans as ``true``/``false`` and durations as seconds."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, timedelta):
        return f"{value.total_seconds():g}s"
    return str(value)


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code.

    What
        Runs :func:`cli` through ``lib_cli_exit_tools.run_cli`` and renders any
        escaping exception with the shared printer.
    Inputs
        argv: Arguments without the program name; ``None`` reads ``sys.argv``.
        restore_traceback: Put the previous traceback flags back afterwards.
    Side Effects
        Writes to stdout/stderr and toggles ``lib_cli_exit_tools.config``
        for the duration of the call.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_env_config",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
