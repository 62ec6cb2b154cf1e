from __future__ import annotations

"""
Typer CLI entry point: convert `shellcheck -f json` output into SARIF.

    shellcheck -f json script.sh | shellcheck-sarif > results.sarif
    shellcheck -f json1 script.sh > report.json
    shellcheck-sarif report.json --format json1 -o results.sarif --summary

The input file (or stdin) and output file (or stdout) are opened here; the
conversion itself lives in converter.convert().
"""

import io
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import BinaryIO, Optional

import typer

from shellcheck_sarif.config import Config, InputFormat, get_default_config
from shellcheck_sarif.converter import convert
from shellcheck_sarif.errors import DecodeError, EmitError, EmitIOError
from shellcheck_sarif.reporting.console import print_results
from shellcheck_sarif.sarif.models import SarifLog

logger = logging.getLogger(__name__)

EXIT_DECODE_ERROR = 1
EXIT_EMIT_ERROR = 2

app = typer.Typer(
    help="Convert shellcheck JSON diagnostics into SARIF.",
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _run(source: BinaryIO, output: Optional[Path], config: Config) -> SarifLog:
    """
    Convert source and deliver the document to output (or stdout).

    A file output is only created once the whole document has been produced,
    so a failed conversion never leaves a truncated SARIF file behind.
    """
    if output is None:
        return convert(source, typer.get_binary_stream("stdout"), config)

    buffer = io.BytesIO()
    log = convert(source, buffer, config)
    try:
        output.write_bytes(buffer.getvalue())
    except OSError as e:
        raise EmitIOError(f"failed to write {output}: {e}") from e
    logger.info("Wrote SARIF to %s", output)
    return log


@app.command()
def convert_report(
    input_path: Optional[Path] = typer.Argument(
        None,
        metavar="INPUT",
        exists=True,
        dir_okay=False,
        readable=True,
        allow_dash=True,
        help="shellcheck JSON report; reads from stdin if omitted or '-'.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        dir_okay=False,
        help="Output file; writes to stdout if omitted.",
    ),
    input_format: InputFormat = typer.Option(
        InputFormat.JSON,
        "--format",
        "-f",
        case_sensitive=False,
        help="Report shape: 'json' (bare array) or 'json1' ({\"comments\": [...]}).",
    ),
    tool_version: Optional[str] = typer.Option(
        None,
        "--tool-version",
        help="shellcheck version to record in the SARIF tool driver.",
    ),
    compact: bool = typer.Option(False, "--compact", help="Write compact JSON."),
    summary: bool = typer.Option(
        False, "--summary", help="Print a table of converted results to stderr."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """
    Convert shellcheck diagnostics into a SARIF 2.1.0 document.

    The expected input is generated by running 'shellcheck -f json' (or
    'shellcheck -f json1' together with --format json1).
    """
    _configure_logging(verbose)

    config = replace(
        get_default_config(),
        tool_version=tool_version,
        input_format=input_format,
        indent=None if compact else 2,
    )

    try:
        if input_path is None or str(input_path) == "-":
            log = _run(typer.get_binary_stream("stdin"), output, config)
        else:
            with input_path.open("rb") as source:
                log = _run(source, output, config)
    except DecodeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=EXIT_DECODE_ERROR)
    except EmitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=EXIT_EMIT_ERROR)

    if summary:
        print_results(log, verbose=verbose)


def main() -> None:
    """Entry point for the `shellcheck-sarif` script and `python -m shellcheck_sarif.main`."""
    app()


if __name__ == "__main__":
    main()
