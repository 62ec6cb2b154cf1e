# Conversion pipeline: shellcheck JSON bytes -> Finding stream -> SARIF bytes.

from __future__ import annotations

import io
import logging
from typing import BinaryIO, Optional

from shellcheck_sarif.config import Config, get_default_config
from shellcheck_sarif.decoder import iter_findings
from shellcheck_sarif.emitter import emit
from shellcheck_sarif.sarif.models import SarifLog

logger = logging.getLogger(__name__)


def convert(
    input_stream: BinaryIO,
    output_stream: BinaryIO,
    config: Optional[Config] = None,
) -> SarifLog:
    """
    Convert one shellcheck report into a SARIF document.

    Reads input_stream to the end and writes the complete document to
    output_stream. Neither stream is opened or closed here. Raises DecodeError
    or EmitError on failure; nothing is written when decoding fails.
    """
    if config is None:
        config = get_default_config()

    findings = iter_findings(input_stream, config.input_format)
    log = emit(findings, output_stream, config)

    run = log.run
    logger.info(
        "Converted %d finding(s) covering %d rule(s)",
        len(run.results),
        len(run.tool.driver.rules),
    )
    return log


def convert_bytes(data: bytes, config: Optional[Config] = None) -> bytes:
    """Convert an in-memory shellcheck report and return the SARIF bytes."""
    output = io.BytesIO()
    convert(io.BytesIO(data), output, config)
    return output.getvalue()
