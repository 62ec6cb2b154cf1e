# Diagnostic decoder: parse shellcheck JSON reports into validated Finding models.
# Handles both `-f json` (bare array) and `-f json1` ({"comments": [...]}) output,
# pinned by InputFormat, and maps pydantic validation failures onto DecodeError.

import io
import json
import logging
from typing import Any, BinaryIO, Iterator, List, Optional

from pydantic import ValidationError

from shellcheck_sarif.config import InputFormat
from shellcheck_sarif.errors import InvalidFieldError, MalformedInputError, MissingFieldError
from shellcheck_sarif.findings.models import Finding

logger = logging.getLogger(__name__)


def _read_json(stream: BinaryIO) -> Any:
    try:
        data = stream.read()
    except OSError as e:
        raise MalformedInputError(f"failed to read input: {e}") from e

    try:
        return json.loads(data)
    except UnicodeDecodeError as e:
        raise MalformedInputError(f"input is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"input is not valid JSON: {e}") from e


def load_comments(stream: BinaryIO, input_format: InputFormat = InputFormat.JSON) -> List[Any]:
    """
    Read the whole stream and return the raw list of shellcheck comments.

    The accepted shape is pinned by input_format; anything else is rejected
    with MalformedInputError rather than guessed at.
    """
    input_format = InputFormat(input_format)
    document = _read_json(stream)

    if input_format is InputFormat.JSON1:
        if not isinstance(document, dict) or "comments" not in document:
            raise MalformedInputError(
                "expected a JSON object with a 'comments' array (shellcheck -f json1)"
            )
        comments = document["comments"]
        if not isinstance(comments, list):
            raise MalformedInputError("'comments' must be a JSON array")
    else:
        if not isinstance(document, list):
            raise MalformedInputError("expected a JSON array of findings (shellcheck -f json)")
        comments = document

    logger.info("Loaded %d shellcheck finding(s) (%s format)", len(comments), input_format.value)
    return comments


def _field_name(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def _from_validation_error(index: int, exc: ValidationError) -> Exception:
    """Turn the first pydantic error into MissingFieldError or InvalidFieldError."""
    error = exc.errors()[0]
    field = _field_name(error["loc"]) or "<finding>"
    if error["type"] == "missing":
        return MissingFieldError(field, index)
    return InvalidFieldError(field, index, error["msg"])


def _check_span(
    index: int,
    prefix: str,
    line: int,
    column: int,
    end_line: int,
    end_column: int,
) -> None:
    if end_line < line:
        raise InvalidFieldError(
            f"{prefix}endLine", index, f"endLine {end_line} precedes line {line}"
        )
    if end_line == line and end_column < column:
        raise InvalidFieldError(
            f"{prefix}endColumn", index, f"endColumn {end_column} precedes column {column}"
        )


def decode_finding(raw: Any, index: int) -> Finding:
    """
    Validate one raw comment object into a Finding.

    Optional end positions are filled from the start position by the model.
    Inverted spans (on the finding or on any fix replacement) are rejected.
    """
    if not isinstance(raw, dict):
        raise MalformedInputError(
            f"finding {index}: expected a JSON object, got {type(raw).__name__}"
        )

    try:
        finding = Finding.model_validate(raw)
    except ValidationError as e:
        raise _from_validation_error(index, e) from e

    _check_span(index, "", finding.line, finding.column, finding.end_line, finding.end_column)
    for i, repl in enumerate(finding.replacements):
        _check_span(
            index,
            f"fix.replacements.{i}.",
            repl.line,
            repl.column,
            repl.end_line,
            repl.end_column,
        )

    logger.debug(
        "Decoded finding %d: %s at %s:%d:%d",
        index,
        finding.rule_id,
        finding.file,
        finding.line,
        finding.column,
    )
    return finding


def iter_findings(
    stream: BinaryIO,
    input_format: InputFormat = InputFormat.JSON,
) -> Iterator[Finding]:
    """
    Lazily decode findings from a shellcheck report stream.

    Single forward pass: the stream is read on the first next() call, so a
    malformed top level fails before any finding is produced. Findings are
    validated one at a time, in input order.
    """
    comments = load_comments(stream, input_format)
    for index, raw in enumerate(comments):
        yield decode_finding(raw, index)


def decode_bytes(
    data: bytes,
    input_format: Optional[InputFormat] = None,
) -> List[Finding]:
    """Decode an in-memory report into a list of findings."""
    return list(iter_findings(io.BytesIO(data), input_format or InputFormat.JSON))
