"""End-to-end tests for converter.convert and convert_bytes."""

import io
import json
from pathlib import Path

import pytest

from shellcheck_sarif.config import Config, InputFormat
from shellcheck_sarif.converter import convert, convert_bytes
from shellcheck_sarif.errors import DecodeError, EmitIOError, MalformedInputError

DATA_DIR = Path(__file__).parent / "data"


def _convert(data: bytes, config: Config | None = None) -> dict:
    return json.loads(convert_bytes(data, config))


def test_documented_scenario():
    data = (
        b'[{"file":"a.sh","line":2,"column":1,"level":"error","code":2086,'
        b'"message":"Double quote to prevent globbing."}]'
    )
    doc = _convert(data)
    run = doc["runs"][0]
    assert [rule["id"] for rule in run["tool"]["driver"]["rules"]] == ["SC2086"]
    (result,) = run["results"]
    assert result["level"] == "error"
    assert result["message"]["text"] == "Double quote to prevent globbing."
    physical = result["locations"][0]["physicalLocation"]
    assert physical["artifactLocation"]["uri"] == "a.sh"
    assert physical["region"]["startLine"] == 2
    assert physical["region"]["startColumn"] == 1


def test_sample_report():
    source = (DATA_DIR / "sample.json").read_bytes()
    doc = _convert(source)
    raw = json.loads(source)
    run = doc["runs"][0]

    assert len(run["results"]) == len(raw)
    assert [r["message"]["text"] for r in run["results"]] == [f["message"] for f in raw]
    assert [rule["id"] for rule in run["tool"]["driver"]["rules"]] == [
        "SC2086",
        "SC2034",
        "SC2006",
        "SC1073",
    ]
    assert [r["level"] for r in run["results"]] == ["note", "warning", "note", "note", "error"]
    assert [r["ruleIndex"] for r in run["results"]] == [0, 1, 2, 0, 3]
    assert len(run["results"][0]["fixes"]) == 2
    assert "fixes" not in run["results"][1]


def test_json1_sample():
    source = (DATA_DIR / "sample_json1.json").read_bytes()
    doc = _convert(source, Config(input_format=InputFormat.JSON1))
    assert len(doc["runs"][0]["results"]) == 2


def test_malformed_input_writes_nothing():
    output = io.BytesIO()
    with pytest.raises(MalformedInputError):
        convert(io.BytesIO(b"not json"), output)
    assert output.getvalue() == b""


def test_bad_finding_midway_writes_nothing():
    data = json.dumps(
        [
            {"file": "a.sh", "line": 1, "column": 1, "level": "info", "code": 1, "message": "ok"},
            {"file": "a.sh", "line": 1, "column": 1, "level": "loud", "code": 2, "message": "x"},
        ]
    ).encode()
    output = io.BytesIO()
    with pytest.raises(DecodeError, match="finding 1"):
        convert(io.BytesIO(data), output)
    assert output.getvalue() == b""


def test_convert_returns_log():
    output = io.BytesIO()
    log = convert(io.BytesIO(b"[]"), output)
    assert log.run.results == []
    assert json.loads(output.getvalue())["runs"][0]["results"] == []


def test_closed_output_stream_is_emit_error():
    output = io.BytesIO()
    output.close()
    with pytest.raises(EmitIOError, match="failed to write"):
        convert(io.BytesIO(b"[]"), output)
