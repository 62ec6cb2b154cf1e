"""Tests for the SARIF emitter: rule table, results, regions, fixes, writing."""

import io
import json

import pytest

from shellcheck_sarif.config import Config
from shellcheck_sarif.emitter import (
    RuleTable,
    artifact_uri,
    build_result,
    build_sarif,
    emit,
    sarif_level,
    serialize_sarif,
    write_sarif,
)
from shellcheck_sarif.errors import EmitIOError, MissingFieldError, SerializationError
from shellcheck_sarif.findings.models import Finding, Level


def _finding(**overrides) -> Finding:
    raw = {
        "file": "a.sh",
        "line": 2,
        "column": 1,
        "level": "error",
        "code": 2086,
        "message": "Double quote to prevent globbing.",
    }
    raw.update(overrides)
    return Finding.model_validate(raw)


def _dump(log) -> dict:
    return json.loads(serialize_sarif(log))


@pytest.mark.parametrize(
    "level,expected",
    [
        (Level.ERROR, "error"),
        (Level.WARNING, "warning"),
        (Level.INFO, "note"),
        (Level.STYLE, "note"),
        ("style", "note"),
    ],
)
def test_sarif_level(level, expected):
    assert sarif_level(level) == expected


class TestArtifactUri:
    def test_relative_path_unchanged(self):
        assert artifact_uri("scripts/deploy.sh") == "scripts/deploy.sh"

    def test_empty_path(self):
        assert artifact_uri("") == ""

    def test_space_encoded(self):
        assert artifact_uri("my script.sh") == "my%20script.sh"

    def test_unicode_encoded_as_utf8(self):
        assert artifact_uri("ü.sh") == "%C3%BC.sh"


class TestRuleTable:
    def test_first_seen_order_and_dedup(self):
        table = RuleTable()
        assert table.register(_finding(code=2086)) == 0
        assert table.register(_finding(code=2034)) == 1
        assert table.register(_finding(code=2086)) == 0
        assert len(table) == 2
        assert [rule.id for rule in table.rules] == ["SC2086", "SC2034"]
        assert "SC2034" in table

    def test_first_occurrence_sets_default_level(self):
        table = RuleTable()
        table.register(_finding(code=2086, level="style"))
        table.register(_finding(code=2086, level="error"))
        assert table.rules[0].defaultConfiguration.level == "note"

    def test_help_links(self):
        table = RuleTable()
        table.register(_finding(code=2086))
        rule = table.rules[0]
        assert rule.name == "SC2086"
        assert rule.helpUri == "https://www.shellcheck.net/wiki/SC2086"
        assert rule.shortDescription.text == rule.helpUri

    def test_help_links_disabled(self):
        table = RuleTable(Config(rule_help_base=None))
        table.register(_finding(code=2086))
        assert table.rules[0].helpUri is None
        assert table.rules[0].shortDescription is None


def test_single_finding_scenario():
    log = build_sarif([_finding()])
    doc = _dump(log)

    assert doc["version"] == "2.1.0"
    assert doc["$schema"].endswith("sarif-2.1.0.json")
    assert len(doc["runs"]) == 1
    run = doc["runs"][0]
    assert run["tool"]["driver"]["name"] == "shellcheck"
    assert [r["id"] for r in run["tool"]["driver"]["rules"]] == ["SC2086"]
    assert run["tool"]["driver"]["rules"][0]["defaultConfiguration"] == {"level": "error"}

    (result,) = run["results"]
    assert result["ruleId"] == "SC2086"
    assert result["ruleIndex"] == 0
    assert result["level"] == "error"
    assert result["message"] == {"text": "Double quote to prevent globbing."}
    location = result["locations"][0]["physicalLocation"]
    assert location["artifactLocation"] == {"uri": "a.sh"}
    assert location["region"]["startLine"] == 2
    assert location["region"]["startColumn"] == 1
    assert "fixes" not in result


def test_point_region_when_end_omitted():
    result = build_result(_finding(line=7, column=3), 0)
    region = result.locations[0].physicalLocation.region
    assert (region.endLine, region.endColumn) == (region.startLine, region.startColumn)


def test_multi_line_region_kept():
    result = build_result(_finding(line=20, endLine=21, column=4, endColumn=3), 0)
    region = result.locations[0].physicalLocation.region
    assert (region.startLine, region.startColumn, region.endLine, region.endColumn) == (
        20,
        4,
        21,
        3,
    )


def test_two_codes_two_rules_in_order():
    log = build_sarif([_finding(code=2086), _finding(code=2034)])
    assert [rule.id for rule in log.run.tool.driver.rules] == ["SC2086", "SC2034"]


def test_results_keep_order_and_duplicates():
    findings = [
        _finding(code=2086, line=1),
        _finding(code=2034, line=9),
        _finding(code=2086, line=4),
        _finding(code=2086, line=4),
    ]
    log = build_sarif(findings)
    results = log.run.results
    assert len(results) == 4
    assert [r.locations[0].physicalLocation.region.startLine for r in results] == [1, 9, 4, 4]
    assert [r.ruleIndex for r in results] == [0, 1, 0, 0]
    rules = log.run.tool.driver.rules
    for result in results:
        assert rules[result.ruleIndex].id == result.ruleId


def test_fix_mapping():
    fix = {
        "replacements": [
            {
                "line": 3,
                "endLine": 3,
                "column": 6,
                "endColumn": 8,
                "replacement": '"$1"',
                "insertionPoint": "afterEnd",
                "precedence": 7,
            },
            {"line": 4, "endLine": 5, "column": 1, "endColumn": 2, "replacement": ""},
        ]
    }
    doc = _dump(build_sarif([_finding(file="lib/x.sh", line=3, column=6, fix=fix)]))
    fixes = doc["runs"][0]["results"][0]["fixes"]
    assert len(fixes) == 2

    change = fixes[0]["artifactChanges"]
    assert len(change) == 1
    assert change[0]["artifactLocation"] == {"uri": "lib/x.sh"}
    replacement = change[0]["replacements"][0]
    assert replacement["deletedRegion"] == {
        "startLine": 3,
        "startColumn": 6,
        "endLine": 3,
        "endColumn": 8,
    }
    assert replacement["insertedContent"] == {"text": '"$1"'}

    second = fixes[1]["artifactChanges"][0]["replacements"][0]
    assert second["deletedRegion"]["endLine"] == 5
    assert second["insertedContent"] == {"text": ""}


def test_empty_fix_has_no_fixes():
    result = build_result(_finding(fix={"replacements": []}), 0)
    assert result.fixes is None


def test_empty_file_emits_empty_uri():
    result = build_result(_finding(file=""), 0)
    assert result.locations[0].physicalLocation.artifactLocation.uri == ""


def test_tool_metadata_from_config():
    config = Config(tool_name="shellcheck", tool_version="0.10.0", information_uri=None)
    doc = _dump(build_sarif([], config))
    driver = doc["runs"][0]["tool"]["driver"]
    assert driver == {"name": "shellcheck", "version": "0.10.0", "rules": []}
    assert doc["runs"][0]["results"] == []


def test_column_kind_is_code_points():
    doc = _dump(build_sarif([]))
    assert doc["runs"][0]["columnKind"] == "unicodeCodePoints"


def test_unicode_written_verbatim():
    out = io.BytesIO()
    emit([_finding(message="Use «quotes» → safer")], out)
    text = out.getvalue().decode("utf-8")
    assert "Use «quotes» → safer" in text


def test_compact_output():
    out = io.BytesIO()
    emit([_finding()], out, Config(indent=None))
    data = out.getvalue()
    assert data.endswith(b"\n")
    assert data.count(b"\n") == 1


def test_decode_error_propagates_and_writes_nothing():
    def findings():
        yield _finding()
        raise MissingFieldError("line", 1)

    out = io.BytesIO()
    with pytest.raises(MissingFieldError):
        emit(findings(), out)
    assert out.getvalue() == b""


def test_write_failure_is_emit_io_error():
    class FullDisk(io.RawIOBase):
        def writable(self):
            return True

        def write(self, data):
            raise OSError("No space left on device")

    with pytest.raises(EmitIOError, match="No space left"):
        write_sarif(build_sarif([_finding()]), FullDisk())


def test_invalid_model_is_serialization_error():
    finding = _finding()
    # Bypass validation to break the 1-based line invariant.
    broken = finding.model_copy(update={"line": 0})
    with pytest.raises(SerializationError):
        build_sarif([broken])


def test_closed_stream_is_emit_io_error():
    out = io.BytesIO()
    out.close()
    with pytest.raises(EmitIOError):
        write_sarif(build_sarif([_finding()]), out)
