"""
SARIF emission: turn a stream of shellcheck findings into one SARIF 2.1.0 run.

Rules are deduplicated by id in first-seen order and each result points at
its rule through ruleIndex. Results keep input order and are never merged.
The whole document is built before any byte is written, so a failure while
consuming findings leaves the output stream untouched.

Typical usage:
    from shellcheck_sarif.decoder import iter_findings
    from shellcheck_sarif.emitter import emit

    with open("report.json", "rb") as src, open("report.sarif", "wb") as dst:
        emit(iter_findings(src), dst)
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Dict, Iterable, List, Optional
from urllib.parse import quote

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from shellcheck_sarif.config import Config, get_default_config
from shellcheck_sarif.errors import EmitIOError, SerializationError
from shellcheck_sarif.findings.models import Finding, Level
from shellcheck_sarif.sarif.models import (
    SarifArtifactChange,
    SarifArtifactContent,
    SarifArtifactLocation,
    SarifDriver,
    SarifFix,
    SarifLocation,
    SarifLog,
    SarifMessage,
    SarifPhysicalLocation,
    SarifRegion,
    SarifReplacement,
    SarifResult,
    SarifRule,
    SarifRuleConfig,
    SarifRun,
    SarifTool,
)

logger = logging.getLogger(__name__)

# SARIF only has three result levels; style and info are both informational.
LEVEL_TO_SARIF: Dict[Level, str] = {
    Level.ERROR: "error",
    Level.WARNING: "warning",
    Level.INFO: "note",
    Level.STYLE: "note",
}


def sarif_level(level: Level) -> str:
    """Map a shellcheck severity onto the SARIF result level vocabulary."""
    return LEVEL_TO_SARIF[Level(level)]


def artifact_uri(path: str) -> str:
    """
    Encode a reported path as a relative URI reference.

    The path is not resolved or checked against the filesystem. Characters
    outside the URI unreserved set (spaces, non-ASCII) are percent-encoded as
    UTF-8; path separators are kept.

    Examples:
        >>> artifact_uri("scripts/deploy.sh")
        'scripts/deploy.sh'
        >>> artifact_uri("my script.sh")
        'my%20script.sh'
    """
    return quote(path, safe="/")


class RuleTable:
    """
    Append-only table of rule descriptors keyed by rule id.

    The first finding seen for a code decides the descriptor's default level;
    later findings with the same code reuse it unchanged.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self._config = config or get_default_config()
        self._index: Dict[str, int] = {}
        self._rules: List[SarifRule] = []

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._index

    @property
    def rules(self) -> List[SarifRule]:
        return list(self._rules)

    def register(self, finding: Finding) -> int:
        """Return the table index for the finding's rule, inserting it if new."""
        rule_id = finding.rule_id
        index = self._index.get(rule_id)
        if index is not None:
            return index

        help_uri = self._config.rule_help_uri(rule_id)
        rule = SarifRule(
            id=rule_id,
            name=rule_id,
            shortDescription=SarifMessage(text=help_uri) if help_uri else None,
            helpUri=help_uri,
            defaultConfiguration=SarifRuleConfig(level=sarif_level(finding.level)),
        )
        index = len(self._rules)
        self._rules.append(rule)
        self._index[rule_id] = index
        logger.debug("Registered rule %s at index %d", rule_id, index)
        return index


def build_region(line: int, column: int, end_line: int, end_column: int) -> SarifRegion:
    """A region always carries both ends; a point region has end == start."""
    return SarifRegion(
        startLine=line,
        startColumn=column,
        endLine=end_line,
        endColumn=end_column,
    )


def build_fixes(finding: Finding) -> List[SarifFix]:
    """One SARIF fix per shellcheck replacement span, in the reported order."""
    uri = artifact_uri(finding.file)
    fixes: List[SarifFix] = []
    for repl in finding.replacements:
        replacement = SarifReplacement(
            deletedRegion=build_region(
                repl.line, repl.column, repl.end_line, repl.end_column
            ),
            insertedContent=SarifArtifactContent(text=repl.replacement),
        )
        fixes.append(
            SarifFix(
                artifactChanges=[
                    SarifArtifactChange(
                        artifactLocation=SarifArtifactLocation(uri=uri),
                        replacements=[replacement],
                    )
                ]
            )
        )
    return fixes


def build_result(finding: Finding, rule_index: int) -> SarifResult:
    """Convert one finding into a SARIF result referencing rule_index."""
    location = SarifLocation(
        physicalLocation=SarifPhysicalLocation(
            artifactLocation=SarifArtifactLocation(uri=artifact_uri(finding.file)),
            region=build_region(
                finding.line, finding.column, finding.end_line, finding.end_column
            ),
        )
    )
    fixes = build_fixes(finding)
    return SarifResult(
        ruleId=finding.rule_id,
        ruleIndex=rule_index,
        level=sarif_level(finding.level),
        message=SarifMessage(text=finding.message),
        locations=[location],
        fixes=fixes or None,
    )


def build_sarif(findings: Iterable[Finding], config: Optional[Config] = None) -> SarifLog:
    """
    Consume findings once, in order, and assemble a single-run SARIF log.

    DecodeError raised by a lazy finding iterator propagates unchanged.
    Pydantic validation failures here mean an internal invariant broke and
    are reported as SerializationError.
    """
    if config is None:
        config = get_default_config()

    table = RuleTable(config)
    results: List[SarifResult] = []

    try:
        for finding in findings:
            rule_index = table.register(finding)
            results.append(build_result(finding, rule_index))

        driver = SarifDriver(
            name=config.tool_name,
            version=config.tool_version,
            informationUri=config.information_uri,
            rules=table.rules,
        )
        run = SarifRun(
            tool=SarifTool(driver=driver),
            results=results,
            columnKind="unicodeCodePoints",
        )
        log = SarifLog(runs=[run])
    except ValidationError as e:
        raise SerializationError(f"failed to build SARIF document: {e}") from e

    logger.info("Built SARIF run with %d result(s) and %d rule(s)", len(results), len(table))
    return log


def serialize_sarif(log: SarifLog, indent: Optional[int] = 2) -> bytes:
    """Render the log as UTF-8 JSON with a trailing newline."""
    try:
        text = log.model_dump_json(by_alias=True, exclude_none=True, indent=indent)
    except PydanticSerializationError as e:
        raise SerializationError(f"failed to serialize SARIF document: {e}") from e
    return (text + "\n").encode("utf-8")


def write_sarif(log: SarifLog, stream: BinaryIO, indent: Optional[int] = 2) -> None:
    """Serialize the log and write it fully to stream."""
    data = serialize_sarif(log, indent=indent)
    try:
        stream.write(data)
        stream.flush()
    except (OSError, ValueError) as e:
        raise EmitIOError(f"failed to write SARIF output: {e}") from e
    logger.debug("Wrote %d byte(s) of SARIF output", len(data))


def emit(
    findings: Iterable[Finding],
    stream: BinaryIO,
    config: Optional[Config] = None,
) -> SarifLog:
    """Build the SARIF log from findings, then write it to stream."""
    if config is None:
        config = get_default_config()
    log = build_sarif(findings, config)
    write_sarif(log, stream, indent=config.indent)
    return log
