"""SARIF 2.1.0 output models.

Field names follow the SARIF JSON spelling so that ``model_dump(by_alias=True,
exclude_none=True)`` yields a schema-shaped document directly.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

SARIF_VERSION = "2.1.0"
SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"

SarifLevel = Literal["error", "warning", "note", "none"]


class SarifMessage(BaseModel):
    text: str


class SarifArtifactLocation(BaseModel):
    uri: str


class SarifArtifactContent(BaseModel):
    text: str


class SarifRegion(BaseModel):
    startLine: int = Field(..., ge=1)
    startColumn: int = Field(..., ge=1)
    endLine: Optional[int] = Field(None, ge=1)
    endColumn: Optional[int] = Field(None, ge=1)


class SarifPhysicalLocation(BaseModel):
    artifactLocation: SarifArtifactLocation
    region: SarifRegion


class SarifLocation(BaseModel):
    physicalLocation: SarifPhysicalLocation


class SarifReplacement(BaseModel):
    deletedRegion: SarifRegion
    insertedContent: Optional[SarifArtifactContent] = None


class SarifArtifactChange(BaseModel):
    artifactLocation: SarifArtifactLocation
    replacements: List[SarifReplacement] = Field(..., min_length=1)


class SarifFix(BaseModel):
    description: Optional[SarifMessage] = None
    artifactChanges: List[SarifArtifactChange] = Field(..., min_length=1)


class SarifRuleConfig(BaseModel):
    level: SarifLevel = "warning"


class SarifRule(BaseModel):
    id: str
    name: str
    shortDescription: Optional[SarifMessage] = None
    helpUri: Optional[str] = None
    defaultConfiguration: SarifRuleConfig = Field(default_factory=SarifRuleConfig)


class SarifDriver(BaseModel):
    name: str
    version: Optional[str] = None
    informationUri: Optional[str] = None
    rules: List[SarifRule] = Field(default_factory=list)


class SarifTool(BaseModel):
    driver: SarifDriver


class SarifResult(BaseModel):
    ruleId: str
    ruleIndex: int = Field(..., ge=0)
    level: SarifLevel
    message: SarifMessage
    locations: List[SarifLocation] = Field(default_factory=list)
    fixes: Optional[List[SarifFix]] = None


class SarifRun(BaseModel):
    tool: SarifTool
    results: List[SarifResult] = Field(default_factory=list)
    columnKind: Optional[Literal["utf16CodeUnits", "unicodeCodePoints"]] = None


class SarifLog(BaseModel):
    schema_uri: str = Field(SARIF_SCHEMA, alias="$schema")
    version: Literal["2.1.0"] = SARIF_VERSION
    runs: List[SarifRun] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @property
    def run(self) -> SarifRun:
        """The single run this converter produces."""
        return self.runs[0]
