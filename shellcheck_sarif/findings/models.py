# Pydantic data models for shellcheck diagnostics: Finding, Fix, Replacement, Level.

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class Level(str, Enum):
    """Severity levels emitted by shellcheck."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    STYLE = "style"


class Replacement(BaseModel):
    """One replacement span of a suggested fix (1-based, end column exclusive)."""

    line: int = Field(..., ge=1, strict=True)
    end_line: int = Field(..., alias="endLine", ge=1, strict=True)
    column: int = Field(..., ge=1, strict=True)
    end_column: int = Field(..., alias="endColumn", ge=1, strict=True)
    replacement: str = Field(..., strict=True)
    insertion_point: Optional[str] = Field(None, alias="insertionPoint")
    precedence: Optional[int] = None

    model_config = {"populate_by_name": True}


class Fix(BaseModel):
    """Ordered replacements shellcheck suggests for a finding."""

    replacements: List[Replacement] = Field(default_factory=list)


class Finding(BaseModel):
    """A single shellcheck diagnostic (e.g. SC2086 at a.sh:2:1)."""

    file: str = Field(..., strict=True)
    line: int = Field(..., ge=1, strict=True, description="1-based line number")
    end_line: Optional[int] = Field(None, alias="endLine", ge=1, strict=True)
    column: int = Field(..., ge=1, strict=True, description="1-based column number")
    end_column: Optional[int] = Field(None, alias="endColumn", ge=1, strict=True)
    level: Level
    code: int = Field(..., strict=True)
    message: str = Field(..., strict=True)
    fix: Optional[Fix] = None

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def fill_end_position(self) -> "Finding":
        # A missing end collapses the region onto its start.
        if self.end_line is None:
            self.end_line = self.line
        if self.end_column is None:
            self.end_column = self.column
        return self

    @property
    def rule_id(self) -> str:
        """Rule identifier as shellcheck prints it, e.g. ``SC2086``."""
        return f"SC{self.code}"

    @property
    def replacements(self) -> List[Replacement]:
        if self.fix is None:
            return []
        return self.fix.replacements
