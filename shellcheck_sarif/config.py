from __future__ import annotations

"""
Converter configuration: tool metadata written into the SARIF run and the
input shape the decoder pins to.

The CLI builds one of these from its flags; library callers can use
get_default_config() and override fields with dataclasses.replace().
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class InputFormat(str, Enum):
    """Top-level shapes produced by ``shellcheck -f``."""

    JSON = "json"  # bare array of comments
    JSON1 = "json1"  # {"comments": [...]}


DEFAULT_TOOL_NAME = "shellcheck"
DEFAULT_INFORMATION_URI = "https://www.shellcheck.net"
DEFAULT_RULE_HELP_BASE = "https://www.shellcheck.net/wiki/"


@dataclass
class Config:
    """
    Conversion settings.

    tool_version is whatever the caller knows about the shellcheck binary that
    produced the report; it is omitted from the output when None. indent=None
    writes compact JSON.
    """

    tool_name: str = DEFAULT_TOOL_NAME
    tool_version: Optional[str] = None
    information_uri: Optional[str] = DEFAULT_INFORMATION_URI
    rule_help_base: Optional[str] = DEFAULT_RULE_HELP_BASE
    input_format: InputFormat = InputFormat.JSON
    indent: Optional[int] = 2

    def rule_help_uri(self, rule_id: str) -> Optional[str]:
        """Wiki page for a rule, or None when help links are disabled."""
        if not self.rule_help_base:
            return None
        return f"{self.rule_help_base}{rule_id}"


def get_default_config() -> Config:
    """Return the configuration the CLI uses when no flags are given."""
    return Config()
