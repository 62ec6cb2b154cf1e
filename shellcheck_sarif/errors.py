# Error taxonomy for the conversion pipeline: decode failures and emit failures.

from __future__ import annotations

from typing import Optional


class ConversionError(Exception):
    """Base class for every failure that aborts a conversion."""


class DecodeError(ConversionError):
    """The shellcheck report could not be turned into findings."""


class MalformedInputError(DecodeError):
    """Input is not valid JSON or not the expected top-level shape."""


class _FindingFieldError(DecodeError):
    def __init__(self, field: str, index: Optional[int], detail: str) -> None:
        self.field = field
        self.index = index
        where = f"finding {index}" if index is not None else "finding"
        super().__init__(f"{where}: {detail}")


class MissingFieldError(_FindingFieldError):
    """A required finding field is absent."""

    def __init__(self, field: str, index: Optional[int] = None) -> None:
        super().__init__(field, index, f"missing required field '{field}'")


class InvalidFieldError(_FindingFieldError):
    """A finding field has the wrong type or an out-of-range value."""

    def __init__(self, field: str, index: Optional[int] = None, reason: str = "") -> None:
        self.reason = reason
        detail = f"invalid field '{field}'"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(field, index, detail)


class EmitError(ConversionError):
    """The SARIF document could not be built or written."""


class EmitIOError(EmitError):
    """The output stream failed while the document was being written."""


class SerializationError(EmitError):
    """An internal invariant broke while building or serializing the document."""
