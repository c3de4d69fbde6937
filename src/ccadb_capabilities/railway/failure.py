"""
Failure description — structured error information for the failure track.

Every ingestion stage reports trouble as a FailureDescription carrying an
ErrorCode from the ingestion taxonomy below. The code decides how far the
failure reaches (a single row or a whole table) and how loudly it is logged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique


@unique
class ErrorCode(Enum):
    """
    Error codes for CCADB table ingestion.

    Table-scoped codes abort ingestion of one table and leave its index empty.
    RECORD_ERROR is row-scoped. CONFIGURATION_ERROR only ever reaches the CLI.
    """

    # --- Table-scoped ---
    SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"
    """File or bundled resource missing or unreadable (logged as info)."""

    EMPTY_SOURCE = "EMPTY_SOURCE"
    """The table tokenized into zero rows."""

    MALFORMED_TABLE = "MALFORMED_TABLE"
    """Bytes could not be decoded or tokenized as CSV."""

    SCHEMA_ERROR = "SCHEMA_ERROR"
    """A required header column is absent."""

    # --- Row-scoped ---
    RECORD_ERROR = "RECORD_ERROR"
    """Bad hex, bad Base64, wrong digest length or a short row."""

    # --- Process-scoped ---
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Settings could not be loaded or validated."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor carrying error code, message, optional exception, and timestamp.

    >>> desc = FailureDescription(ErrorCode.SCHEMA_ERROR, "missing TLS Capable")
    >>> desc.code
    <ErrorCode.SCHEMA_ERROR: 'SCHEMA_ERROR'>
    """

    code: ErrorCode
    message: str
    exception: BaseException | None = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
