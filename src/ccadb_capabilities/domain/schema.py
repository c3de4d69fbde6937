"""
Schema resolution — map required column names to offsets in a CSV header.

The CCADB export may reorder or add columns between releases, so required
columns are located by exact header name rather than by position. Each
offset is tracked as `int | None` so a column found at offset 0 is never
mistaken for a missing one.
"""

from __future__ import annotations

from dataclasses import dataclass

from ccadb_capabilities.adapters.csv_parser import Row
from ccadb_capabilities.railway import ErrorCode
from ccadb_capabilities.railway.result import Result

SHA256_FINGERPRINT = "SHA-256 Fingerprint"
SUBJECT_KEY_IDENTIFIER = "Subject Key Identifier"
CERTIFICATE_RECORD_TYPE = "Certificate Record Type"
TLS_CAPABLE = "TLS Capable"
TLS_EV_CAPABLE = "TLS EV Capable"
SMIME_CAPABLE = "S/MIME Capable"
CODE_SIGNING_CAPABLE = "Code Signing Capable"

CAPABILITY_HEADERS: tuple[str, ...] = (
    SHA256_FINGERPRINT,
    SUBJECT_KEY_IDENTIFIER,
    CERTIFICATE_RECORD_TYPE,
    TLS_CAPABLE,
    TLS_EV_CAPABLE,
    SMIME_CAPABLE,
    CODE_SIGNING_CAPABLE,
)

SPKI_TABLE_COLUMNS = 2


@dataclass(frozen=True, slots=True)
class CapabilitySchema:
    """Resolved column offsets of the capability table."""

    fingerprint: int
    key_identifier: int
    record_type: int
    tls_capable: int
    tls_ev_capable: int
    smime_capable: int
    code_signing_capable: int

    @property
    def greatest_offset(self) -> int:
        return max(
            self.fingerprint,
            self.key_identifier,
            self.record_type,
            self.tls_capable,
            self.tls_ev_capable,
            self.smime_capable,
            self.code_signing_capable,
        )

    @property
    def min_fields(self) -> int:
        """Fields a data row needs to reach every required column."""
        return self.greatest_offset + 1


def locate_columns(header: Row, required: tuple[str, ...]) -> dict[str, int | None]:
    """
    Find the offset of every required column; None marks a missing one.

    If a header name repeats, the last occurrence wins.
    """
    offsets: dict[str, int | None] = dict.fromkeys(required)
    for offset, name in enumerate(header):
        if name in offsets:
            offsets[name] = offset
    return offsets


def resolve_capability_schema(header: Row) -> Result[CapabilitySchema]:
    """Resolve the capability table header, failing with SCHEMA_ERROR on any gap."""
    offsets = locate_columns(header, CAPABILITY_HEADERS)
    missing = [name for name, offset in offsets.items() if offset is None]
    if missing:
        return Result.failure(
            ErrorCode.SCHEMA_ERROR,
            "CSV data is missing one or more expected headers: " + ", ".join(missing),
        )
    return Result.success(
        CapabilitySchema(
            fingerprint=offsets[SHA256_FINGERPRINT],  # type: ignore[arg-type]
            key_identifier=offsets[SUBJECT_KEY_IDENTIFIER],  # type: ignore[arg-type]
            record_type=offsets[CERTIFICATE_RECORD_TYPE],  # type: ignore[arg-type]
            tls_capable=offsets[TLS_CAPABLE],  # type: ignore[arg-type]
            tls_ev_capable=offsets[TLS_EV_CAPABLE],  # type: ignore[arg-type]
            smime_capable=offsets[SMIME_CAPABLE],  # type: ignore[arg-type]
            code_signing_capable=offsets[CODE_SIGNING_CAPABLE],  # type: ignore[arg-type]
        )
    )


def check_spki_header(header: Row) -> Result[Row]:
    """The key-identifier → SPKI hash table has exactly two positional columns."""
    if len(header) != SPKI_TABLE_COLUMNS:
        return Result.failure(
            ErrorCode.SCHEMA_ERROR,
            f"CSV header must have exactly {SPKI_TABLE_COLUMNS} columns, got {len(header)}",
        )
    return Result.success(header)
