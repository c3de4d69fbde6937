"""
Record decoding — one CSV data row → typed values.

Domain layer — pure functions, no logging. Row-level problems come back as
Result.failure(RECORD_ERROR) and the caller decides whether to skip the row.

Capability table policy (lenient):
  - a row too short to reach every required column is still decoded; absent
    fields read as the empty string, so flags become False
  - a fingerprint that is not hex, or not 32 bytes once decoded, fails the row
  - a flag is True only for the exact token "True"

SPKI table policy: a row must have exactly two fields and a Base64 value
that decodes to exactly 32 bytes, otherwise the row fails.
"""

from __future__ import annotations

from dataclasses import dataclass

from ccadb_capabilities.adapters.csv_parser import Row
from ccadb_capabilities.domain.models import (
    CapabilityRecord,
    Sha256Digest,
    parse_record_type,
)
from ccadb_capabilities.domain.schema import SPKI_TABLE_COLUMNS, CapabilitySchema
from ccadb_capabilities.railway import ErrorCode
from ccadb_capabilities.railway.result import Result

TRUE_TOKEN = "True"


@dataclass(frozen=True, slots=True)
class DecodedCertificate:
    """One capability-table row after decoding."""

    fingerprint: Sha256Digest
    key_identifier: str
    capabilities: CapabilityRecord


def field_at(row: Row, offset: int) -> str:
    """Field at `offset`, or "" when the row is too short."""
    return row[offset] if offset < len(row) else ""


def is_short_row(row: Row, schema: CapabilitySchema) -> bool:
    return len(row) < schema.min_fields


def decode_flag(token: str) -> bool:
    return token == TRUE_TOKEN


def decode_hex_digest(value: str) -> Result[Sha256Digest]:
    """Hex string → 32-byte digest."""
    return Result.from_computation(
        lambda: Sha256Digest.from_hex(value),
        ErrorCode.RECORD_ERROR,
        f"CSV data contains an invalid SHA-256 fingerprint: {value!r}",
    )


def decode_base64_digest(value: str) -> Result[Sha256Digest]:
    """Standard, padded Base64 → 32-byte digest."""
    return Result.from_computation(
        lambda: Sha256Digest.from_base64(value),
        ErrorCode.RECORD_ERROR,
        f"CSV data contains an invalid SPKI SHA-256 hash: {value!r}",
    )


def decode_capabilities(row: Row, schema: CapabilitySchema) -> CapabilityRecord:
    return CapabilityRecord(
        record_type=parse_record_type(field_at(row, schema.record_type)),
        tls_capable=decode_flag(field_at(row, schema.tls_capable)),
        tls_ev_capable=decode_flag(field_at(row, schema.tls_ev_capable)),
        smime_capable=decode_flag(field_at(row, schema.smime_capable)),
        code_signing_capable=decode_flag(field_at(row, schema.code_signing_capable)),
    )


def decode_capability_row(row: Row, schema: CapabilitySchema) -> Result[DecodedCertificate]:
    """Decode one capability-table row; only a bad fingerprint fails it."""
    return decode_hex_digest(field_at(row, schema.fingerprint)).map(
        lambda fingerprint: DecodedCertificate(
            fingerprint=fingerprint,
            key_identifier=field_at(row, schema.key_identifier),
            capabilities=decode_capabilities(row, schema),
        )
    )


def decode_spki_row(row: Row) -> Result[tuple[str, Sha256Digest]]:
    """Decode one (key identifier, Base64 SPKI SHA-256) row."""
    if len(row) != SPKI_TABLE_COLUMNS:
        return Result.failure(
            ErrorCode.RECORD_ERROR,
            f"CSV data has a line with {len(row)} fields, expected {SPKI_TABLE_COLUMNS}",
        )
    key_identifier, encoded = row
    return decode_base64_digest(encoded).map(lambda spki_hash: (key_identifier, spki_hash))
