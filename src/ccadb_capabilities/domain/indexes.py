"""
Index builders — decoded rows → lookup dictionaries.

Domain layer. Three indexes come out of the two CCADB tables:

  capability table ─┬─ fingerprint → CapabilityRecord      (last row wins)
                    └─ key identifier → CapabilityRecord   (merged, see below)
  SPKI table ──────── key identifier → Sha256Digest        (last row wins)

Issuer merge rule: many CA certificates can share one Subject Key Identifier
(cross-signs, re-issued intermediates, roots re-signed as intermediates).
The issuer entry answers "has any certificate under this key ever claimed
capability X", so flags are OR-ed and a Root record type is sticky.

The logger is passed in explicitly; row-level problems are logged as
warnings and never abort the table.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from structlog.typing import FilteringBoundLogger

from ccadb_capabilities.adapters.csv_parser import Row
from ccadb_capabilities.domain.decoder import (
    decode_capability_row,
    decode_spki_row,
    is_short_row,
)
from ccadb_capabilities.domain.models import (
    CapabilityRecord,
    IngestionReport,
    RecordType,
    Sha256Digest,
)
from ccadb_capabilities.domain.schema import CapabilitySchema
from ccadb_capabilities.railway import FailureDescription


def merge_capabilities(existing: CapabilityRecord, incoming: CapabilityRecord) -> CapabilityRecord:
    """Fold `incoming` into `existing`: Root is sticky, every flag is OR-ed."""
    return CapabilityRecord(
        record_type=RecordType.ROOT if incoming.is_root else existing.record_type,
        tls_capable=existing.tls_capable or incoming.tls_capable,
        tls_ev_capable=existing.tls_ev_capable or incoming.tls_ev_capable,
        smime_capable=existing.smime_capable or incoming.smime_capable,
        code_signing_capable=existing.code_signing_capable or incoming.code_signing_capable,
    )


def merge_issuer(
    issuers: dict[str, CapabilityRecord],
    key_identifier: str,
    incoming: CapabilityRecord,
) -> None:
    """Seed or fold the issuer entry for `key_identifier` in place."""
    existing = issuers.get(key_identifier)
    issuers[key_identifier] = (
        incoming if existing is None else merge_capabilities(existing, incoming)
    )


@dataclass(slots=True)
class CapabilityTable:
    """Indexes built from the capability table, plus its ingestion report."""

    report: IngestionReport
    fingerprints: dict[Sha256Digest, CapabilityRecord] = field(default_factory=dict)
    issuers: dict[str, CapabilityRecord] = field(default_factory=dict)


@dataclass(slots=True)
class SpkiTable:
    """Index built from the key-identifier → SPKI hash table."""

    report: IngestionReport
    spki_hashes: dict[str, Sha256Digest] = field(default_factory=dict)


def _warn_invalid_record(
    log: FilteringBoundLogger, source: str, failure: FailureDescription
) -> None:
    fields = {"error": failure.message, "file_path": source}
    if failure.exception is not None:
        fields["reason"] = str(failure.exception)
    log.warning("csv.invalid_record", **fields)


def build_capability_indexes(
    rows: Iterable[Row],
    schema: CapabilitySchema,
    source: str,
    log: FilteringBoundLogger,
) -> CapabilityTable:
    """
    Decode every data row and populate the fingerprint and issuer indexes.

    Short rows are warned about and still decoded. Rows whose fingerprint
    does not decode are warned about and skipped by both indexes.
    """
    table = CapabilityTable(report=IngestionReport(source=source))
    read = indexed = skipped = short = 0

    for row in rows:
        read += 1
        if is_short_row(row, schema):
            short += 1
            log.warning("csv.short_row", file_path=source, line=",".join(row))

        decoded = decode_capability_row(row, schema)
        if decoded.is_failure():
            skipped += 1
            _warn_invalid_record(log, source, decoded.error())
            continue

        certificate = decoded.value()
        table.fingerprints[certificate.fingerprint] = certificate.capabilities
        merge_issuer(table.issuers, certificate.key_identifier, certificate.capabilities)
        indexed += 1

    table.report = replace(
        table.report,
        rows_read=read,
        rows_indexed=indexed,
        rows_skipped=skipped,
        rows_short=short,
    )
    return table


def build_spki_index(
    rows: Iterable[Row],
    source: str,
    log: FilteringBoundLogger,
) -> SpkiTable:
    """Populate the key identifier → SPKI hash index, skipping undecodable rows."""
    table = SpkiTable(report=IngestionReport(source=source))
    read = indexed = skipped = 0

    for row in rows:
        read += 1
        decoded = decode_spki_row(row)
        if decoded.is_failure():
            skipped += 1
            _warn_invalid_record(log, source, decoded.error())
            continue

        key_identifier, spki_hash = decoded.value()
        table.spki_hashes[key_identifier] = spki_hash
        indexed += 1

    table.report = replace(
        table.report, rows_read=read, rows_indexed=indexed, rows_skipped=skipped
    )
    return table
