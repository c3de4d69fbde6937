"""
Capability store — the three read-only CCADB lookup indexes.

build_store() is the explicit constructor: it runs both table pipelines once
and returns a frozen CapabilityStore. The indexes are exposed as
MappingProxyType views over dictionaries that nothing mutates after
construction, so any number of threads may read concurrently without locks.

Lookups never raise for an absent key; absence is a normal outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType

import structlog
from structlog.typing import FilteringBoundLogger

from ccadb_capabilities.domain.models import (
    CapabilityRecord,
    IngestionReport,
    Sha256Digest,
    SpkiHashLookup,
)
from ccadb_capabilities.domain.ports import CsvSource
from ccadb_capabilities.pipeline import ingest_capability_table, ingest_spki_table

CAPABILITY_CSV = "AllCertificateRecordsCSVFormatv4"
SKI_SPKI_CSV = "ski_spkisha256.csv"

_NOT_FOUND = SpkiHashLookup(spki_sha256=None, found=False)


@dataclass(frozen=True, slots=True)
class CapabilityStore:
    """Immutable CCADB capability indexes plus how each table was ingested."""

    fingerprints: MappingProxyType[Sha256Digest, CapabilityRecord] = field(
        default_factory=lambda: MappingProxyType({})
    )
    issuer_capabilities: MappingProxyType[str, CapabilityRecord] = field(
        default_factory=lambda: MappingProxyType({})
    )
    issuer_spki_hashes: MappingProxyType[str, Sha256Digest] = field(
        default_factory=lambda: MappingProxyType({})
    )
    capability_report: IngestionReport | None = None
    spki_report: IngestionReport | None = None

    def capabilities_by_fingerprint(self, fingerprint: Sha256Digest) -> CapabilityRecord | None:
        """Capabilities of the CA certificate with this SHA-256 fingerprint."""
        return self.fingerprints.get(fingerprint)

    def issuer_capabilities_by_key_identifier(self, key_identifier: str) -> CapabilityRecord | None:
        """
        Union of capabilities of every CA certificate with this Subject Key Identifier.

        The key identifier is matched verbatim as it appears in the export.
        """
        return self.issuer_capabilities.get(key_identifier)

    def issuer_spki_sha256_by_key_identifier(self, key_identifier: str) -> SpkiHashLookup:
        """SHA-256 of the issuer's SubjectPublicKeyInfo, with a found flag."""
        spki_hash = self.issuer_spki_hashes.get(key_identifier)
        if spki_hash is None:
            return _NOT_FOUND
        return SpkiHashLookup(spki_sha256=spki_hash, found=True)


def build_store(
    source: CsvSource,
    log: FilteringBoundLogger | None = None,
    capability_csv: str = CAPABILITY_CSV,
    ski_spki_csv: str = SKI_SPKI_CSV,
) -> CapabilityStore:
    """
    Ingest both CCADB tables from `source` and freeze the result.

    Never raises for missing, empty, malformed or mis-headed tables: the
    affected index is left empty and the matching report records why.
    """
    log = log if log is not None else structlog.get_logger()

    capabilities = ingest_capability_table(source, capability_csv, log)
    spki = ingest_spki_table(source, ski_spki_csv, log)

    return CapabilityStore(
        fingerprints=MappingProxyType(capabilities.fingerprints),
        issuer_capabilities=MappingProxyType(capabilities.issuers),
        issuer_spki_hashes=MappingProxyType(spki.spki_hashes),
        capability_report=capabilities.report,
        spki_report=spki.report,
    )
