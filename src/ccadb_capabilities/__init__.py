"""
ccadb_capabilities — CCADB certificate-authority capability lookups.

Ingests the CCADB "All Certificate Records" CSV export and a key identifier
→ SPKI SHA-256 CSV, and exposes three read-only indexes: capabilities by
certificate fingerprint, merged capabilities by issuer key identifier, and
SPKI hash by issuer key identifier.

Built on the Railway-Oriented Programming (ROP) Result type for explicit,
composable error handling: bad input never raises, it empties a table or
skips a row.

    from ccadb_capabilities import DirectoryCsvSource, Sha256Digest, build_store

    store = build_store(DirectoryCsvSource(Path("data")))
    store.capabilities_by_fingerprint(Sha256Digest.from_hex(fingerprint_hex))
"""

__version__ = "0.1.0"

from ccadb_capabilities.adapters.source_reader import (  # noqa: E402
    BundledCsvSource,
    DirectoryCsvSource,
)
from ccadb_capabilities.domain.models import (  # noqa: E402
    CapabilityRecord,
    IngestionReport,
    RecordType,
    Sha256Digest,
    SpkiHashLookup,
)
from ccadb_capabilities.store import CapabilityStore, build_store  # noqa: E402

__all__ = [
    "BundledCsvSource",
    "CapabilityRecord",
    "CapabilityStore",
    "DirectoryCsvSource",
    "IngestionReport",
    "RecordType",
    "Sha256Digest",
    "SpkiHashLookup",
    "build_store",
]
