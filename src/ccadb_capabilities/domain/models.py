"""
Domain models — immutable value objects for CCADB capability data.

These are pure value objects with no behavior beyond self-validation.
They represent the data decoded from the CCADB "All Certificate Records"
export and from the key-identifier → SPKI hash table.

All models are frozen dataclasses (immutable) following functional principles,
so a built index can be shared by any number of readers.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from enum import StrEnum
from typing import NamedTuple

from ccadb_capabilities.railway.failure import FailureDescription

SHA256_SIZE = 32


class RecordType(StrEnum):
    """Values of the "Certificate Record Type" column that carry meaning."""

    ROOT = "Root Certificate"
    INTERMEDIATE = "Intermediate Certificate"


def parse_record_type(token: str) -> RecordType | str:
    """Map a CSV token to a RecordType, keeping unknown values verbatim."""
    try:
        return RecordType(token)
    except ValueError:
        return token


@dataclass(frozen=True, slots=True)
class Sha256Digest:
    """
    A 32-byte SHA-256 value used as a lookup key.

    Hashes and compares by value, so it can key a dict directly:
    certificate fingerprints in the fingerprint index and SPKI hashes in
    the SPKI index are both Sha256Digest.
    """

    digest: bytes

    def __post_init__(self) -> None:
        if len(self.digest) != SHA256_SIZE:
            raise ValueError(
                f"SHA-256 digest must be {SHA256_SIZE} bytes, got {len(self.digest)}"
            )

    @classmethod
    def from_hex(cls, value: str) -> Sha256Digest:
        """Decode a hex string (either case). Raises ValueError on bad input."""
        try:
            raw = binascii.unhexlify(value)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"invalid hex string: {value!r}") from e
        return cls(raw)

    @classmethod
    def from_base64(cls, value: str) -> Sha256Digest:
        """Decode standard, padded Base64. Raises ValueError on bad input."""
        try:
            raw = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"invalid Base64 string: {value!r}") from e
        return cls(raw)

    def hex(self) -> str:
        return self.digest.hex().upper()

    def __bytes__(self) -> bytes:
        return self.digest

    def __repr__(self) -> str:
        return f"Sha256Digest({self.hex()})"


@dataclass(frozen=True, slots=True)
class CapabilityRecord:
    """
    Capabilities of one CA certificate, or of every CA certificate sharing
    an issuer key identifier once merged.

    The same type backs both the fingerprint index and the issuer index.
    """

    record_type: RecordType | str
    tls_capable: bool = False
    tls_ev_capable: bool = False
    smime_capable: bool = False
    code_signing_capable: bool = False

    @property
    def is_root(self) -> bool:
        return self.record_type == RecordType.ROOT


class SpkiHashLookup(NamedTuple):
    """Result of an SPKI hash lookup: the hash (None if absent) and a found flag."""

    spki_sha256: Sha256Digest | None
    found: bool


@dataclass(frozen=True, slots=True)
class IngestionReport:
    """
    Summary of ingesting one CSV table.

    `failure` is set when the whole table was aborted (missing source,
    empty or malformed CSV, bad header); the table's index is then empty.
    """

    source: str
    rows_read: int = 0
    rows_indexed: int = 0
    rows_skipped: int = 0
    rows_short: int = 0
    failure: FailureDescription | None = field(default=None, repr=False)

    @property
    def aborted(self) -> bool:
        return self.failure is not None
