"""
Builders for CCADB-shaped CSV test data and an in-memory CsvSource.

The capability header deliberately puts extra columns around the required
ones, the way the real export does.
"""

from __future__ import annotations

import base64
import csv
import io

from structlog.testing import CapturingLogger

from ccadb_capabilities.railway import ErrorCode
from ccadb_capabilities.railway.result import Result

ROOT = "Root Certificate"
INTERMEDIATE = "Intermediate Certificate"

CAPABILITY_HEADER = [
    "CA Owner",
    "Salesforce Record ID",
    "Certificate Name",
    "Parent Salesforce Record ID",
    "Parent Certificate Name",
    "Certificate Record Type",
    "Subordinate CA Owner",
    "Apple Status",
    "Chrome Status",
    "Microsoft Status",
    "Mozilla Status",
    "Status of Root Cert",
    "Revocation Status",
    "SHA-256 Fingerprint",
    "Parent SHA-256 Fingerprint",
    "Valid From (GMT)",
    "Valid To (GMT)",
    "Public Key Algorithm",
    "Signature Hash Algorithm",
    "Trust Bits",
    "Distrust for TLS After Date",
    "Distrust for S/MIME After Date",
    "EV OIDs for Apple",
    "EV OIDs for Chrome",
    "EV OIDs for Microsoft",
    "EV OIDs for Mozilla",
    "Root Certificate Download URL",
    "CP/CPS Same as Parent",
    "Certificate Policy (CP) URL",
    "Certificate Practice Statement (CPS) URL",
    "Certificate Practice & Policy Statement",
    "Standard Audit URL",
    "Subject Key Identifier",
    "TLS Capable",
    "TLS EV Capable",
    "Code Signing Capable",
    "S/MIME Capable",
]

SPKI_HEADER = ["Subject Key Identifier", "SPKI SHA-256"]


def fingerprint_hex(n: int) -> str:
    """A distinct 64-character upper-case hex fingerprint for each n."""
    return f"{n:064X}"


def digest_base64(n: int, size: int = 32) -> str:
    return base64.b64encode(bytes([n % 256]) * size).decode("ascii")


def flag(value: bool) -> str:
    return "True" if value else "False"


def capability_row(
    fingerprint: str,
    key_identifier: str,
    record_type: str = INTERMEDIATE,
    *,
    tls: bool = False,
    tls_ev: bool = False,
    smime: bool = False,
    code_signing: bool = False,
) -> list[str]:
    """A full-width capability row laid out according to CAPABILITY_HEADER."""
    values = {
        "CA Owner": "Example CA",
        "Certificate Name": "Example CA " + key_identifier,
        "Certificate Record Type": record_type,
        "SHA-256 Fingerprint": fingerprint,
        "Subject Key Identifier": key_identifier,
        "TLS Capable": flag(tls),
        "TLS EV Capable": flag(tls_ev),
        "Code Signing Capable": flag(code_signing),
        "S/MIME Capable": flag(smime),
    }
    return [values.get(name, "") for name in CAPABILITY_HEADER]


def to_csv(rows: list[list[str]]) -> bytes:
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer, lineterminator="\r\n")
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def capability_csv(*rows: list[str]) -> bytes:
    return to_csv([CAPABILITY_HEADER, *rows])


def spki_csv(*rows: list[str]) -> bytes:
    return to_csv([SPKI_HEADER, *rows])


class InMemoryCsvSource:
    """CsvSource over a dict of table name → bytes; absent names are unavailable."""

    def __init__(self, tables: dict[str, bytes]) -> None:
        self._tables = tables

    def read(self, name: str) -> Result[bytes]:
        if name not in self._tables:
            return Result.failure(
                ErrorCode.SOURCE_UNAVAILABLE,
                "CSV file could not be read",
                FileNotFoundError(name),
            )
        return Result.success(self._tables[name])

    def describe(self, name: str) -> str:
        return f"memory://{name}"


def events(logger: CapturingLogger, method_name: str | None = None) -> list[str]:
    """Event names recorded by `logger`, optionally only for one level."""
    return [
        call.args[0]
        for call in logger.calls
        if method_name is None or call.method_name == method_name
    ]
