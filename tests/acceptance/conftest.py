"""
Acceptance test fixtures — CCADB-shaped export files written to a temp directory.

The capability export mimics the real one: UTF-8 BOM, quoted owner names with
commas and stray quotes, leading spaces, a truncated line and a corrupt
fingerprint. The SPKI table has one 16-byte hash and one bad Base64 value.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ccadb_capabilities.store import CAPABILITY_CSV, SKI_SPKI_CSV
from tests.helpers import (
    INTERMEDIATE,
    ROOT,
    capability_csv,
    capability_row,
    digest_base64,
    fingerprint_hex,
    spki_csv,
)

SHARED_SKI = "q2X0lW5k8dDdB3H6Zk0o9m2xv8A="
LONE_SKI = "3ZpFvpPxN3v6bL5mS6nX4k3KqJc="
QUOTED_OWNER_SKI = "Vt3mR9yXo2cPq8sLwZ4aHn1eJkE="


def _hand_written_line() -> str:
    """A row typed by hand: bare quotes inside a quoted owner, a tab before a flag."""
    row = capability_row(fingerprint_hex(0xEE05), QUOTED_OWNER_SKI, ROOT, smime=True)
    row[0] = '"Acme "Global, Trust" CA"'
    row[-4] = "\tTrue"  # TLS Capable
    return ",".join(row)


def capability_export() -> bytes:
    rows = [
        capability_row(fingerprint_hex(0xAA01), SHARED_SKI, INTERMEDIATE, tls=True),
        capability_row(fingerprint_hex(0xBB02), SHARED_SKI, ROOT, smime=True),
        capability_row(fingerprint_hex(0xCC03), LONE_SKI, INTERMEDIATE, code_signing=True),
        capability_row("ZZ-not-hex", LONE_SKI, ROOT, tls_ev=True),
        capability_row(fingerprint_hex(0xCC03), LONE_SKI, INTERMEDIATE, tls_ev=True),
    ]
    rows[0][0] = 'Example, "Trust" Services'
    raw = capability_csv(*rows)
    truncated = ",".join(capability_row(fingerprint_hex(0xDD04), "SHORT-SKI", ROOT)[:33])
    tail = f"{truncated}\r\n{_hand_written_line()}\r\n"
    return b"\xef\xbb\xbf" + raw + tail.encode()


def spki_export() -> bytes:
    return spki_csv(
        [SHARED_SKI, digest_base64(0x11)],
        [LONE_SKI, digest_base64(0x22)],
        ["SIXTEEN", digest_base64(0x33, size=16)],
        ["NOT-BASE64", "%%%%"],
    )


@pytest.fixture()
def export_dir(tmp_path: Path) -> Path:
    (tmp_path / CAPABILITY_CSV).write_bytes(capability_export())
    (tmp_path / SKI_SPKI_CSV).write_bytes(spki_export())
    return tmp_path
