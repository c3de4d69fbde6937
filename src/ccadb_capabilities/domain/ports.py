"""
Ports — Protocol-based interfaces for infrastructure adapters.

These define WHAT the ingestion pipeline needs without specifying HOW
it's done. Following hexagonal architecture:

  Domain ← Ports (protocols) ← Adapters (implementations)

Each port is a Protocol (structural typing) so adapters satisfy
the contract simply by implementing the methods — no inheritance.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ccadb_capabilities.railway.result import Result


@runtime_checkable
class CsvSource(Protocol):
    """
    Port: obtain the raw bytes of one named CSV table.

    Implementations read from bundled package data or from a directory.
    A missing or unreadable table is Failure(SOURCE_UNAVAILABLE), never
    an exception.
    """

    def read(self, name: str) -> Result[bytes]: ...

    def describe(self, name: str) -> str:
        """Human-readable location of the table, used in log lines."""
        ...
