"""
CSV source adapters — raw bytes of the CCADB tables.

Adapter layer — implements the CsvSource port two ways:
  - BundledCsvSource: files shipped inside the package (ccadb_capabilities/data/),
    read through importlib.resources so it works from a wheel or a zip.
  - DirectoryCsvSource: files in a filesystem directory, for deployments that
    refresh the export outside the package.

Both turn any read error into Result.failure(SOURCE_UNAVAILABLE).
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path

from ccadb_capabilities.railway import ErrorCode
from ccadb_capabilities.railway.result import Result

BUNDLED_PACKAGE = "ccadb_capabilities"
BUNDLED_DIRECTORY = "data"


class BundledCsvSource:
    """Read CSV tables bundled as package data."""

    def __init__(self, package: str = BUNDLED_PACKAGE, directory: str = BUNDLED_DIRECTORY) -> None:
        self._package = package
        self._directory = directory

    def read(self, name: str) -> Result[bytes]:
        return Result.from_computation(
            lambda: resources.files(self._package).joinpath(self._directory, name).read_bytes(),
            ErrorCode.SOURCE_UNAVAILABLE,
            "CSV file could not be read",
        )

    def describe(self, name: str) -> str:
        return f"{self._directory}/{name}"


class DirectoryCsvSource:
    """Read CSV tables from a directory on disk."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    def read(self, name: str) -> Result[bytes]:
        return Result.from_computation(
            lambda: (self._directory / name).read_bytes(),
            ErrorCode.SOURCE_UNAVAILABLE,
            "CSV file could not be read",
        )

    def describe(self, name: str) -> str:
        return str(self._directory / name)
