"""
Pipeline — the ROP ingestion pipeline for each CCADB table.

Each table is one railway:

  capability table:
    source.read(name)
      → parse_table(raw)                  lenient tokenizer
        → resolve_capability_schema(header)
          → build_capability_indexes(rows)

  SPKI table:
    source.read(name)
      → parse_table(raw)                  strict tokenizer
        → check_spki_header(header)
          → build_spki_index(rows)

Any table-level failure short-circuits the railway, is logged once at the
end, and becomes an empty table whose report carries the failure. Nothing
here raises for bad input.
"""

from __future__ import annotations

from structlog.typing import FilteringBoundLogger

from ccadb_capabilities.adapters.csv_parser import (
    Row,
    parse_table,
    tokenize_lenient,
    tokenize_strict,
)
from ccadb_capabilities.domain.indexes import (
    CapabilityTable,
    SpkiTable,
    build_capability_indexes,
    build_spki_index,
)
from ccadb_capabilities.domain.models import IngestionReport
from ccadb_capabilities.domain.ports import CsvSource
from ccadb_capabilities.domain.schema import check_spki_header, resolve_capability_schema
from ccadb_capabilities.railway import ErrorCode, FailureDescription
from ccadb_capabilities.railway.result import Result

_FAILURE_EVENTS = {
    ErrorCode.SOURCE_UNAVAILABLE: "csv.source_unavailable",
    ErrorCode.EMPTY_SOURCE: "csv.empty",
    ErrorCode.MALFORMED_TABLE: "csv.unparseable",
    ErrorCode.SCHEMA_ERROR: "csv.missing_headers",
}


def log_table_failure(log: FilteringBoundLogger, location: str, failure: FailureDescription) -> None:
    """A missing source is informational; every other table failure is an error."""
    event = _FAILURE_EVENTS.get(failure.code, "csv.ingestion_failed")
    fields = {"error": failure.message, "file_path": location}
    if failure.exception is not None:
        fields["exception"] = str(failure.exception)

    if failure.code is ErrorCode.SOURCE_UNAVAILABLE:
        log.info(event, **fields)
    else:
        log.error(event, **fields)


def _index_capability_rows(
    rows: list[Row], location: str, log: FilteringBoundLogger
) -> Result[CapabilityTable]:
    header, data = rows[0], rows[1:]
    return resolve_capability_schema(header).map(
        lambda schema: build_capability_indexes(data, schema, location, log)
    )


def _index_spki_rows(rows: list[Row], location: str, log: FilteringBoundLogger) -> Result[SpkiTable]:
    header, data = rows[0], rows[1:]
    return check_spki_header(header).map(lambda _: build_spki_index(data, location, log))


def ingest_capability_table(
    source: CsvSource,
    name: str,
    log: FilteringBoundLogger,
) -> CapabilityTable:
    """Build the fingerprint and issuer indexes from the CCADB capability table."""
    location = source.describe(name)
    return (
        source.read(name)
        .flat_map(lambda raw: parse_table(raw, tokenize_lenient))
        .flat_map(lambda rows: _index_capability_rows(rows, location, log))
        .peek_failure(lambda failure: log_table_failure(log, location, failure))
        .get_or_else_get(
            lambda failure: CapabilityTable(
                report=IngestionReport(source=location, failure=failure)
            )
        )
    )


def ingest_spki_table(
    source: CsvSource,
    name: str,
    log: FilteringBoundLogger,
) -> SpkiTable:
    """Build the key identifier → SPKI SHA-256 index."""
    location = source.describe(name)
    return (
        source.read(name)
        .flat_map(lambda raw: parse_table(raw, tokenize_strict))
        .flat_map(lambda rows: _index_spki_rows(rows, location, log))
        .peek_failure(lambda failure: log_table_failure(log, location, failure))
        .get_or_else_get(
            lambda failure: SpkiTable(report=IngestionReport(source=location, failure=failure))
        )
    )
