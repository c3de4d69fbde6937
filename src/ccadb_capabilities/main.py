"""
Application entry point — wires dependencies and builds the capability store.

Composition root: creates the concrete CSV source, configures logging, and
calls build_store() once. Library consumers do the same and then hand the
returned CapabilityStore to whatever needs lookups.

This is the ONLY place where concrete adapters are chosen.

Responsibilities:
  1. Load and validate configuration from environment
  2. Configure structlog (the only fatal startup failure besides configuration)
  3. Pick the bundled or directory CSV source
  4. Build the store and log a one-line summary per table
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.typing import FilteringBoundLogger

from ccadb_capabilities import __version__
from ccadb_capabilities.adapters.source_reader import BundledCsvSource, DirectoryCsvSource
from ccadb_capabilities.config import AppSettings, SourceSettings
from ccadb_capabilities.domain.models import IngestionReport
from ccadb_capabilities.domain.ports import CsvSource
from ccadb_capabilities.railway import ErrorCode
from ccadb_capabilities.railway.result import Result
from ccadb_capabilities.store import CapabilityStore, build_store


def configure_structlog(log_level: str = "INFO") -> FilteringBoundLogger:
    """
    Configure structlog for structured logging and return a logger.

    Unknown level names fall back to INFO.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger()


def create_source(settings: SourceSettings) -> CsvSource:
    """Bundled package data unless a directory is configured."""
    if settings.directory is None:
        return BundledCsvSource()
    return DirectoryCsvSource(settings.directory)


def _summary(report: IngestionReport | None) -> dict[str, object]:
    if report is None:
        return {}
    return {
        "source": report.source,
        "rows_read": report.rows_read,
        "rows_indexed": report.rows_indexed,
        "rows_skipped": report.rows_skipped,
        "rows_short": report.rows_short,
        "aborted": report.aborted,
    }


def log_store_summary(log: FilteringBoundLogger, store: CapabilityStore) -> None:
    log.info(
        "store.ready",
        fingerprints=len(store.fingerprints),
        issuers=len(store.issuer_capabilities),
        spki_hashes=len(store.issuer_spki_hashes),
        capability_table=_summary(store.capability_report),
        spki_table=_summary(store.spki_report),
    )


def load_settings() -> Result[AppSettings]:
    return Result.from_computation(
        AppSettings,
        ErrorCode.CONFIGURATION_ERROR,
        "Configuration error",
    )


def main() -> None:
    """Load settings, configure logging and build the store once."""
    settings_result = load_settings()
    if settings_result.is_failure():
        failure = settings_result.error()
        print(f"FATAL: {failure.message} — {failure.exception}", file=sys.stderr)  # noqa: T201
        sys.exit(1)
    settings = settings_result.value()

    try:
        log = configure_structlog(settings.log_level)
    except Exception as e:
        print(f"FATAL: Logger could not be initialized — {e}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    log.info(
        "app.starting",
        version=__version__,
        log_level=settings.log_level,
        directory=str(settings.sources.directory) if settings.sources.directory else "bundled",
    )

    store = build_store(
        create_source(settings.sources),
        log,
        capability_csv=settings.sources.capability_csv,
        ski_spki_csv=settings.sources.ski_spki_csv,
    )
    log_store_summary(log, store)


if __name__ == "__main__":
    main()
