"""
Shared test fixtures for the ccadb-capabilities test suite.

Ingestion code takes its logger as a parameter, so tests hand it a
structlog CapturingLogger and inspect the calls instead of log output.
"""

from __future__ import annotations

import pytest
from structlog.testing import CapturingLogger


@pytest.fixture()
def log() -> CapturingLogger:
    """A logger that records every call for later assertions."""
    return CapturingLogger()
