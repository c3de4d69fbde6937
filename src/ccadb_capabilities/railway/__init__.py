"""
Railway-Oriented Programming primitives used by the ingestion pipeline.

    from ccadb_capabilities.railway import ErrorCode, Result

    def require_rows(rows: list[list[str]]) -> Result[list[list[str]]]:
        if not rows:
            return Result.failure(ErrorCode.EMPTY_SOURCE, "CSV file is empty")
        return Result.success(rows)
"""

from ccadb_capabilities.railway.assertions import ResultAssertions
from ccadb_capabilities.railway.failure import ErrorCode, FailureDescription
from ccadb_capabilities.railway.result import Failure, Result, Success

__all__ = [
    "ErrorCode",
    "Failure",
    "FailureDescription",
    "Result",
    "ResultAssertions",
    "Success",
]
