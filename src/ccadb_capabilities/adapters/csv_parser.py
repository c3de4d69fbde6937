"""
Tabular parser adapter — CSV bytes → rows of string fields.

Adapter layer — two tokenizers:
  - tokenize_lenient: the CCADB export. Tolerates variable field counts,
    bare quote characters inside quoted and unquoted fields, and strips
    leading whitespace (any Unicode whitespace) before every field.
  - tokenize_strict: the key-identifier → SPKI hash table, which is generated
    by our own tooling. Read with the standard library csv module in strict
    mode, so unterminated or misplaced quotes are errors.

Lenient quoting rule: inside a quoted field a quote closes the field only
when it is followed by a comma, a line ending or the end of input. A doubled
quote is one literal quote; any other quote is kept as a literal character.
So `x,"Acme "Global, Trust" CA",True` is three fields, the middle one being
`Acme "Global, Trust" CA`.

Pipeline:
  raw bytes
    → decode_text()   UTF-8, BOM stripped        (MALFORMED_TABLE)
    → parse_rows()    tokenizer, blank lines dropped
                      (MALFORMED_TABLE on csv.Error, EMPTY_SOURCE on zero rows)
"""

from __future__ import annotations

import csv
import io
from collections.abc import Callable, Iterator
from typing import TypeAlias

from ccadb_capabilities.railway import ErrorCode
from ccadb_capabilities.railway.result import Result

Row: TypeAlias = list[str]
Tokenizer: TypeAlias = Callable[[str], list[Row]]

_DELIMITER = ","
_QUOTE = '"'
_NEWLINE = "\n"


class StrictDialect(csv.Dialect):
    """Machine-generated two-column tables: malformed quoting is rejected."""

    delimiter = _DELIMITER
    quotechar = _QUOTE
    doublequote = True
    skipinitialspace = False
    lineterminator = "\r\n"
    quoting = csv.QUOTE_MINIMAL
    strict = True


def decode_text(raw: bytes) -> Result[str]:
    """Decode table bytes as UTF-8, dropping a leading byte-order mark."""
    return Result.from_computation(
        lambda: raw.decode("utf-8-sig"),
        ErrorCode.MALFORMED_TABLE,
        "CSV file is not valid UTF-8",
    )


# ──────────────────────── Lenient tokenizer ────────────────────────


def _physical_lines(text: str) -> Iterator[str]:
    """Lines split on LF only, with CRLF folded to LF and a final bare CR dropped."""
    for line in io.StringIO(text, newline=_NEWLINE):
        if line.endswith("\r\n"):
            yield line[:-2] + _NEWLINE
        elif line.endswith("\r"):
            yield line[:-1]
        else:
            yield line


def _read_quoted(line: str, lines: Iterator[str]) -> tuple[str, str | None]:
    """
    Read a quoted field whose opening quote is already consumed.

    Returns the field and the rest of the line after the closing delimiter,
    or None as the rest when the field ends the record.
    """
    parts: list[str] = []
    while True:
        end = line.find(_QUOTE)
        if end >= 0:
            parts.append(line[:end])
            line = line[end + 1 :]
            if line.startswith(_QUOTE):
                parts.append(_QUOTE)
                line = line[1:]
            elif line.startswith(_DELIMITER):
                return "".join(parts), line[1:]
            elif line in ("", _NEWLINE):
                return "".join(parts), None
            else:
                parts.append(_QUOTE)
        elif line:
            # field continues on the next physical line
            parts.append(line)
            line = next(lines, "")
        else:
            # unterminated at end of input
            return "".join(parts), None


def _read_record(line: str, lines: Iterator[str]) -> Row:
    row: Row = []
    rest: str | None = line
    while rest is not None:
        rest = rest.lstrip()
        if rest.startswith(_QUOTE):
            value, rest = _read_quoted(rest[1:], lines)
        else:
            value, delimiter, rest = rest.partition(_DELIMITER)
            if not delimiter:
                value, rest = value.removesuffix(_NEWLINE), None
        row.append(value)
    return row


def tokenize_lenient(text: str) -> list[Row]:
    """Split CCADB export text into rows with lazy quoting and trimmed leading space."""
    lines = _physical_lines(text)
    return [_read_record(line, lines) for line in lines if line not in ("", _NEWLINE)]


# ──────────────────────── Strict tokenizer ────────────────────────


def tokenize_strict(text: str) -> list[Row]:
    """Split text with the csv module in strict mode; raises csv.Error on bad quoting."""
    reader = csv.reader(io.StringIO(text, newline=""), dialect=StrictDialect)
    return [row for row in reader if row]


def parse_rows(text: str, tokenize: Tokenizer = tokenize_lenient) -> Result[list[Row]]:
    """
    Tokenize CSV text into rows.

    No column-count enforcement happens here; callers decide what a short
    or long row means for their table.
    """
    return Result.from_computation(
        lambda: tokenize(text),
        ErrorCode.MALFORMED_TABLE,
        "CSV file could not be parsed",
    ).ensure(bool, ErrorCode.EMPTY_SOURCE, "CSV file is empty")


def parse_table(raw: bytes, tokenize: Tokenizer = tokenize_lenient) -> Result[list[Row]]:
    """Decode and tokenize one table."""
    return decode_text(raw).flat_map(lambda text: parse_rows(text, tokenize))
