"""
Unit tests for the tabular parser adapter.

Covers the lenient tokenizer used for the CCADB export (ragged rows, lazy
quotes, leading whitespace) and the strict tokenizer used for the SPKI table.
"""

from __future__ import annotations

from ccadb_capabilities.adapters.csv_parser import (
    decode_text,
    parse_rows,
    parse_table,
    tokenize_lenient,
    tokenize_strict,
)
from ccadb_capabilities.railway import ErrorCode, ResultAssertions


class TestDecodeText:
    def test_utf8(self) -> None:
        assert decode_text("Zürich,CA".encode()).value() == "Zürich,CA"

    def test_strips_byte_order_mark(self) -> None:
        """
        GIVEN an export saved with a UTF-8 BOM
        WHEN decoded
        THEN the first header name does not carry the BOM.
        """
        text = ResultAssertions.assert_success(decode_text(b"\xef\xbb\xbfSHA-256 Fingerprint,x"))
        assert text.startswith("SHA-256 Fingerprint")

    def test_invalid_utf8_is_malformed(self) -> None:
        ResultAssertions.assert_failure(decode_text(b"\xff\xfe\xfa"), ErrorCode.MALFORMED_TABLE)


class TestLenientParsing:
    """GIVEN the lenient tokenizer WHEN parsing THEN irregular input is tolerated."""

    def test_variable_field_counts(self) -> None:
        rows = ResultAssertions.assert_success(parse_rows("a,b,c\r\n1,2\r\n1,2,3,4\r\n"))
        assert rows == [["a", "b", "c"], ["1", "2"], ["1", "2", "3", "4"]]

    def test_leading_whitespace_stripped(self) -> None:
        rows = ResultAssertions.assert_success(parse_rows("a,  b,\tc\n"))
        assert rows[0][1] == "b"
        assert rows[0][2] == "c"

    def test_tab_before_flag_is_stripped(self) -> None:
        """
        GIVEN a flag cell written as a tab followed by True
        WHEN parsed
        THEN the field is exactly "True".
        """
        assert tokenize_lenient("a,\tTrue\n") == [["a", "True"]]

    def test_unicode_whitespace_stripped(self) -> None:
        assert tokenize_lenient("a,\u2003\u00a0True\n") == [["a", "True"]]

    def test_trailing_whitespace_kept(self) -> None:
        assert tokenize_lenient("a,True \n") == [["a", "True "]]

    def test_whitespace_before_opening_quote(self) -> None:
        assert tokenize_lenient('a, "b, c",d\n') == [["a", "b, c", "d"]]

    def test_quoted_field_with_comma(self) -> None:
        rows = ResultAssertions.assert_success(parse_rows('"Example, Inc.",True\n'))
        assert rows == [["Example, Inc.", "True"]]

    def test_doubled_quote_is_one_quote(self) -> None:
        assert tokenize_lenient('"The ""Best"" CA",True\n') == [['The "Best" CA', "True"]]

    def test_quote_inside_unquoted_field_kept(self) -> None:
        rows = ResultAssertions.assert_success(parse_rows('The "Best" CA,True\n'))
        assert rows == [['The "Best" CA', "True"]]

    def test_bare_quotes_inside_quoted_field_kept(self) -> None:
        """
        GIVEN a quoted owner name holding unescaped quotes and a comma
        WHEN parsed
        THEN the field stays whole and later columns do not shift.
        """
        rows = ResultAssertions.assert_success(parse_rows('x,"Acme "Global, Trust" CA",True\n'))
        assert rows == [["x", 'Acme "Global, Trust" CA', "True"]]

    def test_quote_closes_field_at_end_of_line(self) -> None:
        assert tokenize_lenient('a,"b "c"\nd,e\n') == [["a", 'b "c'], ["d", "e"]]

    def test_quote_closes_field_at_end_of_input(self) -> None:
        assert tokenize_lenient('a,"b"') == [["a", "b"]]

    def test_quoted_field_spanning_lines(self) -> None:
        rows = ResultAssertions.assert_success(parse_rows('a,"line one\nline two",c\n'))
        assert rows == [["a", "line one\nline two", "c"]]

    def test_crlf_inside_quoted_field_folded(self) -> None:
        assert tokenize_lenient('a,"one\r\ntwo"\r\n') == [["a", "one\ntwo"]]

    def test_blank_lines_dropped(self) -> None:
        rows = ResultAssertions.assert_success(parse_rows("a,b\n\n\n1,2\n"))
        assert rows == [["a", "b"], ["1", "2"]]

    def test_empty_trailing_field(self) -> None:
        assert tokenize_lenient("a,\n") == [["a", ""]]

    def test_last_line_without_newline(self) -> None:
        assert tokenize_lenient("a,b\r\n1,2") == [["a", "b"], ["1", "2"]]

    def test_unterminated_quote_tolerated(self) -> None:
        rows = ResultAssertions.assert_success(parse_rows('a,"b\n'))
        assert rows == [["a", "b\n"]]


class TestStrictParsing:
    def test_unterminated_quote_is_malformed(self) -> None:
        """
        GIVEN a quoted field that never closes
        WHEN parsed with the strict dialect
        THEN the table is MALFORMED_TABLE.
        """
        result = parse_rows('K1,"abc\n', tokenize_strict)
        ResultAssertions.assert_failure(result, ErrorCode.MALFORMED_TABLE)

    def test_well_formed_rows(self) -> None:
        rows = ResultAssertions.assert_success(parse_rows("k,v\r\nK1,AAAA\r\n", tokenize_strict))
        assert rows == [["k", "v"], ["K1", "AAAA"]]


class TestEmptyInput:
    def test_empty_text_is_empty_source(self) -> None:
        ResultAssertions.assert_failure(parse_rows(""), ErrorCode.EMPTY_SOURCE)

    def test_only_blank_lines_is_empty_source(self) -> None:
        ResultAssertions.assert_failure(parse_rows("\r\n\n"), ErrorCode.EMPTY_SOURCE)

    def test_empty_bytes_is_empty_source(self) -> None:
        ResultAssertions.assert_failure(parse_table(b""), ErrorCode.EMPTY_SOURCE)


class TestParseTable:
    def test_decodes_and_tokenizes(self) -> None:
        rows = ResultAssertions.assert_success(parse_table(b"a,b\n1,2\n"))
        assert rows == [["a", "b"], ["1", "2"]]

    def test_bad_encoding_short_circuits(self) -> None:
        ResultAssertions.assert_failure(parse_table(b"\xff,\xfe\n"), ErrorCode.MALFORMED_TABLE)
