import pytest

from tensor_notation.errors import TensorParseError
from tensor_notation.notation.diagnostics import ParseErrorKind, Position
from tensor_notation.notation.document import Document, TensorEntry
from tensor_notation.notation.parser import ParseResult, TensorParser, parse
from tests.helpers import dims_b64, values_b64


class TestEmptyDocuments:
    @pytest.mark.parametrize("text", [None, "", b""])
    def test_no_input_is_empty_document(self, text) -> None:
        """Null or empty buffers parse to zero tensors."""
        result = parse(text)

        assert result.ok
        assert result.error is None
        assert len(result.document) == 0

    @pytest.mark.parametrize("text", ["{}", "  {\n}\t", "\r\n{ }"])
    def test_empty_braces(self, text: str) -> None:
        """An empty tensor list is valid, whitespace around braces included."""
        result = parse(text)

        assert result.ok
        assert result.document.names == []


class TestWellFormed:
    def test_single_entry_keeps_raw_bytes(self) -> None:
        """One tensor: 8 bytes of dimensions and 4 bytes of values."""
        text = f'{{"a":"{dims_b64(1)};{values_b64(3.5)}"}}'

        doc = parse(text).unwrap()

        assert doc.names == ["a"]
        entry = doc.get("a")
        assert len(entry.dimensions) == 8
        assert len(entry.values) == 4

    def test_entries_keep_source_order(self, two_tensor_text: str) -> None:
        """Entries come out in the order they were written."""
        doc = parse(two_tensor_text).unwrap()

        assert [e.name for e in doc] == ["a", "b"]
        assert len(doc.get("b").dimensions) == 16
        assert len(doc.get("b").values) == 12

    def test_reversed_source_gives_reversed_names(self) -> None:
        """Order follows the text, not the names."""
        text = '{"z":"AAAA;AAAA","m":"AAAA;AAAA","a":"AAAA;AAAA"}'

        assert parse(text).unwrap().names == ["z", "m", "a"]

    def test_whitespace_between_tokens(self) -> None:
        """Whitespace is allowed around braces, colon and comma."""
        text = '{\n  "a" :\t"AAAA;AAAA" ,\r\n  "b": "AAAA;AAAA"\n}'

        assert parse(text).unwrap().names == ["a", "b"]

    def test_trailing_comma_is_accepted(self) -> None:
        """The list grammar allows a comma with nothing after it."""
        assert parse('{"a":"AAAA;AAAA",}').unwrap().names == ["a"]

    def test_empty_base64_runs(self) -> None:
        """Zero-length payloads are a multiple of four."""
        entry = parse('{"a":";"}').unwrap().get("a")

        assert entry.dimensions == b""
        assert entry.values == b""

    def test_escaped_quote_stays_in_name(self) -> None:
        """An escaped quote does not end the name and the backslash is kept."""
        doc = parse('{"a\\"b":"AAAA;AAAA"}').unwrap()

        assert doc.names == ['a\\"b']

    def test_double_backslash_does_not_escape_quote(self) -> None:
        """Two backslashes cancel out, so the following quote ends the name."""
        doc = parse('{"a\\\\":"AAAA;AAAA"}').unwrap()

        assert doc.names == ["a\\\\"]

    def test_unwrap_returns_the_document(self) -> None:
        """A successful result unwraps to its own document."""
        doc = Document()

        assert ParseResult(document=doc).unwrap() is doc

    def test_get_returns_first_duplicate(self) -> None:
        """Name lookup gives the earliest entry when a name repeats."""
        doc = parse('{"x":";AAAA","x":";"}').unwrap()

        assert doc.get("x").values == b"\x00\x00\x00"
        assert doc.get("missing") is None

    def test_get_on_prebuilt_document(self) -> None:
        """Entries passed to the constructor are indexed as well."""
        entries = [TensorEntry("a", b"", b""), TensorEntry("b", b"", b"\x00\x00\x00")]

        assert Document(entries=entries).get("b") is entries[1]

    def test_bytes_input_is_decoded(self) -> None:
        """Bytes buffers are read as UTF-8."""
        doc = parse('{"größe":"AAAA;AAAA"}'.encode("utf-8")).unwrap()

        assert doc.names == ["größe"]

    def test_trailing_content_ignored_by_default(self) -> None:
        """Bytes after the closing brace are not scanned."""
        assert parse('{"a":"AAAA;AAAA"} trailing junk').unwrap().names == ["a"]


class TestMalformed:
    def test_missing_colon(self) -> None:
        """A quote where the colon should be is a structural mismatch."""
        result = parse('{"a" "x"}')

        assert not result.ok
        assert result.document is None
        assert result.error.kind is ParseErrorKind.STRUCTURAL_MISMATCH
        assert result.error.message == (
            "Error parsing TensorNotation at position (1:7): Expecting ':'; actual '\"'."
        )

    def test_base64_length_not_multiple_of_four(self) -> None:
        """The dims run stops at the semicolon and is three characters long."""
        result = parse('{"a":"AAA;AAAA"}')

        assert result.error.kind is ParseErrorKind.MALFORMED_BASE64
        assert result.error.position == Position(line=1, column=11)
        assert result.error.message == (
            "Error parsing TensorNotation at position (1:11): "
            'Base64 string "AAA" length is not divisible by 4: 3.'
        )

    def test_character_outside_alphabet_ends_run(self) -> None:
        """A stray character cuts the run short and the length check trips."""
        result = parse('{"a":"AA-A;AAAA"}')

        assert result.error.kind is ParseErrorKind.MALFORMED_BASE64
        assert '"AA"' in result.error.message

    def test_codec_rejection(self) -> None:
        """A run of the right length that the codec refuses is malformed."""
        result = parse('{"a":"A===;AAAA"}')

        assert result.error.kind is ParseErrorKind.MALFORMED_BASE64
        assert 'Base64 string "A==="' in result.error.message

    def test_whitespace_inside_tensor_data(self) -> None:
        """Whitespace is not skipped inside the quoted data."""
        result = parse('{"a":"AAAA ;AAAA"}')

        assert result.error.detail == "Expecting ';'; actual ' '."

    def test_missing_closing_brace(self) -> None:
        """End of input before '}' is reported at the terminator."""
        result = parse('{"a":"AAAA;AAAA"')

        assert result.error.kind is ParseErrorKind.STRUCTURAL_MISMATCH
        assert result.error.detail == "Expecting '}'; actual end of input."
        assert result.error.position == Position(line=1, column=18)

    def test_unterminated_name(self) -> None:
        """A name running into end of input has its own error kind."""
        result = parse('{"ab')

        assert result.error.kind is ParseErrorKind.UNTERMINATED_NAME
        assert result.error.position == Position(line=1, column=6)

    def test_escaped_quote_cannot_close_name(self) -> None:
        """A name whose only closing quote is escaped never terminates."""
        result = parse('{"a\\"')

        assert result.error.kind is ParseErrorKind.UNTERMINATED_NAME

    @pytest.mark.parametrize(
        "text, detail",
        [
            ('{"a":1}', "Expecting '\"'; actual '1'."),
            ('{"a":{"b":"AAAA;AAAA"}}', "Expecting '\"'; actual '{'."),
            ('{a:"AAAA;AAAA"}', "Expecting '\"'; actual 'a'."),
            ('{"a":"<float>AAAA;AAAA"}', "Expecting ';'; actual '<'."),
            ('["a"]', "Expecting '{'; actual '['."),
        ],
    )
    def test_json_outside_the_grammar(self, text: str, detail: str) -> None:
        """Numbers, nesting, bare words, type tags and arrays are rejected."""
        assert parse(text).error.detail == detail

    def test_position_on_later_line(self) -> None:
        """Line and column are recovered from the consumed prefix."""
        result = parse('{\n  "a" "x"}')

        assert result.error.position == Position(line=2, column=8)

    def test_invalid_utf8_is_a_parse_error(self) -> None:
        """Undecodable bytes come back as a positioned error, not an exception."""
        result = parse(b'{"\xff":"AAAA;AAAA"}')

        assert not result.ok
        assert result.error.kind is ParseErrorKind.INVALID_ENCODING
        assert result.error.position == Position(line=1, column=4)
        assert result.error.detail == "Byte 0xff is not valid UTF-8."

    def test_invalid_utf8_position_counts_characters(self) -> None:
        """The column counts decoded characters before the bad byte."""
        result = parse(b'{"\xc3\xa9\xff":"AAAA;AAAA"}')

        assert result.error.kind is ParseErrorKind.INVALID_ENCODING
        assert result.error.position == Position(line=1, column=5)

    def test_invalid_utf8_through_parser_instance(self) -> None:
        """Constructing a parser over bad bytes never raises."""
        parser = TensorParser(b"{\n\x80}", Document())

        assert not parser.succeeded()
        assert parser.error.position == Position(line=2, column=2)

    def test_unwrap_raises(self) -> None:
        """unwrap turns an error result into an exception."""
        with pytest.raises(TensorParseError, match="Expecting ':'") as exc_info:
            parse('{"a" "x"}').unwrap()

        assert exc_info.value.error.kind is ParseErrorKind.STRUCTURAL_MISMATCH


class TestStrictMode:
    def test_rejects_trailing_content(self) -> None:
        """Strict parsing requires the document to end at '}'."""
        result = parse("{} x", strict=True)

        assert result.error.detail == "Expecting end of input; actual 'x'."
        assert result.error.position == Position(line=1, column=5)

    def test_allows_trailing_whitespace(self) -> None:
        """Whitespace after the closing brace is still fine."""
        assert parse('{"a":"AAAA;AAAA"}\n\n', strict=True).ok


class TestCachedVerdict:
    def test_success_is_not_rescanned(self) -> None:
        """Replacing the buffer after the first parse changes nothing."""
        doc = Document()
        parser = TensorParser('{"a":"AAAA;AAAA"}', doc)
        assert parser.cached_parse()

        parser._text = '{"broken'

        assert parser.cached_parse()
        assert parser.succeeded()
        assert parser.error_message() == ""
        assert doc.names == ["a"]

    def test_failure_is_not_rescanned(self) -> None:
        """A failed parse keeps reporting the same error."""
        parser = TensorParser('{"a" "x"}', Document())
        assert not parser.cached_parse()
        first = parser.error_message()

        parser._text = "{}"

        assert not parser.succeeded()
        assert parser.error_message() == first
        assert parser.error.kind is ParseErrorKind.STRUCTURAL_MISMATCH

    def test_queries_trigger_the_parse(self) -> None:
        """succeeded() parses on demand when cached_parse was never called."""
        doc = Document()
        parser = TensorParser('{"a":"AAAA;AAAA"}', doc)

        assert parser.succeeded()
        assert parser.succeeded()
        assert len(doc) == 1
