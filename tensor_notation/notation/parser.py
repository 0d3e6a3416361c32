# tensor_notation/notation/parser.py
"""
Single-pass recursive-descent parser for the tensor notation.

The format is a very restricted JSON dialect:

    <TENSORS>       := "{" <TENSOR-LIST> "}"
    <TENSOR-LIST>   := <TENSOR> ["," [<TENSOR-LIST>]]
    <TENSOR>        := '"' <INPUT-NAME> '"' ":" '"' <TENSOR-DATA> '"'
    <TENSOR-DATA>   := <DIMS-BASE64> ";" <VALUES-BASE64>
    <DIMS-BASE64>   := base64 of int64[] holding the tensor dimensions
    <VALUES-BASE64> := base64 of float32[] holding the tensor values

No other JSON construct (numbers, nesting, bare words, type annotations) is
accepted. Decoded payloads are handed to the accumulator as raw bytes.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Optional, Union, cast

from tensor_notation.errors import TensorParseError
from tensor_notation.notation.diagnostics import (
    ParseError,
    ParseErrorKind,
    describe_char,
    locate,
)
from tensor_notation.notation.document import Document, InputAccumulator

ESCAPE = "\\"
DQUOTE = '"'
SEMICOLON = ";"
COLON = ":"
COMMA = ","
OPEN_CBRACKET = "{"
CLOSE_CBRACKET = "}"

WHITESPACE = frozenset(" \t\r\n")
BASE64_ALPHABET = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/="
)

Text = Union[str, bytes, None]


@dataclass(frozen=True)
class ParseResult:
    """Either a parsed document or the error that stopped the parse.

    ``document`` is set exactly when ``error`` is not.
    """

    document: Optional[Document] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Document:
        """Return the document, raising ``TensorParseError`` on failure."""
        if self.error is not None:
            raise TensorParseError(self.error)
        return cast(Document, self.document)


class TensorParser:
    """Parses one buffer into an accumulator and caches the verdict.

    Byte buffers are decoded as UTF-8 when the parse runs; undecodable bytes
    fail the parse like any other malformed token.

    Not safe for concurrent use: the reading head is instance state.
    """

    def __init__(self, text: Text, accumulator: InputAccumulator, *, strict: bool = False):
        self._raw = text
        self._text = ""
        self._accumulator = accumulator
        self._strict = strict
        self._head = 0
        self._has_parsed = False
        self._error: Optional[ParseError] = None

    def cached_parse(self) -> bool:
        """Parse on first call; afterwards return the cached verdict."""
        if self._has_parsed:
            return self._error is None
        self._has_parsed = True
        try:
            self._decode()
            if self._text:
                self._read_tensor_list()
        except TensorParseError as e:
            self._error = e.error
        return self._error is None

    def succeeded(self) -> bool:
        return self.cached_parse()

    def error_message(self) -> str:
        self.cached_parse()
        return self._error.message if self._error is not None else ""

    @property
    def error(self) -> Optional[ParseError]:
        self.cached_parse()
        return self._error

    # --- scanning -------------------------------------------------------------

    def _decode(self) -> None:
        raw = self._raw
        if raw is None:
            return
        if isinstance(raw, str):
            self._text = raw
            return
        data = bytes(raw)
        try:
            self._text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            # Keep the valid prefix so the error lands on the offending byte.
            self._text = data[: e.start].decode("utf-8") + "\ufffd"
            self._head = len(self._text) - 1
            raise self._fail(
                ParseErrorKind.INVALID_ENCODING,
                f"Byte 0x{data[e.start]:02x} is not valid UTF-8.",
            ) from e

    def _peek(self) -> Optional[str]:
        if self._head < len(self._text):
            return self._text[self._head]
        return None

    def _fail(self, kind: ParseErrorKind, detail: str) -> TensorParseError:
        position = locate(self._text, self._head)
        return TensorParseError(ParseError(position=position, kind=kind, detail=detail))

    def _skip_whitespace(self) -> None:
        while self._peek() in WHITESPACE:
            self._head += 1

    def _read_character(self, expected: str) -> None:
        if self._peek() == expected:
            self._head += 1
            return
        actual = describe_char(self._text, self._head)
        raise self._fail(
            ParseErrorKind.STRUCTURAL_MISMATCH, f"Expecting '{expected}'; actual {actual}."
        )

    def _read_base64(self) -> bytes:
        start = self._head
        while self._peek() in BASE64_ALPHABET:
            self._head += 1

        run = self._text[start : self._head]
        if len(run) % 4 != 0:
            raise self._fail(
                ParseErrorKind.MALFORMED_BASE64,
                f'Base64 string "{run}" length is not divisible by 4: {len(run)}.',
            )
        try:
            return base64.b64decode(run, validate=True)
        except (binascii.Error, ValueError) as e:
            raise self._fail(
                ParseErrorKind.MALFORMED_BASE64, f'Base64 string "{run}" is invalid: {e}.'
            ) from e

    def _read_tensor_name(self) -> str:
        self._read_character(DQUOTE)
        start = self._head

        # A backslash toggles the escape flag; any other character clears it.
        # Escapes are kept verbatim, they only stop a quote from ending the name.
        in_escape = False
        while True:
            c = self._peek()
            if c is None:
                raise self._fail(
                    ParseErrorKind.UNTERMINATED_NAME,
                    f'Tensor name "{self._text[start:]}" is missing its closing \'"\'.',
                )
            if c == DQUOTE and not in_escape:
                break
            in_escape = (not in_escape) if c == ESCAPE else False
            self._head += 1

        name = self._text[start : self._head]
        self._read_character(DQUOTE)
        return name

    def _read_tensor_data(self) -> tuple[bytes, bytes]:
        self._read_character(DQUOTE)
        dimensions = self._read_base64()
        # The separator also confirms the dimensions run ended where it should.
        self._read_character(SEMICOLON)
        values = self._read_base64()
        self._read_character(DQUOTE)
        return dimensions, values

    def _read_tensor(self) -> None:
        name = self._read_tensor_name()
        self._skip_whitespace()
        self._read_character(COLON)
        self._skip_whitespace()
        dimensions, values = self._read_tensor_data()
        self._accumulator.push_input(name, dimensions, values)

    def _read_tensor_list(self) -> None:
        self._skip_whitespace()
        self._read_character(OPEN_CBRACKET)
        self._skip_whitespace()

        while self._peek() not in (CLOSE_CBRACKET, None):
            self._read_tensor()
            self._skip_whitespace()
            if self._peek() == COMMA:
                self._read_character(COMMA)
                self._skip_whitespace()

        self._read_character(CLOSE_CBRACKET)

        if self._strict:
            self._skip_whitespace()
            if self._peek() is not None:
                actual = describe_char(self._text, self._head)
                raise self._fail(
                    ParseErrorKind.STRUCTURAL_MISMATCH,
                    f"Expecting end of input; actual {actual}.",
                )


def parse(text: Text, *, strict: bool = False) -> ParseResult:
    """Parse tensor notation text into a fresh ``Document``.

    ``None`` and the empty string are the empty document. Content after the
    closing brace is ignored unless ``strict`` is set.
    """
    document = Document()
    parser = TensorParser(text, document, strict=strict)
    if not parser.cached_parse():
        return ParseResult(error=parser.error)
    return ParseResult(document=document)
