import pytest

from tensor_notation.errors import TensorNotationError
from tensor_notation.notation.document import TensorEntry
from tensor_notation.notation.parser import parse
from tensor_notation.notation.serializer import encode_tensor, write_tensor_notation


class TestEncodeTensor:
    def test_sizes(self) -> None:
        """Dimensions are int64, values float32."""
        dims, vals = encode_tensor([2, 3], [0.0] * 6)

        assert len(dims) == 16
        assert len(vals) == 24

    def test_little_endian(self) -> None:
        """Both payloads are little-endian."""
        dims, vals = encode_tensor([1], [1.0])

        assert dims == b"\x01" + b"\x00" * 7
        assert vals == b"\x00\x00\x80\x3f"


class TestWriteTensorNotation:
    def test_empty(self) -> None:
        """No entries serialize to empty braces."""
        assert write_tensor_notation([]) == "{}"

    def test_canonical_text(self) -> None:
        """Output has no whitespace and keeps entry order."""
        text = write_tensor_notation([("b", b"", b"\x00\x00\x00"), ("a", b"", b"")])

        assert text == '{"b":";AAAA","a":";"}'

    def test_parser_reads_back_names_and_bytes(self) -> None:
        """Parsing the output yields the same entries in the same order."""
        entries = [
            TensorEntry("first", *encode_tensor([2], [1.5, -2.0])),
            TensorEntry('esc\\"aped', *encode_tensor([1, 1], [7.0])),
        ]

        doc = parse(write_tensor_notation(entries)).unwrap()

        assert doc.entries == entries

    @pytest.mark.parametrize("name", ['bad"name', "trailing\\"])
    def test_rejects_names_the_parser_would_split(self, name: str) -> None:
        """Names must not contain an unescaped quote or end in an escape."""
        with pytest.raises(TensorNotationError):
            write_tensor_notation([(name, b"", b"")])


class TestEncodeTensorLimits:
    def test_value_outside_float32(self) -> None:
        """Floats too large for float32 are reported, not leaked as OverflowError."""
        with pytest.raises(TensorNotationError, match="Cannot pack tensor"):
            encode_tensor([1], [1e40])

    def test_dimension_outside_int64(self) -> None:
        """Dimensions must fit in a signed 64-bit integer."""
        with pytest.raises(TensorNotationError, match="Cannot pack tensor"):
            encode_tensor([2**63], [])
