# tensor_notation/notation/diagnostics.py
"""
Positioned diagnostics for tensor notation parse failures.

Line and column are not tracked while scanning. They are recovered only when an
error is raised, by replaying the consumed prefix of the buffer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

ERROR_PREFIX = "Error parsing TensorNotation at position "


class ParseErrorKind(str, Enum):
    STRUCTURAL_MISMATCH = "structural_mismatch"
    UNTERMINATED_NAME = "unterminated_name"
    MALFORMED_BASE64 = "malformed_base64"
    INVALID_ENCODING = "invalid_encoding"


@dataclass(frozen=True)
class Position:
    line: int
    column: int

    def __str__(self) -> str:
        return f"({self.line}:{self.column})"


@dataclass(frozen=True)
class ParseError:
    """The single error a failed parse produces."""

    position: Position
    kind: ParseErrorKind
    detail: str

    @property
    def message(self) -> str:
        return f"{ERROR_PREFIX}{self.position}: {self.detail}"

    def __str__(self) -> str:
        return self.message


def locate(text: str, offset: int) -> Position:
    """Replay ``text`` up to and including ``offset`` and return its position.

    The end of the buffer counts as one terminator character, so an offset equal
    to ``len(text)`` is valid. Every character advances the column, and a newline
    starts the next line at column 1.
    """
    prefix = text[: offset + 1]
    if offset >= len(text):
        prefix += "\0"
    line = prefix.count("\n") + 1
    column = len(prefix) - (prefix.rfind("\n") + 1) + 1
    return Position(line=line, column=column)


def describe_char(text: str, offset: int) -> str:
    """Quote the character at ``offset`` for a diagnostic, or name the end of input."""
    if offset >= len(text):
        return "end of input"
    return f"'{text[offset]}'"
