# tensor_notation/errors.py
"""
Exception hierarchy shared by the parser, the input context and the CLI.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from tensor_notation.notation.diagnostics import ParseError


class TensorNotationError(Exception):
    """Base class for all tensor notation failures."""


class TensorParseError(TensorNotationError):
    """Raised when tensor notation text is malformed."""

    def __init__(self, error: "ParseError"):
        super().__init__(error.message)
        self.error = error


class ExtensionError(TensorNotationError):
    """Raised when a feature string cannot be deserialized into model inputs."""

    def __init__(self, message: str, parse_error: Optional["ParseError"] = None):
        super().__init__(message)
        self.parse_error = parse_error


class InputBindingError(TensorNotationError):
    """Raised when parsed bytes cannot be interpreted as a float tensor."""
