# tensor_notation/__init__.py
"""
tensor_notation
===============

Parser, serializer and inspection tooling for the tensor notation: a restricted,
JSON-like text format that carries named tensors as base64-encoded int64 shapes
and float32 values.
"""
from __future__ import annotations

from importlib.metadata import version as _pkg_version

from tensor_notation.errors import (
    ExtensionError,
    InputBindingError,
    TensorNotationError,
    TensorParseError,
)
from tensor_notation.inputs import InputContext, TensorInput
from tensor_notation.notation.document import Document, TensorEntry
from tensor_notation.notation.parser import ParseResult, TensorParser, parse
from tensor_notation.notation.serializer import encode_tensor, write_tensor_notation
from tensor_notation.reader import read_tensor_notation

__all__ = [
    "__version__",
    "Document",
    "ExtensionError",
    "InputBindingError",
    "InputContext",
    "ParseResult",
    "TensorEntry",
    "TensorInput",
    "TensorNotationError",
    "TensorParseError",
    "TensorParser",
    "encode_tensor",
    "parse",
    "read_tensor_notation",
    "write_tensor_notation",
]

try:
    # Read version dynamically from installed package metadata
    __version__: str = _pkg_version("tensor-notation")
except Exception:  # pragma: no cover - fallback for development environments
    __version__ = "0.0.0-dev"
