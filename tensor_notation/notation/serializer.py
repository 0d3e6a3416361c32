# tensor_notation/notation/serializer.py
"""
Canonical writer for the tensor notation (the inverse of ``parser``).
"""

from __future__ import annotations

import base64
import struct
from typing import Iterable, Sequence, Tuple, Union

from tensor_notation.errors import TensorNotationError
from tensor_notation.notation.document import TensorEntry


def encode_tensor(shape: Sequence[int], values: Sequence[float]) -> Tuple[bytes, bytes]:
    """Pack a shape as little-endian int64 and values as little-endian float32."""
    try:
        dims = struct.pack(f"<{len(shape)}q", *shape)
        vals = struct.pack(f"<{len(values)}f", *values)
    except (struct.error, OverflowError) as e:
        raise TensorNotationError(f"Cannot pack tensor: {e}") from e
    return dims, vals


def _check_name(name: str) -> None:
    in_escape = False
    for c in name:
        if c == '"' and not in_escape:
            raise TensorNotationError(f"Tensor name {name!r} contains an unescaped '\"'")
        in_escape = (not in_escape) if c == "\\" else False
    if in_escape:
        # A trailing backslash would escape the closing quote.
        raise TensorNotationError(f"Tensor name {name!r} ends with a dangling escape")


def write_tensor_notation(
    entries: Iterable[Union[TensorEntry, Tuple[str, bytes, bytes]]],
) -> str:
    """Serialize entries, in order, to ``{"name":"<dims>;<values>",...}``."""
    parts = []
    for entry in entries:
        if isinstance(entry, TensorEntry):
            name, dims, vals = entry.name, entry.dimensions, entry.values
        else:
            name, dims, vals = entry
        _check_name(name)
        d64 = base64.b64encode(dims).decode("ascii")
        v64 = base64.b64encode(vals).decode("ascii")
        parts.append(f'"{name}":"{d64};{v64}"')
    return "{" + ",".join(parts) + "}"
