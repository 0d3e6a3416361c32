# tensor_notation/inputs.py
"""
Input context: the accumulator an inference layer hands to the parser.

It keeps the raw entries in source order and interprets them on demand as
float tensors (int64 shape + float32 values, both little-endian).
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import List, Tuple

from loguru import logger

from tensor_notation.errors import InputBindingError
from tensor_notation.notation.document import TensorEntry

DIM_SIZE = struct.calcsize("<q")
VALUE_SIZE = struct.calcsize("<f")


@dataclass(frozen=True)
class TensorInput:
    name: str
    shape: Tuple[int, ...]
    values: Tuple[float, ...]

    @property
    def n_elements(self) -> int:
        """Total number of elements implied by the shape."""
        p = 1
        for d in self.shape:
            p *= d
        return p


class InputContext:
    """Ordered, named model inputs collected from tensor notation."""

    def __init__(self) -> None:
        self._entries: List[TensorEntry] = []

    def push_input(self, name: str, dimensions: bytes, values: bytes) -> None:
        self._entries.append(TensorEntry(name=name, dimensions=dimensions, values=values))

    @property
    def input_count(self) -> int:
        return len(self._entries)

    @property
    def input_names(self) -> List[str]:
        return [e.name for e in self._entries]

    @property
    def entries(self) -> List[TensorEntry]:
        return list(self._entries)

    def clear(self) -> None:
        """Drop everything pushed so far (used after a failed parse)."""
        self._entries.clear()

    def inputs(self) -> List[TensorInput]:
        """Decode every entry, in order.

        Raises:
            InputBindingError: if an entry is not a well-formed float tensor.
        """
        return [decode_entry(e) for e in self._entries]


def decode_entry(entry: TensorEntry) -> TensorInput:
    """Interpret one entry's raw bytes as a float tensor."""
    if len(entry.dimensions) % DIM_SIZE != 0:
        raise InputBindingError(
            f"Input '{entry.name}': dimensions length {len(entry.dimensions)} "
            f"is not a multiple of {DIM_SIZE}"
        )
    if len(entry.values) % VALUE_SIZE != 0:
        raise InputBindingError(
            f"Input '{entry.name}': values length {len(entry.values)} "
            f"is not a multiple of {VALUE_SIZE}"
        )

    n_dims = len(entry.dimensions) // DIM_SIZE
    n_values = len(entry.values) // VALUE_SIZE
    shape = struct.unpack(f"<{n_dims}q", entry.dimensions)
    values = struct.unpack(f"<{n_values}f", entry.values)

    if any(d < 0 for d in shape):
        raise InputBindingError(f"Input '{entry.name}': negative dimension in {shape}")

    tensor = TensorInput(name=entry.name, shape=shape, values=values)
    if tensor.n_elements != n_values:
        raise InputBindingError(
            f"Input '{entry.name}': shape {shape} holds {tensor.n_elements} values, "
            f"got {n_values}"
        )
    logger.debug("Decoded input {name} shape={shape}", name=entry.name, shape=shape)
    return tensor
