# tensor_notation/notation/document.py
"""
Parsed tensor notation structures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Protocol


class InputAccumulator(Protocol):
    """Sink that receives each tensor as soon as the parser recognizes it."""

    def push_input(self, name: str, dimensions: bytes, values: bytes) -> None: ...


@dataclass(frozen=True)
class TensorEntry:
    name: str
    dimensions: bytes  # little-endian int64[], left undecoded
    values: bytes  # little-endian float32[], left undecoded


@dataclass
class Document:
    """Ordered collection of tensor entries, in source order."""

    entries: List[TensorEntry] = field(default_factory=list)
    # name -> first entry carrying it; duplicates keep the earliest
    _by_name: Dict[str, TensorEntry] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        for e in self.entries:
            self._by_name.setdefault(e.name, e)

    def push_input(self, name: str, dimensions: bytes, values: bytes) -> None:
        entry = TensorEntry(name=name, dimensions=dimensions, values=values)
        self.entries.append(entry)
        self._by_name.setdefault(name, entry)

    @property
    def names(self) -> List[str]:
        return [e.name for e in self.entries]

    def get(self, name: str) -> Optional[TensorEntry]:
        """First entry with the given name, if any."""
        return self._by_name.get(name)

    def __iter__(self) -> Iterator[TensorEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
