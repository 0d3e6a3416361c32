# tensor_notation/analysis/base.py
"""
Inspection report models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Finding:
    """Single check result."""

    name: str  # "<group>:<subject>", e.g. "decode:embedding"
    ok: bool
    details: str = ""
    context: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TensorSummary:
    name: str
    dims_bytes: int
    values_bytes: int
    shape: Optional[List[int]] = None  # filled by the decode stage
    n_values: Optional[int] = None


@dataclass
class InspectionReport:
    """Aggregate result of inspecting one tensor notation file."""

    file_path: str
    file_size: int
    strict: bool
    tensors: List[TensorSummary] = field(default_factory=list)
    findings: List[Finding] = field(default_factory=list)
    parse_error: Optional[Dict[str, Any]] = None
    stages_run: List[str] = field(default_factory=list)
    timings_ms: Dict[str, float] = field(default_factory=dict)

    def add(self, name: str, ok: bool, details: str = "", **context: Any) -> None:
        self.findings.append(Finding(name=name, ok=ok, details=details, context=context))

    @property
    def ok(self) -> bool:
        return all(f.ok for f in self.findings) if self.findings else True
