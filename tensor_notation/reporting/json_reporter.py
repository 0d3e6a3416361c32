# tensor_notation/reporting/json_reporter.py
"""
JSON reporting utilities.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from tensor_notation.analysis.base import InspectionReport
from tensor_notation.observability import to_dict


def to_json_dict(report: InspectionReport) -> Dict[str, Any]:
    """Convert an InspectionReport to a JSON-serializable dict."""
    d = to_dict(report)
    d["ok"] = report.ok
    return d


def write_json(report: InspectionReport, path: str) -> None:
    """Write report to a file as pretty JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_json_dict(report), f, indent=2)
