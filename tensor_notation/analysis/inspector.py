# tensor_notation/analysis/inspector.py
"""
Inspector: runs the parse and decode stages over a tensor notation file.
"""
from __future__ import annotations

from typing import List

from loguru import logger

from tensor_notation.analysis.base import InspectionReport, TensorSummary
from tensor_notation.errors import InputBindingError
from tensor_notation.inputs import InputContext, decode_entry
from tensor_notation.io.file_reader import LocalFileSource
from tensor_notation.notation.parser import TensorParser
from tensor_notation.observability import Timer

AVAILABLE_STAGES: List[str] = ["parse", "decode"]


class Inspector:
    """Checks that a file is valid tensor notation and holds float tensors."""

    def __init__(self, path: str, *, strict: bool = False):
        self.path = path
        self.strict = strict
        self.src = LocalFileSource(path)

    def run(self, stages: List[str]) -> InspectionReport:
        """
        Run the requested stages. ``decode`` implies ``parse``.

        Args:
            stages: A list of stages to run (e.g., ["parse", "decode"]).
        """
        data = self.src.read_bytes()
        report = InspectionReport(file_path=self.path, file_size=len(data), strict=self.strict)

        context = InputContext()
        with Timer("parse") as t_parse:
            # Bytes go in as-is; the parser reports undecodable input itself.
            parser = TensorParser(data, context, strict=self.strict)
            parsed = parser.cached_parse()
        report.stages_run.append("parse")
        report.timings_ms["parse"] = t_parse.duration_ms
        logger.debug("Parsed {path} in {ms:.2f}ms", path=self.path, ms=t_parse.duration_ms)

        if not parsed:
            err = parser.error
            report.parse_error = {
                "kind": err.kind.value,
                "line": err.position.line,
                "column": err.position.column,
                "message": err.message,
            }
            report.add("parse:document", False, err.message)
            logger.info("Parse failed for {path}: {msg}", path=self.path, msg=err.message)
            return report

        report.add("parse:document", True, f"{context.input_count} tensor(s)")
        for entry in context.entries:
            report.tensors.append(
                TensorSummary(
                    name=entry.name,
                    dims_bytes=len(entry.dimensions),
                    values_bytes=len(entry.values),
                )
            )

        names = context.input_names
        duplicates = sorted({n for n in names if names.count(n) > 1})
        report.add(
            "parse:unique_names",
            not duplicates,
            f"duplicate names: {', '.join(duplicates)}" if duplicates else "all names unique",
        )

        if "decode" in stages:
            with Timer("decode") as t_decode:
                for entry, summary in zip(context.entries, report.tensors):
                    try:
                        tensor = decode_entry(entry)
                    except InputBindingError as e:
                        report.add(f"decode:{entry.name}", False, str(e))
                        continue
                    summary.shape = list(tensor.shape)
                    summary.n_values = len(tensor.values)
                    report.add(
                        f"decode:{entry.name}",
                        True,
                        f"shape={tensor.shape}",
                        shape=summary.shape,
                        n_values=summary.n_values,
                    )
            report.stages_run.append("decode")
            report.timings_ms["decode"] = t_decode.duration_ms
            logger.debug("Decoded {n} tensor(s) in {ms:.2f}ms", n=len(report.tensors), ms=t_decode.duration_ms)

        return report
