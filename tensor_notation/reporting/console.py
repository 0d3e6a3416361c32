# tensor_notation/reporting/console.py
"""
Console reporting functions for inspection results.
"""
from __future__ import annotations

from collections import defaultdict
from typing import List

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tensor_notation.analysis.base import Finding, InspectionReport

console = Console()


def render_summary(rep: InspectionReport) -> None:
    """Render a high-level summary table."""
    t = Table(title="Tensor Notation Summary", box=box.SIMPLE_HEAVY)
    t.add_column("Field", style="bold")
    t.add_column("Value")
    t.add_row("Path", escape(rep.file_path))
    t.add_row("Size (bytes)", str(rep.file_size))
    t.add_row("Strict", "yes" if rep.strict else "no")
    t.add_row("Tensors", str(len(rep.tensors)))
    t.add_row("Stages", ", ".join(rep.stages_run))
    for stage, ms in rep.timings_ms.items():
        t.add_row(f"{stage} (ms)", f"{ms:.2f}")
    console.print(t)


def render_tensors(rep: InspectionReport) -> None:
    """Render the tensors in source order."""
    if not rep.tensors:
        return
    table = Table(title="Tensors", box=box.ROUNDED, show_lines=False, title_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Dims Bytes", justify="right")
    table.add_column("Values Bytes", justify="right")
    table.add_column("Shape", style="green")
    table.add_column("Values", justify="right", style="yellow")

    for i, ts in enumerate(rep.tensors):
        shape = str(tuple(ts.shape)) if ts.shape is not None else "N/A"
        n_values = str(ts.n_values) if ts.n_values is not None else "N/A"
        table.add_row(str(i), escape(ts.name), str(ts.dims_bytes), str(ts.values_bytes), shape, n_values)

    console.print(table)


def _render_findings_table(title: str, findings: List[Finding]) -> None:
    table = Table(title=title, box=box.ROUNDED, show_lines=False, title_style="bold magenta")
    table.add_column("Status", justify="center", width=8)
    table.add_column("Check", style="cyan", no_wrap=True)
    table.add_column("Details", style="white")

    for f in findings:
        status = "[green]PASS[/green]" if f.ok else "[bold red]FAIL[/bold red]"
        table.add_row(status, escape(f.name.split(":", 1)[-1]), escape(f.details))

    console.print(table)


def render_findings(rep: InspectionReport) -> None:
    """Render findings grouped by stage, keeping their original order."""
    groups = defaultdict(list)
    for f in rep.findings:
        groups[f.name.split(":", 1)[0]].append(f)

    for group_name in ("parse", "decode"):
        if group_name in groups:
            _render_findings_table(group_name.title() + " Checks", groups[group_name])


def render_report(rep: InspectionReport) -> None:
    """Renders the full console report."""
    render_summary(rep)
    render_tensors(rep)
    render_findings(rep)
