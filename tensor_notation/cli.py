# tensor_notation/cli.py
"""
cli.py

Rich console CLI:
- check:   parse (and optionally decode) a tensor notation file and print a
           summary, the tensors in order, and the check results.
- encode:  build tensor notation text from shapes and values.
- version: show the package version.
"""
from __future__ import annotations

import argparse
import os
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from tensor_notation import __version__
from tensor_notation.analysis.inspector import AVAILABLE_STAGES, Inspector
from tensor_notation.errors import TensorNotationError
from tensor_notation.logging import configure_logging
from tensor_notation.notation.serializer import encode_tensor, write_tensor_notation
from tensor_notation.reporting.console import render_report
from tensor_notation.reporting.json_reporter import write_json

console = Console()


def _parse_tensor_arg(arg: str) -> Tuple[str, bytes, bytes]:
    """Turn ``NAME=D0,D1:V0,V1,...`` into an encoded entry."""
    name, sep, rest = arg.rpartition("=")
    shape_str, sep2, values_str = rest.partition(":")
    if not sep or not sep2 or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=SHAPE:VALUES, got {arg!r}")
    try:
        shape = [int(x) for x in shape_str.split(",") if x.strip()]
        values = [float(x) for x in values_str.split(",") if x.strip()]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid number in {arg!r}: {e}") from e
    try:
        dims, vals = encode_tensor(shape, values)
    except TensorNotationError as e:
        raise argparse.ArgumentTypeError(f"{e} in {arg!r}") from e
    return name, dims, vals


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tnx",
        description="Tensor notation tools: validate, inspect and encode named tensors.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    sub = p.add_subparsers(dest="cmd", title="Available Commands", metavar="<command>")

    sp_check = sub.add_parser("check", help="Parse and inspect a tensor notation file")
    sp_check.add_argument("path", help="Path to a file holding tensor notation text")
    sp_check.add_argument("--debug", action="store_true", help="Enable debug logging")
    sp_check.add_argument(
        "--strict",
        action="store_true",
        help="Reject content after the closing '}' (ignored by default)",
    )
    sp_check.add_argument(
        "--json-out", type=str, default=None, help="Write JSON report to this path"
    )
    sp_check.add_argument(
        "--stage",
        nargs="+",
        choices=AVAILABLE_STAGES,
        metavar="STAGE",
        help=(
            f"Run only specific stages. Defaults to all stages if not provided.\n"
            f"Available stages: {', '.join(AVAILABLE_STAGES)}.\n"
            f"'parse' always runs; 'decode' checks shapes against values."
        ),
    )

    sp_encode = sub.add_parser("encode", help="Print tensor notation for the given tensors")
    sp_encode.add_argument(
        "tensors",
        nargs="*",
        type=_parse_tensor_arg,
        metavar="NAME=SHAPE:VALUES",
        help="e.g. features=1,3:0.5,1.0,2.0 (shape and values are comma separated)",
    )

    sub.add_parser("version", help="Show the version of tensor-notation")

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return 0

    if args.cmd == "version":
        console.print(f"Tensor Notation Version {__version__}")
        return 0

    if args.cmd == "encode":
        try:
            text = write_tensor_notation(args.tensors)
        except TensorNotationError as e:
            console.print(f"[red]Cannot encode:[/red] {escape(str(e))}")
            return 1
        # Plain print; rich would wrap long base64 runs.
        print(text)
        return 0

    if args.cmd == "check":
        configure_logging(debug=args.debug)
        path = args.path
        if not os.path.exists(path):
            console.print(f"[red]File not found:[/red] {escape(path)}")
            return 2

        stages_to_run = args.stage or AVAILABLE_STAGES
        console.print(f"[dim]Running stages: {', '.join(stages_to_run)}...[/dim]")

        rep = Inspector(path, strict=args.strict).run(stages=stages_to_run)

        console.print(
            Panel(
                f"[bold]Result:[/bold] {'[green]OK[/green]' if rep.ok else '[red]FAILED[/red]'}",
                style="bold cyan",
            )
        )
        render_report(rep)

        if args.json_out:
            write_json(rep, args.json_out)
            console.print(f"[dim]Wrote JSON report → {escape(args.json_out)}[/dim]")

        return 0 if rep.ok else 1

    parser.print_help()
    return 1
