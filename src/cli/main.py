"""ephemstore CLI entry points.
This module exposes fetch, convert, and inspect commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Sequence

from core.config import EphemConfig
from core.errors import EphemError
from core.types import ObjectSeries
from ingest.pipeline import fetch_dataset
from ingest.request_spec import load_request_spec
from store.dataset_io import load_dataset, save_dataset, supported_formats


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="ephemstore",
        description="Store and convert ephemeris datasets",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_fetch_command(subparsers)
    _add_convert_command(subparsers)
    _add_inspect_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ephemstore CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "fetch":
            return _run_fetch_command(args)
        if args.command == "convert":
            return _run_convert_command(args)
        if args.command == "inspect":
            return _run_inspect_command(args)
    except EphemError as error:
        print(f"error={error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _run_fetch_command(args: argparse.Namespace) -> int:
    """Handle fetch command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    request = load_request_spec(args.request)
    dataset = fetch_dataset(request, EphemConfig.from_env())
    format_name = save_dataset(dataset, args.output, args.format)
    print(f"output_path={args.output}")
    print(f"format={format_name}")
    print(f"object_count={len(dataset)}")
    print(f"point_count={dataset.total_points}")
    return 0


def _run_convert_command(args: argparse.Namespace) -> int:
    """Handle convert command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    dataset = load_dataset(args.source, args.from_format)
    format_name = save_dataset(dataset, args.destination, args.to_format)
    print(f"output_path={args.destination}")
    print(f"format={format_name}")
    print(f"object_count={len(dataset)}")
    print(f"point_count={dataset.total_points}")
    return 0


def _run_inspect_command(args: argparse.Namespace) -> int:
    """Handle inspect command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    dataset = load_dataset(args.path, args.format)
    print(f"Objects: {len(dataset)}")
    for series in dataset:
        print(_render_series_summary(series))
    return 0


def _render_series_summary(series: ObjectSeries) -> str:
    """Render object name, point count, and the first point's key fields."""
    lines = [f"Object: {series.name}", f"Number of data points: {len(series.points)}"]
    if series.points:
        first = series.points[0]
        lines.append(f"  First point (JD {first.julian_date:.1f}):")
        lines.append("    Position (XYZ): " + ", ".join(f"{v:.6f}" for v in first.position))
        lines.append("    RA/Dec: " + ", ".join(f"{v:.6f}" for v in first.ra_dec))
        lines.append(f"    Magnitude: {first.magnitude:.3f}")
        lines.append(f"    Distance from Earth: {first.earth_distance:.6f} AU")
        if first.constellation:
            lines.append(f"    Constellation: {first.constellation}")
    return "\n".join(lines)


def _add_fetch_command(subparsers: Any) -> None:
    """Register fetch subcommand."""
    parser = subparsers.add_parser("fetch", help="Run the ephemeris source and save its output")
    parser.add_argument("--request", required=True, help="YAML ephemeris request file")
    parser.add_argument("--output", required=True, help="Destination dataset file")
    parser.add_argument(
        "--format",
        choices=supported_formats(),
        help="Output format; inferred from the file suffix when omitted",
    )


def _add_convert_command(subparsers: Any) -> None:
    """Register convert subcommand."""
    parser = subparsers.add_parser("convert", help="Convert a dataset between formats")
    parser.add_argument("source", help="Source dataset file")
    parser.add_argument("destination", help="Destination dataset file")
    parser.add_argument("--from-format", choices=supported_formats(), help="Source format")
    parser.add_argument("--to-format", choices=supported_formats(), help="Destination format")


def _add_inspect_command(subparsers: Any) -> None:
    """Register inspect subcommand."""
    parser = subparsers.add_parser("inspect", help="Print a per-object dataset summary")
    parser.add_argument("path", help="Dataset file")
    parser.add_argument("--format", choices=supported_formats(), help="Dataset format")

