"""
Command-line entry point
========================
Headless access to the project files produced by the editor.

Usage:
    $ python -m tracklayout bom track.json
    $ python -m tracklayout bom track.json --json
    $ python -m tracklayout import old_export.json track.json
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from tracklayout.logging_config import setup_logging
from tracklayout.model.bom import BOMSummary, summarize_project
from tracklayout.model.io import ProjectIO, ProjectFormatError

logger = logging.getLogger(__name__)


def format_bom(name: str, summary: BOMSummary) -> str:
    lines = [f"BOM - {name}", f"{'Model':<12}{'Count':>8}{'Unit (cm)':>12}"]
    for entry in summary.entries:
        lines.append(f"{entry.key:<12}{entry.count:>8}{entry.unit_length_cm:>12.2f}")
    lines.append(f"Total pieces: {summary.total_pieces}")
    lines.append(f"Total length: {summary.total_length_m:.2f} m ({summary.total_length_cm:.2f} cm)")
    return "\n".join(lines)


def _cmd_bom(args: argparse.Namespace) -> int:
    project = ProjectIO.load_project(args.project)
    summary = summarize_project(project)
    if args.json:
        print(json.dumps(summary.to_dict(include_details=False), ensure_ascii=False, indent=2))
    else:
        print(format_bom(project.name, summary))
    return 0


def _cmd_import(args: argparse.Namespace) -> int:
    project = ProjectIO.load_project(args.source)
    ProjectIO.save_project(project, args.destination)
    print(f"Imported {len(project.pieces)} pieces into {args.destination}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tracklayout", description="Track layout project tools.")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    bom = sub.add_parser("bom", help="Print the bill of materials of a project file.")
    bom.add_argument("project")
    bom.add_argument("--json", action="store_true", help="Print the legacy BOM JSON instead of a table.")
    bom.set_defaults(func=_cmd_bom)

    imp = sub.add_parser("import", help="Convert a legacy export into a project file.")
    imp.add_argument("source")
    imp.add_argument("destination")
    imp.set_defaults(func=_cmd_import)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)

    try:
        return args.func(args)
    except (OSError, ProjectFormatError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
