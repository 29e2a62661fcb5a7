"""CLI entrypoint for repairing Prisma schema relations."""

from __future__ import annotations

from argparse import ArgumentParser
import difflib
from pathlib import Path
import sys

from schemarepair.contracts.models import RepairResult
from schemarepair.core.settings import LOG_LEVELS, get_repair_settings
from schemarepair.observability.logging import configure_logging
from schemarepair.repair.repairer import SchemaRelationRepairer
from schemarepair.repair.rules import RepairRules


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="schema-repair",
        description="Remove malformed relation fields from a Prisma schema file.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="Schema file to repair (defaults to SCHEMA_PATH or prisma/schema.prisma).",
    )
    parser.add_argument(
        "--rules",
        type=Path,
        help="YAML rules file (defaults to the packaged rules).",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--dry-run",
        action="store_true",
        help="Print a unified diff of the repair without writing the file.",
    )
    mode.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if the file needs repair; never writes.",
    )
    parser.add_argument(
        "--backup",
        action="store_true",
        help=(
            "Keep a copy of the original file as <path>.bak. Only applies when the "
            "file is written, so it cannot be combined with --dry-run or --check; "
            "SCHEMA_REPAIR_BACKUP is likewise ignored in those modes."
        ),
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (defaults to LOG_LEVEL or INFO).",
    )
    return parser


def _summary(result: RepairResult) -> str:
    parts = [f"removed {result.removed_lines} relation line(s)"]
    if result.added_relations:
        parts.append(f"added {len(result.added_relations)} relation(s)")
    if result.missing_models:
        parts.append(f"models not found: {', '.join(result.missing_models)}")
    if result.backup_path is not None:
        parts.append(f"backup at {result.backup_path}")
    return f"Schema repaired: {result.path} ({'; '.join(parts)})"


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.backup and (args.dry_run or args.check):
        parser.error("--backup cannot be combined with --dry-run or --check")
    settings = get_repair_settings()
    configure_logging(args.log_level or settings.log_level)

    path: Path = args.path or settings.schema_path
    rules = RepairRules.load(args.rules or settings.rules_path)
    repairer = SchemaRelationRepairer(rules)

    if args.dry_run or args.check:
        original, repaired = repairer.preview(path)
        if args.dry_run:
            sys.stdout.writelines(
                difflib.unified_diff(
                    original.splitlines(keepends=True),
                    repaired.splitlines(keepends=True),
                    fromfile=str(path),
                    tofile=f"{path} (repaired)",
                )
            )
        if original == repaired:
            print(f"Schema already clean: {path}")
            return 0
        print(f"Schema needs repair: {path}")
        return 1 if args.check else 0

    result = repairer.repair(path, backup=args.backup or settings.backup)
    print(_summary(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
