"""Idempotent relation repair for Prisma schema files."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import shutil
import time

from schemarepair.contracts.models import RepairResult
from schemarepair.repair.patterns import collapse_blank_runs, strip_relation_lines
from schemarepair.repair.relations import insert_relations
from schemarepair.repair.rules import RepairRules

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


@dataclass(slots=True)
class TransformStats:
    """Counters gathered while transforming one document."""

    removed_lines: int = 0
    collapsed_runs: int = 0
    added_relations: list[str] = field(default_factory=list)
    missing_models: list[str] = field(default_factory=list)


def read_schema(path: Path) -> str:
    # newline="" keeps \r\n intact so untouched lines round-trip byte for byte
    with path.open(encoding=ENCODING, newline="") as fh:
        return fh.read()


def write_schema(path: Path, text: str) -> None:
    with path.open("w", encoding=ENCODING, newline="") as fh:
        fh.write(text)


def backup_path_for(path: Path) -> Path:
    return path.with_name(path.name + ".bak")


class SchemaRelationRepairer:
    """Strip malformed relation fields and normalise blank lines in a schema."""

    def __init__(self, rules: RepairRules | None = None) -> None:
        self._rules = rules if rules is not None else RepairRules.default()

    @property
    def rules(self) -> RepairRules:
        return self._rules

    def transform(self, text: str) -> tuple[str, TransformStats]:
        """Pure text transform; applying it to its own output changes nothing."""
        stats = TransformStats()
        # Strip first: an addition may reuse the field name of a removed line.
        text, stats.removed_lines = strip_relation_lines(text, self._rules.remove)
        if self._rules.add:
            text, stats.added_relations, stats.missing_models = insert_relations(
                text, self._rules.add
            )
        text, stats.collapsed_runs = collapse_blank_runs(text)
        return text, stats

    def repair(self, path: Path, *, dry_run: bool = False, backup: bool = False) -> RepairResult:
        """Rewrite ``path`` in full with the repaired text.

        Reading and transforming complete before anything is written, so an
        I/O failure leaves the file as it was. ``dry_run`` skips the write.
        """
        path = Path(path)
        fields = {"path": str(path), "dry_run": dry_run}
        started = time.perf_counter()
        logger.info("schema.repair.start", extra={"extra": fields})
        try:
            original = read_schema(path)
            repaired, stats = self.transform(original)
            backup_target: Path | None = None
            if not dry_run:
                if backup:
                    backup_target = backup_path_for(path)
                    shutil.copyfile(path, backup_target)
                write_schema(path, repaired)
        except OSError as exc:
            logger.error(
                "schema.repair.error",
                extra={
                    "extra": {
                        **fields,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    }
                },
            )
            raise
        result = RepairResult(
            path=path,
            removed_lines=stats.removed_lines,
            collapsed_runs=stats.collapsed_runs,
            added_relations=stats.added_relations,
            missing_models=stats.missing_models,
            changed=repaired != original,
            written=not dry_run,
            backup_path=backup_target,
        )
        logger.info(
            "schema.repair.end",
            extra={
                "extra": {
                    **fields,
                    "duration_ms": (time.perf_counter() - started) * 1000,
                    "removed_lines": result.removed_lines,
                    "collapsed_runs": result.collapsed_runs,
                    "added_relations": len(result.added_relations),
                    "changed": result.changed,
                }
            },
        )
        return result

    def preview(self, path: Path) -> tuple[str, str]:
        """Return the current and repaired text without touching the file."""
        original = read_schema(Path(path))
        repaired, _ = self.transform(original)
        return original, repaired


def repair(path: Path, rules: RepairRules | None = None) -> RepairResult:
    """Repair the schema at ``path`` in place using ``rules`` (default rules if omitted)."""
    return SchemaRelationRepairer(rules).repair(path)
