"""Insert missing inverse relation fields into Prisma model blocks."""

from __future__ import annotations

from collections.abc import Iterable
import logging
import re

from schemarepair.contracts.models import RelationAddition

logger = logging.getLogger(__name__)

_MODEL_HEADER = re.compile(r"^\s*model\s+([A-Za-z_][A-Za-z0-9_]*)\s*\{\s*$")
_BLOCK_END = re.compile(r"^\s*\}\s*$")
_DEFAULT_INDENT = "  "


def _find_model_block(lines: list[str], model: str) -> tuple[int, int] | None:
    for start, line in enumerate(lines):
        match = _MODEL_HEADER.match(line)
        if not match or match.group(1) != model:
            continue
        for end in range(start + 1, len(lines)):
            if _BLOCK_END.match(lines[end]):
                return start, end
        return None
    return None


def _field_names(body: list[str]) -> set[str]:
    names: set[str] = set()
    for line in body:
        stripped = line.strip()
        if not stripped or stripped.startswith(("//", "@@")):
            continue
        names.add(stripped.split()[0])
    return names


def _insert_position(lines: list[str], start: int, end: int) -> int:
    for index in range(start + 1, end):
        if lines[index].strip().startswith("@@"):
            return index
    return end


def _indent_for(body: list[str]) -> str:
    for line in body:
        if line.strip():
            return line[: len(line) - len(line.lstrip())]
    return _DEFAULT_INDENT


def insert_relations(
    text: str, additions: Iterable[RelationAddition]
) -> tuple[str, list[str], list[str]]:
    """Add each relation to its model unless a field with that name exists.

    Lines go before the first ``@@`` block attribute, or before the closing
    brace when the model has none. Returns the new text, the ``Model.field``
    names that were added and the models that could not be found.
    """
    lines = text.splitlines(keepends=True)
    added: list[str] = []
    missing: list[str] = []
    for addition in additions:
        block = _find_model_block(lines, addition.model)
        if block is None:
            if addition.model not in missing:
                missing.append(addition.model)
            logger.warning(
                "schema.relation.model_missing",
                extra={"extra": {"model": addition.model, "field": addition.field_name}},
            )
            continue
        start, end = block
        body = lines[start + 1 : end]
        if addition.field_name in _field_names(body):
            continue
        newline = "\r\n" if lines[start].endswith("\r\n") else "\n"
        position = _insert_position(lines, start, end)
        lines.insert(position, f"{_indent_for(body)}{addition.relation}{newline}")
        added.append(f"{addition.model}.{addition.field_name}")
        logger.info(
            "schema.relation.added",
            extra={"extra": {"model": addition.model, "field": addition.field_name}},
        )
    return "".join(lines), added, missing
