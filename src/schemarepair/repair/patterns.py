"""Line patterns for malformed relation fields and blank-line runs."""

from __future__ import annotations

from collections.abc import Iterable
import re

from schemarepair.contracts.models import MalformedRelation

# Horizontal whitespace only; a relation line never spans a newline.
_HSPACE = r"[^\S\r\n]"

_BLANK_RUN_PATTERN = re.compile(r"(\r?\n)(?:\r?\n){2,}")


def relation_line_pattern(rule: MalformedRelation) -> re.Pattern[str]:
    """Compile the whole-line pattern for one malformed relation rule.

    The match covers the line and its terminating newline, so substituting an
    empty string deletes the line instead of leaving a blank one behind.
    """
    suffix = r"(?:\[\])?" if rule.allow_list else ""
    return re.compile(
        rf"^{_HSPACE}*{re.escape(rule.field)}{_HSPACE}+{re.escape(rule.type_name)}"
        rf"{suffix}{_HSPACE}*(?:\r?\n|\Z)",
        re.MULTILINE,
    )


def strip_relation_lines(text: str, rules: Iterable[MalformedRelation]) -> tuple[str, int]:
    """Delete every line matching one of the rules; return the text and count."""
    removed = 0
    for rule in rules:
        text, count = relation_line_pattern(rule).subn("", text)
        removed += count
    return text, removed


def collapse_blank_runs(text: str) -> tuple[str, int]:
    """Collapse three or more consecutive newlines down to two."""
    return _BLANK_RUN_PATTERN.subn(r"\1\1", text)
