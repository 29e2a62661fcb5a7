"""Domain models for schema repair rules and results."""

from __future__ import annotations

from pathlib import Path
import re

from pydantic import BaseModel, Field, field_validator

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_identifier(value: str) -> str:
    if not _IDENTIFIER.match(value):
        raise ValueError(f"{value!r} is not a schema identifier")
    return value


class MalformedRelation(BaseModel):
    """A relation field declaration that must be stripped from the schema."""

    field: str
    type_name: str = Field(alias="type")
    allow_list: bool = True

    model_config = {"populate_by_name": True}

    @field_validator("field", "type_name")
    @classmethod
    def _identifier(cls, value: str) -> str:
        return _check_identifier(value)


class RelationAddition(BaseModel):
    """An inverse relation field to insert into a model block when missing."""

    model: str
    relation: str

    @field_validator("model")
    @classmethod
    def _model_identifier(cls, value: str) -> str:
        return _check_identifier(value)

    @field_validator("relation")
    @classmethod
    def _relation_line(cls, value: str) -> str:
        value = value.strip()
        if "\n" in value or len(value.split()) < 2:
            raise ValueError("relation must be a single '<field> <Type> ...' line")
        _check_identifier(value.split()[0])
        return value

    @property
    def field_name(self) -> str:
        return self.relation.split()[0]


class RepairResult(BaseModel):
    """Outcome of one repair run over a schema file."""

    path: Path
    removed_lines: int = 0
    collapsed_runs: int = 0
    added_relations: list[str] = Field(default_factory=list)
    missing_models: list[str] = Field(default_factory=list)
    changed: bool = False
    written: bool = False
    backup_path: Path | None = None
