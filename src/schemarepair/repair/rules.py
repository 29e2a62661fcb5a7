"""Repair rules loaded from YAML."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator
import yaml  # type: ignore[import-untyped]

from schemarepair.contracts.models import MalformedRelation, RelationAddition
from schemarepair.repair.patterns import relation_line_pattern


class RulesError(ValueError):
    """Raised when a rules file cannot be loaded or validated."""


class RepairRules(BaseModel):
    """Removal patterns and relation additions applied by the repairer."""

    remove: list[MalformedRelation] = Field(default_factory=list)
    add: list[RelationAddition] = Field(default_factory=list)

    @model_validator(mode="after")
    def _additions_survive_removal(self) -> RepairRules:
        for addition in self.add:
            for rule in self.remove:
                if relation_line_pattern(rule).match(addition.relation):
                    raise ValueError(
                        f"relation {addition.relation!r} for {addition.model} "
                        f"would be removed by the {rule.field} {rule.type_name} rule"
                    )
        return self

    @classmethod
    def default(cls) -> RepairRules:
        return cls(remove=[MalformedRelation(field="tenants", type_name="Tenant")])

    @classmethod
    def load(cls, path: Path) -> RepairRules:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise RulesError(f"{path}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise RulesError(f"{path}: expected a mapping with 'remove' and 'add' keys")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise RulesError(f"{path}: {exc}") from exc
