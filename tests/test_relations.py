"""Tests for inverse relation insertion."""

from __future__ import annotations

import logging

from schemarepair.contracts.models import RelationAddition
from schemarepair.repair.relations import insert_relations

SCHEMA = """model AcademicYear {
  id       String @id
  tenantId String

  @@index([tenantId])
  @@map("academic_years")
}

model Tenant {
  id   String @id
  // relations
  name String
}
"""


def test_inserts_before_block_attributes() -> None:
    addition = RelationAddition(
        model="AcademicYear",
        relation='feeRegimes FeeRegime[] @relation("FeeRegimeAcademicYear")',
    )
    text, added, missing = insert_relations(SCHEMA, [addition])
    assert added == ["AcademicYear.feeRegimes"]
    assert missing == []
    assert (
        '  tenantId String\n\n  feeRegimes FeeRegime[] @relation("FeeRegimeAcademicYear")\n'
        "  @@index([tenantId])\n" in text
    )


def test_inserts_before_closing_brace_without_attributes() -> None:
    addition = RelationAddition(
        model="Tenant", relation='qhsAudits QhsAudit[] @relation("QhsAuditTenant")'
    )
    text, added, _ = insert_relations(SCHEMA, [addition])
    assert added == ["Tenant.qhsAudits"]
    assert text.endswith('  name String\n  qhsAudits QhsAudit[] @relation("QhsAuditTenant")\n}\n')


def test_existing_field_is_skipped() -> None:
    addition = RelationAddition(model="Tenant", relation="name String?")
    text, added, missing = insert_relations(SCHEMA, [addition])
    assert text == SCHEMA
    assert added == []
    assert missing == []


def test_comment_lines_are_not_fields() -> None:
    addition = RelationAddition(model="Tenant", relation="relations Relation[]")
    _, added, _ = insert_relations(SCHEMA, [addition])
    assert added == ["Tenant.relations"]


def test_missing_model_is_reported(caplog) -> None:
    addition = RelationAddition(model="Patronat", relation="tenant Tenant")
    with caplog.at_level(logging.WARNING):
        text, added, missing = insert_relations(SCHEMA, [addition, addition])
    assert text == SCHEMA
    assert added == []
    assert missing == ["Patronat"]
    assert any(record.getMessage() == "schema.relation.model_missing" for record in caplog.records)


def test_insertion_is_idempotent() -> None:
    additions = [
        RelationAddition(model="Tenant", relation="years AcademicYear[]"),
        RelationAddition(model="AcademicYear", relation="tenant Tenant @relation(fields: [tenantId], references: [id])"),
    ]
    once, added, _ = insert_relations(SCHEMA, additions)
    twice, added_again, _ = insert_relations(once, additions)
    assert len(added) == 2
    assert added_again == []
    assert twice == once


def test_model_name_must_match_exactly() -> None:
    addition = RelationAddition(model="Tenan", relation="x Int")
    _, added, missing = insert_relations(SCHEMA, [addition])
    assert added == []
    assert missing == ["Tenan"]
