"""Pydantic Schemas — validation at system boundaries.

Invariants:
    - Schemas validate at system boundaries (HTTP input, model output)
    - Domain types from core/ used for enum fields

Design Decisions:
    - Separate from core dataclasses: schemas are wire contracts, core types are domain (ADR: DDD boundary)
"""
